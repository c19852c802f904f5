"""
ShroomTrack Test Suite

Tests are organized by domain:
- test_batch_allocator.py: FIFO packing and unit allocation
- test_cost_ledger.py: Cost ledger and aggregates
- test_sales_service.py: Invoicing against finished-good lots
- test_receiving_processing.py: Dock intake and processing floor
- test_inventory_procurement.py: Packaging stock and purchase orders
- test_repository.py: Workspace-scoped persistence
- test_sheet_sync.py: Spreadsheet mirror
- test_routes.py: JSON API, login and role gates
- test_app_factory.py: Health check, log redaction and session loading
- test_management.py: CLI commands and environment parsing
"""
