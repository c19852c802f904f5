from . import finance_bp
from ...models import UserRole
from ...services import CostLedger, ProcurementService, ReportingService, SalesService, get_repository
from ...utils.api_responses import APIResponse, serialize_many, serialize_one
from ...utils.permissions import role_required

FINANCE = UserRole.FINANCE_CLERK


# --- Cost ledger ---

@finance_bp.route('/costs', methods=['GET'])
@role_required(FINANCE)
def list_costs():
    return APIResponse.from_result(CostLedger(get_repository()).list_transactions(), serializer=serialize_many)


@finance_bp.route('/costs', methods=['POST'])
@role_required(FINANCE)
def record_cost():
    data = APIResponse.handle_request_content()
    result = CostLedger(get_repository()).record_transaction(
        data.get('referenceId'),
        date=data.get('date'),
        raw_cost=data.get('rawMaterialCost', 0),
        packaging_cost=data.get('packagingCost', 0),
        labor_cost=data.get('laborCost', 0),
        wastage_cost=data.get('wastageCost', 0),
        weight_processed=data.get('weightProcessed', 0),
        processing_hours=data.get('processingHours', 0),
    )
    return APIResponse.from_result(result, serializer=serialize_one, status_code=201)


@finance_bp.route('/costs/<transaction_id>', methods=['PATCH'])
@role_required(FINANCE)
def update_cost(transaction_id):
    data = APIResponse.handle_request_content()
    result = CostLedger(get_repository()).update_transaction(transaction_id, data)
    return APIResponse.from_result(result, serializer=serialize_one)


@finance_bp.route('/summary', methods=['GET'])
@role_required(FINANCE)
def summary():
    return APIResponse.from_result(ReportingService(get_repository()).finance_summary())


@finance_bp.route('/weekly-revenue', methods=['GET'])
@role_required(FINANCE)
def weekly_revenue():
    return APIResponse.from_result(ReportingService(get_repository()).weekly_revenue())


# --- Sales ---

@finance_bp.route('/sales', methods=['GET'])
@role_required(FINANCE)
def list_sales():
    return APIResponse.from_result(SalesService(get_repository()).list_sales(), serializer=serialize_many)


@finance_bp.route('/sales', methods=['POST'])
@role_required(FINANCE)
def create_sale():
    data = APIResponse.handle_request_content()
    result = SalesService(get_repository()).create_sale(
        data.get('customerId'),
        data.get('productKey'),
        data.get('quantity'),
        data.get('unitPrice'),
        data.get('paymentMethod'),
    )
    return APIResponse.from_result(result, serializer=serialize_one, status_code=201)


@finance_bp.route('/sales/<sale_id>/status', methods=['POST'])
@role_required(FINANCE)
def update_sale_status(sale_id):
    data = APIResponse.handle_request_content()
    result = SalesService(get_repository()).update_sale_status(sale_id, data.get('status'))
    return APIResponse.from_result(result, serializer=serialize_one)


@finance_bp.route('/customers', methods=['GET'])
@role_required(FINANCE)
def list_customers():
    return APIResponse.from_result(SalesService(get_repository()).list_customers(), serializer=serialize_many)


@finance_bp.route('/customers', methods=['POST'])
@role_required(FINANCE)
def add_customer():
    data = APIResponse.handle_request_content()
    result = SalesService(get_repository()).add_customer(
        data.get('name'),
        contact=data.get('contact'),
        email=data.get('email'),
        address=data.get('address'),
    )
    return APIResponse.from_result(result, serializer=serialize_one, status_code=201)


# --- Procurement ---

@finance_bp.route('/suppliers', methods=['GET'])
@role_required(FINANCE)
def list_suppliers():
    return APIResponse.from_result(ProcurementService(get_repository()).list_suppliers(), serializer=serialize_many)


@finance_bp.route('/suppliers', methods=['POST'])
@role_required(FINANCE)
def add_supplier():
    data = APIResponse.handle_request_content()
    result = ProcurementService(get_repository()).add_supplier(
        data.get('name'),
        contact=data.get('contact'),
        address=data.get('address'),
        items_supplied=data.get('itemsSupplied'),
    )
    return APIResponse.from_result(result, serializer=serialize_one, status_code=201)


@finance_bp.route('/suppliers/<supplier_id>', methods=['DELETE'])
@role_required(FINANCE)
def delete_supplier(supplier_id):
    return APIResponse.from_result(ProcurementService(get_repository()).delete_supplier(supplier_id))


@finance_bp.route('/purchase-orders', methods=['GET'])
@role_required(FINANCE)
def list_purchase_orders():
    result = ProcurementService(get_repository()).list_purchase_orders()
    return APIResponse.from_result(result, serializer=serialize_many)


@finance_bp.route('/purchase-orders', methods=['POST'])
@role_required(FINANCE)
def create_purchase_order():
    data = APIResponse.handle_request_content()
    result = ProcurementService(get_repository()).create_purchase_order(
        data.get('itemId'),
        data.get('quantity'),
        supplier=data.get('supplier'),
        notes=data.get('notes'),
    )
    return APIResponse.from_result(result, serializer=serialize_one, status_code=201)


@finance_bp.route('/purchase-orders/<po_id>/receive', methods=['POST'])
@role_required(FINANCE, UserRole.PACKING_STAFF)
def receive_purchase_order(po_id):
    data = APIResponse.handle_request_content()
    result = ProcurementService(get_repository()).receive_purchase_order(
        po_id,
        qc_passed=data.get('qcPassed', True),
        notes=data.get('notes'),
    )
    return APIResponse.from_result(result, serializer=serialize_one)


@finance_bp.route('/purchase-orders/<po_id>/complaint', methods=['POST'])
@role_required(FINANCE)
def file_complaint(po_id):
    data = APIResponse.handle_request_content()
    result = ProcurementService(get_repository()).file_complaint(po_id, data.get('reason'))
    return APIResponse.from_result(result, serializer=serialize_one)


@finance_bp.route('/purchase-orders/<po_id>/resolve', methods=['POST'])
@role_required(FINANCE)
def resolve_complaint(po_id):
    data = APIResponse.handle_request_content()
    result = ProcurementService(get_repository()).resolve_complaint(po_id, data.get('resolution'))
    return APIResponse.from_result(result, serializer=serialize_one)
