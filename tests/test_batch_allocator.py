"""FIFO packing: unit allocation, weight consumption and packaging side effects."""
from datetime import datetime

import pytest

from shroomtrack.models import Batch, BatchStatus, CostTransaction, FinishedGoodLot, InventoryItem
from shroomtrack.services import BatchAllocator, InventoryService, plan_allocation
from shroomtrack.services.batch_allocator import round_half_up


def day(n):
    return datetime(2026, 10, n, 9, 0, 0)


def _lots(repo):
    return repo.list(FinishedGoodLot)


def _item(repo, name):
    return next(item for item in repo.list(InventoryItem) if item.name == name)


class TestPackRecipe:

    def test_single_batch_scenario(self, repo, make_batch):
        batch = make_batch(repo, 'BATCH-1', 95.0, day(1))

        result = BatchAllocator(repo).pack_recipe('X', 50, 500, 'POUCH')

        assert result.success
        assert [lot.quantity for lot in result.data] == [500]
        assert result.data[0].original_quantity == 500
        assert result.data[0].batch_id == 'BATCH-1'
        assert result.data[0].product_key == 'X|POUCH'
        assert batch.remaining_weight_kg == pytest.approx(45.0)
        assert batch.status == BatchStatus.DRYING_COMPLETE.value

    def test_fifo_consumes_oldest_batch_first(self, repo, make_batch):
        newer = make_batch(repo, 'B2', 10.0, day(2))
        older = make_batch(repo, 'B1', 10.0, day(1))

        result = BatchAllocator(repo).pack_recipe('X', 12, 120, 'TIN')

        assert result.success
        assert older.remaining_weight_kg == pytest.approx(0.0)
        assert older.status == BatchStatus.PACKED.value
        assert older.packed_date is not None
        assert newer.remaining_weight_kg == pytest.approx(8.0)
        assert newer.status == BatchStatus.DRYING_COMPLETE.value
        assert [(lot.batch_id, lot.quantity) for lot in result.data] == [('B1', 100), ('B2', 20)]

    def test_units_always_sum_to_request(self, repo, make_batch):
        batches = [
            make_batch(repo, 'B1', 3.3, day(1)),
            make_batch(repo, 'B2', 4.4, day(2)),
            make_batch(repo, 'B3', 5.5, day(3)),
        ]
        before = sum(b.remaining_weight_kg for b in batches)

        result = BatchAllocator(repo).pack_recipe('X', 13, 37, 'POUCH')

        assert result.success
        assert sum(lot.quantity for lot in result.data) == 37
        consumed = before - sum(b.remaining_weight_kg for b in batches)
        assert consumed == pytest.approx(13.0, abs=0.1)
        assert all(b.remaining_weight_kg >= 0 for b in batches)

    def test_only_matching_recipe_and_packable_status_are_candidates(self, repo, make_batch):
        make_batch(repo, 'OTHER-RECIPE', 50.0, day(1), recipe_name='Y')
        make_batch(repo, 'STILL-PROCESSING', 50.0, day(1), status=BatchStatus.PROCESSING)
        make_batch(repo, 'READY', 20.0, day(3))

        candidates = BatchAllocator(repo).candidates('X')

        assert [b.id for b in candidates] == ['READY']

    def test_insufficient_weight_leaves_batches_untouched(self, repo, make_batch):
        batch = make_batch(repo, 'B1', 10.0, day(1))

        result = BatchAllocator(repo).pack_recipe('X', 20, 100, 'POUCH')

        assert not result.success
        assert result.error == 'insufficient_stock'
        assert result.shortfall == pytest.approx(10.0)
        assert 'Insufficient weight. Available: 10.00 kg' in result.message
        assert batch.remaining_weight_kg == 10.0
        assert _lots(repo) == []
        assert repo.list(CostTransaction) == []

    def test_request_within_tolerance_is_accepted(self, repo, make_batch):
        batch = make_batch(repo, 'B1', 10.0, day(1))

        result = BatchAllocator(repo).pack_recipe('X', 10.05, 100, 'POUCH')

        assert result.success
        assert batch.remaining_weight_kg == 0.0
        assert batch.status == BatchStatus.PACKED.value

    def test_unknown_recipe_is_not_found(self, repo, make_batch):
        make_batch(repo, 'B1', 10.0, day(1))

        result = BatchAllocator(repo).pack_recipe('Nope', 5, 10, 'POUCH')

        assert not result.success
        assert result.error == 'not_found'

    @pytest.mark.parametrize('weight, units, packaging', [
        (0, 10, 'POUCH'),
        (5, 0, 'POUCH'),
        (5, 2.5, 'POUCH'),
        (5, 10, 'BOX'),
        ('nan', 10, 'POUCH'),
        (float('inf'), 10, 'POUCH'),
        (5, float('nan'), 'POUCH'),
        (5, 'inf', 'POUCH'),
    ])
    def test_malformed_requests_are_rejected(self, repo, make_batch, weight, units, packaging):
        make_batch(repo, 'B1', 10.0, day(1))

        result = BatchAllocator(repo).pack_recipe('X', weight, units, packaging)

        assert result.error == 'validation_error'

    def test_non_finite_weight_leaves_batch_untouched(self, repo, make_batch):
        batch = make_batch(repo, 'B1', 95.0, day(1))

        result = BatchAllocator(repo).pack_recipe('X', 'nan', 10, 'POUCH')

        assert result.error == 'validation_error'
        assert batch.remaining_weight_kg == 95.0
        assert batch.status == BatchStatus.DRYING_COMPLETE.value
        assert _lots(repo) == []
        assert repo.list(CostTransaction) == []

    def test_zero_unit_share_consumes_weight_without_a_lot(self, repo, make_batch):
        sliver = make_batch(repo, 'B1', 0.15, day(1))
        make_batch(repo, 'B2', 10.0, day(2))

        result = BatchAllocator(repo).pack_recipe('X', 10.15, 2, 'POUCH')

        assert result.success
        assert [(lot.batch_id, lot.quantity) for lot in result.data] == [('B2', 2)]
        assert sliver.remaining_weight_kg == 0.0
        assert sliver.status == BatchStatus.PACKED.value
        assert len(repo.list(CostTransaction)) == 1


class TestPackagingSideEffects:

    def test_packing_consumes_containers_and_labels_and_records_cost(self, repo, make_batch):
        InventoryService(repo).seed_packaging()
        make_batch(repo, 'B1', 95.0, day(1))

        result = BatchAllocator(repo).pack_recipe('X', 50, 500, 'POUCH')

        assert result.success
        assert _item(repo, 'Standup Pouch (100g)').quantity == 0
        assert _item(repo, 'Brand Sticker').quantity == 500
        assert _item(repo, 'Tin Can (200g)').quantity == 200
        [transaction] = repo.list(CostTransaction)
        assert transaction.reference_id == 'B1'
        assert transaction.packaging_cost == pytest.approx(135.0)
        assert transaction.total_cost == pytest.approx(135.0)

    def test_packaging_may_go_negative_by_default(self, repo, make_batch):
        inventory = InventoryService(repo)
        inventory.seed_packaging()
        make_batch(repo, 'B1', 95.0, day(1))

        result = BatchAllocator(repo).pack_recipe('X', 60, 600, 'POUCH')

        assert result.success
        assert _item(repo, 'Standup Pouch (100g)').quantity == -100
        negative = inventory.negative_stock_items()
        assert [item.name for item in negative.data] == ['Standup Pouch (100g)']

    def test_enforced_packaging_check_blocks_before_any_change(self, repo, make_batch):
        InventoryService(repo).seed_packaging()
        batch = make_batch(repo, 'B1', 95.0, day(1))

        result = BatchAllocator(repo).pack_recipe('X', 60, 600, 'POUCH', enforce_packaging_stock=True)

        assert not result.success
        assert result.error == 'insufficient_stock'
        assert result.shortfall == pytest.approx(100.0)
        assert batch.remaining_weight_kg == 95.0
        assert _item(repo, 'Standup Pouch (100g)').quantity == 500

    def test_check_packaging_stock_reports_shortfalls(self, repo):
        InventoryService(repo).seed_packaging()

        result = BatchAllocator(repo).check_packaging_stock('TIN', 250)

        assert result.success
        assert result.data['container']['shortfall'] == 50
        assert result.data['label']['shortfall'] == 0
        assert result.data['sufficient'] is False

    @pytest.mark.parametrize('units', ['lots', 0, -1, 2.7, float('nan')])
    def test_check_packaging_stock_rejects_bad_unit_counts(self, repo, units):
        InventoryService(repo).seed_packaging()

        result = BatchAllocator(repo).check_packaging_stock('TIN', units)

        assert result.error == 'validation_error'

    def test_check_packaging_stock_accepts_integral_strings(self, repo):
        InventoryService(repo).seed_packaging()

        result = BatchAllocator(repo).check_packaging_stock('TIN', '250')

        assert result.success
        assert result.data['container']['shortfall'] == 50

    def test_missing_packaging_items_cost_nothing(self, repo, make_batch):
        make_batch(repo, 'B1', 20.0, day(1))

        result = BatchAllocator(repo).pack_recipe('X', 10, 40, 'TIN')

        assert result.success
        [transaction] = repo.list(CostTransaction)
        assert transaction.packaging_cost == 0.0


class TestPartialPackAndPricing:

    def test_pack_batch_partial_from_named_batch(self, repo, make_batch):
        make_batch(repo, 'B1', 10.0, day(1))
        target = make_batch(repo, 'B2', 10.0, day(2))

        result = BatchAllocator(repo).pack_batch_partial('B2', 4, 40, 'POUCH')

        assert result.success
        assert result.data.batch_id == 'B2'
        assert result.data.recipe_name == 'X'
        assert target.remaining_weight_kg == pytest.approx(6.0)

    def test_pack_batch_partial_requires_packable_status(self, repo, make_batch):
        make_batch(repo, 'B1', 10.0, day(1), status=BatchStatus.RECEIVED)

        result = BatchAllocator(repo).pack_batch_partial('B1', 4, 40, 'POUCH')

        assert result.error == 'validation_error'

    def test_pack_batch_partial_unknown_batch(self, repo):
        result = BatchAllocator(repo).pack_batch_partial('NOPE', 4, 40, 'POUCH')

        assert result.error == 'not_found'

    @pytest.mark.parametrize('weight', [float('nan'), 'inf', '-inf'])
    def test_pack_batch_partial_rejects_non_finite_weight(self, repo, make_batch, weight):
        batch = make_batch(repo, 'B1', 10.0, day(1))

        result = BatchAllocator(repo).pack_batch_partial('B1', weight, 40, 'POUCH')

        assert result.error == 'validation_error'
        assert batch.remaining_weight_kg == 10.0

    def test_draining_an_already_packed_batch_keeps_its_packed_date(self, repo, make_batch):
        batch = make_batch(repo, 'B1', 2.0, day(1), status=BatchStatus.PACKED)
        batch.packed_date = day(3)

        result = BatchAllocator(repo).pack_batch_partial('B1', 2.0, 20, 'POUCH')

        assert result.success
        assert batch.status == BatchStatus.PACKED.value
        assert batch.packed_date == day(3)

    def test_new_lots_take_the_current_product_price(self, repo, make_batch):
        make_batch(repo, 'B1', 50.0, day(1))
        allocator = BatchAllocator(repo)

        first = allocator.pack_recipe('X', 10, 100, 'POUCH')
        assert first.data[0].selling_price == 15.0

        priced = allocator.set_product_price('X', 'POUCH', 18.5)
        assert priced.success
        assert first.data[0].selling_price == 18.5

        second = allocator.pack_recipe('X', 10, 100, 'POUCH')
        assert second.data[0].selling_price == 18.5

    def test_set_price_without_lots_is_not_found(self, repo):
        result = BatchAllocator(repo).set_product_price('X', 'TIN', 20)

        assert result.error == 'not_found'

    def test_available_products_groups_by_product_key(self, repo, make_lot):
        make_lot(repo, 'FG-1', 5, day(1))
        make_lot(repo, 'FG-2', 7, day(2), price=16.0)
        make_lot(repo, 'FG-3', 0, day(3))
        make_lot(repo, 'FG-4', 3, day(2), packaging_type='TIN')

        result = BatchAllocator(repo).available_products()

        assert result.data == [
            {'key': 'X|POUCH', 'recipeName': 'X', 'packagingType': 'POUCH', 'totalQty': 12, 'price': 16.0},
            {'key': 'X|TIN', 'recipeName': 'X', 'packagingType': 'TIN', 'totalQty': 3, 'price': 15.0},
        ]

    def test_packing_history_is_newest_first(self, repo, make_lot):
        make_lot(repo, 'FG-1', 5, day(1))
        make_lot(repo, 'FG-2', 5, day(3))
        make_lot(repo, 'FG-3', 5, day(2))

        result = BatchAllocator(repo).packing_history(limit=2)

        assert [lot.id for lot in result.data] == ['FG-2', 'FG-3']


class TestPlanAllocation:

    def _batch(self, batch_id, kg):
        return Batch(id=batch_id, net_weight_kg=kg, remaining_weight_kg=kg)

    def test_plan_does_not_mutate_batches(self):
        batches = [self._batch('B1', 10.0), self._batch('B2', 10.0)]

        steps = plan_allocation(batches, 12.0, 120)

        assert [(s.batch.id, s.weight_kg, s.units) for s in steps] == [('B1', 10.0, 100), ('B2', 2.0, 20)]
        assert [b.remaining_weight_kg for b in batches] == [10.0, 10.0]

    def test_last_step_absorbs_rounding_remainder(self):
        batches = [self._batch('B1', 1.0), self._batch('B2', 1.0), self._batch('B3', 1.0)]

        steps = plan_allocation(batches, 3.0, 10)

        assert [s.units for s in steps] == [3, 3, 4]

    def test_unneeded_batches_are_left_out(self):
        batches = [self._batch('B1', 10.0), self._batch('B2', 10.0)]

        steps = plan_allocation(batches, 5.0, 50)

        assert [s.batch.id for s in steps] == ['B1']

    @pytest.mark.parametrize('value, expected', [(0.5, 1), (1.49, 1), (2.5, 3), (0.0296, 0)])
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected
