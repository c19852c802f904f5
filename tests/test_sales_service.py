from datetime import datetime

from shroomtrack.models import SalesRecord
from shroomtrack.services import SalesService


def day(n):
    return datetime(2026, 10, n, 9, 0, 0)


class TestCreateSale:

    def test_oldest_packed_lot_drains_first(self, repo, make_lot):
        newer = make_lot(repo, 'FG-B', 5, day(2))
        older = make_lot(repo, 'FG-A', 5, day(1))

        result = SalesService(repo).create_sale(None, 'X|POUCH', 7, 15.0, 'CASH')

        assert result.success
        assert older.quantity == 0
        assert newer.quantity == 3
        sale = result.data
        assert [(line['finishedGoodId'], line['quantity']) for line in sale.items] == [('FG-A', 5), ('FG-B', 2)]
        assert sale.total_amount == 105.0
        assert sale.status == 'INVOICED'
        assert sale.invoice_id.startswith('INV-')
        assert sale.units_sold == 7

    def test_oversell_fails_without_partial_deduction(self, repo, make_lot):
        first = make_lot(repo, 'FG-A', 5, day(1))
        second = make_lot(repo, 'FG-B', 5, day(2))

        result = SalesService(repo).create_sale(None, 'X|POUCH', 11, 15.0, 'CASH')

        assert not result.success
        assert result.error == 'insufficient_stock'
        assert result.shortfall == 1
        assert (first.quantity, second.quantity) == (5, 5)
        assert repo.list(SalesRecord) == []

    def test_other_products_are_not_drained(self, repo, make_lot):
        tin = make_lot(repo, 'FG-T', 5, day(1), packaging_type='TIN')
        make_lot(repo, 'FG-P', 5, day(2))

        result = SalesService(repo).create_sale(None, 'X|POUCH', 5, 15.0, 'COD')

        assert result.success
        assert tin.quantity == 5

    def test_recipe_names_may_contain_the_separator(self, repo, make_lot):
        lot = make_lot(repo, 'FG-1', 4, day(1), recipe_name='Salt | Pepper')

        result = SalesService(repo).create_sale(None, 'Salt | Pepper|TIN', 1, 10.0, 'CASH')

        assert not result.success
        lot.packaging_type = 'TIN'
        assert SalesService(repo).create_sale(None, 'Salt | Pepper|TIN', 1, 10.0, 'CASH').success

    def test_customer_details_are_copied_onto_the_invoice(self, repo, make_lot):
        sales = SalesService(repo)
        customer = sales.add_customer('Green Grocer', contact='555-0100', email='buy@grocer.test').data
        make_lot(repo, 'FG-1', 10, day(1))

        sale = sales.create_sale(customer.id, 'X|POUCH', 2, 12.5, 'CREDIT_CARD').data

        assert sale.customer_name == 'Green Grocer'
        assert sale.customer_email == 'buy@grocer.test'
        assert sale.customer_phone == '555-0100'
        assert sale.total_amount == 25.0

    def test_unknown_customer_is_recorded_as_unknown(self, repo, make_lot):
        make_lot(repo, 'FG-1', 10, day(1))

        sale = SalesService(repo).create_sale('CUST-MISSING', 'X|POUCH', 1, 15.0, 'CASH').data

        assert sale.customer_name == 'Unknown'

    def test_invalid_requests_are_rejected(self, repo, make_lot):
        make_lot(repo, 'FG-1', 10, day(1))
        sales = SalesService(repo)

        assert sales.create_sale(None, 'no-separator', 1, 15.0, 'CASH').error == 'validation_error'
        assert sales.create_sale(None, 'X|POUCH', 0, 15.0, 'CASH').error == 'validation_error'
        assert sales.create_sale(None, 'X|POUCH', 1, -1, 'CASH').error == 'validation_error'
        assert sales.create_sale(None, 'X|POUCH', 1, 15.0, 'BARTER').error == 'validation_error'

    def test_non_finite_price_or_quantity_is_rejected(self, repo, make_lot):
        lot = make_lot(repo, 'FG-1', 10, day(1))
        sales = SalesService(repo)

        assert sales.create_sale(None, 'X|POUCH', 1, 'nan', 'CASH').error == 'validation_error'
        assert sales.create_sale(None, 'X|POUCH', 1, float('inf'), 'CASH').error == 'validation_error'
        assert sales.create_sale(None, 'X|POUCH', float('inf'), 15.0, 'CASH').error == 'validation_error'
        assert sales.create_sale(None, 'X|POUCH', 1.5, 15.0, 'CASH').error == 'validation_error'
        assert lot.quantity == 10
        assert repo.list(SalesRecord) == []


class TestSaleStatus:

    def test_invoiced_sale_can_be_delivered_once(self, repo, make_lot):
        make_lot(repo, 'FG-1', 10, day(1))
        sales = SalesService(repo)
        sale = sales.create_sale(None, 'X|POUCH', 1, 15.0, 'CASH').data

        delivered = sales.update_sale_status(sale.id, 'DELIVERED')
        again = sales.update_sale_status(sale.id, 'DELIVERED')

        assert delivered.success
        assert sale.status == 'DELIVERED'
        assert sale.date_delivered is not None
        assert again.error == 'validation_error'

    def test_unsupported_transition_is_rejected(self, repo, make_lot):
        make_lot(repo, 'FG-1', 10, day(1))
        sales = SalesService(repo)
        sale = sales.create_sale(None, 'X|POUCH', 1, 15.0, 'CASH').data

        assert sales.update_sale_status(sale.id, 'INVOICED').error == 'validation_error'
        assert sale.status == 'INVOICED'

    def test_unknown_sale(self, repo):
        assert SalesService(repo).update_sale_status('SALE-NOPE', 'DELIVERED').error == 'not_found'

    def test_customers_require_a_name(self, repo):
        assert SalesService(repo).add_customer('  ').error == 'validation_error'
