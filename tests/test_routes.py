"""JSON API: login, role gates, status codes and an end-to-end production run."""
from shroomtrack.models import Batch
from shroomtrack.services import InventoryService, RecipeService, SqlAlchemyRepository
from shroomtrack.services.repository import memory_repository

RECIPE = 'Original Sea Salt Chips'


def _seed_workspace(app, organization_id):
    with app.app_context():
        repository = SqlAlchemyRepository(organization_id)
        RecipeService(repository).seed_default_recipes()
        InventoryService(repository).seed_packaging()


def _receive_and_process(client, batch_id='BATCH-1'):
    response = client.post('/receiving/batches', json={
        'id': batch_id, 'sourceFarm': 'Hillside Farm', 'rawWeightKg': 100, 'spoiledWeightKg': 5,
    })
    assert response.status_code == 201
    assert client.post(f'/processing/batches/{batch_id}/start', json={'recipeName': RECIPE}).status_code == 200
    response = client.post(f'/processing/batches/{batch_id}/complete', json={'goodWeightKg': 95})
    assert response.status_code == 200
    return response.get_json()['data']


class TestAuth:

    def test_health(self, client):
        response = client.get('/health')

        assert response.status_code == 200
        assert response.get_json()['status'] == 'ok'

    def test_login_and_me(self, client, login):
        response = login('packer')

        assert response.status_code == 200
        assert response.get_json()['data']['role'] == 'PACKING_STAFF'
        me = client.get('/auth/me')
        assert me.get_json()['data']['username'] == 'packer'

    def test_bad_password(self, client, login):
        response = login('packer', 'wrong')

        assert response.status_code == 401
        assert response.get_json()['success'] is False

    def test_missing_fields(self, client):
        response = client.post('/auth/login', json={'username': 'packer'})

        assert response.status_code == 422
        assert 'password' in response.get_json()['errors']

    def test_logout(self, client, login):
        login('packer')

        assert client.post('/auth/logout').status_code == 200
        assert client.get('/auth/me').status_code == 401

    def test_csrf_token_endpoint(self, client):
        response = client.get('/auth/csrf')

        assert response.status_code == 200
        assert response.get_json()['csrfToken']


class TestRoleGates:

    def test_anonymous_callers_are_refused(self, client):
        response = client.get('/receiving/batches')

        assert response.status_code == 401

    def test_wrong_role_is_forbidden(self, client, login):
        login('processor')

        response = client.get('/finance/costs')

        assert response.status_code == 403
        assert response.get_json()['errors']['roles'] == ['FINANCE_CLERK']

    def test_admin_passes_every_gate(self, client, login):
        login('admin')

        assert client.get('/finance/costs').status_code == 200
        assert client.get('/receiving/batches').status_code == 200
        assert client.get('/inventory/').status_code == 200

    def test_rates_are_admin_only_to_change(self, client, login):
        login('packer')
        assert client.get('/settings/rates').status_code == 200
        assert client.put('/settings/rates', json={'laborRatePerHour': 20}).status_code == 403

    def test_demo_mode_uses_the_memory_store(self, app, client):
        app.config['DEMO_MODE'] = True

        response = client.post('/receiving/batches', json={
            'id': 'DEMO-1', 'sourceFarm': 'Demo Farm', 'rawWeightKg': 10,
        })

        assert response.status_code == 201
        assert memory_repository(app).get(Batch, 'DEMO-1') is not None


class TestProductionRun:

    def test_receive_process_pack_sell_report(self, app, client, login, organization_id):
        _seed_workspace(app, organization_id)
        login('admin')

        batch = _receive_and_process(client)
        assert batch['status'] == 'DRYING_COMPLETE'
        assert batch['remainingWeightKg'] == 95

        response = client.post('/packing/pack', json={
            'recipeName': RECIPE, 'weightKg': 50, 'units': 500, 'packagingType': 'POUCH',
        })
        assert response.status_code == 201
        [lot] = response.get_json()['data']
        assert lot['quantity'] == 500
        assert client.get('/receiving/batches/BATCH-1').get_json()['data']['remainingWeightKg'] == 45

        products = client.get('/packing/products').get_json()['data']
        assert products[0]['key'] == f'{RECIPE}|POUCH'
        assert products[0]['totalQty'] == 500

        response = client.post('/finance/sales', json={
            'customerId': None, 'productKey': f'{RECIPE}|POUCH', 'quantity': 10, 'unitPrice': 15,
            'paymentMethod': 'CASH',
        })
        assert response.status_code == 201
        sale = response.get_json()['data']
        assert sale['totalAmount'] == 150

        response = client.post(f"/finance/sales/{sale['id']}/status", json={'status': 'DELIVERED'})
        assert response.status_code == 200

        summary = client.get('/finance/summary').get_json()['data']
        assert summary['deliveredRevenue'] == 150
        assert summary['unitsProduced'] == 500
        assert summary['totals']['rawMaterialCost'] == 800
        assert summary['totals']['packagingCost'] == 135
        assert len(summary['weeklyRevenue']) == 7

        overview = client.get('/overview/').get_json()['data']
        assert overview['finishedUnitsInStock'] == 490
        assert overview['packableWeightKg'] == 45

    def test_error_codes_map_to_statuses(self, app, client, login, organization_id):
        _seed_workspace(app, organization_id)
        login('admin')
        _receive_and_process(client)

        too_much = client.post('/packing/pack', json={
            'recipeName': RECIPE, 'weightKg': 500, 'units': 10, 'packagingType': 'POUCH',
        })
        assert too_much.status_code == 409
        assert too_much.get_json()['errors'] == {'code': 'insufficient_stock', 'shortfall': 405.0}

        assert client.get('/receiving/batches/NOPE').status_code == 404

        invalid = client.post('/packing/pack', json={
            'recipeName': RECIPE, 'weightKg': 5, 'units': 10, 'packagingType': 'BOX',
        })
        assert invalid.status_code == 422

    def test_malformed_receipts_are_unprocessable(self, client, login):
        login('processor')

        bad_date = client.post('/receiving/batches', json={
            'id': 'B-DATE', 'sourceFarm': 'Farm', 'rawWeightKg': 10, 'dateReceived': 'yesterday',
        })
        assert bad_date.status_code == 422
        assert bad_date.get_json()['errors'] == {'code': 'validation_error'}

        not_a_number = client.post(
            '/receiving/batches',
            data='{"id": "B-NAN", "sourceFarm": "Farm", "rawWeightKg": NaN}',
            content_type='application/json',
        )
        assert not_a_number.status_code == 422

        assert client.get('/receiving/batches/B-DATE').status_code == 404
        assert client.get('/receiving/batches/B-NAN').status_code == 404

    def test_cost_correction_over_http(self, client, login):
        login('finance')

        created = client.post('/finance/costs', json={'referenceId': 'MANUAL-1', 'laborCost': 10})
        assert created.status_code == 201
        transaction_id = created.get_json()['data']['id']

        updated = client.patch(f'/finance/costs/{transaction_id}', json={'wastageCost': 2.5})
        assert updated.get_json()['data']['totalCost'] == 12.5

        locked = client.patch(f'/finance/costs/{transaction_id}', json={'totalCost': 1})
        assert locked.status_code == 422

    def test_rate_changes_apply_to_new_receipts(self, client, login):
        login('admin')

        response = client.put('/settings/rates', json={'rawMaterialRatePerKg': 10})
        assert response.status_code == 200
        assert client.get('/settings/rates').get_json()['data']['rawMaterialRatePerKg'] == 10

        client.post('/receiving/batches', json={'id': 'B-10', 'sourceFarm': 'Farm', 'rawWeightKg': 10})
        [cost] = client.get('/finance/costs').get_json()['data']
        assert cost['rawMaterialCost'] == 100
