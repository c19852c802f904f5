from datetime import datetime
from unittest.mock import Mock

import pytest
import requests

from shroomtrack.models import Batch, FinishedGoodLot, InventoryItem
from shroomtrack.services import ReceivingService, SheetSyncService

SCRIPT_URL = 'https://script.example/exec'


def _response(body=None, status_error=None):
    response = Mock()
    response.json.return_value = body
    response.raise_for_status.side_effect = status_error
    return response


@pytest.fixture
def http():
    return Mock()


@pytest.fixture
def stocked(repo):
    ReceivingService(repo).receive_batch('Hillside Farm', 100, 5, batch_id='BATCH-1')
    return repo


class TestPush:

    def test_push_sends_full_snapshot(self, stocked, http):
        http.post.return_value = _response()

        result = SheetSyncService(SCRIPT_URL, timeout=5, session=http).push_full_database(stocked)

        assert result.success
        assert result.message == 'Full database push sent.'
        assert result.data == {'batches': 1, 'inventory': 0, 'finishedGoods': 0, 'dailyCosts': 1}
        args, kwargs = http.post.call_args
        assert args == (SCRIPT_URL,)
        assert kwargs['timeout'] == 5
        assert kwargs['json']['action'] == 'SYNC_FULL_DB'
        [batch] = kwargs['json']['payload']['batches']
        assert batch['id'] == 'BATCH-1'
        assert batch['netWeightKg'] == 95
        assert batch['dateReceived'].startswith('20')

    def test_push_failure_is_reported(self, stocked, http):
        http.post.side_effect = requests.ConnectionError('offline')

        result = SheetSyncService(SCRIPT_URL, session=http).push_full_database(stocked)

        assert not result.success
        assert result.message == 'Failed to push data.'

    def test_http_error_status_is_a_failure(self, stocked, http):
        http.post.return_value = _response(status_error=requests.HTTPError('500'))

        result = SheetSyncService(SCRIPT_URL, session=http).push_full_database(stocked)

        assert not result.success

    def test_missing_url(self, stocked, http):
        result = SheetSyncService(None, session=http).push_full_database(stocked)

        assert not result.success
        assert result.message == 'No API URL configured'
        http.post.assert_not_called()


class TestPull:

    def _batch_row(self, batch_id):
        batch = Batch(
            id=batch_id, source_farm='Sheet Farm', date_received=datetime(2026, 10, 1, 7, 0),
            raw_weight_kg=20.0, spoiled_weight_kg=0.0, net_weight_kg=20.0, remaining_weight_kg=None,
            status='DRYING_COMPLETE', selected_recipe_name='X',
        )
        row = batch.to_dict()
        del row['remainingWeightKg']
        return row

    def test_pull_replaces_returned_collections(self, stocked, http):
        http.get.return_value = _response({
            'success': True,
            'data': {
                'batches': [self._batch_row('BATCH-S1')],
                'finishedGoods': [{
                    'id': 'FG-S1', 'batchId': 'BATCH-S1', 'recipeName': 'X', 'packagingType': 'TIN',
                    'quantity': 4, 'datePacked': '2026-10-02T08:00:00Z',
                }],
            },
        })

        result = SheetSyncService(SCRIPT_URL, session=http).pull_full_database(stocked)

        assert result.success
        assert result.message == 'Data synced from sheet.'
        assert result.data == {'batches': 1, 'finishedGoods': 1}
        http.get.assert_called_once_with(SCRIPT_URL, params={'action': 'GET_FULL_DB'}, timeout=15.0)

        [batch] = stocked.list(Batch)
        assert batch.id == 'BATCH-S1'
        assert batch.remaining_weight_kg == 20.0
        assert batch.date_received == datetime(2026, 10, 1, 7, 0)
        [lot] = stocked.list(FinishedGoodLot)
        assert lot.original_quantity == 4
        assert lot.date_packed == datetime(2026, 10, 2, 8, 0)
        assert len(stocked.list(InventoryItem)) == 0

    def test_unsuccessful_body_is_unknown_error(self, stocked, http):
        http.get.return_value = _response({'success': False})

        result = SheetSyncService(SCRIPT_URL, session=http).pull_full_database(stocked)

        assert not result.success
        assert result.message == 'Unknown error'
        assert [b.id for b in stocked.list(Batch)] == ['BATCH-1']

    def test_malformed_rows_leave_store_untouched(self, stocked, http):
        http.get.return_value = _response({
            'success': True,
            'data': {'batches': [self._batch_row('BATCH-S1'), {'sourceFarm': 'no id'}]},
        })

        result = SheetSyncService(SCRIPT_URL, session=http).pull_full_database(stocked)

        assert not result.success
        assert result.error == 'validation_error'
        assert result.message == 'Pulled data was malformed.'
        assert [b.id for b in stocked.list(Batch)] == ['BATCH-1']

    def test_network_failure(self, stocked, http):
        http.get.side_effect = requests.Timeout('slow')

        result = SheetSyncService(SCRIPT_URL, session=http).pull_full_database(stocked)

        assert not result.success
        assert result.message == 'Failed to pull data.'
