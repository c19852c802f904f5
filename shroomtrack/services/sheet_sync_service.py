"""Full-database mirror to a spreadsheet-backed HTTP endpoint.

The mirror is never authoritative: push sends a snapshot, pull overwrites the
collections the endpoint returns. Nothing is retried.
"""
from __future__ import annotations

import logging

import requests

from ..models import Batch, CostTransaction, FinishedGoodLot, InventoryItem
from .errors import PersistenceFailure, ValidationError
from .results import ServiceResult

logger = logging.getLogger(__name__)

PUSH_ACTION = 'SYNC_FULL_DB'
PULL_ACTION = 'GET_FULL_DB'
DEFAULT_TIMEOUT_SECONDS = 15.0

# payload key -> model, in the order collections are written on pull
SYNCED_COLLECTIONS = (
    ('batches', Batch),
    ('inventory', InventoryItem),
    ('finishedGoods', FinishedGoodLot),
    ('dailyCosts', CostTransaction),
)


def _hydrate(model, payload: dict):
    entity = model.from_dict(payload)
    if not entity.id:
        raise ValueError(f"{model.__name__} row without id")
    if model is Batch and entity.remaining_weight_kg is None:
        entity.remaining_weight_kg = entity.net_weight_kg
    if model is FinishedGoodLot and entity.original_quantity is None:
        entity.original_quantity = entity.quantity
    return entity


class SheetSyncService:

    def __init__(self, script_url=None, timeout=DEFAULT_TIMEOUT_SECONDS, session=None):
        self.script_url = (script_url or '').strip() or None
        self.timeout = timeout
        self.http = session or requests

    def build_snapshot(self, repository) -> dict:
        return {
            key: [entity.to_dict() for entity in repository.list(model)]
            for key, model in SYNCED_COLLECTIONS
        }

    def push_full_database(self, repository) -> ServiceResult:
        if not self.script_url:
            return ServiceResult(success=False, message='No API URL configured', error='validation_error')

        payload = self.build_snapshot(repository)
        try:
            response = self.http.post(
                self.script_url,
                json={'action': PUSH_ACTION, 'payload': payload},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning(f"SYNC: push to sheet failed: {e}")
            return ServiceResult(success=False, message='Failed to push data.', error='persistence_failure')

        counts = {key: len(rows) for key, rows in payload.items()}
        logger.info(f"SYNC: pushed snapshot {counts}")
        return ServiceResult.ok(counts, message='Full database push sent.')

    def pull_full_database(self, repository) -> ServiceResult:
        if not self.script_url:
            return ServiceResult(success=False, message='No API URL configured', error='validation_error')

        try:
            response = self.http.get(self.script_url, params={'action': PULL_ACTION}, timeout=self.timeout)
            response.raise_for_status()
            body = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"SYNC: pull from sheet failed: {e}")
            return ServiceResult(success=False, message='Failed to pull data.', error='persistence_failure')

        if not isinstance(body, dict) or not body.get('success') or not isinstance(body.get('data'), dict):
            logger.warning("SYNC: sheet answered without data")
            return ServiceResult(success=False, message='Unknown error', error='persistence_failure')

        data = body['data']
        try:
            hydrated = [
                (key, model, [_hydrate(model, row) for row in data[key]])
                for key, model in SYNCED_COLLECTIONS
                if data.get(key)
            ]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning(f"SYNC: pulled data was malformed: {e}")
            return ServiceResult.fail(ValidationError('Pulled data was malformed.'))

        counts = {}
        try:
            for key, model, entities in hydrated:
                counts[key] = repository.replace_all(model, entities)
        except PersistenceFailure as e:
            return ServiceResult.fail(e)
        logger.info(f"SYNC: pulled snapshot {counts}")
        return ServiceResult.ok(counts, message='Data synced from sheet.')
