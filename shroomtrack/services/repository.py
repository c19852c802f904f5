"""Persistence boundary injected into every service.

Both stores expose the same capability set: ``get``, ``list``, ``add``,
``save``, ``delete`` and ``replace_all``. ``list`` returns every record of
the workspace; callers sort in memory.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from flask import current_app, has_app_context
from flask_login import current_user
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from .errors import PersistenceFailure

logger = logging.getLogger(__name__)

MEMORY_STORE_KEY = 'shroomtrack_memory_store'


class InMemoryRepository:
    """Dictionary-backed store; nothing leaves the process."""

    def __init__(self, organization_id: Optional[int] = None):
        self.organization_id = organization_id
        self._tables: dict = {}

    def _table(self, model) -> dict:
        return self._tables.setdefault(model, {})

    def get(self, model, entity_id):
        if entity_id is None:
            return None
        return self._table(model).get(entity_id)

    def list(self, model) -> list:
        return list(self._table(model).values())

    def add(self, entity):
        if self.organization_id is not None and getattr(entity, 'organization_id', None) is None:
            entity.organization_id = self.organization_id
        self._table(type(entity))[entity.id] = entity
        return entity

    def save(self, entity):
        self._table(type(entity))[entity.id] = entity
        return entity

    def delete(self, entity) -> None:
        self._table(type(entity)).pop(entity.id, None)

    def replace_all(self, model, entities: Iterable) -> int:
        table = self._table(model)
        table.clear()
        count = 0
        for entity in entities:
            self.add(entity)
            count += 1
        return count


class SqlAlchemyRepository:
    """Workspace-scoped store over the Flask-SQLAlchemy session; each write commits."""

    def __init__(self, organization_id: int, session=None):
        if organization_id is None:
            raise ValueError('SqlAlchemyRepository requires an organization_id')
        self.organization_id = organization_id
        self.session = session or db.session

    def _commit(self, action: str) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error(f"Repository {action} failed for organization {self.organization_id}: {exc}")
            raise PersistenceFailure(f"Could not {action} record: storage unavailable") from exc

    def get(self, model, entity_id):
        if entity_id is None:
            return None
        try:
            entity = self.session.get(model, entity_id)
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceFailure('Could not load record: storage unavailable') from exc
        if entity is None or entity.organization_id != self.organization_id:
            return None
        return entity

    def list(self, model) -> list:
        try:
            return model.for_organization(self.organization_id).all()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceFailure('Could not load records: storage unavailable') from exc

    def add(self, entity):
        entity.organization_id = self.organization_id
        self.session.add(entity)
        self._commit('create')
        return entity

    def save(self, entity):
        if entity.organization_id != self.organization_id:
            raise PersistenceFailure('Record belongs to another workspace')
        self.session.add(entity)
        self._commit('update')
        return entity

    def delete(self, entity) -> None:
        if entity.organization_id != self.organization_id:
            raise PersistenceFailure('Record belongs to another workspace')
        self.session.delete(entity)
        self._commit('delete')

    def replace_all(self, model, entities: Iterable) -> int:
        try:
            for existing in model.for_organization(self.organization_id).all():
                self.session.delete(existing)
            self.session.flush()
            count = 0
            for entity in entities:
                entity.organization_id = self.organization_id
                self.session.add(entity)
                count += 1
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceFailure('Could not replace records: storage unavailable') from exc
        self._commit('replace')
        return count


def memory_repository(app=None) -> InMemoryRepository:
    """Per-app store used while nobody is logged in."""
    app = app or current_app
    store = app.extensions.get(MEMORY_STORE_KEY)
    if store is None:
        store = InMemoryRepository()
        app.extensions[MEMORY_STORE_KEY] = store
    return store


def get_repository():
    """Repository for the current request: the operator's workspace, or memory."""
    if not has_app_context():
        return InMemoryRepository()
    if current_user and current_user.is_authenticated:
        return SqlAlchemyRepository(current_user.organization_id)
    return memory_repository()
