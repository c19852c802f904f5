"""Per-workspace settings persistence model.

Glossary:
- Setting key: identifier such as ``labor_rate_per_hour``.
- JSON value: the stored setting payload.
"""

from __future__ import annotations

from ..extensions import db
from .mixins import ScopedModelMixin


class WorkspaceSetting(ScopedModelMixin, db.Model):
    __tablename__ = "workspace_setting"

    id = db.Column(db.String(64), primary_key=True)
    key = db.Column(db.String(128), nullable=False, index=True)
    value = db.Column(db.JSON, nullable=True)
    description = db.Column(db.String(255), nullable=True)

    __table_args__ = (
        db.UniqueConstraint('organization_id', 'key', name='uq_workspace_setting_org_key'),
    )

    def __repr__(self) -> str:
        return f"<WorkspaceSetting {self.key}>"
