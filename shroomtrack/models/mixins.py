from datetime import datetime

from ..extensions import db
from ..utils.timezone_utils import TimezoneUtils


class ScopedModelMixin:
    organization_id = db.Column(db.Integer, db.ForeignKey('organization.id'), nullable=False, index=True)

    @classmethod
    def for_organization(cls, org_id):
        return cls.query.filter_by(organization_id=org_id)


class SerializableMixin:
    """
    camelCase document mapping shared by the JSON API and the spreadsheet mirror.

    Subclasses declare ``SERIALIZED_FIELDS`` as ``(attribute, key)`` pairs;
    datetime attributes are written as ISO strings and parsed back on load.
    """

    SERIALIZED_FIELDS: tuple = ()

    def to_dict(self) -> dict:
        payload = {}
        for attribute, key in self.SERIALIZED_FIELDS:
            value = getattr(self, attribute)
            if isinstance(value, datetime):
                value = TimezoneUtils.isoformat(value)
            payload[key] = value
        return payload

    @classmethod
    def from_dict(cls, payload: dict):
        values = {}
        for attribute, key in cls.SERIALIZED_FIELDS:
            if key not in payload:
                continue
            value = payload[key]
            column = cls.__table__.columns.get(attribute)
            if column is not None and isinstance(column.type, db.DateTime):
                value = TimezoneUtils.parse(value)
            values[attribute] = value
        return cls(**values)
