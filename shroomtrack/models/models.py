from enum import Enum

from flask_login import UserMixin
from werkzeug.security import check_password_hash, generate_password_hash

from ..extensions import db
from ..utils.timezone_utils import TimezoneUtils


class UserRole(str, Enum):
    PROCESSING_WORKER = 'PROCESSING_WORKER'
    PACKING_STAFF = 'PACKING_STAFF'
    FINANCE_CLERK = 'FINANCE_CLERK'
    ADMIN = 'ADMIN'


class Organization(db.Model):
    """An operator workspace; every business record is scoped to one."""
    __tablename__ = 'organization'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    contact_email = db.Column(db.String(256))
    created_at = db.Column(db.DateTime, default=TimezoneUtils.utc_now)
    is_active = db.Column(db.Boolean, default=True)

    users = db.relationship('User', backref='organization', lazy='dynamic')

    def __repr__(self):
        return f'<Organization {self.id}: {self.name}>'


class User(UserMixin, db.Model):
    __tablename__ = 'user'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False, default='')
    email = db.Column(db.String(120), nullable=True)
    organization_id = db.Column(db.Integer, db.ForeignKey('organization.id'), nullable=False)
    role = db.Column(db.String(32), nullable=False, default=UserRole.PROCESSING_WORKER.value)
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=TimezoneUtils.utc_now)
    last_login = db.Column(db.DateTime, nullable=True)

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    def has_role(self, *roles) -> bool:
        """ADMIN passes every role gate."""
        if self.is_admin:
            return True
        wanted = {r.value if isinstance(r, UserRole) else r for r in roles}
        return self.role in wanted

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'role': self.role,
            'organizationId': self.organization_id,
        }

    def __repr__(self):
        return f'<User {self.username} ({self.role})>'
