"""
Pytest configuration and shared fixtures for ShroomTrack tests.
"""
import os
import tempfile

import pytest

from shroomtrack import create_app
from shroomtrack.extensions import db
from shroomtrack.models import Batch, BatchStatus, FinishedGoodLot, Organization, User, UserRole
from shroomtrack.services import InMemoryRepository

TEST_PASSWORD = 'password123'
TEST_USERS = {
    'admin': UserRole.ADMIN,
    'processor': UserRole.PROCESSING_WORKER,
    'packer': UserRole.PACKING_STAFF,
    'finance': UserRole.FINANCE_CLERK,
}


@pytest.fixture(scope='function')
def app():
    """Create and configure a new app instance for each test."""
    db_fd, db_path = tempfile.mkstemp()

    app = create_app({
        'TESTING': True,
        'DATABASE_URL': f'sqlite:///{db_path}',
        'WTF_CSRF_ENABLED': False,
        'SECRET_KEY': 'test-secret-key',
        'RATELIMIT_ENABLED': False,
        'DEMO_MODE': False,
    })

    with app.app_context():
        db.create_all()
        _create_test_data()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()

    os.close(db_fd)
    os.unlink(db_path)


@pytest.fixture
def client(app):
    """A test client for the app."""
    return app.test_client()


@pytest.fixture
def runner(app):
    """A test runner for the app's Click commands."""
    return app.test_cli_runner()


@pytest.fixture
def app_context(app):
    with app.app_context():
        yield


@pytest.fixture
def organization_id(app):
    with app.app_context():
        return Organization.query.filter_by(name='Test Organization').first().id


@pytest.fixture
def login(client):
    """Log the test client in as one of the seeded operators."""
    def _login(username='admin', password=TEST_PASSWORD):
        return client.post('/auth/login', json={'username': username, 'password': password})
    return _login


@pytest.fixture
def repo():
    """Fresh in-memory workspace store."""
    return InMemoryRepository()


@pytest.fixture
def make_batch():
    """Put a dried batch ready for packing into a repository."""
    def _make(repository, batch_id, net_kg, received_at, recipe_name='X', status=BatchStatus.DRYING_COMPLETE):
        batch = Batch(
            id=batch_id,
            source_farm='Test Farm',
            date_received=received_at,
            raw_weight_kg=net_kg,
            spoiled_weight_kg=0.0,
            net_weight_kg=net_kg,
            remaining_weight_kg=net_kg,
            status=status.value,
            selected_recipe_name=recipe_name,
            packed_date=None,
        )
        return repository.add(batch)
    return _make


@pytest.fixture
def make_lot():
    """Put a finished-good lot into a repository."""
    def _make(repository, lot_id, quantity, packed_at, recipe_name='X', packaging_type='POUCH', price=15.0):
        lot = FinishedGoodLot(
            id=lot_id,
            batch_id='BATCH-SRC',
            recipe_name=recipe_name,
            packaging_type=packaging_type,
            quantity=quantity,
            original_quantity=quantity,
            date_packed=packed_at,
            selling_price=price,
        )
        return repository.add(lot)
    return _make


def _create_test_data():
    """One workspace with an operator per role."""
    org = Organization(name='Test Organization', contact_email='ops@example.com', is_active=True)
    db.session.add(org)
    db.session.commit()

    for username, role in TEST_USERS.items():
        user = User(
            username=username,
            email=f'{username}@example.com',
            organization_id=org.id,
            role=role.value,
            is_active=True,
        )
        user.set_password(TEST_PASSWORD)
        db.session.add(user)
    db.session.commit()
