import pytest
from unittest.mock import MagicMock

from uniform_admin import create_app
from uniform_admin.extensions import db as _db

ADMIN_HEADERS = {"X-Admin-Token": "test-admin-token", "X-Admin-Id": "admin-7"}


@pytest.fixture(scope="session")
def app():
    """Create application for testing."""
    app = create_app("testing")
    with app.app_context():
        _db.create_all()
        yield app
        _db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db(app):
    """Database with every table emptied after the test.

    Services commit their audit rows, so a rolled back savepoint is not enough.
    """
    with app.app_context():
        yield _db
        _db.session.rollback()
        for table in reversed(_db.metadata.sorted_tables):
            _db.session.execute(table.delete())
        _db.session.commit()


@pytest.fixture
def admin_headers():
    return dict(ADMIN_HEADERS)


def _envelope(data=None, status_code=200, **extra):
    body = {"success": status_code < 400, "data": data}
    body.update(extra)
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = body
    return resp


@pytest.fixture
def envelope():
    """Factory for fake httpx responses carrying a backend envelope."""
    return _envelope


@pytest.fixture
def backend(monkeypatch):
    """Mocked httpx.request used by the backend client."""
    fake = MagicMock()
    monkeypatch.setattr("uniform_admin.services.backend_client.httpx.request", fake)
    return fake
