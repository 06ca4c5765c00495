"""Shared test fixtures for the Toogo domains test suite.

Provides:
- app: Flask app configured for testing (in-memory SQLite, no delays)
- client: Flask test client
- db_session: clean database per test (tables created/dropped)
- seed_data: owner user, tenant and a pending domain purchase
- vercel: FakeVercelClient where every provider call succeeds by default
- auth_headers: Bearer header matching SETUP_API_KEY
"""

import pytest

from toogo import create_app
from toogo.extensions import db as _db
from toogo.models.domain_purchase import DomainPurchase
from toogo.models.tenant import Tenant
from toogo.models.user import User
from toogo.services.vercel_client import ProviderOutcome, ProviderResult

ACTIVE_ZONE = {
    "serviceType": "zeit.world",
    "nameservers": ["ns1.vercel-dns.com", "ns2.vercel-dns.com"],
    "verified": True,
}


class FakeVercelClient:
    """Stand-in for VercelClient.

    Every call succeeds unless an override is registered, either for a
    specific call key or for the whole method:

        fake.fail("add_project_domain", "example.com", ProviderOutcome.PERMANENT_FAILURE)
        fake.fail("create_dns_record", None, ProviderOutcome.ZONE_INACTIVE)

    Call keys: get_domain -> domain; add_project_domain -> name (or
    "<name>->redirect"); create_dns_record -> "<type>:<value>";
    update_project_domain -> name.
    """

    def __init__(self):
        self.calls = []
        self.domain_info = dict(ACTIVE_ZONE)
        self.overrides = {}
        self.create_outcome = ProviderOutcome.CREATED

    def fail(self, method, key, outcome, error_code=None, message=None, status_code=400):
        self.overrides[(method, key)] = ProviderResult(
            outcome, status_code, {}, error_code, message
        )

    def already_exists(self):
        """Make every create call answer ALREADY_EXISTS (second-run behavior)."""
        self.create_outcome = ProviderOutcome.ALREADY_EXISTS

    def methods_called(self, method):
        return [key for m, key in self.calls if m == method]

    def _result(self, method, key, default):
        self.calls.append((method, key))
        return self.overrides.get((method, key)) or self.overrides.get((method, None)) or default

    def get_domain(self, domain):
        return self._result(
            "get_domain", domain,
            ProviderResult(ProviderOutcome.OK, 200, dict(self.domain_info)),
        )

    def add_project_domain(self, name, redirect=None, redirect_status_code=None):
        key = f"{name}->redirect" if redirect else name
        return self._result(
            "add_project_domain", key,
            ProviderResult(self.create_outcome, 200, {"name": name}),
        )

    def create_dns_record(self, domain, record_type, name, value, ttl=60):
        return self._result(
            "create_dns_record", f"{record_type}:{value}",
            ProviderResult(self.create_outcome, 200, {"uid": "rec_test"}),
        )

    def update_project_domain(self, name, **fields):
        return self._result(
            "update_project_domain", name,
            ProviderResult(ProviderOutcome.OK, 200, fields),
        )


@pytest.fixture(scope="session")
def app():
    """Create the Flask application configured for testing."""
    app = create_app("testing")
    yield app


@pytest.fixture(autouse=True)
def db_session(app):
    """Create all tables before each test, drop after."""
    with app.app_context():
        _db.create_all()
        yield _db.session
        _db.session.rollback()
        _db.drop_all()


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture
def vercel():
    return FakeVercelClient()


@pytest.fixture
def auth_headers(app):
    return {"Authorization": f"Bearer {app.config['SETUP_API_KEY']}"}


@pytest.fixture
def seed_data(app, db_session):
    """Seed an owner, a tenant and a pending domain purchase for example.com.

    Returns plain ids so tests can re-query after each run commits.
    """
    owner = User(email="maria@tiendademo.mx", full_name="María López")
    _db.session.add(owner)
    _db.session.flush()

    tenant = Tenant(name="Tienda Demo", owner_user_id=owner.id, plan="basic")
    _db.session.add(tenant)
    _db.session.flush()

    purchase = DomainPurchase(
        tenant_id=tenant.id,
        domain="example.com",
        status="pending",
        metadata_={},
    )
    _db.session.add(purchase)
    _db.session.commit()

    return {
        "owner_id": owner.id,
        "tenant_id": tenant.id,
        "purchase_id": purchase.id,
        "domain": purchase.domain,
    }
