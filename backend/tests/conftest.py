import itertools
import os

# Must be set before contactbook.core.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SEED_DEMO_DATA"] = "false"
os.environ.setdefault("APP_ENV", "test")

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from contactbook.client.api import ContactBookAPI  # noqa: E402
from contactbook.core.database import build_engine, get_session  # noqa: E402
from contactbook.main import app  # noqa: E402
from contactbook.models import Base  # noqa: E402
from contactbook.schemas import ContactCreate  # noqa: E402
from contactbook.services.contacts import ContactStore  # noqa: E402


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def app_with_test_db(session_factory):
    """The real app, with every request getting a session on the test engine."""

    def override_get_session():
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_session] = override_get_session
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app_with_test_db):
    return TestClient(app_with_test_db)


@pytest.fixture
async def api(app_with_test_db):
    transport = httpx.ASGITransport(app=app_with_test_db)
    api = ContactBookAPI.from_base_url("http://testserver/api", transport=transport)
    yield api
    await api.aclose()


@pytest.fixture
def make_contact(db):
    """Insert a contact through the store; unspecified fields are numbered."""
    counter = itertools.count(1)

    def _make(**overrides):
        n = next(counter)
        fields = {
            "first_name": f"First{n:02d}",
            "last_name": f"Last{n:02d}",
            "email": f"person{n:02d}@example.com",
        }
        fields.update(overrides)
        return ContactStore(db).create(ContactCreate(**fields))

    return _make


@pytest.fixture
def contact_payload():
    """JSON body for POST /api/contacts; unspecified fields are numbered."""

    def _payload(n, **overrides):
        payload = {
            "first_name": f"First{n:02d}",
            "last_name": f"Last{n:02d}",
            "email": f"person{n:02d}@example.com",
            "phone": None,
            "company": None,
        }
        payload.update(overrides)
        return payload

    return _payload
