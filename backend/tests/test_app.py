from sqlalchemy.exc import OperationalError

from contactbook.core import database
from contactbook.core.logging_config import CORRELATION_HEADER


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["version"] == "1.0.0"


def test_ready(client):
    response = client.get("/ready")

    assert response.status_code == 200
    assert response.json() == {"database": "healthy", "overall": "ready"}


def test_ready_reports_503_when_database_unreachable(client, monkeypatch):
    class BrokenEngine:
        def connect(self):
            raise OperationalError("SELECT 1", {}, Exception("unable to open database file"))

    monkeypatch.setattr(database, "engine", BrokenEngine())

    response = client.get("/ready")

    assert response.status_code == 503
    assert response.json()["overall"] == "not ready"


def test_root_lists_entry_points(client):
    body = client.get("/").json()
    assert body["api"] == "/api"
    assert body["metrics"] == "/metrics"


def test_correlation_id_is_echoed(client):
    response = client.get("/health", headers={CORRELATION_HEADER: "req-123"})
    assert response.headers[CORRELATION_HEADER] == "req-123"


def test_correlation_id_is_generated(client):
    first = client.get("/health").headers[CORRELATION_HEADER]
    second = client.get("/health").headers[CORRELATION_HEADER]
    assert first and second and first != second


def test_error_responses_carry_correlation_id(client):
    response = client.get("/api/contacts/404404")
    assert response.status_code == 404
    assert CORRELATION_HEADER in response.headers


def test_security_headers(client):
    headers = client.get("/health").headers

    assert headers["X-Frame-Options"] == "DENY"
    assert headers["X-Content-Type-Options"] == "nosniff"
    assert "default-src 'self'" in headers["Content-Security-Policy"]


def test_cors_preflight(client):
    response = client.options(
        "/api/contacts",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "POST",
        },
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "http://localhost:5173"


def test_metrics_count_contact_mutations(client, contact_payload):
    client.post("/api/contacts", json=contact_payload(1))

    response = client.get("/metrics")

    assert response.status_code == 200
    assert 'contact_mutations_total{operation="create"}' in response.text
    assert 'endpoint="/api/contacts"' in response.text


def test_metrics_do_not_label_by_raw_path(client, contact_payload):
    created = client.post("/api/contacts", json=contact_payload(1)).json()
    client.get(f"/api/contacts/{created['id']}")
    client.get("/api/contacts/918273")

    text = client.get("/metrics").text

    assert 'endpoint="/api/contacts/{contact_id}"' in text
    assert "918273" not in text
    assert 'http_requests_in_progress{method="GET"}' in text
