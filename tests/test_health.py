from fastapi.testclient import TestClient

from helphood_chat.config import Settings
from helphood_chat.main import app, create_app

client = TestClient(app)


def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_version_has_keys():
    r = client.get("/version")
    assert r.status_code == 200
    body = r.json()
    for key in ["service", "version", "host", "port", "workers", "ai_configured"]:
        assert key in body
    assert body["service"] == "helphood-chat"


def test_version_reports_ai_configured():
    keyed = TestClient(create_app(Settings(env={"GEMINI_API_KEY": "k"})))
    assert keyed.get("/version").json()["ai_configured"] is True
    bare = TestClient(create_app(Settings(env={})))
    assert bare.get("/version").json()["ai_configured"] is False


def test_live():
    r = client.get("/live")
    assert r.status_code == 200
    assert r.json() == {"status": "live"}


def test_ready_only_after_startup():
    fresh = create_app(Settings(env={}))
    assert TestClient(fresh).get("/ready").status_code == 503
    with TestClient(fresh) as c:
        r = c.get("/ready")
        assert r.status_code == 200
        assert r.json() == {"status": "ready", "ai_configured": False}


def test_request_id_echoed():
    r = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert r.headers["X-Request-ID"] == "abc-123"
    assert client.get("/health").headers.get("X-Request-ID")


def test_metrics_exposes_chat_counter():
    bare = TestClient(create_app(Settings(env={})))
    bare.post("/api/chat", json={"message": "hello"})
    r = bare.get("/metrics")
    assert r.status_code == 200
    assert "chat_replies_total" in r.text
    assert "http_requests_total" in r.text
