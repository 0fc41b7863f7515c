import json
import logging
import time

from parikshan.platform.logging import JsonFormatter
from parikshan.platform import middleware
from parikshan.platform.middleware import _rate_limit_key
from parikshan.platform import request_context


def test_health_reports_components(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["service"] == "parikshan-api"
    assert body["database"] is True
    assert body["webhook_env"] == "TEST"
    assert body["status"] in ("healthy", "degraded")


def test_unknown_route_uses_error_body(client):
    resp = client.get("/api/does-not-exist")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Not Found"}


def test_security_and_request_headers(client):
    resp = client.get("/api/sections", headers={"X-Request-ID": "req-123"})
    assert resp.headers["X-Content-Type-Options"] == "nosniff"
    assert resp.headers["X-Frame-Options"] == "DENY"
    assert resp.headers["X-Request-ID"] == "req-123"
    assert "X-Process-Time-Ms" in resp.headers


def test_upload_rate_limit(client):
    statuses = [client.post("/api/csv-upload", data={"companyId": "c"}).status_code for _ in range(10)]
    assert statuses == [400] * 10
    resp = client.post("/api/csv-upload", data={"companyId": "c"})
    assert resp.status_code == 429
    assert int(resp.headers["Retry-After"]) >= 1
    assert resp.json() == {"error": "Too many requests. Please try again later."}


def test_rate_limit_buckets():
    assert _rate_limit_key("1.2.3.4", "/api/n8n/csv-upload") == "upload:1.2.3.4"
    assert _rate_limit_key("1.2.3.4", "/api/submit-assessment") == "submission:1.2.3.4"
    assert _rate_limit_key("1.2.3.4", "/api/n8n/save-answer") == "answer:1.2.3.4"
    assert _rate_limit_key("1.2.3.4", "/api/sections") == ""


def test_json_formatter_includes_request_and_user_ids():
    request_token = request_context.set_request_id("req-abc")
    user_token = request_context.set_auth_user_id("user-42")
    try:
        record = logging.LogRecord("parikshan.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)
        payload = json.loads(JsonFormatter().format(record))
        assert payload["message"] == "hello world"
        assert payload["level"] == "INFO"
        assert payload["request_id"] == "req-abc"
        assert payload["user_id"] == "user-42"
    finally:
        request_context._request_id_ctx.reset(request_token)
        request_context._auth_user_ctx.reset(user_token)


def test_json_formatter_omits_missing_context():
    record = logging.LogRecord("parikshan.test", logging.WARNING, __file__, 1, "plain", (), None)
    payload = json.loads(JsonFormatter().format(record))
    assert "user_id" not in payload
    assert payload["env"] == "test"


def test_idle_rate_limit_keys_are_evicted(client, monkeypatch):
    stale = time.time() - 120
    middleware._rate_limit_store["upload:198.51.100.9"] = [stale]
    middleware._rate_limit_store["answer:198.51.100.10"] = []
    middleware._rate_limit_store["submission:198.51.100.11"] = [time.time()]
    monkeypatch.setattr(middleware, "_SWEEP_THRESHOLD", 1)

    client.post("/api/csv-upload", data={"companyId": "c"})

    assert "upload:198.51.100.9" not in middleware._rate_limit_store
    assert "answer:198.51.100.10" not in middleware._rate_limit_store
    assert "submission:198.51.100.11" in middleware._rate_limit_store
    assert middleware._rate_limit_store["upload:testclient"]
