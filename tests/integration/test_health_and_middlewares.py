from unittest.mock import MagicMock

from storefront.health import service as health_service


def test_health_root(client):
    assert client.get("/health").json() == {"ok": True}


def test_health_supabase_not_configured(client, monkeypatch):
    monkeypatch.setattr(health_service, "SUPABASE_URL", "")
    r = client.get("/health/supabase")
    assert r.status_code == 200
    assert r.json()["configured"] is False
    assert r.json()["reachable"] is False


def test_health_supabase_reachable(client, monkeypatch, mock_supabase):
    monkeypatch.setattr(health_service, "SUPABASE_URL", "https://proj.supabase.co")
    monkeypatch.setattr(health_service, "SUPABASE_ANON", "anon")
    mock_supabase.table.return_value.select.return_value.limit.return_value.execute.return_value = MagicMock(data=[])

    r = client.get("/health/supabase")

    assert r.status_code == 200
    assert r.json()["reachable"] is True


def test_health_supabase_unreachable_is_503(client, monkeypatch, mock_supabase):
    monkeypatch.setattr(health_service, "SUPABASE_URL", "https://proj.supabase.co")
    monkeypatch.setattr(health_service, "SUPABASE_ANON", "anon")
    mock_supabase.table.side_effect = RuntimeError("timeout")

    r = client.get("/health/supabase")

    assert r.status_code == 503
    assert r.json()["error"] == "timeout"


def test_health_rate_limit_disabled_in_tests(client):
    info = client.get("/health/rate-limit").json()
    assert info["enabled"] is False


def test_security_headers(client):
    r = client.get("/health")
    assert r.headers["X-Frame-Options"] == "DENY"
    assert r.headers["X-Content-Type-Options"] == "nosniff"
    assert "frame-ancestors 'none'" in r.headers["Content-Security-Policy"]


def test_force_https_redirect(client):
    r = client.get("/health", headers={"x-forwarded-proto": "http"}, follow_redirects=False)
    assert r.status_code == 301
    assert r.headers["location"].startswith("https://")


def test_unknown_route_is_json_404(client):
    r = client.get("/api/v1/nope")
    assert r.status_code == 404
    assert r.json() == {"detail": "Not Found"}
