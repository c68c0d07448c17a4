import time
from fastapi import FastAPI, Depends, Request
from fastapi.testclient import TestClient
from starlette.middleware.sessions import SessionMiddleware
from storefront.utils.rate_limit import optional_rate_limit, rate_limit_health_info


def _make_app(times=2, seconds=60):
    app = FastAPI()

    @app.get("/limited", dependencies=[Depends(optional_rate_limit(times, seconds))])
    def limited():
        return {"ok": True}

    @app.get("/limitedA", dependencies=[Depends(optional_rate_limit(times, seconds))])
    def limited_a():
        return {"ok": True}

    @app.get("/limitedB", dependencies=[Depends(optional_rate_limit(times, seconds))])
    def limited_b():
        return {"ok": True}

    @app.get("/rl_info")
    def rl_info(request: Request):
        return rate_limit_health_info(request)

    return app


def test_rate_limit_fallback_blocks_after_limit(monkeypatch):
    app = _make_app(times=2, seconds=60)
    client = TestClient(app)
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")

    r1 = client.get("/limited")
    r2 = client.get("/limited")
    r3 = client.get("/limited")

    assert r1.status_code == 200
    assert r2.status_code == 200
    assert r3.status_code == 429
    assert r3.json() == {"detail": "Too Many Requests"}


def test_rate_limit_is_per_path_and_ignores_cookies(monkeypatch):
    app = _make_app(times=2, seconds=60)
    client = TestClient(app)
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")

    # Un cookie différent à chaque appel ne donne pas de compteur neuf
    for n in range(2):
        client.cookies.set("session", f"rotating-{n}")
        client.cookies.set("sb_access", f"forged-{n}")
        assert client.get("/limitedA").status_code == 200
    client.cookies.set("session", "rotating-2")
    assert client.get("/limitedA").status_code == 429

    # path B: indépendant de A
    assert client.get("/limitedB").status_code == 200
    assert client.get("/limitedB").status_code == 200
    assert client.get("/limitedB").status_code == 429


def test_rate_limit_holds_across_resigned_session_cookies(monkeypatch):
    # Arrange: vraie SessionMiddleware, le cookie est re-signé (horodaté) à chaque réponse
    app = FastAPI()
    app.add_middleware(SessionMiddleware, secret_key="test-secret")

    @app.post("/touch", dependencies=[Depends(optional_rate_limit(2, 60))])
    def touch(request: Request):
        request.session["hits"] = request.session.get("hits", 0) + 1
        return {"hits": request.session["hits"]}

    client = TestClient(app)
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")

    # Act
    first = client.post("/touch")
    time.sleep(1.1)
    second = client.post("/touch")
    time.sleep(1.1)
    third = client.post("/touch")

    # Assert
    assert first.headers["set-cookie"] != second.headers["set-cookie"]
    assert second.json() == {"hits": 2}
    assert third.status_code == 429


def test_rate_limit_resets_after_window_sleep(monkeypatch):
    app = _make_app(times=2, seconds=1)
    client = TestClient(app)
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")

    assert client.get("/limited").status_code == 200
    assert client.get("/limited").status_code == 200
    assert client.get("/limited").status_code == 429

    # Attendre > 1s pour vider la fenêtre
    time.sleep(1.1)
    assert client.get("/limited").status_code == 200


def test_rate_limit_disabled_flag_never_blocks(monkeypatch):
    app = _make_app(times=1, seconds=60)
    app.state.rate_limit_enabled = False
    client = TestClient(app)
    monkeypatch.delenv("LOCAL_RATE_LIMIT_FALLBACK", raising=False)

    for _ in range(5):
        assert client.get("/limited").status_code == 200


def test_rate_limit_uninitialized_limiter_does_not_block(monkeypatch):
    # fastapi-limiter jamais initialisé (pas de Redis): la requête passe
    app = _make_app(times=1, seconds=60)
    client = TestClient(app)
    monkeypatch.delenv("LOCAL_RATE_LIMIT_FALLBACK", raising=False)

    assert client.get("/limited").status_code == 200
    assert client.get("/limited").status_code == 200


def test_rate_limit_health_info_reports_state(monkeypatch):
    app = _make_app()
    app.state.rate_limit_enabled = False
    client = TestClient(app)
    monkeypatch.delenv("LOCAL_RATE_LIMIT_FALLBACK", raising=False)

    info = client.get("/rl_info").json()

    assert info["enabled"] is False
    assert info["ready"] is False
    assert info["backend"] is None
