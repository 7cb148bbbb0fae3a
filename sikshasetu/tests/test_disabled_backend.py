def test_health_reports_unconfigured_backend(disabled_client):
    body = disabled_client.get("/v1/health").json()
    assert body["backend_configured"] is False
    assert body["feed_loaded"] is False


def test_data_routes_return_503(disabled_client):
    r = disabled_client.get("/v1/posts")
    assert r.status_code == 503
    assert r.json()["detail"]["code"] == "backend_unavailable"

    r = disabled_client.post("/v1/auth/login", json={"email": "a@b.co", "password": "secret1"})
    assert r.status_code == 503

    r = disabled_client.get("/v1/pages", params={"page": "feed"})
    assert r.status_code == 503


def test_privacy_page_still_renders(disabled_client):
    r = disabled_client.get("/v1/pages", params={"page": "privacy"})
    assert r.status_code == 200
    assert r.json()["title"] == "Privacy Policy"
