def h(token):
    return {"Authorization": f"Bearer {token}"}


def test_register_messages_by_role(client):
    r = client.post("/v1/auth/register", json={"email": "s@college.edu", "password": "secret1"})
    assert r.status_code == 201
    assert r.json()["profile"]["role"] == "student"
    assert "Verify your student status" in r.json()["message"]

    r = client.post("/v1/auth/register", json={"email": "d@example.org", "password": "secret1", "role": "donor"})
    assert "start sharing resources immediately" in r.json()["message"]


def test_duplicate_registration_suggests_sign_in(client):
    body = {"email": "dup@college.edu", "password": "secret1", "role": "student"}
    assert client.post("/v1/auth/register", json=body).status_code == 201

    r = client.post("/v1/auth/register", json={**body, "email": "DUP@college.edu"})
    assert r.status_code == 409
    detail = r.json()["detail"]
    assert detail["code"] == "account_exists"
    assert detail["switch_to_sign_in"] is True


def test_bad_credentials_are_generic(client, signup):
    signup("x@college.edu", "student")
    r = client.post("/v1/auth/login", json={"email": "x@college.edu", "password": "wrong-pass"})
    assert r.status_code == 401
    assert r.json()["detail"]["message"] == "Invalid email or password"


def test_short_password_rejected_locally(client):
    r = client.post("/v1/auth/register", json={"email": "p@college.edu", "password": "123"})
    assert r.status_code == 422
    assert r.json()["detail"]["message"] == "Password must be at least 6 characters"


def test_logout_revokes_session(client, signup):
    token = signup("bye@college.edu", "student")
    assert client.get("/v1/auth/me", headers=h(token)).status_code == 200

    assert client.post("/v1/auth/logout", headers=h(token)).status_code == 200
    assert client.get("/v1/auth/me", headers=h(token)).status_code == 401


def test_garbage_token_is_anonymous(client):
    r = client.get("/v1/pages", headers=h("not-a-jwt"))
    assert r.status_code == 200
    assert r.json()["signed_in"] is False


def test_missing_profile_is_reported_and_repairable(client, services):
    # identity written, profile write never happened
    services.backend.identity.register("half@college.edu", "secret1")
    token = client.post("/v1/auth/login", json={"email": "half@college.edu", "password": "secret1"}).json()[
        "access_token"
    ]

    me = client.get("/v1/auth/me", headers=h(token)).json()
    assert me["profile_missing"] is True
    assert me["profile"] is None

    # writes are blocked until the profile exists
    r = client.post("/v1/posts", json={"post_type": "wisdom", "content": "hi"}, headers=h(token))
    assert r.status_code == 409
    assert r.json()["detail"]["code"] == "profile_missing"

    r = client.post("/v1/profile/repair", json={"role": "student"}, headers=h(token))
    assert r.status_code == 201
    assert r.json()["profile"]["verification_status"] == "unverified"

    assert client.get("/v1/posts", headers=h(token)).status_code == 200
    assert client.post("/v1/profile/repair", json={"role": "donor"}, headers=h(token)).status_code == 422


def test_missing_profile_can_still_read_posts(client, services, signup):
    donor = signup("giver@example.org", "donor")
    client.post(
        "/v1/posts",
        json={
            "post_type": "donation",
            "resource_title": "Chemistry lab coat",
            "resource_category": "other",
            "resource_contact": "giver@example.org",
        },
        headers=h(donor),
    )

    services.backend.identity.register("partial@college.edu", "secret1")
    token = client.post("/v1/auth/login", json={"email": "partial@college.edu", "password": "secret1"}).json()[
        "access_token"
    ]

    for path in ("/v1/posts", "/v1/feed"):
        r = client.get(path, headers=h(token))
        assert r.status_code == 200, path
        [post] = r.json()
        assert post["resource_contact"] == "Verification required to view contact"

    page = client.get("/v1/pages", params={"page": "feed"}, headers=h(token)).json()
    assert page["profile_missing"] is True
    assert len(page["posts"]) == 1


def test_logout_without_token_uses_standard_error_shape(client):
    r = client.post("/v1/auth/logout")
    assert r.status_code == 401
    assert r.json()["detail"] == {"code": "sign_in_required", "message": "Please sign in first"}
