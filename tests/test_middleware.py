import requests


def test_auth_header_forwarded_to_provider(client, auth_provider):
    r = client.get("/tags/")

    assert r.status_code == 200
    args, kwargs = auth_provider.call_args
    assert args[0] == "http://auth.test/auth"
    assert kwargs["headers"] == {"Authorization": "Bearer test-token"}


def test_malformed_authorization_header(client, auth_provider):
    r = client.get("/tags/", headers={"Authorization": "test-token"})

    assert r.status_code == 403
    auth_provider.assert_not_called()


def test_provider_rejects_token(client, auth_provider):
    auth_provider.return_value.status_code = 401

    r = client.get("/tags/")

    assert r.status_code == 403


def test_provider_response_without_user(client, auth_provider):
    auth_provider.return_value.json.return_value = {"verified": True}

    r = client.get("/tags/")

    assert r.status_code == 500


def test_provider_unavailable(client, auth_provider):
    auth_provider.side_effect = requests.ConnectionError("connection refused")

    r = client.get("/tags/")

    assert r.status_code == 500


def test_auth_url_not_configured(client, monkeypatch):
    monkeypatch.delenv("AMPHOMEUS_AUTH_URL")

    r = client.get("/tags/")

    assert r.status_code == 500


def test_ping_skips_auth(client, auth_provider):
    r = client.get("/ping")

    assert r.status_code == 200
    auth_provider.assert_not_called()


def test_bare_mount_prefix_served_without_redirect(client):
    r = client.post(
        "/journals",
        json={"title": "No slash", "media": [], "tags": ["bare"]},
        follow_redirects=False,
    )
    assert r.status_code == 201, r.text

    r = client.get("/journals", params={"search": "slash"}, follow_redirects=False)
    assert r.status_code == 200
    assert [journal["title"] for journal in r.json()] == ["No slash"]

    r = client.get("/tags", follow_redirects=False)
    assert r.status_code == 200
    assert [tag["name"] for tag in r.json()] == ["bare"]
