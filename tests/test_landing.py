"""GET / redirects signed-in users and shows the marketing page otherwise."""

from conftest import auth_headers, make_token


def test_anonymous_sees_marketing_page(client):
    response = client.get("/", follow_redirects=False)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "Get started" in response.text


def test_bearer_session_redirects_to_dashboard(client):
    response = client.get("/", headers=auth_headers("user-1"), follow_redirects=False)

    assert response.status_code == 307
    assert response.headers["location"] == "/dashboard"


def test_cookie_session_redirects_to_dashboard(client):
    client.cookies.set("sb-access-token", make_token("user-1"))

    response = client.get("/", follow_redirects=False)

    assert response.status_code == 307
    assert response.headers["location"] == "/dashboard"


def test_expired_session_sees_marketing_page(client):
    client.cookies.set("sb-access-token", make_token("user-1", expires_in=-60))

    response = client.get("/", follow_redirects=False)

    assert response.status_code == 200
