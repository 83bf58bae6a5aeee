"""/api/users/create, /api/users/profile and /api/admin/users"""

from app.models.user import User
from conftest import auth_headers, make_token


def _create(client, **overrides):
    payload = {"id": "user-1", "email": "ada@example.com", "name": "Ada", "avatar": None}
    payload.update(overrides)
    return client.post("/api/users/create", json=payload)


class TestCreateUser:

    def test_creates_user_with_defaults(self, client):
        response = _create(client)

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == "user-1"
        assert body["email"] == "ada@example.com"
        assert body["role"] == "USER"
        assert body["subscriptionTier"] == "FREE"
        assert body["booksGenerated"] == 0
        assert body["wordsGenerated"] == 0
        assert body["settings"]["theme"] == "SYSTEM"
        assert body["settings"]["userId"] == "user-1"

    def test_name_and_avatar_are_optional(self, client):
        response = client.post("/api/users/create", json={"id": "user-2", "email": "b@example.com"})
        assert response.status_code == 200
        assert response.json()["name"] is None

    def test_invalid_email_is_400(self, client):
        response = _create(client, email="not-an-email")
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_duplicate_id_is_409_and_keeps_original(self, client, session):
        assert _create(client).status_code == 200
        session.expunge_all()

        response = _create(client, email="other@example.com", name="Impostor")

        assert response.status_code == 409
        assert response.json() == {"success": False, "error": "User already exists"}
        session.expunge_all()
        original = session.get(User, "user-1")
        assert original.name == "Ada"
        assert original.email == "ada@example.com"

    def test_duplicate_email_is_409(self, client, session):
        assert _create(client).status_code == 200
        session.expunge_all()

        response = _create(client, id="user-2")

        assert response.status_code == 409
        assert session.get(User, "user-2") is None


class TestUpdateProfile:

    def test_requires_sign_in(self, client, make_user):
        make_user("user-1")
        response = client.put("/api/users/profile", json={"name": "Grace"})
        assert response.status_code == 401

    def test_updates_trimmed_name(self, client, make_user):
        make_user("user-1", name="Ada")

        response = client.put("/api/users/profile", json={"name": "  Grace  "}, headers=auth_headers("user-1"))

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert response.json()["user"]["name"] == "Grace"
        assert response.json()["user"]["subscriptionTier"] == "FREE"

    def test_blank_or_missing_name_is_400(self, client, session, make_user):
        make_user("user-1", name="Ada")
        headers = auth_headers("user-1")

        for body in ({"name": ""}, {"name": "   "}, {}):
            response = client.put("/api/users/profile", json=body, headers=headers)
            assert response.status_code == 400
            assert response.json() == {"success": False, "error": "Name is required"}

        session.expunge_all()
        assert session.get(User, "user-1").name == "Ada"

    def test_signed_in_without_profile_row_is_404(self, client):
        response = client.put("/api/users/profile", json={"name": "Grace"}, headers=auth_headers("ghost"))
        assert response.status_code == 404
        assert response.json()["error"] == "User not found"

    def test_cookie_session_is_accepted(self, client, make_user):
        make_user("user-1")
        client.cookies.set("sb-access-token", make_token("user-1"))

        response = client.put("/api/users/profile", json={"name": "Grace"})

        assert response.status_code == 200


class TestAdminUsers:

    def test_regular_user_is_403(self, client, make_user):
        make_user("user-1")
        response = client.get("/api/admin/users", headers=auth_headers("user-1"))
        assert response.status_code == 403
        assert response.json()["error"] == "Admin access required"

    def test_anonymous_is_401(self, client):
        assert client.get("/api/admin/users").status_code == 401

    def test_admin_lists_users(self, client, make_user):
        make_user("user-1")
        make_user("user-2")

        response = client.get("/api/admin/users", headers=auth_headers("admin-1", role="admin"))

        assert response.status_code == 200
        assert {u["id"] for u in response.json()["data"]} == {"user-1", "user-2"}
