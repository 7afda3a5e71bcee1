"""Tests for login, logout, bounce-back and the user card."""
from vaev.db.repositories import UserRepository

from tests.helpers import CSRF_TOKEN, PASSWORD


def _set_cookie_header(response, name):
    for header in response.headers.get_list("set-cookie"):
        if header.startswith(f"{name}="):
            return header
    return None


def _login(client, email, password=PASSWORD, next_path=None, field="email"):
    url = "/auth/validate"
    if next_path is not None:
        url += f"?next={next_path}"
    return client.post(url, data={"CSRF-Token": CSRF_TOKEN, field: email, "password": password})


class TestValidateCredentials:
    """POST /auth/validate."""

    def test_login_sets_auth_cookie_and_bounces_home(self, client, user):
        response = _login(client, "ada@example.com")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        assert "event: datastar-execute-script" in response.text
        assert 'window.location = "/"' in response.text

        header = _set_cookie_header(response, "vaev-auth")
        assert header is not None
        lowered = header.lower()
        for attribute in ("httponly", "secure", "samesite=strict", "path=/", "expires="):
            assert attribute in lowered
        assert f"max-age={365 * 24 * 60 * 60}" in lowered

    def test_login_bounces_to_next(self, client, user):
        response = _login(client, "ada@example.com", next_path="%2Fdashboard%2Fprojects")
        assert 'window.location = "/dashboard/projects"' in response.text

    def test_login_ignores_offsite_next(self, client, user):
        response = _login(client, "ada@example.com", next_path="https%3A%2F%2Fevil.example")
        assert 'window.location = "/"' in response.text

    def test_login_accepts_username_field(self, client, user):
        response = _login(client, "ada@example.com", field="username")
        assert _set_cookie_header(response, "vaev-auth") is not None

    def test_email_is_case_insensitive(self, client, user):
        response = _login(client, "ADA@Example.com")
        assert _set_cookie_header(response, "vaev-auth") is not None

    def test_wrong_password_toasts_and_resets_form(self, client, user):
        response = _login(client, "ada@example.com", password="wrong")

        assert response.status_code == 200
        assert _set_cookie_header(response, "vaev-auth") is None
        assert "data: selector #toaster" in response.text
        assert "data: mergeMode append" in response.text
        assert "Invalid credentials" in response.text
        assert 'document.getElementById("login-form").reset();' in response.text

    def test_unknown_email_toasts(self, client, user):
        response = _login(client, "nobody@example.com")
        assert _set_cookie_header(response, "vaev-auth") is None
        assert "Invalid credentials" in response.text

    def test_signed_in_after_login(self, client, user):
        _login(client, "ada@example.com")
        response = client.get("/auth/user")
        assert "Ada" in response.text


class TestLogout:
    """POST /auth/logout."""

    def test_logout_clears_cookie_and_redirects_to_login(self, auth_client):
        response = auth_client.post("/auth/logout", headers=auth_client.csrf_headers())

        assert response.status_code == 200
        assert 'window.location = "/login"' in response.text
        header = _set_cookie_header(response, "vaev-auth")
        assert header is not None
        assert "max-age=0" in header.lower()

    def test_logged_out_user_is_anonymous(self, auth_client):
        auth_client.post("/auth/logout", headers=auth_client.csrf_headers())
        response = auth_client.get("/auth/user")
        assert "Sign in" in response.text


class TestLoginPage:
    """GET /login."""

    def test_anonymous_gets_form_with_csrf_field(self, client):
        response = client.get("/login?next=%2Fdashboard%2Fprojects")

        assert response.status_code == 200
        assert 'id="login-form"' in response.text
        assert f'value="{CSRF_TOKEN}"' in response.text
        assert 'name="CSRF-Token"' in response.text
        assert "/auth/validate?next=/dashboard/projects" in response.text

    def test_signed_in_user_bounces_to_next(self, auth_client):
        response = auth_client.get("/login?next=%2Fdashboard%2Fprojects", follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/dashboard/projects"

    def test_signed_in_user_without_next_goes_home(self, auth_client):
        response = auth_client.get("/login", follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/"

    def test_stale_auth_cookie_is_removed(self, client):
        client.set_cookie("vaev-auth", "not-a-token")
        response = client.get("/login")

        assert response.status_code == 200
        header = _set_cookie_header(response, "vaev-auth")
        assert header is not None
        assert "max-age=0" in header.lower()


class TestUserCard:
    """GET /auth/user and identity resolution."""

    def test_guest_card(self, client):
        response = client.get("/auth/user")
        assert response.status_code == 200
        assert "data: selector #user-card" in response.text
        assert "guest" in response.text

    def test_user_card(self, auth_client):
        response = auth_client.get("/auth/user")
        assert "data: selector #user-card" in response.text
        assert "Ada" in response.text
        assert CSRF_TOKEN in response.text

    def test_revoked_token_is_anonymous(self, auth_client, user, db):
        UserRepository(db).rotate_token_key(user.id)
        response = auth_client.get("/auth/user")
        assert "guest" in response.text


class TestIndex:
    """GET /."""

    def test_guest_sees_intro(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "Sign in" in response.text

    def test_signed_in_user_goes_to_dashboard(self, auth_client):
        response = auth_client.get("/", follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/dashboard/projects"
