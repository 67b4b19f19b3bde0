"""End-to-end route tests with FastAPI's TestClient and in-memory stores."""

from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from careeradvisor.advisor.agent import AdvisorAgent
from careeradvisor.errors import PersistenceFailure
from careeradvisor.web.app import create_app

REGISTRATION = {
    "name": "Ana",
    "email": "ana@example.com",
    "password": "s3cret-pass",
    "grade": "10",
    "interests": "biology, art",
    "goals": "become a designer",
}


def _register(client, **overrides):
    data = dict(REGISTRATION, **overrides)
    return client.post("/register", data=data, follow_redirects=False)


class TestRegister:

    def test_form_renders(self, client):
        response = client.get("/register")

        assert response.status_code == 200
        assert 'action="/register"' in response.text

    def test_success_signs_in_and_redirects(self, client, users):
        response = _register(client)

        assert response.status_code == 303
        assert response.headers["location"] == "/dashboard"
        assert users.count() == 1
        dashboard = client.get("/dashboard")
        assert "Welcome, Ana" in dashboard.text

    def test_duplicate_email_rerenders_form(self, client, users):
        _register(client)
        client.post("/logout")

        response = _register(client, name="Impostor")

        assert response.status_code == 400
        assert "Email already registered." in response.text
        assert users.count() == 1

    def test_missing_name(self, client, users):
        response = _register(client, name="")

        assert response.status_code == 400
        assert "Name is required." in response.text
        assert users.count() == 0

    def test_invalid_email(self, client):
        response = _register(client, email="nope")

        assert response.status_code == 400
        assert "valid email" in response.text

    def test_store_failure_shows_try_again(self, app_config, sessions):
        users = MagicMock()
        users.find_user_by_email.side_effect = PersistenceFailure("disk gone")
        app = create_app(app_config, users=users, sessions=sessions, advisor=AdvisorAgent())

        with TestClient(app) as client:
            response = _register(client)

        assert response.status_code == 503
        assert "Could not create account. Please try again." in response.text

    def test_session_failure_after_signup_asks_to_log_in(self, app_config, users):
        sessions = MagicMock()
        sessions.create_session.side_effect = PersistenceFailure("disk full")
        sessions.resolve_session.return_value = None
        app = create_app(app_config, users=users, sessions=sessions, advisor=AdvisorAgent())

        with TestClient(app) as client:
            response = _register(client)
            dashboard = client.get("/dashboard", follow_redirects=False)

        assert response.status_code == 200
        assert "Your account was created. Please log in." in response.text
        assert 'action="/login"' in response.text
        assert "Could not create account" not in response.text
        assert users.count() == 1
        assert dashboard.headers["location"] == "/login"


class TestLogin:

    def test_wrong_password(self, client, sessions):
        _register(client)
        client.post("/logout")
        sessions_before = len(sessions)

        response = client.post(
            "/login", data={"email": "ana@example.com", "password": "wrong"}, follow_redirects=False
        )

        assert response.status_code == 401
        assert "Invalid email or password." in response.text
        assert len(sessions) == sessions_before
        assert client.get("/dashboard", follow_redirects=False).headers["location"] == "/login"

    def test_unknown_email_same_message(self, client):
        response = client.post("/login", data={"email": "x@example.com", "password": "pw"})

        assert response.status_code == 401
        assert "Invalid email or password." in response.text

    def test_correct_credentials(self, client):
        _register(client)
        client.post("/logout")

        response = client.post(
            "/login",
            data={"email": "ANA@example.com", "password": "s3cret-pass"},
            follow_redirects=False,
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/dashboard"
        assert client.get("/dashboard").status_code == 200


class TestAuthRequired:

    def test_index_redirects_to_login(self, client):
        response = client.get("/", follow_redirects=False)

        assert response.headers["location"] == "/login"

    def test_index_redirects_signed_in_user_to_dashboard(self, client):
        _register(client)

        assert client.get("/", follow_redirects=False).headers["location"] == "/dashboard"

    def test_dashboard_and_advisor_need_session(self, client):
        assert client.get("/dashboard", follow_redirects=False).headers["location"] == "/login"
        assert client.post("/advisor", data={"prompt": "hi"}, follow_redirects=False).headers["location"] == "/login"

    def test_logout_ends_session(self, client, sessions):
        _register(client)

        response = client.post("/logout", follow_redirects=False)

        assert response.headers["location"] == "/login"
        assert len(sessions) == 0
        assert client.get("/dashboard", follow_redirects=False).headers["location"] == "/login"


class TestAdvisorRoute:

    def test_template_advice_without_key(self, client):
        _register(client)

        response = client.post("/advisor", data={"prompt": "What should I study?"})

        assert response.status_code == 200
        assert "What should I study?" in response.text
        assert "Hi Ana, based on your interests in biology, art" in response.text
        assert "Suggested next action this week" in response.text

    def test_blank_prompt_uses_default(self, client):
        _register(client)

        response = client.post("/advisor", data={"prompt": ""})

        # Rendered inside autoescaped quotes, unlike the textarea placeholder.
        assert "Your question: &#34;How should I plan my career?&#34;" in response.text

    def test_live_advice_with_key(self, app_config, users, sessions, openai_client):
        advisor = AdvisorAgent(api_key="test-key", client=openai_client)
        app = create_app(app_config, users=users, sessions=sessions, advisor=advisor)

        with TestClient(app) as client:
            _register(client)
            response = client.post("/advisor", data={"prompt": "Which majors?"})

        assert "Live advice from the model." in response.text
        user_message = openai_client.chat.completions.create.call_args.kwargs["messages"][1]["content"]
        assert "Interests: biology, art" in user_message

    def test_live_failure_still_renders_advice(self, app_config, users, sessions):
        failing = MagicMock()
        failing.chat.completions.create.side_effect = RuntimeError("network down")
        advisor = AdvisorAgent(api_key="test-key", client=failing)
        app = create_app(app_config, users=users, sessions=sessions, advisor=advisor)

        with TestClient(app) as client:
            _register(client)
            response = client.post("/advisor", data={"prompt": "Which majors?"})

        assert response.status_code == 200
        assert "network down" not in response.text
        assert "Suggested next action this week" in response.text

    def test_shutdown_closes_openai_client(self, app_config, users, sessions, openai_client):
        advisor = AdvisorAgent(api_key="test-key", client=openai_client)
        app = create_app(app_config, users=users, sessions=sessions, advisor=advisor)

        with TestClient(app):
            openai_client.close.assert_not_called()

        openai_client.close.assert_called_once()

    def test_session_for_missing_user_redirects_to_login(self, client, users, sessions):
        _register(client)
        users._users.clear()

        response = client.post("/advisor", data={"prompt": "hi"}, follow_redirects=False)

        assert response.headers["location"] == "/login"
        assert len(sessions) == 0
