"""Shared fixtures. Nothing here reaches the network."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from careeradvisor.accounts import AccountService, InMemorySessionStore, InMemoryUserStore
from careeradvisor.advisor.agent import AdvisorAgent
from careeradvisor.advisor.schemas import StudentSnapshot
from careeradvisor.config import AppConfig
from careeradvisor.web.app import create_app


@pytest.fixture
def ana():
    return StudentSnapshot(
        name="Ana",
        grade="10",
        interests=["biology", "art"],
        goals="become a designer",
    )


@pytest.fixture
def users():
    return InMemoryUserStore()


@pytest.fixture
def sessions():
    return InMemorySessionStore()


@pytest.fixture
def accounts(users, sessions):
    return AccountService(users, sessions)


def make_completion(content):
    """Build an object shaped like an OpenAI ChatCompletion."""
    completion = MagicMock()
    completion.choices = [MagicMock()]
    completion.choices[0].message.content = content
    return completion


@pytest.fixture
def completion_factory():
    return make_completion


@pytest.fixture
def openai_client():
    client = MagicMock()
    client.chat.completions.create.return_value = make_completion("Live advice from the model.")
    return client


@pytest.fixture
def app_config():
    return AppConfig(data_store_url="memory://", session_secret="test-secret")


@pytest.fixture
def client(app_config, users, sessions):
    app = create_app(app_config, users=users, sessions=sessions, advisor=AdvisorAgent())
    with TestClient(app) as test_client:
        yield test_client
