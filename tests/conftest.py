"""Pytest fixtures for testing"""

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from underwriter_console.api.main import create_app
from underwriter_console.config import Settings
from underwriter_console.core.console import Console
from underwriter_console.infrastructure.database.session import create_session_factory, create_storage_engine
from underwriter_console.mock_backend.server import STAFF_PASSWORD, MockData, create_mock_backend

# Every service lives on the same mock app; the hosts only need to differ
TEST_SETTINGS = Settings(
    storage_url="sqlite://",
    auth_api_base="http://auth.test/api",
    credit_api_base="http://credit.test/api",
    bvn_api_base="http://bvn.test/api",
    selfie_api_base="http://selfie.test/api",
    user_api_base="http://users.test/api",
    loanbot_api_base="http://loanbot.test/api",
    http_timeout_seconds=5.0,
    default_page_size=20,
)

ADMIN_EMAIL = "admin@example.com"
UNDERWRITER_EMAIL = "underwriter@example.com"


@pytest.fixture
def session_factory() -> sessionmaker:
    """Fresh in-memory storage per test"""
    return create_session_factory(create_storage_engine("sqlite://"))


@pytest.fixture
def mock_data() -> MockData:
    return MockData()


@pytest.fixture
def mock_backend(mock_data: MockData) -> FastAPI:
    return create_mock_backend(mock_data)


@pytest.fixture
def transport(mock_backend: FastAPI) -> httpx.ASGITransport:
    """Routes every client call into the mock backend in-process"""
    return httpx.ASGITransport(app=mock_backend)


@pytest.fixture
def console(session_factory: sessionmaker, transport: httpx.ASGITransport) -> Console:
    return Console(session_factory, config=TEST_SETTINGS, transport=transport)


@pytest.fixture
def client(console: Console) -> TestClient:
    """Console shell test client; redirects are asserted, not followed"""
    app = create_app(console)
    return TestClient(app, follow_redirects=False)


@pytest.fixture
def password() -> str:
    return STAFF_PASSWORD


@pytest.fixture
def admin_client(client: TestClient, password: str) -> TestClient:
    response = client.post("/login", json={"email": ADMIN_EMAIL, "password": password})
    assert response.status_code == 200
    return client


@pytest.fixture
def underwriter_client(client: TestClient, password: str) -> TestClient:
    response = client.post("/login", json={"email": UNDERWRITER_EMAIL, "password": password})
    assert response.status_code == 200
    return client
