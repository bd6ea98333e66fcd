import pytest
from datetime import datetime, timezone
from fastapi.testclient import TestClient
from app.config import Settings, get_settings
from app.main import app


@pytest.fixture
def test_settings(monkeypatch):
    # Keep the developer's own AWS config out of the signing path
    for name in ("AWS_PROFILE", "AWS_DEFAULT_PROFILE", "AWS_SESSION_TOKEN"):
        monkeypatch.delenv(name, raising=False)

    return Settings(
        _env_file=None,
        aws_bucket="test-bucket",
        aws_region="us-east-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
        aws_session_token=None,
        aws_profile=None,
    )


@pytest.fixture(scope="function")
def client(test_settings):
    app.dependency_overrides[get_settings] = lambda: test_settings
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def fixed_now():
    return datetime(2024, 5, 17, 9, 30, 15, 250000, tzinfo=timezone.utc)
