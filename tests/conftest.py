import pytest
from fastapi.testclient import TestClient

from app.config import Settings, get_settings
from app.main import app

SOW_URL = "http://sow.test/api/SOW_consultancy"


def make_settings(**overrides) -> Settings:
    env = {"SOW_API_URL": SOW_URL, "SOW_TIMEOUT_SECONDS": 2.0, "SOW_PROXY_URL": "http://proxy.test/api/generate-sow"}
    env.update(overrides)
    return Settings(**env)


@pytest.fixture
def client():
    app.dependency_overrides[get_settings] = lambda: make_settings()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
