from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from hookforge.application.api.rest.app import create_app
from hookforge.config import Config, HooksConfig, Server

ADMIN_TOKEN = "admin-secret"


@pytest.fixture
def make_client(store_path: Path, flags_dir: Path):
    """Build a TestClient for an app with the given base path."""
    clients: list[TestClient] = []

    def _make(base_path: str = "", admin_token: str = ADMIN_TOKEN) -> TestClient:
        config = Config(
            server=Server(admin_token=admin_token, base_path=base_path),
            hooks=HooksConfig(storage_path=store_path, flags_dir=flags_dir),
        )
        client = TestClient(create_app(config))
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client) -> TestClient:
    return make_client()


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}
