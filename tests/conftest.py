from typing import Callable

import pytest
from fastapi.testclient import TestClient

from cereal_box.main import create_app

from tests.fakes import build_context


@pytest.fixture
def make_client() -> Callable[..., TestClient]:
    """Build a TestClient around a gateway; lifespan runs on enter."""

    def _make(gateway, raise_server_exceptions: bool = True, **overrides) -> TestClient:
        context = build_context(gateway, **overrides)
        return TestClient(
            create_app(context),
            raise_server_exceptions=raise_server_exceptions,
        )

    return _make


@pytest.fixture
def db_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path}/counter.db"
