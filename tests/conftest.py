from __future__ import annotations

import sys
from collections.abc import AsyncIterator
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import httpx  # noqa: E402
import pytest  # noqa: E402

from friendforce.context import ClientContext, build_context  # noqa: E402
from friendforce.core.config import Settings  # noqa: E402
from tests.fake_api import FakeFriendForceApi  # noqa: E402


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        app_env="test",
        api_base_url="http://testserver/api/friendforce",
        session_id="session-abc",
        csrf_token="csrf-123",
    )


@pytest.fixture()
def fake_api() -> FakeFriendForceApi:
    return FakeFriendForceApi()


@pytest.fixture()
async def context(settings: Settings, fake_api: FakeFriendForceApi) -> AsyncIterator[ClientContext]:
    client_context = build_context(settings, http_transport=httpx.MockTransport(fake_api.handler))
    yield client_context
    await client_context.aclose()
