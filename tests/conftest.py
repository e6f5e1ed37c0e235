"""
Shared fixtures: an in-memory SQLite credential store and a test app.
"""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from auth.jwt import TokenSigner
from config.settings import Settings
from database.session import build_engine, build_session_factory, init_models

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_SECRET = "test-secret"


def _memory_engine():
    return build_engine(TEST_DATABASE_URL, poolclass=StaticPool)


@pytest.fixture
def settings() -> Settings:
    return Settings(jwt_secret=TEST_SECRET, database_url=TEST_DATABASE_URL)


@pytest.fixture
def signer() -> TokenSigner:
    return TokenSigner(TEST_SECRET)


@pytest_asyncio.fixture
async def session():
    engine = _memory_engine()
    await init_models(engine)
    factory = build_session_factory(engine)
    async with factory() as s:
        yield s
    await engine.dispose()


@pytest.fixture
def app(settings):
    from main import create_app

    return create_app(settings, _memory_engine())


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
