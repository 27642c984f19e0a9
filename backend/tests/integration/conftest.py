"""Fixtures backed by a throwaway SQLite database file."""

import pytest
import pytest_asyncio

from hermes.config import Settings
from hermes.infrastructure.database import Database


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'hermes-test.db'}"


@pytest.fixture
def settings(database_url) -> Settings:
    return Settings(
        app_env="test",
        database_url=database_url,
        telegram_bot_token="",
        seed_sample_data=False,
    )


@pytest_asyncio.fixture
async def database(database_url):
    db = Database(database_url)
    await db.open()
    await db.create_all()
    yield db
    await db.close()
