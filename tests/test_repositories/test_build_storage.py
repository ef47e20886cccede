"""Tests for choosing the storage strategy from settings."""

import pytest

from app.config import Settings
from app.repositories import build_storage
from app.repositories.memory import MemoryStorage
from app.repositories.sql import DatabaseStorage


@pytest.fixture
def make_settings():
    def _make(**overrides) -> Settings:
        return Settings(_env_file=None, api_secret_key="k", **overrides)

    return _make


class TestBuildStorage:
    def test_memory_is_default(self, make_settings):
        assert isinstance(build_storage(make_settings()), MemoryStorage)

    @pytest.mark.asyncio
    async def test_database_backend(self, make_settings):
        storage = build_storage(
            make_settings(storage_backend="database", database_url="postgresql://u:p@db:5432/resort")
        )
        assert isinstance(storage, DatabaseStorage)
        assert storage.engine.url.drivername == "postgresql+asyncpg"
        await storage.dispose()
