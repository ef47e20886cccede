"""Storage strategies. The active one is chosen once from ``Settings.storage_backend``."""

import logging

from app.config import Settings
from app.repositories.base import Storage
from app.repositories.memory import MemoryStorage
from app.repositories.sql import DatabaseStorage

logger = logging.getLogger(__name__)


def build_storage(settings: Settings) -> Storage:
    """Instantiate the configured storage strategy."""
    logger.info("Using %s storage", settings.storage_backend)
    if settings.storage_backend == "database":
        return DatabaseStorage(settings)
    return MemoryStorage()
