"""Record store backends and the factory choosing between them."""
import logging

from supportlog.core.config import AppConfig
from supportlog.store.base import RecordStore
from supportlog.store.memory import InMemoryStore
from supportlog.store.remote import RestRecordStore
from supportlog.store.schema import SETUP_SQL, setup_sql

logger = logging.getLogger(__name__)


def create_store(config: AppConfig) -> RecordStore:
    """Pick the remote store when credentials are configured, else the in-memory one."""

    if config.is_remote:
        logger.info("Using remote store at %s", config.store_url)
        return RestRecordStore(config.store_url, config.store_key)
    logger.info("No store credentials configured; using in-memory store")
    return InMemoryStore(tables=(config.table,))


__all__ = [
    "InMemoryStore",
    "RecordStore",
    "RestRecordStore",
    "SETUP_SQL",
    "create_store",
    "setup_sql",
]
