"""Build the storage implementation once at startup."""

from __future__ import annotations

import logging

from doortrack.core.config import Settings, remote_configured
from doortrack.db.session import build_session_factory, create_local_engine
from doortrack.storage.fallback_store import FallbackStore
from doortrack.storage.kv_store import KeyValueStore
from doortrack.storage.local_store import LocalStore
from doortrack.storage.ports import StoragePort
from doortrack.storage.remote_client import RemoteStoreClient, create_remote_client
from doortrack.storage.remote_store import RemoteStore

logger = logging.getLogger(__name__)


def build_local_store(config: Settings) -> LocalStore:
    if not config.local_store_url:
        logger.info("[STORAGE] No local store configured; local reads will be empty")
        return LocalStore(KeyValueStore(None))
    engine = create_local_engine(config.local_store_url)
    return LocalStore(KeyValueStore(build_session_factory(engine)))


def build_remote_client(config: Settings) -> RemoteStoreClient | None:
    """Return the remote client, or None when the remote store is not configured."""
    if not remote_configured(config):
        logger.info("[STORAGE] Remote store not configured; using local store only")
        return None
    return create_remote_client(config)


def build_store(config: Settings, remote_client: RemoteStoreClient | None = None) -> StoragePort:
    local = build_local_store(config)
    if remote_client is None:
        return local
    logger.info("[STORAGE] Remote store configured; local store kept as fallback")
    return FallbackStore(RemoteStore(remote_client), local)
