"""Redis-backed document store.

Every collection is kept as two kinds of keys:

- ``<prefix><collection>:ids``: sorted set of live identifiers (score == id).
  Adding a member with ``NX`` is the unique constraint on the identifier.
- ``<prefix><collection>:doc:<id>``: the JSON-encoded document.

All Redis failures, including socket timeouts, are re-raised as
``StoreUnavailable`` so callers never handle redis-py exceptions directly.
"""
import json
from datetime import datetime, timezone
from functools import wraps
from typing import Any, Callable, Dict, List, Optional

import redis

from campus_suite.core.config import settings
from campus_suite.core.errors import StoreUnavailable, UniquenessViolation
from campus_suite.core.logging import get_logger

logger = get_logger(__name__)

# Redis connection pool (lazy initialization)
_redis_pool: Optional[redis.ConnectionPool] = None
_redis_client: Optional[redis.Redis] = None


def get_redis_client() -> redis.Redis:
    """Get or create the shared Redis client.

    The pool connects lazily, so this never blocks on the network; an
    unreachable server shows up as ``StoreUnavailable`` on first use.
    """
    global _redis_pool, _redis_client

    if _redis_client is None:
        logger.info(f"Initializing Redis connection pool: {settings.redis_host}:{settings.redis_port}")
        _redis_pool = redis.ConnectionPool(
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.redis_db,
            password=settings.redis_password,
            decode_responses=True,
            max_connections=50,
            socket_connect_timeout=settings.redis_socket_timeout,
            socket_timeout=settings.redis_socket_timeout,
        )
        _redis_client = redis.Redis(connection_pool=_redis_pool)

    return _redis_client


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


def _store_call(func):
    """Translate redis-py errors raised by a store method into StoreUnavailable."""
    @wraps(func)
    def wrapper(self, collection, *args, **kwargs):
        try:
            return func(self, collection, *args, **kwargs)
        except redis.RedisError as e:
            logger.error(
                f"Store call {func.__name__} failed for {collection}: {e}",
                extra={"collection": collection, "error_type": type(e).__name__},
            )
            raise StoreUnavailable(f"Document store unavailable: {e}") from e

    return wrapper


class RedisDocumentStore:
    """Document collections with integer identifiers on top of Redis.

    Example:
        >>> store = RedisDocumentStore()
        >>> store.insert("loans", 1, {"loan_id": 1, "title": "Laptop loan"})
        >>> store.list_identifiers("loans")
        [1]
    """

    def __init__(self, redis_client: Optional[redis.Redis] = None, key_prefix: Optional[str] = None):
        self.redis = redis_client if redis_client is not None else get_redis_client()
        self.key_prefix = settings.store_key_prefix if key_prefix is None else key_prefix

    def _index_key(self, collection: str) -> str:
        return f"{self.key_prefix}{collection}:ids"

    def _doc_key(self, collection: str, identifier: int) -> str:
        return f"{self.key_prefix}{collection}:doc:{identifier}"

    def ping(self) -> bool:
        try:
            return bool(self.redis.ping())
        except redis.RedisError as e:
            logger.warning(f"Store ping failed: {e}")
            return False

    @_store_call
    def list_identifiers(self, collection: str) -> List[int]:
        """Return every live identifier of a collection, ascending."""
        return [int(member) for member in self.redis.zrange(self._index_key(collection), 0, -1)]

    @_store_call
    def insert(self, collection: str, identifier: int, document: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a document under an identifier that must not be in use.

        Raises:
            UniquenessViolation: identifier already present in the collection
            StoreUnavailable: the store failed; no reservation is left behind
        """
        added = self.redis.zadd(self._index_key(collection), {str(identifier): identifier}, nx=True)
        if not added:
            raise UniquenessViolation(collection, identifier)

        now = _utcnow()
        stored = dict(document, created_at=now, updated_at=now)
        try:
            self.redis.set(self._doc_key(collection, identifier), json.dumps(stored, default=str))
        except redis.RedisError:
            self._release(collection, identifier)
            raise

        logger.debug(
            f"Inserted {collection}/{identifier}",
            extra={"collection": collection, "identifier": identifier},
        )
        return stored

    def _release(self, collection: str, identifier: int) -> None:
        try:
            self.redis.zrem(self._index_key(collection), str(identifier))
        except redis.RedisError as e:
            logger.error(
                f"Could not release reserved identifier {collection}/{identifier}: {e}",
                extra={"collection": collection, "identifier": identifier},
            )

    def _unique_key(self, collection: str, field: str) -> str:
        return f"{self.key_prefix}{collection}:unique:{field}"

    @_store_call
    def reserve_unique(self, collection: str, field: str, value: str, owner: str = "pending") -> bool:
        """Claim ``value`` for ``field`` in a collection.

        ``HSETNX`` makes the claim atomic, so of several concurrent callers
        exactly one gets True.
        """
        return bool(self.redis.hsetnx(self._unique_key(collection, field), value, owner))

    @_store_call
    def assign_unique(self, collection: str, field: str, value: str, owner: str) -> None:
        """Record the owner of an already reserved value."""
        self.redis.hset(self._unique_key(collection, field), value, owner)

    @_store_call
    def release_unique(self, collection: str, field: str, value: str) -> None:
        self.redis.hdel(self._unique_key(collection, field), value)

    @_store_call
    def find(self, collection: str, identifier: int) -> Optional[Dict[str, Any]]:
        raw = self.redis.get(self._doc_key(collection, identifier))
        return json.loads(raw) if raw else None

    @_store_call
    def find_all(self, collection: str) -> List[Dict[str, Any]]:
        """Return every document of a collection in identifier order."""
        identifiers = self.redis.zrange(self._index_key(collection), 0, -1)
        if not identifiers:
            return []
        raw_docs = self.redis.mget([self._doc_key(collection, i) for i in identifiers])
        # Reserved identifiers whose document is still being written are skipped
        return [json.loads(raw) for raw in raw_docs if raw]

    @_store_call
    def modify(
        self,
        collection: str,
        identifier: int,
        mutate: Callable[[Dict[str, Any]], None],
    ) -> Optional[Dict[str, Any]]:
        """Apply ``mutate`` to a document with optimistic locking.

        The document is watched, mutated in place and written back in a
        MULTI block; a concurrent write restarts the cycle.

        Returns:
            The updated document, or None if it does not exist
        """
        key = self._doc_key(collection, identifier)
        with self.redis.pipeline() as pipe:
            while True:
                try:
                    pipe.watch(key)
                    raw = pipe.get(key)
                    if raw is None:
                        pipe.unwatch()
                        return None

                    document = json.loads(raw)
                    mutate(document)
                    document["updated_at"] = _utcnow()

                    pipe.multi()
                    pipe.set(key, json.dumps(document, default=str))
                    pipe.execute()
                    return document
                except redis.WatchError:
                    logger.debug(
                        f"Concurrent write on {collection}/{identifier}, retrying",
                        extra={"collection": collection, "identifier": identifier},
                    )
                    continue

    def update(self, collection: str, identifier: int, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Overwrite the given fields of a document."""
        return self.modify(collection, identifier, lambda document: document.update(fields))

    @_store_call
    def delete(self, collection: str, identifier: int) -> Optional[Dict[str, Any]]:
        """Delete a document and free its identifier.

        Returns:
            The deleted document, or None if it does not exist
        """
        key = self._doc_key(collection, identifier)
        with self.redis.pipeline() as pipe:
            while True:
                try:
                    pipe.watch(key)
                    raw = pipe.get(key)
                    if raw is None:
                        pipe.unwatch()
                        return None

                    pipe.multi()
                    pipe.delete(key)
                    pipe.zrem(self._index_key(collection), str(identifier))
                    pipe.execute()
                    logger.debug(
                        f"Deleted {collection}/{identifier}",
                        extra={"collection": collection, "identifier": identifier},
                    )
                    return json.loads(raw)
                except redis.WatchError:
                    continue
