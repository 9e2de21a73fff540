"""
Storage Module - Black Box Interface

Purpose: Persist runtime configuration changes made from chat
Interface: StorageModule.persistence_manager(), StorageModule.is_reachable(),
           RedisConfigPersistenceManager, InMemoryConfigPersistenceManager
Hidden: Redis specifics, key layout, serialization

Can be replaced with any storage backend implementing the persistence
contract of the executor module.
"""

import os
from typing import Optional

import redis.asyncio as redis

from .persistence import InMemoryConfigPersistenceManager, RedisConfigPersistenceManager


class StorageModule:
    """Owns the Redis connection backing chat-made configuration changes."""

    def __init__(self, connection_url: Optional[str] = None, password: Optional[str] = None):
        self.url = connection_url or os.getenv("REDIS_URL", "redis://localhost:6379/0")
        self.password = password
        self._client: Optional[redis.Redis] = None

    async def connect(self) -> redis.Redis:
        """Get storage connection."""
        if not self._client:
            self._client = redis.from_url(self.url, password=self.password, decode_responses=True)
        return self._client

    async def persistence_manager(self) -> RedisConfigPersistenceManager:
        """Persistence manager bound to this module's connection."""
        return RedisConfigPersistenceManager(await self.connect())

    async def is_reachable(self) -> bool:
        """
        Check the storage connection.

        Raises:
            redis.RedisError: When Redis does not answer
        """
        if not self._client:
            return False
        return bool(await self._client.ping())

    async def disconnect(self):
        """Close storage connection."""
        if self._client:
            await self._client.aclose()
            self._client = None


__all__ = ["InMemoryConfigPersistenceManager", "RedisConfigPersistenceManager", "StorageModule"]
