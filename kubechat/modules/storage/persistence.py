"""
Redis-backed persistence of chat-driven configuration changes.

Key layout:
    config:{group}:{platform}:{channel}:sourceBindings   JSON list of source names
    config:{group}:{platform}:{channel}:notifications    JSON bool
    filter:{name}:enabled                                JSON bool
"""

import json
import logging
from typing import List, Optional

from redis.exceptions import RedisError

from ...errors import PersistenceError
from ..config import CommPlatformIntegration

logger = logging.getLogger("kubechat.storage")


class RedisConfigPersistenceManager:
    """Stores channel and filter settings in Redis."""

    def __init__(self, redis_client):
        """
        Initialize persistence manager.

        Args:
            redis_client: Async Redis client
        """
        self.redis = redis_client

    def _channel_key(self, group: str, platform: CommPlatformIntegration, channel_alias: str, field: str) -> str:
        return f"config:{group}:{platform.value}:{channel_alias}:{field}"

    def _filter_key(self, name: str) -> str:
        return f"filter:{name}:enabled"

    async def _set(self, key: str, value) -> None:
        try:
            await self.redis.set(key, json.dumps(value))
        except RedisError as e:
            raise PersistenceError(f"failed to write {key}: {e}") from e
        logger.info(f"Persisted {key} = {value!r}")

    async def _get(self, key: str):
        try:
            data = await self.redis.get(key)
        except RedisError as e:
            raise PersistenceError(f"failed to read {key}: {e}") from e
        if data is None:
            return None
        if isinstance(data, bytes):
            data = data.decode("utf-8")
        try:
            return json.loads(data)
        except json.JSONDecodeError as e:
            raise PersistenceError(f"corrupted value under {key}: {e}") from e

    async def persist_source_bindings(
        self,
        comm_group_name: str,
        platform: CommPlatformIntegration,
        channel_alias: str,
        source_bindings: List[str],
    ) -> None:
        key = self._channel_key(comm_group_name, platform, channel_alias, "sourceBindings")
        await self._set(key, list(source_bindings))

    async def persist_notifications_enabled(
        self,
        comm_group_name: str,
        platform: CommPlatformIntegration,
        channel_alias: str,
        enabled: bool,
    ) -> None:
        key = self._channel_key(comm_group_name, platform, channel_alias, "notifications")
        await self._set(key, bool(enabled))

    async def persist_filter_enabled(self, name: str, enabled: bool) -> None:
        await self._set(self._filter_key(name), bool(enabled))

    async def get_source_bindings(
        self, comm_group_name: str, platform: CommPlatformIntegration, channel_alias: str
    ) -> Optional[List[str]]:
        """Persisted source bindings, or None if never edited."""
        value = await self._get(self._channel_key(comm_group_name, platform, channel_alias, "sourceBindings"))
        if value is None:
            return None
        return [str(v) for v in value]

    async def get_notifications_enabled(
        self, comm_group_name: str, platform: CommPlatformIntegration, channel_alias: str
    ) -> Optional[bool]:
        value = await self._get(self._channel_key(comm_group_name, platform, channel_alias, "notifications"))
        return None if value is None else bool(value)

    async def get_filter_enabled(self, name: str) -> Optional[bool]:
        value = await self._get(self._filter_key(name))
        return None if value is None else bool(value)


class InMemoryConfigPersistenceManager:
    """Keeps changes in process memory; used when no Redis is configured."""

    def __init__(self):
        self._values = {}

    async def persist_source_bindings(
        self,
        comm_group_name: str,
        platform: CommPlatformIntegration,
        channel_alias: str,
        source_bindings: List[str],
    ) -> None:
        self._values[(comm_group_name, platform.value, channel_alias, "sourceBindings")] = list(source_bindings)

    async def persist_notifications_enabled(
        self,
        comm_group_name: str,
        platform: CommPlatformIntegration,
        channel_alias: str,
        enabled: bool,
    ) -> None:
        self._values[(comm_group_name, platform.value, channel_alias, "notifications")] = bool(enabled)

    async def persist_filter_enabled(self, name: str, enabled: bool) -> None:
        self._values[("filter", name)] = bool(enabled)

    async def get_source_bindings(
        self, comm_group_name: str, platform: CommPlatformIntegration, channel_alias: str
    ) -> Optional[List[str]]:
        value = self._values.get((comm_group_name, platform.value, channel_alias, "sourceBindings"))
        return None if value is None else list(value)

    async def get_notifications_enabled(
        self, comm_group_name: str, platform: CommPlatformIntegration, channel_alias: str
    ) -> Optional[bool]:
        return self._values.get((comm_group_name, platform.value, channel_alias, "notifications"))

    async def get_filter_enabled(self, name: str) -> Optional[bool]:
        return self._values.get(("filter", name))
