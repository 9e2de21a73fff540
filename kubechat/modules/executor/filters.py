"""Filters engine and the `filters` command."""

import logging
import threading
from typing import Dict, List, Mapping

from ...errors import PersistenceError
from ..config import FilterSetting
from ..interactive import Message, Section, TextField, plaintext_message
from .command import run_mutation
from .interfaces import ConfigPersistenceManager, FilterEngine
from .responses import persistence_failure_message

logger = logging.getLogger("kubechat.executor.filters")

FILTERS_USAGE = "Incorrect use of 'filters' command. Use: filters list | filters enable <name> | filters disable <name>"


class InMemoryFilterEngine:
    """Registered filters with a runtime enabled flag, shared across commands."""

    def __init__(self, settings: Mapping[str, FilterSetting]):
        self._lock = threading.Lock()
        self._enabled: Dict[str, bool] = {name: s.enabled for name, s in settings.items()}
        self._descriptions: Dict[str, str] = {name: s.description for name, s in settings.items()}

    def registered_filters(self) -> Dict[str, bool]:
        with self._lock:
            return dict(self._enabled)

    def description(self, name: str) -> str:
        return self._descriptions.get(name, "")

    def set_filter_enabled(self, name: str, enabled: bool) -> None:
        with self._lock:
            if name not in self._enabled:
                raise KeyError(name)
            self._enabled[name] = enabled


class FilterExecutor:
    """Handles `filters list|enable|disable`."""

    def __init__(self, engine: FilterEngine, cfg_manager: ConfigPersistenceManager, cluster_name: str):
        self.engine = engine
        self.cfg_manager = cfg_manager
        self.cluster_name = cluster_name

    async def do(self, args: List[str]) -> Message:
        if len(args) < 2:
            return plaintext_message(FILTERS_USAGE)

        sub = args[1].lower()
        if sub == "list":
            return self._list()
        if sub in ("enable", "disable") and len(args) == 3:
            return await self._set(args[2], sub == "enable")
        return plaintext_message(FILTERS_USAGE)

    def _list(self) -> Message:
        filters = self.engine.registered_filters()
        if not filters:
            return plaintext_message(f"No filters registered on cluster {self.cluster_name!r}.")

        fields = tuple(
            TextField(key=name, value="enabled" if enabled else "disabled") for name, enabled in sorted(filters.items())
        )
        return Message(
            sections=(Section(header=f"Filters on cluster {self.cluster_name!r}", text_fields=fields),),
        )

    async def _set(self, name: str, enabled: bool) -> Message:
        if name not in self.engine.registered_filters():
            return plaintext_message(f"I cannot find the {name!r} filter. Use 'filters list' to see available ones.")

        try:
            await run_mutation(lambda: self.cfg_manager.persist_filter_enabled(name, enabled))
        except PersistenceError as e:
            logger.error(f"Failed to persist filter {name!r} state: {e}")
            return persistence_failure_message()

        self.engine.set_filter_enabled(name, enabled)
        state = "enabled" if enabled else "disabled"
        return plaintext_message(f"Done. I {state} the {name!r} filter on cluster {self.cluster_name!r}.")
