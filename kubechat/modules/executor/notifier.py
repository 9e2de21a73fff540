"""The `notifier` command: runtime notification state of a channel."""

import logging
from typing import Any, List

import yaml

from ...errors import PersistenceError
from ..config import CommPlatformIntegration, Config
from ..interactive import Message, code_block_message, plaintext_message
from .command import run_mutation
from .interfaces import ConfigPersistenceManager, NotifierHandler
from .responses import persistence_failure_message

logger = logging.getLogger("kubechat.executor.notifier")

NOTIFIER_USAGE = "Incorrect use of 'notifier' command. Use: notifier start | stop | status | showconfig"

_REDACTED = "*** REDACTED ***"
_SECRET_SUFFIXES = ("token", "password", "secret")


def _redact(value: Any) -> Any:
    if isinstance(value, dict):
        out = {}
        for k, v in value.items():
            if isinstance(k, str) and k.lower().endswith(_SECRET_SUFFIXES) and v:
                out[k] = _REDACTED
            else:
                out[k] = _redact(v)
        return out
    if isinstance(value, list):
        return [_redact(v) for v in value]
    return value


class NotifierExecutor:
    """Starts, stops and reports channel notifications."""

    def __init__(self, cfg: Config, cfg_manager: ConfigPersistenceManager):
        self.cfg = cfg
        self.cfg_manager = cfg_manager

    @property
    def cluster_name(self) -> str:
        return self.cfg.settings.cluster_name

    async def do(
        self,
        args: List[str],
        comm_group_name: str,
        platform: CommPlatformIntegration,
        channel_alias: str,
        conversation_id: str,
        handler: NotifierHandler,
    ) -> Message:
        if len(args) != 2:
            return plaintext_message(NOTIFIER_USAGE)

        sub = args[1].lower()
        if sub == "status":
            state = "enabled" if handler.notifications_enabled(conversation_id) else "disabled"
            return plaintext_message(f"Notifications from cluster {self.cluster_name!r} are {state} here.")

        if sub == "showconfig":
            return self._show_config()

        if sub not in ("start", "stop"):
            return plaintext_message(NOTIFIER_USAGE)

        enable = sub == "start"
        if handler.notifications_enabled(conversation_id) == enable:
            state = "enabled" if enable else "disabled"
            return plaintext_message(f"Notifications are already {state} here for cluster {self.cluster_name!r}.")

        try:
            await run_mutation(
                lambda: self.cfg_manager.persist_notifications_enabled(comm_group_name, platform, channel_alias, enable)
            )
        except PersistenceError as e:
            logger.error(f"Failed to persist notifications state for channel {channel_alias!r}: {e}")
            return persistence_failure_message()

        handler.set_notifications_enabled(conversation_id, enable)
        logger.info(f"Notifications {'enabled' if enable else 'disabled'} for conversation {conversation_id}")

        if enable:
            return plaintext_message(f"Brace yourselves, incoming notifications from cluster {self.cluster_name!r}.")
        return plaintext_message(f"Sure! I won't send you notifications from cluster {self.cluster_name!r} here.")

    def _show_config(self) -> Message:
        data = _redact(self.cfg.model_dump(mode="json", by_alias=True, exclude={"resources"}))
        return code_block_message(
            yaml.safe_dump(data, sort_keys=False),
            description=f"Showing config for cluster {self.cluster_name!r}:",
        )
