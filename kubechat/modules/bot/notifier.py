"""Runtime notification state of the channels of one platform."""

import logging
import threading
from typing import Dict, Mapping

from ..config import Channel

logger = logging.getLogger("kubechat.bot.notifier")


class ChannelNotifierHandler:
    """
    Notification on/off switch per conversation.

    Conversations are identified by channel name. The initial state comes from
    the channel configuration; chat commands flip it at runtime.
    """

    def __init__(self, bot_name: str, channels: Mapping[str, Channel]):
        self._bot_name = bot_name
        self._lock = threading.Lock()
        self._enabled: Dict[str, bool] = {
            channel.name: not channel.notification.disabled for channel in channels.values()
        }

    def bot_name(self) -> str:
        return self._bot_name

    def notifications_enabled(self, conversation_id: str) -> bool:
        with self._lock:
            return self._enabled.get(conversation_id, False)

    def set_notifications_enabled(self, conversation_id: str, enabled: bool) -> None:
        with self._lock:
            self._enabled[conversation_id] = enabled
        logger.debug(f"Notifications for {conversation_id!r} set to {enabled}")
