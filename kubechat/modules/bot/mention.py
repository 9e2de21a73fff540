"""Bot mention extraction, one flavour per chat platform."""

import re
from typing import Protocol, Tuple

from ..config import CommPlatformIntegration


class MentionExtractor(Protocol):
    def extract(self, text: str) -> Tuple[str, bool]:
        """Strip a leading bot mention; returns the rest of the text and whether one was found."""
        ...

    def mention(self) -> str:
        """Canonical mention, used to address button commands to the bot."""
        ...


class PrefixMentionExtractor:
    """
    `@botname` at the very start of the message, any casing.

    Messages without the mention are not meant for the bot, so the text is
    dropped when nothing is found.
    """

    def __init__(self, bot_name: str):
        self.bot_name = bot_name
        self._regex = re.compile(rf"^@{re.escape(bot_name)}(?![\w-])", re.IGNORECASE)

    def extract(self, text: str) -> Tuple[str, bool]:
        match = self._regex.match(text)
        if match is None:
            return "", False
        return text[match.end():], True

    def mention(self) -> str:
        return f"@{self.bot_name}"


class TagMentionExtractor:
    """`<at>botname</at>` at the start of the message; the text is kept verbatim when absent."""

    def __init__(self, bot_name: str):
        self.bot_name = bot_name
        self._regex = re.compile(rf"^<at>{re.escape(bot_name)}</at>")

    def extract(self, text: str) -> Tuple[str, bool]:
        match = self._regex.match(text)
        if match is None:
            return text, False
        return text[match.end():], True

    def mention(self) -> str:
        return f"<at>{self.bot_name}</at>"


class IDMentionExtractor:
    """`<@BOT_ID>` at the start of the message."""

    def __init__(self, bot_id: str):
        self.bot_id = bot_id
        self._regex = re.compile(rf"^<@!?{re.escape(bot_id)}>")

    def extract(self, text: str) -> Tuple[str, bool]:
        match = self._regex.match(text)
        if match is None:
            return "", False
        return text[match.end():], True

    def mention(self) -> str:
        return f"<@{self.bot_id}>"


class NoMentionExtractor:
    """Every message is meant for the bot (webhook-style integrations)."""

    def extract(self, text: str) -> Tuple[str, bool]:
        return text, True

    def mention(self) -> str:
        return ""


def extractor_for(platform: CommPlatformIntegration, bot_name: str = "", bot_id: str = "") -> MentionExtractor:
    """
    Pick the mention extractor used by a platform.

    Raises:
        ValueError: If the platform needs a bot ID or name that was not given
    """
    if platform in (CommPlatformIntegration.SLACK, CommPlatformIntegration.SOCKET_SLACK, CommPlatformIntegration.DISCORD):
        if not bot_id:
            raise ValueError(f"{platform.value} requires a bot ID for mention extraction")
        return IDMentionExtractor(bot_id)
    if platform == CommPlatformIntegration.WEBHOOK:
        return NoMentionExtractor()
    if not bot_name:
        raise ValueError(f"{platform.value} requires a bot name for mention extraction")
    if platform == CommPlatformIntegration.TEAMS:
        return TagMentionExtractor(bot_name)
    return PrefixMentionExtractor(bot_name)
