"""
Bot Module - Black Box Interface

Purpose: Platform-side helpers shared by chat adapters
Interface: extractor_for(), PrefixMentionExtractor, TagMentionExtractor,
           IDMentionExtractor, ChannelNotifierHandler
Hidden: Mention regular expressions, notification state locking

Adapters strip the bot mention before handing the text to the executor.
"""

from .mention import (
    IDMentionExtractor,
    MentionExtractor,
    NoMentionExtractor,
    PrefixMentionExtractor,
    TagMentionExtractor,
    extractor_for,
)
from .notifier import ChannelNotifierHandler

__all__ = [
    "ChannelNotifierHandler",
    "IDMentionExtractor",
    "MentionExtractor",
    "NoMentionExtractor",
    "PrefixMentionExtractor",
    "TagMentionExtractor",
    "extractor_for",
]
