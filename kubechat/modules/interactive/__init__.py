"""
Interactive Module - Black Box Interface

Purpose: Platform-agnostic output contract shared by every command
Interface: Message, Section, Body, Button, ButtonBuilder, HelpMessage
Hidden: Nothing platform specific; adapters own the rendering

Messages are immutable once built.
"""

from .help import RUN_COMMAND_NAME, HelpMessage
from .message import (
    Body,
    Button,
    ButtonBuilder,
    ButtonStyle,
    Message,
    MessageType,
    Section,
    TextField,
    code_block_message,
    plaintext_message,
)

__all__ = [
    "Body",
    "Button",
    "ButtonBuilder",
    "ButtonStyle",
    "HelpMessage",
    "Message",
    "MessageType",
    "RUN_COMMAND_NAME",
    "Section",
    "TextField",
    "code_block_message",
    "plaintext_message",
]
