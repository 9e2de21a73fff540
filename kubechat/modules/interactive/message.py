"""
Platform-agnostic message model.

Every response is a tree of sections, bodies and buttons. Chat adapters
render it natively; the command plane never knows how.
"""

from enum import Enum
from typing import Tuple

from pydantic import BaseModel, ConfigDict, model_validator


class MessageType(str, Enum):
    DEFAULT = "default"
    POPUP = "popup"


class ButtonStyle(str, Enum):
    DEFAULT = ""
    PRIMARY = "primary"
    DANGER = "danger"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class Body(_Frozen):
    """Plain text XOR code block."""

    plaintext: str = ""
    code_block: str = ""

    @model_validator(mode="after")
    def check_exclusive(self):
        if self.plaintext and self.code_block:
            raise ValueError("body cannot hold both plaintext and a code block")
        return self

    def is_empty(self) -> bool:
        return not self.plaintext and not self.code_block


class Button(_Frozen):
    """
    A clickable action.

    ``command`` is the full text re-submitted to the bot on click;
    ``url`` makes it a plain link instead.
    """

    name: str
    command: str = ""
    url: str = ""
    description: str = ""
    style: ButtonStyle = ButtonStyle.DEFAULT


class TextField(_Frozen):
    key: str
    value: str


class Section(_Frozen):
    header: str = ""
    description: str = ""
    body: Body = Body()
    buttons: Tuple[Button, ...] = ()
    text_fields: Tuple[TextField, ...] = ()
    context: Tuple[str, ...] = ()


class Message(_Frozen):
    type: MessageType = MessageType.DEFAULT
    header: str = ""
    description: str = ""
    body: Body = Body()
    sections: Tuple[Section, ...] = ()
    only_visible_for_you: bool = False
    replace_original: bool = False

    def is_empty(self) -> bool:
        """An empty message means "nothing to send"."""
        return not (self.header or self.description or self.sections) and self.body.is_empty()

    def buttons(self) -> Tuple[Button, ...]:
        """All buttons across sections, in order."""
        return tuple(btn for section in self.sections for btn in section.buttons)


def plaintext_message(text: str, **kwargs) -> Message:
    """Message with a single plaintext body."""
    return Message(body=Body(plaintext=text), **kwargs)


def code_block_message(text: str, **kwargs) -> Message:
    """Message with a single code block body."""
    return Message(body=Body(code_block=text), **kwargs)


class ButtonBuilder:
    """Builds buttons whose commands are addressed to the bot."""

    def __init__(self, bot_name: str):
        self.bot_name = bot_name

    def _bot_cmd(self, cmd: str) -> str:
        return f"{self.bot_name} {cmd}" if self.bot_name else cmd

    def for_command_with_desc_cmd(self, name: str, cmd: str, style: ButtonStyle = ButtonStyle.DEFAULT) -> Button:
        """Button whose description repeats the command it runs."""
        return self.for_command(name, cmd, cmd, style)

    def for_command_without_desc(self, name: str, cmd: str, style: ButtonStyle = ButtonStyle.DEFAULT) -> Button:
        return Button(name=name, command=self._bot_cmd(cmd), style=style)

    def for_command(self, name: str, cmd: str, desc: str, style: ButtonStyle = ButtonStyle.DEFAULT) -> Button:
        return Button(
            name=name,
            command=self._bot_cmd(cmd),
            description=self._bot_cmd(desc),
            style=style,
        )

    def for_url(self, name: str, url: str, style: ButtonStyle = ButtonStyle.DEFAULT) -> Button:
        return Button(name=name, url=url, style=style)

    def description_url(self, name: str, cmd: str, url: str, style: ButtonStyle = ButtonStyle.DEFAULT) -> Button:
        """Link button that also documents the equivalent bot command."""
        return Button(name=name, url=url, description=self._bot_cmd(cmd), style=style)
