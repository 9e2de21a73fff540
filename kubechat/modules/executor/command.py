"""Command text helpers: parsing, anonymization and conversation context."""

import asyncio
import shlex
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, List, Mapping, Optional, Sequence, Tuple, TypeVar

T = TypeVar("T")

ANONYMIZED_INVALID_VERB = "{invalid verb}"

CLUSTER_NAME_FLAG = "--cluster-name"
FILTER_FLAG = "--filter"

_QUOTE_REPLACEMENTS = {
    "“": '"',
    "”": '"',
    "‘": "'",
    "’": "'",
}


class Origin(str, Enum):
    """How a command was triggered."""

    TYPED_MESSAGE = "typed"
    BUTTON_CLICK = "buttonClick"
    SELECT_VALUE_CHANGE = "selectValueChange"
    MULTI_SELECT_VALUE_CHANGE = "multiSelectValueChange"
    PLAIN_TEXT_INPUT = "plainTextInput"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Conversation:
    """The chat context a command runs in."""

    alias: str
    id: str
    executor_bindings: Tuple[str, ...] = ()
    source_bindings: Tuple[str, ...] = ()
    is_authenticated: bool = False
    command_origin: Origin = Origin.TYPED_MESSAGE
    # opaque platform state, e.g. values of interactive selects
    state: Optional[Mapping[str, Any]] = None


def sanitize_command(text: str) -> str:
    """Replace the typographic quotes chat clients insert while typing."""
    for src, dst in _QUOTE_REPLACEMENTS.items():
        text = text.replace(src, dst)
    return text.strip()


def split_command(text: str) -> List[str]:
    """
    Split command text into arguments.

    Raises:
        ValueError: On unbalanced quotes
    """
    return shlex.split(text)


def extract_flag(args: Sequence[str], flag: str) -> Tuple[List[str], Optional[str]]:
    """
    Remove a string flag from the arguments.

    Supports both ``--flag=value`` and ``--flag value``.

    Returns:
        Remaining arguments and the flag value (None if absent)
    """
    remaining: List[str] = []
    value: Optional[str] = None
    skip_next = False
    for i, arg in enumerate(args):
        if skip_next:
            skip_next = False
            continue
        if arg.startswith(flag + "="):
            value = arg[len(flag) + 1:]
            continue
        if arg == flag:
            if i + 1 < len(args):
                value = args[i + 1]
                skip_next = True
            else:
                value = ""
            continue
        remaining.append(arg)
    return remaining, value


_FLAGS_WITH_VALUE = frozenset(
    {
        "-n",
        "--namespace",
        "-o",
        "--output",
        "-l",
        "--selector",
        "-c",
        "--container",
        "--field-selector",
        "--sort-by",
        "--since",
        "--tail",
    }
)


def positional_args(args: Sequence[str]) -> List[str]:
    """Arguments that are neither flags nor flag values of -n/--namespace style flags."""
    result: List[str] = []
    skip_next = False
    for arg in args:
        if skip_next:
            skip_next = False
            continue
        if arg.startswith("-"):
            if "=" not in arg and arg in _FLAGS_WITH_VALUE:
                skip_next = True
            continue
        result.append(arg)
    return result


async def run_mutation(call: Callable[[], Awaitable[T]]) -> T:
    """
    Run a state-mutating collaborator call.

    A cancelled task aborts before the call starts; once started, the call
    runs to completion even if the caller is cancelled meanwhile.
    """
    await asyncio.sleep(0)
    return await asyncio.shield(call())
