"""The `edit` command: change channel settings through the persistence manager."""

import logging
from typing import List, Sequence

from ...errors import PersistenceError
from ..config import CommPlatformIntegration, Config
from ..interactive import Button, ButtonBuilder, ButtonStyle, Message, Section, plaintext_message
from .command import run_mutation
from .interfaces import ConfigPersistenceManager
from .responses import persistence_failure_message

logger = logging.getLogger("kubechat.executor.edit")

SOURCE_BINDINGS_KEY = "SourceBindings"

# accepted spellings, lower-cased
_EDITABLE_KEYS = {
    "sourcebindings": SOURCE_BINDINGS_KEY,
    "sourcebinding": SOURCE_BINDINGS_KEY,
}


class EditExecutor:
    """Handles `edit SourceBindings [source ...]`."""

    def __init__(self, cfg: Config, cfg_manager: ConfigPersistenceManager, bot_name: str):
        self.cfg = cfg
        self.cfg_manager = cfg_manager
        self.btn_builder = ButtonBuilder(bot_name)

    async def do(
        self,
        args: List[str],
        comm_group_name: str,
        platform: CommPlatformIntegration,
        channel_alias: str,
        current_bindings: Sequence[str],
        user: str,
    ) -> Message:
        if len(args) < 2:
            return self._unknown_key("")

        key = _EDITABLE_KEYS.get(args[1].lower())
        if key is None:
            return self._unknown_key(args[1])

        # accept both "a b" and "a,b"
        names = [n for arg in args[2:] for n in arg.split(",") if n]
        if not names:
            return self._bindings_view(current_bindings)

        unknown = [n for n in names if n not in self.cfg.sources]
        if unknown:
            quoted = ", ".join(repr(n) for n in unknown)
            verb = "were" if len(unknown) > 1 else "was"
            plural = "s" if len(unknown) > 1 else ""
            return plaintext_message(f"The {quoted} source{plural} {verb} not found in configuration.")

        names = list(dict.fromkeys(names))
        try:
            await run_mutation(
                lambda: self.cfg_manager.persist_source_bindings(comm_group_name, platform, channel_alias, names)
            )
        except PersistenceError as e:
            logger.error(f"Failed to persist source bindings for channel {channel_alias!r}: {e}")
            return persistence_failure_message()

        display = ", ".join(self._display_name(n) for n in names)
        plural = "s" if len(names) > 1 else ""
        who = user or "Someone"
        return plaintext_message(
            f":white_check_mark: {who} adjusted notifications settings to receive notifications from "
            f"{display} source{plural} on this channel. Expect kubechat reload in a few seconds..."
        )

    def _display_name(self, name: str) -> str:
        src = self.cfg.sources.get(name)
        return src.display_name if src and src.display_name else name

    def _unknown_key(self, key: str) -> Message:
        prefix = f"Sorry, I don't know how to edit {key!r}. " if key else ""
        return plaintext_message(f"{prefix}Editable settings: {SOURCE_BINDINGS_KEY}.")

    def _bindings_view(self, current: Sequence[str]) -> Message:
        """One toggle button per source; each payload carries the full toggled set."""
        current = [n for n in current if n in self.cfg.sources]
        buttons: List[Button] = []
        for name in self.cfg.sources:
            bound = name in current
            toggled = [n for n in current if n != name] if bound else current + [name]
            if not toggled:
                continue
            label = f"{'✔ ' if bound else ''}{self._display_name(name)}"
            cmd = f"edit {SOURCE_BINDINGS_KEY} {' '.join(toggled)}"
            style = ButtonStyle.PRIMARY if bound else ButtonStyle.DEFAULT
            buttons.append(self.btn_builder.for_command_without_desc(label, cmd, style))

        bound_display = ", ".join(self._display_name(n) for n in current) or "none"
        return Message(
            sections=(
                Section(
                    header="Adjust notifications",
                    description=f"Currently receiving notifications from: {bound_display}. Click a source to toggle it.",
                    buttons=tuple(buttons),
                    context=("At least one source must stay bound to the channel.",),
                ),
            ),
        )
