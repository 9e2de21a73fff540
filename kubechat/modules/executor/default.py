"""
Command dispatcher.

One DefaultExecutor is built per inbound chat event. It parses the text,
routes it to a sub-handler and reports the anonymized command once.
"""

import logging
from typing import Awaitable, Callable, Dict, FrozenSet, List, Optional

from ... import __version__
from ...errors import (
    CommandExecutionError,
    InvalidCommandError,
    PermissionDeniedError,
    UnrecognizedCommandError,
)
from ..config import CommPlatformIntegration, Config
from ..interactive import (
    Body,
    ButtonBuilder,
    HelpMessage,
    Message,
    Section,
    plaintext_message,
)
from ..interactive.help import FEEDBACK_URL
from ..kubectl import Merger
from .cmd_builder import KubectlCmdBuilder
from .command import (
    ANONYMIZED_INVALID_VERB,
    CLUSTER_NAME_FLAG,
    Conversation,
    FILTER_FLAG,
    extract_flag,
    sanitize_command,
    split_command,
)
from .edit import EditExecutor
from .filters import FilterExecutor
from .interfaces import AnalyticsReporter, NotifierHandler
from .kubectl import KubectlExecutor
from .notifier import NotifierExecutor
from .responses import execution_failure_message, permission_denied_message

logger = logging.getLogger("kubechat.executor.default")

UNSUPPORTED_CMD_MSG = "Command not supported. Please use 'help' to see supported commands."
NO_OUTPUT_MSG = "Command executed successfully on cluster {cluster!r}, no output."
COMMANDS_USAGE = "Incorrect use of 'commands' command. Use: commands list"
NOT_AUTHENTICATED_MSG = "Sorry, the {verb!r} command is only available on authenticated channels."

# Subcommands kept when anonymizing; anything else is dropped
_ROUTE_SUBCOMMANDS: Dict[str, FrozenSet[str]] = {
    "notifier": frozenset({"start", "stop", "status", "showconfig"}),
    "edit": frozenset({"sourcebindings", "sourcebinding"}),
    "filters": frozenset({"list", "enable", "disable"}),
    "commands": frozenset({"list"}),
}


class DefaultExecutor:
    """Dispatches one command of one conversation."""

    def __init__(
        self,
        *,
        cfg: Config,
        merger: Merger,
        analytics_reporter: AnalyticsReporter,
        kubectl_executor: KubectlExecutor,
        cmd_builder: KubectlCmdBuilder,
        notifier_executor: NotifierExecutor,
        edit_executor: EditExecutor,
        filter_executor: FilterExecutor,
        notifier_handler: NotifierHandler,
        conversation: Conversation,
        comm_group_name: str,
        platform: CommPlatformIntegration,
        message: str,
        user: str,
        bot_name: str,
    ):
        self.cfg = cfg
        self.merger = merger
        self.analytics_reporter = analytics_reporter
        self.kubectl_executor = kubectl_executor
        self.cmd_builder = cmd_builder
        self.notifier_executor = notifier_executor
        self.edit_executor = edit_executor
        self.filter_executor = filter_executor
        self.notifier_handler = notifier_handler
        self.conversation = conversation
        self.comm_group_name = comm_group_name
        self.platform = platform
        self.message = message
        self.user = user
        self.bot_name = bot_name

        self._routes: Dict[str, Callable[[List[str]], Awaitable[Message]]] = {
            "notifier": self._notifier,
            "edit": self._edit,
            "filters": self._filters,
            "commands": self._commands,
            "ping": self._ping,
            "version": self._version,
            "feedback": self._feedback,
            "help": self._help_route,
        }

    @property
    def cluster_name(self) -> str:
        return self.cfg.settings.cluster_name

    async def execute(self) -> Message:
        """Run the command and return the response; never raises for user errors."""
        raw_cmd = sanitize_command(self.message)
        try:
            args = split_command(raw_cmd)
        except ValueError as e:
            logger.warning(f"Cannot parse command {raw_cmd!r}: {e}")
            self._report_command(ANONYMIZED_INVALID_VERB)
            return self._help(UNSUPPORTED_CMD_MSG)

        args, cluster_name = extract_flag(args, CLUSTER_NAME_FLAG)
        if cluster_name is not None and cluster_name != self.cluster_name:
            logger.debug(f"Command addressed to cluster {cluster_name!r}, ignoring")
            return Message()

        args, filter_text = extract_flag(args, FILTER_FLAG)

        if not args:
            if self.conversation.is_authenticated:
                return self._help()
            return Message()

        if self.cmd_builder.can_handle(args):
            self._report_command(self.cmd_builder.command_prefix(args))
            return await self.cmd_builder.do(args, self.conversation.executor_bindings)

        if self.kubectl_executor.can_handle(args):
            self._report_command(self.kubectl_executor.command_prefix(args), with_filter=bool(filter_text))
            return await self._kubectl(args, filter_text)

        verb = args[0].lower()
        try:
            handler = self._route(verb)
        except UnrecognizedCommandError as e:
            logger.debug(str(e))
            self._report_command(ANONYMIZED_INVALID_VERB)
            return self._help(UNSUPPORTED_CMD_MSG)

        self._report_command(self._anonymize(verb, args))
        if not self.conversation.is_authenticated:
            logger.info(f"Rejected {verb!r} on non-authenticated channel {self.conversation.alias!r}")
            return permission_denied_message(NOT_AUTHENTICATED_MSG.format(verb=verb))
        return await handler(args)

    def _route(self, verb: str) -> Callable[[List[str]], Awaitable[Message]]:
        handler = self._routes.get(verb)
        if handler is None:
            raise UnrecognizedCommandError(f"unrecognized command {verb!r}")
        return handler

    def _report_command(self, command: str, with_filter: bool = False) -> None:
        try:
            self.analytics_reporter.report_command(
                self.platform, command, self.conversation.command_origin, with_filter
            )
        except Exception as e:
            logger.error(f"Failed to report executed command {command!r}: {e}")

    @staticmethod
    def _anonymize(verb: str, args: List[str]) -> str:
        allowed = _ROUTE_SUBCOMMANDS.get(verb)
        if allowed and len(args) > 1 and args[1].lower() in allowed:
            return f"{verb} {args[1].lower()}"
        return verb

    async def _kubectl(self, args: List[str], filter_text: Optional[str]) -> Message:
        try:
            display, out = await self.kubectl_executor.execute(
                args, self.conversation.executor_bindings, self.conversation.is_authenticated
            )
        except PermissionDeniedError as e:
            logger.info(f"Denied kubectl command on channel {self.conversation.alias!r}: {e}")
            return permission_denied_message(str(e))
        except InvalidCommandError as e:
            return plaintext_message(str(e))
        except CommandExecutionError as e:
            logger.error(f"kubectl command failed on cluster {self.cluster_name!r}: {e}\n{e.output}")
            return execution_failure_message(self.cluster_name)

        if filter_text:
            out = "\n".join(line for line in out.splitlines() if filter_text in line)

        if not out.strip():
            return plaintext_message(NO_OUTPUT_MSG.format(cluster=self.cluster_name))

        return Message(
            description=f"`{display}` on `{self.cluster_name}`",
            body=Body(code_block=out),
        )

    async def _notifier(self, args: List[str]) -> Message:
        return await self.notifier_executor.do(
            args,
            self.comm_group_name,
            self.platform,
            self.conversation.alias,
            self.conversation.id,
            self.notifier_handler,
        )

    async def _edit(self, args: List[str]) -> Message:
        return await self.edit_executor.do(
            args,
            self.comm_group_name,
            self.platform,
            self.conversation.alias,
            self.conversation.source_bindings,
            self.user,
        )

    async def _filters(self, args: List[str]) -> Message:
        return await self.filter_executor.do(args)

    async def _commands(self, args: List[str]) -> Message:
        if len(args) != 2 or args[1].lower() != "list":
            return plaintext_message(COMMANDS_USAGE)

        policy = self.merger.merge_for_bindings(self.conversation.executor_bindings)
        if not policy.enabled:
            return plaintext_message(f"kubectl is not enabled on this channel for cluster {self.cluster_name!r}.")

        verbs = "\n".join(policy.allowed_verbs) or "none"
        resources = "\n".join(policy.allowed_resources) or "none"
        return Message(
            sections=(
                Section(header="Enabled kubectl verbs", body=Body(code_block=verbs)),
                Section(header="Enabled resources", body=Body(code_block=resources)),
            ),
        )

    async def _ping(self, args: List[str]) -> Message:
        return plaintext_message(f"`pong` from cluster {self.cluster_name!r}. kubechat version: {__version__}")

    async def _version(self, args: List[str]) -> Message:
        return plaintext_message(f"kubechat version: {__version__}")

    async def _feedback(self, args: List[str]) -> Message:
        btn = ButtonBuilder(self.bot_name).for_url("Give feedback", FEEDBACK_URL)
        return Message(
            sections=(
                Section(
                    header="We'd love to hear from you",
                    description="Tell us what works and what could be better.",
                    buttons=(btn,),
                ),
            ),
        )

    async def _help_route(self, args: List[str]) -> Message:
        return self._help()

    def _help(self, description: str = "") -> Message:
        return HelpMessage(self.platform, self.cluster_name, self.bot_name).build(description)
