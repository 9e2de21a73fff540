"""Collaborator contracts consumed by the executors."""

from typing import Dict, List, Optional, Protocol, Sequence

from ..config import CommPlatformIntegration
from ..interactive import Message
from .command import Origin


class Executor(Protocol):
    """Handles one inbound command."""

    async def execute(self) -> Message:
        ...


class CommandRunner(Protocol):
    """Runs a fully resolved command."""

    def run_combined_output(self, args: Sequence[str]) -> str:
        """
        Run the command and return stdout and stderr combined.

        Raises:
            CommandExecutionError: If the command cannot run or exits non-zero
        """
        ...


class NamespaceLister(Protocol):
    def list_namespaces(self) -> List[str]:
        """Namespaces visible to the cluster credentials in use."""
        ...


class ResourceNameLister(Protocol):
    def list_names(self, resource_type: str, namespace: Optional[str]) -> List[str]:
        """Names of the resources of a type, optionally in one namespace."""
        ...


class ConfigPersistenceManager(Protocol):
    """Persists runtime configuration changes."""

    async def persist_source_bindings(
        self,
        comm_group_name: str,
        platform: CommPlatformIntegration,
        channel_alias: str,
        source_bindings: List[str],
    ) -> None:
        ...

    async def persist_notifications_enabled(
        self,
        comm_group_name: str,
        platform: CommPlatformIntegration,
        channel_alias: str,
        enabled: bool,
    ) -> None:
        ...

    async def persist_filter_enabled(self, name: str, enabled: bool) -> None:
        ...


class AnalyticsReporter(Protocol):
    def report_command(
        self, platform: CommPlatformIntegration, command: str, origin: Origin, with_filter: bool
    ) -> None:
        """Report an executed command. The command must be anonymized by the caller."""
        ...


class NotifierHandler(Protocol):
    """Runtime notification state of the chat adapter."""

    def bot_name(self) -> str:
        """Name the bot is mentioned by on the platform."""
        ...

    def notifications_enabled(self, conversation_id: str) -> bool:
        ...

    def set_notifications_enabled(self, conversation_id: str, enabled: bool) -> None:
        ...


class FilterEngine(Protocol):
    def registered_filters(self) -> Dict[str, bool]:
        """Filter name to enabled flag."""
        ...

    def set_filter_enabled(self, name: str, enabled: bool) -> None:
        """
        Raises:
            KeyError: If no filter with that name is registered
        """
        ...
