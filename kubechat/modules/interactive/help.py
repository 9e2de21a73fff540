"""Help message shown for `help`, an empty mention and unknown commands."""

from typing import Callable, List

from ..config import CommPlatformIntegration
from .message import Body, ButtonBuilder, ButtonStyle, Message, Section

# Button name for the run commands
RUN_COMMAND_NAME = "Run command"

DOCS_URL = "https://github.com/kubechat/kubechat#readme"
FEEDBACK_URL = "https://github.com/kubechat/kubechat/issues/new"


class HelpMessage:
    """Builds the help message for a given platform."""

    def __init__(self, platform: CommPlatformIntegration, cluster_name: str, bot_name: str):
        self.btn_builder = ButtonBuilder(bot_name)
        self.bot_name = bot_name
        self.platform = platform
        self.cluster_name = cluster_name

    def build(self, description: str = "") -> Message:
        """Return the help message with interactive sections."""
        getters: List[Callable[[], List[Section]]] = [
            self._cluster,
            self._notifications,
            self._kubectl,
            self._filters,
            self._feedback,
            self._footer,
        ]
        sections: List[Section] = []
        for add in getters:
            sections.extend(add())

        return Message(
            description=description or f"kubechat is now active for {self.cluster_name!r} cluster :rocket:",
            sections=tuple(sections),
        )

    def _cluster(self) -> List[Section]:
        return [
            Section(
                header="Using multiple instances",
                description=(
                    f"If you are running multiple kubechat instances in the same channel to interact "
                    f"with {self.cluster_name}, make sure to specify the cluster name when typing commands."
                ),
                body=Body(code_block=f"--cluster-name={self.cluster_name}\n"),
            ),
            Section(
                header="Ping your cluster",
                description="Check the status of connected Kubernetes cluster(s).",
                buttons=(self.btn_builder.for_command_with_desc_cmd("Check status", "ping"),),
            ),
        ]

    def _notifications(self) -> List[Section]:
        return [
            Section(
                header="Manage incoming notifications",
                body=Body(code_block=f"{self.bot_name} notifier [start|stop|status|showconfig]\n"),
                buttons=(
                    self.btn_builder.for_command_without_desc("Start notifications", "notifier start"),
                    self.btn_builder.for_command_without_desc("Stop notifications", "notifier stop"),
                    self.btn_builder.for_command_without_desc("Get status", "notifier status"),
                ),
            ),
            Section(
                header="Notification settings for this channel",
                description="By default, kubechat will notify only about cluster errors and recommendations.",
                buttons=(
                    self.btn_builder.for_command_with_desc_cmd(
                        "Adjust notifications", "edit SourceBindings", ButtonStyle.PRIMARY
                    ),
                ),
            ),
        ]

    def _kubectl(self) -> List[Section]:
        if self.platform.is_interactive:
            return [
                Section(
                    header="Interactive kubectl - no typing!",
                    buttons=(self.btn_builder.for_command_with_desc_cmd("kubectl", "kubectl", ButtonStyle.PRIMARY),),
                ),
                Section(
                    description="Alternatively use kubectl as usual with all supported commands",
                    buttons=(
                        self.btn_builder.for_command(
                            "List commands", "commands list", "k | kc | kubectl [command] [options] [flags]"
                        ),
                    ),
                ),
            ]

        # without the kubectl command builder
        return [
            Section(
                header="Run kubectl commands (if enabled)",
                description=f"You can run kubectl commands directly from {self.platform.value.title()}!",
                buttons=(
                    self.btn_builder.for_command_with_desc_cmd(RUN_COMMAND_NAME, "kubectl get services"),
                    self.btn_builder.for_command_with_desc_cmd(RUN_COMMAND_NAME, "kubectl get pods"),
                    self.btn_builder.for_command_with_desc_cmd(RUN_COMMAND_NAME, "kubectl get deployments"),
                ),
            ),
            Section(
                description="To list all supported kubectl commands",
                buttons=(self.btn_builder.for_command_with_desc_cmd("List commands", "commands list"),),
            ),
        ]

    def _filters(self) -> List[Section]:
        return [
            Section(
                header="Filters (advanced)",
                body=Body(
                    plaintext=(
                        "Filters decide which events reach this channel. "
                        "Use `filters list` to see them and `filters enable|disable <name>` to toggle one."
                    )
                ),
                buttons=(self.btn_builder.for_command_with_desc_cmd("List filters", "filters list"),),
            ),
        ]

    def _feedback(self) -> List[Section]:
        return [
            Section(
                header="Angry? Amazed?",
                buttons=(
                    self.btn_builder.description_url("Give feedback", "feedback", FEEDBACK_URL, ButtonStyle.PRIMARY),
                ),
            ),
        ]

    def _footer(self) -> List[Section]:
        return [
            Section(buttons=(self.btn_builder.for_url("Read our docs", DOCS_URL),)),
        ]
