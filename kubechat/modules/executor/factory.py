"""
Executor factory.

The factory is the only long-lived object of the executor module. Each call
takes one configuration snapshot and wires a fresh dispatcher around it.
"""

import logging
from dataclasses import dataclass

from ..config import CommPlatformIntegration, ConfigHolder
from ..kubectl import Checker, CommandGuard, Merger, ResourceCatalogue
from .cmd_builder import KubectlCmdBuilder
from .command import Conversation
from .default import DefaultExecutor
from .edit import EditExecutor
from .filters import FilterExecutor
from .interfaces import (
    AnalyticsReporter,
    CommandRunner,
    ConfigPersistenceManager,
    Executor,
    FilterEngine,
    NamespaceLister,
    NotifierHandler,
    ResourceNameLister,
)
from .kubectl import KubectlExecutor
from .notifier import NotifierExecutor

logger = logging.getLogger("kubechat.executor.factory")


@dataclass
class DefaultExecutorFactoryParams:
    """Collaborators shared by every dispatcher."""

    config_source: ConfigHolder
    cmd_runner: CommandRunner
    cfg_manager: ConfigPersistenceManager
    analytics_reporter: AnalyticsReporter
    namespace_lister: NamespaceLister
    resource_name_lister: ResourceNameLister
    filter_engine: FilterEngine


@dataclass
class NewDefaultInput:
    """Per-event input of the factory."""

    comm_group_name: str
    platform: CommPlatformIntegration
    notifier_handler: NotifierHandler
    conversation: Conversation
    message: str
    user: str = ""


class DefaultExecutorFactory:
    """Builds one dispatcher per inbound command."""

    def __init__(self, params: DefaultExecutorFactoryParams):
        self.params = params

    def new_default(self, cfg: NewDefaultInput) -> Executor:
        """
        Create a dispatcher bound to the current configuration snapshot.

        Safe to call concurrently; nothing built here is shared between calls.
        """
        p = self.params
        snapshot = p.config_source.get()
        bot_name = cfg.notifier_handler.bot_name()

        merger = Merger(snapshot.executors)
        guard = CommandGuard(ResourceCatalogue(snapshot.resources))
        checker = Checker()
        cluster_name = snapshot.settings.cluster_name

        logger.debug(
            f"New dispatcher for conversation {cfg.conversation.id!r} "
            f"(bindings: {list(cfg.conversation.executor_bindings)})"
        )

        return DefaultExecutor(
            cfg=snapshot,
            merger=merger,
            analytics_reporter=p.analytics_reporter,
            kubectl_executor=KubectlExecutor(snapshot, merger, guard, checker, p.cmd_runner),
            cmd_builder=KubectlCmdBuilder(
                snapshot,
                merger,
                guard,
                checker,
                p.namespace_lister,
                p.resource_name_lister,
                bot_name,
            ),
            notifier_executor=NotifierExecutor(snapshot, p.cfg_manager),
            edit_executor=EditExecutor(snapshot, p.cfg_manager, bot_name),
            filter_executor=FilterExecutor(p.filter_engine, p.cfg_manager, cluster_name),
            notifier_handler=cfg.notifier_handler,
            conversation=cfg.conversation,
            comm_group_name=cfg.comm_group_name,
            platform=cfg.platform,
            message=cfg.message,
            user=cfg.user,
            bot_name=bot_name,
        )
