"""
Executor Module - Black Box Interface

Purpose: Turn one chat command into one response Message
Interface: DefaultExecutorFactory.new_default(), DefaultExecutor.execute()
Hidden: Command parsing, routing, builder steps, policy checks, kubectl invocation

Collaborators (runner, listers, persistence, analytics, notifier state,
filters) are injected as Protocol implementations, so the module can run
against real kubectl and Redis or against in-memory fakes.
"""

from .analytics import LoggingAnalyticsReporter
from .cmd_builder import BUILDER_COMMAND, BuilderState, KubectlCmdBuilder
from .command import ANONYMIZED_INVALID_VERB, Conversation, Origin
from .default import DefaultExecutor
from .edit import EditExecutor
from .factory import DefaultExecutorFactory, DefaultExecutorFactoryParams, NewDefaultInput
from .filters import FilterExecutor, InMemoryFilterEngine
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
from .runner import KubectlNamespaceLister, KubectlResourceNameLister, KubectlRunner

__all__ = [
    "ANONYMIZED_INVALID_VERB",
    "AnalyticsReporter",
    "BUILDER_COMMAND",
    "BuilderState",
    "CommandRunner",
    "ConfigPersistenceManager",
    "Conversation",
    "DefaultExecutor",
    "DefaultExecutorFactory",
    "DefaultExecutorFactoryParams",
    "EditExecutor",
    "Executor",
    "FilterEngine",
    "FilterExecutor",
    "InMemoryFilterEngine",
    "KubectlCmdBuilder",
    "KubectlExecutor",
    "KubectlNamespaceLister",
    "KubectlResourceNameLister",
    "KubectlRunner",
    "LoggingAnalyticsReporter",
    "NamespaceLister",
    "NewDefaultInput",
    "NotifierExecutor",
    "NotifierHandler",
    "Origin",
    "ResourceNameLister",
]
