"""
Kubectl Policy Module - Black Box Interface

Purpose: Decide which kubectl commands a conversation may see and run
Interface: merge(), Merger, CommandGuard, ResourceCatalogue, Checker
Hidden: Override semantics, alias resolution, namespace pattern matching

Everything here is a pure function of the configuration snapshot; nothing
executes commands or talks to the cluster.
"""

from .checker import Checker
from .guard import CommandGuard, Resource, ResourceCatalogue
from .merger import EnabledKubectl, Merger, merge
from .verbs import (
    BUILDER_VERBS,
    FORBIDDEN_FLAGS,
    IMPLIED_RESOURCE_VERBS,
    KUBECTL_ALIASES,
    KUBECTL_BINARY,
    KUBECTL_VERBS,
    NAME_ONLY_VERBS,
    VERBS_REQUIRING_NAME,
    VERBS_WITH_SUBCOMMAND,
    VERBS_WITHOUT_RESOURCE,
    forbidden_flag,
    is_kubectl_alias,
)

__all__ = [
    "BUILDER_VERBS",
    "Checker",
    "CommandGuard",
    "EnabledKubectl",
    "FORBIDDEN_FLAGS",
    "IMPLIED_RESOURCE_VERBS",
    "KUBECTL_ALIASES",
    "KUBECTL_BINARY",
    "KUBECTL_VERBS",
    "Merger",
    "NAME_ONLY_VERBS",
    "Resource",
    "ResourceCatalogue",
    "VERBS_REQUIRING_NAME",
    "VERBS_WITH_SUBCOMMAND",
    "VERBS_WITHOUT_RESOURCE",
    "forbidden_flag",
    "is_kubectl_alias",
    "merge",
]
