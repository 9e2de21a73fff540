"""
Policy merger.

Folds the kubectl fragments bound to a conversation into one effective
policy. Every field is merged independently: the last binding that sets it
wins, a field set by no binding keeps its zero value.
"""

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Tuple

from ..config import Executors, Kubectl, Namespaces


@dataclass(frozen=True)
class EnabledKubectl:
    """Effective kubectl policy for one conversation."""

    enabled: bool = False
    allowed_verbs: Tuple[str, ...] = ()
    allowed_resources: Tuple[str, ...] = ()
    namespaces: Namespaces = field(default_factory=Namespaces)
    default_namespace: str = ""
    restrict_access: bool = False

    @property
    def active_verbs(self) -> Tuple[str, ...]:
        """Verbs usable right now; a disabled policy has none."""
        return self.allowed_verbs if self.enabled else ()

    @property
    def active_resources(self) -> Tuple[str, ...]:
        return self.allowed_resources if self.enabled else ()


def merge(fragments: Mapping[str, Kubectl], binding_order: Iterable[str]) -> EnabledKubectl:
    """
    Merge kubectl fragments in binding order.

    Args:
        fragments: Fragment per binding name
        binding_order: Binding names; later bindings override earlier ones

    Returns:
        Effective policy. Unknown binding names are skipped.
    """
    enabled = False
    verbs: Tuple[str, ...] = ()
    resources: Tuple[str, ...] = ()
    namespaces = Namespaces()
    default_ns = ""
    restrict_access = False

    for name in binding_order:
        fragment = fragments.get(name)
        if fragment is None:
            continue

        if fragment.enabled is not None:
            enabled = fragment.enabled
        if fragment.commands.verbs is not None:
            verbs = fragment.commands.verbs
        if fragment.commands.resources is not None:
            resources = fragment.commands.resources
        if fragment.namespaces is not None:
            namespaces = fragment.namespaces
        if fragment.default_namespace is not None:
            default_ns = fragment.default_namespace
        if fragment.restrict_access is not None:
            restrict_access = fragment.restrict_access

    return EnabledKubectl(
        enabled=enabled,
        allowed_verbs=tuple(dict.fromkeys(verbs)),
        allowed_resources=tuple(dict.fromkeys(resources)),
        namespaces=namespaces,
        default_namespace=default_ns,
        restrict_access=restrict_access,
    )


class Merger:
    """Merges executor configuration for a list of bindings."""

    def __init__(self, executors: Mapping[str, Executors]):
        self._fragments = {
            name: executor.kubectl for name, executor in executors.items() if executor.kubectl is not None
        }

    def merge_for_bindings(self, bindings: Iterable[str]) -> EnabledKubectl:
        return merge(self._fragments, bindings)
