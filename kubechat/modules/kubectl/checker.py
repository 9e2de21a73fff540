"""
Execution-time checker.

The guard decides what is offered; the checker is authoritative for what
actually runs.
"""

import logging
from typing import List, Sequence

from .merger import EnabledKubectl
from .verbs import KUBECTL_VERBS

logger = logging.getLogger("kubechat.kubectl.checker")


class Checker:
    """Checks a concrete command against the effective policy."""

    def is_known_verb(self, verb: str) -> bool:
        return verb in KUBECTL_VERBS

    def is_verb_allowed(self, policy: EnabledKubectl, verb: str) -> bool:
        return self.is_known_verb(verb) and verb in policy.active_verbs

    def is_namespace_allowed(self, policy: EnabledKubectl, namespace: str) -> bool:
        if not policy.enabled:
            return False
        return policy.namespaces.is_allowed(namespace)

    def is_all_namespaces_allowed(self, policy: EnabledKubectl) -> bool:
        return policy.enabled and policy.namespaces.allows_all()

    def filter_namespaces(self, policy: EnabledKubectl, candidates: Sequence[str]) -> List[str]:
        """Keep the candidate namespaces the policy allows, in order."""
        allowed = [ns for ns in candidates if self.is_namespace_allowed(policy, ns)]
        logger.debug(f"{len(allowed)} of {len(candidates)} namespaces allowed")
        return allowed
