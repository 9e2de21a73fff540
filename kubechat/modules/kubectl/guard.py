"""
Command guard.

Pure permission filter consulted before any verb/resource pair is offered
to the user or executed. It never touches the cluster.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ...errors import UnknownResourceError, UnsupportedVerbError, VerbNotSupportedError
from ..config import ResourceConfig
from .verbs import BUILDER_VERBS, KUBECTL_VERBS


@dataclass(frozen=True)
class Resource:
    """Descriptor of one addressable resource kind."""

    name: str
    aliases: Tuple[str, ...]
    namespaced: bool
    verbs: Tuple[str, ...]

    @classmethod
    def from_config(cls, cfg: ResourceConfig) -> "Resource":
        return cls(name=cfg.name, aliases=tuple(cfg.aliases), namespaced=cfg.namespaced, verbs=tuple(cfg.verbs))

    def supports(self, verb: str) -> bool:
        return verb in self.verbs


class ResourceCatalogue:
    """Lookup of resource descriptors by canonical name or alias."""

    def __init__(self, resources: Iterable[ResourceConfig]):
        self._resources: List[Resource] = [Resource.from_config(r) for r in resources]
        self._index: Dict[str, Resource] = {}
        for res in self._resources:
            for key in (res.name,) + res.aliases:
                # first definition wins on duplicate aliases
                self._index.setdefault(key.lower(), res)

    def lookup(self, name: str) -> Optional[Resource]:
        return self._index.get(name.lower())

    def __iter__(self):
        return iter(self._resources)

    def __len__(self) -> int:
        return len(self._resources)


class CommandGuard:
    """Answers whether a verb on a resource type may be offered."""

    def __init__(self, catalogue: ResourceCatalogue):
        self.catalogue = catalogue

    def get_allowed_resources_for_verb(self, verb: str, candidate_resources: Sequence[str]) -> List[Resource]:
        """
        Get the candidate resources that support the verb.

        Args:
            verb: kubectl verb
            candidate_resources: Resource names from the effective policy

        Returns:
            Matching descriptors in candidate order. Empty if none support the verb.

        Raises:
            UnsupportedVerbError: If the verb is not a kubectl verb at all
        """
        if verb not in KUBECTL_VERBS:
            raise UnsupportedVerbError(verb)

        allowed: List[Resource] = []
        seen = set()
        for name in candidate_resources:
            res = self.catalogue.lookup(name)
            if res is None or res.name in seen or not res.supports(verb):
                continue
            seen.add(res.name)
            allowed.append(res)
        return allowed

    def get_resource_details(self, verb: str, resource_type: str) -> Resource:
        """
        Resolve a resource by name or alias and check it supports the verb.

        Raises:
            UnknownResourceError: If no resource matches
            VerbNotSupportedError: If the resource does not support the verb
        """
        res = self.catalogue.lookup(resource_type)
        if res is None:
            raise UnknownResourceError(resource_type)
        if not res.supports(verb):
            raise VerbNotSupportedError(verb, res.name)
        return res

    def filter_supported_verbs(self, candidate_verbs: Iterable[str]) -> List[str]:
        """Keep the verbs the interactive builder can present, in caller order."""
        return [verb for verb in dict.fromkeys(candidate_verbs) if verb in BUILDER_VERBS]
