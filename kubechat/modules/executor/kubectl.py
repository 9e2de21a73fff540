"""
Kubectl sub-handler.

Validates a typed (or clicked) kubectl command against the effective policy
and hands it to the command runner.
"""

import asyncio
import logging
import shlex
from typing import List, Optional, Sequence, Tuple

from ...errors import (
    InvalidCommandError,
    PermissionDeniedError,
    UnknownResourceError,
    VerbNotSupportedError,
)
from ..config import Config
from ..kubectl import (
    IMPLIED_RESOURCE_VERBS,
    KUBECTL_BINARY,
    NAME_ONLY_VERBS,
    VERBS_WITH_SUBCOMMAND,
    VERBS_WITHOUT_RESOURCE,
    Checker,
    CommandGuard,
    EnabledKubectl,
    Merger,
    Resource,
    forbidden_flag,
    is_kubectl_alias,
)
from .command import ANONYMIZED_INVALID_VERB, positional_args, run_mutation
from .interfaces import CommandRunner

logger = logging.getLogger("kubechat.executor.kubectl")

NOT_AUTHORIZED_MSG = "Sorry, this channel is not authorized to execute kubectl commands on cluster {cluster!r}."
VERB_NOT_ALLOWED_MSG = (
    "Sorry, the kubectl {verb!r} command cannot be executed on cluster {cluster!r}. "
    "Use 'commands list' to see allowed commands."
)
KIND_NOT_ALLOWED_MSG = (
    "Sorry, the kubectl command is not authorized to work with {kind!r} resources on cluster {cluster!r}. "
    "Use 'commands list' to see allowed commands."
)
NAMESPACE_NOT_ALLOWED_MSG = (
    "Sorry, the kubectl command cannot be executed in the {namespace!r} Namespace on cluster {cluster!r}."
)
ALL_NAMESPACES_NOT_ALLOWED_MSG = (
    "Sorry, the kubectl command cannot be executed across all Namespaces on cluster {cluster!r}."
)
FLAG_AFTER_VERB_MSG = (
    "Please specify the resource name after the verb, and all flags after the resource name. "
    "Format <verb> <resource> [flags]"
)
MISSING_RESOURCE_MSG = "Please specify the resource type. Format <verb> <resource> [flags]"
FLAG_NOT_ALLOWED_MSG = "Sorry, the {flag!r} flag cannot be used with kubectl commands on cluster {cluster!r}."
INVALID_BOOL_FLAG_MSG = "Invalid value {value!r} for the {flag!r} flag."

_NAMESPACE_FLAGS = ("-n", "--namespace")
_ALL_NAMESPACES_FLAGS = ("-A", "--all-namespaces")

# values accepted by kubectl for boolean flags
_TRUE_VALUES = frozenset({"1", "t", "T", "true", "TRUE", "True"})
_FALSE_VALUES = frozenset({"0", "f", "F", "false", "FALSE", "False"})


def _parse_bool_flag(flag: str, value: str) -> bool:
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise InvalidCommandError(INVALID_BOOL_FLAG_MSG.format(value=value, flag=flag))


def parse_namespace(args: Sequence[str]) -> Tuple[Optional[str], bool]:
    """
    Find the namespace flags of a command.

    Returns:
        The namespace (None if absent) and whether all namespaces were requested

    Raises:
        InvalidCommandError: If the all-namespaces flag has a non-boolean value
    """
    namespace: Optional[str] = None
    all_namespaces = False
    for i, arg in enumerate(args):
        if arg in _NAMESPACE_FLAGS:
            if i + 1 < len(args):
                namespace = args[i + 1]
        elif arg.startswith("--namespace="):
            namespace = arg.split("=", 1)[1]
        elif arg.startswith("-n") and len(arg) > 2 and not arg.startswith("--"):
            namespace = arg[2:].lstrip("=")
        elif arg.split("=", 1)[0] in _ALL_NAMESPACES_FLAGS:
            flag, _, value = arg.partition("=")
            all_namespaces = _parse_bool_flag(flag, value) if "=" in arg else True
    return namespace, all_namespaces


def resource_types(verb: str, args: Sequence[str]) -> List[str]:
    """
    Resource types addressed by a command.

    Args:
        verb: The kubectl verb
        args: Arguments after the verb

    Returns:
        Types as typed by the user; empty if none could be determined
    """
    if verb in VERBS_WITHOUT_RESOURCE:
        return []

    positionals = positional_args(args)
    if verb in VERBS_WITH_SUBCOMMAND:
        positionals = positionals[1:]

    implied = IMPLIED_RESOURCE_VERBS.get(verb)
    if implied is not None:
        if verb in NAME_ONLY_VERBS or not positionals or "/" not in positionals[0]:
            return [implied]

    if not positionals:
        return []

    token = positionals[0]
    if verb == "explain":
        # explain takes field paths such as pods.spec.containers
        return [token.split(".", 1)[0]]
    if "/" in token:
        # type/name, possibly repeated
        return list(dict.fromkeys(p.split("/", 1)[0] for p in positionals if "/" in p))
    return [t for t in token.split(",") if t]


class KubectlExecutor:
    """Runs kubectl commands permitted by the effective policy."""

    def __init__(
        self,
        cfg: Config,
        merger: Merger,
        guard: CommandGuard,
        checker: Checker,
        runner: CommandRunner,
    ):
        self.cfg = cfg
        self.merger = merger
        self.guard = guard
        self.checker = checker
        self.runner = runner

    @property
    def cluster_name(self) -> str:
        return self.cfg.settings.cluster_name

    def can_handle(self, args: Sequence[str]) -> bool:
        """An alias followed by anything that is not a builder request."""
        return len(args) >= 2 and is_kubectl_alias(args[0])

    def command_prefix(self, args: Sequence[str]) -> str:
        """Anonymized form of the command: verb and resource type only."""
        if len(args) < 2:
            return KUBECTL_BINARY
        verb = args[1]
        if not self.checker.is_known_verb(verb):
            return f"{KUBECTL_BINARY} {ANONYMIZED_INVALID_VERB}"

        words = [KUBECTL_BINARY, verb]
        for kind in resource_types(verb, args[2:])[:1]:
            if self.guard.catalogue.lookup(kind) is not None:
                words.append(kind)
        return " ".join(words)

    def build_command(self, args: Sequence[str], bindings: Sequence[str], is_authenticated: bool) -> List[str]:
        """
        Validate a command and resolve its final argv.

        Args:
            args: Alias, verb and the rest of the command
            bindings: Executor bindings of the conversation
            is_authenticated: Whether the channel is authenticated

        Returns:
            argv to hand to the runner

        Raises:
            PermissionDeniedError: If the policy forbids the command
            InvalidCommandError: If the command is malformed
        """
        verb = args[1]
        rest = list(args[2:])
        policy = self.merger.merge_for_bindings(bindings)

        if policy.restrict_access and not is_authenticated:
            raise PermissionDeniedError(NOT_AUTHORIZED_MSG.format(cluster=self.cluster_name))

        if not self.checker.is_verb_allowed(policy, verb):
            raise PermissionDeniedError(VERB_NOT_ALLOWED_MSG.format(verb=verb, cluster=self.cluster_name))

        if rest and rest[0].startswith("-") and verb not in VERBS_WITHOUT_RESOURCE:
            raise InvalidCommandError(FLAG_AFTER_VERB_MSG)

        flag = forbidden_flag(rest)
        if flag is not None:
            raise PermissionDeniedError(FLAG_NOT_ALLOWED_MSG.format(flag=flag, cluster=self.cluster_name))

        resources = self._check_resources(policy, verb, rest)

        namespace, all_namespaces = parse_namespace(rest)
        if all_namespaces:
            if not self.checker.is_all_namespaces_allowed(policy):
                raise PermissionDeniedError(ALL_NAMESPACES_NOT_ALLOWED_MSG.format(cluster=self.cluster_name))
        elif namespace is not None:
            self._check_namespace(policy, namespace)
        elif self._is_namespaced(verb, resources):
            namespace = policy.default_namespace or self.cfg.settings.default_namespace
            self._check_namespace(policy, namespace)
            rest += ["-n", namespace]

        return [KUBECTL_BINARY, verb] + rest

    async def execute(self, args: Sequence[str], bindings: Sequence[str], is_authenticated: bool) -> Tuple[str, str]:
        """
        Validate and run a command.

        Returns:
            The command as run (for display) and its combined output

        Raises:
            PermissionDeniedError: If the policy forbids the command
            InvalidCommandError: If the command is malformed
            CommandExecutionError: If the runner fails
        """
        argv = self.build_command(args, bindings, is_authenticated)
        display = shlex.join(argv)
        logger.info(f"Executing {display!r} on cluster {self.cluster_name!r}")

        out = await run_mutation(lambda: asyncio.to_thread(self.runner.run_combined_output, argv))
        return display, out

    def _check_resources(self, policy: EnabledKubectl, verb: str, rest: Sequence[str]) -> List[Resource]:
        kinds = resource_types(verb, rest)
        if not kinds and verb not in VERBS_WITHOUT_RESOURCE:
            raise InvalidCommandError(MISSING_RESOURCE_MSG)

        allowed = self.guard.get_allowed_resources_for_verb(verb, policy.active_resources)
        resolved: List[Resource] = []
        for kind in kinds:
            try:
                resource = self.guard.get_resource_details(verb, kind)
            except (UnknownResourceError, VerbNotSupportedError) as e:
                logger.debug(f"Rejected kind {kind!r} for verb {verb!r}: {e}")
                raise PermissionDeniedError(KIND_NOT_ALLOWED_MSG.format(kind=kind, cluster=self.cluster_name))
            if resource not in allowed:
                raise PermissionDeniedError(KIND_NOT_ALLOWED_MSG.format(kind=kind, cluster=self.cluster_name))
            resolved.append(resource)
        return resolved

    def _check_namespace(self, policy: EnabledKubectl, namespace: str) -> None:
        if not self.checker.is_namespace_allowed(policy, namespace):
            raise PermissionDeniedError(
                NAMESPACE_NOT_ALLOWED_MSG.format(namespace=namespace, cluster=self.cluster_name)
            )

    @staticmethod
    def _is_namespaced(verb: str, resources: Sequence[Resource]) -> bool:
        if verb == "events":
            return True
        return any(r.namespaced for r in resources)
