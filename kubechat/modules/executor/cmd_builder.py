"""
Interactive kubectl command builder.

The builder keeps no state between clicks. Every button it emits carries the
whole command accumulated so far plus the newly chosen token, so the step is
derived from the tokens alone:

    kc-cmd-builder                          -> pick a verb
    kc-cmd-builder get                      -> pick a resource type
    kc-cmd-builder get pods                 -> pick a namespace
    kc-cmd-builder logs pods -n default     -> pick a resource name
    kc-cmd-builder get pods -n default      -> ready to run

Typing the same text by hand reaches the same step. Each step merges the
policy again and re-checks every token already present.
"""

import asyncio
import logging
import shlex
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple

from ...errors import CommandExecutionError, UnknownResourceError, UnsupportedVerbError, VerbNotSupportedError
from ..config import Config
from ..interactive import (
    RUN_COMMAND_NAME,
    Body,
    Button,
    ButtonBuilder,
    ButtonStyle,
    Message,
    Section,
    plaintext_message,
)
from ..kubectl import (
    KUBECTL_BINARY,
    KUBECTL_VERBS,
    VERBS_REQUIRING_NAME,
    VERBS_WITHOUT_RESOURCE,
    Checker,
    CommandGuard,
    EnabledKubectl,
    Merger,
    Resource,
    is_kubectl_alias,
)
from .interfaces import NamespaceLister, ResourceNameLister
from .responses import permission_denied_message

logger = logging.getLogger("kubechat.executor.builder")

BUILDER_COMMAND = "kc-cmd-builder"

# Chat platforms cap the number of buttons in one block
MAX_OPTIONS = 25

KUBECTL_DISABLED_MSG = "Sorry, kubectl is not enabled on this channel for cluster {cluster!r}."
NO_VERBS_MSG = "Sorry, none of the commands enabled on this channel can be built interactively."
VERB_NOT_ALLOWED_MSG = "Sorry, the {verb!r} command is not allowed on this channel for cluster {cluster!r}."
NO_RESOURCES_MSG = "Sorry, no resource types are enabled for the {verb!r} command on this channel."
KIND_NOT_ALLOWED_MSG = "Sorry, {kind!r} resources are not allowed with the {verb!r} command on this channel."
NAMESPACE_NOT_ALLOWED_MSG = "Sorry, the {namespace!r} Namespace is not allowed on this channel."
NO_NAMESPACES_MSG = "Sorry, none of the Namespaces on cluster {cluster!r} are allowed on this channel."


@dataclass(frozen=True)
class BuilderState:
    """Tokens parsed from a builder command."""

    verb: str = ""
    resource_type: str = ""
    resource_name: str = ""
    namespace: str = ""

    @classmethod
    def parse(cls, args: Sequence[str]) -> "BuilderState":
        """Parse `kc-cmd-builder [verb] [type] [name] [-n ns]`; a bare alias yields the start state."""
        namespace = ""
        positionals: List[str] = []
        tokens = list(args[1:])
        i = 0
        while i < len(tokens):
            token = tokens[i]
            if token in ("-n", "--namespace"):
                if i + 1 < len(tokens):
                    namespace = tokens[i + 1]
                i += 2
                continue
            if token.startswith("--namespace="):
                namespace = token.split("=", 1)[1]
            elif not token.startswith("-"):
                positionals.append(token)
            i += 1

        positionals += ["", "", ""]
        return cls(
            verb=positionals[0],
            resource_type=positionals[1],
            resource_name=positionals[2],
            namespace=namespace,
        )

    def tokens(self) -> List[str]:
        out = [t for t in (self.verb, self.resource_type, self.resource_name) if t]
        if self.namespace:
            out += ["-n", self.namespace]
        return out

    def kubectl_tokens(self) -> List[str]:
        """Tokens of the equivalent kubectl command; a chosen name uses the type/name form."""
        out = [self.verb] if self.verb else []
        if self.resource_type and self.resource_name:
            out.append(f"{self.resource_type}/{self.resource_name}")
        elif self.resource_type:
            out.append(self.resource_type)
        if self.namespace:
            out += ["-n", self.namespace]
        return out

    def with_(self, **changes) -> "BuilderState":
        return replace(self, **changes)


class KubectlCmdBuilder:
    """Builds a kubectl command one button click at a time."""

    def __init__(
        self,
        cfg: Config,
        merger: Merger,
        guard: CommandGuard,
        checker: Checker,
        namespace_lister: NamespaceLister,
        resource_name_lister: ResourceNameLister,
        bot_name: str,
    ):
        self.cfg = cfg
        self.merger = merger
        self.guard = guard
        self.checker = checker
        self.namespace_lister = namespace_lister
        self.resource_name_lister = resource_name_lister
        self.btn_builder = ButtonBuilder(bot_name)

    @property
    def cluster_name(self) -> str:
        return self.cfg.settings.cluster_name

    def can_handle(self, args: Sequence[str]) -> bool:
        if not args:
            return False
        if len(args) == 1 and is_kubectl_alias(args[0]):
            return True
        return args[0] == BUILDER_COMMAND

    def command_prefix(self, args: Sequence[str]) -> str:
        """Anonymized form: the builder marker plus known verb and type."""
        state = BuilderState.parse(args)
        words = [BUILDER_COMMAND]
        if state.verb in KUBECTL_VERBS:
            words.append(state.verb)
            if state.resource_type and self.guard.catalogue.lookup(state.resource_type) is not None:
                words.append(state.resource_type)
        return " ".join(words)

    async def do(self, args: Sequence[str], bindings: Sequence[str]) -> Message:
        """
        Render the next step of the builder.

        Args:
            args: A bare kubectl alias or the builder marker followed by tokens
            bindings: Executor bindings of the conversation

        Returns:
            The next selection, the ready command, or a permission-denied Message
        """
        state = BuilderState.parse(args)
        policy = self.merger.merge_for_bindings(bindings)
        if not policy.enabled:
            return permission_denied_message(KUBECTL_DISABLED_MSG.format(cluster=self.cluster_name))

        verbs = self.guard.filter_supported_verbs(policy.active_verbs)
        if not state.verb:
            if not verbs:
                return plaintext_message(NO_VERBS_MSG)
            return self._select("Select command", "Which kubectl command do you want to run?", state, "verb", verbs)

        if state.verb not in verbs:
            return permission_denied_message(VERB_NOT_ALLOWED_MSG.format(verb=state.verb, cluster=self.cluster_name))

        if state.verb in VERBS_WITHOUT_RESOURCE:
            return self._ready(state.with_(resource_type="", resource_name="", namespace=""))

        try:
            allowed = self.guard.get_allowed_resources_for_verb(state.verb, policy.active_resources)
        except UnsupportedVerbError as e:
            logger.warning(f"Builder offered an unsupported verb: {e}")
            return permission_denied_message(VERB_NOT_ALLOWED_MSG.format(verb=state.verb, cluster=self.cluster_name))

        if not state.resource_type:
            if not allowed:
                return plaintext_message(NO_RESOURCES_MSG.format(verb=state.verb))
            return self._select(
                "Select resource type",
                f"Which resource do you want to `{state.verb}`?",
                state,
                "resource_type",
                [r.name for r in allowed],
            )

        resource = self._resolve(state, allowed)
        if resource is None:
            return permission_denied_message(KIND_NOT_ALLOWED_MSG.format(kind=state.resource_type, verb=state.verb))
        state = state.with_(resource_type=resource.name)

        if resource.namespaced:
            if not state.namespace:
                namespaces = await self._allowed_namespaces(policy)
                if not namespaces:
                    return permission_denied_message(NO_NAMESPACES_MSG.format(cluster=self.cluster_name))
                return self._select("Select namespace", "In which Namespace?", state, "namespace", namespaces)
            if not self.checker.is_namespace_allowed(policy, state.namespace):
                return permission_denied_message(NAMESPACE_NOT_ALLOWED_MSG.format(namespace=state.namespace))
        elif state.namespace:
            state = state.with_(namespace="")

        if not state.resource_name and state.verb in VERBS_REQUIRING_NAME:
            names = await self._resource_names(resource, state.namespace)
            if not names:
                where = f" in the {state.namespace!r} Namespace" if state.namespace else ""
                return plaintext_message(f"No {resource.name} found{where} on cluster {self.cluster_name!r}.")
            return self._select("Select resource name", f"Which {resource.name}?", state, "resource_name", names)

        names: List[str] = []
        if not state.resource_name:
            names = await self._resource_names(resource, state.namespace)
        return self._ready(state, names)

    def _resolve(self, state: BuilderState, allowed: Sequence[Resource]) -> Optional[Resource]:
        try:
            resource = self.guard.get_resource_details(state.verb, state.resource_type)
        except (UnknownResourceError, VerbNotSupportedError) as e:
            logger.info(f"Stale or invalid builder resource: {e}")
            return None
        if resource not in allowed:
            logger.info(f"Resource {resource.name!r} is no longer allowed for {state.verb!r}")
            return None
        return resource

    async def _allowed_namespaces(self, policy: EnabledKubectl) -> List[str]:
        try:
            candidates = await asyncio.to_thread(self.namespace_lister.list_namespaces)
        except CommandExecutionError as e:
            logger.error(f"Failed to list namespaces: {e}")
            candidates = [policy.default_namespace or self.cfg.settings.default_namespace]
        return self.checker.filter_namespaces(policy, candidates)

    async def _resource_names(self, resource: Resource, namespace: str) -> List[str]:
        ns = namespace if resource.namespaced else None
        try:
            return await asyncio.to_thread(self.resource_name_lister.list_names, resource.name, ns)
        except CommandExecutionError as e:
            logger.error(f"Failed to list {resource.name}: {e}")
            return []

    def _builder_cmd(self, state: BuilderState) -> str:
        return shlex.join([BUILDER_COMMAND] + state.tokens())

    def _select(self, header: str, description: str, state: BuilderState, field: str, options: Sequence[str]) -> Message:
        buttons: List[Button] = []
        for option in options[:MAX_OPTIONS]:
            next_state = state.with_(**{field: option})
            buttons.append(self.btn_builder.for_command_without_desc(option, self._builder_cmd(next_state)))

        context: Tuple[str, ...] = ()
        if len(options) > MAX_OPTIONS:
            context = (f"Showing {MAX_OPTIONS} of {len(options)} options. Type the command to pick another one.",)

        return Message(
            sections=(
                Section(
                    header=header,
                    description=description,
                    buttons=tuple(buttons),
                    context=context,
                ),
            ),
            only_visible_for_you=True,
            replace_original=bool(state.verb),
        )

    def _ready(self, state: BuilderState, names: Sequence[str] = ()) -> Message:
        kubectl_cmd = shlex.join([KUBECTL_BINARY] + state.kubectl_tokens())
        sections = [
            Section(
                header="Your kubectl command is ready",
                body=Body(code_block=kubectl_cmd),
                buttons=(self.btn_builder.for_command_without_desc(RUN_COMMAND_NAME, kubectl_cmd, ButtonStyle.PRIMARY),),
            )
        ]
        if names:
            buttons = tuple(
                self.btn_builder.for_command_without_desc(name, self._builder_cmd(state.with_(resource_name=name)))
                for name in names[:MAX_OPTIONS]
            )
            sections.append(Section(description="Or narrow it down to a single resource:", buttons=buttons))

        return Message(sections=tuple(sections), only_visible_for_you=True, replace_original=True)
