"""
kubechat configuration models.

These models define the structure of the policy source (the YAML
configuration file). Every optional field that takes part in layered
merging is tri-state: ``None`` means "inherit", anything else is an
explicit value.
"""

import re
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .catalogue import DEFAULT_RESOURCES


class CommPlatformIntegration(str, Enum):
    """Chat platforms the bot can be connected to."""

    SLACK = "slack"
    SOCKET_SLACK = "socketSlack"
    MATTERMOST = "mattermost"
    TEAMS = "teams"
    DISCORD = "discord"
    WEBHOOK = "webhook"

    @property
    def is_interactive(self) -> bool:
        """Platforms able to render the interactive kubectl builder."""
        return self in (CommPlatformIntegration.SOCKET_SLACK, CommPlatformIntegration.WEBHOOK)


class _Model(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


# Executors


class Namespaces(_Model):
    """Namespace include/exclude lists; entries are anchored regular expressions."""

    include: Tuple[str, ...] = ()
    exclude: Tuple[str, ...] = ()

    @field_validator("include", "exclude")
    @classmethod
    def validate_patterns(cls, v):
        """Reject patterns that do not compile."""
        for pattern in v:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"Invalid namespace pattern {pattern!r}: {e}")
        return v

    def is_allowed(self, namespace: str) -> bool:
        """Check if a single namespace is included and not excluded."""
        if not namespace:
            return False
        if any(re.fullmatch(pattern, namespace) for pattern in self.exclude):
            return False
        return any(re.fullmatch(pattern, namespace) for pattern in self.include)

    def allows_all(self) -> bool:
        """True when every namespace is allowed, so --all-namespaces is safe."""
        return not self.exclude and ".*" in self.include


class KubectlCommands(_Model):
    verbs: Optional[Tuple[str, ...]] = None
    resources: Optional[Tuple[str, ...]] = None


class Kubectl(_Model):
    """One kubectl policy fragment, bound to channels by executor name."""

    enabled: Optional[bool] = None
    namespaces: Optional[Namespaces] = None
    commands: KubectlCommands = KubectlCommands()
    default_namespace: Optional[str] = Field(None, alias="defaultNamespace")
    restrict_access: Optional[bool] = Field(None, alias="restrictAccess")


class Executors(_Model):
    kubectl: Optional[Kubectl] = None


# Sources


class Source(_Model):
    """Notification source. Only the display name matters to the command plane."""

    display_name: str = Field("", alias="displayName")
    kubernetes: Dict[str, Any] = Field(default_factory=dict)


# Communications


class ChannelNotification(_Model):
    disabled: bool = False


class ChannelBindings(_Model):
    executors: Tuple[str, ...] = ()
    sources: Tuple[str, ...] = ()


class Channel(_Model):
    name: str
    notification: ChannelNotification = ChannelNotification()
    bindings: ChannelBindings = ChannelBindings()


class Platform(_Model):
    enabled: bool = False
    bot_name: str = Field("", alias="botName")
    bot_id: str = Field("", alias="botID")
    token: str = ""
    channels: Dict[str, Channel] = Field(default_factory=dict)

    def channel_by_name(self, name: str) -> Optional[Tuple[str, Channel]]:
        """Look up a channel by its platform name, returning (alias, channel)."""
        for alias, channel in self.channels.items():
            if channel.name == name:
                return alias, channel
        return None


class CommunicationGroup(_Model):
    slack: Optional[Platform] = None
    socket_slack: Optional[Platform] = Field(None, alias="socketSlack")
    mattermost: Optional[Platform] = None
    teams: Optional[Platform] = None
    discord: Optional[Platform] = None
    webhook: Optional[Platform] = None

    def platform(self, integration: CommPlatformIntegration) -> Optional[Platform]:
        """Get the platform settings for an integration, if configured."""
        return {
            CommPlatformIntegration.SLACK: self.slack,
            CommPlatformIntegration.SOCKET_SLACK: self.socket_slack,
            CommPlatformIntegration.MATTERMOST: self.mattermost,
            CommPlatformIntegration.TEAMS: self.teams,
            CommPlatformIntegration.DISCORD: self.discord,
            CommPlatformIntegration.WEBHOOK: self.webhook,
        }[integration]


# Filters and resources


class FilterSetting(_Model):
    enabled: bool = True
    description: str = ""


class ResourceConfig(_Model):
    """Catalogue entry describing one addressable resource kind."""

    name: str = Field(..., min_length=1)
    aliases: Tuple[str, ...] = ()
    namespaced: bool = True
    verbs: Tuple[str, ...] = ()


# Root


class Settings(_Model):
    cluster_name: str = Field("not-configured", alias="clusterName")
    default_namespace: str = Field("default", alias="defaultNamespace")
    reload_interval_seconds: int = Field(30, alias="reloadIntervalSeconds", ge=1, le=3600)


class Config(_Model):
    """Root of the policy source."""

    settings: Settings = Settings()
    sources: Dict[str, Source] = Field(default_factory=dict)
    executors: Dict[str, Executors] = Field(default_factory=dict)
    communications: Dict[str, CommunicationGroup] = Field(default_factory=dict)
    filters: Dict[str, FilterSetting] = Field(default_factory=dict)
    resources: Tuple[ResourceConfig, ...] = Field(
        default_factory=lambda: tuple(ResourceConfig.model_validate(r) for r in DEFAULT_RESOURCES)
    )

    def kubectl_fragments(self) -> Dict[str, Kubectl]:
        """Executor bindings that carry a kubectl fragment."""
        return {name: ex.kubectl for name, ex in self.executors.items() if ex.kubectl is not None}
