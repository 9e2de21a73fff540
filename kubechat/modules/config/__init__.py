"""
Config Module - Black Box Interface

Purpose: Policy source for the command plane
Interface: load_config(), ConfigHolder.get(), ConfigHolder.publish(), ConfigWatcher
Hidden: YAML parsing, validation, change detection, reload thread

Can be replaced with different config systems (ConfigMap watch, Consul, etcd)
as long as snapshots stay immutable and are published atomically.
"""

from .loader import ConfigHolder, ConfigWatcher, load_config
from .models import (
    Channel,
    ChannelBindings,
    CommPlatformIntegration,
    CommunicationGroup,
    Config,
    Executors,
    FilterSetting,
    Kubectl,
    KubectlCommands,
    Namespaces,
    Platform,
    ResourceConfig,
    Settings,
    Source,
)

__all__ = [
    "Channel",
    "ChannelBindings",
    "CommPlatformIntegration",
    "CommunicationGroup",
    "Config",
    "ConfigHolder",
    "ConfigWatcher",
    "Executors",
    "FilterSetting",
    "Kubectl",
    "KubectlCommands",
    "Namespaces",
    "Platform",
    "ResourceConfig",
    "Settings",
    "Source",
    "load_config",
]
