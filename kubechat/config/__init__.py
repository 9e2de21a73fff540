"""Process-level settings sourced from the environment."""

from .provider import APIConfig, ConfigProvider, EnvConfigProvider, RuntimeConfig

__all__ = ["APIConfig", "ConfigProvider", "EnvConfigProvider", "RuntimeConfig"]
