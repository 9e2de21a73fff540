"""Configuration provider following Black Box Design principles."""
import os
from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass
class APIConfig:
    """HTTP adapter configuration."""
    port: int
    host: str
    debug: bool
    log_level: str


@dataclass
class RuntimeConfig:
    """Policy source and collaborator configuration."""
    config_path: str
    redis_url: str
    redis_password: Optional[str]
    command_timeout: int

    @property
    def persistence_enabled(self) -> bool:
        """Redis persistence is optional; without it changes stay in memory."""
        return bool(self.redis_url)


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_api_config(self) -> APIConfig:
        """Get API configuration."""
        ...

    def get_runtime_config(self) -> RuntimeConfig:
        """Get runtime configuration."""
        ...


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def get_api_config(self) -> APIConfig:
        """Get API configuration from environment variables."""
        return APIConfig(
            port=int(os.getenv("API_PORT", "8080")),
            host=os.getenv("API_HOST", "0.0.0.0"),
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    def get_runtime_config(self) -> RuntimeConfig:
        """Get runtime configuration from environment variables."""
        timeout = int(os.getenv("COMMAND_TIMEOUT", "30"))
        if timeout < 1 or timeout > 300:
            raise ValueError(f"COMMAND_TIMEOUT must be between 1 and 300 seconds, got {timeout}")

        return RuntimeConfig(
            config_path=os.getenv("KUBECHAT_CONFIG_PATH", "/etc/kubechat/config.yaml"),
            redis_url=os.getenv("REDIS_URL", ""),
            redis_password=os.getenv("REDIS_PASSWORD"),
            command_timeout=timeout,
        )
