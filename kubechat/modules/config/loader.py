"""
Configuration loading and snapshot publishing.

Readers take an immutable snapshot per command; the watcher publishes new
snapshots atomically so in-flight commands keep a consistent view.
"""

import hashlib
import logging
import threading
import time
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import ValidationError

from .models import Config

logger = logging.getLogger("kubechat.config")


def load_config(path: Union[str, Path]) -> Config:
    """
    Load and validate a configuration file.

    Raises:
        OSError: If the file cannot be read
        yaml.YAMLError: If the file is not valid YAML
        ValidationError: If the document does not match the schema
    """
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Configuration root must be a mapping, got {type(data).__name__}")

    return Config.model_validate(data)


class ConfigHolder:
    """Holds the current read-only configuration snapshot."""

    def __init__(self, config: Optional[Config] = None):
        self._config = config or Config()
        self._lock = threading.RLock()

    def get(self) -> Config:
        """Return the current snapshot. Snapshots are never mutated."""
        with self._lock:
            return self._config

    def publish(self, config: Config) -> None:
        """Replace the current snapshot."""
        with self._lock:
            self._config = config


class ConfigWatcher(ConfigHolder):
    """Configuration holder with hot-reloading from a YAML file."""

    def __init__(self, config_path: Union[str, Path]):
        """
        Initialize the watcher and load the initial configuration.

        Args:
            config_path: Path to the YAML configuration file
        """
        super().__init__()
        self.config_path = Path(config_path)
        self.last_modified: Optional[float] = None
        self.config_hash: Optional[str] = None
        self._watcher_thread: Optional[threading.Thread] = None
        self._stop_watcher = threading.Event()

        self.reload()

    def start(self) -> None:
        """Start background thread to watch for configuration changes."""
        if self._watcher_thread and self._watcher_thread.is_alive():
            return

        self._stop_watcher.clear()
        self._watcher_thread = threading.Thread(
            target=self._watch_config, daemon=True, name="config-watcher"
        )
        self._watcher_thread.start()
        logger.info(f"Configuration watcher started for {self.config_path}")

    def stop(self) -> None:
        """Stop the configuration watcher."""
        self._stop_watcher.set()
        if self._watcher_thread:
            self._watcher_thread.join(timeout=5)

    def _watch_config(self) -> None:
        """Background thread to watch for configuration changes."""
        while not self._stop_watcher.wait(self.get().settings.reload_interval_seconds):
            try:
                if self._config_changed():
                    logger.info("Configuration change detected, reloading...")
                    self.reload()
            except Exception as e:
                logger.error(f"Error in config watcher: {e}")

    def _content_hash(self) -> str:
        with open(self.config_path, "rb") as f:
            return hashlib.sha256(f.read()).hexdigest()

    def _config_changed(self) -> bool:
        """Check if configuration file has changed."""
        try:
            if not self.config_path.exists():
                return False

            current_mtime = self.config_path.stat().st_mtime
            if self.last_modified and current_mtime <= self.last_modified:
                return False

            # mtime alone gives false positives on touch
            if self.config_hash and self._content_hash() == self.config_hash:
                self.last_modified = current_mtime
                return False

            return True

        except OSError as e:
            logger.error(f"Error checking config changes: {e}")
            return False

    def reload(self) -> bool:
        """
        Load the file and publish it as the new snapshot.

        Returns:
            True if a new snapshot was published
        """
        if not self.config_path.exists():
            logger.warning(f"Config file not found: {self.config_path}, keeping current configuration")
            return False

        try:
            new_config = load_config(self.config_path)
            content_hash = self._content_hash()
            mtime = self.config_path.stat().st_mtime
        except (OSError, ValueError, yaml.YAMLError) as e:
            # ValidationError is a ValueError
            if isinstance(e, ValidationError):
                logger.error(f"Invalid configuration, keeping previous config: {e}")
            else:
                logger.error(f"Failed to load config: {e}")
            return False

        self.publish(new_config)
        self.last_modified = mtime
        self.config_hash = content_hash
        logger.info(
            f"Configuration loaded successfully (cluster: {new_config.settings.cluster_name}, "
            f"executors: {len(new_config.executors)}, at {time.strftime('%H:%M:%S')})"
        )
        return True
