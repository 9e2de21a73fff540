"""Analytics reporters."""

import logging

from ..config import CommPlatformIntegration
from .command import Origin

logger = logging.getLogger("kubechat.analytics")


class LoggingAnalyticsReporter:
    """Writes command reports to the log instead of a remote backend."""

    def report_command(
        self, platform: CommPlatformIntegration, command: str, origin: Origin, with_filter: bool
    ) -> None:
        logger.info(
            f"command executed (platform: {platform.value}, command: {command!r}, "
            f"origin: {origin.value}, with_filter: {with_filter})"
        )
