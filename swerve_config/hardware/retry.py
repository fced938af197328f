"""Bounded-retry application of device configuration."""

from enum import Enum
from typing import Callable
import logging

from swerve_config.hardware.alerts import Alert, AlertSink

logger = logging.getLogger(__name__)

# Shared by every hardware configuration call site.
MAXIMUM_RETRIES = 5


class ConfigurationState(Enum):
    """Progress of a single RetryingConfigurator.run() call."""

    IDLE = "idle"
    ATTEMPTING = "attempting"
    SUCCEEDED = "succeeded"
    EXHAUSTED = "exhausted"


class RetryingConfigurator:
    """
    Apply a device configuration, retrying until it succeeds or the bound is hit.

    Failure to configure is reported through the alert sink rather than
    raised, so a robot with a degraded sensor can still be driven.
    """

    def __init__(self, alert: Alert, sink: AlertSink, max_retries: int = MAXIMUM_RETRIES):
        """
        Args:
            alert: Advisory raised when every attempt fails
            sink: Where the advisory is recorded
            max_retries: Maximum number of attempts per run
        """
        if max_retries < 1:
            raise ValueError(f"max_retries must be at least 1, got {max_retries}")
        self.alert = alert
        self.sink = sink
        self.max_retries = max_retries
        self.state = ConfigurationState.IDLE
        self.attempts = 0

    def run(self, action: Callable[[], bool]) -> bool:
        """
        Call action() until it returns a truthy result.

        Args:
            action: Configuration write returning True on success

        Returns:
            True if an attempt succeeded, False if the retry bound was exhausted
        """
        self.attempts = 0
        self.state = ConfigurationState.ATTEMPTING
        while self.state is ConfigurationState.ATTEMPTING:
            self.attempts += 1
            if action():
                self.state = ConfigurationState.SUCCEEDED
            elif self.attempts >= self.max_retries:
                self.state = ConfigurationState.EXHAUSTED

        if self.state is ConfigurationState.SUCCEEDED:
            if self.attempts > 1:
                logger.info(f"{self.alert.text}: succeeded after {self.attempts} attempts")
            self.sink.set(self.alert, False)
            return True

        logger.warning(f"{self.alert.text}: giving up after {self.attempts} attempts")
        self.sink.set(self.alert, True)
        return False
