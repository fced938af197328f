"""Persistent hardware advisories (sticky warnings)."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List
import warnings
import logging

logger = logging.getLogger(__name__)


class AlertLevel(Enum):
    """Severity of an advisory."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class HardwareAdvisory(UserWarning):
    """Warning category emitted when a hardware advisory becomes active."""
    pass


@dataclass(frozen=True)
class Alert:
    """A named advisory. Identity is (group, text, level)."""

    group: str
    text: str
    level: AlertLevel = AlertLevel.WARNING

    def __str__(self):
        return f"[{self.group}] {self.text}"


class AlertSink:
    """
    Records which advisories are active.

    Advisories stay active until explicitly cleared, so a failure seen once
    during startup remains observable for the rest of the run. Subclass and
    override on_raised/on_cleared to forward them somewhere visible.
    """

    def __init__(self):
        self._active: Dict[Alert, bool] = {}

    def set(self, alert: Alert, active: bool) -> None:
        """Set or clear an advisory. Only state changes reach the hooks."""
        was_active = self._active.get(alert, False)
        self._active[alert] = active
        if active and not was_active:
            self.on_raised(alert)
        elif was_active and not active:
            self.on_cleared(alert)

    def is_active(self, alert: Alert) -> bool:
        return self._active.get(alert, False)

    def active_alerts(self) -> List[Alert]:
        """List active advisories in the order they were first seen."""
        return [alert for alert, active in self._active.items() if active]

    def clear_all(self) -> None:
        for alert in self.active_alerts():
            self.set(alert, False)

    def on_raised(self, alert: Alert) -> None:
        pass

    def on_cleared(self, alert: Alert) -> None:
        pass


class LoggingAlertSink(AlertSink):
    """Alert sink that logs advisories and emits HardwareAdvisory warnings."""

    def on_raised(self, alert: Alert) -> None:
        if alert.level is AlertLevel.ERROR:
            logger.error(f"Advisory raised: {alert}")
        else:
            logger.warning(f"Advisory raised: {alert}")
        warnings.warn(str(alert), HardwareAdvisory, stacklevel=3)

    def on_cleared(self, alert: Alert) -> None:
        logger.info(f"Advisory cleared: {alert}")
