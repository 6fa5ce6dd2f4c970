"""Threshold alerts for the most recent reading."""

from __future__ import annotations

import operator
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

from models.records import Reading

ALERT_SEPARATOR = " | "


@dataclass(frozen=True)
class AlertRule:
    field: str
    compare: Callable[[float, float], bool]
    threshold: float
    message: str

    def triggered(self, reading: Reading) -> bool:
        value = reading.get(self.field)
        return value is not None and self.compare(value, self.threshold)


ALERT_RULES: Tuple[AlertRule, ...] = (
    AlertRule("soil_moisture", operator.lt, 30.0, "Soil moisture is LOW! Plant needs water."),
    AlertRule("temperature", operator.gt, 30.0, "Temperature is HIGH!"),
    AlertRule("temperature", operator.lt, 15.0, "Temperature is LOW!"),
    AlertRule("humidity", operator.lt, 40.0, "Humidity is LOW!"),
)

MOISTURE_CRITICAL = 30.0
MOISTURE_WARNING = 50.0


def evaluate(reading: Optional[Reading]) -> List[str]:
    """Messages of every rule that fires for ``reading``, in rule order."""
    if reading is None:
        return []
    return [rule.message for rule in ALERT_RULES if rule.triggered(reading)]


def moisture_level(value: Optional[float]) -> Optional[str]:
    if value is None:
        return None
    if value < MOISTURE_CRITICAL:
        return "critical"
    if value < MOISTURE_WARNING:
        return "warning"
    return "ok"


def temperature_status(value: Optional[float]) -> Optional[str]:
    if value is None:
        return None
    if value > 30.0:
        return "Hot"
    if value < 15.0:
        return "Cold"
    return "Optimal"


def humidity_status(value: Optional[float]) -> Optional[str]:
    if value is None:
        return None
    if value > 70.0:
        return "High"
    if value < 40.0:
        return "Low"
    return "Normal"


@dataclass
class AlertState:
    """Which alert text is currently shown.

    Any non-empty evaluation replaces the text and makes it visible, an empty
    one hides it. Dismissal only hides the current alert.
    """

    messages: Tuple[str, ...] = field(default_factory=tuple)
    visible: bool = False

    def apply(self, messages: Sequence[str]) -> None:
        if messages:
            self.messages = tuple(messages)
            self.visible = True
        else:
            self.visible = False

    def dismiss(self) -> None:
        self.visible = False

    @property
    def text(self) -> Optional[str]:
        if not self.visible:
            return None
        return ALERT_SEPARATOR.join(self.messages)
