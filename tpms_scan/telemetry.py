#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Telemetry record parsing

Turns one decoded event, as emitted by rtl_433 in JSON mode, into a
TelemetryRecord. Missing or mistyped optional fields become sentinels so a
partially decoded transmission is still shown to the operator.
"""

import json
import logging
import math
from enum import Enum
from typing import Any, Mapping, NamedTuple, Optional

logger = logging.getLogger("tpms_scan.telemetry")

UNKNOWN_ID = "unknown"
KPA_TO_PSI = 0.14503


class MalformedEventError(ValueError):
    """Raised when an event is not a usable decoded-event structure."""


class BatteryStatus(Enum):
    """Battery state reported by a sensor."""

    OK = "ok"
    LOW = "low"
    UNKNOWN = "unknown"

    @classmethod
    def from_flag(cls, flag: Any) -> "BatteryStatus":
        """Classify rtl_433's battery_ok flag: 1 -> ok, 0 -> low, else unknown.

        The test is numeric, so 1.0 and JSON true count as 1. Strings such as
        "1" are not flags.
        """
        # bool is an int subclass, so JSON true/false land on 1/0 here
        if isinstance(flag, (int, float)):
            if flag == 1:
                return cls.OK
            if flag == 0:
                return cls.LOW
        return cls.UNKNOWN


class TelemetryRecord(NamedTuple):
    """One decoded sensor transmission."""

    id: str
    signal_strength: float
    model: Optional[str] = None
    pressure_kpa: Optional[float] = None
    battery_status: BatteryStatus = BatteryStatus.UNKNOWN

    @property
    def pressure_psi(self) -> Optional[float]:
        if self.pressure_kpa is None:
            return None
        return self.pressure_kpa * KPA_TO_PSI

    def __str__(self):
        return (
            f"TelemetryRecord(ID: {self.id}, Model: {self.model}, "
            f"RSSI: {self.signal_strength} dB, Pressure: {self.pressure_kpa} kPa, "
            f"Battery: {self.battery_status.value})"
        )


def _number(value: Any) -> Optional[float]:
    # JSON true/false must not pass as 1.0/0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    # NaN and infinities have no place in a strength ordering
    if not math.isfinite(number):
        return None
    return number


def parse(raw_event: Mapping[str, Any]) -> TelemetryRecord:
    """Build a TelemetryRecord from one decoded event.

    Optional fields (id, model, pressure_kPa, battery_ok) fall back to their
    sentinels. An event that is not a mapping, or that carries no numeric
    rssi, raises MalformedEventError.
    """
    if not isinstance(raw_event, Mapping):
        raise MalformedEventError(
            f"Expected a decoded event mapping, got {type(raw_event).__name__}"
        )

    signal_strength = _number(raw_event.get("rssi"))
    if signal_strength is None:
        raise MalformedEventError(
            f"Event has no usable rssi: {type(raw_event.get('rssi')).__name__}"
        )

    sensor_id = raw_event.get("id")
    try:
        sensor_id = UNKNOWN_ID if sensor_id is None else str(sensor_id)
    except ValueError:
        # integers past the int-to-str digit limit
        sensor_id = UNKNOWN_ID

    model = raw_event.get("model")
    if not isinstance(model, str):
        model = None

    record = TelemetryRecord(
        id=sensor_id,
        signal_strength=signal_strength,
        model=model,
        pressure_kpa=_number(raw_event.get("pressure_kPa")),
        battery_status=BatteryStatus.from_flag(raw_event.get("battery_ok")),
    )
    logger.debug(f"Parsed event: {record}")
    return record


def parse_line(text: str) -> TelemetryRecord:
    """Parse one line of rtl_433 JSON output."""
    try:
        raw_event = json.loads(text)
    except ValueError as e:
        # JSONDecodeError, and oversized integer literals
        raise MalformedEventError(f"Invalid JSON event: {e}") from e
    return parse(raw_event)
