#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Wheel scan aggregation

Reduces the records heard during one wheel's scan window to a summary:
one description line per record in arrival order, the strongest signal
marked when more than one record was heard, and a collision flag.
"""

import logging
from enum import IntEnum
from typing import List, NamedTuple, Optional, Sequence, Tuple

from .telemetry import TelemetryRecord

logger = logging.getLogger("tpms_scan.aggregator")

NO_SIGNAL = "no signal"
STRONGEST_ANNOTATION = "strongest signal"


class WheelPosition(IntEnum):
    """Wheel positions, valued in the order they are scanned and reported."""

    FRONT_LEFT = 0
    BACK_LEFT = 1
    BACK_RIGHT = 2
    FRONT_RIGHT = 3
    SPARE = 4

    @property
    def label(self) -> str:
        """Hyphenated label, e.g. front-left"""
        return self.name.lower().replace("_", "-")

    @property
    def title(self) -> str:
        """Human readable name, e.g. Front Left"""
        return self.name.replace("_", " ").title()


class WheelScanResult(NamedTuple):
    """Summary of one wheel's scan window."""

    wheel: WheelPosition
    records: Tuple[TelemetryRecord, ...]
    strongest_id: Optional[str]
    strongest_index: Optional[int]
    has_collision: bool
    lines: Tuple[str, ...]

    @property
    def no_signal(self) -> bool:
        return not self.records


def describe(record: TelemetryRecord) -> str:
    """Format one record as a report line."""
    if record.pressure_kpa is None:
        pressure = "unknown"
    else:
        pressure = f"{record.pressure_psi:.1f} PSI ({record.pressure_kpa:.1f} kPa)"
    return (
        f"ID: {record.id} | Model: {record.model or 'unknown'} | "
        f"RSSI: {record.signal_strength:.1f} dB | Pressure: {pressure} | "
        f"Battery: {record.battery_status.value}"
    )


def find_strongest(records: Sequence[TelemetryRecord]) -> Optional[int]:
    """Index of the record with the highest signal strength.

    Ties go to the earliest record. Returns None for an empty sequence.
    """
    strongest = None
    for index, record in enumerate(records):
        if strongest is None or record.signal_strength > records[strongest].signal_strength:
            strongest = index
    return strongest


def aggregate(
    wheel: WheelPosition, records: Sequence[TelemetryRecord]
) -> WheelScanResult:
    """Reduce one wheel's records to a WheelScanResult."""
    records = tuple(records)

    if not records:
        logger.info(f"No signal detected at {wheel.label}")
        return WheelScanResult(
            wheel=wheel,
            records=records,
            strongest_id=None,
            strongest_index=None,
            has_collision=False,
            lines=(NO_SIGNAL,),
        )

    strongest_index = find_strongest(records)
    has_collision = len(records) > 1

    lines: List[str] = []
    for index, record in enumerate(records):
        line = describe(record)
        if has_collision and index == strongest_index:
            line = f"{line} <- {STRONGEST_ANNOTATION}"
        lines.append(line)

    if has_collision:
        logger.warning(
            f"{len(records)} signals detected at {wheel.label}, "
            f"strongest is {records[strongest_index].id}"
        )
    else:
        logger.info(f"Sensor {records[0].id} detected at {wheel.label}")

    return WheelScanResult(
        wheel=wheel,
        records=records,
        strongest_id=records[strongest_index].id,
        strongest_index=strongest_index,
        has_collision=has_collision,
        lines=tuple(lines),
    )
