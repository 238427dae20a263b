#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
TPMS Scan - guided per-wheel scan of tire pressure sensors

Listens for decoded TPMS transmissions at each wheel position in turn and
reports, per wheel, which sensors were heard, how strongly, their pressure
and battery state, and whether more than one signal was picked up.
"""

from .aggregator import (
    NO_SIGNAL,
    STRONGEST_ANNOTATION,
    WheelPosition,
    WheelScanResult,
    aggregate,
    describe,
    find_strongest,
)
from .capture import CaptureError, Rtl433Capture, SerialCapture
from .report import format_report
from .session import ScanReport, ScanSession
from .telemetry import (
    KPA_TO_PSI,
    UNKNOWN_ID,
    BatteryStatus,
    MalformedEventError,
    TelemetryRecord,
    parse,
    parse_line,
)

__version__ = "1.0.0"

__all__ = [
    "NO_SIGNAL",
    "STRONGEST_ANNOTATION",
    "WheelPosition",
    "WheelScanResult",
    "aggregate",
    "describe",
    "find_strongest",
    "CaptureError",
    "Rtl433Capture",
    "SerialCapture",
    "format_report",
    "ScanReport",
    "ScanSession",
    "KPA_TO_PSI",
    "UNKNOWN_ID",
    "BatteryStatus",
    "MalformedEventError",
    "TelemetryRecord",
    "parse",
    "parse_line",
]
