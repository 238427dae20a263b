#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Scan session

Walks the operator through one scan window per wheel position, in order,
and collects the per-wheel results into a ScanReport.
"""

import logging
from collections import OrderedDict
from typing import Callable, Dict, List, Optional

from .aggregator import WheelPosition, WheelScanResult, aggregate
from .capture import CaptureError
from .telemetry import MalformedEventError, parse_line

logger = logging.getLogger("tpms_scan.session")

DEFAULT_SCAN_DURATION = 30  # seconds per wheel


class ScanReport:
    """Results of a full scan, ordered by wheel position."""

    def __init__(self):
        self.results: Dict[WheelPosition, WheelScanResult] = OrderedDict()
        self.failures: Dict[WheelPosition, Exception] = OrderedDict()

    @property
    def collision_detected(self) -> bool:
        return any(result.has_collision for result in self.results.values())

    @property
    def positions(self) -> List[WheelPosition]:
        """Every scanned position, successful or not, in presentation order"""
        return sorted(set(self.results) | set(self.failures))


class ScanSession:
    """Drives a scan over each wheel position using a capture source.

    The capture source is any object with a capture(duration) method
    returning decoded event lines.
    """

    def __init__(self, capture, scan_duration=DEFAULT_SCAN_DURATION, spare_enabled=True):
        self.capture = capture
        self.scan_duration = scan_duration
        self.spare_enabled = spare_enabled

        # Callbacks
        self.on_prompt = None
        self.on_wheel_scanned = None
        self.on_wheel_failed = None

    def set_scan_duration(self, seconds: int) -> None:
        """Set the listen window per wheel in seconds"""
        if seconds <= 0:
            raise ValueError(f"Scan duration must be positive, got {seconds}")
        self.scan_duration = seconds

    def set_spare_enabled(self, enabled: bool) -> None:
        """Enable or disable scanning the spare"""
        self.spare_enabled = enabled

    def positions(self) -> List[WheelPosition]:
        return [
            position
            for position in WheelPosition
            if self.spare_enabled or position != WheelPosition.SPARE
        ]

    def register_prompt_callback(self, callback: Callable[[WheelPosition], None]) -> None:
        """Register a callback run before each wheel is captured"""
        self.on_prompt = callback

    def register_wheel_callback(
        self, callback: Callable[[WheelPosition, WheelScanResult], None]
    ) -> None:
        """Register a callback for completed wheel scans"""
        self.on_wheel_scanned = callback

    def register_failure_callback(
        self, callback: Callable[[WheelPosition, Exception], None]
    ) -> None:
        """Register a callback for failed wheel scans"""
        self.on_wheel_failed = callback

    def _invoke_callback(self, callback: Optional[Callable], *args):
        """Safely invoke a callback so a faulty one cannot abort the scan."""
        if callback is None:
            return
        try:
            callback(*args)
        except Exception as e:
            logger.error(f"Exception in callback: {e}")

    def scan_wheel(self, position: WheelPosition) -> WheelScanResult:
        """Capture, parse and aggregate one wheel's scan window."""
        lines = self.capture.capture(self.scan_duration)
        records = [parse_line(line) for line in lines]
        return aggregate(position, records)

    def run(self) -> ScanReport:
        """Scan every position in order. A failed wheel does not stop the rest."""
        report = ScanReport()

        for position in self.positions():
            # Prompt errors (e.g. Ctrl+C at the prompt) must reach the caller
            if self.on_prompt is not None:
                self.on_prompt(position)

            logger.info(f"Scanning {position.label}")
            try:
                result = self.scan_wheel(position)
            except (CaptureError, MalformedEventError) as e:
                logger.error(f"Scan failed at {position.label}: {e}")
                report.failures[position] = e
                self._invoke_callback(self.on_wheel_failed, position, e)
                continue

            report.results[position] = result
            self._invoke_callback(self.on_wheel_scanned, position, result)

        if report.collision_detected:
            logger.warning("Multiple signals detected at one or more wheels")
        return report
