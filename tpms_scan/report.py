#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Report formatting for a completed scan."""

from typing import List

from colorama import Fore, Style

from .aggregator import STRONGEST_ANNOTATION
from .session import ScanReport

REPORT_WIDTH = 80

COLLISION_WARNING = (
    "WARNING: More than one signal was detected at one or more wheels. "
    "Lower the receiver gain or hold the antenna closer to the wheel and "
    "scan again. Repeated transmissions from the same sensor also trigger "
    "this warning."
)


def _paint(text: str, color: str, enabled: bool) -> str:
    if not enabled:
        return text
    return f"{color}{text}{Style.RESET_ALL}"


def format_report(report: ScanReport, color: bool = False) -> List[str]:
    """Render a ScanReport as printable lines"""
    lines = ["=" * REPORT_WIDTH, f"{'TPMS Scan Report':^{REPORT_WIDTH}}", "=" * REPORT_WIDTH]

    for position in report.positions:
        if position in report.failures:
            lines.append(_paint(f"{position.title}:", Fore.RED, color))
            lines.append(
                _paint(f"  scan failed: {report.failures[position]}", Fore.RED, color)
            )
            continue

        result = report.results[position]
        if result.no_signal:
            heading = Fore.RED
        elif result.has_collision:
            heading = Fore.YELLOW
        else:
            heading = Fore.GREEN
        lines.append(_paint(f"{position.title}:", heading, color))

        for line in result.lines:
            if result.no_signal:
                lines.append(_paint(f"  {line}", Fore.RED, color))
            elif line.endswith(STRONGEST_ANNOTATION):
                lines.append(_paint(f"  {line}", Fore.YELLOW + Style.BRIGHT, color))
            else:
                lines.append(f"  {line}")

    lines.append("-" * REPORT_WIDTH)
    if report.collision_detected:
        lines.append(_paint(COLLISION_WARNING, Fore.YELLOW, color))

    return lines
