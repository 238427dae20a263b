#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
TPMS wheel scan

Walks through each wheel, listening for tire-pressure sensors with the
antenna held next to that wheel, then prints a report of what was heard.
"""

import argparse
import logging
import sys
import threading

from colorama import Fore, Style, init

from .aggregator import WheelPosition, WheelScanResult
from .capture import DEFAULT_BAUDRATE, DEFAULT_FREQUENCY, Rtl433Capture, SerialCapture
from .report import format_report
from .session import DEFAULT_SCAN_DURATION, ScanSession

logger = logging.getLogger("tpms_scan.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tpms-scan",
        description="Scan each wheel for TPMS sensors and report what was heard.",
    )
    parser.add_argument(
        "--source",
        choices=["rtl433", "serial"],
        default="rtl433",
        help="run rtl_433 locally or read JSON lines from a serial receiver",
    )
    parser.add_argument("--frequency", default=DEFAULT_FREQUENCY, help="rtl_433 frequency (default: %(default)s)")
    parser.add_argument("--gain", help="rtl_433 tuner gain")
    parser.add_argument(
        "--protocol",
        type=int,
        action="append",
        default=[],
        help="rtl_433 protocol number to enable (repeatable)",
    )
    parser.add_argument("--port", help="serial port of the receiver (default: auto-detect)")
    parser.add_argument("--baudrate", type=int, default=DEFAULT_BAUDRATE)
    parser.add_argument(
        "--duration",
        type=int,
        default=DEFAULT_SCAN_DURATION,
        help="seconds to listen at each wheel (default: %(default)s)",
    )
    parser.add_argument("--no-spare", action="store_true", help="skip the spare")
    parser.add_argument("--no-color", action="store_true", help="disable coloured output")
    parser.add_argument("--debug", action="store_true", help="enable debug logging")
    return parser


def build_capture(args):
    if args.source == "serial":
        return SerialCapture(port=args.port, baudrate=args.baudrate)
    return Rtl433Capture(frequency=args.frequency, gain=args.gain, protocols=args.protocol)


class Countdown:
    """Prints the seconds left in a scan window while the capture blocks."""

    def __init__(self, seconds: int):
        self.seconds = seconds
        self._stop = threading.Event()
        self._thread = None

    def _run(self):
        remaining = self.seconds
        while remaining > 0 and not self._stop.is_set():
            print(f"\r  Listening... {remaining:>3}s remaining", end="", flush=True)
            self._stop.wait(1.0)
            remaining -= 1
        print("\r" + " " * 40 + "\r", end="", flush=True)

    def start(self):
        self._thread = threading.Thread(target=self._run)
        self._thread.daemon = True
        self._thread.start()

    def stop(self):
        self._stop.set()
        if self._thread:
            self._thread.join(timeout=1.0)


def main(argv=None) -> int:
    """Run an interactive scan of every wheel"""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    color = not args.no_color
    init(autoreset=True, strip=None if color else True)

    session = ScanSession(build_capture(args), spare_enabled=not args.no_spare)
    try:
        session.set_scan_duration(args.duration)
    except ValueError as e:
        logger.error(str(e))
        return 2

    countdown = None

    def on_prompt(position: WheelPosition):
        nonlocal countdown
        print(f"\n{Fore.CYAN}{Style.BRIGHT}Place the antenna next to the {position.title} wheel.")
        print("Deflate or rotate the tire to wake the sensor if needed.")
        input("Press Enter to start listening...")
        countdown = Countdown(session.scan_duration)
        countdown.start()

    def finish_countdown():
        if countdown:
            countdown.stop()

    def on_wheel_scanned(position: WheelPosition, result: WheelScanResult):
        finish_countdown()
        if result.no_signal:
            print(f"{Fore.RED}  {position.title}: no signal")
        elif result.has_collision:
            print(f"{Fore.YELLOW}  {position.title}: {len(result.records)} signals heard")
        else:
            print(f"{Fore.GREEN}  {position.title}: sensor {result.strongest_id} found")

    def on_wheel_failed(position: WheelPosition, error: Exception):
        finish_countdown()
        print(f"{Fore.RED}  {position.title}: scan failed ({error})")

    session.register_prompt_callback(on_prompt)
    session.register_wheel_callback(on_wheel_scanned)
    session.register_failure_callback(on_wheel_failed)

    try:
        report = session.run()
    except (KeyboardInterrupt, EOFError):
        finish_countdown()
        logger.info("Scan cancelled by user")
        return 130

    print()
    for line in format_report(report, color=color):
        print(line)

    if not report.results:
        logger.error("Every wheel scan failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
