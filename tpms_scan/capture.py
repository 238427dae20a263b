#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Capture sources

A capture source listens for one fixed-duration scan window and returns the
decoded events it heard, one rtl_433 JSON object per line, in arrival order.
Demodulation and protocol decoding happen in the receiver, not here.
"""

import logging
import subprocess
import time
from typing import List, Optional, Sequence

import serial
import serial.tools.list_ports

logger = logging.getLogger("tpms_scan.capture")

# Constants
DEFAULT_FREQUENCY = "315M"  # US TPMS band; European sensors use 433.92M
DEFAULT_BAUDRATE = 115200
DEFAULT_TIMEOUT = 1.0  # seconds

# USB-serial bridges commonly found on receiver boards
RECEIVER_VID_PID = [
    (0x0403, 0x6001),  # FTDI
    (0x1A86, 0x7523),  # CH340
    (0x10C4, 0xEA60),  # CP210x
    (0x067B, 0x2303),  # Prolific
    (0x303A, 0x1001),  # ESP32-S3 native USB
]
RECEIVER_KEYWORDS = ["rtl_433", "cc1101", "usb", "serial", "usbserial", "uart"]


class CaptureError(RuntimeError):
    """Raised when a scan window could not be captured."""


class Rtl433Capture:
    """Runs rtl_433 for one scan window and collects its JSON output."""

    def __init__(
        self,
        frequency: str = DEFAULT_FREQUENCY,
        gain: Optional[str] = None,
        protocols: Optional[Sequence[int]] = None,
        binary: str = "rtl_433",
    ):
        self.frequency = frequency
        self.gain = gain
        self.protocols = list(protocols or [])
        self.binary = binary

    def build_command(self, duration: int) -> List[str]:
        """Command line for a listen of `duration` seconds.

        -M level adds the rssi field to every decoded event.
        """
        command = [
            self.binary,
            "-f", self.frequency,
            "-F", "json",
            "-M", "level",
            "-T", str(duration),
        ]
        if self.gain is not None:
            command += ["-g", str(self.gain)]
        for protocol in self.protocols:
            command += ["-R", str(protocol)]
        return command

    def capture(self, duration: int) -> List[str]:
        """Listen for `duration` seconds and return the decoded event lines."""
        command = self.build_command(duration)
        logger.info(f"Listening for {duration}s: {' '.join(command)}")
        try:
            result = subprocess.run(
                command, capture_output=True, text=True, check=False
            )
        except FileNotFoundError as e:
            raise CaptureError(f"{self.binary} not found: {e}") from e
        except OSError as e:
            raise CaptureError(f"Failed to start {self.binary}: {e}") from e

        if result.returncode != 0:
            stderr = result.stderr.strip().splitlines()
            detail = stderr[-1] if stderr else "no output"
            raise CaptureError(
                f"{self.binary} exited with status {result.returncode}: {detail}"
            )

        lines = [line.strip() for line in result.stdout.splitlines() if line.strip()]
        logger.debug(f"Captured {len(lines)} event(s)")
        return lines


class SerialCapture:
    """Reads rtl_433 JSON lines from a serial-attached receiver board."""

    def __init__(self, port=None, baudrate=DEFAULT_BAUDRATE, timeout=DEFAULT_TIMEOUT):
        self.port = port
        self.baudrate = baudrate
        self.timeout = timeout

    def find_device(self) -> List[str]:
        """Find serial ports that look like a receiver board"""
        receiver_ports = []
        all_ports = []

        for port in serial.tools.list_ports.comports():
            all_ports.append(port.device)

            # Known USB-serial bridge
            if port.vid is not None and port.pid is not None:
                if (port.vid, port.pid) in RECEIVER_VID_PID:
                    logger.info(
                        f"Found potential receiver: {port.device} (VID:PID={port.vid:04x}:{port.pid:04x})"
                    )
                    receiver_ports.append(port.device)
                    continue

            if port.description:
                desc_lower = port.description.lower()
                if any(keyword in desc_lower for keyword in RECEIVER_KEYWORDS):
                    logger.info(
                        f"Found potential receiver: {port.device} (Description: {port.description})"
                    )
                    receiver_ports.append(port.device)

        if receiver_ports:
            return receiver_ports

        logger.warning("No specific receiver identified. Returning all available ports.")
        return all_ports

    def _resolve_port(self) -> str:
        if self.port:
            return self.port
        available_ports = self.find_device()
        if not available_ports:
            raise CaptureError("No serial ports found")
        self.port = available_ports[0]
        return self.port

    def capture(self, duration: int) -> List[str]:
        """Read decoded event lines for `duration` seconds."""
        port = self._resolve_port()
        lines = []
        logger.info(f"Listening on {port} for {duration}s")
        try:
            with serial.Serial(port=port, baudrate=self.baudrate, timeout=self.timeout) as ser:
                ser.reset_input_buffer()
                deadline = time.monotonic() + duration
                while time.monotonic() < deadline:
                    raw = ser.readline()
                    if not raw:
                        continue
                    line = raw.decode("utf-8", errors="replace").strip()
                    if not line.startswith("{"):
                        # board boot messages and debug chatter
                        logger.debug(f"Ignoring serial output: {line}")
                        continue
                    lines.append(line)
        except serial.SerialException as e:
            raise CaptureError(f"Serial error on {port}: {e}") from e

        logger.debug(f"Captured {len(lines)} event(s)")
        return lines
