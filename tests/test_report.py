# tests/test_report.py
import unittest

from colorama import Fore

from tpms_scan.aggregator import NO_SIGNAL, WheelPosition, aggregate
from tpms_scan.capture import CaptureError
from tpms_scan.report import COLLISION_WARNING, format_report
from tpms_scan.session import ScanReport
from tpms_scan.telemetry import parse


def sample_report():
    report = ScanReport()
    report.results[WheelPosition.FRONT_LEFT] = aggregate(
        WheelPosition.FRONT_LEFT, [parse({"id": "FL", "rssi": -3, "pressure_kPa": 230})]
    )
    report.failures[WheelPosition.BACK_LEFT] = CaptureError("rtl_433 not found")
    report.results[WheelPosition.BACK_RIGHT] = aggregate(
        WheelPosition.BACK_RIGHT, [parse({"id": "A", "rssi": -5}), parse({"id": "B", "rssi": -2})]
    )
    report.results[WheelPosition.SPARE] = aggregate(WheelPosition.SPARE, [])
    return report


class TestFormatReport(unittest.TestCase):
    def test_plain_report(self):
        lines = format_report(sample_report())
        text = "\n".join(lines)

        self.assertNotIn("\x1b[", text)
        self.assertLess(text.index("Front Left:"), text.index("Back Left:"))
        self.assertLess(text.index("Back Left:"), text.index("Back Right:"))
        self.assertLess(text.index("Back Right:"), text.index("Spare:"))
        self.assertIn("  scan failed: rtl_433 not found", lines)
        self.assertIn(f"  {NO_SIGNAL}", lines)
        self.assertEqual(lines[-1], COLLISION_WARNING)

    def test_no_warning_without_collision(self):
        report = ScanReport()
        report.results[WheelPosition.FRONT_LEFT] = aggregate(WheelPosition.FRONT_LEFT, [])
        self.assertNotIn(COLLISION_WARNING, format_report(report))

    def test_coloured_report(self):
        lines = format_report(sample_report(), color=True)
        self.assertIn(f"{Fore.GREEN}Front Left:", lines[3])
        self.assertTrue(any(line.startswith(Fore.RED) and "scan failed" in line for line in lines))
        self.assertTrue(any(line.startswith(Fore.YELLOW) and "strongest signal" in line for line in lines))


if __name__ == "__main__":
    unittest.main()
