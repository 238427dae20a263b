# tests/test_aggregator.py
import unittest

from tpms_scan.aggregator import (
    NO_SIGNAL,
    STRONGEST_ANNOTATION,
    WheelPosition,
    aggregate,
    describe,
    find_strongest,
)
from tpms_scan.telemetry import (
    BatteryStatus,
    MalformedEventError,
    TelemetryRecord,
    parse,
    parse_line,
)


def annotated(lines):
    return [line for line in lines if line.endswith(STRONGEST_ANNOTATION)]


class TestWheelPosition(unittest.TestCase):
    def test_presentation_order(self):
        self.assertEqual(
            [position.label for position in WheelPosition],
            ["front-left", "back-left", "back-right", "front-right", "spare"],
        )

    def test_title(self):
        self.assertEqual(WheelPosition.BACK_RIGHT.title, "Back Right")
        self.assertEqual(WheelPosition.SPARE.title, "Spare")


class TestFindStrongest(unittest.TestCase):
    def test_empty(self):
        self.assertIsNone(find_strongest([]))

    def test_numeric_not_lexical(self):
        # "-10" < "-9" as strings, but -9 is the stronger signal
        records = [parse({"id": "A", "rssi": -10.0}), parse({"id": "B", "rssi": -9.0})]
        self.assertEqual(find_strongest(records), 1)

    def test_unusable_rssi_never_leads(self):
        # a NaN rssi is rejected at parse time, so it cannot win the scan
        with self.assertRaises(MalformedEventError):
            parse_line('{"id": "A", "rssi": NaN}')
        records = [parse_line('{"id": "B", "rssi": -2}'), parse_line('{"id": "C", "rssi": -7}')]
        self.assertEqual(find_strongest(records), 0)

    def test_tie_goes_to_earliest(self):
        records = [
            parse({"id": "A", "rssi": -8}),
            parse({"id": "B", "rssi": -3}),
            parse({"id": "C", "rssi": -3}),
        ]
        self.assertEqual(find_strongest(records), 1)


class TestAggregate(unittest.TestCase):
    def test_two_sensors(self):
        records = [parse({"id": "A", "rssi": -5}), parse({"id": "B", "rssi": -2})]
        result = aggregate(WheelPosition.FRONT_LEFT, records)

        self.assertEqual(result.strongest_id, "B")
        self.assertEqual(result.strongest_index, 1)
        self.assertTrue(result.has_collision)
        self.assertEqual(len(result.lines), 2)
        self.assertIn("ID: A", result.lines[0])
        self.assertIn("ID: B", result.lines[1])
        self.assertFalse(result.lines[0].endswith(STRONGEST_ANNOTATION))
        self.assertTrue(result.lines[1].endswith(STRONGEST_ANNOTATION))

    def test_empty_window(self):
        result = aggregate(WheelPosition.SPARE, [])
        self.assertEqual(list(result.lines), [NO_SIGNAL])
        self.assertEqual(NO_SIGNAL, "no signal")
        self.assertFalse(result.has_collision)
        self.assertIsNone(result.strongest_id)
        self.assertIsNone(result.strongest_index)
        self.assertTrue(result.no_signal)

    def test_single_low_battery_sensor(self):
        result = aggregate(
            WheelPosition.BACK_LEFT, [parse({"id": "A", "rssi": -5, "battery_ok": 0})]
        )
        self.assertEqual(len(result.lines), 1)
        self.assertIs(result.records[0].battery_status, BatteryStatus.LOW)
        self.assertIn("Battery: low", result.lines[0])
        self.assertEqual(annotated(result.lines), [])
        self.assertFalse(result.has_collision)
        self.assertEqual(result.strongest_id, "A")

    def test_lines_keep_arrival_order(self):
        records = [
            parse({"id": "C", "rssi": -1}),
            parse({"id": "A", "rssi": -9}),
            parse({"id": "B", "rssi": -4}),
        ]
        result = aggregate(WheelPosition.BACK_RIGHT, records)
        self.assertEqual([line.split(" | ")[0] for line in result.lines], ["ID: C", "ID: A", "ID: B"])
        self.assertEqual(annotated(result.lines), [result.lines[0]])

    def test_tie_annotates_earliest(self):
        records = [parse({"id": "A", "rssi": -3}), parse({"id": "B", "rssi": -3})]
        result = aggregate(WheelPosition.FRONT_RIGHT, records)
        self.assertEqual(result.strongest_id, "A")
        self.assertEqual(annotated(result.lines), [result.lines[0]])

    def test_repeated_sensor_is_a_collision(self):
        records = [parse({"id": "A", "rssi": -6}), parse({"id": "A", "rssi": -4})]
        result = aggregate(WheelPosition.FRONT_LEFT, records)
        self.assertTrue(result.has_collision)
        self.assertEqual(result.strongest_id, "A")
        # only the strongest transmission is marked, not every line with its id
        self.assertEqual(annotated(result.lines), [result.lines[1]])

    def test_collision_iff_more_than_one_record(self):
        record = parse({"id": "A", "rssi": -5})
        for count in range(5):
            with self.subTest(count=count):
                result = aggregate(WheelPosition.FRONT_LEFT, [record] * count)
                self.assertEqual(result.has_collision, count > 1)
                self.assertEqual(len(annotated(result.lines)), 1 if count > 1 else 0)

    def test_strongest_is_maximal(self):
        rssi_values = [-12.5, -3.25, -7.0, -3.25, -20.0, -3.5]
        records = [parse({"id": str(i), "rssi": rssi}) for i, rssi in enumerate(rssi_values)]
        result = aggregate(WheelPosition.SPARE, records)
        strongest = records[result.strongest_index]
        self.assertTrue(all(strongest.signal_strength >= r.signal_strength for r in records))
        self.assertEqual(result.strongest_id, "1")

    def test_input_not_mutated(self):
        records = [parse({"id": "A", "rssi": -5}), parse({"id": "B", "rssi": -2})]
        snapshot = list(records)
        aggregate(WheelPosition.FRONT_LEFT, records)
        self.assertEqual(records, snapshot)

    def test_accepts_generator(self):
        result = aggregate(
            WheelPosition.FRONT_LEFT, (parse({"id": i, "rssi": -i}) for i in range(1, 4))
        )
        self.assertEqual(len(result.records), 3)
        self.assertEqual(result.strongest_id, "1")


class TestDescribe(unittest.TestCase):
    def test_known_pressure(self):
        record = TelemetryRecord(
            id="1A2B",
            signal_strength=-2.345,
            model="Schrader",
            pressure_kpa=220.0,
            battery_status=BatteryStatus.OK,
        )
        self.assertEqual(
            describe(record),
            "ID: 1A2B | Model: Schrader | RSSI: -2.3 dB | "
            "Pressure: 31.9 PSI (220.0 kPa) | Battery: ok",
        )

    def test_unknown_fields(self):
        line = describe(parse({"rssi": -9}))
        self.assertIn("ID: unknown", line)
        self.assertIn("Model: unknown", line)
        self.assertIn("Pressure: unknown", line)
        self.assertIn("Battery: unknown", line)


if __name__ == "__main__":
    unittest.main()
