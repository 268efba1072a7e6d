"""
Cell Balancer Input/Output Tests
================================

Validates everything around the partitioner: capacity parsing and count
checks, demo data, layout export, the balancing trace, configuration and
the headless launcher.
"""

import csv
import io
import sys
import tempfile
from contextlib import redirect_stdout
from pathlib import Path
import unittest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.cell_balancer import (
    BalancerConfig,
    CellCountStatus,
    DEFAULT_DEMO,
    DEMO_PACKS,
    build_export_text,
    check_cell_count,
    export_layout_csv,
    format_capacity,
    get_demo,
    group_breakdown_rows,
    list_demos,
    parse_capacities,
    parse_count,
    partition,
    required_cell_count,
    trace_partition,
)
import run_cell_balancer


SCENARIO_B_CELLS = [
    2501, 2480, 2550, 2390, 2410, 2455, 2510, 2495, 2420, 2580,
    2370, 2440, 2525, 2460, 2395, 2505, 2475, 2430, 2540, 2400,
]


class TestParseCapacities(unittest.TestCase):
    """Free-form capacity text."""

    def test_mixed_separators(self):
        parsed = parse_capacities("2501, 2480\n2550 2390\t2410")
        self.assertEqual(parsed.cells, [2501.0, 2480.0, 2550.0, 2390.0, 2410.0])
        self.assertEqual(parsed.rejected, [])
        self.assertEqual(parsed.count, 5)

    def test_invalid_tokens_rejected(self):
        parsed = parse_capacities("abc, -5, 0, 100, nan, inf, 1e3, 2412.5")
        self.assertEqual(parsed.cells, [100.0, 1000.0, 2412.5])
        self.assertEqual(parsed.rejected, ["abc", "-5", "0", "nan", "inf"])

    def test_empty_text(self):
        self.assertEqual(parse_capacities("").cells, [])
        self.assertEqual(parse_capacities("   \n ").cells, [])
        self.assertEqual(parse_capacities(None).count, 0)

    def test_repeated_separators(self):
        parsed = parse_capacities(",,2501,,  ,2480,")
        self.assertEqual(parsed.cells, [2501.0, 2480.0])
        self.assertEqual(parsed.rejected, [])

    def test_duplicates_kept(self):
        parsed = parse_capacities("2500 2500 2500")
        self.assertEqual(parsed.cells, [2500.0, 2500.0, 2500.0])

    def test_digit_separators_rejected(self):
        parsed = parse_capacities("1_000, 2500")
        self.assertEqual(parsed.cells, [2500.0])
        self.assertEqual(parsed.rejected, ["1_000"])

    def test_rejection_message(self):
        self.assertEqual(
            parse_capacities("abc, 2500").rejection_message(),
            "Ignored 1 invalid value(s): abc"
        )
        self.assertEqual(parse_capacities("2500").rejection_message(), "")

        message = parse_capacities("a b c d e f 2500").rejection_message()
        self.assertEqual(message, "Ignored 6 invalid value(s): a, b, c, d, e...")


class TestCellCount(unittest.TestCase):
    """Series/parallel fields and the count check."""

    def test_parse_count(self):
        self.assertEqual(parse_count("4"), 4)
        self.assertEqual(parse_count(" 12 "), 12)
        self.assertEqual(parse_count(""), 0)
        self.assertEqual(parse_count("abc"), 0)
        self.assertEqual(parse_count("-3"), 0)
        self.assertEqual(parse_count("4.5"), 4)
        self.assertEqual(parse_count("4s"), 4)

    def test_required_count(self):
        self.assertEqual(required_cell_count(4, 5), 20)

    def test_status(self):
        self.assertEqual(check_cell_count(20, 4, 5), CellCountStatus.READY)
        self.assertEqual(check_cell_count(19, 4, 5), CellCountStatus.SHORT)
        self.assertEqual(check_cell_count(21, 4, 5), CellCountStatus.OVER)
        self.assertEqual(check_cell_count(20, 0, 5), CellCountStatus.UNCONFIGURED)
        self.assertEqual(check_cell_count(0, 4, 0), CellCountStatus.UNCONFIGURED)

    def test_only_ready_allows_calculation(self):
        self.assertTrue(CellCountStatus.READY.is_ready)
        for status in (CellCountStatus.SHORT, CellCountStatus.OVER, CellCountStatus.UNCONFIGURED):
            self.assertFalse(status.is_ready)

    def test_label(self):
        self.assertEqual(CellCountStatus.label(18, 20), "18 / 20")
        self.assertEqual(CellCountStatus.label(0, 0), "0 / —")


class TestDemoData(unittest.TestCase):
    """Demo measurement sets."""

    def test_default_demo_is_4s5p(self):
        demo = get_demo()
        self.assertEqual(demo.name, DEFAULT_DEMO)
        self.assertEqual(demo.configuration_string, "4S5P")
        self.assertEqual(list(demo.capacities), SCENARIO_B_CELLS)

    def test_demo_counts_match_topology(self):
        for name, demo in DEMO_PACKS.items():
            self.assertEqual(
                len(demo.capacities), demo.series * demo.parallel,
                f"Demo {name} has wrong cell count"
            )

    def test_capacity_text_round_trips_through_parser(self):
        for demo in DEMO_PACKS.values():
            parsed = parse_capacities(demo.capacity_text)
            self.assertEqual(parsed.cells, [float(c) for c in demo.capacities])
            self.assertTrue(check_cell_count(parsed.count, demo.series, demo.parallel).is_ready)

    def test_unknown_demo(self):
        with self.assertRaises(KeyError):
            get_demo("12S9P Unobtainium")

    def test_list_demos(self):
        self.assertIn(DEFAULT_DEMO, list_demos())
        self.assertEqual(len(list_demos()), len(DEMO_PACKS))


class TestExport(unittest.TestCase):
    """Layout text, table rows and CSV."""

    def setUp(self):
        self.result = partition(SCENARIO_B_CELLS, 4)

    def test_format_capacity(self):
        self.assertEqual(format_capacity(2580), "2580")
        self.assertEqual(format_capacity(2580.0), "2580")
        self.assertEqual(format_capacity(2412.5), "2412.5")
        self.assertEqual(format_capacity(2412.333), "2412.333")
        self.assertEqual(format_capacity(2500.001), "2500.001")
        self.assertEqual(format_capacity(0.004), "0.004")
        self.assertEqual(format_capacity(0), "0")

    def test_export_text(self):
        lines = build_export_text(self.result, 4, 5).split("\n")

        self.assertEqual(len(lines), 8)
        self.assertEqual(lines[0], "CELL BALANCER — PACK LAYOUT")
        self.assertEqual(
            lines[1],
            "Config: 4S5P  |  Voltage: 14.8V  |  Capacity: 12321 mAh  |  Δ: 19 mAh"
        )
        self.assertEqual(lines[2], "─" * 60)
        self.assertEqual(lines[3], "Group 1:  [2580, 2495, 2455, 2410, 2400]  →  12340 mAh")
        self.assertEqual(lines[4], "Group 2:  [2550, 2501, 2460, 2440, 2370]  →  12321 mAh")
        self.assertEqual(lines[7], "─" * 60)

    def test_breakdown_rows(self):
        rows = group_breakdown_rows(self.result)

        self.assertEqual([r["group"] for r in rows], ["S1", "S2", "S3", "S4"])
        self.assertEqual([r["tag"] for r in rows], ["▲ max", "▼ min", "+14", "+14"])
        self.assertEqual(rows[0]["cells"], "2580  ·  2495  ·  2455  ·  2410  ·  2400")
        self.assertEqual(rows[0]["total"], "12340")

    def test_breakdown_rows_with_empty_groups(self):
        rows = group_breakdown_rows(partition([5, 3], 4))
        self.assertEqual([r["tag"] for r in rows], ["▲ max", "+3", "▼ min", "▼ min"])
        self.assertEqual(rows[3]["cells"], "")

    def test_csv_export(self):
        with tempfile.TemporaryDirectory() as tmp:
            filepath = Path(tmp) / "layout.csv"
            export_layout_csv(self.result, str(filepath))

            with open(filepath, newline='', encoding='utf-8') as f:
                rows = list(csv.DictReader(f))

        self.assertEqual(len(rows), 20)
        self.assertEqual(rows[0], {
            "group": "1",
            "position": "1",
            "input_index": "9",
            "capacity_mah": "2580",
            "group_total_mah": "12340",
        })
        self.assertEqual(rows[-1]["group"], "4")
        self.assertEqual(rows[-1]["position"], "5")
        self.assertEqual(sorted(int(r["input_index"]) for r in rows), list(range(20)))

    def test_fractional_capacities_exported_unrounded(self):
        cells = [2501.456, 2500.001]
        result = partition(cells, 1)
        self.assertIn("2501.456, 2500.001", build_export_text(result, 1, 2))

        with tempfile.TemporaryDirectory() as tmp:
            filepath = Path(tmp) / "layout.csv"
            export_layout_csv(result, str(filepath))

            with open(filepath, newline='', encoding='utf-8') as f:
                rows = list(csv.DictReader(f))

        self.assertEqual([float(r["capacity_mah"]) for r in rows], cells)


class TestTrace(unittest.TestCase):
    """Step-by-step balancing trace."""

    def setUp(self):
        self.debugger = trace_partition(SCENARIO_B_CELLS, 4, 5)

    def test_every_assignment_recorded(self):
        steps = self.debugger.find_steps_by_category("Assign")
        self.assertEqual(len(steps), 20)
        self.assertEqual(steps[0].result_name, "S1_total")
        self.assertEqual(steps[0].result, 2580)
        self.assertEqual(steps[-1].result_name, "S2_total")
        self.assertEqual(steps[-1].result, 12321)

    def test_sort_step(self):
        step = self.debugger.find_step_by_result("sorted")
        self.assertTrue(step.result.startswith("2580, 2550, 2540"))

    def test_results_and_baseline(self):
        self.assertEqual(self.debugger.find_step_by_result("delta").result, 19)
        self.assertEqual(self.debugger.find_step_by_result("C_pack").result, 12321)
        self.assertAlmostEqual(self.debugger.find_step_by_result("V_pack").result, 14.8)
        self.assertEqual(self.debugger.find_step_by_result("delta_round_robin").result, 175)
        self.assertEqual(self.debugger.find_step_by_result("delta_saved").result, 156)

    def test_step_count(self):
        # 4 inputs + 1 sort + 20 assignments + 7 results + 2 baseline
        self.assertEqual(self.debugger.get_step_count(), 34)

    def test_report(self):
        report = self.debugger.get_report()
        self.assertIn("BALANCING TRACE", report)
        self.assertIn(">>> GREEDY ASSIGNMENT", report)
        self.assertIn("configuration: 4S5P", report)
        self.assertIn("Total Steps: 34", report)

    def test_warning_comment(self):
        debugger = trace_partition(SCENARIO_B_CELLS, 4, 5, BalancerConfig(delta_warning_mah=10))
        self.assertIn("Exceeds 10 mAh", debugger.find_step_by_result("delta").comment)
        self.assertEqual(self.debugger.find_step_by_result("delta").comment, "")

    def test_invalid_config_rejected(self):
        with self.assertRaises(ValueError):
            trace_partition(SCENARIO_B_CELLS, 4, 5, BalancerConfig(nominal_cell_voltage=0))


class TestConfig(unittest.TestCase):
    """Balancer configuration."""

    def test_defaults_valid(self):
        ok, message = BalancerConfig().validate()
        self.assertTrue(ok)
        self.assertEqual(message, "")

    def test_invalid_values(self):
        ok, message = BalancerConfig(nominal_cell_voltage=0, delta_warning_mah=-1).validate()
        self.assertFalse(ok)
        self.assertIn("Nominal cell voltage", message)
        self.assertIn("Delta warning", message)

    def test_delta_warning(self):
        config = BalancerConfig()
        self.assertFalse(config.is_delta_excessive(100))
        self.assertTrue(config.is_delta_excessive(100.5))


class TestHeadlessLauncher(unittest.TestCase):
    """run_cell_balancer.py without the GUI."""

    def _run(self, argv):
        buffer = io.StringIO()
        with redirect_stdout(buffer):
            code = run_cell_balancer.main(argv)
        return code, buffer.getvalue()

    def test_demo(self):
        code, output = self._run(["--demo"])
        self.assertEqual(code, 0)
        self.assertIn("Config: 4S5P", output)
        self.assertIn("Group 4:", output)

    def test_cells_argument(self):
        code, output = self._run(["--series", "2", "--parallel", "2", "--cells", "10 10 10 10"])
        self.assertEqual(code, 0)
        self.assertIn("Group 1:  [10, 10]  →  20 mAh", output)

    def test_count_mismatch(self):
        code, output = self._run(["--series", "2", "--parallel", "2", "--cells", "1,2,3"])
        self.assertEqual(code, 1)
        self.assertIn("Cell count mismatch", output)

    def test_missing_topology(self):
        code, output = self._run(["--cells", "1,2"])
        self.assertEqual(code, 1)
        self.assertIn("--series and --parallel", output)

    def test_unknown_demo(self):
        code, output = self._run(["--demo", "nope"])
        self.assertEqual(code, 1)

    def test_demo_rejects_explicit_topology(self):
        code, output = self._run(["--demo", "--series", "3", "--parallel", "2"])
        self.assertEqual(code, 1)
        self.assertIn("--demo sets its own topology", output)
        self.assertNotIn("Group 1:", output)

    def test_file_and_csv(self):
        with tempfile.TemporaryDirectory() as tmp:
            src = Path(tmp) / "caps.txt"
            src.write_text("5\n4\n3\n", encoding="utf-8")
            out = Path(tmp) / "layout.csv"

            code, output = self._run([
                "--series", "1", "--parallel", "3",
                "--file", str(src), "--csv", str(out), "--trace",
            ])

            self.assertEqual(code, 0)
            self.assertTrue(out.exists())
            self.assertIn("BALANCING TRACE", output)
            self.assertIn("Group 1:  [5, 4, 3]  →  12 mAh", output)


if __name__ == "__main__":
    unittest.main()
