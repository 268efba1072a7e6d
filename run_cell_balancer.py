#!/usr/bin/env python3
"""
Cell Balancer Launcher
======================

Launch script for the Cell Balancer.

Groups measured cells into the series groups of an S×P pack so that the
weakest group is as close as possible to the strongest.

Usage:
------
    # GUI
    python run_cell_balancer.py

    # Headless: print the layout for pasted values or a file of values
    python run_cell_balancer.py --series 4 --parallel 5 --cells "2501, 2480, ..."
    python run_cell_balancer.py --series 4 --parallel 5 --file capacities.txt --csv layout.csv

    # Headless demo
    python run_cell_balancer.py --demo

Requirements:
------------
- Python 3.9+
- tkinter (usually included with Python, GUI only)
- matplotlib
- numpy
"""

import argparse
import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.resolve()
sys.path.insert(0, str(project_root))


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Balance measured cells into series groups of an S×P battery pack."
    )
    parser.add_argument("--series", type=int, help="Number of series groups (S)")
    parser.add_argument("--parallel", type=int, help="Number of cells in parallel per group (P)")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--cells", help="Comma or whitespace separated capacities (mAh)")
    source.add_argument("--file", help="Text file with capacities (mAh)")
    source.add_argument("--demo", nargs="?", const="", metavar="NAME",
                        help="Use a demo data set (default demo if no name given)")
    parser.add_argument("--csv", help="Also write the layout to this CSV file")
    parser.add_argument("--trace", action="store_true", help="Print the step-by-step balancing trace")
    return parser.parse_args(argv)


def run_headless(args) -> int:
    """Balance from command-line input and print the layout."""
    from src.cell_balancer import (
        DEFAULT_DEMO,
        CellCountStatus,
        build_export_text,
        check_cell_count,
        export_layout_csv,
        get_demo,
        parse_capacities,
        partition,
        required_cell_count,
        trace_partition,
    )

    if args.demo is not None:
        if args.series is not None or args.parallel is not None:
            print("[ERROR] --demo sets its own topology; drop --series/--parallel")
            return 1
        try:
            demo = get_demo(args.demo or DEFAULT_DEMO)
        except KeyError as e:
            print(f"[ERROR] {e.args[0]}")
            return 1
        series, parallel = demo.series, demo.parallel
        text = demo.capacity_text
    else:
        if not args.series or not args.parallel:
            print("[ERROR] --series and --parallel are required with --cells/--file")
            return 1
        series, parallel = args.series, args.parallel
        if args.file:
            try:
                text = Path(args.file).read_text(encoding="utf-8-sig")
            except OSError as e:
                print(f"[ERROR] Could not read {args.file}: {e}")
                return 1
        else:
            text = args.cells

    parsed = parse_capacities(text)
    if parsed.rejected:
        print(f"Warning: ignored {len(parsed.rejected)} invalid value(s): {', '.join(parsed.rejected)}")

    status = check_cell_count(parsed.count, series, parallel)
    if not status.is_ready:
        required = required_cell_count(series, parallel)
        if status is CellCountStatus.UNCONFIGURED:
            print("[ERROR] Series and parallel counts must be at least 1")
        else:
            print(f"[ERROR] Cell count mismatch: have {parsed.count}, need {required} for {series}S{parallel}P")
        return 1

    result = partition(parsed.cells, series)
    print(build_export_text(result, series, parallel))

    if args.trace:
        print()
        print(trace_partition(parsed.cells, series, parallel).get_report())

    if args.csv:
        try:
            export_layout_csv(result, args.csv)
        except OSError as e:
            print(f"[ERROR] Could not write {args.csv}: {e}")
            return 1
        print(f"Layout written to {args.csv}")

    return 0


def run_gui() -> int:
    """Launch the Cell Balancer UI."""
    print("=" * 60)
    print("Cell Balancer")
    print("=" * 60)
    print()

    try:
        import tkinter
        print(f"  [OK] tkinter (Tcl/Tk {tkinter.TclVersion})")
    except ImportError:
        print("\n[ERROR] tkinter is not available")
        print("\nPlease install tkinter:")
        print("  Ubuntu/Debian: sudo apt-get install python3-tk")
        print("  Fedora: sudo dnf install python3-tkinter")
        print("  macOS: brew install python-tk")
        print("\nOr run headless with --series/--parallel/--cells")
        return 1

    print()
    print("Loading GUI...")
    print()

    from src.ui.cell_balancer_ui import CellBalancerUI

    app = CellBalancerUI()
    app.run()
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    if args.cells is not None or args.file is not None or args.demo is not None:
        return run_headless(args)
    return run_gui()


if __name__ == "__main__":
    sys.exit(main())
