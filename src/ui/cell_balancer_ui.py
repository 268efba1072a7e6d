"""
Cell Balancer User Interface
============================

This module provides a graphical user interface (GUI) for balancing
measured cells into the series groups of an S×P battery pack.

Features:
---------
- Series/parallel configuration with live cell-count status
- Paste capacities (comma, space or newline separated)
- Demo data sets
- Pack summary (voltage, capacity, group spread)
- Group breakdown table and group capacity chart
- Copy layout to clipboard, export layout to CSV
- Step-by-step balancing trace

Usage:
------
    from src.ui.cell_balancer_ui import CellBalancerUI

    app = CellBalancerUI()
    app.run()
"""

import tkinter as tk
from tkinter import ttk, messagebox, filedialog
from typing import Optional
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

# Import matplotlib with TkAgg backend
import matplotlib
matplotlib.use('TkAgg')
from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg, NavigationToolbar2Tk
from matplotlib.figure import Figure
import numpy as np

from src.cell_balancer import (
    PartitionResult,
    BalancerConfig,
    CellCountStatus,
    partition,
    parse_capacities,
    parse_count,
    check_cell_count,
    required_cell_count,
    get_demo,
    list_demos,
    DEFAULT_DEMO,
    build_export_text,
    group_breakdown_rows,
    export_layout_csv,
    format_capacity,
    trace_partition,
)


ABOUT_TEXT = """\
THE PROBLEM

When building packs from salvaged cells, mismatched parallel group
capacities cause the Battery Management System (BMS) to work continuously
to bleed off high groups. Worse, during deep discharge, the lowest capacity
group (C_min) will hit the low-voltage cutoff first, artificially limiting
the entire pack's usable capacity and accelerating cell degradation in that
specific group.

THE MATH

Distributing mixed-capacity cells perfectly is a variation of the
Multi-Way Number Partitioning problem, which is NP-hard. Doing this via
envelope math or trial-and-error on the workbench is inefficient.

THE SOLUTION

This tool uses a greedy heuristic to find a highly optimized distribution:

  1. Sort all measured cell capacities in descending order.
  2. Initialize S empty groups.
  3. Walk the sorted list, assigning the next largest cell to the group
     with the current lowest total capacity.

This keeps the spread (delta) across series groups tight, maximizing pack
lifespan and usable energy. The result is deterministic: the same
measurements always give the same layout.
"""


class CellBalancerUI:
    """
    Graphical user interface for the Cell Balancer.

    Provides:
    - Pack configuration (series/parallel)
    - Capacity entry and demo data
    - Balanced layout with summary, table, chart and trace
    - Clipboard and CSV export
    """

    WINDOW_TITLE = "Cell Balancer - Pack Layout Optimizer"
    WINDOW_MIN_WIDTH = 1100
    WINDOW_MIN_HEIGHT = 780

    FRAME_PADDING = 10
    WIDGET_PADDING = 3

    READY_MESSAGE = "Ready - Enter S, P and cell capacities, or load demo data"

    STATUS_COLORS = {
        CellCountStatus.READY: "green",
        CellCountStatus.OVER: "red",
        CellCountStatus.SHORT: "darkorange",
        CellCountStatus.UNCONFIGURED: "darkorange",
    }

    def __init__(self):
        """Initialize the Cell Balancer UI."""
        self.config = BalancerConfig()

        # Current result (cleared whenever an input changes)
        self.current_result: Optional[PartitionResult] = None
        self._result_series = 0
        self._result_parallel = 0

        self.root = tk.Tk()
        self.root.title(self.WINDOW_TITLE)
        self.root.minsize(self.WINDOW_MIN_WIDTH, self.WINDOW_MIN_HEIGHT)
        self.root.columnconfigure(0, weight=1)
        self.root.rowconfigure(0, weight=1)

        self.main_notebook = ttk.Notebook(self.root)
        self.main_notebook.grid(row=0, column=0, sticky="nsew")

        self.tool_frame = ttk.Frame(self.main_notebook, padding=self.FRAME_PADDING)
        self.main_notebook.add(self.tool_frame, text="Balancer Tool")
        self.tool_frame.columnconfigure(0, weight=1)
        self.tool_frame.columnconfigure(1, weight=3)
        self.tool_frame.rowconfigure(2, weight=1)

        # Build UI
        self._create_header()
        self._create_pack_config()
        self._create_capacity_input()
        self._create_results_panel()
        self._create_plot_panel()
        self._create_about_tab()
        self._create_status_bar()

        self._update_cell_status()

    # =========================================================================
    # Layout
    # =========================================================================

    def _create_header(self):
        """Create header section."""
        header_frame = ttk.Frame(self.tool_frame)
        header_frame.grid(row=0, column=0, columnspan=2, sticky="ew", pady=(0, 10))

        ttk.Label(
            header_frame,
            text="Cell Balancer",
            font=("Helvetica", 16, "bold")
        ).pack(anchor="w")

        ttk.Label(
            header_frame,
            text="Group measured cells into series groups with the tightest capacity spread",
            font=("Helvetica", 10)
        ).pack(anchor="w")

        ttk.Separator(header_frame, orient="horizontal").pack(fill="x", pady=5)

    def _create_pack_config(self):
        """Create series/parallel configuration panel."""
        config_frame = ttk.LabelFrame(
            self.tool_frame,
            text="Pack Configuration",
            padding=self.FRAME_PADDING
        )
        config_frame.grid(row=1, column=0, sticky="nsew", padx=(0, 5), pady=5)

        fields = ttk.Frame(config_frame)
        fields.pack(fill="x", pady=self.WIDGET_PADDING)

        ttk.Label(fields, text="Series (S):").grid(row=0, column=0, sticky="w")
        self.series_var = tk.StringVar()
        ttk.Entry(fields, textvariable=self.series_var, width=8).grid(row=1, column=0, sticky="w", padx=(0, 10))

        ttk.Label(fields, text="Parallel (P):").grid(row=0, column=1, sticky="w")
        self.parallel_var = tk.StringVar()
        ttk.Entry(fields, textvariable=self.parallel_var, width=8).grid(row=1, column=1, sticky="w")

        self.series_var.trace_add("write", self._on_input_changed)
        self.parallel_var.trace_add("write", self._on_input_changed)

        # Cell count status
        status_frame = ttk.Frame(config_frame)
        status_frame.pack(fill="x", pady=5)
        ttk.Label(status_frame, text="Cells:").pack(side="left")
        self.cell_count_label = tk.Label(
            status_frame,
            text="0 / —",
            font=("Courier", 12, "bold")
        )
        self.cell_count_label.pack(side="right")

        # Demo selection
        demo_frame = ttk.Frame(config_frame)
        demo_frame.pack(fill="x", pady=self.WIDGET_PADDING)
        ttk.Label(demo_frame, text="Demo Data:").pack(anchor="w")
        self.demo_var = tk.StringVar(value=DEFAULT_DEMO)
        ttk.Combobox(
            demo_frame,
            textvariable=self.demo_var,
            values=list_demos(),
            state="readonly",
            width=26
        ).pack(fill="x")

        ttk.Button(
            config_frame,
            text="Load Demo Data",
            command=self._load_demo
        ).pack(fill="x", pady=self.WIDGET_PADDING)

        self.calculate_btn = ttk.Button(
            config_frame,
            text="Calculate Optimal Pack",
            command=self._calculate_pack,
            state="disabled"
        )
        self.calculate_btn.pack(fill="x", pady=(10, 0))

    def _create_capacity_input(self):
        """Create capacity text input."""
        input_frame = ttk.LabelFrame(
            self.tool_frame,
            text="Cell Capacities (mAh)",
            padding=self.FRAME_PADDING
        )
        input_frame.grid(row=1, column=1, sticky="nsew", padx=(5, 0), pady=5)

        self.cells_text = tk.Text(
            input_frame,
            height=8,
            width=60,
            font=("Courier", 10),
            wrap="word"
        )
        self.cells_text.pack(fill="both", expand=True)
        self.cells_text.bind("<<Modified>>", self._on_cells_modified)

        ttk.Label(
            input_frame,
            text="Paste comma or newline separated values, e.g. 2501, 2480, 2550, 2390",
            font=("Helvetica", 8),
            foreground="gray"
        ).pack(anchor="w", pady=(5, 0))

    def _create_results_panel(self):
        """Create results display panel."""
        results_frame = ttk.LabelFrame(
            self.tool_frame,
            text="Results",
            padding=self.FRAME_PADDING
        )
        results_frame.grid(row=2, column=0, columnspan=2, sticky="nsew", pady=5)

        # Summary readouts
        summary = ttk.Frame(results_frame)
        summary.pack(fill="x", pady=(0, 5))
        self.summary_vars = {}
        for col, (key, label) in enumerate([
            ("config", "Configuration"),
            ("voltage", "Pack Voltage"),
            ("capacity", "Pack Capacity"),
            ("delta", "Max Δ"),
        ]):
            cell = ttk.Frame(summary, relief="groove", padding=5)
            cell.grid(row=0, column=col, sticky="ew", padx=3)
            summary.columnconfigure(col, weight=1)
            ttk.Label(cell, text=label, font=("Helvetica", 8), foreground="gray").pack(anchor="w")
            var = tk.StringVar(value="—")
            self.summary_vars[key] = var
            value_label = tk.Label(cell, textvariable=var, font=("Courier", 14, "bold"))
            value_label.pack(anchor="w")
            if key == "delta":
                self.delta_label = value_label

        # Export buttons
        toolbar = ttk.Frame(results_frame)
        toolbar.pack(fill="x", pady=(0, 5))
        ttk.Button(toolbar, text="Copy Layout to Clipboard",
                   command=self._copy_layout_to_clipboard).pack(side="right", padx=5)
        ttk.Button(toolbar, text="Export CSV",
                   command=self._export_csv).pack(side="right")

        self.results_notebook = ttk.Notebook(results_frame)
        self.results_notebook.pack(fill="both", expand=True)

        # Group breakdown tab
        table_frame = ttk.Frame(self.results_notebook, padding=5)
        self.results_notebook.add(table_frame, text="Group Breakdown")
        table_frame.columnconfigure(0, weight=1)
        table_frame.rowconfigure(0, weight=1)

        columns = ("group", "cells", "total", "tag")
        self.group_tree = ttk.Treeview(table_frame, columns=columns, show="headings", height=10)
        col_config = {
            "group": ("Group", 70, "center"),
            "cells": ("Cells (mAh)", 520, "w"),
            "total": ("Total", 90, "e"),
            "tag": ("Δ", 80, "e"),
        }
        for col, (heading, width, anchor) in col_config.items():
            self.group_tree.heading(col, text=heading)
            self.group_tree.column(col, width=width, anchor=anchor)
        self.group_tree.tag_configure("min", foreground="darkorange")
        self.group_tree.tag_configure("max", foreground="green")

        y_scroll = ttk.Scrollbar(table_frame, orient="vertical", command=self.group_tree.yview)
        self.group_tree.configure(yscrollcommand=y_scroll.set)
        self.group_tree.grid(row=0, column=0, sticky="nsew")
        y_scroll.grid(row=0, column=1, sticky="ns")

        # Chart tab
        self.chart_frame = ttk.Frame(self.results_notebook, padding=5)
        self.results_notebook.add(self.chart_frame, text="Group Capacity Chart")

        # Debug tab
        debug_frame = ttk.Frame(self.results_notebook, padding=5)
        self.results_notebook.add(debug_frame, text="Debug")

        debug_scrollbar = ttk.Scrollbar(debug_frame)
        debug_scrollbar.pack(side="right", fill="y")
        self.debug_text = tk.Text(
            debug_frame,
            height=18,
            width=80,
            state="disabled",
            font=("Courier", 9),
            wrap="none",
            yscrollcommand=debug_scrollbar.set
        )
        self.debug_text.pack(side="left", fill="both", expand=True)
        debug_scrollbar.config(command=self.debug_text.yview)

    def _create_plot_panel(self):
        """Create group capacity chart."""
        self.fig = Figure(figsize=(6, 3.5), dpi=100)
        self.ax = self.fig.add_subplot(111)

        self.canvas = FigureCanvasTkAgg(self.fig, master=self.chart_frame)
        self.canvas.draw()
        self.canvas.get_tk_widget().pack(fill="both", expand=True)

        toolbar_frame = ttk.Frame(self.chart_frame)
        toolbar_frame.pack(fill="x")
        toolbar = NavigationToolbar2Tk(self.canvas, toolbar_frame)
        toolbar.update()

    def _create_about_tab(self):
        """Create About / Algorithm tab."""
        about_frame = ttk.Frame(self.main_notebook, padding=self.FRAME_PADDING)
        self.main_notebook.add(about_frame, text="About / Algorithm")

        about_text = tk.Text(about_frame, wrap="word", font=("Helvetica", 11), height=30)
        about_text.insert(tk.END, ABOUT_TEXT)
        about_text.config(state="disabled")
        about_text.pack(fill="both", expand=True)

    def _create_status_bar(self):
        """Create status bar."""
        self.status_var = tk.StringVar(value=self.READY_MESSAGE)
        status_bar = ttk.Label(
            self.root,
            textvariable=self.status_var,
            relief="sunken",
            anchor="w"
        )
        status_bar.grid(row=1, column=0, sticky="ew")

    # =========================================================================
    # Input Handling
    # =========================================================================

    def _read_inputs(self):
        """Read S, P and parsed capacities from the form."""
        series = parse_count(self.series_var.get())
        parallel = parse_count(self.parallel_var.get())
        parsed = parse_capacities(self.cells_text.get("1.0", tk.END))
        return series, parallel, parsed

    def _on_input_changed(self, *args):
        """Any edit invalidates the previous result."""
        self._clear_results()
        self._update_cell_status()

    def _on_cells_modified(self, event):
        if self.cells_text.edit_modified():
            self.cells_text.edit_modified(False)
            self._on_input_changed()

    def _update_cell_status(self):
        """Update the cell counter and the calculate button."""
        series, parallel, parsed = self._read_inputs()
        required = required_cell_count(series, parallel)
        status = check_cell_count(parsed.count, series, parallel)

        self.cell_count_label.config(
            text=CellCountStatus.label(parsed.count, required),
            foreground=self.STATUS_COLORS[status]
        )
        self.calculate_btn.config(state="normal" if status.is_ready else "disabled")

        self.status_var.set(parsed.rejection_message() or self.READY_MESSAGE)

    def _load_demo(self):
        """Fill the form with the selected demo set."""
        demo = get_demo(self.demo_var.get())
        self.series_var.set(str(demo.series))
        self.parallel_var.set(str(demo.parallel))
        self.cells_text.delete("1.0", tk.END)
        self.cells_text.insert("1.0", demo.capacity_text)
        self._on_input_changed()
        self.status_var.set(f"Loaded demo: {demo.name} ({demo.configuration_string})")

    # =========================================================================
    # Calculation
    # =========================================================================

    def _calculate_pack(self):
        """Balance the entered cells."""
        try:
            valid, errors = self.config.validate()
            if not valid:
                messagebox.showerror("Configuration Error", errors)
                return

            series, parallel, parsed = self._read_inputs()
            status = check_cell_count(parsed.count, series, parallel)
            if not status.is_ready:
                messagebox.showerror(
                    "Input Error",
                    f"Need exactly {required_cell_count(series, parallel)} cells for "
                    f"{series}S{parallel}P, got {parsed.count}"
                )
                return

            self.current_result = partition(
                parsed.cells, series,
                nominal_cell_voltage=self.config.nominal_cell_voltage,
                use_heap=self.config.use_heap,
            )
            self._result_series = series
            self._result_parallel = parallel

            self._display_summary()
            self._display_group_table()
            self._plot_group_totals()
            self._display_debug_trace(parsed.cells, series, parallel)

            self.status_var.set(
                f"Calculated: {series}S{parallel}P layout, "
                f"Δ {format_capacity(self.current_result.delta)} mAh"
            )

        except ValueError as e:
            messagebox.showerror("Input Error", f"Invalid input: {e}")
        except Exception as e:
            messagebox.showerror("Calculation Error", f"Error during calculation: {e}")

    def _clear_results(self):
        """Drop the current result and blank the result widgets."""
        self.current_result = None
        for var in self.summary_vars.values():
            var.set("—")
        self.delta_label.config(foreground="black")
        for item in self.group_tree.get_children():
            self.group_tree.delete(item)
        self.ax.clear()
        self.canvas.draw()
        self._set_debug_text("")

    def _display_summary(self):
        """Fill the summary readouts."""
        result = self.current_result
        self.summary_vars["config"].set(f"{self._result_series}S{self._result_parallel}P")
        self.summary_vars["voltage"].set(f"{result.pack_voltage:.1f} V")
        self.summary_vars["capacity"].set(f"{format_capacity(result.pack_capacity)} mAh")
        self.summary_vars["delta"].set(f"{format_capacity(result.delta)} mAh")
        self.delta_label.config(
            foreground="darkorange" if self.config.is_delta_excessive(result.delta) else "green"
        )

    def _display_group_table(self):
        """Fill the group breakdown table."""
        for item in self.group_tree.get_children():
            self.group_tree.delete(item)

        result = self.current_result
        for group, row in zip(result.groups, group_breakdown_rows(result)):
            if result.is_min_group(group):
                tags = ("min",)
            elif result.is_max_group(group):
                tags = ("max",)
            else:
                tags = ()
            self.group_tree.insert(
                "", tk.END,
                values=(row["group"], row["cells"], row["total"], row["tag"]),
                tags=tags
            )

    def _plot_group_totals(self):
        """Bar chart of group capacities."""
        result = self.current_result
        self.ax.clear()

        totals = np.array(result.totals, dtype=float)
        positions = np.arange(len(totals))
        colors = [
            'tab:orange' if result.is_min_group(g)
            else 'tab:green' if result.is_max_group(g)
            else 'tab:blue'
            for g in result.groups
        ]

        self.ax.bar(positions, totals, color=colors)
        self.ax.axhline(y=result.mean_total, color='gray', linestyle='--', alpha=0.6, label='Mean')
        self.ax.set_xticks(positions)
        self.ax.set_xticklabels([g.label for g in result.groups])
        self.ax.set_ylabel('Group Capacity (mAh)')

        # Zoom onto the spread so small differences are visible
        if totals.max() > 0:
            margin = max(result.delta, totals.max() * 0.01)
            self.ax.set_ylim(max(0.0, totals.min() - 2 * margin), totals.max() + margin)

        self.ax.set_title(
            f'{self._result_series}S{self._result_parallel}P  '
            f'Δ {format_capacity(result.delta)} mAh ({result.delta_percent:.2f}%)'
        )
        self.ax.grid(True, axis='y', alpha=0.3)
        self.ax.legend(loc='lower right')

        self.fig.tight_layout()
        self.canvas.draw()

    def _display_debug_trace(self, cells, series: int, parallel: int):
        """Display the balancing trace."""
        try:
            debugger = trace_partition(cells, series, parallel, self.config)
            self._set_debug_text(debugger.get_report())
            self.debug_text.see("1.0")
        except Exception as e:
            self._set_debug_text(f"Error generating debug trace:\n{str(e)}")

    def _set_debug_text(self, text: str):
        self.debug_text.config(state="normal")
        self.debug_text.delete(1.0, tk.END)
        self.debug_text.insert(tk.END, text)
        self.debug_text.config(state="disabled")

    # =========================================================================
    # Export
    # =========================================================================

    def _copy_layout_to_clipboard(self):
        """Copy the layout text to the clipboard."""
        if not self.current_result:
            messagebox.showwarning("No Results", "Calculate a layout first")
            return

        content = build_export_text(
            self.current_result, self._result_series, self._result_parallel
        )
        self.root.clipboard_clear()
        self.root.clipboard_append(content)
        self.status_var.set("Layout copied to clipboard")

    def _export_csv(self):
        """Export the layout to CSV."""
        if not self.current_result:
            messagebox.showwarning("No Results", "Calculate a layout first")
            return

        filepath = filedialog.asksaveasfilename(
            defaultextension=".csv",
            filetypes=[("CSV files", "*.csv"), ("All files", "*.*")],
            title="Export Pack Layout to CSV"
        )

        if filepath:
            try:
                export_layout_csv(self.current_result, filepath)
                messagebox.showinfo(
                    "Export Complete",
                    f"Layout exported to:\n{filepath}"
                )
            except Exception as e:
                messagebox.showerror("Export Error", str(e))

    def run(self):
        """Run the UI application."""
        self.root.mainloop()


def main():
    """Main entry point."""
    app = CellBalancerUI()
    app.run()


if __name__ == "__main__":
    main()
