"""
Calculation Debugger
====================

Records the steps of a balancing run so every assignment decision can be
reviewed: which cell went where, and the group totals before and after.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class CalculationStep:
    """A single recorded step."""
    category: str           # e.g., "Input", "Sort", "Assign", "Result"
    description: str
    variables: Dict[str, Any]
    result: Any
    result_name: str
    result_unit: str = ""
    comment: str = ""


def _format_value(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:.6g}"
    return str(value)


class CalculationDebugger:
    """
    Collects calculation steps grouped into named sections.

    Usage:
        debugger = CalculationDebugger()
        debugger.start(configuration="4S5P")
        debugger.start_section("ASSIGNMENT")
        debugger.add_step(
            category="Assign",
            description="Cell #3 -> S2",
            variables={"capacity": 2580.0, "S2_before": 0.0},
            result=2580.0,
            result_name="S2_total",
            result_unit="mAh",
        )
        print(debugger.get_report())
    """

    def __init__(self):
        self.steps: List[CalculationStep] = []
        self.sections: List[tuple] = []  # (step index, section name)
        self.metadata: Dict[str, Any] = {}
        self.start_time: Optional[datetime] = None
        self.end_time: Optional[datetime] = None

    def clear(self):
        """Clear all recorded steps."""
        self.steps = []
        self.sections = []
        self.metadata = {}
        self.start_time = None
        self.end_time = None

    def start(self, **metadata):
        """Start a new session, discarding earlier steps."""
        self.clear()
        self.start_time = datetime.now()
        self.metadata = metadata

    def finish(self):
        self.end_time = datetime.now()

    def start_section(self, name: str):
        self.sections.append((len(self.steps), name))

    def add_step(
        self,
        category: str,
        description: str,
        variables: Dict[str, Any],
        result: Any,
        result_name: str,
        result_unit: str = "",
        comment: str = ""
    ):
        """Add a calculation step."""
        self.steps.append(CalculationStep(
            category=category,
            description=description,
            variables=variables,
            result=result,
            result_name=result_name,
            result_unit=result_unit,
            comment=comment,
        ))

    def add_input(self, name: str, value: Any, unit: str = "", description: str = ""):
        """Record an input value."""
        self.add_step(
            category="Input",
            description=description or f"Input: {name}",
            variables={},
            result=value,
            result_name=name,
            result_unit=unit,
        )

    def get_report(self, include_sections: bool = True) -> str:
        """
        Generate a formatted text report of all steps.

        Parameters:
        ----------
        include_sections : bool
            Include section headers in the report

        Returns:
        -------
        str
            Formatted calculation trace
        """
        lines = ["=" * 70, "BALANCING TRACE", "=" * 70]

        if self.start_time:
            lines.append(f"Generated: {self.start_time.strftime('%Y-%m-%d %H:%M:%S')}")

        if self.metadata:
            lines.append("")
            lines.append("Configuration:")
            for key, value in self.metadata.items():
                lines.append(f"  {key}: {value}")

        lines.append("")
        section_names = dict(self.sections)

        for i, step in enumerate(self.steps, start=1):
            if include_sections and (i - 1) in section_names:
                lines.append("")
                lines.append(f">>> {section_names[i - 1]}")
                lines.append("-" * 70)

            lines.append(f"[{i}] {step.description}")
            if step.variables:
                var_strs = [f"{k}={_format_value(v)}" for k, v in step.variables.items()]
                lines.append(f"    Inputs: {', '.join(var_strs)}")

            unit = f" {step.result_unit}" if step.result_unit else ""
            lines.append(f"    => {step.result_name} = {_format_value(step.result)}{unit}")

            if step.comment:
                lines.append(f"    // {step.comment}")

        lines.append("")
        lines.append("=" * 70)
        lines.append(f"Total Steps: {len(self.steps)}")
        if self.start_time and self.end_time:
            elapsed = (self.end_time - self.start_time).total_seconds()
            lines.append(f"Elapsed Time: {elapsed:.3f} seconds")
        lines.append("=" * 70)

        return "\n".join(lines)

    def get_step_count(self) -> int:
        return len(self.steps)

    def find_steps_by_category(self, category: str) -> List[CalculationStep]:
        """Find all steps in a given category."""
        return [s for s in self.steps if s.category == category]

    def find_step_by_result(self, result_name: str) -> Optional[CalculationStep]:
        """Find the most recent step that produced a result."""
        for step in reversed(self.steps):
            if step.result_name == result_name:
                return step
        return None

