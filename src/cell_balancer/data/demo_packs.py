"""
Demo Pack Data
==============

Sample capacity measurements for trying the balancer without a bench
session. Values are mAh from capacity tests of salvaged 18650 cells.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple


@dataclass(frozen=True)
class DemoPack:
    """A named set of measured capacities with its target topology."""
    name: str
    series: int
    parallel: int
    capacities: Tuple[float, ...]
    description: str = ""

    @property
    def configuration_string(self) -> str:
        """Configuration string (e.g., '4S5P')."""
        return f"{self.series}S{self.parallel}P"

    @property
    def capacity_text(self) -> str:
        """Capacities as comma separated text, as pasted into the input box."""
        return ", ".join(f"{c:g}" for c in self.capacities)


DEMO_PACKS: Dict[str, DemoPack] = {
    "4S5P Salvaged 18650": DemoPack(
        name="4S5P Salvaged 18650",
        series=4,
        parallel=5,
        capacities=(
            2501, 2480, 2550, 2390, 2410, 2455, 2510, 2495, 2420, 2580,
            2370, 2440, 2525, 2460, 2395, 2505, 2475, 2430, 2540, 2400,
        ),
        description="Laptop pack harvest, tested at 0.5A discharge",
    ),

    "3S4P Power Tool": DemoPack(
        name="3S4P Power Tool",
        series=3,
        parallel=4,
        capacities=(
            1980, 2105, 1870, 2010, 2150, 1925,
            2060, 1990, 2200, 1840, 2035, 1955,
        ),
        description="Mixed cells from two drill packs, one heavily cycled",
    ),

    "7S3P E-Bike Repair": DemoPack(
        name="7S3P E-Bike Repair",
        series=7,
        parallel=3,
        capacities=(
            3120, 3045, 2980, 3200, 3075, 2890, 3150,
            3010, 2955, 3180, 3100, 2925, 3060, 3005,
            3135, 2970, 3090, 2940, 3165, 3030, 2910,
        ),
        description="Rebuild of a 25.9V pack with replacement cells",
    ),
}

DEFAULT_DEMO = "4S5P Salvaged 18650"


def get_demo(name: str = DEFAULT_DEMO) -> DemoPack:
    """
    Get a demo pack by name.

    Raises:
    ------
    KeyError
        If the demo is not found
    """
    if name not in DEMO_PACKS:
        raise KeyError(f"Demo '{name}' not found. Available: {list(DEMO_PACKS.keys())}")
    return DEMO_PACKS[name]


def list_demos() -> List[str]:
    """List demo names in definition order."""
    return list(DEMO_PACKS.keys())
