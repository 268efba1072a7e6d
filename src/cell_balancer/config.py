"""
Cell Balancer Configuration
===========================

Contains configuration settings, electrical constants, and default values
for pack balancing calculations.

Units:
- Capacity: mAh
- Voltage: V
"""

from dataclasses import dataclass


# =============================================================================
# Electrical Constants
# =============================================================================

# Nominal cell voltage (V) used for pack voltage estimates
NOMINAL_CELL_VOLTAGE = 3.7


# =============================================================================
# Balancing Tolerances
# =============================================================================

# Group spread above which the layout is flagged (mAh)
# Salvaged 18650 builds typically land well under this with a greedy split
DELTA_WARNING_MAH = 100.0


# =============================================================================
# Pack Topology Limits
# =============================================================================

MIN_SERIES = 1
MIN_PARALLEL = 1


# =============================================================================
# Export Formatting
# =============================================================================

EXPORT_TITLE = "CELL BALANCER — PACK LAYOUT"
EXPORT_RULE_WIDTH = 60


# =============================================================================
# Configuration Dataclass
# =============================================================================

@dataclass
class BalancerConfig:
    """
    Configuration for pack balancing.

    Attributes:
    ----------
    nominal_cell_voltage : float
        Nominal voltage of a single cell (V)

    delta_warning_mah : float
        Group spread (mAh) above which a layout is flagged

    use_heap : bool
        Use the min-heap group lookup instead of the linear scan.
        Both produce identical layouts.
    """
    nominal_cell_voltage: float = NOMINAL_CELL_VOLTAGE
    delta_warning_mah: float = DELTA_WARNING_MAH
    use_heap: bool = False

    def is_delta_excessive(self, delta: float) -> bool:
        """Check whether a group spread exceeds the warning threshold."""
        return delta > self.delta_warning_mah

    def validate(self) -> tuple[bool, str]:
        """Validate configuration values."""
        errors = []

        if self.nominal_cell_voltage <= 0:
            errors.append("Nominal cell voltage must be positive")
        if self.nominal_cell_voltage > 5.0:
            errors.append("Nominal cell voltage should be at most 5.0V")
        if self.delta_warning_mah < 0:
            errors.append("Delta warning threshold cannot be negative")

        if errors:
            return False, "; ".join(errors)
        return True, ""
