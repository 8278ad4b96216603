"""Centralized constants, default couplings, and column positions for gait coordination."""
from __future__ import annotations

from typing import NamedTuple


class Coupling(NamedTuple):
    """Ordered (distal, proximal) segment pair."""

    distal: str
    proximal: str

    @property
    def name(self) -> str:
        return f"{self.distal}_{self.proximal}"


# Segment couplings (distal, proximal)
COUPLINGS = (
    Coupling("L_thigh", "L_shank"),
    Coupling("L_shank", "L_foot"),
    Coupling("R_thigh", "R_shank"),
    Coupling("R_shank", "R_foot"),
    Coupling("R_thigh", "pelvis"),
    Coupling("L_thigh", "pelvis"),
    Coupling("trunk", "pelvis"),
)
AXES = ("X", "Y", "Z")

# Legs
LEFT = "L"
RIGHT = "R"
LEGS = (LEFT, RIGHT)
LEG_ALIASES = {
    "l": LEFT, "left": LEFT,
    "r": RIGHT, "right": RIGHT,
}

# Cycle normalization
CYCLE_N = 100               # samples per normalized gait cycle

# CRP
PHASE_ABS_MAX_DEG = 360.0   # larger magnitudes mean corrupted instrumentation

# Toe-off channels in the raw trial tables (zero-based column positions)
TOE_OFF_COL_LEFT = 5
TOE_OFF_COL_RIGHT = 11

# PCI
ANTI_PHASE_DEG = 180.0
