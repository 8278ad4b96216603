"""
Build phase-angle sets from per-cycle segment angle traces.

Input and output share the same nesting: segment -> axis -> TrialGrid, with
each cell holding one trace per gait cycle.
"""
from __future__ import annotations
import logging
from typing import Dict, Mapping, Sequence

import numpy as np

from ..errors import InvalidInputError
from ..grid import TrialGrid
from ..math.phase import extract_phase

__all__ = ["PhaseAngleSet", "phase_angles_for_cycles", "build_phase_angles"]

logger = logging.getLogger(__name__)

PhaseAngleSet = Dict[str, Dict[str, TrialGrid]]


def phase_angles_for_cycles(cycles: Sequence) -> list[np.ndarray]:
    """Apply extract_phase to each cycle trace independently."""
    return [extract_phase(trace) for trace in cycles]


def build_phase_angles(segment_angles: Mapping[str, Mapping[str, TrialGrid]]) -> PhaseAngleSet:
    """Convert segment angle grids into phase-angle grids of the same layout.

    A cell whose traces fail validation is logged and left absent; the rest of
    the grid is still converted.
    """
    out: PhaseAngleSet = {}
    for segment, by_axis in segment_angles.items():
        out[segment] = {}
        for axis, grid in by_axis.items():
            grid = TrialGrid.coerce(grid)
            result = grid.like()
            for (f, t), cycles in grid.items():
                try:
                    result[f, t] = phase_angles_for_cycles(cycles)
                except InvalidInputError as exc:
                    logger.warning("Skipping file %d, trial %d, segment %s, axis %s: %s",
                                   f, t, segment, axis, exc)
            out[segment][axis] = result
    return out
