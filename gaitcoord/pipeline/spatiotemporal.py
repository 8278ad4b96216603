"""
Toe-off detection and stride, step, and swing times per leg.

All event indices and durations are in samples of the raw trial tables.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Dict, Tuple, Union

import numpy as np
import pandas as pd
from scipy.signal import find_peaks

from ..config.constants import LEFT, TOE_OFF_COL_LEFT, TOE_OFF_COL_RIGHT
from ..errors import InvalidArgumentError, MissingInputError
from ..grid import TrialGrid, is_absent
from .pci import normalize_leg

__all__ = [
    "SpatiotemporalResult",
    "detect_toe_offs",
    "stride_times",
    "step_times",
    "swing_times",
    "compute_spatiotemporal",
]

logger = logging.getLogger(__name__)

Column = Union[int, str]


@dataclass(frozen=True)
class SpatiotemporalResult:
    """Per-leg event and duration grids, all sharing the raw-table grid shape."""

    toe_off_left: TrialGrid
    toe_off_right: TrialGrid
    stride_time_left: TrialGrid
    stride_time_right: TrialGrid
    step_time_left: TrialGrid
    step_time_right: TrialGrid
    swing_time_left: TrialGrid
    swing_time_right: TrialGrid

    def for_leg(self, leg: str) -> Dict[str, TrialGrid]:
        suffix = "left" if normalize_leg(leg) == LEFT else "right"
        return {
            name: getattr(self, f"{name}_{suffix}")
            for name in ("toe_off", "stride_time", "step_time", "swing_time")
        }


def _column(table: Any, col: Column) -> np.ndarray:
    if isinstance(table, pd.DataFrame):
        series = table[col] if isinstance(col, str) else table.iloc[:, col]
        return series.to_numpy(dtype=float)
    if isinstance(col, str):
        raise InvalidArgumentError(f"Column label '{col}' requires a DataFrame table")
    return np.asarray(table, dtype=float)[:, col]


def _events(value: Any) -> np.ndarray:
    if is_absent(value):
        return np.zeros(0, dtype=float)
    return np.asarray(value, dtype=float).ravel()


def detect_toe_offs(signal) -> np.ndarray:
    """Sample indices of local minima of a toe-off marker/force channel."""
    x = np.asarray(signal, dtype=float)
    idx, _ = find_peaks(-x)
    return idx


def stride_times(heel_strikes) -> np.ndarray:
    """Intervals between consecutive same-leg heel strikes."""
    return np.diff(_events(heel_strikes))


def step_times(hs_left, hs_right) -> Tuple[np.ndarray, np.ndarray]:
    """Absolute cross-leg heel-strike offsets for the first min(len) - 1 pairs.

    Returns (left, right); both legs use the same offset so the two series are
    identical.
    """
    L = _events(hs_left)
    R = _events(hs_right)
    m = min(L.size, R.size)
    n = max(m - 1, 0)
    left = np.abs(R[:n] - L[:n])
    right = np.abs(L[:n] - R[:n])
    return left, right


def swing_times(toe_offs, heel_strikes) -> np.ndarray:
    """Time from each toe-off to the next same-leg heel strike; NaN when none follows."""
    to = _events(toe_offs)
    hs = _events(heel_strikes)
    out = np.full(to.size, np.nan)
    nxt = np.searchsorted(hs, to, side="right")
    ok = nxt < hs.size
    out[ok] = hs[nxt[ok]] - to[ok]
    return out


def compute_spatiotemporal(
    raw_tables,
    left_heel_strikes,
    right_heel_strikes,
    left_column: Column = TOE_OFF_COL_LEFT,
    right_column: Column = TOE_OFF_COL_RIGHT,
) -> SpatiotemporalResult:
    """
    Toe-off, stride, step and swing times for both legs over the trial grid.

    Args:
        raw_tables: TrialGrid of per-trial tables (DataFrame or 2D array)
        left_heel_strikes, right_heel_strikes: TrialGrids of heel-strike indices
        left_column, right_column: toe-off channel by zero-based position or label

    Returns:
        SpatiotemporalResult; trials without a raw table are absent in all grids.
    """
    if raw_tables is None or left_heel_strikes is None or right_heel_strikes is None:
        raise MissingInputError("Raw tables and left/right heel strikes are all required.")
    tables = TrialGrid.coerce(raw_tables)
    hs_L = TrialGrid.coerce(left_heel_strikes)
    hs_R = TrialGrid.coerce(right_heel_strikes)
    for label, grid in (("left heel strikes", hs_L), ("right heel strikes", hs_R)):
        if grid.shape != tables.shape:
            raise InvalidArgumentError(f"{label} grid has shape {grid.shape}, expected {tables.shape}")

    out = {name: tables.like() for name in SpatiotemporalResult.__dataclass_fields__}

    logger.info("Calculating toe-off, stride, step, and swing times for right and left legs...")
    for f, t in tables.indices():
        if not tables.is_present(f, t):
            logger.info("Skipping file %d, trial %d: missing raw data.", f, t)
            continue
        table = tables[f, t]
        try:
            to_L = detect_toe_offs(_column(table, left_column))
            to_R = detect_toe_offs(_column(table, right_column))
        except (IndexError, KeyError) as exc:
            logger.warning("Skipping file %d, trial %d: toe-off channel not found (%s).", f, t, exc)
            continue
        L = _events(hs_L[f, t])
        R = _events(hs_R[f, t])

        step_L, step_R = step_times(L, R)
        out["toe_off_left"][f, t] = to_L
        out["toe_off_right"][f, t] = to_R
        out["stride_time_left"][f, t] = stride_times(L)
        out["stride_time_right"][f, t] = stride_times(R)
        out["step_time_left"][f, t] = step_L
        out["step_time_right"][f, t] = step_R
        out["swing_time_left"][f, t] = swing_times(to_L, L)
        out["swing_time_right"][f, t] = swing_times(to_R, R)
        logger.info("File %d, trial %d: toe-off, stride, step, and swing times calculated.", f, t)

    return SpatiotemporalResult(**out)
