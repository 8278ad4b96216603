"""
Continuous Relative Phase (CRP) and CRP variability across gait cycles.

CRP for a segment coupling is the distal minus the proximal phase angle,
wrapped to [-180, 180). Variability is the across-cycle standard deviation at
each normalized time point (Lamb & Stoeckl, 2014).
"""
from __future__ import annotations
import logging
import warnings
from typing import Dict, Mapping, Optional, Sequence, Tuple

import numpy as np

from ..config.constants import PHASE_ABS_MAX_DEG, Coupling
from ..config.settings import settings
from ..errors import InvalidArgumentError, MissingInputError
from ..grid import TrialGrid, is_absent
from ..math.phase import nanstd_sample, wrap180

__all__ = ["CRPKey", "compute_crp", "crp_for_cycles", "crp_variability", "validate_couplings"]

logger = logging.getLogger(__name__)

CRPKey = Tuple[Coupling, str]


def validate_couplings(couplings, axes) -> Tuple[Tuple[Coupling, ...], Tuple[str, ...]]:
    """Normalize coupling and axis overrides; raise InvalidArgumentError when malformed."""
    if couplings is None:
        couplings = settings.couplings
    if axes is None:
        axes = settings.axes
    out_c = []
    for c in couplings:
        try:
            distal, proximal = c
        except (TypeError, ValueError):
            raise InvalidArgumentError(f"Coupling must be a (distal, proximal) pair, got {c!r}") from None
        if not isinstance(distal, str) or not isinstance(proximal, str) or not distal or not proximal:
            raise InvalidArgumentError(f"Coupling segment names must be non-empty strings, got {c!r}")
        out_c.append(Coupling(distal, proximal))
    out_a = tuple(axes)
    if not out_c:
        raise InvalidArgumentError("At least one segment coupling is required")
    if not out_a or not all(isinstance(a, str) and a for a in out_a):
        raise InvalidArgumentError(f"Axes must be non-empty strings, got {out_a!r}")
    return tuple(out_c), out_a


def _stack_cycles(cycles) -> Optional[np.ndarray]:
    """Cycles x samples float array, or None when traces are ragged."""
    try:
        A = np.array([np.asarray(c, dtype=float) for c in cycles], dtype=float)
    except ValueError:
        return None
    return A if A.ndim == 2 else None


def crp_for_cycles(distal: np.ndarray, proximal: np.ndarray) -> np.ndarray:
    """Wrapped distal - proximal phase difference, cycles x time."""
    return wrap180(np.asarray(distal, dtype=float) - np.asarray(proximal, dtype=float))


def crp_variability(crp: np.ndarray) -> np.ndarray:
    """Sample SD across cycles around the ensemble-mean trajectory, NaNs excluded.

    A single valid cycle yields 0 at that time point; an all-NaN column yields NaN.
    """
    C = np.asarray(crp, dtype=float)
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", category=RuntimeWarning)
        dev = C - np.nanmean(C, axis=0)
    return nanstd_sample(dev, axis=0)


def compute_crp(
    phase_angles: Mapping[str, Mapping[str, TrialGrid]],
    couplings: Optional[Sequence] = None,
    axes: Optional[Sequence[str]] = None,
) -> Tuple[Dict[CRPKey, TrialGrid], Dict[CRPKey, TrialGrid]]:
    """
    Compute CRP and CRP variability for every coupling, axis, file and trial.

    Args:
        phase_angles: segment -> axis -> TrialGrid; each cell is a sequence of
            per-cycle phase-angle traces in degrees
        couplings: (distal, proximal) pairs; defaults to settings.couplings
        axes: axis labels; defaults to settings.axes

    Returns:
        (crp_all, crp_variability) keyed by (Coupling, axis). Skipped
        combinations are left as absent cells.
    """
    couplings, axes = validate_couplings(couplings, axes)
    if not phase_angles:
        raise MissingInputError("Phase angles are missing; build them before computing CRP.")
    grids: Dict[Tuple[str, str], TrialGrid] = {}
    for c in couplings:
        for seg in (c.distal, c.proximal):
            for ax in axes:
                try:
                    grids[seg, ax] = TrialGrid.coerce(phase_angles[seg][ax])
                except KeyError:
                    raise MissingInputError(f"Phase angles missing for segment '{seg}', axis '{ax}'") from None

    # Grid layout and trial presence come from the first coupling's distal segment, first axis
    sentinel = grids[couplings[0].distal, axes[0]]
    for key, grid in grids.items():
        if grid.shape != sentinel.shape:
            raise InvalidArgumentError(f"Phase-angle grid {key} has shape {grid.shape}, expected {sentinel.shape}")

    crp_all: Dict[CRPKey, TrialGrid] = {}
    crp_var: Dict[CRPKey, TrialGrid] = {}
    for c in couplings:
        for ax in axes:
            crp_all[c, ax] = sentinel.like()
            crp_var[c, ax] = sentinel.like()

    logger.info("Computing CRP and variability for all gait cycles...")
    for f, t in sentinel.indices():
        if not sentinel.is_present(f, t):
            logger.info("Skipping file %d, trial %d: no phase angle data.", f, t)
            continue
        for c in couplings:
            for ax in axes:
                d_cell = grids[c.distal, ax][f, t]
                p_cell = grids[c.proximal, ax][f, t]
                if is_absent(d_cell) or is_absent(p_cell):
                    logger.info("Skipping file %d, trial %d, coupling %s, axis %s: missing segment data.",
                                f, t, c.name, ax)
                    continue
                D = _stack_cycles(d_cell)
                P = _stack_cycles(p_cell)
                if D is None or P is None or D.shape != P.shape:
                    logger.warning("Inconsistent cycles in file %d, trial %d, coupling %s, axis %s. Skipping.",
                                   f, t, c.name, ax)
                    continue
                if (np.abs(D) > PHASE_ABS_MAX_DEG).any() or (np.abs(P) > PHASE_ABS_MAX_DEG).any():
                    logger.warning("Extreme phase angle values in file %d, trial %d, coupling %s, axis %s. Skipping.",
                                   f, t, c.name, ax)
                    continue
                crp = crp_for_cycles(D, P)
                crp_all[c, ax][f, t] = crp
                crp_var[c, ax][f, t] = crp_variability(crp)
    logger.info("CRP and variability computation completed.")
    return crp_all, crp_var
