"""
Phase Coordination Index (PCI) for a single reference leg.

PCI combines the accuracy (PHI_ABS, distance from anti-phase) and the
consistency (PHI_CV) of the timing of the opposite leg's heel strike within
the reference leg's stride (Plotnik, Giladi & Hausdorff, 2007).
"""
from __future__ import annotations
import logging
import warnings
from typing import NamedTuple

import numpy as np

from ..config.constants import ANTI_PHASE_DEG, LEG_ALIASES, RIGHT
from ..errors import InvalidArgumentError
from ..grid import TrialGrid, is_absent
from ..math.phase import fold180, nanstd_sample

__all__ = [
    "PCIResult",
    "normalize_leg",
    "phase_values",
    "pci_scores",
    "compute_pci",
    "compute_pci_from_spatiotemporal",
]

logger = logging.getLogger(__name__)


class PCIResult(NamedTuple):
    """PHI (per-step array), PHI_ABS, PHI_CV and PCI grids for one reference leg."""

    PHI: TrialGrid
    PHI_ABS: TrialGrid
    PHI_CV: TrialGrid
    PCI: TrialGrid


def normalize_leg(leg) -> str:
    """Map 'R'/'right'/'L'/'left' (any case) to 'R' or 'L'."""
    key = str(leg).strip().lower() if isinstance(leg, str) else None
    if key not in LEG_ALIASES:
        raise InvalidArgumentError(f"ref_leg must be 'R' or 'L', got {leg!r}")
    return LEG_ALIASES[key]


def phase_values(step_opposite, stride_ref) -> np.ndarray:
    """PHI in degrees: 360 * step / stride, folded onto [0, 180]."""
    step = np.asarray(step_opposite, dtype=float)
    stride = np.asarray(stride_ref, dtype=float)
    with np.errstate(divide="ignore", invalid="ignore"):
        return fold180(360.0 * step / stride)


def pci_scores(phi) -> tuple[float, float, float]:
    """(PHI_ABS, PHI_CV, PCI) from a PHI series, NaNs excluded.

    A single step gives PHI_CV 0. A zero mean PHI makes PHI_CV (and PCI)
    non-finite; the value is returned as is.
    """
    phi = np.asarray(phi, dtype=float)
    with warnings.catch_warnings(), np.errstate(divide="ignore", invalid="ignore"):
        warnings.simplefilter("ignore", category=RuntimeWarning)
        phi_abs = np.nanmean(np.abs(phi - ANTI_PHASE_DEG))
        mu = np.nanmean(phi)
        sig = nanstd_sample(phi)
        phi_cv = 100.0 * (sig / mu)
    pci = phi_cv + (phi_abs / ANTI_PHASE_DEG) * 100.0
    return float(phi_abs), float(phi_cv), float(pci)


def compute_pci(stride_time_right, stride_time_left, step_time_right, step_time_left,
                ref_leg: str) -> PCIResult:
    """
    Compute PHI, PHI_ABS, PHI_CV and PCI per trial for one reference leg.

    Args:
        stride_time_right, stride_time_left: TrialGrids of stride-time series
        step_time_right, step_time_left: TrialGrids of step-time series
        ref_leg: 'R' or 'L' (reference leg)

    Returns:
        PCIResult of four TrialGrids; trials with missing series stay absent.
    """
    leg = normalize_leg(ref_leg)
    grids = []
    for name, g in (("stride_time_right", stride_time_right), ("stride_time_left", stride_time_left),
                    ("step_time_right", step_time_right), ("step_time_left", step_time_left)):
        if g is None or isinstance(g, (str, bytes)):
            raise InvalidArgumentError(f"{name} must be a file x trial grid")
        try:
            grids.append(TrialGrid.coerce(g))
        except TypeError:
            raise InvalidArgumentError(f"{name} must be a file x trial grid") from None
    stride_R, stride_L, step_R, step_L = grids
    shape = stride_R.shape
    if any(g.shape != shape for g in grids):
        raise InvalidArgumentError(f"Time grids differ in shape: {[g.shape for g in grids]}")

    if leg == RIGHT:
        stride_grid, opposite_grid, same_grid = stride_R, step_L, step_R
    else:
        stride_grid, opposite_grid, same_grid = stride_L, step_R, step_L

    out = PCIResult(*(stride_R.like() for _ in range(4)))

    logger.info("Calculating PHI, PHI_ABS, PHI_CV, and PCI for leg = %s ...", leg)
    for f, t in stride_R.indices():
        stride_ref = stride_grid[f, t]
        step_opp = opposite_grid[f, t]
        step_same = same_grid[f, t]
        if is_absent(stride_ref) or is_absent(step_opp) or is_absent(step_same):
            logger.info("Skipping file %d, trial %d: missing stride/step series.", f, t)
            continue
        stride_ref = np.asarray(stride_ref, dtype=float).ravel()
        step_opp = np.asarray(step_opp, dtype=float).ravel()
        m = min(stride_ref.size, step_opp.size, np.asarray(step_same).size)
        if m < 1:
            logger.info("Skipping file %d, trial %d: insufficient paired lengths.", f, t)
            continue

        phi = phase_values(step_opp[:m], stride_ref[:m])
        phi_abs, phi_cv, pci = pci_scores(phi)
        out.PHI[f, t] = phi
        out.PHI_ABS[f, t] = phi_abs
        out.PHI_CV[f, t] = phi_cv
        out.PCI[f, t] = pci
        logger.info("File %d, trial %d: %s_PCI = %.2f", f, t, leg, pci)

    logger.info("Single-leg PHI and PCI computations completed.")
    return out


def compute_pci_from_spatiotemporal(result, ref_leg: str) -> PCIResult:
    """compute_pci over the stride/step grids of a SpatiotemporalResult."""
    return compute_pci(result.stride_time_right, result.stride_time_left,
                       result.step_time_right, result.step_time_left, ref_leg)

