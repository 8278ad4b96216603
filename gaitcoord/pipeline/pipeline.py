from __future__ import annotations
import logging
from typing import Any, Dict, Mapping, Optional, Sequence

from ..config.settings import settings
from ..errors import MissingInputError
from .crp import compute_crp
from .pci import compute_pci_from_spatiotemporal, normalize_leg
from .phase_angles import build_phase_angles
from .spatiotemporal import compute_spatiotemporal

__all__ = ["run_pipeline"]

logger = logging.getLogger(__name__)


def run_pipeline(
    phase_angles: Optional[Mapping] = None,
    raw_tables=None,
    left_heel_strikes=None,
    right_heel_strikes=None,
    segment_angles: Optional[Mapping] = None,
    couplings: Optional[Sequence] = None,
    axes: Optional[Sequence[str]] = None,
    ref_legs: Optional[Sequence[str]] = None,
    options: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Run the CRP branch and the spatiotemporal/PCI branch over one file x trial grid.

    Either ``phase_angles`` (already phase-transformed traces) or
    ``segment_angles`` (raw per-cycle angles, converted with the Hilbert
    transform) feeds the CRP branch. ``raw_tables`` with both heel-strike grids
    feed the gait-timing branch. A branch whose inputs are all omitted is not
    run; a branch given only part of its inputs raises MissingInputError.

    options:
        left_column / right_column: toe-off channel positions or labels

    Returns dict with keys (present only for branches that ran):
        'phase_angles', 'crp', 'crp_variability', 'spatiotemporal', 'pci'
        where 'pci' maps each reference leg ('R'/'L') to a PCIResult.
    """
    opts = dict(options or {})
    out: Dict[str, Any] = {}

    timing_inputs = (raw_tables, left_heel_strikes, right_heel_strikes)
    run_crp = phase_angles is not None or segment_angles is not None
    run_timing = any(x is not None for x in timing_inputs)
    if not run_crp and not run_timing:
        raise MissingInputError("No inputs: provide phase/segment angles and/or raw tables with heel strikes.")
    if run_timing and any(x is None for x in timing_inputs):
        raise MissingInputError("Required inputs (raw_tables, left_heel_strikes, right_heel_strikes) are missing.")
    legs = tuple(normalize_leg(leg) for leg in (ref_legs if ref_legs is not None else settings.ref_legs))

    if run_crp:
        if phase_angles is None:
            phase_angles = build_phase_angles(segment_angles)
        crp_all, crp_var = compute_crp(phase_angles, couplings, axes)
        out["phase_angles"] = phase_angles
        out["crp"] = crp_all
        out["crp_variability"] = crp_var

    if run_timing:
        kw = {k: opts[k] for k in ("left_column", "right_column") if k in opts}
        st = compute_spatiotemporal(raw_tables, left_heel_strikes, right_heel_strikes, **kw)
        out["spatiotemporal"] = st
        out["pci"] = {leg: compute_pci_from_spatiotemporal(st, leg) for leg in legs}

    logger.info("Pipeline completed: %s", ", ".join(out))
    return out
