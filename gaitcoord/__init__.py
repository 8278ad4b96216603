"""Gait coordination metrics: CRP, spatiotemporal parameters, and PCI."""
from __future__ import annotations
import logging

from .config.constants import AXES, COUPLINGS, Coupling
from .errors import GaitCoordError, InvalidArgumentError, InvalidInputError, MissingInputError
from .grid import TrialGrid
from .math.phase import extract_phase, fold180, wrap180
from .pipeline.crp import compute_crp
from .pipeline.pci import PCIResult, compute_pci
from .pipeline.phase_angles import build_phase_angles
from .pipeline.pipeline import run_pipeline
from .pipeline.spatiotemporal import SpatiotemporalResult, compute_spatiotemporal

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "AXES",
    "COUPLINGS",
    "Coupling",
    "GaitCoordError",
    "InvalidArgumentError",
    "InvalidInputError",
    "MissingInputError",
    "TrialGrid",
    "extract_phase",
    "wrap180",
    "fold180",
    "build_phase_angles",
    "compute_crp",
    "compute_spatiotemporal",
    "SpatiotemporalResult",
    "compute_pci",
    "PCIResult",
    "run_pipeline",
]
