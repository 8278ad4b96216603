from __future__ import annotations
import logging
import warnings

import numpy as np
from scipy.signal import hilbert

from ..errors import InvalidInputError

__all__ = ["extract_phase", "wrap180", "fold180", "nanstd_sample"]

logger = logging.getLogger(__name__)


def extract_phase(signal) -> np.ndarray:
    """Instantaneous phase angle of a real-valued 1D signal in degrees, range (-180, 180].

    The signal is centred on its NaN-omitting mean and passed through the
    analytic-signal (Hilbert) transform; the phase is the angle of the complex
    result. NaNs are not removed and degrade the output.

    Raises InvalidInputError when ``signal`` is empty, not 1D, or not real
    numeric (complex input is rejected).
    """
    x = np.asarray(signal)
    if x.size == 0:
        raise InvalidInputError("Input signal must be a non-empty numeric array.")
    if x.dtype.kind not in "iuf":
        raise InvalidInputError(f"Input signal must be real numeric, got dtype {x.dtype}.")
    if x.ndim != 1:
        raise InvalidInputError(f"Input signal must be 1D, got shape {x.shape}.")
    x = x.astype(float)
    if np.isnan(x).any():
        logger.warning("Input signal contains NaN values; phase output will be degraded.")
        if np.isnan(x).all():
            return np.full(x.shape, np.nan)
    centered = x - np.nanmean(x)
    analytic = hilbert(centered)
    return np.rad2deg(np.angle(analytic))


def wrap180(A):
    """Wrap angles in degrees to [-180, 180) per element."""
    X = np.asarray(A, dtype=float)
    return np.mod(X + 180.0, 360.0) - 180.0


def fold180(A):
    """Fold angles in degrees onto [0, 180]: reduce mod 360, reflect values above 180."""
    X = np.mod(np.asarray(A, dtype=float), 360.0)
    return np.where(X > 180.0, 360.0 - X, X)


def nanstd_sample(A, axis=None):
    """Sample SD (ddof=1) ignoring NaNs; 0 where only one valid sample exists.

    All-NaN slices stay NaN.
    """
    X = np.asarray(A, dtype=float)
    n = np.sum(~np.isnan(X), axis=axis)
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", category=RuntimeWarning)
        sd = np.nanstd(X, axis=axis, ddof=1)
    return np.where(n == 1, 0.0, sd)
