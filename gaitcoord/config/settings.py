from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from typing import List, Tuple

from .constants import AXES, COUPLINGS, LEGS, Coupling


def _get_bool(env: str, default: bool) -> bool:
    val = os.getenv(env, "").strip().lower()
    if val in {"1", "true", "yes", "y", "on"}:
        return True
    if val in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _get_list(env: str, default: List[str]) -> List[str]:
    raw = os.getenv(env)
    if not raw:
        return default
    parts = [p.strip() for p in raw.split(",")]
    return [p for p in parts if p]


def _get_couplings(env: str, default: Tuple[Coupling, ...]) -> Tuple[Coupling, ...]:
    """Parse ``distal:proximal`` pairs, e.g. ``L_thigh:L_shank,trunk:pelvis``."""
    pairs = _get_list(env, [])
    if not pairs:
        return default
    out = []
    for pair in pairs:
        distal, sep, proximal = pair.partition(":")
        if not sep or not distal.strip() or not proximal.strip():
            raise ValueError(f"{env}: expected 'distal:proximal', got '{pair}'")
        out.append(Coupling(distal.strip(), proximal.strip()))
    return tuple(out)


@dataclass(frozen=True)
class Settings:
    # General
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    debug: bool = _get_bool("DEBUG", False)

    # Recognized couplings / axes
    couplings: Tuple[Coupling, ...] = _get_couplings("GAITCOORD_COUPLINGS", COUPLINGS)
    axes: Tuple[str, ...] = tuple(_get_list("GAITCOORD_AXES", list(AXES)))

    # PCI reference legs computed by the batch runner
    ref_legs: Tuple[str, ...] = tuple(_get_list("GAITCOORD_REF_LEGS", list(LEGS)))


settings = Settings()


def configure_logging(level: str | None = None) -> None:
    """Attach a stderr handler to the root logger at ``level`` (default: settings)."""
    lvl = (level or ("DEBUG" if settings.debug else settings.log_level)).upper()
    logging.basicConfig(
        level=getattr(logging, lvl, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
