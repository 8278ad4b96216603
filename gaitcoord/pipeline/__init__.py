"""Batch transforms over the file x trial grid.

Modules:
    phase_angles   - Hilbert phase angles for every cycle trace of a segment grid
    crp            - continuous relative phase and its variability
    spatiotemporal - toe-off, stride, step and swing times
    pci            - phase coordination index
    pipeline       - run_pipeline, both branches in one call
"""

__all__ = []
