from __future__ import annotations
import numpy as np
import pytest

from gaitcoord.errors import InvalidArgumentError
from gaitcoord.grid import TrialGrid
from gaitcoord.pipeline.pci import compute_pci, normalize_leg, pci_scores, phase_values


def grid(*cells):
    return TrialGrid.from_rows([list(cells)])


def test_perfect_anti_phase_scores_zero():
    stride = grid([100.0, 100.0, 100.0])
    step = grid([50.0, 50.0, 50.0])
    PHI, PHI_ABS, PHI_CV, PCI = compute_pci(stride, stride, step, step, 'R')
    assert np.array_equal(PHI[0, 0], [180.0, 180.0, 180.0])
    assert PHI_ABS[0, 0] == 0.0
    assert PHI_CV[0, 0] == 0.0
    assert PCI[0, 0] == 0.0


def test_single_step_has_zero_cv():
    r = compute_pci(grid([100.0]), grid([100.0]), grid([50.0]), grid([50.0]), 'R')
    assert np.array_equal(r.PHI[0, 0], [180.0])
    assert r.PHI_CV[0, 0] == 0.0
    assert r.PCI[0, 0] == 0.0
    phi_abs, phi_cv, pci = pci_scores([150.0])
    assert phi_abs == 30.0 and phi_cv == 0.0
    assert np.isclose(pci, 30.0 / 180.0 * 100.0)


def test_ragged_rows_are_rejected():
    g = [[[100.0], [100.0]], [[100.0]]]
    with pytest.raises(InvalidArgumentError):
        compute_pci(g, g, g, g, 'R')


def test_phi_is_folded_onto_half_circle():
    phi = phase_values([75.0, 25.0, 150.0, 100.0], [100.0, 100.0, 100.0, 100.0])
    assert np.allclose(phi, [90.0, 90.0, 180.0, 0.0])
    assert np.all((phi >= 0.0) & (phi <= 180.0))


def test_reference_leg_selects_opposite_step_series():
    stride_R = grid([100.0, 100.0])
    stride_L = grid([200.0, 200.0])
    step_R = grid([40.0, 40.0])
    step_L = grid([60.0, 60.0])
    r = compute_pci(stride_R, stride_L, step_R, step_L, 'R')
    assert np.allclose(r.PHI[0, 0], 144.0)
    l = compute_pci(stride_R, stride_L, step_R, step_L, 'left')
    assert np.allclose(l.PHI[0, 0], 72.0)
    assert np.isclose(l.PHI_ABS[0, 0], 108.0)
    assert np.isclose(l.PCI[0, 0], 0.0 + 108.0 / 180.0 * 100.0)


def test_series_truncated_to_shortest():
    stride = grid([100.0, 100.0, 100.0, 100.0])
    step_opp = grid([50.0, 45.0])
    step_same = grid([50.0, 45.0, 50.0])
    r = compute_pci(stride, stride, step_same, step_opp, 'R')
    assert r.PHI[0, 0].size == 2
    assert np.allclose(r.PHI[0, 0], [180.0, 162.0])


def test_scores_match_definitions():
    phi = np.array([170.0, 160.0, np.nan, 180.0])
    phi_abs, phi_cv, pci = pci_scores(phi)
    valid = phi[~np.isnan(phi)]
    assert np.isclose(phi_abs, np.mean(np.abs(valid - 180.0)))
    assert np.isclose(phi_cv, 100.0 * np.std(valid, ddof=1) / np.mean(valid))
    assert np.isclose(pci, phi_cv + phi_abs / 180.0 * 100.0)


def test_zero_mean_phi_is_propagated_not_masked():
    stride = grid([100.0, 100.0])
    step = grid([0.0, 0.0])
    r = compute_pci(stride, stride, step, step, 'R')
    assert r.PHI_ABS[0, 0] == 180.0
    assert np.isnan(r.PHI_CV[0, 0])
    assert np.isnan(r.PCI[0, 0])


def test_missing_series_leave_trial_absent():
    stride = grid([100.0, 100.0], None, [100.0])
    step_R = grid([50.0, 50.0], [50.0], [])
    step_L = grid([50.0, 50.0], [50.0], [50.0])
    r = compute_pci(stride, stride, step_R, step_L, 'R')
    assert r.PCI[0, 0] == 0.0
    assert r.PCI[0, 1] is None and r.PHI[0, 1] is None
    # reference leg's own step series is empty -> skipped as well
    assert r.PCI[0, 2] is None


def test_invalid_arguments():
    g = grid([100.0])
    with pytest.raises(InvalidArgumentError):
        compute_pci(g, g, g, g, 'X')
    with pytest.raises(InvalidArgumentError):
        compute_pci(g, g, g, None, 'R')
    with pytest.raises(InvalidArgumentError):
        compute_pci(g, g, g, grid([1.0], [2.0]), 'R')
    assert normalize_leg('r') == 'R'
    assert normalize_leg(' Left ') == 'L'
    with pytest.raises(InvalidArgumentError):
        normalize_leg(None)


def test_nested_rows_are_accepted():
    rows = [[[100.0, 100.0]], [None]]
    steps = [[[50.0, 50.0]], [None]]
    r = compute_pci(rows, rows, steps, steps, 'L')
    assert r.PCI.shape == (2, 1)
    assert r.PCI[0, 0] == 0.0
    assert r.PCI[1, 0] is None
