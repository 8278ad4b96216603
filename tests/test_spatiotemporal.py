from __future__ import annotations
import numpy as np
import pandas as pd
import pytest

from gaitcoord.errors import InvalidArgumentError, MissingInputError
from gaitcoord.grid import TrialGrid
from gaitcoord.pipeline.spatiotemporal import (
    compute_spatiotemporal,
    detect_toe_offs,
    step_times,
    stride_times,
    swing_times,
)


def make_table(n: int, left_minima, right_minima) -> pd.DataFrame:
    """12-column raw table; columns 5 and 11 carry dips at the given samples."""
    A = np.zeros((n, 12))
    A[:, 0] = np.arange(n)
    A[list(left_minima), 5] = -1.0
    A[list(right_minima), 11] = -1.0
    return pd.DataFrame(A)


def test_detect_toe_offs_finds_local_minima():
    s = np.arange(200)
    sig = np.cos(2 * np.pi * s / 50.0)
    idx = detect_toe_offs(sig)
    assert list(idx) == [25, 75, 125, 175]


def test_stride_times_are_successive_differences():
    assert np.array_equal(stride_times([10, 110, 215, 318]), [100, 105, 103])
    assert stride_times([]).size == 0
    assert stride_times(None).size == 0


def test_step_times_truncate_to_shorter_leg():
    L = [0, 100, 200, 300, 400]
    R = [55, 152, 251]
    left, right = step_times(L, R)
    assert left.size == 2
    assert np.array_equal(left, [55, 52])
    assert np.array_equal(left, right)


def test_step_times_with_one_strike_is_empty():
    left, right = step_times([10], [60, 160])
    assert left.size == 0 and right.size == 0


def test_swing_time_missing_when_no_later_heel_strike():
    sw = swing_times([20, 50], [0, 40])
    assert sw.size == 2
    assert sw[0] == 20.0
    assert np.isnan(sw[1])


def test_swing_time_uses_strictly_later_heel_strike():
    sw = swing_times([40, 60], [0, 40, 100])
    assert np.array_equal(sw, [60.0, 40.0])


def test_compute_spatiotemporal_grid():
    tables = TrialGrid.from_rows([[make_table(400, [60, 160, 260, 390], [110, 210, 310]), None]])
    hs_L = TrialGrid.from_rows([[[0, 100, 200, 300], [0, 100]]])
    hs_R = TrialGrid.from_rows([[[50, 150, 250], [50]]])
    res = compute_spatiotemporal(tables, hs_L, hs_R)

    assert np.array_equal(res.toe_off_left[0, 0], [60, 160, 260, 390])
    assert np.array_equal(res.toe_off_right[0, 0], [110, 210, 310])
    assert np.array_equal(res.stride_time_left[0, 0], [100, 100, 100])
    assert np.array_equal(res.stride_time_right[0, 0], [100, 100])
    assert np.array_equal(res.step_time_left[0, 0], [50, 50])
    assert np.array_equal(res.step_time_left[0, 0], res.step_time_right[0, 0])
    sw_L = res.swing_time_left[0, 0]
    assert sw_L.size == 4
    assert np.array_equal(sw_L[:3], [40, 40, 40]) and np.isnan(sw_L[3])
    assert np.array_equal(res.swing_time_right[0, 0], [40, 40, np.nan], equal_nan=True)

    # trial without raw data: every output absent
    for grid in res.for_leg('L').values():
        assert grid[0, 1] is None
    for grid in res.for_leg('right').values():
        assert grid[0, 1] is None


def test_swing_length_matches_toe_off_count():
    rng = np.random.default_rng(3)
    sig = rng.normal(size=(300, 12))
    tables = TrialGrid.from_rows([[pd.DataFrame(sig)]])
    res = compute_spatiotemporal(tables, [[[5, 90, 170, 250]]], [[[40, 130]]])
    for leg in ('L', 'R'):
        out = res.for_leg(leg)
        assert len(out['swing_time'][0, 0]) == len(out['toe_off'][0, 0])


def test_column_override_by_label_and_array_tables():
    df = make_table(120, [30], [80]).rename(columns={5: 'LTOE', 11: 'RTOE'})
    res = compute_spatiotemporal([[df]], [[[0, 60]]], [[[20, 90]]],
                                 left_column='LTOE', right_column='RTOE')
    assert list(res.toe_off_left[0, 0]) == [30]
    assert list(res.toe_off_right[0, 0]) == [80]

    res = compute_spatiotemporal([[df.to_numpy()]], [[[0, 60]]], [[[20, 90]]])
    assert list(res.toe_off_left[0, 0]) == [30]
    with pytest.raises(InvalidArgumentError):
        compute_spatiotemporal([[df.to_numpy()]], [[[0, 60]]], [[[20, 90]]], left_column='LTOE')


def test_narrow_table_is_skipped_not_fatal():
    narrow = pd.DataFrame(np.zeros((50, 4)))
    ok = make_table(120, [30], [80])
    res = compute_spatiotemporal([[narrow, ok]], [[[0], [0, 60]]], [[[10], [20, 90]]])
    assert res.toe_off_left[0, 0] is None
    assert list(res.toe_off_left[0, 1]) == [30]


def test_absent_heel_strikes_give_empty_series():
    res = compute_spatiotemporal([[make_table(100, [30], [70])]], [[None]], [[None]])
    assert res.stride_time_left[0, 0].size == 0
    assert res.step_time_right[0, 0].size == 0
    assert np.isnan(res.swing_time_left[0, 0]).all()


def test_structural_errors():
    with pytest.raises(MissingInputError):
        compute_spatiotemporal(None, [[None]], [[None]])
    with pytest.raises(InvalidArgumentError):
        compute_spatiotemporal([[None, None]], [[None]], [[None, None]])
