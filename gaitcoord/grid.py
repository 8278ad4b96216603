"""
File x trial grid container.

Every per-trial input and output is held in a TrialGrid. A cell that is
``None`` or an empty container means "no data for this trial"; consumers skip
such cells instead of failing.
"""
from __future__ import annotations
from typing import Any, Iterator, Sequence, Tuple

import numpy as np
import pandas as pd

from .errors import InvalidArgumentError

__all__ = ["TrialGrid", "is_absent"]


def is_absent(value: Any) -> bool:
    """True for None and for empty arrays, sequences and tables."""
    if value is None:
        return True
    if isinstance(value, pd.DataFrame):
        return value.empty
    if isinstance(value, np.ndarray):
        return value.size == 0
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


class TrialGrid:
    """Rectangular (file, trial) grid of optional cells."""

    def __init__(self, n_files: int, n_trials: int):
        if n_files < 0 or n_trials < 0:
            raise ValueError(f"Invalid grid shape ({n_files}, {n_trials})")
        self._shape = (int(n_files), int(n_trials))
        self._cells: list[list[Any]] = [[None] * self._shape[1] for _ in range(self._shape[0])]

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Any]]) -> "TrialGrid":
        """Build a grid from nested rows (one row per file). Short rows are padded with None."""
        n_files = len(rows)
        n_trials = max((len(r) for r in rows), default=0)
        grid = cls(n_files, n_trials)
        for f, row in enumerate(rows):
            for t, value in enumerate(row):
                grid[f, t] = value
        return grid

    @classmethod
    def coerce(cls, value: Any) -> "TrialGrid":
        """Accept a TrialGrid as is; nested rows must all have the same length."""
        if isinstance(value, TrialGrid):
            return value
        lengths = {len(r) for r in value}
        if len(lengths) > 1:
            raise InvalidArgumentError(f"Ragged grid rows: lengths {sorted(lengths)}")
        return cls.from_rows(value)

    def like(self) -> "TrialGrid":
        """Empty grid with the same shape."""
        return TrialGrid(*self._shape)

    @property
    def shape(self) -> Tuple[int, int]:
        return self._shape

    @property
    def n_files(self) -> int:
        return self._shape[0]

    @property
    def n_trials(self) -> int:
        return self._shape[1]

    def __getitem__(self, key: Tuple[int, int]) -> Any:
        f, t = key
        return self._cells[f][t]

    def __setitem__(self, key: Tuple[int, int], value: Any) -> None:
        f, t = key
        self._cells[f][t] = value

    def is_present(self, f: int, t: int) -> bool:
        return not is_absent(self._cells[f][t])

    def indices(self) -> Iterator[Tuple[int, int]]:
        for f in range(self._shape[0]):
            for t in range(self._shape[1]):
                yield f, t

    def items(self) -> Iterator[Tuple[Tuple[int, int], Any]]:
        """Yield ((file, trial), value) for present cells only, row-major."""
        for f, t in self.indices():
            if self.is_present(f, t):
                yield (f, t), self._cells[f][t]

    @property
    def present_count(self) -> int:
        return sum(1 for _ in self.items())

    def to_frame(self, name: str = "value") -> pd.DataFrame:
        """Long-form table of present cells: columns file, trial, ``name``.

        Scalar cells are stored as floats; sequence cells are kept as arrays.
        """
        rows = []
        for (f, t), value in self.items():
            if isinstance(value, (int, float, np.number)):
                value = float(value)
            rows.append({"file": f, "trial": t, name: value})
        return pd.DataFrame(rows, columns=["file", "trial", name])

    def __repr__(self) -> str:
        return f"TrialGrid(shape={self._shape}, present={self.present_count})"
