"""A dense, row-major collection of numeric records."""

from __future__ import annotations

import sys
from typing import Iterable, TextIO


class Dataset:
    """``n`` records of ``d`` numeric values, stored row by row.

    ``sum_data_squared`` is optional per-record storage for the sum of squared
    values; it is kept only when requested and is never filled automatically.
    """

    def __init__(self, n: int = 0, d: int = 0, keep_sds: bool = False) -> None:
        if n < 0 or d < 0:
            raise ValueError(f"dataset dimensions must be non-negative, got n={n}, d={d}")
        self.n = n
        self.d = d
        self.data: list[float] = [0.0] * (n * d)
        self.sum_data_squared: list[float] | None = [0.0] * n if keep_sds else None

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable[float]]) -> "Dataset":
        """Build a dataset from an iterable of equally long records."""
        records = [[float(v) for v in row] for row in rows]
        d = len(records[0]) if records else 0
        if any(len(row) != d for row in records):
            raise ValueError("all records must have the same dimension")
        ds = cls(len(records), d)
        ds.data = [v for row in records for v in row]
        return ds

    @property
    def nd(self) -> int:
        """Total number of stored values (``n * d``)."""
        return self.n * self.d

    def _offset(self, key: tuple[int, int]) -> int:
        try:
            ndx, dim = key
        except (TypeError, ValueError):
            raise TypeError("dataset indices must be (record, dimension) pairs") from None
        if not 0 <= ndx < self.n:
            raise IndexError(f"record index {ndx} out of range for {self.n} records")
        if not 0 <= dim < self.d:
            raise IndexError(f"dimension {dim} out of range for dimension {self.d}")
        return ndx * self.d + dim

    def __getitem__(self, key: tuple[int, int]) -> float:
        return self.data[self._offset(key)]

    def __setitem__(self, key: tuple[int, int], value: float) -> None:
        self.data[self._offset(key)] = float(value)

    def row(self, ndx: int) -> list[float]:
        """Return a copy of record ``ndx``."""
        if not 0 <= ndx < self.n:
            raise IndexError(f"record index {ndx} out of range for {self.n} records")
        return self.data[ndx * self.d:(ndx + 1) * self.d]

    def fill(self, value: float) -> None:
        """Set every value to ``value``; ``sum_data_squared`` is left untouched."""
        self.data = [float(value)] * self.nd

    def copy(self) -> "Dataset":
        """Return a deep copy."""
        other = Dataset(self.n, self.d)
        other.data = list(self.data)
        other.sum_data_squared = (
            list(self.sum_data_squared) if self.sum_data_squared is not None else None
        )
        return other

    def print(self, out: TextIO | None = None) -> None:
        """Write the records as a matrix, one record per line."""
        out = sys.stdout if out is None else out
        for i in range(self.n):
            line = "".join(f"{v:>13.6g} " for v in self.row(i))
            out.write(line + "\n")