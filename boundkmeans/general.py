"""Vector helpers, center initialisation, assignment and timing utilities."""

from __future__ import annotations

import bisect
import itertools
import os
import random
import sys
import time
from typing import Iterable, Sequence

from .dataset import Dataset

_DBL_MAX = sys.float_info.max


def add_vectors(a: Sequence[float], b: Sequence[float]) -> list[float]:
    """Return the element-wise sum ``a + b``."""
    return [x + y for x, y in zip(a, b)]


def sub_vectors(a: Sequence[float], b: Sequence[float]) -> list[float]:
    """Return the element-wise difference ``a - b``."""
    return [x - y for x, y in zip(a, b)]


def squared_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Squared Euclidean distance between two vectors."""
    total = 0.0
    for x, y in zip(a, b):
        diff = x - y
        total += diff * diff
    return total


def center_dataset(x: Dataset) -> None:
    """Translate ``x`` in place so that its centroid is at the origin."""
    if x.n == 0:
        return
    centroid = [0.0] * x.d
    rows = [x.row(i) for i in range(x.n)]
    for row in rows:
        centroid = add_vectors(centroid, row)
    centroid = [c / x.n for c in centroid]
    x.data = [v for row in rows for v in sub_vectors(row, centroid)]


def _centers_from(x: Dataset, chosen: Iterable[int]) -> Dataset:
    chosen = list(chosen)
    c = Dataset(len(chosen), x.d)
    c.data = [v for idx in chosen for v in x.row(idx)]
    return c


def _check_k(x: Dataset, k: int) -> None:
    if k < 0:
        raise ValueError(f"k must be non-negative, got {k}")
    if k > 0 and x.n == 0:
        raise ValueError("cannot choose centers from an empty dataset")


def init_centers(x: Dataset, k: int, rng: random.Random | None = None) -> Dataset:
    """Choose ``k`` distinct records of ``x`` uniformly at random as centers."""
    _check_k(x, k)
    if k > x.n:
        raise ValueError(f"cannot choose {k} distinct centers from {x.n} records")
    rng = rng if rng is not None else random.Random()
    chosen: list[int] = []
    while len(chosen) < k:
        candidate = rng.randrange(x.n)
        if candidate not in chosen:
            chosen.append(candidate)
    return _centers_from(x, chosen)


def init_centers_kmeanspp(x: Dataset, k: int, rng: random.Random | None = None) -> Dataset:
    """k-means++ seeding using a sorted cumulative distribution.

    Records may be chosen more than once.
    """
    _check_k(x, k)
    if k == 0:
        return Dataset(0, x.d)
    rng = rng if rng is not None else random.Random()
    rows = [x.row(i) for i in range(x.n)]
    dist2 = [(_DBL_MAX, i) for i in range(x.n)]
    chosen = [rng.randrange(x.n)]

    while len(chosen) < k:
        last = rows[chosen[-1]]
        updated = []
        total = 0.0
        for best, example in dist2:
            best = min(best, squared_distance(rows[example], last))
            updated.append((best, example))
            total += best
        updated.sort()
        dist2 = updated

        if total > 0.0:
            cdf = list(itertools.accumulate(best / total for best, _ in dist2))
            pos = min(bisect.bisect_left(cdf, rng.random()), x.n - 1)
        else:
            pos = 0
        chosen.append(dist2[pos][1])

    return _centers_from(x, chosen)


def init_centers_kmeanspp_v2(x: Dataset, k: int, rng: random.Random | None = None) -> Dataset:
    """k-means++ seeding that never picks the same record twice."""
    _check_k(x, k)
    if k > x.n:
        raise ValueError(f"cannot choose {k} distinct centers from {x.n} records")
    if k == 0:
        return Dataset(0, x.d)
    rng = rng if rng is not None else random.Random()
    rows = [x.row(i) for i in range(x.n)]
    dist2 = [_DBL_MAX] * x.n
    chosen = [rng.randrange(x.n)]

    while len(chosen) < k:
        last = rows[chosen[-1]]
        dist2 = [min(best, squared_distance(row, last)) for best, row in zip(dist2, rows)]
        total = sum(dist2)
        if total <= 0.0:
            raise ValueError("not enough distinct records to choose centers from")

        while True:
            r = total * rng.random()
            cumulative = dist2[0]
            idx = 0
            while cumulative < r and idx < x.n - 1:
                idx += 1
                cumulative += dist2[idx]
            if idx not in chosen:
                break
        chosen.append(idx)

    return _centers_from(x, chosen)


def assign(x: Dataset, c: Dataset) -> list[int]:
    """Return, for each record of ``x``, the index of its closest center in ``c``."""
    centers = [c.row(j) for j in range(c.n)]
    assignment = []
    for i in range(x.n):
        point = x.row(i)
        shortest = _DBL_MAX
        closest = 0
        for j, center in enumerate(centers):
            d2 = squared_distance(point, center)
            if d2 < shortest:
                shortest = d2
                closest = j
        assignment.append(closest)
    return assignment


def format_array(arr: Iterable[object], separator: str = " ") -> str:
    """Join the items of ``arr`` with ``separator``."""
    return separator.join(str(v) for v in arr)


def get_memory_usage() -> float:
    """Resident set size in kilobytes, assuming 4096-byte pages; 0.0 if unknown."""
    try:
        with open("/proc/self/statm", encoding="ascii") as fh:
            fields = fh.read().split()
        resident_pages = int(fields[1])
    except (OSError, IndexError, ValueError):
        return 0.0
    return resident_pages * 4.0


def get_time() -> float:
    """User CPU time consumed by this process so far, in seconds."""
    return os.times().user


def get_wall_time() -> float:
    """Current wall-clock time in seconds."""
    return time.time()


def elapsed_time(start: float) -> float:
    """User CPU seconds elapsed since ``start`` (a value from :func:`get_time`)."""
    return get_time() - start