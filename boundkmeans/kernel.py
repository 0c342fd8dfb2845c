"""Kernels and the base class for kernelised k-means."""

from __future__ import annotations

import abc
import math
from collections.abc import MutableSequence, Sequence

from .dataset import Dataset
from .kmeans import Kmeans


def _dot(a: Sequence[float], b: Sequence[float]) -> float:
    return sum(p * q for p, q in zip(a, b))


class Kernel(abc.ABC):
    """A similarity function between two vectors."""

    @abc.abstractmethod
    def __call__(self, a: Sequence[float], b: Sequence[float]) -> float:
        """Kernel value of ``a`` and ``b``."""

    @abc.abstractmethod
    def name(self) -> str:
        """Printable description of the kernel."""


class LinearKernel(Kernel):
    """The ordinary dot product."""

    def __call__(self, a: Sequence[float], b: Sequence[float]) -> float:
        return _dot(a, b)

    def name(self) -> str:
        return "linear"


class PolynomialKernel(Kernel):
    """``(<a, b> + c) ** power``."""

    def __init__(self, c: float, power: float) -> None:
        self.c = c
        self.power = power

    def __call__(self, a: Sequence[float], b: Sequence[float]) -> float:
        return math.pow(_dot(a, b) + self.c, self.power)

    def name(self) -> str:
        return f"poly[{self.c:g},{self.power:g}]"


class GaussianKernel(Kernel):
    """``exp(-|a - b|^2 / (2 tau^2))``."""

    def __init__(self, tau: float) -> None:
        self.tau = tau
        self._two_tau2 = 2.0 * tau * tau

    def __call__(self, a: Sequence[float], b: Sequence[float]) -> float:
        d2 = _dot(a, a) - 2 * _dot(a, b) + _dot(b, b)
        return math.exp(-d2 / self._two_tau2)

    def name(self) -> str:
        return f"gaussian[{self.tau:g}]"


class KernelKmeans(Kmeans):
    """k-means in a kernel's feature space.

    Centers are not stored explicitly; each is represented by the list of
    records that belong to its cluster.
    """

    def __init__(self, kernel: Kernel) -> None:
        super().__init__()
        self.kernel = kernel
        self.memberships: list[list[int]] = []
        self.cc: list[float] = []
        self._rows: list[list[float]] = []

    def initialize(
        self,
        x: Dataset,
        k: int,
        initial_assignment: MutableSequence[int],
        num_threads: int = 1,
    ) -> None:
        super().initialize(x, k, initial_assignment, num_threads)
        self._rows = [x.row(i) for i in range(x.n)]
        self.cc = [0.0] * self.k
        self.memberships = [[] for _ in range(self.k)]

    def center_center_inner_product_general(
        self, members1: Sequence[int], members2: Sequence[int]
    ) -> float:
        """Kernel inner product of the means of two member lists."""
        rows = self._rows
        kernel = self.kernel
        total = 0.0
        if members1 is members2:
            for pos, i in enumerate(members1):
                total += kernel(rows[i], rows[i])
                for j in members1[pos + 1:]:
                    total += 2.0 * kernel(rows[i], rows[j])
        else:
            for i in members1:
                for j in members2:
                    total += kernel(rows[i], rows[j])
        count = len(members1) * len(members2)
        return total / count if count else total

    def point_center_inner_product_general(self, i: int, members: Sequence[int]) -> float:
        """Kernel inner product of record ``i`` with the mean of ``members``."""
        point = self._rows[i]
        total = sum(self.kernel(point, self._rows[j]) for j in members)
        return total / len(members) if members else total

    def point_point_inner_product(self, x1: int, x2: int) -> float:
        return self.kernel(self._rows[x1], self._rows[x2])

    def point_center_inner_product(self, xndx: int, cndx: int) -> float:
        return self.point_center_inner_product_general(xndx, self.memberships[cndx])

    def center_center_inner_product(self, c1: int, c2: int) -> float:
        return self.center_center_inner_product_general(
            self.memberships[c1], self.memberships[c2]
        )

    def compute_memberships(self) -> tuple[list[list[int]], list[float]]:
        """Members of each cluster under the current assignment, and each
        center's inner product with itself."""
        memberships: list[list[int]] = [[] for _ in range(self.k)]
        for i in range(self.n):
            memberships[self.assignment[i]].append(i)
        cc = [self.center_center_inner_product_general(m, m) for m in memberships]
        return memberships, cc