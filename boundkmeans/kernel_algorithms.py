"""Kernelised k-means algorithms: a plain one and one pruned with Elkan's bounds."""

from __future__ import annotations

import math
import sys
from collections.abc import MutableSequence

from .dataset import Dataset
from .kernel import KernelKmeans

_DBL_MAX = sys.float_info.max


def _root(value: float) -> float:
    # Kernel distances can come out a hair below zero through rounding.
    return math.sqrt(value) if value > 0.0 else 0.0


class _CachedNormKernelKmeans(KernelKmeans):
    """Uses the precomputed ``cc`` for a center's inner product with itself."""

    def center_center_inner_product(self, c1: int, c2: int) -> float:
        if c1 == c2 and c1 < len(self.cc):
            return self.cc[c1]
        return super().center_center_inner_product(c1, c2)


class NaiveKernelKmeans(_CachedNormKernelKmeans):
    """Kernel k-means that compares every record with every center."""

    def name(self) -> str:
        return f"naive_kernel({self.kernel.name()})"

    def _run_thread(self, thread_id: int, max_iterations: int) -> int:
        iterations = 0
        start_ndx, end_ndx = self._start(thread_id), self._end(thread_id)

        while iterations < max_iterations and not self.converged:
            iterations += 1
            self.memberships, self.cc = self.compute_memberships()
            self.converged = True
            membership_changed = False

            for i in range(start_ndx, end_ndx):
                closest = self.assignment[i]
                current = self.point_center_dist2(i, closest)
                for j in range(self.k):
                    if j == closest:
                        continue
                    dist2 = self.point_center_dist2(i, j)
                    if dist2 < current:
                        closest = j
                        current = dist2
                if self.assignment[i] != closest:
                    self.assignment[i] = closest
                    membership_changed = True

            self._check_assignment(iterations, start_ndx, end_ndx)

            if membership_changed:
                self.converged = False

        return iterations


class ElkanKernelKmeans(_CachedNormKernelKmeans):
    """Kernel k-means that prunes distance computations with Elkan's k lower bounds."""

    def initialize(
        self,
        x: Dataset,
        k: int,
        initial_assignment: MutableSequence[int],
        num_threads: int = 1,
    ) -> None:
        super().initialize(x, k, initial_assignment, num_threads)
        # Invalid bounds force the first iteration to do all its work.
        self.center_center_dist_div2 = [[0.0] * self.k for _ in range(self.k)]
        self.s = [0.0] * self.k
        self.upper = [_DBL_MAX] * self.n
        self.lower = [[0.0] * self.k for _ in range(self.n)]
        self.new_memberships: list[list[int]] = [[] for _ in range(self.k)]
        self.new_cc = [0.0] * self.k

    def name(self) -> str:
        return f"elkan_kernel({self.kernel.name()})"

    def _run_thread(self, thread_id: int, max_iterations: int) -> int:
        iterations = 0
        start_ndx, end_ndx = self._start(thread_id), self._end(thread_id)

        self.memberships, self.cc = self.compute_memberships()

        while iterations < max_iterations and not self.converged:
            iterations += 1
            self.converged = True
            membership_changed = False

            for i in range(start_ndx, end_ndx):
                if self._reassign(i):
                    membership_changed = True

            self._check_assignment(iterations, start_ndx, end_ndx)

            if membership_changed:
                self.converged = False
            if self.converged:
                break

            self.new_memberships, self.new_cc = self.compute_memberships()
            self._compute_center_movement()
            self.memberships, self.new_memberships = self.new_memberships, self.memberships
            self.cc, self.new_cc = self.new_cc, self.cc
            self._update_center_dists()
            self._update_bounds(start_ndx, end_ndx)

        return iterations

    def _reassign(self, i: int) -> bool:
        """Find the closest center for record ``i``; report whether it changed."""
        closest = self.assignment[i]
        if self.upper[i] <= self.s[closest]:
            return False

        lower = self.lower[i]
        half = self.center_center_dist_div2
        stale = True
        for j in range(self.k):
            if j == closest:
                continue
            if self.upper[i] <= lower[j] or self.upper[i] <= half[closest][j]:
                continue

            if stale:
                self.upper[i] = _root(self.point_center_dist2(i, closest))
                lower[closest] = self.upper[i]
                stale = False
                if self.upper[i] <= lower[j] or self.upper[i] <= half[closest][j]:
                    continue

            lower[j] = _root(self.point_center_dist2(i, j))
            if lower[j] < self.upper[i]:
                closest = j
                self.upper[i] = lower[j]

        if self.assignment[i] != closest:
            self.assignment[i] = closest
            return True
        return False

    def _compute_center_movement(self) -> None:
        self.center_movement = [
            _root(
                self.cc[j]
                - 2.0
                * self.center_center_inner_product_general(
                    self.memberships[j], self.new_memberships[j]
                )
                + self.new_cc[j]
            )
            for j in range(self.k)
        ]

    def _update_center_dists(self) -> None:
        half = self.center_center_dist_div2
        for c1 in range(self.k):
            half[c1][c1] = self.s[c1] = _DBL_MAX
            for c2 in range(self.k):
                if c2 > c1:
                    half[c1][c2] = half[c2][c1] = _root(self.center_center_dist2(c1, c2)) / 2.0
                if half[c1][c2] < self.s[c1]:
                    self.s[c1] = half[c1][c2]

    def _update_bounds(self, start_ndx: int, end_ndx: int) -> None:
        movement = self.center_movement
        for i in range(start_ndx, end_ndx):
            self.upper[i] += movement[self.assignment[i]]
            self.lower[i] = [b - m for b, m in zip(self.lower[i], movement)]