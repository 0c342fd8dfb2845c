"""Abstract base for Lloyd-style k-means algorithms."""

from __future__ import annotations

import abc
import sys
from collections.abc import MutableSequence

from .dataset import Dataset


class AssignmentError(Exception):
    """A point is not assigned to its closest center."""

    def __init__(
        self,
        iteration: int,
        point: int,
        closest: int,
        closest_dist2: float,
        assigned: int,
        assigned_dist2: float,
    ) -> None:
        super().__init__(
            f"assignment error at iteration {iteration}: point {point} is assigned to "
            f"center {assigned} (dist2 {assigned_dist2}) but center {closest} "
            f"is closer (dist2 {closest_dist2})"
        )
        self.iteration = iteration
        self.point = point
        self.closest = closest
        self.closest_dist2 = closest_dist2
        self.assigned = assigned
        self.assigned_dist2 = assigned_dist2


class Kmeans(abc.ABC):
    """Shared state and helpers for k-means algorithms.

    Subclasses implement :meth:`_run_thread`, :meth:`name` and the three inner
    products. The work is done in a single thread; the thread count given to
    :meth:`initialize` is validated and otherwise ignored.
    """

    #: When true, algorithms check the full assignment after every iteration.
    verify = False

    def __init__(self) -> None:
        self.x: Dataset | None = None
        self.n = 0
        self.k = 0
        self.d = 0
        self.num_threads = 0
        self.converged = False
        self.cluster_size: list[list[int]] = []
        self.center_movement: list[float] = []
        self.assignment: MutableSequence[int] = []
        self.num_distances = 0

    def initialize(
        self,
        x: Dataset,
        k: int,
        initial_assignment: MutableSequence[int],
        num_threads: int = 1,
    ) -> None:
        """Prepare to cluster ``x`` into ``k`` clusters.

        ``initial_assignment`` is modified in place and holds the final
        assignment once :meth:`run` returns.
        """
        if k < 1:
            raise ValueError(f"k must be positive, got {k}")
        if num_threads < 1:
            raise ValueError(f"num_threads must be positive, got {num_threads}")
        if len(initial_assignment) != x.n:
            raise ValueError(
                f"assignment has {len(initial_assignment)} entries for {x.n} records"
            )
        for i, a in enumerate(initial_assignment):
            if not 0 <= a < k:
                raise ValueError(f"record {i} is assigned to cluster {a}, outside [0, {k})")

        self.converged = False
        self.x = x
        self.n = x.n
        self.d = x.d
        self.k = k
        self.num_threads = 1
        self.assignment = initial_assignment
        self.center_movement = [0.0] * k
        self.cluster_size = []
        for t in range(self.num_threads):
            sizes = [0] * k
            for i in range(self._start(t), self._end(t)):
                sizes[self.assignment[i]] += 1
            self.cluster_size.append(sizes)
        self.num_distances = 0

    def run(self, max_iterations: int | None = None) -> int:
        """Cluster until convergence or ``max_iterations``; return the iteration count."""
        if self.x is None:
            raise RuntimeError("initialize the algorithm before running it")
        if max_iterations is None:
            max_iterations = sys.maxsize
        return self._run_thread(0, max_iterations)

    def get_assignment(self, x_index: int) -> int:
        """Cluster currently assigned to record ``x_index``."""
        return self.assignment[x_index]

    def verify_assignment(self, iteration: int, start_ndx: int, end_ndx: int) -> None:
        """Raise :class:`AssignmentError` if a record in the range is misassigned."""
        for i in range(start_ndx, end_ndx):
            assigned = self.assignment[i]
            closest = assigned
            assigned_dist2 = closest_dist2 = self.point_center_dist2(i, closest)
            for j in range(self.k):
                if j == assigned:
                    continue
                d2 = self.point_center_dist2(i, j)
                if d2 < closest_dist2:
                    closest = j
                    closest_dist2 = d2
            if closest != assigned:
                raise AssignmentError(
                    iteration, i, closest, closest_dist2, assigned, assigned_dist2
                )

    def sse(self) -> float:
        """Sum of squared distances from each record to its assigned center."""
        return sum(self.point_center_dist2(i, self.assignment[i]) for i in range(self.n))

    @abc.abstractmethod
    def name(self) -> str:
        """Short name of the algorithm."""

    def centers(self) -> Dataset | None:
        """Explicit centers, if the algorithm keeps them."""
        return None

    @abc.abstractmethod
    def point_point_inner_product(self, x1: int, x2: int) -> float:
        """Inner product of records ``x1`` and ``x2``."""

    @abc.abstractmethod
    def point_center_inner_product(self, xndx: int, cndx: int) -> float:
        """Inner product of record ``xndx`` and center ``cndx``."""

    @abc.abstractmethod
    def center_center_inner_product(self, c1: int, c2: int) -> float:
        """Inner product of centers ``c1`` and ``c2``."""

    def point_center_dist2(self, x1: int, cndx: int) -> float:
        """Squared distance between record ``x1`` and center ``cndx``."""
        self.num_distances += 1
        return (
            self.point_point_inner_product(x1, x1)
            - 2 * self.point_center_inner_product(x1, cndx)
            + self.center_center_inner_product(cndx, cndx)
        )

    def center_center_dist2(self, c1: int, c2: int) -> float:
        """Squared distance between centers ``c1`` and ``c2``."""
        self.num_distances += 1
        return (
            self.center_center_inner_product(c1, c1)
            - 2 * self.center_center_inner_product(c1, c2)
            + self.center_center_inner_product(c2, c2)
        )

    @abc.abstractmethod
    def _run_thread(self, thread_id: int, max_iterations: int) -> int:
        """Do the clustering for the records owned by ``thread_id``."""

    def _change_assignment(self, x_index: int, new_cluster: int, thread_id: int = 0) -> None:
        sizes = self.cluster_size[thread_id]
        sizes[self.assignment[x_index]] -= 1
        sizes[new_cluster] += 1
        self.assignment[x_index] = new_cluster

    def _check_assignment(self, iteration: int, start_ndx: int, end_ndx: int) -> None:
        if self.verify:
            self.verify_assignment(iteration, start_ndx, end_ndx)

    def _start(self, thread_id: int) -> int:
        return self.n * thread_id // self.num_threads

    def _end(self, thread_id: int) -> int:
        return self._start(thread_id + 1)

    def _which_thread(self, index: int) -> int:
        return index * self.num_threads // self.n