"""Command-driven experiment runner for the k-means algorithms.

Commands are read as whitespace-separated tokens from a command file, or from
standard input when none is given:

    dataset <file>              load ``n d`` followed by ``n * d`` values
    initialize <k> <random|kpp> choose initial centers and assignment
    seed <int>                  seed the random number generator
    threads <int>               requested thread count (work runs in one thread)
    maxiterations <int>         iteration limit; negative means unlimited
    kernel <spec>               run naive kernel k-means
    elkan_kernel <spec>         run kernel k-means with Elkan's bounds
    center                      translate the dataset so its centroid is at 0
    dump_assignment             print the latest assignment
    dump_centers                print the latest centers
    quit | exit                 stop

A kernel spec is ``linear``, ``gaussian <tau>`` or ``polynomial <add> <power>``.
Results go to standard output, diagnostics to standard error.
"""

from __future__ import annotations

import argparse
import random
import sys
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import TextIO

from .dataset import Dataset
from .general import (
    assign,
    center_dataset,
    elapsed_time,
    get_memory_usage,
    get_time,
    get_wall_time,
    init_centers,
    init_centers_kmeanspp_v2,
    squared_distance,
)
from .kernel import GaussianKernel, Kernel, LinearKernel, PolynomialKernel
from .kernel_algorithms import ElkanKernelKmeans, NaiveKernelKmeans
from .kmeans import Kmeans

_UNAVAILABLE = {
    "lloyd", "naive", "hamerly", "annulus", "norm", "elkan", "adaptive",
    "sampling", "compare", "sort", "heap", "anelkan", "anhamerly",
}


def load_dataset(path: str) -> Dataset:
    """Read a dataset file: ``n d`` followed by ``n * d`` numbers."""
    with open(path, encoding="utf-8") as fh:
        tokens = fh.read().split()
    if len(tokens) < 2:
        raise ValueError(f"{path}: missing dataset dimensions")
    n, d = int(tokens[0]), int(tokens[1])
    values = tokens[2:2 + n * d]
    if len(values) != n * d:
        raise ValueError(f"{path}: expected {n * d} values, found {len(values)}")
    x = Dataset(n, d)
    x.data = [float(v) for v in values]
    return x


def get_distortion(x: Dataset, assignment: Sequence[int], centers: Dataset) -> float:
    """Mean squared distance from each record to its assigned center."""
    if x.n == 0:
        raise ValueError("distortion of an empty dataset is undefined")
    total = sum(
        squared_distance(x.row(i), centers.row(assignment[i])) for i in range(x.n)
    )
    return total / x.n


def _tokens(stream: TextIO) -> Iterator[str]:
    for line in stream:
        yield from line.split()


@dataclass
class _Session:
    out: TextIO
    err: TextIO
    x: Dataset | None = None
    k: int = 0
    assignment: list[int] | None = None
    out_assignment: list[int] | None = None
    out_centers: Dataset | None = None
    xc_ndx: int = 0
    num_threads: int = 1
    max_iterations: int = sys.maxsize
    iters_history: list[int] = field(default_factory=list)
    rng: random.Random = field(default_factory=random.Random)

    def error(self, message: str) -> None:
        print(message, file=self.err)

    def header(self) -> None:
        print(
            f"{'algorithm':>35}\t{'iters':>5}\t{'numThreads':>10}\t"
            f"{'cpu_secs':>10}\t{'wall_secs':>10}\t{'MB':>8}",
            file=self.out,
        )

    def load(self, path: str) -> None:
        self.xc_ndx += 1
        try:
            x = load_dataset(path)
        except OSError:
            self.error(f"Unable to open data file: {path}")
            return
        self.x = x
        self.assignment = None
        self.out_assignment = None
        self.out_centers = None
        print(f"loaded dataset {path}: n = {x.n}, d = {x.d}", file=self.out)

    def initialize(self, tokens: Iterator[str]) -> None:
        self.xc_ndx += 1
        if self.x is None:
            self.error("Please load a dataset first")
            return
        k = int(next(tokens))
        method = next(tokens)
        if method in ("kpp", "kmeansplusplus"):
            print(f"initializing with kmeans++: k = {k}", file=self.out)
            centers = init_centers_kmeanspp_v2(self.x, k, self.rng)
        elif method == "random":
            print(f"initializing with random:  k = {k}", file=self.out)
            centers = init_centers(self.x, k, self.rng)
        else:
            self.error(f"Unrecognized initialization method: {method}")
            return
        self.k = k
        self.out_centers = centers.copy()
        self.assignment = assign(self.x, centers)
        self.out_assignment = list(self.assignment)

    def execute(self, algorithm: Kmeans) -> bool:
        if self.assignment is None or self.out_assignment is None:
            self.error("initialize centers first!")
            return False
        if self.x is None:
            self.error("load a dataset first!")
            return False

        self.out.write(f"{algorithm.name():>35}\t")
        self.out.flush()

        working = self.out_assignment
        working[:] = self.assignment
        cpu_start = get_time()
        wall_start = get_wall_time()
        algorithm.initialize(self.x, self.k, working, self.num_threads)
        iterations = algorithm.run(self.max_iterations)

        centers = algorithm.centers()
        if centers is not None and self.out_centers is not None:
            self.out_centers = centers.copy()

        cpu_secs = elapsed_time(cpu_start)
        wall_secs = get_wall_time() - wall_start
        self.out.write(
            f"{iterations:>5}\t{self.num_threads:>10}\t{cpu_secs:>10.6g}\t"
            f"{wall_secs:>10.6g}\t{get_memory_usage() / 1024.0:>8.6g}"
        )

        while len(self.iters_history) <= self.xc_ndx:
            self.iters_history.append(iterations)
        if iterations != self.iters_history[-1]:
            self.error(
                f"ERROR: iterations = {iterations} but last iterations was "
                f"{self.iters_history[-1]}"
            )
        self.out.write("\n")
        return True


def _read_kernel(tokens: Iterator[str]) -> Kernel | None:
    kind = next(tokens)
    if kind == "gaussian":
        return GaussianKernel(float(next(tokens)))
    if kind == "linear":
        return LinearKernel()
    if kind == "polynomial":
        add = float(next(tokens))
        power = float(next(tokens))
        return PolynomialKernel(add, power)
    return None


def _handle(command: str, tokens: Iterator[str], session: _Session) -> Kmeans | None:
    """Carry out one command; return an algorithm to run, if it names one."""
    if command == "threads":
        requested = int(next(tokens))
        if requested > 1:
            session.error("using only one thread because multithreading is disabled")
        session.num_threads = 1
    elif command == "maxiterations":
        limit = int(next(tokens))
        session.max_iterations = sys.maxsize if limit < 0 else limit
    elif command in ("dataset", "data"):
        session.load(next(tokens))
    elif command in ("initialize", "init"):
        session.initialize(tokens)
    elif command == "seed":
        session.rng = random.Random(int(next(tokens)))
    elif command in ("kernel", "elkan_kernel"):
        kernel = _read_kernel(tokens)
        if kernel is None:
            session.error("Invalid kernel specification")
            return None
        if command == "kernel":
            return NaiveKernelKmeans(kernel)
        return ElkanKernelKmeans(kernel)
    elif command == "drake":
        next(tokens)
        session.error(f"Algorithm not available: {command}")
    elif command in _UNAVAILABLE:
        session.error(f"Algorithm not available: {command}")
    elif command == "center":
        if session.x is None:
            session.error("Please load a dataset first")
        else:
            print("centering dataset", file=session.out)
            center_dataset(session.x)
    elif command == "dump_assignment":
        if session.out_assignment is not None:
            for a in session.out_assignment:
                print(a, file=session.out)
        else:
            session.error("Error: no assignment available")
    elif command == "dump_centers":
        if session.out_centers is not None:
            session.out_centers.print(session.out)
        else:
            session.error("Error: no centers available")
    else:
        session.error(f"Unrecognized command: <{command}>.")
    return None


def _process(stream: TextIO, session: _Session) -> None:
    tokens = _tokens(stream)
    session.header()
    for command in tokens:
        if command in ("quit", "exit"):
            break
        try:
            algorithm = _handle(command, tokens, session)
            if algorithm is not None and session.execute(algorithm):
                assert session.x is not None and session.out_assignment is not None
                assert session.out_centers is not None
                distortion = get_distortion(
                    session.x, session.out_assignment, session.out_centers
                )
                print(f"{distortion:.6f}", file=session.out)
        except StopIteration:
            session.error(f"Missing argument for command: {command}")
            break
        except ValueError as exc:
            session.error(f"Error in command {command}: {exc}")


def main(argv: Sequence[str] | None = None) -> int:
    """Run the commands in the given file, or on standard input."""
    parser = argparse.ArgumentParser(
        prog="boundkmeans", description="Run k-means experiments from a command list."
    )
    parser.add_argument("commands", nargs="?", help="command file (default: stdin)")
    args = parser.parse_args(argv)

    session = _Session(out=sys.stdout, err=sys.stderr)
    if args.commands is None:
        _process(sys.stdin, session)
    else:
        with open(args.commands, encoding="utf-8") as fh:
            _process(fh, session)
    return 0