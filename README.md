# boundkmeans

Kernel k-means clustering in pure Python. In kernel k-means a center is not
stored as a vector. It is held implicitly as the set of records assigned to it,
and every distance is computed through a kernel function.

Two algorithms are provided, in `boundkmeans.kernel_algorithms`:

- `NaiveKernelKmeans` compares every record with every center in each
  iteration.
- `ElkanKernelKmeans` keeps one upper bound and `k` lower bounds per record. It
  uses the triangle inequality to skip distance computations that cannot change
  an assignment.

Three kernels are provided, in `boundkmeans.kernel`:

| kernel | value |
|---|---|
| `LinearKernel()` | the dot product |
| `PolynomialKernel(c, power)` | `(<a, b> + c) ** power` |
| `GaussianKernel(tau)` | `exp(-|a - b|^2 / (2 tau^2))` |

Any subclass of `Kernel` that defines `__call__(a, b)` and `name()` can be used
in their place.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Data files

A dataset file holds `n` records of `d` numeric values, separated by
whitespace:

```
n d
x(1,1) x(1,2) ... x(1,d)
...
x(n,1) x(n,2) ... x(n,d)
```

`boundkmeans.cli.load_dataset(path)` reads such a file into a `Dataset`. It
raises `ValueError` if the file has fewer values than `n * d`.

## Library use

```python
import random

from boundkmeans.cli import load_dataset
from boundkmeans.general import assign, init_centers_kmeanspp_v2
from boundkmeans.kernel import GaussianKernel
from boundkmeans.kernel_algorithms import ElkanKernelKmeans

x = load_dataset("points.txt")
rng = random.Random(42)

centers = init_centers_kmeanspp_v2(x, 5, rng)   # k-means++ seeding
assignment = assign(x, centers)                  # nearest-center labels

algorithm = ElkanKernelKmeans(GaussianKernel(1.0))
algorithm.initialize(x, 5, assignment, 1)
iterations = algorithm.run(100)

print(algorithm.name(), iterations)   # elkan_kernel(gaussian[1]) ...
print(assignment[:3])                 # the list is updated in place
print(algorithm.sse())
```

`initialize` checks its arguments and raises `ValueError` in these cases:

- `k` is less than 1;
- the assignment length does not match the number of records;
- a label lies outside `[0, k)`.

`run(max_iterations=None)` runs until no assignment changes, or until the
iteration limit is reached. It returns the number of iterations.

If `Kmeans.verify` is set to `True`, every iteration checks the whole
assignment. A record that is not with its closest center raises
`AssignmentError`.

### Datasets

`boundkmeans.dataset.Dataset(n, d)` stores `n` records of `d` values row by
row. It supports the following:

- `Dataset.from_rows(rows)` builds a dataset from a list of rows;
- `x[i, j]` reads or writes one value;
- `row(i)` returns one record;
- `fill(value)` sets every value;
- `copy()` returns a deep copy;
- `print(out)` writes the records as a matrix.

### Helpers in `boundkmeans.general`

- `init_centers(x, k, rng)` picks `k` distinct records at random.
- `init_centers_kmeanspp(x, k, rng)` is k-means++ seeding that may pick a
  record more than once.
- `init_centers_kmeanspp_v2(x, k, rng)` is k-means++ seeding with distinct
  records.
- `assign(x, centers)` returns the index of each record's closest center.
- `center_dataset(x)` shifts the data in place so that its mean is at the
  origin.
- `squared_distance(a, b)`, `add_vectors(a, b)` and `sub_vectors(a, b)` are
  small vector utilities.
- `get_time()`, `elapsed_time(start)` and `get_wall_time()` measure CPU and
  wall-clock time.
- `get_memory_usage()` gives the resident set size in kilobytes. It reads
  `/proc/self/statm` and returns 0.0 where that file is unavailable.

## Command-line experiment runner

The `boundkmeans` command reads a script of whitespace-separated commands. It
reads them from the file named as its argument, or from standard input if no
file is given. Results go to standard output and problems are reported on
standard error:

```
boundkmeans experiment.txt
boundkmeans < experiment.txt
```

An example script:

```
seed 7
dataset points.txt
initialize 5 kpp
kernel gaussian 1.0
elkan_kernel gaussian 1.0
kernel polynomial 1.0 2
dump_assignment
quit
```

Recognised commands:

| command | meaning |
|---|---|
| `dataset FILE` / `data FILE` | load a dataset file |
| `initialize K random\|kpp` / `init ...` | choose initial centers (`kmeansplusplus` is accepted for `kpp`) and assign records to them |
| `seed N` | seed the random number generator |
| `threads N` | accepted, but all work runs in one thread; a value above 1 prints a warning |
| `maxiterations N` | cap on iterations; a negative value means no cap |
| `kernel linear\|gaussian TAU\|polynomial C P` | run `NaiveKernelKmeans` |
| `elkan_kernel linear\|gaussian TAU\|polynomial C P` | run `ElkanKernelKmeans` |
| `center` | re-center the loaded dataset at the origin |
| `dump_assignment` | print the latest assignment, one label per line |
| `dump_centers` | print the centers chosen by `initialize`, as a matrix |
| `quit` / `exit` | stop reading commands |

The runner first prints a header line. For each algorithm run it then prints a
row with these columns:

- the algorithm name;
- the number of iterations;
- the thread count;
- CPU seconds;
- wall-clock seconds;
- resident memory in MB.

Each run starts from the assignment made by the last `initialize`. If two runs
on the same data and initialisation take different numbers of iterations, an
error is reported on standard error.

After each row the runner prints the mean distortion. This is the average
squared distance from each record to the center of its final cluster. Kernel
algorithms keep no explicit centers, so the centers used here are the ones
chosen by `initialize`.

## What is not included

Only the two kernel algorithms are implemented. The package has no
explicit-center k-means algorithms, such as plain Lloyd or Hamerly, Elkan,
annulus, heap or compare-means pruning. The runner recognises the command names
`lloyd`, `naive`, `hamerly`, `annulus`, `norm`, `elkan`, `drake`, `adaptive`,
`sampling`, `compare`, `sort`, `heap`, `anelkan` and `anhamerly`. For each of
them it only reports `Algorithm not available`. Clustering always runs in a
single thread.