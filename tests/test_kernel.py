import math

import pytest

from boundkmeans.dataset import Dataset
from boundkmeans.general import squared_distance
from boundkmeans.kernel import (
    GaussianKernel,
    KernelKmeans,
    LinearKernel,
    PolynomialKernel,
)


class OneShot(KernelKmeans):
    """Minimal concrete kernel k-means used to exercise the base class."""

    def name(self):
        return "oneshot"

    def _run_thread(self, thread_id, max_iterations):
        self.memberships, self.cc = self.compute_memberships()
        self.converged = True
        return 1


ROWS = [[0.0, 0.0], [2.0, 0.0], [1.0, 3.0], [5.0, 5.0]]


@pytest.fixture
def data():
    return Dataset.from_rows(ROWS)


def _ready(data, kernel, assignment):
    algo = OneShot(kernel)
    algo.initialize(data, 2, assignment, 1)
    algo.run()
    return algo


def test_linear_kernel_dot_product():
    assert LinearKernel()([1.0, 2.0], [3.0, 4.0]) == 11.0
    assert LinearKernel().name() == "linear"


def test_polynomial_kernel_value_and_name():
    kernel = PolynomialKernel(1.0, 2.0)
    assert kernel([1.0, 2.0], [3.0, 4.0]) == 144.0
    assert kernel.name() == "poly[1,2]"


def test_polynomial_with_power_one_is_shifted_linear():
    a, b = [0.5, -1.5], [2.0, 4.0]
    assert PolynomialKernel(3.0, 1.0)(a, b) == pytest.approx(LinearKernel()(a, b) + 3.0)


def test_gaussian_kernel_identity_and_name():
    kernel = GaussianKernel(0.5)
    assert kernel([1.0, 2.0], [1.0, 2.0]) == 1.0
    assert kernel.name() == "gaussian[0.5]"


def test_gaussian_kernel_decreases_with_distance():
    kernel = GaussianKernel(1.0)
    near = kernel([0.0, 0.0], [0.1, 0.0])
    far = kernel([0.0, 0.0], [3.0, 0.0])
    assert 0.0 < far < near < 1.0
    assert kernel([1.0, 2.0], [3.0, -1.0]) == pytest.approx(kernel([3.0, -1.0], [1.0, 2.0]))


def test_gaussian_matches_exponent_of_distance():
    a, b = [1.0, 2.0], [2.0, 4.0]
    tau = 2.0
    expected = math.exp(-squared_distance(a, b) / (2 * tau * tau))
    assert GaussianKernel(tau)(a, b) == pytest.approx(expected)


def test_compute_memberships_follows_assignment(data):
    algo = _ready(data, LinearKernel(), [0, 0, 0, 1])
    assert algo.memberships == [[0, 1, 2], [3]]
    for members, cc in zip(algo.memberships, algo.cc):
        assert cc == pytest.approx(algo.center_center_inner_product_general(members, members))


def test_linear_kernel_distance_equals_distance_to_mean(data):
    algo = _ready(data, LinearKernel(), [0, 0, 1, 1])
    mean0 = [1.0, 0.0]
    mean1 = [3.0, 4.0]
    for i, row in enumerate(ROWS):
        assert algo.point_center_dist2(i, 0) == pytest.approx(squared_distance(row, mean0))
        assert algo.point_center_dist2(i, 1) == pytest.approx(squared_distance(row, mean1))
    assert algo.center_center_dist2(0, 1) == pytest.approx(squared_distance(mean0, mean1))


def test_self_inner_product_agrees_with_cross_form(data):
    algo = _ready(data, GaussianKernel(1.5), [0, 0, 0, 1])
    members = algo.memberships[0]
    same = algo.center_center_inner_product_general(members, members)
    cross = algo.center_center_inner_product_general(list(members), list(members))
    assert same == pytest.approx(cross)


def test_empty_cluster_inner_products_are_zero(data):
    algo = _ready(data, LinearKernel(), [0, 0, 0, 0])
    assert algo.memberships[1] == []
    assert algo.center_center_inner_product(1, 1) == 0.0
    assert algo.point_center_inner_product(2, 1) == 0.0


def test_point_point_inner_product_uses_kernel(data):
    kernel = PolynomialKernel(2.0, 3.0)
    algo = _ready(data, kernel, [0, 1, 0, 1])
    assert algo.point_point_inner_product(1, 2) == pytest.approx(kernel(ROWS[1], ROWS[2]))


def test_sse_is_non_negative_and_zero_for_singletons():
    data = Dataset.from_rows([[1.0, 1.0], [4.0, -2.0]])
    algo = OneShot(LinearKernel())
    algo.initialize(data, 2, [0, 1], 1)
    algo.run()
    assert algo.sse() == pytest.approx(0.0)


def test_initialize_validates_assignment(data):
    with pytest.raises(ValueError):
        OneShot(LinearKernel()).initialize(data, 2, [0, 3, 0, 1], 1)