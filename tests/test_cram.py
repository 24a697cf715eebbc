import math

import pytest

from mcsim.cram import cram16_dense


@pytest.mark.parametrize("t", [0.0, 0.5, 1.0, 5.0])
def test_diagonal_decay(t):
    lam = 1.0
    n_t = cram16_dense([-lam], [1.0], t, 1)
    want = math.exp(-lam * t)
    assert n_t[0] == pytest.approx(want, rel=1e-10)


@pytest.mark.parametrize("t", [0.5, 1.0, 2.0, 5.0])
def test_two_isotope_chain(t):
    lam = 0.5
    a = [-lam, 0.0, lam, 0.0]
    n_t = cram16_dense(a, [1.0, 0.0], t, 2)
    want_a = math.exp(-lam * t)
    want_b = 1.0 - want_a
    assert n_t[0] == pytest.approx(want_a, rel=1e-9)
    assert n_t[1] == pytest.approx(want_b, rel=1e-9)


def test_zero_time_is_identity():
    a = [-2.0, 1.0, 0.5, -3.0]
    n0 = [7.0, 11.0]
    n_t = cram16_dense(a, n0, 0.0, 2)
    for got, want in zip(n_t, n0):
        assert abs(got - want) < 1e-12


def test_matrix_size_mismatch_raises():
    with pytest.raises(ValueError):
        cram16_dense([1.0, 2.0, 3.0], [1.0, 0.0], 1.0, 2)


def test_vector_size_mismatch_raises():
    with pytest.raises(ValueError):
        cram16_dense([-1.0, 0.0, 0.0, -1.0], [1.0], 1.0, 2)