import math

import numpy as np
import pytest

from mcsim.batch import (
    CdfInput,
    CpInput,
    cdf_many,
    cp_many,
    total_cdf_bytes,
    total_cp_bytes,
)
from mcsim.cdf import LogDecimatedCdf
from mcsim.cp import cp_greedy_rank1


def synth_tensor(seed, n_a, n_b, n_c):
    out = np.zeros((n_a, n_b, n_c))
    for i in range(n_a):
        for t in range(n_b):
            for l in range(n_c):
                out[i, t, l] = math.sin(math.log(i + 1) * (t + 1)) + 0.1 * (
                    seed + 1.0
                ) * (i + t + l)
    return out.reshape(-1)


def synth_cdf_input(seed):
    axis = [1.1**i for i in range(40)]
    intensities = [
        [1.0 / x for x in axis],
        [(seed + 1.0) * 0.5 for _ in axis],
        [max(math.log(x), 0.0) for x in axis],
    ]
    return CdfInput(intensities=intensities, axis=axis, n_decimated=100)


def test_with_defaults_sets_convergence_parameters():
    tensor = synth_tensor(0, 3, 2, 2)
    inp = CpInput.with_defaults(tensor, 3, 2, 2, 4)
    assert inp.max_iter == 200
    assert inp.tol == pytest.approx(1e-9)
    assert (inp.n_a, inp.n_b, inp.n_c, inp.max_rank) == (3, 2, 2, 4)


def test_cp_many_matches_individual_decompositions():
    n_a, n_b, n_c = 6, 4, 3
    tensors = [synth_tensor(s, n_a, n_b, n_c) for s in range(5)]
    inputs = [CpInput.with_defaults(t, n_a, n_b, n_c, 3) for t in tensors]
    batch = cp_many(inputs)
    assert len(batch) == 5
    for tensor, cp in zip(tensors, batch):
        solo = cp_greedy_rank1(tensor, n_a, n_b, n_c, 3, 200, 1e-9)
        np.testing.assert_allclose(
            cp.reconstruct(cp.rank), solo.reconstruct(solo.rank), atol=1e-12
        )


def test_cp_many_empty_input():
    assert cp_many([]) == []


def test_cdf_many_matches_individual_cdfs():
    inputs = [synth_cdf_input(s) for s in range(4)]
    batch = cdf_many(inputs)
    assert len(batch) == 4
    for inp, cdf in zip(inputs, batch):
        solo = LogDecimatedCdf.from_intensities(inp.intensities, inp.axis, inp.n_decimated)
        for x in (1.0, 3.0, 10.0, 30.0):
            for k in range(3):
                assert cdf.lookup(x, k) == pytest.approx(solo.lookup(x, k), abs=1e-14)


def test_total_cp_bytes_is_sum_of_parts():
    n_a, n_b, n_c = 5, 3, 4
    inputs = [
        CpInput.with_defaults(synth_tensor(s, n_a, n_b, n_c), n_a, n_b, n_c, 2)
        for s in range(3)
    ]
    decomps = cp_many(inputs)
    expected = sum(d.rank * (n_a + n_b + n_c + 1) * 8 for d in decomps)
    assert total_cp_bytes(decomps) == expected
    assert total_cp_bytes([]) == 0


def test_total_cdf_bytes_counts_points_times_categories():
    cdfs = cdf_many([synth_cdf_input(s) for s in range(3)])
    assert total_cdf_bytes(cdfs) == 3 * 100 * 3 * 8