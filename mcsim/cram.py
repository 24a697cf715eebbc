"""Matrix-exponential propagator for Bateman equations.

The propagator is dense Padé with scaling and squaring. The CRAM-16
partial-fraction poles and residues are kept as constants for callers
who want to plug in a validated CRAM kernel of their own.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
from scipy.linalg import expm

CRAM16_THETA_RE = (
    -1.0843917078344e01,
    -5.2649713434424e00,
    5.948152268951177e00,
    3.509103608414918e00,
    6.416177699099435e00,
    1.419375897185666e00,
    4.993174737717997e00,
    -1.413036697886109e00,
)
CRAM16_THETA_IM = (
    1.9277446167927318e01,
    1.6220221473167928e01,
    3.5874573620183224e00,
    8.436198985884374e00,
    1.1941223933709904e01,
    1.092536348449672e01,
    5.996881713603942e00,
    1.3696331862066253e01,
)
CRAM16_ALPHA_RE = (
    -5.0901521865224922e-07,
    2.115174218246607e-04,
    1.133977517848393e02,
    1.5059585270025815e01,
    -6.450087802553964e01,
    -1.4793007113557998e00,
    -6.2518395874816e01,
    4.10231368354112e-02,
)
CRAM16_ALPHA_IM = (
    -2.422001765285228e-05,
    4.3892969647380675e-03,
    1.0194721704215855e02,
    -5.751405277642215e00,
    -2.245944076265209e02,
    1.7686588321757922e00,
    -2.5305856979552873e01,
    -1.5743466173455462e-01,
)
CRAM16_ALPHA0 = 2.124853710495224e-16


def cram16_dense(
    a_row_major: Sequence[float] | np.ndarray,
    n0: Sequence[float] | np.ndarray,
    t: float,
    n: int,
) -> np.ndarray:
    """Return ``exp(A t) @ n0`` for a dense ``n x n`` row-major matrix ``A``."""
    a = np.asarray(a_row_major, dtype=float).reshape(-1)
    vec = np.asarray(n0, dtype=float).reshape(-1)
    if a.size != n * n:
        raise ValueError(f"matrix has {a.size} elements, expected {n * n}")
    if vec.size != n:
        raise ValueError(f"initial vector has {vec.size} elements, expected {n}")
    if t == 0.0:
        return vec.copy()
    return expm(a.reshape(n, n) * t) @ vec