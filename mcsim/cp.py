"""CP / PARAFAC decomposition of a 3-tensor by greedy rank-1 deflation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence

import numpy as np

_MASK64 = (1 << 64) - 1
_LCG_MUL = 6364136223846793005
_LCG_INC = 1442695040888963407
_LCG_SEED = 0x853C49E6748FEA9B


@dataclass
class CpDecomposition:
    """Stored CP decomposition of a 3-tensor.

    Factor matrices have shape ``(rank, n)``: ``a[r, i]``, ``b[r, t]``,
    ``c[r, l]``. ``sigma[r]`` is the magnitude of the ``r``-th outer
    product.
    """

    rank: int
    n_a: int
    n_b: int
    n_c: int
    a: np.ndarray
    b: np.ndarray
    c: np.ndarray
    sigma: np.ndarray

    def reconstruct(self, k: int) -> np.ndarray:
        """Rebuild the tensor from the first ``k`` components.

        Returns a flat row-major array indexed by
        ``i * n_b * n_c + t * n_c + l``.
        """
        k = max(0, min(k, self.rank))
        out = np.einsum(
            "r,ri,rt,rl->itl",
            self.sigma[:k],
            self.a[:k],
            self.b[:k],
            self.c[:k],
        )
        return np.ascontiguousarray(out).reshape(-1)

    def memory_bytes(self) -> int:
        """Bytes used by the factor matrices and component magnitudes."""
        return sum(arr.nbytes for arr in (self.a, self.b, self.c, self.sigma))


def _uniform_stream() -> Iterator[float]:
    """Deterministic LCG stream of values in ``[-1, 1)``."""
    state = _LCG_SEED
    while True:
        state = (state * _LCG_MUL + _LCG_INC) & _MASK64
        yield (state >> 33) / float(1 << 31) - 1.0


def _normalized(v: np.ndarray) -> np.ndarray:
    norm = float(np.sqrt(np.dot(v, v)))
    return v / norm if norm > 1e-30 else v


def cp_greedy_rank1(
    tensor: Sequence[float] | np.ndarray,
    n_a: int,
    n_b: int,
    n_c: int,
    max_rank: int,
    max_iter: int,
    tol: float,
) -> CpDecomposition:
    """Fit a rank-``max_rank`` CP approximation of a flat row-major 3-tensor.

    ``max_iter`` caps the alternating power iterations per component and
    ``tol`` is the relative convergence threshold on the component
    magnitude. Fitting stops early once the residual collapses.
    """
    flat = np.asarray(tensor, dtype=float).reshape(-1)
    if flat.size != n_a * n_b * n_c:
        raise ValueError(
            f"tensor has {flat.size} elements, expected {n_a * n_b * n_c}"
        )
    residual = flat.reshape(n_a, n_b, n_c).copy()
    rng = _uniform_stream()

    a_rows: list[np.ndarray] = []
    b_rows: list[np.ndarray] = []
    c_rows: list[np.ndarray] = []
    sigmas: list[float] = []

    for _ in range(max_rank):
        bv = _normalized(np.fromiter((next(rng) for _ in range(n_b)), float, n_b))
        cv = _normalized(np.fromiter((next(rng) for _ in range(n_c)), float, n_c))
        av = np.zeros(n_a)

        prev_norm = 0.0
        for _ in range(max_iter):
            av = _normalized(np.einsum("itl,t,l->i", residual, bv, cv))
            bv = _normalized(np.einsum("itl,i,l->t", residual, av, cv))
            cv = np.einsum("itl,i,t->l", residual, av, bv)
            cv_norm = float(np.sqrt(np.dot(cv, cv)))
            if cv_norm < 1e-30:
                break
            cv = cv / cv_norm
            converged = abs(cv_norm - prev_norm) < tol * max(cv_norm, 1e-30)
            prev_norm = cv_norm
            if converged:
                break

        s = float(np.einsum("itl,i,t,l->", residual, av, bv, cv))
        if abs(s) < 1e-20:
            break

        sigmas.append(s)
        a_rows.append(av.copy())
        b_rows.append(bv.copy())
        c_rows.append(cv.copy())
        residual -= s * np.einsum("i,t,l->itl", av, bv, cv)

    def stack(rows: list[np.ndarray], n: int) -> np.ndarray:
        return np.array(rows, dtype=float).reshape(len(rows), n)

    return CpDecomposition(
        rank=len(sigmas),
        n_a=n_a,
        n_b=n_b,
        n_c=n_c,
        a=stack(a_rows, n_a),
        b=stack(b_rows, n_b),
        c=stack(c_rows, n_c),
        sigma=np.array(sigmas, dtype=float),
    )


def _pair(original, reconstruction) -> tuple[np.ndarray, np.ndarray]:
    orig = np.asarray(original, dtype=float).reshape(-1)
    recon = np.asarray(reconstruction, dtype=float).reshape(-1)
    if orig.size != recon.size:
        raise ValueError(
            f"length mismatch: original {orig.size}, reconstruction {recon.size}"
        )
    return orig, recon


def relative_l2_error(original, reconstruction) -> float:
    """Relative Frobenius error; ``0.0`` if ``original`` is identically zero."""
    orig, recon = _pair(original, reconstruction)
    diff = orig - recon
    num = float(np.dot(diff, diff))
    den = float(np.dot(orig, orig))
    if den < 1e-30:
        return 0.0
    return float(np.sqrt(num / den))


def max_abs_error(original, reconstruction) -> float:
    """Maximum absolute element-wise error."""
    orig, recon = _pair(original, reconstruction)
    if orig.size == 0:
        return 0.0
    return float(np.max(np.abs(orig - recon)))