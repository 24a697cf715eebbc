"""Batch helpers for building many independent decompositions at once."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np

from mcsim.cdf import LogDecimatedCdf
from mcsim.cp import CpDecomposition, cp_greedy_rank1


@dataclass
class CpInput:
    """Input descriptor for one CP/PARAFAC decomposition."""

    tensor: Sequence[float] | np.ndarray
    n_a: int
    n_b: int
    n_c: int
    max_rank: int
    max_iter: int = 200
    tol: float = 1e-9

    @classmethod
    def with_defaults(
        cls,
        tensor: Sequence[float] | np.ndarray,
        n_a: int,
        n_b: int,
        n_c: int,
        max_rank: int,
    ) -> "CpInput":
        """Input with the default convergence parameters (200 iterations, 1e-9)."""
        return cls(tensor=tensor, n_a=n_a, n_b=n_b, n_c=n_c, max_rank=max_rank)


@dataclass
class CdfInput:
    """Input descriptor for one :class:`LogDecimatedCdf`."""

    intensities: Sequence[Sequence[float]]
    axis: Sequence[float]
    n_decimated: int


def cp_many(inputs: Iterable[CpInput]) -> list[CpDecomposition]:
    """Run one CP/PARAFAC decomposition per input, preserving order."""
    return [
        cp_greedy_rank1(i.tensor, i.n_a, i.n_b, i.n_c, i.max_rank, i.max_iter, i.tol)
        for i in inputs
    ]


def cdf_many(inputs: Iterable[CdfInput]) -> list[LogDecimatedCdf]:
    """Build one CDF per input, preserving order."""
    return [
        LogDecimatedCdf.from_intensities(i.intensities, i.axis, i.n_decimated)
        for i in inputs
    ]


def total_cp_bytes(decomps: Iterable[CpDecomposition]) -> int:
    """Aggregate memory used by a collection of CP decompositions."""
    return sum(d.memory_bytes() for d in decomps)


def total_cdf_bytes(cdfs: Iterable[LogDecimatedCdf]) -> int:
    """Aggregate memory used by a collection of CDFs."""
    return sum(c.memory_bytes() for c in cdfs)