"""Log-decimated CDF for inverse-transform sampling of categorical outcomes."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np


@dataclass
class LogDecimatedCdf:
    """Pre-tabulated cumulative distribution ``F_k(x)`` over ``K`` categories.

    ``cdf_flat`` is laid out row-major in (point, column, category):
    ``cdf_flat[ed * n_cols * n_categories + col * n_categories + k]``.
    """

    n_categories: int
    n_cols: int
    n_points: int
    log_x_min: float
    log_x_max: float
    cdf_flat: np.ndarray

    @classmethod
    def from_intensities(
        cls,
        intensities: Sequence[Sequence[float]],
        axis: Sequence[float],
        n_decimated: int,
    ) -> "LogDecimatedCdf":
        """Build a single-column CDF from per-category intensities.

        ``intensities[k][j]`` is the intensity of category ``k`` at
        ``axis[j]``; ``axis`` must be sorted ascending. ``n_decimated``
        log-spaced points are kept (at least two).
        """
        if len(intensities) == 0:
            raise ValueError("need at least one category")
        axis_arr = np.asarray(axis, dtype=float)
        n_axis = axis_arr.size
        for row in intensities:
            if len(row) != n_axis:
                raise ValueError("every category must be sampled at every axis point")
        n_categories = len(intensities)
        n_dec = max(n_decimated, 2)

        positive = axis_arr[axis_arr > 0.0]
        if positive.size == 0 or not positive.min() < positive.max():
            raise ValueError("axis must contain at least two distinct positive values")
        log_x_min = math.log10(float(positive.min()))
        log_x_max = math.log10(float(positive.max()))

        frac = np.arange(n_dec) / (n_dec - 1)
        xs = 10.0 ** (log_x_min + frac * (log_x_max - log_x_min))

        below = xs <= axis_arr[0]
        above = xs >= axis_arr[-1]
        idx = np.clip(np.searchsorted(axis_arr, xs, side="right") - 1, 0, n_axis - 1)
        idx[below] = 0
        idx[above] = n_axis - 1
        nxt = np.minimum(idx + 1, n_axis - 1)

        span = axis_arr[nxt] - axis_arr[idx]
        interior = ~below & ~above & (span > 0.0)
        alpha = np.zeros(n_dec)
        alpha[interior] = (xs[interior] - axis_arr[idx[interior]]) / span[interior]

        clipped = np.maximum(np.asarray(intensities, dtype=float), 0.0)
        lo = clipped[:, idx]
        hi = clipped[:, nxt]
        values = lo + alpha * (hi - lo)
        totals = values.sum(axis=0)

        table = np.zeros((n_dec, n_categories))
        live = totals > 1e-30
        table[live] = np.cumsum((values[:, live] * (1.0 / totals[live])).T, axis=1)
        table[:, -1] = 1.0

        return cls(
            n_categories=n_categories,
            n_cols=1,
            n_points=n_dec,
            log_x_min=log_x_min,
            log_x_max=log_x_max,
            cdf_flat=table.reshape(-1),
        )

    def memory_bytes(self) -> int:
        """Bytes used by the flat CDF data."""
        return int(self.cdf_flat.nbytes)

    def lookup(self, x: float, category: int) -> float:
        """``F_k(x)``, linear in ``log10(x)``, saturating outside the grid.

        The last category always returns ``1.0``.
        """
        if category + 1 >= self.n_categories:
            return 1.0
        if x <= 0.0:
            return 0.0
        log_x = math.log10(x)
        if log_x <= self.log_x_min:
            return float(self.cdf_flat[category])
        if log_x >= self.log_x_max:
            last = self.n_points - 1
            return float(self.cdf_flat[last * self.n_categories + category])
        frac = (log_x - self.log_x_min) / (self.log_x_max - self.log_x_min)
        f_idx = frac * (self.n_points - 1)
        idx = math.floor(f_idx)
        alpha = f_idx - idx
        lo = float(self.cdf_flat[idx * self.n_categories + category])
        hi = float(self.cdf_flat[(idx + 1) * self.n_categories + category])
        return lo + alpha * (hi - lo)

    def sample(self, x: float, xi: float) -> int:
        """Smallest category ``k`` with ``F_k(x) >= xi``."""
        return next(
            (k for k in range(self.n_categories - 1) if xi <= self.lookup(x, k)),
            self.n_categories - 1,
        )