"""Doppler broadening of tabulated cross sections and SLBW resonance peaks.

Not yet validated against a reference processing code; check the
broadened values against your reference before relying on them.
"""

from __future__ import annotations

import bisect
import math
from typing import Sequence

import numpy as np

K_BOLTZMANN = 8.617_333e-5
"""Boltzmann constant in eV/K."""

_GL_NODES = np.array(
    [
        0.06943184420297371,
        0.33000947820757187,
        0.66999052179242813,
        0.93056815579702629,
    ]
)
_GL_WEIGHTS = np.array(
    [
        0.173927422568727,
        0.326072577431273,
        0.326072577431273,
        0.173927422568727,
    ]
)
_INV_SQRT_PI = 1.0 / math.sqrt(math.pi)


def broaden_constant_pieces(
    e_in: Sequence[float],
    xs_in: Sequence[float],
    t0_kelvin: float,
    target_t_kelvin: float,
    awr: float,
    e_out: Sequence[float],
) -> np.ndarray:
    """Doppler-broaden a tabulated cross section (SIGMA1-style).

    The input cross section is treated as piecewise constant between
    points of ``e_in`` (eV, ascending). Returns the broadened values at
    each energy of ``e_out``. When ``target_t_kelvin <= t0_kelvin`` the
    input is only interpolated onto ``e_out``.
    """
    energies = np.asarray(e_in, dtype=float).reshape(-1)
    xs = np.asarray(xs_in, dtype=float).reshape(-1)
    if energies.size != xs.size:
        raise ValueError("e_in and xs_in length mismatch")
    targets = np.asarray(e_out, dtype=float).reshape(-1)
    if target_t_kelvin <= t0_kelvin:
        return _interpolate(energies, xs, targets)

    beta = math.sqrt(awr / (2.0 * K_BOLTZMANN * (target_t_kelvin - t0_kelvin)))

    e_lo = np.maximum(energies[:-1], 0.0)
    e_hi = np.maximum(energies[1:], e_lo + 1e-30)
    sigma = np.maximum(xs[:-1], 0.0)
    live = sigma > 0.0
    e_lo, e_hi, sigma = e_lo[live], e_hi[live], sigma[live]
    sqrt_lo = np.sqrt(e_lo)
    sqrt_hi = np.sqrt(e_hi)
    width = sqrt_hi - sqrt_lo
    # Gauss-Legendre abscissae in u = sqrt(E_in), one row per interval.
    uu = sqrt_lo[:, None] + _GL_NODES[None, :] * width[:, None]

    result = np.zeros(targets.size)
    for k, e in enumerate(targets):
        if e <= 0.0 or sigma.size == 0:
            continue
        sqrt_e = math.sqrt(e)
        dlo = beta * (uu - sqrt_e)
        dhi = beta * (uu + sqrt_e)
        kern = np.exp(-(dlo * dlo)) - np.exp(-(dhi * dhi))
        sub = (_GL_WEIGHTS[None, :] * uu * kern).sum(axis=1) * width
        acc = float(
            np.sum(2.0 * sigma * sub / (beta * math.sqrt(math.pi) * sqrt_e))
        )
        result[k] = max(acc, 0.0)
    return result


def broaden_slbw_faddeeva(
    e: float,
    e0: float,
    gamma_n: float,
    gamma_total: float,
    awr: float,
    target_t_kelvin: float,
) -> float:
    """Doppler-broadened single-level Breit-Wigner elastic peak shape.

    ``e`` and ``e0`` (resonance energy) are in eV, ``gamma_n`` and
    ``gamma_total`` are widths in eV. Returns
    ``Re w(z) * gamma_n**2 / (delta * gamma_total)`` with ``delta`` the
    Doppler width, or ``0.0`` for non-physical inputs.
    """
    if e <= 0.0 or gamma_total <= 0.0 or target_t_kelvin <= 0.0:
        return 0.0
    kt = K_BOLTZMANN * target_t_kelvin
    delta = math.sqrt(4.0 * kt * e / awr)
    x = 2.0 * (e - e0) / delta
    theta = gamma_total / delta
    w_re, _ = _humlicek_w4(x * 0.5, theta * 0.5)
    prefactor = gamma_n * gamma_n / (delta * gamma_total)
    return prefactor * w_re


def _interpolate(e_in: np.ndarray, xs_in: np.ndarray, e_out: np.ndarray) -> np.ndarray:
    grid = e_in.tolist()
    values = xs_in.tolist()

    def at(e: float) -> float:
        if len(grid) < 2 or e <= grid[0]:
            return values[0] if values else 0.0
        if e >= grid[-1]:
            return values[-1]
        pos = bisect.bisect_left(grid, e)
        if grid[pos] == e:
            return values[pos]
        i = pos - 1
        f = (e - grid[i]) / (grid[i + 1] - grid[i])
        return values[i] + f * (values[i + 1] - values[i])

    return np.array([at(float(e)) for e in e_out], dtype=float)


def _humlicek_w4(x: float, y: float) -> tuple[float, float]:
    """Approximate Faddeeva ``w(x + iy)`` for ``y >= 0``; returns (Re, Im)."""
    s = abs(x) + y
    zsq_re = x * x - y * y
    zsq_im = 2.0 * x * y
    if s >= 15.0:
        # w ~ (i/sqrt(pi)) z / (z^2 - 1/2)
        m_re = zsq_re - 0.5
        m_im = zsq_im
        denom = m_re * m_re + m_im * m_im
        num_re, num_im = y, x
        res_re = (num_re * m_re + num_im * m_im) / denom
        res_im = (num_im * m_re - num_re * m_im) / denom
        return res_re * _INV_SQRT_PI, res_im * _INV_SQRT_PI
    if s >= 5.5:
        num_re = y * (zsq_re - 1.5) - x * zsq_im
        num_im = x * (zsq_re - 1.5) + y * zsq_im
        denom_re = (
            (zsq_re - 1.5) * (zsq_re - 1.5) - zsq_im * zsq_im - zsq_re * 0.5 + 0.75
        )
        denom_im = 2.0 * (zsq_re - 1.5) * zsq_im - zsq_im * 0.5
        denom = max(denom_re * denom_re + denom_im * denom_im, 1e-300)
        return (
            _INV_SQRT_PI * (num_re * denom_re + num_im * denom_im) / denom,
            _INV_SQRT_PI * (num_im * denom_re - num_re * denom_im) / denom,
        )
    sum_re = 0.0
    sum_im = 0.0
    term_re = 1.0
    term_im = 0.0
    for n in range(32):
        d = n + 0.5
        sum_re += term_re / d
        sum_im += term_im / d
        term_re, term_im = (
            -(term_re * zsq_re - term_im * zsq_im),
            -(term_re * zsq_im + term_im * zsq_re),
        )
    exp_neg_zsq = math.exp(-zsq_re)
    cos_2xy = math.cos(-2.0 * x * y)
    sin_2xy = math.sin(-2.0 * x * y)
    re = exp_neg_zsq * cos_2xy + 2.0 * _INV_SQRT_PI * (y * sum_re - x * sum_im)
    im = exp_neg_zsq * sin_2xy + 2.0 * _INV_SQRT_PI * (x * sum_re + y * sum_im)
    return re, im