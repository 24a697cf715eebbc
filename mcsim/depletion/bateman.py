"""Bateman depletion stepper over a frozen flux and one-group XS."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

import numpy as np

from mcsim.cram import cram16_dense
from mcsim.decay.chain import DecayChain


@dataclass
class BurnupStep:
    """Result of one depletion step: elapsed time and concentrations."""

    time: float
    concentrations: np.ndarray


class DepletionSolver:
    """Advance ``dN/dt = A @ N`` for a chain at a fixed flux and XS source.

    ``xs_lookup(parent_idx, mt)`` supplies microscopic cross sections
    in barns.
    """

    def __init__(
        self,
        chain: DecayChain,
        flux_phi: float,
        fission_energy: float,
        xs_lookup: Callable[[int, str], float],
        initial_concentrations: Sequence[float] | np.ndarray,
    ) -> None:
        conc = np.asarray(initial_concentrations, dtype=float).reshape(-1)
        if conc.size != len(chain):
            raise ValueError("initial_concentrations must match chain length")
        self.chain = chain
        self.flux_phi = flux_phi
        self.fission_energy = fission_energy
        self.xs_lookup = xs_lookup
        self.time = 0.0
        self.concentrations = conc.copy()

    def step(self, dt: float) -> BurnupStep:
        """Advance the solution by ``dt`` seconds."""
        a = self.chain.build_transmutation_matrix(
            self.flux_phi, self.fission_energy, self.xs_lookup
        )
        n = len(self.chain)
        self.concentrations = cram16_dense(a.reshape(-1), self.concentrations, dt, n)
        self.time += dt
        return BurnupStep(time=self.time, concentrations=self.concentrations.copy())