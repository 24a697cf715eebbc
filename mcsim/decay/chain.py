"""Depletion chain data: decay branches, reaction channels and the
transmutation matrix built from them."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, Iterator

import numpy as np


@dataclass(frozen=True)
class ReactionTarget:
    """Where a decay or reaction sends its product.

    ``name`` is the product nuclide; ``None`` means the product is
    lost from the tracked set.
    """

    name: str | None = None

    @classmethod
    def lost(cls) -> "ReactionTarget":
        """Target for channels whose product leaves the tracked set."""
        return cls(None)

    @property
    def is_lost(self) -> bool:
        return self.name is None


@dataclass
class DecayMode:
    """One radioactive-decay branch of a parent nuclide."""

    mode: str
    target: ReactionTarget
    branching_ratio: float = 1.0


@dataclass
class ReactionChannel:
    """One transmutation reaction such as ``(n,gamma)`` or ``fission``."""

    mt: str
    target: ReactionTarget
    q_value: float = 0.0
    branching_ratio: float = 1.0


@dataclass
class YieldTable:
    """Fission-product yields at one incident energy."""

    products: list[str] = field(default_factory=list)
    yields: list[float] = field(default_factory=list)

    def __post_init__(self) -> None:
        if len(self.products) != len(self.yields):
            raise ValueError(
                f"products {len(self.products)} != yields {len(self.yields)}"
            )

    def __iter__(self) -> Iterator[tuple[str, float]]:
        return iter(zip(self.products, self.yields))


@dataclass
class DecayNuclide:
    """Chain entry for one nuclide.

    ``half_life`` is in seconds (``None`` for stable nuclides),
    ``decay_energy`` in eV per decay. ``fission_yields`` maps incident
    energy (eV) to the yield table at that energy.
    """

    name: str
    half_life: float | None = None
    decay_energy: float = 0.0
    decay_modes: list[DecayMode] = field(default_factory=list)
    reactions: list[ReactionChannel] = field(default_factory=list)
    fission_yields: dict[float, YieldTable] | None = None

    def decay_constant(self) -> float:
        """Decay constant ``ln 2 / t_half``; zero for stable nuclides."""
        if self.half_life is not None and self.half_life > 0.0:
            return math.log(2.0) / self.half_life
        return 0.0


def _yields_at_energy(
    tables: dict[float, YieldTable], energy: float
) -> YieldTable | None:
    """Table tabulated at the energy closest to ``energy``."""
    if not tables:
        return None
    nearest = min(tables, key=lambda e: abs(e - energy))
    return tables[nearest]


class DecayChain:
    """Nuclides linked by decay branches and reaction channels."""

    def __init__(self) -> None:
        self.nuclides: list[DecayNuclide] = []
        self._name_to_idx: dict[str, int] = {}

    def push(self, nuclide: DecayNuclide) -> int:
        """Append a nuclide and return its chain index."""
        idx = len(self.nuclides)
        self._name_to_idx[nuclide.name] = idx
        self.nuclides.append(nuclide)
        return idx

    def index_of(self, name: str) -> int | None:
        """Chain index of ``name``, or ``None`` if it is not tracked."""
        return self._name_to_idx.get(name)

    def __len__(self) -> int:
        return len(self.nuclides)

    def __iter__(self) -> Iterator[DecayNuclide]:
        return iter(self.nuclides)

    def build_transmutation_matrix(
        self,
        flux_phi: float,
        fission_energy: float,
        xs_lookup: Callable[[int, str], float],
    ) -> np.ndarray:
        """Dense matrix ``A`` (1/s) with ``dN/dt = A @ N``.

        ``flux_phi`` is the scalar flux (1/cm^2/s), ``xs_lookup(parent,
        mt)`` returns a microscopic cross section in barns and
        ``fission_energy`` (eV) selects the fission-yield table.
        """
        n = len(self.nuclides)
        a = np.zeros((n, n))

        for parent_idx, parent in enumerate(self.nuclides):
            lam = parent.decay_constant()
            if lam > 0.0:
                a[parent_idx, parent_idx] -= lam
                for mode in parent.decay_modes:
                    child_idx = self._target_index(mode.target)
                    if child_idx is not None:
                        a[child_idx, parent_idx] += lam * mode.branching_ratio

            for reaction in parent.reactions:
                sigma = xs_lookup(parent_idx, reaction.mt)
                if sigma <= 0.0:
                    continue
                rate = sigma * 1.0e-24 * flux_phi
                a[parent_idx, parent_idx] -= rate
                if reaction.mt == "fission":
                    if parent.fission_yields is None:
                        continue
                    table = _yields_at_energy(parent.fission_yields, fission_energy)
                    if table is None:
                        continue
                    for product, y in table:
                        p_idx = self.index_of(product)
                        if p_idx is not None:
                            a[p_idx, parent_idx] += rate * y
                else:
                    child_idx = self._target_index(reaction.target)
                    if child_idx is not None:
                        a[child_idx, parent_idx] += rate * reaction.branching_ratio
        return a

    def _target_index(self, target: ReactionTarget) -> int | None:
        if target.name is None:
            return None
        return self.index_of(target.name)