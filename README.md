# mcsim

Numerical building blocks for Monte Carlo simulation codes. It is a
library with no command-line program.

## Modules

- **`mcsim.cp`**: CP/PARAFAC decomposition of a 3-tensor by greedy
  rank-1 deflation.
  - `cp_greedy_rank1(tensor, n_a, n_b, n_c, max_rank, max_iter, tol)`
    takes a flat row-major tensor and returns a `CpDecomposition`.
    Fitting stops early once the residual collapses, so `rank` can come
    out lower than `max_rank`. A tensor of the wrong size raises
    `ValueError`.
  - `CpDecomposition.reconstruct(k)` rebuilds the flat tensor from the
    first `k` components.
  - `CpDecomposition.memory_bytes()` reports the bytes held by the
    factors.
  - `relative_l2_error` and `max_abs_error` measure how good the fit is.
- **`mcsim.cdf`**: `LogDecimatedCdf`, a CDF `F_k(x)` over categories,
  tabulated at log-spaced points.
  - `LogDecimatedCdf.from_intensities(intensities, axis, n_decimated)`
    builds the table.
  - `lookup(x, category)` interpolates linearly in `log10(x)` and
    saturates outside the tabulated range.
  - `sample(x, xi)` returns the smallest category `k` with
    `F_k(x) >= xi`.
- **`mcsim.batch`**: runs many independent jobs in one call. Results
  come back in input order.
  - `CpInput` describes one decomposition. `CpInput.with_defaults`
    uses 200 iterations and a tolerance of 1e-9. `cp_many` runs them.
  - `CdfInput` describes one CDF build, and `cdf_many` runs them.
  - `total_cp_bytes` and `total_cdf_bytes` add up the memory used by
    the results.
- **`mcsim.cram`**: `cram16_dense(a_row_major, n0, t, n)` returns
  `exp(A t) @ n0` for a dense row-major `n x n` matrix. It uses
  `scipy.linalg.expm`, which is Padé with scaling and squaring. The
  CRAM-16 pole and residue constants (`CRAM16_THETA_RE`,
  `CRAM16_THETA_IM`, `CRAM16_ALPHA_RE`, `CRAM16_ALPHA_IM`,
  `CRAM16_ALPHA0`) are there for callers who supply their own kernel.
- **`mcsim.doppler`**:
  - `broaden_constant_pieces` Doppler-broadens a tabulated cross
    section. It treats the cross section as piecewise constant between
    grid points and integrates with 4-point Gauss-Legendre quadrature.
    If the target temperature is not above the input temperature, it
    only interpolates onto the output grid.
  - `broaden_slbw_faddeeva` gives the Doppler-broadened shape of a
    single-level Breit-Wigner elastic peak.
  - Neither function has been checked against a reference processing
    code.
- **`mcsim.decay.chain`**: the data types for a decay chain.
  - `ReactionTarget` names a product nuclide. `ReactionTarget.lost()`
    is a product that leaves the tracked set.
  - The other types are `DecayMode`, `ReactionChannel`, `YieldTable`
    and `DecayNuclide`. `DecayNuclide.decay_constant()` returns
    `ln 2 / t_half`, or 0 for a stable nuclide.
  - `DecayChain` looks nuclides up by name. Its
    `build_transmutation_matrix(flux_phi, fission_energy, xs_lookup)`
    builds the dense matrix `A` (1/s) with `dN/dt = A @ N`.
  - For fission, products are spread using the yield table tabulated
    at the energy nearest `fission_energy`.
- **`mcsim.decay.openmc_xml`**: `load_chain_xml(path)` and
  `parse_chain_xml(source)` read OpenMC-style `chain.xml` depletion
  chains. `source` may be text, bytes or an open file.
  - The reader handles nuclides, decay modes, reactions and neutron
    fission yields.
  - I/O errors, malformed XML and schema violations raise
    `ChainXmlError`.
- **`mcsim.depletion.bateman`**: `DepletionSolver` advances a chain's
  concentrations at a frozen flux and a fixed cross-section lookup.
  Each call to `step(dt)` returns a `BurnupStep` with the elapsed time
  and the new concentrations.

## Installation

```
pip install .
```

## Example

```python
from mcsim.cdf import LogDecimatedCdf
from mcsim.cp import cp_greedy_rank1, relative_l2_error

xs = [1.1 ** i for i in range(50)]
cdf = LogDecimatedCdf.from_intensities(
    [[1.0 / x for x in xs], [1.0] * len(xs)], xs, 200
)
category = cdf.sample(10.0, 0.42)

tensor = [float(i * j * k) for i in range(1, 5) for j in range(1, 4) for k in range(1, 6)]
cp = cp_greedy_rank1(tensor, 4, 3, 5, 1, 200, 1e-12)
print(relative_l2_error(tensor, cp.reconstruct(1)))
```

A depletion step over a decay chain read from a file:

```python
from mcsim.decay.openmc_xml import load_chain_xml
from mcsim.depletion.bateman import DepletionSolver

chain = load_chain_xml("chain.xml")
solver = DepletionSolver(chain, 1.0e14, 0.0253, lambda idx, mt: 0.0, [1.0] * len(chain))
step = solver.step(86400.0)
print(step.time, step.concentrations)
```

## What this package does not do

The package covers the numerical pieces only. It has none of the
following:

- particle transport, geometry or tallies;
- SVD kernels or pointwise cross-section tables;
- readers for HDF5 nuclear-data libraries;
- a command-line program.

Cross sections for depletion come from whatever `xs_lookup` callable
you pass in.

## Running the tests

```
pip install .[test]
pytest
```