[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mcsim"
version = "0.1.0"
description = "Building blocks for Monte Carlo simulation: CP/PARAFAC tensor compression, log-decimated CDF sampling, matrix-exponential depletion, Doppler broadening and decay chains."
requires-python = ">=3.10"
keywords = ["monte-carlo", "parafac", "depletion", "doppler", "decay-chain", "nuclear", "simulation"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Physics",
    "Topic :: Scientific/Engineering :: Mathematics",
]
dependencies = [
    "numpy",
    "scipy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["mcsim"]

[tool.pytest.ini_options]
addopts = "-ra"
