"""Monte Carlo building blocks: CP tensor compression, log-decimated CDF sampling, decay chains, depletion and Doppler broadening."""

__version__ = "0.1.0"