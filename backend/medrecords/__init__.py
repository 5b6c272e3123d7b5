"""Medical records HTTP service: patients, visits, treatments and diagnostics."""

__version__ = "1.0.0"
