"""Itanium C++ ABI demangling, logging flag settings and log-line normalisation."""

__version__ = "0.8.0"

__all__ = ["__version__"]