"""Finite element solver for heat conduction, electric conduction and Joule heating in 1D and 2D."""

__version__ = "0.1.0"