"""Messuopas: trade-fair guide backend."""

__version__ = "0.1.0"
