"""Weighted CFGs and PMCFGs, derivation trees, NEGRA export, equivalence relations and NFA recognition."""

__version__ = "0.1.0"