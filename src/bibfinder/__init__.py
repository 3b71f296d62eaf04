"""Resolve bibliography metadata from reference-manager exports."""

__version__ = "0.1.0"
