"""Reconciliation engine for AI-assisted document imports."""

__version__ = "0.1.0"
