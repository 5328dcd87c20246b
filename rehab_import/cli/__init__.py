"""CLI interface for the import reconciliation engine."""

from rehab_import.cli.commands import app

__all__ = ["app"]
