"""Main entry point for the import reconciliation engine."""

import logging
import sys

from rehab_import.config import get_settings


def setup_logging():
    """Configure logging based on settings."""
    settings = get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def main():
    """Main entry point - runs CLI."""
    setup_logging()

    from rehab_import.cli.commands import app

    app()


def open_session(analysis_json: str, patient_id=None):
    """Programmatic API for opening a review session.

    Example:
        from rehab_import.main import open_session

        session = open_session(Path("analysis.json").read_text())
        session.approve_all_confident()
        request = session.build_import_request()
    """
    from rehab_import.models.extraction import DocumentAnalysisResult
    from rehab_import.reconcile.session import ImportSession

    analysis = DocumentAnalysisResult.model_validate_json(analysis_json)
    return ImportSession(analysis, patient_id=patient_id)


if __name__ == "__main__":
    main()
