"""Pytest configuration and fixtures."""

import pytest

from rehab_import.config import Settings
from rehab_import.models import (
    DocumentAnalysisResult,
    DocumentInfo,
    ExtractedClinicalNote,
    ExtractedExercise,
    ExtractedExerciseSet,
    MatchSuggestion,
    PatientOption,
)
from rehab_import.observability import ReviewEventLogger
from rehab_import.reconcile import ImportSession


def make_suggestion(exercise_id: str, name: str, confidence: float) -> MatchSuggestion:
    return MatchSuggestion(
        existing_exercise_id=exercise_id,
        existing_exercise_name=name,
        confidence=confidence,
        match_reason="name",
    )


@pytest.fixture
def exercises():
    """Three extracted exercises: one confident, one uncertain, one new."""
    return [
        ExtractedExercise(temp_id="e1", name="Bridge", sets=2, reps=10, suggested_tags=["core"]),
        ExtractedExercise(temp_id="e2", name="Clamshell", reps=15),
        ExtractedExercise(temp_id="e3", name="Wall Angel", type="hold", hold_time=30),
    ]


@pytest.fixture
def suggestions_map():
    return {
        "e1": [
            make_suggestion("x1", "Glute Bridge", 0.92),
            make_suggestion("x4", "Single Leg Bridge", 0.6),
        ],
        "e2": [make_suggestion("x2", "Side-lying Clamshell", 0.5)],
    }


@pytest.fixture
def analysis(exercises, suggestions_map):
    """Document analysis result with two sets and two notes."""
    return DocumentAnalysisResult(
        exercises=exercises,
        exercise_sets=[
            ExtractedExerciseSet(temp_id="s1", name="Hip program", exercise_temp_ids=["e1", "e2"]),
            ExtractedExerciseSet(temp_id="s2", name="Posture", exercise_temp_ids=["e3"]),
        ],
        clinical_notes=[
            ExtractedClinicalNote(temp_id="n1", note_type="diagnosis", title="Dx", content="Hip OA"),
            ExtractedClinicalNote(temp_id="n2", content="Progress well"),
        ],
        match_suggestions=suggestions_map,
        document_info=DocumentInfo(patient_name="Jane Doe", therapist_name="Sam Lee"),
    )


@pytest.fixture
def roster():
    return [
        PatientOption(id="p1", fullname="John Smith", email="john@example.com"),
        PatientOption(id="p2", fullname="Jane Doe", email="jane.doe@example.com"),
        PatientOption(id="p3", fullname="Janet Dole"),
    ]


@pytest.fixture
def settings():
    """Settings with defaults, independent of the environment."""
    return Settings(_env_file=None)


@pytest.fixture
def event_logger(tmp_path):
    """Event logger writing into a temporary directory."""
    return ReviewEventLogger(log_dir=tmp_path / "logs", enabled=True)


@pytest.fixture
def session(analysis, settings, event_logger):
    """Import session over the sample analysis."""
    return ImportSession(analysis, settings=settings, event_logger=event_logger, session_id="sess-1")
