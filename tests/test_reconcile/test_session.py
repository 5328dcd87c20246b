"""Tests for the import session and its command reducer."""

import json
import logging

import pytest
from pydantic import TypeAdapter

from rehab_import.exceptions import InvalidDecisionError, UnknownItemError
from rehab_import.matching.classifier import MatchBucket
from rehab_import.models import MatchSuggestion
from rehab_import.reconcile import (
    ApproveAllConfident,
    ImportSession,
    RefreshSuggestions,
    ReviewCommand,
    SetAllCreate,
    SetAllSkip,
    SetClinicalNoteDecision,
    SetExerciseDecision,
    SetExerciseSetDecision,
    SetPatient,
    UseAllMatched,
)
from rehab_import.reconcile.filters import ExerciseFilter


class TestSessionInitialization:
    def test_default_decisions(self, session):
        decisions = session.exercise_decisions

        assert decisions["e1"].action == "reuse"
        assert decisions["e1"].reuse_exercise_id == "x1"
        assert decisions["e2"].action == "create"
        assert decisions["e3"].action == "create"

    def test_one_decision_per_item(self, session, analysis):
        assert set(session.exercise_decisions) == {e.temp_id for e in analysis.exercises}
        assert {d.action for d in session.set_decisions.values()} == {"create"}
        assert {d.action for d in session.note_decisions.values()} == {"create"}

    def test_buckets(self, session):
        assert session.buckets().counts() == {"new": 1, "confident": 1, "uncertain": 1}
        assert session.bucket_of("e2") == MatchBucket.UNCERTAIN

    def test_bucket_of_unknown_exercise(self, session):
        with pytest.raises(UnknownItemError):
            session.bucket_of("nope")

    def test_empty_analysis(self, settings, event_logger):
        from rehab_import.models import DocumentAnalysisResult

        session = ImportSession(DocumentAnalysisResult(), settings=settings, event_logger=event_logger)

        assert len(session.exercise_decisions) == 0
        assert session.can_proceed() is False
        assert session.import_stats().total_exercises == 0

    def test_camel_case_analysis(self, settings, event_logger):
        from rehab_import.models import DocumentAnalysisResult

        analysis = DocumentAnalysisResult.model_validate(
            {
                "exercises": [{"tempId": "e1", "name": "Squat", "holdTime": 5}],
                "matchSuggestions": {
                    "e1": [
                        {
                            "existingExerciseId": "x1",
                            "existingExerciseName": "Wall squat",
                            "confidence": 0.82,
                        }
                    ]
                },
                "documentInfo": {"patientName": "Jan Kowalski"},
            }
        )
        session = ImportSession(analysis, settings=settings, event_logger=event_logger)

        assert session.exercise_decisions["e1"].reuse_exercise_id == "x1"
        assert session.document_info.patient_name == "Jan Kowalski"

    def test_threshold_from_settings(self, analysis, event_logger):
        from rehab_import.config import Settings

        strict = Settings(_env_file=None, confident_threshold=0.95)
        session = ImportSession(analysis, settings=strict, event_logger=event_logger)

        assert session.exercise_decisions["e1"].action == "create"
        assert session.bucket_of("e1") == MatchBucket.UNCERTAIN


class TestExerciseCommands:
    def test_switch_to_create(self, session):
        decision = session.set_exercise_decision("e1", action="create")

        assert decision.action == "create"
        assert decision.reuse_exercise_id is None

    def test_choose_other_match(self, session):
        session.set_exercise_decision("e1", reuse_exercise_id="x4")

        assert session.exercise_decisions["e1"].reuse_exercise_id == "x4"
        assert session.reuse_target_name("e1") == "Single Leg Bridge"

    def test_reuse_without_target_is_rejected(self, session):
        with pytest.raises(InvalidDecisionError):
            session.set_exercise_decision("e2", action="reuse")

        assert session.exercise_decisions["e2"].action == "create"

    def test_unknown_exercise(self, session):
        with pytest.raises(UnknownItemError):
            session.dispatch(SetExerciseDecision(temp_id="ghost", action="skip"))

        assert "ghost" not in session.exercise_decisions

    def test_edits_survive_action_changes(self, session):
        session.set_exercise_decision("e2", edited_data={"name": "Clamshell with band"})
        session.set_exercise_decision("e2", action="skip")
        decision = session.set_exercise_decision("e2", action="create")

        assert decision.edited_data.name == "Clamshell with band"


class TestBulkCommands:
    def test_approve_all_confident(self, session):
        session.set_exercise_decision("e1", action="create")

        assert session.approve_all_confident() == ["e1"]
        assert session.exercise_decisions["e1"].reuse_exercise_id == "x1"
        assert session.approve_all_confident() == []

    def test_use_all_matched(self, session):
        assert session.use_all_matched() == ["e2"]
        assert session.exercise_stats().reuse_count == 2

    def test_set_all_skip_then_create(self, session):
        session.set_all_skip()
        assert session.can_proceed() is False
        assert session.is_set_eligible("s1") is False

        session.set_all_create()
        assert session.exercise_stats().create_count == 3
        assert session.is_set_eligible("s1") is True

    def test_bulk_leaves_set_and_note_decisions(self, session):
        session.dispatch(SetClinicalNoteDecision(temp_id="n2", action="skip"))
        session.set_all_skip()

        assert session.set_decisions["s1"].action == "create"
        assert session.note_decisions["n2"].action == "skip"


class TestItemCommands:
    def test_skip_set(self, session):
        session.dispatch(SetExerciseSetDecision(temp_id="s1", action="skip", edited_name="Hips"))

        decision = session.set_decisions["s1"]
        assert decision.action == "skip"
        assert decision.edited_name == "Hips"

    def test_ineligible_set_create_logs_warning(self, session, caplog):
        session.set_exercise_decision("e3", action="skip")

        with caplog.at_level(logging.WARNING, logger="rehab_import.reconcile.commands"):
            session.dispatch(SetExerciseSetDecision(temp_id="s2", action="create"))

        assert "no active exercises" in caplog.text
        assert session.set_decisions["s2"].action == "create"
        assert session.active_members("s2") == []

    def test_unknown_set_and_note(self, session):
        with pytest.raises(UnknownItemError):
            session.dispatch(SetExerciseSetDecision(temp_id="s9", action="skip"))
        with pytest.raises(UnknownItemError):
            session.dispatch(SetClinicalNoteDecision(temp_id="n9", action="skip"))

    def test_refresh_suggestions(self, session):
        suggestion = MatchSuggestion(
            existing_exercise_id="x3", existing_exercise_name="Wall angels", confidence=0.88
        )
        session.dispatch(RefreshSuggestions(temp_id="e3", suggestions=[suggestion]))

        assert session.bucket_of("e3") == MatchBucket.CONFIDENT
        # Refreshing does not change the decision by itself
        assert session.exercise_decisions["e3"].action == "create"
        assert session.approve_all_confident() == ["e3"]

    def test_set_patient(self, session):
        session.dispatch(SetPatient(patient_id="p2"))
        assert session.patient_id == "p2"

        session.dispatch(SetPatient(patient_id=""))
        assert session.patient_id is None


class TestCommandParsing:
    def test_commands_parse_from_json(self):
        adapter = TypeAdapter(list[ReviewCommand])
        commands = adapter.validate_python(
            [
                {"command": "approve_all_confident"},
                {"command": "use_all_matched"},
                {"command": "set_all_create"},
                {"command": "set_all_skip"},
                {"command": "set_exercise_decision", "temp_id": "e1", "action": "skip"},
            ]
        )

        assert [type(c) for c in commands] == [
            ApproveAllConfident,
            UseAllMatched,
            SetAllCreate,
            SetAllSkip,
            SetExerciseDecision,
        ]
        assert commands[-1].changes() == {"action": "skip"}


class TestListeners:
    def test_listener_notified_once_per_command(self, session):
        calls = []
        session.subscribe(lambda s, command, affected: calls.append((command.command, affected)))

        session.set_all_skip()
        session.set_exercise_decision("e1", action="create")

        assert calls == [
            ("set_all_skip", ["e1", "e2", "e3"]),
            ("set_exercise_decision", ["e1"]),
        ]

    def test_unsubscribe(self, session):
        calls = []
        unsubscribe = session.subscribe(lambda *args: calls.append(args))
        unsubscribe()

        session.set_all_skip()
        assert calls == []

    def test_failing_listener_does_not_break_command(self, session):
        def broken(*args):
            raise RuntimeError("boom")

        session.subscribe(broken)
        session.set_all_skip()

        assert session.exercise_stats().skip_count == 3

    def test_rejected_command_not_broadcast(self, session):
        calls = []
        session.subscribe(lambda *args: calls.append(args))

        with pytest.raises(InvalidDecisionError):
            session.set_exercise_decision("e2", action="reuse")
        assert calls == []


class TestDerivedViews:
    def test_filtered_exercises(self, session):
        assert [e.temp_id for e in session.filtered_exercises(ExerciseFilter.REUSE)] == ["e1"]
        assert [e.temp_id for e in session.filtered_exercises(ExerciseFilter.MATCHED)] == ["e1", "e2"]

    def test_confident_progress(self, session):
        assert session.confident_progress().all_approved is True

        session.set_exercise_decision("e1", action="skip")
        progress = session.confident_progress()
        assert (progress.approved_count, progress.total) == (0, 1)

    def test_import_stats(self, session):
        stats = session.import_stats()

        assert stats.exercises_to_reuse == 1
        assert stats.exercises_to_create == 2
        assert stats.eligible_sets == 2
        assert stats.notes_require_patient is True

    def test_decisions_snapshot(self, session):
        snapshot = session.decisions_snapshot()

        assert set(snapshot) == {"exercises", "sets", "notes"}
        assert snapshot["exercises"]["e1"].reuse_exercise_id == "x1"

    def test_patient_suggestion(self, session, roster):
        assert session.suggest_patient(roster).id == "p2"
        assert [p.id for p in session.search_patients("jane", roster)] == ["p2", "p3"]


class TestEventLogging:
    def test_session_and_commands_logged(self, session, event_logger):
        session.approve_all_confident()
        with pytest.raises(UnknownItemError):
            session.set_exercise_decision("ghost", action="skip")

        sessions = event_logger.get_recent_events("sessions")
        assert sessions[0]["session_id"] == "sess-1"
        assert sessions[0]["bucket_counts"] == {"new": 1, "confident": 1, "uncertain": 1}

        commands = event_logger.get_recent_events("commands")
        assert [c["event_type"] for c in commands] == ["command_applied", "command_rejected"]
        assert commands[0]["reuse_count"] == 1
        assert commands[1]["error_type"] == "UnknownItemError"

    def test_payload_logged(self, session, event_logger):
        session.build_import_request()

        lines = (event_logger.log_dir / "payloads.jsonl").read_text().strip().split("\n")
        event = json.loads(lines[0])
        assert event["exercises_to_reuse"] == 1
        assert event["patient_bound"] is False
