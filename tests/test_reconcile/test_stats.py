"""Tests for aggregate review statistics and list filters."""

from rehab_import.models import (
    ClinicalNoteDecision,
    CreateDecision,
    ExerciseSetDecision,
    ExtractedExercise,
    ItemAction,
    ReuseDecision,
    SkipDecision,
)
from rehab_import.reconcile.filters import ExerciseFilter, filter_exercises, reuse_target_name
from rehab_import.reconcile.stats import (
    compute_confident_progress,
    compute_exercise_stats,
    compute_import_stats,
)


class TestExerciseStats:
    def test_counts_by_action(self):
        decisions = {
            "a": ReuseDecision(temp_id="a", reuse_exercise_id="x1"),
            "b": ReuseDecision(temp_id="b", reuse_exercise_id="x2"),
            "c": CreateDecision(temp_id="c"),
            "d": SkipDecision(temp_id="d"),
            "e": SkipDecision(temp_id="e"),
        }
        stats = compute_exercise_stats(decisions)

        assert (stats.reuse_count, stats.create_count, stats.skip_count) == (2, 1, 2)
        assert stats.total == 5
        assert stats.total_to_import == 3
        assert stats.can_proceed is True

    def test_all_skipped_cannot_proceed(self):
        stats = compute_exercise_stats({"a": SkipDecision(temp_id="a")})

        assert stats.total_to_import == 0
        assert stats.can_proceed is False

    def test_empty(self):
        stats = compute_exercise_stats({})

        assert stats.total == 0
        assert stats.can_proceed is False


class TestConfidentProgress:
    def test_counts_reuse_within_confident(self):
        confident = [ExtractedExercise(temp_id=t, name=t) for t in ("a", "b", "c")]
        decisions = {
            "a": ReuseDecision(temp_id="a", reuse_exercise_id="x1"),
            "b": CreateDecision(temp_id="b"),
            "c": SkipDecision(temp_id="c"),
        }
        progress = compute_confident_progress(confident, decisions)

        assert progress.approved_count == 1
        assert progress.total == 3
        assert progress.all_approved is False

    def test_no_confident_items_is_not_all_approved(self):
        progress = compute_confident_progress([], {})

        assert progress.total == 0
        assert progress.all_approved is False

    def test_every_confident_item_approved(self):
        confident = [ExtractedExercise(temp_id="a", name="a")]
        decisions = {"a": ReuseDecision(temp_id="a", reuse_exercise_id="x1")}

        assert compute_confident_progress(confident, decisions).all_approved is True


class TestImportStats:
    def test_summary(self, analysis):
        stats = compute_import_stats(
            analysis.exercises,
            analysis.exercise_sets,
            analysis.clinical_notes,
            analysis.match_suggestions,
            {
                "e1": ReuseDecision(temp_id="e1", reuse_exercise_id="x1"),
                "e2": SkipDecision(temp_id="e2"),
                "e3": SkipDecision(temp_id="e3"),
            },
            {
                "s1": ExerciseSetDecision(temp_id="s1"),
                "s2": ExerciseSetDecision(temp_id="s2", action=ItemAction.SKIP),
            },
            {"n1": ClinicalNoteDecision(temp_id="n1"), "n2": ClinicalNoteDecision(temp_id="n2")},
        )

        assert stats.total_exercises == 3
        assert stats.exercises_to_import == 1
        assert stats.exercises_with_matches == 2
        assert (stats.sets_to_create, stats.sets_to_skip, stats.eligible_sets) == (1, 1, 1)
        assert stats.notes_to_create == 2
        assert stats.notes_require_patient is True

    def test_empty_extraction(self):
        stats = compute_import_stats([], [], [], {}, {}, {}, {})

        assert stats.total_exercises == 0
        assert stats.exercises_to_import == 0
        assert stats.total_sets == 0
        assert stats.total_notes == 0
        assert stats.notes_require_patient is False


class TestFilters:
    def test_filter_by_action(self, exercises, suggestions_map):
        decisions = {
            "e1": ReuseDecision(temp_id="e1", reuse_exercise_id="x1"),
            "e2": CreateDecision(temp_id="e2"),
            "e3": SkipDecision(temp_id="e3"),
        }

        def ids(exercise_filter):
            return [
                e.temp_id
                for e in filter_exercises(exercises, decisions, suggestions_map, exercise_filter)
            ]

        assert ids(ExerciseFilter.ALL) == ["e1", "e2", "e3"]
        assert ids(ExerciseFilter.REUSE) == ["e1"]
        assert ids(ExerciseFilter.CREATE) == ["e2"]
        assert ids(ExerciseFilter.SKIP) == ["e3"]
        assert ids(ExerciseFilter.MATCHED) == ["e1", "e2"]

    def test_reuse_target_name(self, suggestions_map):
        decision = ReuseDecision(temp_id="e1", reuse_exercise_id="x4")
        assert reuse_target_name(decision, suggestions_map["e1"]) == "Single Leg Bridge"

    def test_stale_reuse_target_has_no_name(self, suggestions_map):
        decision = ReuseDecision(temp_id="e1", reuse_exercise_id="gone")
        assert reuse_target_name(decision, suggestions_map["e1"]) is None

    def test_non_reuse_has_no_target_name(self, suggestions_map):
        assert reuse_target_name(CreateDecision(temp_id="e1"), suggestions_map["e1"]) is None
        assert reuse_target_name(None, suggestions_map["e1"]) is None
