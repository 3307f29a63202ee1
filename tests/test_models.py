"""Tests for data models."""

from datetime import datetime

import pytest

from liftbook.errors import InvariantViolation
from liftbook.models.exercises import SEED_EXERCISES, EquipmentType, Exercise, ExerciseCategory
from liftbook.models.routine import (
    RoutineExercise,
    RoutineExerciseInput,
    RoutineExerciseSet,
    RoutineSetInput,
    RoutineTemplate,
    SetType,
    group_by_supersets,
    validate_routine_input,
)
from liftbook.models.workout import (
    PreviousSet,
    ProgressTrend,
    WorkoutSession,
    WorkoutSet,
    compare_to_last,
)


class TestExercise:
    """Tests for Exercise model."""

    def test_exercise_to_dict(self):
        """Test exercise serialization."""
        exercise = Exercise(
            name="Barbell Bench Press",
            category=ExerciseCategory.CHEST,
            equipment=EquipmentType.BARBELL,
        )
        data = exercise.to_dict()

        assert data["name"] == "Barbell Bench Press"
        assert data["category"] == "chest"
        assert data["equipment"] == "barbell"
        assert data["is_custom"] is False

    def test_exercise_from_dict(self):
        """Test exercise deserialization."""
        exercise = Exercise.from_dict(
            {"name": "Plank", "category": "core", "equipment": "bodyweight", "is_custom": True}
        )

        assert exercise.category == ExerciseCategory.CORE
        assert exercise.equipment == EquipmentType.BODYWEIGHT
        assert exercise.is_custom

    def test_seed_library_is_builtin(self):
        """Test that the seed library contains only built-in entries."""
        assert len(SEED_EXERCISES) > 50
        assert not any(e.is_custom for e in SEED_EXERCISES)
        categories = {e.category for e in SEED_EXERCISES}
        assert ExerciseCategory.CHEST in categories
        assert ExerciseCategory.LEGS in categories


class TestRoutineValidation:
    """Tests for routine input validation."""

    def _exercise(self, order, sets=None, **kwargs):
        return RoutineExerciseInput(
            exercise_id=f"ex-{order}",
            order=order,
            sets=sets if sets is not None else [RoutineSetInput(1, 5, 60.0)],
            **kwargs,
        )

    def test_accepts_shuffled_contiguous_orders(self):
        """Test that orders only need to form 0..n-1."""
        validate_routine_input("Full Body", [self._exercise(2), self._exercise(0), self._exercise(1)])

    def test_rejects_gap_in_order(self):
        """Test that a gap in the order is rejected."""
        with pytest.raises(InvariantViolation, match="contiguous"):
            validate_routine_input("Full Body", [self._exercise(0), self._exercise(2)])

    def test_rejects_empty_name(self):
        """Test that a blank name is rejected."""
        with pytest.raises(InvariantViolation):
            validate_routine_input("   ", [self._exercise(0)])

    def test_rejects_duplicate_set_number(self):
        """Test that set numbers must be unique within an exercise."""
        sets = [RoutineSetInput(1, 5), RoutineSetInput(1, 5)]
        with pytest.raises(InvariantViolation, match="more than once"):
            validate_routine_input("Push", [self._exercise(0, sets)])

    @pytest.mark.parametrize(
        "target",
        [
            RoutineSetInput(0, 5),
            RoutineSetInput(1, 0),
            RoutineSetInput(1, 5, -2.5),
        ],
    )
    def test_rejects_bad_targets(self, target):
        """Test set number, reps and weight bounds."""
        with pytest.raises(InvariantViolation):
            validate_routine_input("Push", [self._exercise(0, [target])])

    def test_rejects_negative_rest(self):
        """Test that rest time cannot be negative."""
        with pytest.raises(InvariantViolation, match="Rest"):
            validate_routine_input("Push", [self._exercise(0, rest_seconds=-1)])

    def test_empty_routine_is_allowed(self):
        """Test a routine with no exercises."""
        validate_routine_input("Rest Day", [])


class TestSupersetGrouping:
    """Tests for grouping routine exercises into supersets."""

    def _exercise(self, order, group=None):
        return RoutineExercise(exercise_id=f"ex-{order}", order=order, superset_group_id=group)

    def test_groups_by_shared_id(self):
        """Test the canonical A, B(s1), C(s1), D layout."""
        groups = group_by_supersets(
            [
                self._exercise(0),
                self._exercise(1, "s1"),
                self._exercise(2, "s1"),
                self._exercise(3),
            ]
        )

        assert [len(g.exercises) for g in groups] == [1, 2, 1]
        assert [g.is_superset for g in groups] == [False, True, False]
        assert [e.order for e in groups[1].exercises] == [1, 2]

    def test_non_adjacent_members_join_first_position(self):
        """Test that a group sits where its first member appears."""
        groups = group_by_supersets(
            [
                self._exercise(0, "s1"),
                self._exercise(1),
                self._exercise(2, "s1"),
            ]
        )

        assert len(groups) == 2
        assert groups[0].superset_group_id == "s1"
        assert [e.order for e in groups[0].exercises] == [0, 2]
        assert groups[1].exercises[0].order == 1

    def test_input_order_does_not_matter(self):
        """Test that grouping sorts by order first."""
        groups = group_by_supersets([self._exercise(1), self._exercise(0)])
        assert [g.exercises[0].order for g in groups] == [0, 1]

    def test_empty(self):
        """Test grouping nothing."""
        assert group_by_supersets([]) == []


class TestRoutineTemplate:
    """Tests for RoutineTemplate model."""

    def test_total_sets(self):
        """Test set counting and serialization."""
        routine = RoutineTemplate(
            name="Push",
            exercises=[
                RoutineExercise(
                    exercise_id="a",
                    order=0,
                    sets=[RoutineExerciseSet(1, 5), RoutineExerciseSet(2, 5)],
                ),
                RoutineExercise(exercise_id="b", order=1, sets=[RoutineExerciseSet(1, 12)]),
            ],
        )

        assert routine.total_sets == 3
        assert routine.to_dict()["exercises"][0]["sets"][1]["set_number"] == 2


class TestWorkoutModels:
    """Tests for session and set models."""

    def test_set_volume_and_round_trip(self):
        """Test set volume and serialization."""
        logged = WorkoutSet(
            workout_exercise_id="we-1",
            set_number=1,
            weight=60.0,
            reps=5,
            completed_at=datetime(2024, 3, 4, 12, 5),
            rpe=8.0,
            set_type=SetType.WARMUP,
        )

        assert logged.volume == 300
        restored = WorkoutSet.from_dict(logged.to_dict())
        assert restored == logged

    def test_duration_is_zero_until_completed(self):
        """Test session duration."""
        session = WorkoutSession(
            routine_template_id="r", name="Push", started_at=datetime(2024, 3, 4, 12, 0)
        )
        assert session.duration_seconds == 0

        session.completed_at = datetime(2024, 3, 4, 12, 45)
        assert session.duration_seconds == 45 * 60


class TestCompareToLast:
    """Tests for progressive-overload comparison."""

    def test_first_when_no_previous(self):
        """Test the trend with no history."""
        assert compare_to_last(60, 5, None) == ProgressTrend.FIRST

    def test_compares_volume(self):
        """Test that trends compare weight times reps."""
        previous = PreviousSet(set_number=1, weight=60, reps=5)

        assert compare_to_last(62.5, 5, previous) == ProgressTrend.UP
        assert compare_to_last(60, 4, previous) == ProgressTrend.DOWN
        # 50 x 6 == 60 x 5
        assert compare_to_last(50, 6, previous) == ProgressTrend.SAME
