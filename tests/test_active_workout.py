"""Tests for the active-workout state machine and its persistence."""

from datetime import datetime, timedelta

import pytest

from liftbook.errors import InvariantViolation, WorkoutConflictError
from liftbook.models.active_workout import ActiveWorkoutState, WorkoutPhase
from liftbook.models.workout import WorkoutSet
from liftbook.services import InputMemory


def _started(at: datetime) -> ActiveWorkoutState:
    state = ActiveWorkoutState()
    state.start("w1", "Push Day", "r1", started_at=at)
    return state


def _logged(set_number: int, at: datetime) -> WorkoutSet:
    return WorkoutSet(
        workout_exercise_id="we-1", set_number=set_number, weight=60, reps=5, completed_at=at
    )


class TestTransitions:
    """Tests for phase transitions."""

    def test_starts_idle(self):
        """Test that a new state has no active workout."""
        state = ActiveWorkoutState()
        assert state.phase is WorkoutPhase.IDLE
        assert not state.is_active
        assert state.get_phase_display() == "No active workout"

    def test_start_enters_in_progress(self, noon):
        """Test that start puts the cursor on the first set of the first exercise."""
        state = _started(noon)

        assert state.phase is WorkoutPhase.IN_PROGRESS
        assert state.current_exercise_index == 0
        assert state.current_set_number == 1

    def test_second_start_conflicts(self, noon):
        """Test that a second start is refused and the first workout kept."""
        state = _started(noon)

        with pytest.raises(WorkoutConflictError) as exc_info:
            state.start("w2", "Pull Day", "r2")

        assert exc_info.value.active_workout_id == "w1"
        assert state.active_workout_id == "w1"

    def test_start_conflicts_while_pending_resume(self, noon):
        """Test that a completed workout still blocks a new start."""
        state = _started(noon)
        state.mark_completed(noon + timedelta(minutes=40))

        with pytest.raises(WorkoutConflictError):
            state.start("w2", "Pull Day", "r2")

    def test_cursor_moves(self, noon):
        """Test that choosing an exercise resets the set number."""
        state = _started(noon)
        state.set_current_set(3)
        state.set_current_exercise(2)

        assert state.current_exercise_index == 2
        assert state.current_set_number == 1

    def test_cursor_requires_in_progress(self):
        """Test that the cursor cannot move while idle."""
        with pytest.raises(InvariantViolation):
            ActiveWorkoutState().set_current_exercise(1)

    def test_logged_sets_are_appended_not_deduplicated(self, noon):
        """Test that the cache keeps repeated set numbers."""
        state = _started(noon)
        state.add_logged_set("we-1", _logged(1, noon))
        state.add_logged_set("we-1", _logged(1, noon + timedelta(seconds=30)))

        assert len(state.get_logged_sets("we-1")) == 2
        assert state.get_logged_sets("we-2") == []

    def test_end_and_abandon_reset(self, noon):
        """Test that end and abandon both clear everything."""
        for finish in ("end", "abandon"):
            state = _started(noon)
            state.add_logged_set("we-1", _logged(1, noon))
            getattr(state, finish)()

            assert state.phase is WorkoutPhase.IDLE
            assert state.logged_sets == {}
            assert state.started_at is None


class TestResumeWindow:
    """Tests for the ten-minute resume window."""

    def test_resume_inside_window(self, noon):
        """Test resuming one second before the window closes."""
        state = _started(noon)
        completed = noon + timedelta(minutes=45)
        state.mark_completed(completed)

        assert state.phase is WorkoutPhase.PENDING_RESUME
        assert state.resume(completed + timedelta(seconds=599))
        assert state.phase is WorkoutPhase.IN_PROGRESS
        assert state.completed_at is None

    def test_resume_after_window_fails_without_change(self, noon):
        """Test that a late resume leaves the state alone."""
        state = _started(noon)
        completed = noon + timedelta(minutes=45)
        state.mark_completed(completed)

        assert not state.resume(completed + timedelta(seconds=601))
        assert state.phase is WorkoutPhase.PENDING_RESUME

    def test_window_closes_at_exactly_ten_minutes(self, noon):
        """Test the boundary: 600 seconds is already too late."""
        state = _started(noon)
        state.mark_completed(noon)

        assert not state.resume(noon + timedelta(seconds=600))

    def test_check_resume_window(self, noon):
        """Test polling: open, then expired and reset to idle."""
        state = _started(noon)
        state.mark_completed(noon)

        assert state.check_resume_window(noon + timedelta(seconds=300))
        assert state.resume_seconds_remaining(noon + timedelta(seconds=300)) == 300
        assert not state.check_resume_window(noon + timedelta(seconds=601))
        assert state.phase is WorkoutPhase.IDLE

    def test_check_resume_window_outside_phase(self, noon):
        """Test that polling does nothing while in progress."""
        state = _started(noon)
        assert not state.check_resume_window(noon)
        assert state.phase is WorkoutPhase.IN_PROGRESS

    def test_mark_completed_requires_in_progress(self):
        """Test that an idle state cannot be completed."""
        with pytest.raises(InvariantViolation):
            ActiveWorkoutState().mark_completed()

    def test_elapsed_freezes_at_completion(self, noon):
        """Test elapsed time."""
        state = _started(noon)
        assert state.get_elapsed_seconds(noon + timedelta(seconds=90)) == 90

        state.mark_completed(noon + timedelta(minutes=30))
        assert state.get_elapsed_seconds(noon + timedelta(hours=2)) == 30 * 60


class TestPersistence:
    """Tests for saving and restoring control state."""

    def test_round_trip_excludes_cache(self, noon):
        """Test that control fields persist and the set cache does not."""
        state = _started(noon)
        state.set_current_exercise(1)
        state.set_current_set(2)
        state.add_logged_set("we-1", _logged(1, noon))
        state.mark_completed(noon + timedelta(minutes=20))

        restored = ActiveWorkoutState.from_dict(state.to_dict())

        assert restored.active_workout_id == "w1"
        assert restored.workout_name == "Push Day"
        assert restored.phase is WorkoutPhase.PENDING_RESUME
        assert restored.completed_at == noon + timedelta(minutes=20)
        assert restored.current_exercise_index == 1
        assert restored.current_set_number == 2
        assert restored.logged_sets == {}

    def test_empty_dict_is_idle(self):
        """Test loading an empty snapshot."""
        assert ActiveWorkoutState.from_dict({}).phase is WorkoutPhase.IDLE

    def test_store_round_trip(self, store, noon):
        """Test saving, loading and clearing the state file."""
        state = _started(noon)
        store.save(state)

        assert store.load().active_workout_id == "w1"
        store.clear()
        assert store.load().phase is WorkoutPhase.IDLE

    def test_store_ignores_corrupt_file(self, store):
        """Test that unreadable JSON loads as idle."""
        store.path.write_text("{not json", encoding="utf-8")
        assert store.load().phase is WorkoutPhase.IDLE


class TestInputMemory:
    """Tests for remembered weights."""

    def test_remembers_across_instances(self, memory):
        """Test that weights are written through to disk."""
        assert memory.get_last_weight("bench") is None

        memory.set_last_weight("bench", 62.5)

        assert InputMemory(memory.path).get_last_weight("bench") == 62.5
        assert memory.to_dict() == {"bench": 62.5}

    def test_skips_unreadable_weights(self, memory):
        """Test that one bad entry does not hide the others."""
        memory.path.write_text('{"bench": 60, "squat": "heavy", "row": null}', encoding="utf-8")

        restored = InputMemory(memory.path)

        assert restored.to_dict() == {"bench": 60.0}
        assert restored.get_last_weight("squat") is None
