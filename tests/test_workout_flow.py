"""Tests for the workout flow service."""

from datetime import timedelta

import pytest

from liftbook.db import HistoryRepository, ScheduleRepository, WorkoutRepository
from liftbook.errors import InvariantViolation, NotFoundError, WorkoutConflictError
from liftbook.models import SetType, WorkoutPhase, WorkoutStatus
from liftbook.services import WorkoutFlow


async def _first_exercise(flow):
    return (await flow.get_exercises())[0]


class TestStart:
    """Tests for starting workouts."""

    @pytest.mark.asyncio
    async def test_start_tracks_session(self, flow, push_day, store):
        """Test that the state follows the new session."""
        session = await flow.start(push_day)

        assert flow.state.phase is WorkoutPhase.IN_PROGRESS
        assert flow.state.active_workout_id == session.id
        assert flow.state.started_at == session.started_at
        assert store.load().active_workout_id == session.id

    @pytest.mark.asyncio
    async def test_second_start_conflicts_before_writing(self, flow, push_day, db_path):
        """Test that a conflicting start creates no session."""
        session = await flow.start(push_day)

        with pytest.raises(WorkoutConflictError) as exc_info:
            await flow.start(push_day)

        assert exc_info.value.active_workout_id == session.id
        assert exc_info.value.workout_name == "Push Day"
        active = await WorkoutRepository(db_path).list_active()
        assert [s.id for s in active] == [session.id]

    @pytest.mark.asyncio
    async def test_start_missing_routine_stays_idle(self, flow):
        """Test that a failed start changes nothing."""
        with pytest.raises(NotFoundError):
            await flow.start("missing")
        assert flow.state.phase is WorkoutPhase.IDLE

    @pytest.mark.asyncio
    async def test_start_from_schedule(self, flow, push_day, db_path, noon):
        """Test starting a scheduled workout."""
        schedule = ScheduleRepository(db_path)
        entry = await schedule.schedule(push_day, noon.date())

        await flow.start(push_day, scheduled_workout_id=entry)

        assert await schedule.list_for_date(noon.date()) == []

    @pytest.mark.asyncio
    async def test_exercise_groups(self, flow, push_day):
        """Test superset groups of the active routine."""
        assert await flow.get_exercise_groups() == []

        await flow.start(push_day)
        groups = await flow.get_exercise_groups()

        assert len(groups) == 2
        assert not any(g.is_superset for g in groups)


class TestLogSet:
    """Tests for logging sets through the flow."""

    @pytest.mark.asyncio
    async def test_cursor_advances(self, flow, push_day):
        """Test that logging moves to the next set and remembers the weight."""
        await flow.start(push_day)
        bench = await _first_exercise(flow)

        first = await flow.log_set(bench.id, 60, 5)
        second = await flow.log_set(bench.id, 62.5, 5, rpe=8)

        assert (first.set_number, second.set_number) == (1, 2)
        assert flow.state.current_set_number == 3
        assert len(flow.state.get_logged_sets(bench.id)) == 2
        assert flow.get_last_weight(bench.exercise_id) == 62.5

    @pytest.mark.asyncio
    async def test_explicit_set_number(self, flow, push_day):
        """Test re-logging set 1 keeps both attempts."""
        await flow.start(push_day)
        bench = await _first_exercise(flow)

        await flow.log_set(bench.id, 60, 5)
        redo = await flow.log_set(bench.id, 60, 6, set_number=1, set_type=SetType.FAILURE)

        assert redo.set_number == 1
        assert redo.set_type is SetType.FAILURE
        stored = (await _first_exercise(flow)).sets
        assert [s.reps for s in stored] == [5, 6]

    @pytest.mark.asyncio
    async def test_select_exercise_resets_set(self, flow, push_day):
        """Test switching exercises mid-workout."""
        await flow.start(push_day)
        bench, fly = await flow.get_exercises()
        await flow.log_set(bench.id, 60, 5)

        flow.select_exercise(1)
        logged = await flow.log_set(fly.id, 15, 12)

        assert logged.set_number == 1

    @pytest.mark.parametrize(
        "weight, reps, rpe",
        [(-1, 5, None), (60, 0, None), (60, 5, 11), (60, 5, 0.5)],
    )
    @pytest.mark.asyncio
    async def test_rejects_invalid_values(self, flow, push_day, weight, reps, rpe):
        """Test that bad values are rejected before writing."""
        await flow.start(push_day)
        bench = await _first_exercise(flow)

        with pytest.raises(InvariantViolation):
            await flow.log_set(bench.id, weight, reps, rpe)
        assert (await _first_exercise(flow)).sets == []

    @pytest.mark.parametrize("set_number", [0, -1])
    @pytest.mark.asyncio
    async def test_rejects_set_number_before_writing(self, flow, push_day, db_path, set_number):
        """Test that a set number below 1 stores nothing and leaves the cursor."""
        await flow.start(push_day)
        bench = await _first_exercise(flow)

        with pytest.raises(InvariantViolation, match="start at 1"):
            await flow.log_set(bench.id, 60, 5, set_number=set_number)

        assert await WorkoutRepository(db_path).get_sets(bench.id) == []
        assert flow.state.get_logged_sets(bench.id) == []
        assert flow.state.current_set_number == 1
        assert flow.get_last_weight(bench.exercise_id) is None

    @pytest.mark.asyncio
    async def test_requires_in_progress(self, flow):
        """Test logging while idle."""
        with pytest.raises(InvariantViolation):
            await flow.log_set("anything", 60, 5)

    @pytest.mark.asyncio
    async def test_rejects_exercise_from_other_session(self, flow, push_day, db_path):
        """Test logging against another session's exercise."""
        other = await WorkoutRepository(db_path).start(push_day)
        foreign = (await WorkoutRepository(db_path).get_exercises(other.id))[0]
        await flow.start(push_day)

        with pytest.raises(InvariantViolation, match="different workout"):
            await flow.log_set(foreign.id, 60, 5)

    @pytest.mark.asyncio
    async def test_previous_sets_exclude_current(self, flow, push_day):
        """Test that the comparison uses the last finished workout."""
        await flow.start(push_day)
        bench = await _first_exercise(flow)
        await flow.log_set(bench.id, 60, 5)
        await flow.complete()
        flow.finish()

        await flow.start(push_day)
        bench = await _first_exercise(flow)
        await flow.log_set(bench.id, 65, 5)

        previous = await flow.get_previous_sets(bench.exercise_id)
        assert [(p.weight, p.reps) for p in previous] == [(60, 5)]


class TestCompleteAndResume:
    """Tests for completion and the resume window."""

    @pytest.mark.asyncio
    async def test_complete_shares_timestamp(self, flow, push_day, db_path):
        """Test that storage and state agree on completion."""
        session = await flow.start(push_day)
        bench = await _first_exercise(flow)
        await flow.log_set(bench.id, 60, 5)

        summary = await flow.complete("Solid", ["front.jpg"])

        stored = await WorkoutRepository(db_path).get(session.id)
        assert stored.status is WorkoutStatus.COMPLETED
        assert stored.completed_at == flow.state.completed_at
        assert flow.state.phase is WorkoutPhase.PENDING_RESUME
        assert summary.total_volume == 300
        assert summary.total_sets == 1

    @pytest.mark.asyncio
    async def test_resume_within_window(self, flow, push_day):
        """Test resuming inside the window."""
        await flow.start(push_day)
        await flow.complete()
        completed_at = flow.state.completed_at

        assert flow.check_resume_window(completed_at + timedelta(seconds=599))
        assert flow.resume(completed_at + timedelta(seconds=599))
        assert flow.state.phase is WorkoutPhase.IN_PROGRESS

    @pytest.mark.asyncio
    async def test_window_expiry_goes_idle(self, flow, push_day, store):
        """Test that an expired window is saved as idle."""
        await flow.start(push_day)
        await flow.complete()
        completed_at = flow.state.completed_at

        assert not flow.resume(completed_at + timedelta(seconds=601))
        assert not flow.check_resume_window(completed_at + timedelta(seconds=601))
        assert flow.state.phase is WorkoutPhase.IDLE
        assert store.load().phase is WorkoutPhase.IDLE

    @pytest.mark.asyncio
    async def test_complete_requires_in_progress(self, flow):
        """Test completing while idle."""
        with pytest.raises(InvariantViolation):
            await flow.complete()

    @pytest.mark.asyncio
    async def test_finish_allows_new_start(self, flow, push_day):
        """Test that finish frees the slot for a new workout."""
        await flow.start(push_day)
        await flow.complete()
        flow.finish()

        await flow.start(push_day)
        assert flow.state.phase is WorkoutPhase.IN_PROGRESS


class TestAbandon:
    """Tests for abandoning workouts."""

    @pytest.mark.asyncio
    async def test_abandon_discards_session(self, flow, push_day, db_path):
        """Test that abandon deletes the session by default."""
        session = await flow.start(push_day)

        await flow.abandon()

        assert flow.state.phase is WorkoutPhase.IDLE
        assert await WorkoutRepository(db_path).get(session.id) is None

    @pytest.mark.asyncio
    async def test_abandon_keep(self, flow, push_day, db_path):
        """Test abandoning but keeping the row."""
        session = await flow.start(push_day)

        await flow.abandon(discard=False)

        stored = await WorkoutRepository(db_path).get(session.id)
        assert stored.status is WorkoutStatus.ABANDONED

    @pytest.mark.asyncio
    async def test_abandon_during_resume_window_keeps_completed(self, flow, push_day, db_path):
        """Test that a completed session survives abandon."""
        session = await flow.start(push_day)
        await flow.complete()

        await flow.abandon()

        stored = await WorkoutRepository(db_path).get(session.id)
        assert stored.status is WorkoutStatus.COMPLETED
        assert flow.state.phase is WorkoutPhase.IDLE

    @pytest.mark.asyncio
    async def test_abandon_when_idle(self, flow):
        """Test abandoning with nothing active."""
        with pytest.raises(InvariantViolation):
            await flow.abandon()


class TestRestore:
    """Tests for reconciling persisted state after a restart."""

    @pytest.mark.asyncio
    async def test_restore_rebuilds_cache(self, flow, push_day, db_path, store, memory):
        """Test that a restart rebuilds logged sets from storage."""
        await flow.start(push_day)
        bench = await _first_exercise(flow)
        await flow.log_set(bench.id, 60, 5)
        await flow.log_set(bench.id, 60, 5)

        restarted = WorkoutFlow(db_path=db_path, store=store, memory=memory)
        assert restarted.state.logged_sets == {}
        state = await restarted.restore()

        assert state.phase is WorkoutPhase.IN_PROGRESS
        assert state.current_set_number == 3
        assert len(state.get_logged_sets(bench.id)) == 2

    @pytest.mark.asyncio
    async def test_restore_resets_when_session_deleted(self, flow, push_day, db_path, store, memory):
        """Test that a vanished session resets the state."""
        session = await flow.start(push_day)
        await WorkoutRepository(db_path).delete(session.id)

        restarted = WorkoutFlow(db_path=db_path, store=store, memory=memory)
        state = await restarted.restore()

        assert state.phase is WorkoutPhase.IDLE
        assert store.load().phase is WorkoutPhase.IDLE

    @pytest.mark.asyncio
    async def test_restore_after_expired_window(self, flow, push_day, db_path, store, memory):
        """Test that a restart after the window goes idle."""
        await flow.start(push_day)
        await flow.complete()
        later = flow.state.completed_at + timedelta(minutes=11)

        restarted = WorkoutFlow(db_path=db_path, store=store, memory=memory)
        state = await restarted.restore(now=later)

        assert state.phase is WorkoutPhase.IDLE

    @pytest.mark.asyncio
    async def test_resumed_workout_survives_restart(self, flow, push_day, db_path, store, memory):
        """Test that a resumed workout stays in progress though its row is completed."""
        session = await flow.start(push_day)
        await flow.complete("First pass")
        assert flow.resume()

        restarted = WorkoutFlow(db_path=db_path, store=store, memory=memory)
        state = await restarted.restore()

        assert state.phase is WorkoutPhase.IN_PROGRESS
        await restarted.complete()
        stored = await WorkoutRepository(db_path).get(session.id)
        assert stored.notes == "First pass"
        assert stored.completed_at == restarted.state.completed_at

    @pytest.mark.asyncio
    async def test_history_sees_completed_flow(self, flow, push_day, db_path):
        """Test that a completed workout shows up in history."""
        await flow.start(push_day)
        await flow.complete()
        flow.finish()

        assert len(await HistoryRepository(db_path).get_workout_history()) == 1
