import asyncio
import json

import pytest

from engine_helpers import BrokenReadStore, ex, load_engine
from gymtrack.engine import ExerciseProgress, overall_progress
from gymtrack.errors import UnknownExerciseError, ValidationError
from gymtrack.store import InMemorySessionStore, keys


def test_overall_progress_empty_day_is_zero():
    assert overall_progress([], {}) == 0

def test_overall_progress_without_planned_sets_is_zero():
    assignments = [ex("a", 0), ex("b", 0)]
    progress = {"a": ExerciseProgress("a", completed_sets=2)}
    assert overall_progress(assignments, progress) == 0

def test_overall_progress_aggregates_sets_across_exercises():
    assignments = [ex("a", 4), ex("b", 6)]
    progress = {"a": ExerciseProgress("a", 2), "b": ExerciseProgress("b", 3)}
    assert overall_progress(assignments, progress) == 50

def test_overall_progress_caps_each_exercise_and_rounds_half_up():
    assignments = [ex("a", 3)]
    assert overall_progress(assignments, {"a": ExerciseProgress("a", 9)}) == 100
    assert overall_progress(assignments, {"a": ExerciseProgress("a", 1)}) == 33
    assert overall_progress(assignments, {"a": ExerciseProgress("a", 2)}) == 67
    assert overall_progress([ex("a", 8)], {"a": ExerciseProgress("a", 1)}) == 13  # 12.5

def test_completed_sets_stay_within_planned_bounds():
    async def scenario():
        engine, _, _ = await load_engine([ex("a", 3), ex("b", 2)])
        t = engine.tracker
        for _ in range(5):
            t.mark_set("a")
        assert t.completed_sets("a") == 3
        assert t.progress["a"].is_completed
        for _ in range(7):
            t.undo_set("a")
        assert t.completed_sets("a") == 0
        assert not t.progress["a"].is_completed
        await engine.flush()
    asyncio.run(scenario())

def test_progress_moves_monotonically_with_marks_and_undos():
    async def scenario():
        engine, _, _ = await load_engine([ex("a", 3), ex("b", 4)])
        t = engine.tracker
        seen = [t.overall_progress()]
        for exercise_id in ["a", "b", "a", "b", "b"]:
            t.mark_set(exercise_id)
            seen.append(t.overall_progress())
        assert seen == sorted(seen)
        down = [t.overall_progress()]
        for exercise_id in ["b", "a", "a", "a", "b"]:
            t.undo_set(exercise_id)
            down.append(t.overall_progress())
        assert down == sorted(down, reverse=True)
        await engine.flush()
    asyncio.run(scenario())

def test_mark_all_sets_is_idempotent():
    async def scenario():
        engine, store, _ = await load_engine([ex("a", 4)])
        t = engine.tracker
        t.mark_set("a")
        t.mark_all_sets("a")
        await engine.flush()
        once = (t.completed_sets("a"), t.progress["a"].is_completed, store.data[keys.exercise_progress("a")])
        t.mark_all_sets("a")
        await engine.flush()
        twice = (t.completed_sets("a"), t.progress["a"].is_completed, store.data[keys.exercise_progress("a")])
        assert once == twice == (4, True, once[2])
    asyncio.run(scenario())

def test_zero_count_removes_persisted_entry():
    async def scenario():
        engine, store, _ = await load_engine([ex("a", 3)])
        engine.tracker.mark_set("a")
        await engine.flush()
        saved = json.loads(store.data[keys.exercise_progress("a")])
        assert saved["exerciseId"] == "a" and saved["completedSets"] == 1
        engine.tracker.undo_set("a")
        await engine.flush()
        assert keys.exercise_progress("a") not in store.data
    asyncio.run(scenario())

def test_first_mutation_takes_the_day_lock():
    async def scenario():
        engine, store, _ = await load_engine([ex("a", 3)])
        assert engine.locks.started_at(engine.template_id, 1) is None
        engine.tracker.undo_set("a")
        started = engine.locks.started_at(engine.template_id, 1)
        assert started is not None
        engine.tracker.mark_set("a")
        assert engine.locks.started_at(engine.template_id, 1) == started
        await engine.flush()
        assert store.data[keys.daily_start(engine.template_id, 1)] == started.isoformat()
    asyncio.run(scenario())

def test_unknown_exercise_is_rejected():
    async def scenario():
        engine, _, _ = await load_engine([ex("a", 3)])
        with pytest.raises(UnknownExerciseError):
            engine.tracker.mark_set("nope")
    asyncio.run(scenario())

def test_load_clamps_and_tolerates_garbage():
    async def scenario():
        store = InMemorySessionStore({
            keys.exercise_progress("a"): json.dumps({"exerciseId": "a", "completedSets": 9}),
            keys.exercise_progress("b"): "{not json",
            keys.exercise_progress("c"): json.dumps({"completedSets": "two"}),
            keys.exercise_progress("d"): '{"completedSets": NaN}',
            keys.exercise_progress("e"): '{"completedSets": Infinity}',
            keys.exercise_reps("a"): '{"sets": [10, null, "x", -Infinity]}',
        })
        engine, _, _ = await load_engine(
            [ex("a", 3), ex("b", 2), ex("c", 2), ex("d", 2), ex("e", 2)], store=store
        )
        t = engine.tracker
        assert t.completed_sets("a") == 3 and t.progress["a"].is_completed
        assert t.completed_sets("b") == 0
        assert t.completed_sets("c") == 0
        assert t.completed_sets("d") == 0 and t.completed_sets("e") == 0
        assert t.rep_logs["a"].performed_reps == [10, None, None, None]
    asyncio.run(scenario())

def test_read_failures_load_as_zero_progress():
    async def scenario():
        engine, _, _ = await load_engine([ex("a", 3)], store=BrokenReadStore())
        assert engine.tracker.completed_sets("a") == 0
        assert engine.state.value == "not_started"
    asyncio.run(scenario())

def test_record_reps_is_sparse_and_persisted():
    async def scenario():
        engine, store, _ = await load_engine([ex("a", 3)])
        engine.tracker.record_reps("a", 2, 12)
        engine.tracker.record_reps("a", 3, -4)
        await engine.flush()
        assert engine.tracker.rep_logs["a"].performed_reps == [None, 12, 0]
        assert json.loads(store.data[keys.exercise_reps("a")]) == {"sets": [None, 12, 0]}
        with pytest.raises(ValidationError):
            engine.tracker.record_reps("a", 4, 10)
    asyncio.run(scenario())

def test_reset_all_clears_memory_before_storage():
    async def scenario():
        engine, store, _ = await load_engine([ex("a", 3), ex("b", 2)])
        t = engine.tracker
        t.mark_set("a")
        t.mark_set("b")
        t.record_reps("a", 1, 8)
        await engine.flush()
        t.reset_all()
        # nothing awaited yet: memory is already clean
        assert [t.completed_sets(i) for i in ("a", "b")] == [0, 0]
        assert t.rep_logs == {}
        assert engine.locks.started_at(engine.template_id, 1) is None
        await engine.flush()
        assert store.data == {}
    asyncio.run(scenario())
