import asyncio
import json

from engine_helpers import TEMPLATE, FailingBulkBackend, NoIdBackend, StepClock, ex, load_engine
from gymtrack.engine import PerSetRepLog, SessionState, build_set_records
from gymtrack.store import keys


def test_logged_reps_win_and_planned_reps_fill_the_gaps():
    records = build_set_records(
        [ex("a", 3, "12-10-8")],
        {"a": PerSetRepLog("a", [10, 9])},
        "rec-1",
    )
    assert [r.set_index for r in records] == [1, 2, 3]
    assert [r.performed_reps for r in records] == ["10", "9", "12"]
    assert {r.session_record_id for r in records} == {"rec-1"}

def test_unparseable_planned_value_is_recorded_verbatim():
    records = build_set_records([ex("plank", 2, "30s/lado")], {"plank": PerSetRepLog("plank", [None])}, "r")
    assert [r.performed_reps for r in records] == ["30s/lado", "30s/lado"]

def test_exercises_without_planned_sets_get_no_records():
    records = build_set_records([ex("a", 0), ex("b", 1, "8", exercise_ref="cat-b")], {}, "r")
    assert [(r.exercise_id, r.performed_reps) for r in records] == [("cat-b", "8")]

def test_finished_day_produces_record_and_set_records():
    async def scenario():
        clock = StepClock()
        engine, store, backend = await load_engine([ex("a", 3, "12-10-8"), ex("b", 1, "max")], clock=clock)
        engine.complete_set("a", 10)
        engine.complete_set("a", 9)
        await engine.flush()
        assert json.loads(store.data[keys.exercise_reps("a")]) == {"sets": [10, 9]}
        started = engine.snapshot().started_at

        await engine.finish_full()
        await engine.flush()

        (record_id, record), = backend.records
        assert record.user_id == "user-1"
        assert record.day_reference == "a"
        assert record.completion_percentage == 100
        assert record.start_time == started
        assert record.end_time > record.start_time
        assert [(r.exercise_id, r.set_index, r.performed_reps) for r in backend.set_records] == [
            ("a", 1, "10"), ("a", 2, "9"), ("a", 3, "12"), ("b", 1, "max"),
        ]
        assert all(r.session_record_id == record_id for r in backend.set_records)
        # rep logs and lock are gone, progress stays
        assert keys.exercise_reps("a") not in store.data
        assert keys.daily_start(TEMPLATE, 1) not in store.data
        assert engine.tracker.rep_logs == {}
        assert engine.overall_progress == 100
    asyncio.run(scenario())

def test_partial_record_uses_live_progress():
    async def scenario():
        engine, _, backend = await load_engine([ex("a", 4), ex("b", 6)])
        engine.mark_set("a")
        engine.mark_set("a")
        for _ in range(3):
            engine.mark_set("b")
        assert engine.overall_progress == 50
        await engine.finish_partial()
        await engine.flush()
        assert backend.records[0][1].completion_percentage == 50
        # every planned set is recorded, done or not
        assert len(backend.set_records) == 10
    asyncio.run(scenario())

def test_start_falls_back_to_now_without_a_lock():
    async def scenario():
        engine, _, backend = await load_engine([ex("a", 2)])
        await engine.request_finish()
        await engine.choose_finish_mode("full")
        await engine.flush()
        record = backend.records[0][1]
        assert record.start_time == record.end_time
    asyncio.run(scenario())

def test_bulk_failure_still_closes_the_session(caplog):
    async def scenario():
        backend = FailingBulkBackend()
        engine, store, _ = await load_engine([ex("a", 2)], backend=backend)
        engine.complete_set("a", 7)
        engine.mark_set("a")
        await engine.flush()

        assert engine.state is SessionState.finished_full
        assert len(backend.records) == 1
        assert backend.bulk_calls == 1
        assert backend.set_records == []
        assert engine.coordinator.record_guard is True
        assert keys.daily_start(TEMPLATE, 1) not in store.data
        # rep logs are only dropped once set records went through
        assert keys.exercise_reps("a") in store.data

        await engine.request_finish()
        await engine.flush()
        assert len(backend.records) == 1
    asyncio.run(scenario())
    assert any("set records dropped" in r.getMessage() for r in caplog.records)

def test_record_without_id_skips_set_records():
    async def scenario():
        backend = NoIdBackend()
        engine, store, _ = await load_engine([ex("a", 1)], backend=backend)
        engine.mark_set("a")
        await engine.flush()
        assert len(backend.records) == 1
        assert backend.bulk_calls == 0
        assert engine.snapshot().record_id is None
        assert keys.daily_start(TEMPLATE, 1) not in store.data
    asyncio.run(scenario())
