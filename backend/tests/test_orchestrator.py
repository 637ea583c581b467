import pytest

from fitrecord.db import SessionLocal
from fitrecord.errors import (
    InvalidRestDurationError, NotFoundError, SessionClosedError, SetMismatchError,
)
from fitrecord.models import MuscleGroup
from fitrecord.repositories.set_repo import SetRepository
from fitrecord.services.orchestrator import LiveSessionRegistry, LiveWorkout
from fitrecord.services.rest_timer import IDLE, Overtime, Resting, TimerPhase
from factories import (
    FakeClock, add_exercise, add_set, day, end_session, logged_workout,
    make_client, make_exercise, make_session,
)

PRESETS = (30, 45, 60, 90, 120)


def live_for(session_id, clock, rest_seconds=60):
    return LiveWorkout(session_id, SessionLocal, rest_presets=PRESETS, rest_seconds=rest_seconds, clock=clock)


async def workout_with_sets(client_id, exercise_id, n_sets=3):
    sess = await make_session(client_id, started_at=day(0))
    we = await add_exercise(sess.id, client_id, exercise_id)
    sets = [await add_set(we.id, weight_kg=50 + i, reps=8) for i in range(n_sets)]
    return sess, we, sets


@pytest.mark.asyncio
async def test_global_default_applies_to_exercise_without_rest():
    alex = await make_client("Alex")
    pushups = await make_exercise("Push-ups", MuscleGroup.chest, is_bodyweight=True)
    sess, _, sets = await workout_with_sets(alex.id, pushups.id)
    live = live_for(sess.id, FakeClock(), rest_seconds=60)

    done = await live.on_set_completed(sets[0].id, pushups.id, alex.id)
    assert done.set.is_completed
    assert done.remaining_sets == 2
    st = live.timers.state(alex.id)
    assert isinstance(st, Resting)
    assert st.duration == 60
    assert done.timer.state is TimerPhase.resting


@pytest.mark.asyncio
async def test_exercise_rest_wins_over_global_default():
    alex = await make_client("Alex")
    deadlift = await make_exercise("Deadlift", MuscleGroup.back, default_rest_seconds=120)
    sess, _, sets = await workout_with_sets(alex.id, deadlift.id)
    live = live_for(sess.id, FakeClock(), rest_seconds=45)

    await live.on_set_completed(sets[0].id, deadlift.id, alex.id)
    assert live.timers.state(alex.id).duration == 120


@pytest.mark.asyncio
async def test_last_set_clears_timer():
    alex = await make_client("Alex")
    bench = await make_exercise("Bench Press")
    sess, _, sets = await workout_with_sets(alex.id, bench.id, n_sets=2)
    live = live_for(sess.id, FakeClock())

    await live.on_set_completed(sets[0].id, bench.id, alex.id)
    assert isinstance(live.timers.state(alex.id), Resting)
    done = await live.on_set_completed(sets[1].id, bench.id, alex.id)
    assert done.remaining_sets == 0
    assert live.timers.state(alex.id) is IDLE
    assert done.timer.state is TimerPhase.idle


@pytest.mark.asyncio
async def test_completing_next_set_restarts_rest():
    alex = await make_client("Alex")
    bench = await make_exercise("Bench Press", default_rest_seconds=90)
    sess, _, sets = await workout_with_sets(alex.id, bench.id)
    clock = FakeClock()
    live = live_for(sess.id, clock)

    await live.on_set_completed(sets[0].id, bench.id, alex.id)
    clock.advance(40)
    await live.on_set_completed(sets[1].id, bench.id, alex.id)
    st = live.timers.state(alex.id)
    assert isinstance(st, Resting)
    assert st.remaining == 90


@pytest.mark.asyncio
async def test_failed_completion_leaves_timer_untouched():
    alex = await make_client("Alex")
    bench = await make_exercise("Bench Press")
    sess, _, sets = await workout_with_sets(alex.id, bench.id)
    clock = FakeClock()
    live = live_for(sess.id, clock)
    await live.on_set_completed(sets[0].id, bench.id, alex.id)
    before = live.timers.state(alex.id)

    with pytest.raises(NotFoundError):
        await live.on_set_completed("no-such-set", bench.id, alex.id)
    assert live.timers.state(alex.id) == before


@pytest.mark.asyncio
async def test_sets_of_ended_session_are_rejected():
    alex = await make_client("Alex")
    bench = await make_exercise("Bench Press")
    sess = await make_session(alex.id, started_at=day(0))
    we = await add_exercise(sess.id, alex.id, bench.id)
    open_set = await add_set(we.id)
    await end_session(sess.id, ended_at=day(0, 10))
    live = live_for(sess.id, FakeClock())

    with pytest.raises(SessionClosedError):
        await live.on_set_completed(open_set.id, bench.id, alex.id)
    assert live.timers.state(alex.id) is IDLE


@pytest.mark.asyncio
async def test_selecting_client_in_overtime_acknowledges():
    alex = await make_client("Alex")
    sam = await make_client("Sam")
    bench = await make_exercise("Bench Press", default_rest_seconds=30)
    sess = await make_session(alex.id, sam.id, started_at=day(0))
    we_alex = await add_exercise(sess.id, alex.id, bench.id)
    we_sam = await add_exercise(sess.id, sam.id, bench.id)
    a_sets = [await add_set(we_alex.id) for _ in range(2)]
    s_sets = [await add_set(we_sam.id) for _ in range(2)]
    clock = FakeClock()
    live = live_for(sess.id, clock)

    await live.on_set_completed(a_sets[0].id, bench.id, alex.id)
    clock.advance(20)
    await live.on_set_completed(s_sets[0].id, bench.id, sam.id)
    clock.advance(15)

    assert isinstance(live.timers.state(alex.id), Overtime)
    # sam is still resting: selecting does not clear
    d = live.on_client_selected(sam.id)
    assert d.state is TimerPhase.resting
    assert live.selected_client_id == sam.id
    # alex is ready: selecting acknowledges
    d = live.on_client_selected(alex.id)
    assert d.state is TimerPhase.idle
    assert live.timers.state(alex.id) is IDLE
    assert isinstance(live.timers.state(sam.id), Resting)


@pytest.mark.asyncio
async def test_alerts_are_queued_once():
    alex = await make_client("Alex")
    bench = await make_exercise("Bench Press", default_rest_seconds=30)
    sess, _, sets = await workout_with_sets(alex.id, bench.id)
    clock = FakeClock()
    live = live_for(sess.id, clock)

    await live.on_set_completed(sets[0].id, bench.id, alex.id)
    clock.advance(31)
    live.timers.tick()
    live.timers.tick()
    alerts = live.drain_alerts()
    assert [(a.client_id, a.exercise_id) for a in alerts] == [(alex.id, bench.id)]
    assert live.drain_alerts() == []
    assert [d.state for d in live.timer_displays()] == [TimerPhase.overtime]


@pytest.mark.asyncio
async def test_rest_duration_must_be_a_preset():
    live = live_for("sess", FakeClock())
    assert live.set_global_rest_duration(90) == 90
    assert live.rest_seconds == 90
    with pytest.raises(InvalidRestDurationError):
        live.set_global_rest_duration(75)
    assert live.rest_seconds == 90
    with pytest.raises(InvalidRestDurationError):
        live_for("sess", FakeClock(), rest_seconds=61)


@pytest.mark.asyncio
async def test_history_passthrough():
    alex = await make_client("Alex")
    bench = await make_exercise("Bench Press")
    await logged_workout(alex.id, bench.id, [80], started_at=day(0), ended_at=day(0, 10))
    live = live_for("other", FakeClock())
    assert await live.get_max_weight(alex.id, bench.id) == 80
    rows = await live.get_exercise_history(alex.id)
    assert [(r.exercise_id, r.max_weight_kg) for r in rows] == [(bench.id, 80)]


@pytest.mark.asyncio
async def test_view_for_selected_client():
    alex = await make_client("Alex")
    bench = await make_exercise("Bench Press")
    dips = await make_exercise("Dips", MuscleGroup.triceps, is_bodyweight=True)
    await logged_workout(alex.id, bench.id, [80], started_at=day(0), ended_at=day(0, 10))
    sess = await make_session(alex.id, started_at=day(1))
    await add_exercise(sess.id, alex.id, bench.id, order_index=0)
    await add_exercise(sess.id, alex.id, dips.id, order_index=1)
    live = live_for(sess.id, FakeClock())

    assert await live.refresh_view() is None  # nobody selected yet
    live.on_client_selected(alex.id)
    view = await live.refresh_view()
    assert view is live.view
    assert [we.exercise_id for we in view.exercises] == [bench.id, dips.id]
    assert view.max_weights == {bench.id: 80}
    assert [we.exercise_id for we in view.last_workout] == [bench.id]


@pytest.mark.asyncio
async def test_stale_view_is_discarded(monkeypatch):
    alex = await make_client("Alex")
    sam = await make_client("Sam")
    sess = await make_session(alex.id, sam.id, started_at=day(0))
    live = live_for(sess.id, FakeClock())
    live.on_client_selected(alex.id)

    from fitrecord.repositories import history_repo
    real = history_repo.HistoryRepository.last_completed_workout_exercises

    async def switch_mid_query(self, client_id):
        live.on_client_selected(sam.id)  # trainer taps another tab while loading
        return await real(self, client_id)

    monkeypatch.setattr(history_repo.HistoryRepository, "last_completed_workout_exercises", switch_mid_query)
    assert await live.refresh_view() is None
    assert live.view is None
    assert live.selected_client_id == sam.id


@pytest.mark.asyncio
async def test_registry_open_get_close():
    registry = LiveSessionRegistry(SessionLocal, rest_presets=PRESETS, default_rest_seconds=60, tick_interval=0.01)
    live = registry.open("s1")
    assert registry.open("s1") is live
    assert registry.get("s1") is live
    assert "s1" in registry and len(registry) == 1
    assert live.ticker.running
    live.timers.start("alex", "bench")
    await registry.close("s1")
    assert not live.ticker.running
    assert live.timers.active_clients() == []
    with pytest.raises(NotFoundError):
        registry.get("s1")
    with pytest.raises(NotFoundError):
        await registry.close("s1")


@pytest.mark.asyncio
async def test_set_from_another_session_is_rejected():
    alex = await make_client("Alex")
    sam = await make_client("Sam")
    squat = await make_exercise("Squat", MuscleGroup.legs)
    bench = await make_exercise("Bench Press", default_rest_seconds=120)
    mine, _, _ = await workout_with_sets(alex.id, squat.id)
    _, _, other_sets = await workout_with_sets(sam.id, bench.id)
    live = live_for(mine.id, FakeClock())

    with pytest.raises(NotFoundError):
        await live.on_set_completed(other_sets[0].id, squat.id, alex.id)
    assert live.timers.active_clients() == []
    async with SessionLocal() as db:
        assert (await SetRepository(db).get(other_sets[0].id)).is_completed is False


@pytest.mark.asyncio
async def test_set_must_match_client_and_exercise():
    alex = await make_client("Alex")
    sam = await make_client("Sam")
    squat = await make_exercise("Squat", MuscleGroup.legs)
    bench = await make_exercise("Bench Press", default_rest_seconds=120)
    sess = await make_session(alex.id, sam.id, started_at=day(0))
    we = await add_exercise(sess.id, sam.id, bench.id)
    sets = [await add_set(we.id) for _ in range(2)]
    live = live_for(sess.id, FakeClock())

    with pytest.raises(SetMismatchError):
        await live.on_set_completed(sets[0].id, bench.id, alex.id)
    with pytest.raises(SetMismatchError):
        await live.on_set_completed(sets[0].id, squat.id, sam.id)
    assert live.timers.active_clients() == []

    await live.on_set_completed(sets[0].id, bench.id, sam.id)
    assert live.timers.state(sam.id).duration == 120


@pytest.mark.asyncio
async def test_reopening_applies_new_rest_duration():
    registry = LiveSessionRegistry(SessionLocal, rest_presets=PRESETS, default_rest_seconds=60, tick_interval=0.01)
    live = registry.open("s1")
    assert registry.open("s1", rest_seconds=90) is live
    assert live.rest_seconds == 90
    assert registry.open("s1").rest_seconds == 90
    with pytest.raises(InvalidRestDurationError):
        registry.open("s1", rest_seconds=75)
    await registry.close_all()
