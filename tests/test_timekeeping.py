from bottle_sim.core.timekeeping import DeferredScheduler


def test_task_runs_once_when_due(clock):
    calls = []
    scheduler = DeferredScheduler(clock)
    scheduler.schedule(2.0, lambda: calls.append("fired"))
    clock.now = 1.9
    assert not scheduler.poll()
    clock.now = 2.0
    assert scheduler.poll()
    assert not scheduler.poll()
    assert calls == ["fired"]


def test_invalidate_drops_pending_task(clock):
    calls = []
    scheduler = DeferredScheduler(clock)
    scheduler.schedule(1.0, lambda: calls.append("fired"), now=0.0)
    scheduler.invalidate()
    assert scheduler.pending is None
    assert not scheduler.poll(10.0)
    assert calls == []
    assert scheduler.epoch == 1


def test_task_from_old_epoch_never_fires(clock):
    calls = []
    scheduler = DeferredScheduler(clock)
    task = scheduler.schedule(1.0, lambda: calls.append("fired"), now=0.0)
    scheduler.invalidate()
    scheduler._pending = task
    assert not scheduler.poll(5.0)
    assert calls == []


def test_cancel_and_replace(clock):
    calls = []
    scheduler = DeferredScheduler(clock)
    assert not scheduler.cancel()
    scheduler.schedule(1.0, lambda: calls.append("first"), now=0.0)
    scheduler.schedule(3.0, lambda: calls.append("second"), now=0.0, label="advance")
    assert scheduler.pending.label == "advance"
    assert not scheduler.poll(2.0)
    assert scheduler.poll(3.0)
    assert calls == ["second"]
    scheduler.schedule(1.0, lambda: calls.append("third"), now=0.0)
    assert scheduler.cancel()
    assert not scheduler.poll(9.0)
