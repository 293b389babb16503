"""TimerRegistry: named, cancellable delayed actions."""

import asyncio

import pytest

from app.core.timers import TimerRegistry


@pytest.mark.asyncio
async def test_armed_timer_fires_once_and_is_forgotten():
    registry = TimerRegistry(owner="111")
    fired = []

    async def action():
        fired.append("reminder_1")

    registry.arm("reminder_1", 0.01, action)
    assert "reminder_1" in registry

    await asyncio.sleep(0.05)

    assert fired == ["reminder_1"]
    assert "reminder_1" not in registry
    assert len(registry) == 0


@pytest.mark.asyncio
async def test_rearming_same_name_replaces_previous_handle():
    registry = TimerRegistry(owner="111")
    fired = []

    async def first():
        fired.append("first")

    async def second():
        fired.append("second")

    old = registry.arm("reminder_1", 0.01, first)
    registry.arm("reminder_1", 0.02, second)
    await asyncio.sleep(0.06)

    assert old.cancelled()
    assert fired == ["second"]


@pytest.mark.asyncio
async def test_cancel_after_delay_elapsed_but_before_action_runs():
    registry = TimerRegistry(owner="111")
    fired = []

    async def action():
        fired.append("late")

    registry.arm("reminder_1", 0, action)
    # The task has not started until the loop gets control
    assert registry.cancel("reminder_1") is True
    await asyncio.sleep(0.02)

    assert fired == []
    assert registry.cancel("reminder_1") is False


@pytest.mark.asyncio
async def test_cancel_all_clears_every_name():
    registry = TimerRegistry(owner="111")

    async def action():
        pass

    for name in ("reminder_1", "reminder_2", "session_expiry"):
        registry.arm(name, 10, action)
    assert registry.pending == {"reminder_1", "reminder_2", "session_expiry"}

    registry.cancel_all()
    await asyncio.sleep(0)

    assert registry.pending == set()


@pytest.mark.asyncio
async def test_action_error_is_logged_not_raised(caplog):
    registry = TimerRegistry(owner="111")

    async def action():
        raise RuntimeError("boom")

    task = registry.arm("reminder_1", 0, action)
    await asyncio.sleep(0.02)

    assert task.done() and not task.cancelled()
    assert task.exception() is None
    assert "boom" in caplog.text


@pytest.mark.asyncio
async def test_action_cancelling_its_own_registry_still_completes():
    registry = TimerRegistry(owner="111")
    steps = []

    async def action():
        registry.cancel_all()
        steps.append("after_cancel")
        await asyncio.sleep(0)
        steps.append("done")

    async def other():
        steps.append("other")

    registry.arm("session_expiry", 0.01, action)
    registry.arm("reminder_2", 10, other)
    await asyncio.sleep(0.05)

    assert steps == ["after_cancel", "done"]
    assert registry.pending == set()
