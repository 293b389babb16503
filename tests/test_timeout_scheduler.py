"""TimeoutScheduler: reminder/expiry ladder re-armed on every inbound event."""

import asyncio

import pytest

from app.models.session import ConversationState
from app.services.conversation import catalog
from app.services.conversation.timeout_scheduler import LadderStep, TimeoutScheduler, EXPIRY, REMINDER
from app.shared.whatsapp import WhatsAppHelper

from conftest import USER_NUMBER


def make_scheduler(store, client, first=0.2, second=0.8, expiry=1.0):
    return TimeoutScheduler(store, client, ladder=TimeoutScheduler.build_ladder(first, second, expiry))


class TestLadder:

    def test_default_ladder_uses_configured_minutes(self, store, fake_client):
        scheduler = TimeoutScheduler(store, fake_client)
        names = [step.name for step in scheduler.ladder]
        delays = [step.delay for step in scheduler.ladder]

        assert names == ["reminder_1", "reminder_2", "session_expiry"]
        assert delays == sorted(delays)
        assert scheduler.ladder[-1].kind == EXPIRY

    @pytest.mark.parametrize("ladder", [
        [],
        [LadderStep("reminder_1", 1, REMINDER)],
        [LadderStep("reminder_1", 2, REMINDER), LadderStep("session_expiry", 1, EXPIRY)],
        [LadderStep("reminder_1", 0, REMINDER), LadderStep("session_expiry", 1, EXPIRY)],
    ])
    def test_invalid_ladders_are_rejected(self, store, fake_client, ladder):
        with pytest.raises(ValueError):
            TimeoutScheduler(store, fake_client, ladder=ladder)


class TestRearm:

    @pytest.mark.asyncio
    async def test_rearm_arms_full_ladder(self, store, fake_client):
        scheduler = make_scheduler(store, fake_client)
        session = store.get_or_create(USER_NUMBER)

        scheduler.rearm(session)

        assert session.pending_timers == {"reminder_1", "reminder_2", "session_expiry"}
        scheduler.cancel_all(session)

    @pytest.mark.asyncio
    async def test_second_rearm_cancels_first_ladder(self, store, fake_client):
        scheduler = make_scheduler(store, fake_client)
        session = store.get_or_create(USER_NUMBER)

        scheduler.rearm(session)
        first_ladder = list(session.timers._handles.values())
        scheduler.rearm(session)
        await asyncio.sleep(0)

        assert all(task.cancelled() for task in first_ladder)
        assert len(session.pending_timers) == 3
        store.clear()

    @pytest.mark.asyncio
    async def test_only_second_ladder_fires(self, store, fake_client):
        scheduler = make_scheduler(store, fake_client)
        session = store.get_or_create(USER_NUMBER)

        scheduler.rearm(session)
        await asyncio.sleep(0.1)
        scheduler.rearm(session)

        # The first ladder's reminder would have fired at 0.2s
        await asyncio.sleep(0.15)
        assert fake_client.sent == []

        await asyncio.sleep(0.15)
        assert fake_client.messages_to(USER_NUMBER) == [
            catalog.REMINDER_TEXTS["reminder_1"],
            catalog.reminder_prompt(),
        ]
        store.clear()


class TestFiring:

    @pytest.mark.asyncio
    async def test_reminder_does_not_change_state(self, store, fake_client):
        scheduler = make_scheduler(store, fake_client, first=0.01, second=5, expiry=10)
        session = store.get_or_create(USER_NUMBER)
        session.state = ConversationState.MAIN_MENU

        scheduler.rearm(session)
        await asyncio.sleep(0.05)

        sent = fake_client.messages_to(USER_NUMBER)
        assert sent[0] == catalog.REMINDER_TEXTS["reminder_1"]
        assert WhatsAppHelper.interactive_type(sent[1]) == "button"
        assert session.state == ConversationState.MAIN_MENU
        assert store.get(USER_NUMBER) is session
        assert session.pending_timers == {"reminder_2", "session_expiry"}
        store.clear()

    @pytest.mark.asyncio
    async def test_expiry_sends_timeout_and_deletes_session(self, store, fake_client):
        scheduler = make_scheduler(store, fake_client, first=0.01, second=0.02, expiry=0.03)
        session = store.get_or_create(USER_NUMBER)
        session.state = ConversationState.SELECTING_LOCATION

        scheduler.rearm(session)
        await asyncio.sleep(0.15)

        sent = fake_client.messages_to(USER_NUMBER)
        assert sent[-1] == catalog.SESSION_TIMEOUT
        assert sent.count(catalog.SESSION_TIMEOUT) == 1
        assert USER_NUMBER not in store
        assert session.pending_timers == set()

    @pytest.mark.asyncio
    async def test_expiry_deletes_even_when_send_fails(self, store, failing_client):
        scheduler = make_scheduler(store, failing_client, first=0.01, second=0.02, expiry=0.03)
        session = store.get_or_create(USER_NUMBER)

        scheduler.rearm(session)
        await asyncio.sleep(0.15)

        assert USER_NUMBER not in store
        assert failing_client.sent[-1] == (USER_NUMBER, catalog.SESSION_TIMEOUT)

    @pytest.mark.asyncio
    async def test_stale_expiry_leaves_replacement_session(self, store, fake_client):
        scheduler = make_scheduler(store, fake_client)
        stale = store.get_or_create(USER_NUMBER)
        store.delete(USER_NUMBER)
        current = store.get_or_create(USER_NUMBER)

        await scheduler._expiry_action(stale)()

        assert store.get(USER_NUMBER) is current
