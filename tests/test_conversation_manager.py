"""ConversationManager: get-or-create, re-arm timers, engine step, dedupe."""

import asyncio
from unittest.mock import MagicMock

import pytest

from app.models.session import ConversationState, InboundEvent
from app.services.conversation import ConversationEngine, ConversationManager, SessionStore, TimeoutScheduler, catalog

from conftest import USER_NUMBER


@pytest.fixture
def scheduler():
    return MagicMock(spec=TimeoutScheduler)


@pytest.fixture
def manager(store, fake_client, notifier, scheduler):
    return ConversationManager(store=store, whatsapp_client=fake_client, notifier=notifier, scheduler=scheduler)


def event(text, message_id=None, selection_id=None):
    return InboundEvent(conversation_id=USER_NUMBER, text=text, selection_id=selection_id, message_id=message_id)


@pytest.mark.asyncio
async def test_every_event_rearms_before_stepping(manager, scheduler, store):
    session = await manager.process_event(event("hi", "wamid.1"))

    scheduler.rearm.assert_called_once_with(session)
    assert store.get(USER_NUMBER) is session
    assert session.state == ConversationState.COLLECTING_CONTACT_INFO


@pytest.mark.asyncio
async def test_duplicate_message_id_is_ignored(manager, scheduler, fake_client):
    await manager.process_event(event("hi", "wamid.1"))
    result = await manager.process_event(event("hi", "wamid.1"))

    assert result is None
    assert scheduler.rearm.call_count == 1
    assert fake_client.messages_to(USER_NUMBER) == [catalog.CONTACT_REQUEST]


@pytest.mark.asyncio
async def test_events_without_id_are_never_deduplicated(manager, scheduler):
    await manager.process_event(event("hi"))
    await manager.process_event(event("hi"))

    assert scheduler.rearm.call_count == 2


@pytest.mark.asyncio
async def test_dedupe_memory_is_bounded(manager):
    manager.MAX_TRACKED_MESSAGES = 2

    for i in range(3):
        await manager.process_event(event("hi", f"wamid.{i}"))

    assert list(manager._processed_ids) == ["wamid.1", "wamid.2"]


@pytest.mark.asyncio
async def test_full_conversation_then_restart(manager, store, fake_client):
    steps = [
        ("hi", None, ConversationState.COLLECTING_CONTACT_INFO),
        ("Name: Jane Doe\nEmail: jane@x.com", None, ConversationState.CONFIRMING_CLIENT_STATUS),
        ("🆕 New Client", "new_client", ConversationState.SELECTING_LOCATION),
        ("Mumbai", "mumbai", ConversationState.SELECTING_CLASS_MODE),
        ("🧘 Studio Batch", "mode_studio", ConversationState.MAIN_MENU),
        ("Fee details", "fee_details", ConversationState.AWAITING_CONTINUE_AFTER_INFO),
        ("Yes", "continue_yes", ConversationState.MAIN_MENU),
        ("Provide feedback", "feedback", ConversationState.COLLECTING_FREEFORM_INPUT),
        ("Lovely teachers", None, ConversationState.AWAITING_CONTINUE),
        ("No", "continue_no", ConversationState.TERMINATED),
    ]

    for i, (text, selection_id, expected) in enumerate(steps):
        session = await manager.process_event(event(text, f"wamid.{i}", selection_id))
        assert session.state == expected, text

    assert USER_NUMBER not in store
    assert fake_client.messages_to(USER_NUMBER)[-1] == catalog.FAREWELL

    fresh = await manager.process_event(event("hello", "wamid.restart"))
    assert fresh.state == ConversationState.COLLECTING_CONTACT_INFO
    assert fresh.collected_fields == {}


@pytest.mark.asyncio
async def test_close_clears_sessions(manager, store):
    await manager.process_event(event("hi"))

    await manager.close()

    assert len(store) == 0


def test_empty_collaborators_are_kept(fake_client, notifier, scheduler):
    store = SessionStore()
    engine = ConversationEngine(store, fake_client, notifier)

    manager = ConversationManager(store=store, whatsapp_client=fake_client, notifier=notifier,
                                  scheduler=scheduler, engine=engine)

    assert len(store) == 0
    assert manager.store is store
    assert manager.whatsapp_client is fake_client
    assert manager.notifier is notifier
    assert manager.scheduler is scheduler
    assert manager.engine is engine


# ============================================================================
# TIMERS REALES (escalera de décimas de segundo)
# ============================================================================

@pytest.fixture
def timed_manager(store, fake_client, notifier):
    scheduler = TimeoutScheduler(store, fake_client, ladder=TimeoutScheduler.build_ladder(0.1, 0.2, 0.3))
    manager = ConversationManager(store=store, whatsapp_client=fake_client, notifier=notifier, scheduler=scheduler)
    yield manager
    manager.store.clear()


@pytest.mark.asyncio
async def test_no_timer_fires_after_goodbye(timed_manager, fake_client):
    steps = [
        ("hi", None),
        ("Name: Jane Doe\nEmail: jane@x.com", None),
        ("✅ Existing Client", "existing_client"),
        ("Mumbai", "mumbai"),
        ("Raise a concern", "raise_concern"),
        ("Mat was torn", None),
        ("No", "continue_no"),
    ]
    for i, (text, selection_id) in enumerate(steps):
        await timed_manager.process_event(event(text, f"wamid.{i}", selection_id))

    assert USER_NUMBER not in timed_manager.store
    sent_at_goodbye = list(fake_client.messages_to(USER_NUMBER))
    assert sent_at_goodbye[-1] == catalog.FAREWELL

    await asyncio.sleep(0.5)

    assert fake_client.messages_to(USER_NUMBER) == sent_at_goodbye


@pytest.mark.asyncio
async def test_silent_user_is_reminded_then_expired(timed_manager, fake_client):
    await timed_manager.process_event(event("hi", "wamid.1"))
    assert USER_NUMBER in timed_manager.store

    await asyncio.sleep(0.5)

    sent = fake_client.messages_to(USER_NUMBER)
    assert sent[0] == catalog.CONTACT_REQUEST
    assert sent[1] == catalog.REMINDER_TEXTS["reminder_1"]
    assert catalog.REMINDER_TEXTS["reminder_2"] in sent
    assert sent[-1] == catalog.SESSION_TIMEOUT
    assert USER_NUMBER not in timed_manager.store

    fresh = await timed_manager.process_event(event("hello", "wamid.2"))
    assert fresh.state == ConversationState.COLLECTING_CONTACT_INFO
    assert timed_manager.store.get(USER_NUMBER) is fresh
