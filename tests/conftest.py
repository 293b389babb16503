"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add project root to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from app.services.conversation.engine import ConversationEngine
from app.services.conversation.session_store import SessionStore
from app.services.notifications import TeamNotifier
from app.services.whatsapp import WhatsAppAPIError

TEAM_NUMBER = "919800000000"
USER_NUMBER = "919812345678"


class FakeWhatsAppClient:
    """Records every outbound message instead of calling the Cloud API."""

    def __init__(self, fail: bool = False):
        self.sent = []
        self.fail = fail

    async def send_message(self, to, content, reply_to=None):
        self.sent.append((to, content))
        if self.fail:
            raise WhatsAppAPIError("send failed")
        return {"messages": [{"id": f"wamid.out_{len(self.sent)}"}]}

    def messages_to(self, to):
        return [content for recipient, content in self.sent if recipient == to]


@pytest.fixture
def fake_client():
    return FakeWhatsAppClient()


@pytest.fixture
def failing_client():
    return FakeWhatsAppClient(fail=True)


@pytest.fixture
def store():
    return SessionStore()


@pytest.fixture
def notifier(fake_client):
    return TeamNotifier(fake_client, team_number=TEAM_NUMBER)


@pytest.fixture
def engine(store, fake_client, notifier):
    return ConversationEngine(store, fake_client, notifier)
