"""TeamNotifier and the fixed lead-notification format."""

from datetime import datetime

import pytest
import pytz

from app.services.notifications import LeadKind, LeadNotification, TeamNotifier

from conftest import TEAM_NUMBER


def test_lead_text_has_fixed_field_set():
    lead = LeadNotification(
        kind=LeadKind.CONCERN,
        name="Jane Doe",
        phone="919812345678",
        email="jane@x.com",
        city="Mumbai",
        detail="The hall was too cold",
        received_at=datetime(2026, 10, 19, 8, 30, tzinfo=pytz.utc),
    )

    assert lead.to_text().splitlines() == [
        "New customer concern/complaint received:",
        "",
        "*Details*:",
        "Name: Jane Doe",
        "Phone Number: 919812345678",
        "Email Id: jane@x.com",
        "City: Mumbai",
        "Details: The hall was too cold",
        "Received: 19/10/2026 14:00 IST",
    ]


def test_missing_fields_render_as_dash():
    text = LeadNotification(kind=LeadKind.CALLBACK, phone="919812345678").to_text()

    assert "Name: -" in text
    assert "Email Id: -" in text
    assert "City: -" in text
    assert not any(line.startswith("Details:") for line in text.splitlines())


@pytest.mark.asyncio
async def test_notify_sends_to_team_number(fake_client):
    notifier = TeamNotifier(fake_client, team_number=TEAM_NUMBER)

    sent = await notifier.notify(LeadNotification(kind=LeadKind.FEEDBACK, detail="Great class"))

    assert sent is True
    [(to, body)] = fake_client.sent
    assert to == TEAM_NUMBER
    assert body.startswith("New customer feedback received:")


@pytest.mark.asyncio
async def test_notify_without_team_number_is_skipped(fake_client):
    notifier = TeamNotifier(fake_client, team_number="")

    sent = await notifier.notify(LeadNotification(kind=LeadKind.REFERRAL))

    assert sent is False
    assert fake_client.sent == []
