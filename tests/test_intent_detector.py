"""KeywordIntentDetector: ordered keyword rules for the main menu."""

import pytest

from app.services.intent_detection.detector import Intent, IntentRule, KeywordIntentDetector


@pytest.fixture
def detector():
    return KeywordIntentDetector()


@pytest.mark.parametrize("text, expected", [
    ("what is the class schedule", Intent.SCHEDULE),
    ("batch timings", Intent.SCHEDULE),
    ("how much are the fees", Intent.FEES),
    ("price", Intent.FEES),
    ("i want to join", Intent.JOIN),
    ("please call me", Intent.CALLBACK),
    ("i want to refer my sister", Intent.REFERRAL),
    ("i have a complaint", Intent.CONCERN),
    ("feedback", Intent.FEEDBACK),
    ("good morning", Intent.UNKNOWN),
])
def test_keyword_detection(detector, text, expected):
    assert detector.detect_intent(text) == expected


def test_fee_and_join_resolves_to_fees(detector):
    assert detector.detect_intent("what is the fee to join") == Intent.FEES
    assert detector.detect_intent("join fee") == Intent.FEES


def test_feedback_is_not_mistaken_for_fees(detector):
    assert detector.detect_intent("i want to give feedback") == Intent.FEEDBACK


@pytest.mark.parametrize("selection_id, expected", [
    ("class_schedule", Intent.SCHEDULE),
    ("fee_details", Intent.FEES),
    ("join_class", Intent.JOIN),
    ("request_callback", Intent.CALLBACK),
    ("refer_a_friend", Intent.REFERRAL),
    ("raise_concern", Intent.CONCERN),
    ("feedback", Intent.FEEDBACK),
])
def test_selection_ids(detector, selection_id, expected):
    assert detector.detect_intent("", selection_id) == expected


def test_custom_rules_keep_their_order():
    detector = KeywordIntentDetector(rules=[
        IntentRule(Intent.JOIN, ("join",)),
        IntentRule(Intent.FEES, ("fee",)),
    ])

    assert detector.detect_intent("join fee") == Intent.JOIN

