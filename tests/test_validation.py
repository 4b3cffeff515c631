# tests/test_validation.py
from helphood_chat.chat.validation import ChatGuard, RejectionReason, utf16_length


def test_utf16_length_matches_browser_string_length():
    assert utf16_length("hello") == 5
    assert utf16_length("\U0001F600") == 2
    assert utf16_length("\ud800") == 1


def test_surrogate_pairs_count_twice_toward_limit():
    g = ChatGuard(max_message_chars=10)
    assert g.preflight({"message": "\U0001F600" * 5}) is None
    exit_obj = g.preflight({"message": "\U0001F600" * 6})
    assert exit_obj and exit_obj.reason == RejectionReason.MESSAGE_TOO_LONG
    assert exit_obj.to_dict() == {"error": "Message too long"}


def test_missing_or_non_string_message():
    g = ChatGuard()
    for body in ({}, {"message": ""}, {"message": 5}, ["hi"], "hi"):
        exit_obj = g.preflight(body)
        assert exit_obj and exit_obj.reason == RejectionReason.MESSAGE_REQUIRED
        assert exit_obj.status_code == 400
