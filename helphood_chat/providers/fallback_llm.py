from __future__ import annotations

import random

from .topics import DEFAULT, TOPIC_BUCKETS, TopicBucket


def classify(message: str) -> TopicBucket:
    """First bucket (in priority order) whose keywords appear in the message."""
    lowered = (message or "").lower()
    for bucket in TOPIC_BUCKETS:
        if bucket.matches(lowered):
            return bucket
    return DEFAULT


def fallback_response(message: str, rng: random.Random | None = None) -> str:
    """Local canned answer; never raises, empty input gets a default answer."""
    bucket = classify(message)
    return (rng or random).choice(bucket.responses)
