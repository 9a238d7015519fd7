"""Unit tests for the ClickEventModel dataclass in click_event_model.py.

Test coverage includes:

1. Payload encoding
   - Ensures to_payload() emits exactly the event schema fields.

2. Payload decoding
   - Ensures from_payload() restores the event.
   - Ensures unknown, missing or mistyped fields raise ValueError.
"""

import json
from datetime import datetime, UTC

import pytest

from linkshortener.models import ClickEventModel


@pytest.fixture
def event():
    return ClickEventModel(
        shortcode='Ab3D',
        user_agent='Mozilla/5.0',
        referer=None,
        client_ip='203.0.113.7',
        timestamp=datetime(2025, 10, 15, 12, 0, 0, tzinfo=UTC),
    )


@pytest.fixture
def payload():
    return {
        'shortcode': 'Ab3D',
        'user_agent': 'Mozilla/5.0',
        'referer': None,
        'client_ip': '203.0.113.7',
        'timestamp': '2025-10-15T12:00:00+00:00',
    }


# -------------------------------
# 1. Payload encoding
# -------------------------------


def test_to_payload(event, payload):
    assert event.to_payload() == payload
    json.dumps(event.to_payload())  # must be JSON serializable


# -------------------------------
# 2. Payload decoding
# -------------------------------


def test_from_payload(event, payload):
    assert ClickEventModel.from_payload(payload) == event


def test_from_payload_rejects_unknown_fields(payload):
    with pytest.raises(ValueError, match='exactly the fields'):
        ClickEventModel.from_payload(payload | {'country': 'BG'})


def test_from_payload_rejects_missing_fields(payload):
    del payload['referer']
    with pytest.raises(ValueError, match='exactly the fields'):
        ClickEventModel.from_payload(payload)


@pytest.mark.parametrize('raw', [None, [], 'Ab3D', 42])
def test_from_payload_rejects_non_objects(raw):
    with pytest.raises(ValueError):
        ClickEventModel.from_payload(raw)


@pytest.mark.parametrize(
    'field, value',
    [
        ('shortcode', ''),
        ('shortcode', None),
        ('user_agent', 42),
        ('client_ip', ['203.0.113.7']),
        ('timestamp', 1760529600),
        ('timestamp', 'yesterday'),
    ],
)
def test_from_payload_rejects_bad_values(payload, field, value):
    payload[field] = value
    with pytest.raises(ValueError):
        ClickEventModel.from_payload(payload)
