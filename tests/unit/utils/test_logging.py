"""Unit tests for JSON logging in logging.py.

Test coverage includes:

1. JsonFormatter output
   - Ensures records are rendered as JSON with timestamp, level, logger and message.
   - Ensures `extra` fields are attached and datetimes are rendered as ISO-8601.
   - Ensures exception tracebacks are included.

2. initialize_logging()
   - Ensures the root logger level follows the argument, then LOG_LEVEL.
"""

import json
import logging
import sys
from datetime import datetime, UTC
from decimal import Decimal

import pytest

from linkshortener.utils.logging import JsonFormatter, initialize_logging


def make_record(msg='Created link.', level=logging.INFO, exc_info=None, **extra):
    record = logging.LogRecord(
        name='linkshortener.services.resolution_engine',
        level=level,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    record.created = datetime(2025, 12, 26, 12, 0, 0, tzinfo=UTC).timestamp()
    for key, value in extra.items():
        setattr(record, key, value)
    return record


# -------------------------------
# 1. JsonFormatter output
# -------------------------------


def test_format_standard_fields():
    log = json.loads(JsonFormatter().format(make_record()))

    assert log == {
        'timestamp': '2025-12-26T12:00:00.000Z',
        'level': 'INFO',
        'logger': 'linkshortener.services.resolution_engine',
        'message': 'Created link.',
    }


def test_format_includes_extra_fields():
    expires_at = datetime(2026, 1, 1, tzinfo=UTC)
    log = json.loads(JsonFormatter().format(make_record(shortcode='Ab3D', expiresAt=expires_at)))

    assert log['shortcode'] == 'Ab3D'
    assert log['expiresAt'] == '2026-01-01T00:00:00+00:00'


def test_format_stringifies_unknown_values():
    log = json.loads(JsonFormatter().format(make_record(ratio=Decimal('1.50'))))
    assert log['ratio'] == '1.50'


def test_format_extra_fields_never_override_standard_fields():
    log = json.loads(JsonFormatter().format(make_record(level_override='x', logger='spoofed')))
    assert log['logger'] == 'linkshortener.services.resolution_engine'


def test_format_includes_exception():
    try:
        raise RuntimeError('boom')
    except RuntimeError:
        record = make_record(level=logging.ERROR, exc_info=sys.exc_info())

    log = json.loads(JsonFormatter().format(record))
    assert 'RuntimeError: boom' in log['exception']


# -------------------------------
# 2. initialize_logging()
# -------------------------------


@pytest.fixture
def _restore_root_logger():
    root = logging.getLogger()
    level, handlers = root.level, root.handlers[:]
    yield
    root.setLevel(level)
    root.handlers[:] = handlers


@pytest.mark.parametrize('env_level, expected', [(None, logging.INFO), ('debug', logging.DEBUG), ('WARNING', logging.WARNING)])
def test_initialize_logging_level(monkeypatch, _restore_root_logger, env_level, expected):
    if env_level is None:
        monkeypatch.delenv('LOG_LEVEL', raising=False)
    else:
        monkeypatch.setenv('LOG_LEVEL', env_level)

    initialize_logging()

    root = logging.getLogger()
    assert root.level == expected
    assert any(isinstance(handler.formatter, JsonFormatter) for handler in root.handlers)


def test_initialize_logging_argument_wins_over_env(monkeypatch, _restore_root_logger):
    monkeypatch.setenv('LOG_LEVEL', 'DEBUG')

    initialize_logging('error')

    assert logging.getLogger().level == logging.ERROR
