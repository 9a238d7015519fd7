"""Application-wide logging initialization

IMPORTANT: Call `initialize_logging()` once at process start-up, before any
other logging is done (`create_services()` does not do it for you).

Every record is rendered as one JSON object per line. Context passed through
`extra=` becomes top-level fields; datetimes are rendered as ISO-8601 strings
and anything else JSON can't encode falls back to `str()`:

    >>> logger.info('Created link.', extra={'shortcode': 'Ab3D9z', 'expiresAt': None})
    {"timestamp": "2025-12-26T12:00:00.000Z", "level": "INFO",
     "logger": "linkshortener.services.resolution_engine",
     "message": "Created link.", "shortcode": "Ab3D9z", "expiresAt": null}
"""

import os
import json
import logging
import logging.config
from datetime import date, datetime, UTC
from typing import Any, Optional

from linkshortener.utils.constants import LOG_LEVEL_ENV


# Attributes every LogRecord carries; whatever else is set on a record came from `extra=`
RESERVED_ATTRS = frozenset(vars(logging.LogRecord('', logging.INFO, '', 0, '', (), None))) | {'message', 'asctime'}


def _to_json(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


class JsonFormatter(logging.Formatter):
    """Render log records as JSON objects, `extra` fields included"""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=UTC)
        log = {
            'timestamp': created.isoformat(timespec='milliseconds').replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)

        # Context never overrides the fixed fields above
        for key, value in vars(record).items():
            if key not in RESERVED_ATTRS:
                log.setdefault(key, value)
        return json.dumps(log, default=_to_json)


def initialize_logging(level: Optional[str] = None) -> None:
    """Send JSON logs to stdout

    Args:
        level (Optional[str]):
            Root log level name. Defaults to `LOG_LEVEL`, then 'INFO'.
    """
    level = (level or os.getenv(LOG_LEVEL_ENV) or 'INFO').upper()
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {'json': {'()': JsonFormatter}},
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                }
            },
            'root': {'level': level, 'handlers': ['stdout']},
        }
    )
