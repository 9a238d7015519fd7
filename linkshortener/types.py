from typing import Any


# Type aliases for Python dictionaries
type RedisConfiguration = dict[str, Any]
type LinkRecord = dict[str, Any]
type ClickEventPayload = dict[str, Any]
