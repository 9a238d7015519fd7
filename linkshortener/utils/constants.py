# Default cache TTL for links without an expiry (7 days in seconds)
SEVEN_DAYS_SECONDS = 604_800  # 60 * 60 * 24 * 7

# Default fixed rate limit window (15 minutes in seconds) and ceiling
FIFTEEN_MINUTES_SECONDS = 900  # 60 * 15
DEFAULT_RATE_LIMIT_MAX_REQUESTS = 100

# Short code generation
DEFAULT_SHORT_CODE_LENGTH = 6
MIN_SHORT_CODE_LENGTH = 4
MAX_SHORT_CODE_LENGTH = 12
DEFAULT_MAX_GENERATION_RETRIES = 10

# Longest target URL accepted for shortening
MAX_URL_LENGTH = 2048

# Pub/sub channel receiving click events
DEFAULT_CLICK_EVENTS_CHANNEL = 'click_events'

# Application: environment variable names
APP_ENV_ENV = 'APP_ENV'
APP_NAME_ENV = 'APP_NAME'
LOG_LEVEL_ENV = 'LOG_LEVEL'
SHORT_URL_BASE_ENV = 'SHORT_URL_BASE'

# Redis: connection details
REDIS_HOST_ENV = 'REDIS_HOST'
REDIS_PORT_ENV = 'REDIS_PORT'
REDIS_DB_ENV = 'REDIS_DB'
REDIS_USERNAME_ENV = 'REDIS_USERNAME'
REDIS_PASSWORD_ENV = 'REDIS_PASSWORD'  # noqa: S105
REDIS_SOCKET_TIMEOUT_ENV = 'REDIS_SOCKET_TIMEOUT'

# Engine and limiter tuning
RATE_LIMIT_WINDOW_SECONDS_ENV = 'RATE_LIMIT_WINDOW_SECONDS'
RATE_LIMIT_MAX_REQUESTS_ENV = 'RATE_LIMIT_MAX_REQUESTS'
CACHE_DEFAULT_TTL_SECONDS_ENV = 'CACHE_DEFAULT_TTL_SECONDS'
SHORT_CODE_LENGTH_ENV = 'SHORT_CODE_LENGTH'
MAX_GENERATION_RETRIES_ENV = 'MAX_GENERATION_RETRIES'
CLICK_EVENTS_CHANNEL_ENV = 'CLICK_EVENTS_CHANNEL'
