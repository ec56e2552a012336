DEFAULT_RECEIVER_URL = "http://localhost:8081/api/events/_bulk"
DEFAULT_BATCH_INTERVAL_MS = 5000
DEFAULT_MIN_BATCH_SIZE = 10
DEFAULT_SOCKET_TIMEOUT = 30.0

# Not externally configurable
MAX_BULK_SIZE = 50
MAX_ATTEMPTS = 3
MAX_UNSENT_EVENTS = 5000

LOGGER_NAME = "logunify"
LOGGER_LABEL = "LogUnify"

# Rate-limited responses (429/503) before the breaker opens, and seconds it stays open
CIRCUIT_BREAKER_FAIL_MAX = 20
CIRCUIT_BREAKER_RESET_TIMEOUT = 30
