class Error(Exception):
    """Base class for LogUnify exceptions.
    `message`: An optional user-friendly error message. It should be short, actionable and stable
    `context`: Optional extra context about the error. MUST be JSON serializable
    """

    def __init__(self, message=None, context=None, *args, **kwargs):
        super().__init__(message, *args, **kwargs)
        self.message = message
        self.context = context or {}

    def __str__(self):
        return self.message


class InterfaceError(Error):
    pass


class NotInitializedError(InterfaceError):
    """Thrown when the process-wide dispatcher is accessed before setup() was called"""

    pass


class OperationalError(Error):
    pass


class RequestError(OperationalError):
    """Thrown if there was a error during a request to the collector.
    Its context will have the following keys:
    "url": The URL the request was sent to
    "http-code": HTTP response code to the request (if available)
    "original-exception": The Python level original exception (if available)
    """

    pass


class TelemetryRateLimitError(Exception):
    """Raised when the collector returns 429 or 503, indicating rate limiting or service unavailable.
    This exception is used exclusively by the circuit breaker to track rate limiting events."""


class TelemetryNonRateLimitError(Exception):
    """Wrapper for delivery errors that should NOT trigger the circuit breaker.

    This exception wraps non-rate-limiting errors (network errors, timeouts, server errors, etc.)
    and is excluded from circuit breaker failure counting. Only TelemetryRateLimitError should
    open the circuit breaker.

    Attributes:
        original_exception: The actual exception that occurred
    """

    def __init__(self, original_exception: Exception):
        self.original_exception = original_exception
        super().__init__(f"Non-rate-limit telemetry error: {original_exception}")
