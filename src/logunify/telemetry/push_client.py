"""
Push client interface and implementations.

This module provides an interface for pushing event batches with two implementations:
1. EventPushClient - Direct HTTP client implementation
2. CircuitBreakerEventPushClient - Circuit breaker wrapper implementation
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

try:
    from urllib3 import BaseHTTPResponse
except ImportError:
    from urllib3 import HTTPResponse as BaseHTTPResponse

from pybreaker import CircuitBreaker, CircuitBreakerListener

from logunify.common.unified_http_client import UnifiedHttpClient
from logunify.common.http import HttpMethod
from logunify.constants import CIRCUIT_BREAKER_FAIL_MAX, CIRCUIT_BREAKER_RESET_TIMEOUT
from logunify.exc import (
    TelemetryRateLimitError,
    TelemetryNonRateLimitError,
    RequestError,
)

logger = logging.getLogger(__name__)

RATE_LIMIT_STATUS_CODES = (429, 503)


class CircuitBreakerStateLogger(CircuitBreakerListener):
    """Reports breaker transitions. Opening is a warning: batches start failing fast."""

    def state_change(self, cb: CircuitBreaker, old_state, new_state) -> None:
        if new_state.name == "open":
            logger.warning(
                "Circuit breaker %s opened, event batches fail fast for %s seconds",
                cb.name,
                cb.reset_timeout,
            )
        else:
            logger.debug(
                "Circuit breaker %s changed from %s to %s",
                cb.name,
                old_state.name if old_state else None,
                new_state.name,
            )


def create_circuit_breaker(host: str) -> CircuitBreaker:
    """
    Build a breaker for one collector host.

    Only TelemetryRateLimitError counts as a failure. Breakers are owned by the
    push client that created them, so a dispatcher that rebuilds or closes its
    transport starts over with a closed breaker.
    """
    breaker = CircuitBreaker(
        fail_max=CIRCUIT_BREAKER_FAIL_MAX,
        reset_timeout=CIRCUIT_BREAKER_RESET_TIMEOUT,
        name=f"logunify-{host}",
        exclude=[TelemetryNonRateLimitError],
    )
    breaker.add_listener(CircuitBreakerStateLogger())
    return breaker


class IEventPushClient(ABC):
    """Interface for push clients."""

    @abstractmethod
    def request(
        self,
        method: HttpMethod,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        **kwargs,
    ) -> BaseHTTPResponse:
        """Make an HTTP request. Raises on any failure."""
        pass

    def close(self):
        pass


class EventPushClient(IEventPushClient):
    """Direct HTTP client implementation."""

    def __init__(self, http_client: UnifiedHttpClient):
        self._http_client = http_client
        logger.debug("EventPushClient initialized")

    def request(
        self,
        method: HttpMethod,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        **kwargs,
    ) -> BaseHTTPResponse:
        return self._http_client.request(method, url, headers, **kwargs)

    def close(self):
        self._http_client.close()


class CircuitBreakerEventPushClient(IEventPushClient):
    """Circuit breaker wrapper implementation."""

    def __init__(self, delegate: IEventPushClient, host: str):
        """
        Args:
            delegate: The underlying push client to wrap
            host: The hostname for circuit breaker identification
        """
        self._delegate = delegate
        self._host = host
        self._circuit_breaker = create_circuit_breaker(host)

        logger.debug(
            "CircuitBreakerEventPushClient initialized for host %s",
            host,
        )

    def _make_request_and_check_status(
        self,
        method: HttpMethod,
        url: str,
        headers: Optional[Dict[str, str]],
        **kwargs,
    ) -> BaseHTTPResponse:
        """
        Make the request and classify failures for the circuit breaker.

        Raises:
            TelemetryRateLimitError: For 429/503 status codes (circuit breaker counts)
            TelemetryNonRateLimitError: For other errors (circuit breaker excludes)
        """
        try:
            response = self._delegate.request(method, url, headers, **kwargs)

            if response.status in RATE_LIMIT_STATUS_CODES:
                logger.warning(
                    "Collector returned %d for host %s, triggering circuit breaker",
                    response.status,
                    self._host,
                )
                raise TelemetryRateLimitError(
                    f"Collector rate limited or unavailable: {response.status}"
                )

            return response

        except TelemetryRateLimitError:
            raise
        except Exception as e:
            if isinstance(e, RequestError):
                http_code = e.context.get("http-code") if e.context else None

                if http_code in RATE_LIMIT_STATUS_CODES:
                    logger.warning(
                        "Collector returned %d for host %s, triggering circuit breaker",
                        http_code,
                        self._host,
                    )
                    raise TelemetryRateLimitError(
                        f"Collector rate limited or unavailable: {http_code}"
                    ) from e

            logger.debug(
                "Non-rate-limit delivery error for host %s: %s, wrapping to exclude from circuit breaker",
                self._host,
                e,
            )
            raise TelemetryNonRateLimitError(e) from e

    def request(
        self,
        method: HttpMethod,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        **kwargs,
    ) -> BaseHTTPResponse:
        """
        Make an HTTP request with circuit breaker protection.

        Only TelemetryRateLimitError counts towards opening the circuit. All
        exceptions propagate to the caller; an open circuit raises
        CircuitBreakerError without touching the network.
        """
        try:
            return self._circuit_breaker.call(
                self._make_request_and_check_status,
                method,
                url,
                headers,
                **kwargs,
            )
        except TelemetryNonRateLimitError as e:
            logger.debug(
                "Non-rate-limit delivery error for host %s, re-raising original: %s",
                self._host,
                e.original_exception,
            )
            raise e.original_exception from e

    def close(self):
        self._circuit_breaker.close()
        self._delegate.close()
