import logging
import ssl
import urllib.parse
import urllib.request
from contextlib import contextmanager
from typing import Dict, Optional, Generator

import urllib3
from urllib3 import PoolManager, ProxyManager
from urllib3.exceptions import MaxRetryError

# Compatibility import for different urllib3 versions
try:
    # If urllib3~=2.0 is installed
    from urllib3 import BaseHTTPResponse
except ImportError:
    # If urllib3~=1.0 is installed
    from urllib3 import HTTPResponse as BaseHTTPResponse

from logunify.exc import RequestError
from logunify.common.client_context import ClientContext
from logunify.common.http import HttpMethod, HttpHeader
from logunify.common.http_utils import detect_and_parse_proxy

logger = logging.getLogger(__name__)


class UnifiedHttpClient:
    """
    HTTP client used to deliver event batches to the collector.

    This client uses urllib3 for connection pooling, SSL support, and proxy
    support. Retries are disabled at the urllib3 level: the dispatcher owns
    the retry policy and counts every call as exactly one delivery attempt.

    The client supports per-request proxy decisions, automatically routing requests
    through proxy or direct connections based on system proxy bypass rules and
    the target hostname of each request.
    """

    def __init__(self, client_context: ClientContext):
        """
        Initialize the unified HTTP client.

        Args:
            client_context: ClientContext instance containing HTTP configuration
        """
        self.config = client_context
        self._direct_pool_manager = None
        self._proxy_pool_manager = None
        self._proxy_uri = None
        self._proxy_auth = None
        self._setup_pool_managers()

    def _setup_pool_managers(self):
        """Set up both direct and proxy pool managers for per-request proxy decisions."""

        ssl_context = ssl.create_default_context()
        if not self.config.tls_verify:
            ssl_context.check_hostname = False
            ssl_context.verify_mode = ssl.CERT_NONE
        if self.config.tls_trusted_ca_file:
            ssl_context.load_verify_locations(self.config.tls_trusted_ca_file)

        # Flush cycles never overlap, so one connection to the collector is enough
        pool_kwargs = {
            "num_pools": 1,
            "maxsize": 1,
            "retries": False,
            "timeout": urllib3.Timeout(
                connect=self.config.socket_timeout, read=self.config.socket_timeout
            )
            if self.config.socket_timeout
            else None,
            "ssl_context": ssl_context,
        }

        self._direct_pool_manager = PoolManager(**pool_kwargs)

        parsed_url = urllib.parse.urlparse(self.config.receiver_url)
        self.scheme = parsed_url.scheme or "http"
        self.host = parsed_url.hostname

        try:
            proxy_url, proxy_auth = detect_and_parse_proxy(
                self.scheme,
                self.host,
                skip_bypass=True,
                proxy_auth_method=self.config.proxy_auth_method,
            )

            if proxy_url:
                self._proxy_uri = proxy_url
                self._proxy_auth = proxy_auth
                self._proxy_pool_manager = ProxyManager(
                    proxy_url, proxy_headers=proxy_auth, **pool_kwargs
                )
                logger.debug("Initialized with proxy support: %s", proxy_url)
            else:
                self._proxy_pool_manager = None
                logger.debug("No system proxy detected, using direct connections only")

        except ValueError:
            # Unsupported proxy_auth_method is a configuration error
            raise
        except Exception as e:
            # If proxy detection fails, fall back to direct connections only
            logger.debug("Error detecting system proxy configuration: %s", e)
            self._proxy_pool_manager = None

    def _should_use_proxy(self, target_host: str) -> bool:
        """
        Determine if a request to the target host should use proxy.

        Args:
            target_host: The hostname of the target URL

        Returns:
            True if proxy should be used, False for direct connection
        """
        if not self._proxy_pool_manager or not self._proxy_uri:
            return False

        try:
            # proxy_bypass returns True if the host should BYPASS the proxy
            return not urllib.request.proxy_bypass(target_host)
        except Exception as e:
            logger.debug("Error checking proxy bypass for host %s: %s", target_host, e)
            return True

    def _get_pool_manager_for_url(self, url: str) -> urllib3.PoolManager:
        """Get the appropriate pool manager (direct or proxy) for the given URL."""
        target_host = urllib.parse.urlparse(url).hostname

        if target_host and self._should_use_proxy(target_host):
            logger.debug("Using proxy for request to %s", target_host)
            return self._proxy_pool_manager
        else:
            logger.debug("Using direct connection for request to %s", target_host)
            return self._direct_pool_manager

    def _prepare_headers(
        self, headers: Optional[Dict[str, str]] = None
    ) -> Dict[str, str]:
        """Prepare headers for the request, including User-Agent."""
        request_headers = {}

        if self.config.user_agent:
            request_headers[HttpHeader.USER_AGENT.value] = self.config.user_agent

        if headers:
            request_headers.update(headers)

        return request_headers

    @staticmethod
    def _extract_http_code(error: MaxRetryError) -> Optional[int]:
        response = getattr(error, "response", None)
        if response is None and getattr(error, "reason", None) is not None:
            response = getattr(error.reason, "response", None)
        return getattr(response, "status", None)

    @contextmanager
    def request_context(
        self,
        method: HttpMethod,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        **kwargs,
    ) -> Generator[BaseHTTPResponse, None, None]:
        """
        Context manager for making HTTP requests with proper resource cleanup.

        Args:
            method: HTTP method
            url: URL to request
            headers: Optional headers dict
            **kwargs: Additional arguments passed to urllib3 request

        Yields:
            BaseHTTPResponse: The HTTP response object
        """
        logger.debug(
            "Making %s request to %s", method.value, urllib.parse.urlparse(url).netloc
        )

        request_headers = self._prepare_headers(headers)
        pool_manager = self._get_pool_manager_for_url(url)

        response = None

        try:
            response = pool_manager.request(
                method=method.value, url=url, headers=request_headers, **kwargs
            )
            yield response
        except RequestError:
            raise
        except MaxRetryError as e:
            logger.error("HTTP request failed after retries: %s", e)
            context = {"url": url, "original-exception": str(e)}
            http_code = self._extract_http_code(e)
            if http_code is not None:
                context["http-code"] = http_code
            raise RequestError(f"HTTP request failed: {e}", context) from e
        except Exception as e:
            logger.error("HTTP request error: %s", e)
            raise RequestError(
                f"HTTP request error: {e}", {"url": url, "original-exception": str(e)}
            ) from e
        finally:
            if response:
                response.close()

    def request(
        self,
        method: HttpMethod,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        **kwargs,
    ) -> BaseHTTPResponse:
        """
        Make an HTTP request.

        Returns:
            BaseHTTPResponse: The HTTP response object with data pre-loaded

        Raises:
            RequestError: On any transport error or a non-2xx response status
        """
        with self.request_context(method, url, headers=headers, **kwargs) as response:
            # Loads and caches the body so it stays readable after the response is closed.
            response.read()
            if not 200 <= response.status < 300:
                raise RequestError(
                    f"Collector responded with status {response.status}",
                    {"url": url, "http-code": response.status},
                )
            return response

    def using_proxy(self) -> bool:
        """Check if proxy support is available (not whether it's being used for a specific request)."""
        return self._proxy_pool_manager is not None

    def close(self):
        """Close the underlying connection pools."""
        if self._direct_pool_manager:
            self._direct_pool_manager.clear()
            self._direct_pool_manager = None
        if self._proxy_pool_manager:
            self._proxy_pool_manager.clear()
            self._proxy_pool_manager = None
