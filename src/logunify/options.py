from dataclasses import dataclass, fields, replace
from typing import Optional

from logunify.constants import (
    DEFAULT_RECEIVER_URL,
    DEFAULT_BATCH_INTERVAL_MS,
    DEFAULT_MIN_BATCH_SIZE,
    DEFAULT_SOCKET_TIMEOUT,
)
from logunify.common.client_context import ClientContext

# Fields baked into the push client when it is built
TRANSPORT_FIELDS = (
    "receiver_url",
    "socket_timeout",
    "user_agent",
    "enable_circuit_breaker",
    "tls_no_verify",
    "tls_trusted_ca_file",
    "proxy_auth_method",
)


@dataclass(frozen=True)
class Options:
    """
    Dispatcher configuration.

    Every field is optional. Unset fields are falsy so that an Options used
    for reconfiguration only changes what it explicitly sets; defaults are
    filled in by `Options.defaults()` when the dispatcher is first created.

    Attributes:
        api_key (str): Opaque credential sent as the X-Auth-Token header
        receiver_url (str): Bulk endpoint of the collector
        batch_interval (int): Delay in milliseconds before a scheduled flush fires
        min_batch_size (int): Buffer length that triggers an immediate flush
        enable_debug_log (bool): Emit debug-level lifecycle logging
        socket_timeout (float): Connect and read timeout in seconds for each request
        user_agent (str): Optional User-Agent header value
        enable_circuit_breaker (bool): Stop calling a collector that keeps rate limiting
        tls_no_verify (bool): Skip certificate and hostname checks for https collectors
        tls_trusted_ca_file (str): PEM bundle of extra CAs to trust
        proxy_auth_method (str): Authentication for the system proxy, only "basic"
    """

    api_key: Optional[str] = None
    receiver_url: Optional[str] = None
    batch_interval: Optional[int] = None
    min_batch_size: Optional[int] = None
    enable_debug_log: bool = False
    socket_timeout: Optional[float] = None
    user_agent: Optional[str] = None
    enable_circuit_breaker: bool = False
    tls_no_verify: bool = False
    tls_trusted_ca_file: Optional[str] = None
    proxy_auth_method: Optional[str] = None

    @classmethod
    def defaults(cls) -> "Options":
        return cls(
            api_key="",
            receiver_url=DEFAULT_RECEIVER_URL,
            batch_interval=DEFAULT_BATCH_INTERVAL_MS,
            min_batch_size=DEFAULT_MIN_BATCH_SIZE,
            socket_timeout=DEFAULT_SOCKET_TIMEOUT,
        )

    def merge(self, other: "Options") -> "Options":
        """
        Return a copy where every truthy field of `other` overrides this one.

        Falsy fields (None, empty strings, zero, False) keep the current value.
        """
        overrides = {
            f.name: getattr(other, f.name)
            for f in fields(other)
            if getattr(other, f.name)
        }
        return replace(self, **overrides)

    def transport_differs(self, other: "Options") -> bool:
        return any(
            getattr(self, name) != getattr(other, name) for name in TRANSPORT_FIELDS
        )

    @property
    def batch_interval_seconds(self) -> float:
        return self.batch_interval / 1000

    def to_client_context(self) -> ClientContext:
        return ClientContext(
            receiver_url=self.receiver_url,
            socket_timeout=self.socket_timeout,
            tls_verify=not self.tls_no_verify,
            tls_trusted_ca_file=self.tls_trusted_ca_file,
            proxy_auth_method=self.proxy_auth_method,
            user_agent=self.user_agent,
        )
