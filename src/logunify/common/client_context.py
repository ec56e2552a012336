from typing import Optional


class ClientContext:
    """HTTP configuration handed to UnifiedHttpClient."""

    def __init__(
        self,
        receiver_url: str,
        socket_timeout: Optional[float] = None,
        tls_verify: bool = True,
        tls_trusted_ca_file: Optional[str] = None,
        proxy_auth_method: Optional[str] = None,
        user_agent: Optional[str] = None,
    ):
        self.receiver_url = receiver_url
        self.socket_timeout = socket_timeout
        self.tls_verify = tls_verify
        self.tls_trusted_ca_file = tls_trusted_ca_file
        self.proxy_auth_method = proxy_auth_method
        self.user_agent = user_agent
