import urllib.parse
import urllib.request
import logging
from typing import Dict, Optional, Tuple

from urllib3.util import make_headers

logger = logging.getLogger(__name__)


def detect_and_parse_proxy(
    scheme: str,
    host: Optional[str],
    skip_bypass: bool = False,
    proxy_auth_method: Optional[str] = None,
) -> Tuple[Optional[str], Optional[Dict[str, str]]]:
    """
    Detect system proxy and return proxy URI and headers.

    Args:
        scheme: URL scheme (http/https)
        host: Target hostname (optional, only needed for bypass checking)
        skip_bypass: If True, skip proxy bypass checking and return proxy config if found
        proxy_auth_method: Authentication method ('basic' or None)

    Returns:
        Tuple of (proxy_uri, proxy_headers) or (None, None) if no proxy
    """
    try:
        # returns a dictionary of scheme -> proxy server URL mappings.
        # https://docs.python.org/3/library/urllib.request.html#urllib.request.getproxies
        proxy = urllib.request.getproxies().get(scheme)
    except (KeyError, AttributeError):
        proxy = None
    else:
        if not skip_bypass and host and urllib.request.proxy_bypass(host):
            proxy = None

    if not proxy:
        return None, None

    parsed_proxy = urllib.parse.urlparse(proxy)

    if proxy_auth_method == "basic" or proxy_auth_method is None:
        proxy_headers = create_basic_proxy_auth_headers(parsed_proxy)
    else:
        raise ValueError(f"Unsupported proxy_auth_method: {proxy_auth_method}")

    return proxy, proxy_headers


def create_basic_proxy_auth_headers(parsed_proxy) -> Optional[Dict[str, str]]:
    """
    Create basic auth headers for proxy if credentials are provided.

    Args:
        parsed_proxy: Parsed proxy URL from urllib.parse.urlparse()

    Returns:
        Dictionary of proxy auth headers or None if no credentials
    """
    if parsed_proxy is None or not parsed_proxy.username:
        return None
    ap = f"{urllib.parse.unquote(parsed_proxy.username)}:{urllib.parse.unquote(parsed_proxy.password or '')}"
    return make_headers(proxy_basic_auth=ap)
