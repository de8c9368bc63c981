"""HTTP fetching with explicit transport settings."""

import logging

import requests

from archive_products.config import TransportConfig

logger = logging.getLogger(__name__)


def build_proxies(transport: TransportConfig) -> dict[str, str] | None:
    """Translate the proxy setting into a requests ``proxies`` mapping."""
    if transport.proxy is None:
        return None
    proxy_url = f"http://{transport.proxy.host}:{transport.proxy.port}"
    return {"http": proxy_url, "https": proxy_url}


def fetch_bytes(url: str, transport: TransportConfig) -> bytes:
    """GET ``url`` and return the raw response body.

    Raises:
        requests.RequestException: On connection errors, timeouts and
            non-success status codes.
    """
    response = requests.get(
        url,
        headers=dict(transport.headers),
        proxies=build_proxies(transport),
        timeout=transport.timeout,
    )
    response.raise_for_status()
    return response.content
