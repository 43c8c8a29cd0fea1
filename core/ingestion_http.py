"""Blocking HTTP fetch helper shared by the ingestion fetchers."""

from __future__ import annotations

import base64
import urllib.error
import urllib.request
from collections.abc import Mapping


class IngestionFetchError(RuntimeError):
    """Raised when an upstream tracker cannot be fetched."""


def basic_auth_header(username: str, password: str) -> str:
    """Return an HTTP basic `Authorization` header value."""

    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def fetch_bytes(url: str, *, headers: Mapping[str, str] | None = None, timeout: int = 30) -> bytes:
    """Fetch a URL and return the raw response body.

    Args:
        url: The URL to retrieve.
        headers: Extra request headers.
        timeout: Socket timeout in seconds.

    Returns:
        The undecoded response body.

    Raises:
        IngestionFetchError: On transport failures and non-2xx responses.
    """

    request = urllib.request.Request(url, headers=dict(headers or {}))
    try:
        with urllib.request.urlopen(request, timeout=timeout) as response:
            return response.read()
    except urllib.error.HTTPError as exc:
        raise IngestionFetchError(f"HTTP {exc.code} fetching {url}") from exc
    except (urllib.error.URLError, OSError) as exc:
        raise IngestionFetchError(f"Failed to fetch {url}: {exc}") from exc
