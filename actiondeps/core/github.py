"""GitHub host and URL utilities."""

from __future__ import annotations

from urllib.parse import urlparse

DOTCOM = "github.com"
DOTCOM_API_URL = "https://api.github.com"


def api_base_url(hostname: str) -> str:
    """Return the REST API root for a GitHub host.

    github.com uses the dedicated ``api.github.com`` host; GitHub
    Enterprise Server instances serve the API under ``/api/v3``.
    """
    hostname = hostname.strip().lower()
    if hostname == DOTCOM:
        return DOTCOM_API_URL
    return f"https://{hostname}/api/v3"


def repo_url(hostname: str, name: str) -> str:
    """Build the lower-cased browse URL ``https://<host>/<owner>/<repo>``."""
    return f"https://{hostname}/{name}".lower()


def hostname_from_url(url: str) -> str | None:
    """Extract the hostname from an ``https://host/owner/repo`` URL.

    Returns None if *url* has no network location.
    """
    parsed = urlparse(url.strip())
    return parsed.hostname or None
