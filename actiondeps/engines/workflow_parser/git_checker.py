"""Repository/version collaborator: reachability, pin policy, SHA-to-tag lookup.

:class:`GitCommitChecker` is the narrow interface the parser depends on.
:class:`GitHubCommitChecker` answers it through the GitHub REST API;
:class:`OfflineCommitChecker` answers every question negatively.
"""

from __future__ import annotations

import os
import re
import time
from collections.abc import Callable, Iterator
from typing import Any, Protocol, TypeVar, runtime_checkable
from urllib.parse import quote

import httpx
import structlog

from actiondeps.core.github import DOTCOM, api_base_url, hostname_from_url
from actiondeps.engines.workflow_parser import version
from actiondeps.engines.workflow_parser.models import Dependency

log = structlog.get_logger("actiondeps.engine")

_NEXT_LINK_RE = re.compile(r'<([^>]+)>;\s*rel="next"')

_MAX_RETRIES = 3
_RETRY_BASE_DELAY = 1.0  # seconds
_MAX_RATE_LIMIT_WAIT = 60  # seconds

_T = TypeVar("_T")


@runtime_checkable
class GitCommitChecker(Protocol):
    """Questions the parser asks about an action's upstream repository."""

    def is_reachable(self, name: str, host: str) -> bool: ...

    def is_pinned(self, dependency: Dependency) -> bool: ...

    def resolve_pinned_version(self, dependency: Dependency) -> str | None: ...


def ask(question: Callable[..., _T], *args: Any, default: _T) -> _T:
    """Call a checker method, turning any failure into *default*."""
    try:
        return question(*args)
    except Exception:
        log.warning(
            "workflow_parser.checker_failed",
            question=getattr(question, "__name__", repr(question)),
            exc_info=True,
        )
        return default


class OfflineCommitChecker:
    """Checker for runs without network access: nothing is reachable."""

    def is_reachable(self, name: str, host: str) -> bool:
        return False

    def is_pinned(self, dependency: Dependency) -> bool:
        return False

    def resolve_pinned_version(self, dependency: Dependency) -> str | None:
        return None


class GitHubCommitChecker:
    """Synchronous GitHub REST API implementation of :class:`GitCommitChecker`.

    One ``httpx.Client`` is kept per API host so github.com and a GitHub
    Enterprise instance can be queried side by side. Network failures are
    logged and reported as negative answers, never raised.
    """

    def __init__(
        self,
        token: str | None = None,
        *,
        timeout: float = 30.0,
        max_tag_pages: int = 10,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._token = token or os.environ.get("GITHUB_TOKEN") or os.environ.get("GH_TOKEN")
        self._timeout = timeout
        self._max_tag_pages = max_tag_pages
        self._transport = transport
        self._clients: dict[str, httpx.Client] = {}

    # ── lifecycle ──────────────────────────────────────────────────────────

    def close(self) -> None:
        for client in self._clients.values():
            client.close()
        self._clients.clear()

    def __enter__(self) -> GitHubCommitChecker:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    # ── GitCommitChecker ───────────────────────────────────────────────────

    def is_reachable(self, name: str, host: str) -> bool:
        resp = self._get(host, f"/repos/{name}")
        return resp is not None and resp.status_code == 200

    def is_pinned(self, dependency: Dependency) -> bool:
        """Tags and commit SHAs are pinned; branches only when named like a version."""
        ref = dependency.ref
        if not ref:
            return False
        host = self._host_for(dependency)
        quoted = quote(ref, safe="/")

        # A lookup that could not be answered counts as "not pinned".
        is_tag = self._exists(host, f"/repos/{dependency.name}/git/ref/tags/{quoted}")
        if is_tag is None:
            return False
        if is_tag:
            return True
        is_branch = self._exists(host, f"/repos/{dependency.name}/branches/{quoted}")
        if is_branch is None:
            return False
        if is_branch:
            return version.looks_like_version_tag(ref)
        return True

    def resolve_pinned_version(self, dependency: Dependency) -> str | None:
        """Return the highest version tag pointing at the pinned commit, if any."""
        ref = dependency.ref
        if not ref or not version.looks_like_commit_sha(ref):
            return None
        host = self._host_for(dependency)

        candidates = [
            tag["name"]
            for tag in self._iter_tags(host, dependency.name)
            if str(tag.get("commit", {}).get("sha", "")).startswith(ref)
            and version.is_correct(tag.get("name"))
        ]
        if not candidates:
            return None
        return max(candidates, key=version.sort_key)

    # ── internal ───────────────────────────────────────────────────────────

    @staticmethod
    def _host_for(dependency: Dependency) -> str:
        return hostname_from_url(dependency.source_url or "") or DOTCOM

    def _client(self, host: str) -> httpx.Client:
        base_url = api_base_url(host)
        client = self._clients.get(base_url)
        if client is None:
            headers = {
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            }
            if self._token:
                headers["Authorization"] = f"token {self._token}"
            client = httpx.Client(
                base_url=base_url,
                headers=headers,
                timeout=self._timeout,
                transport=self._transport,
            )
            self._clients[base_url] = client
        return client

    def _exists(self, host: str, path: str) -> bool | None:
        """True on 200, False on any other status, None when no answer was obtained."""
        resp = self._get(host, path)
        if resp is None:
            return None
        return resp.status_code == 200

    def _iter_tags(self, host: str, name: str) -> Iterator[dict[str, Any]]:
        url: str | None = f"/repos/{name}/tags"
        params: dict[str, Any] | None = {"per_page": 100}
        page = 0
        while url and page < self._max_tag_pages:
            resp = self._get(host, url, params)
            if resp is None or resp.status_code != 200:
                return
            data = resp.json()
            if not isinstance(data, list):
                return
            yield from data
            url = self._parse_next_link(resp.headers.get("Link", ""))
            params = None
            page += 1

    def _get(
        self,
        host: str,
        url: str,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response | None:
        """GET with exponential backoff on 5xx, rate limits and timeouts.

        Returns the response for any status below 500 (404 included), or
        None once retries are exhausted or the request cannot be sent.
        """
        client = self._client(host)
        for attempt in range(_MAX_RETRIES):
            try:
                resp = client.get(url, params=params)
            except httpx.TimeoutException:
                log.warning("github.timeout", host=host, url=url, attempt=attempt + 1)
            except httpx.HTTPError as exc:
                log.warning("github.request_failed", host=host, url=url, error=str(exc))
                return None
            else:
                if resp.status_code in (403, 429) and self._is_rate_limited(resp):
                    wait = self._get_rate_limit_wait(resp)
                    log.warning(
                        "github.rate_limit",
                        host=host,
                        url=url,
                        wait_seconds=wait,
                        attempt=attempt + 1,
                    )
                    time.sleep(wait)
                    continue
                if resp.status_code < 500:
                    return resp
                log.warning(
                    "github.server_error",
                    host=host,
                    url=url,
                    status=resp.status_code,
                    attempt=attempt + 1,
                )

            if attempt < _MAX_RETRIES - 1:
                time.sleep(_RETRY_BASE_DELAY * (2**attempt))

        return None

    @staticmethod
    def _is_rate_limited(response: httpx.Response) -> bool:
        if response.headers.get("X-RateLimit-Remaining") == "0":
            return True
        return "Retry-After" in response.headers

    @staticmethod
    def _get_rate_limit_wait(response: httpx.Response) -> int:
        retry_after = response.headers.get("Retry-After")
        if retry_after is not None:
            try:
                return min(max(int(retry_after), 1), _MAX_RATE_LIMIT_WAIT)
            except ValueError:
                pass
        reset_ts = response.headers.get("X-RateLimit-Reset")
        if reset_ts is not None:
            try:
                return min(max(int(reset_ts) - int(time.time()), 1), _MAX_RATE_LIMIT_WAIT)
            except ValueError:
                pass
        return _MAX_RATE_LIMIT_WAIT

    @staticmethod
    def _parse_next_link(link_header: str) -> str | None:
        match = _NEXT_LINK_RE.search(link_header)
        return match.group(1) if match else None
