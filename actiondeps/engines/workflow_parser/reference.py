"""Grammar matcher for action references (``uses`` strings).

Accepted shape::

    owner/repo[/path]@ref

* ``owner`` and ``repo`` consist of ASCII letters, digits, ``_``, ``.``
  or ``-`` and must be non-empty.
* ``path`` is an optional ``/...`` segment (at least one character, no
  ``@``) between the repo and the first ``@`` after the prefix.
* ``ref`` is everything after that ``@``; it may contain ``/``, ``.``
  and further ``@`` characters, but must be non-empty.

Local actions (``./path``) and container actions (``docker://image``)
are valid ``uses`` values but never dependencies; see :func:`is_excluded`.
"""

from __future__ import annotations

import string

from actiondeps.engines.workflow_parser.models import ParsedReference

_NAME_CHARS = frozenset(string.ascii_letters + string.digits + "_.-")

EXCLUDED_PREFIXES = (".", "docker://")


def _is_name(value: str) -> bool:
    return bool(value) and all(ch in _NAME_CHARS for ch in value)


def match_reference(raw: object) -> ParsedReference | None:
    """Split *raw* into owner, repo, path and ref, or return None."""
    if not isinstance(raw, str):
        return None

    owner, sep, rest = raw.partition("/")
    if not sep or not _is_name(owner):
        return None

    head, at, ref = rest.partition("@")
    if not at or not ref:
        return None

    repo, slash, path = head.partition("/")
    if not _is_name(repo):
        return None
    if slash and not path:
        return None

    return ParsedReference(
        owner=owner,
        repo=repo,
        path=f"/{path}" if slash else None,
        ref=ref,
    )


def is_excluded(raw: str) -> bool:
    """True for local-path and docker references, which are never dependencies."""
    return raw.startswith(EXCLUDED_PREFIXES)
