"""Version validity predicate for action refs.

An action ref counts as a version when, after dropping a leading ``v``
that precedes a digit, it looks like a dotted release number with an
optional pre-release suffix: ``v2``, ``2.3.4``, ``v1.0.0-beta.1``.
Full commit SHAs never count, even when they happen to start with a digit.
"""

from __future__ import annotations

import re

_VERSION_RE = re.compile(
    r"^[0-9]+(?:\.[0-9a-zA-Z]+)*(?:-[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?(?:\+[0-9A-Za-z.-]+)?$"
)
_LEADING_V_RE = re.compile(r"^v(?=[0-9])")
_COMMIT_SHA_RE = re.compile(r"^[0-9a-f]{7,40}$")
_FULL_SHA_RE = re.compile(r"^[0-9a-f]{40}$")
# "v1", "v2-beta" or a dotted number such as "1.2" or "release/1.2.3"
_VERSION_TAG_RE = re.compile(
    r"(?:(?<=^v)[0-9]+(?:-[a-z0-9]+)?|[0-9]+\.[0-9]+(?:\.[a-z0-9-]+)*)$", re.IGNORECASE
)


def remove_leading_v(ref: str) -> str:
    return _LEADING_V_RE.sub("", ref, count=1)


def looks_like_commit_sha(ref: str) -> bool:
    """True for 7–40 lowercase hex chars that are not purely numeric."""
    return bool(_COMMIT_SHA_RE.match(ref)) and not ref.isdigit()


def looks_like_version_tag(ref: str) -> bool:
    """True for refs named like a release: a ``v``-prefixed number or a dotted number.

    Stricter than :func:`is_correct`: a bare ``2`` is not a version tag.
    """
    return bool(_VERSION_TAG_RE.search(ref))


def is_correct(ref: str | None) -> bool:
    """Return True if *ref* can be read as a version."""
    if not ref:
        return False
    ref = ref.strip()
    if _FULL_SHA_RE.match(ref):
        return False
    return bool(_VERSION_RE.match(remove_leading_v(ref)))


def normalize(ref: str | None) -> str | None:
    """Return *ref* as a version string (``v2.3.4`` -> ``2.3.4``), or None."""
    if ref is None or not is_correct(ref):
        return None
    return remove_leading_v(ref.strip())


def _segment(token: str) -> tuple[int, int, str]:
    if token.isdigit():
        return (1, int(token), "")
    return (0, 0, token)


def sort_key(version: str) -> tuple:
    """Ordering key for version strings.

    Numeric segments compare numerically (``1.2.10 > 1.2.9``), trailing
    zeros are ignored (``1.2 == 1.2.0``) and a pre-release sorts before
    its release (``1.0.0-rc.1 < 1.0.0``).
    """
    version = remove_leading_v(version.strip()).split("+", 1)[0]
    release, _, pre = version.partition("-")
    parts = [_segment(tok) for tok in release.split(".")]
    while parts and parts[-1] == (1, 0, ""):
        parts.pop()
    if pre:
        return tuple(parts), (0, tuple(_segment(tok) for tok in pre.split(".")))
    return tuple(parts), (1, ())
