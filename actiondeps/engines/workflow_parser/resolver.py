"""Pin policy and SHA-to-version substitution for built dependencies."""

from __future__ import annotations

import structlog

from actiondeps.core.github import DOTCOM, hostname_from_url
from actiondeps.engines.workflow_parser import version
from actiondeps.engines.workflow_parser.git_checker import GitCommitChecker, ask
from actiondeps.engines.workflow_parser.models import Dependency

log = structlog.get_logger("actiondeps.engine")


class VersionResolver:
    """Decide whether a dependency without a version is tracked, and with which version.

    Only dependencies lacking a version whose repository is reachable are
    examined. Floating refs (branches) are dropped; pinned commits keep
    their place and pick up the version of an upstream tag pointing at
    the same commit when there is one.
    """

    def __init__(self, checker: GitCommitChecker) -> None:
        self._checker = checker

    def resolve(self, dep: Dependency) -> Dependency | None:
        """Return the dependency to record, or None to discard it."""
        if dep.version is not None:
            return dep

        host = hostname_from_url(dep.source_url or "") or DOTCOM
        if not ask(self._checker.is_reachable, dep.name, host, default=False):
            return dep

        if not ask(self._checker.is_pinned, dep, default=False):
            log.debug("workflow_parser.unpinned_skipped", name=dep.name, ref=dep.ref)
            return None

        resolved = version.normalize(
            ask(self._checker.resolve_pinned_version, dep, default=None)
        )
        if resolved is None:
            return dep

        log.debug(
            "workflow_parser.pinned_version_resolved",
            name=dep.name,
            ref=dep.ref,
            version=resolved,
        )
        return dep.with_version(resolved)
