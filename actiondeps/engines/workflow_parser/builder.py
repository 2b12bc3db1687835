"""Turn a matched action reference into a :class:`Dependency`."""

from __future__ import annotations

import structlog

from actiondeps.core.github import DOTCOM, repo_url
from actiondeps.engines.workflow_parser import version
from actiondeps.engines.workflow_parser.git_checker import GitCommitChecker, ask
from actiondeps.engines.workflow_parser.models import (
    PACKAGE_MANAGER,
    Dependency,
    DependencyFile,
    GitSource,
    ParsedReference,
    Requirement,
)

log = structlog.get_logger("actiondeps.engine")


def github_dependency(
    file: DependencyFile,
    declaration: str,
    reference: ParsedReference,
    hostname: str,
) -> Dependency:
    """Build the dependency record for *reference* hosted on *hostname*.

    The optional path segment is dropped from the name; the version is
    only set when the ref itself reads as a version.
    """
    return Dependency(
        name=reference.name,
        version=version.normalize(reference.ref),
        requirements=[
            Requirement(
                source=GitSource(
                    url=repo_url(hostname, reference.name),
                    ref=reference.ref,
                ),
                file=file.name,
                metadata={"declaration_string": declaration},
            )
        ],
        package_manager=PACKAGE_MANAGER,
    )


class DependencyBuilder:
    """Builds dependencies, preferring the configured source host when it hosts the action.

    Workflows on a GitHub Enterprise instance reference enterprise-hosted
    and github.com actions with the same ``owner/repo@ref`` syntax, so the
    configured host is tried first and github.com is the fallback.
    """

    def __init__(self, checker: GitCommitChecker, source_hostname: str = DOTCOM) -> None:
        self._checker = checker
        self._source_hostname = (source_hostname or DOTCOM).lower()

    def build(
        self,
        file: DependencyFile,
        declaration: str,
        reference: ParsedReference,
    ) -> Dependency:
        if self._source_hostname != DOTCOM:
            dep = github_dependency(file, declaration, reference, self._source_hostname)
            if ask(
                self._checker.is_reachable,
                dep.name,
                self._source_hostname,
                default=False,
            ):
                return dep
            log.debug(
                "workflow_parser.host_fallback",
                name=dep.name,
                host=self._source_hostname,
                fallback=DOTCOM,
            )

        return github_dependency(file, declaration, reference, DOTCOM)
