"""WorkflowFileParser — extract action dependencies from workflow manifests."""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from actiondeps.core.github import DOTCOM
from actiondeps.engines.workflow_parser.builder import DependencyBuilder
from actiondeps.engines.workflow_parser.errors import MissingManifestsError
from actiondeps.engines.workflow_parser.extractor import extract_uses, load_manifest
from actiondeps.engines.workflow_parser.git_checker import GitCommitChecker
from actiondeps.engines.workflow_parser.models import (
    ECOSYSTEM,
    Dependency,
    DependencyFile,
    DependencySet,
    Ecosystem,
    PackageManager,
)
from actiondeps.engines.workflow_parser.package_manager import select_package_manager
from actiondeps.engines.workflow_parser.reference import is_excluded, match_reference
from actiondeps.engines.workflow_parser.resolver import VersionResolver

log = structlog.get_logger("actiondeps.engine")


class WorkflowFileParser:
    """Parse GitHub Actions workflow and composite-action files.

    Files are processed in order and their dependencies merged into one
    name-keyed set. Any unparseable file aborts the whole run with
    :class:`~actiondeps.engines.workflow_parser.errors.DependencyFileNotParseable`.
    """

    def __init__(
        self,
        dependency_files: Iterable[DependencyFile],
        checker: GitCommitChecker,
        *,
        source_hostname: str = DOTCOM,
    ) -> None:
        self._dependency_files = list(dependency_files)
        self._check_required_files()
        self._builder = DependencyBuilder(checker, source_hostname)
        self._resolver = VersionResolver(checker)
        self._ecosystem: Ecosystem | None = None

    def parse(self) -> list[Dependency]:
        dependency_set = DependencySet()
        for file in self._dependency_files:
            dependency_set += self._workflow_file_dependencies(file)
        return dependency_set.dependencies

    @property
    def ecosystem(self) -> Ecosystem:
        """Ecosystem descriptor, computed on first access and cached."""
        if self._ecosystem is None:
            self._ecosystem = Ecosystem(name=ECOSYSTEM, package_manager=self._package_manager())
        return self._ecosystem

    # ── internal ─────────────────────────────────────────────────────────

    def _package_manager(self) -> PackageManager:
        uses_lists = [extract_uses(load_manifest(f)) for f in self._dependency_files]
        return select_package_manager(uses_lists)

    def _workflow_file_dependencies(self, file: DependencyFile) -> DependencySet:
        dependency_set = DependencySet()
        document = load_manifest(file)

        for declaration in extract_uses(document):
            # Local and docker actions are not tracked.
            if is_excluded(declaration):
                continue
            reference = match_reference(declaration)
            if reference is None:
                log.debug(
                    "workflow_parser.unmatched_reference",
                    file=file.path,
                    declaration=declaration,
                )
                continue

            dep = self._resolver.resolve(self._builder.build(file, declaration, reference))
            if dep is not None:
                dependency_set.add(dep)

        log.debug(
            "workflow_parser.file_parsed",
            file=file.path,
            dependencies=len(dependency_set),
        )
        return dependency_set

    def _check_required_files(self) -> None:
        # The fetcher only hands over workflow files, so any file will do.
        if not self._dependency_files:
            raise MissingManifestsError("No workflow files!")
