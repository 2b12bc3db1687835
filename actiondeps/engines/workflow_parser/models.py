"""Data models for the workflow parser engine."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from actiondeps.engines.workflow_parser.version import normalize

PACKAGE_MANAGER = "github_actions"
ECOSYSTEM = "github_actions"


@dataclass(frozen=True)
class DependencyFile:
    """An already-fetched manifest file (workflow or composite action)."""

    name: str
    content: str | None
    directory: str = "/"

    @property
    def path(self) -> str:
        directory = self.directory.rstrip("/")
        return f"{directory}/{self.name}" if directory else f"/{self.name}"


@dataclass(frozen=True)
class ParsedReference:
    """A ``uses`` string split into its grammar parts."""

    owner: str
    repo: str
    path: str | None
    ref: str

    @property
    def name(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass
class GitSource:
    url: str
    ref: str
    type: str = "git"
    branch: str | None = None


@dataclass
class Requirement:
    """Where and how a dependency is declared."""

    source: GitSource
    file: str
    requirement: str | None = None
    groups: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "requirement": self.requirement,
            "groups": list(self.groups),
            "source": {
                "type": self.source.type,
                "url": self.source.url,
                "ref": self.source.ref,
                "branch": self.source.branch,
            },
            "file": self.file,
            "metadata": dict(self.metadata),
        }


@dataclass
class Dependency:
    """A single action dependency detected from workflow files."""

    name: str
    version: str | None
    requirements: list[Requirement]
    package_manager: str = PACKAGE_MANAGER

    @property
    def ref(self) -> str | None:
        """Git ref of the first requirement (the declared ``@ref`` part)."""
        if not self.requirements:
            return None
        return self.requirements[0].source.ref

    @property
    def source_url(self) -> str | None:
        if not self.requirements:
            return None
        return self.requirements[0].source.url

    def with_version(self, version: str) -> Dependency:
        """Return a copy with *version* substituted, everything else unchanged."""
        return replace(self, version=version)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "requirements": [r.to_dict() for r in self.requirements],
            "package_manager": self.package_manager,
        }


class DependencySet:
    """Ordered collection of dependencies keyed by (case-insensitive) name.

    Adding a dependency whose name is already present merges its
    requirements into the existing entry instead of duplicating it.
    """

    def __init__(self, dependencies: list[Dependency] | None = None) -> None:
        self._deps: dict[str, Dependency] = {}
        for dep in dependencies or []:
            self.add(dep)

    def add(self, dep: Dependency) -> None:
        key = dep.name.lower()
        existing = self._deps.get(key)
        if existing is None:
            self._deps[key] = replace(dep, requirements=list(dep.requirements))
            return

        for req in dep.requirements:
            if req not in existing.requirements:
                existing.requirements.append(req)
        if existing.version is None and dep.version is not None:
            existing.version = dep.version

    def __add__(self, other: DependencySet) -> DependencySet:
        merged = DependencySet(self.dependencies)
        for dep in other.dependencies:
            merged.add(dep)
        return merged

    def __len__(self) -> int:
        return len(self._deps)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._deps

    @property
    def dependencies(self) -> list[Dependency]:
        return list(self._deps.values())


@dataclass(frozen=True)
class PackageManager:
    """Representative "package manager" descriptor for the ecosystem.

    GitHub Actions has no package manager of its own, so the first action
    reference found across the manifests stands in for one. Informational
    only; it never feeds dependency building.
    """

    use_name: str
    version: str
    name: str = PACKAGE_MANAGER
    deprecated: bool = False
    unsupported: bool = False

    def version_to_s(self) -> str:
        return f"{self.use_name}@{self.version}"

    def version_to_raw_s(self) -> str:
        return f"{self.use_name}@{normalize(self.version) or self.version}"


@dataclass(frozen=True)
class Ecosystem:
    name: str
    package_manager: PackageManager
