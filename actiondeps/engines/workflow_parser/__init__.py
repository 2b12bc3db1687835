"""Workflow parser engine — detect GitHub Actions dependencies from workflow files."""

from actiondeps.engines.workflow_parser.errors import (
    DependencyFileNotParseable,
    MissingManifestsError,
    WorkflowParserError,
)
from actiondeps.engines.workflow_parser.git_checker import (
    GitCommitChecker,
    GitHubCommitChecker,
    OfflineCommitChecker,
)
from actiondeps.engines.workflow_parser.models import (
    Dependency,
    DependencyFile,
    DependencySet,
    Ecosystem,
    PackageManager,
)
from actiondeps.engines.workflow_parser.parser import WorkflowFileParser
from actiondeps.engines.workflow_parser.registry import discover_workflow_files

__all__ = [
    "Dependency",
    "DependencyFile",
    "DependencyFileNotParseable",
    "DependencySet",
    "Ecosystem",
    "GitCommitChecker",
    "GitHubCommitChecker",
    "MissingManifestsError",
    "OfflineCommitChecker",
    "PackageManager",
    "WorkflowFileParser",
    "WorkflowParserError",
    "discover_workflow_files",
]
