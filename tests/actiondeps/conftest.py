"""Shared fixtures for actiondeps tests (no network required)."""

from unittest.mock import MagicMock

import pytest

from actiondeps.engines.workflow_parser.git_checker import GitCommitChecker
from actiondeps.engines.workflow_parser.models import DependencyFile


@pytest.fixture
def checker():
    """Collaborator double: every repo reachable, every ref pinned, no tag found."""
    mock = MagicMock(spec=GitCommitChecker)
    mock.is_reachable.return_value = True
    mock.is_pinned.return_value = True
    mock.resolve_pinned_version.return_value = None
    return mock


@pytest.fixture
def workflow():
    """Factory for in-memory workflow files."""

    def _make(content: str, name: str = ".github/workflows/ci.yml") -> DependencyFile:
        return DependencyFile(name=name, content=content)

    return _make
