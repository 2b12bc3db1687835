"""Manifest discovery — find workflow and composite-action files in a checkout."""

from __future__ import annotations

from pathlib import Path

from actiondeps.engines.workflow_parser.models import DependencyFile

WORKFLOW_DIRECTORY = ".github/workflows"

FILE_PATTERNS: list[str] = [
    f"{WORKFLOW_DIRECTORY}/*.yml",
    f"{WORKFLOW_DIRECTORY}/*.yaml",
    "**/action.yml",
    "**/action.yaml",
]


def discover_workflow_files(repo_path: Path) -> list[DependencyFile]:
    """Walk the repo and load every workflow / action manifest.

    Workflow files come first, then ``action.y(a)ml`` files; each group
    is sorted by path and a file matched by several patterns is returned
    once. Names are POSIX paths relative to *repo_path*.
    """
    seen: set[Path] = set()
    files: list[DependencyFile] = []
    for pattern in FILE_PATTERNS:
        for hit in sorted(repo_path.glob(pattern)):
            if not hit.is_file() or hit in seen:
                continue
            seen.add(hit)
            files.append(
                DependencyFile(
                    name=hit.relative_to(repo_path).as_posix(),
                    content=hit.read_text(encoding="utf-8", errors="replace"),
                )
            )
    return files
