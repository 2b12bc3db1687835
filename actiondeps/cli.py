"""Standalone GitHub Actions dependency scanner.

Usage:
    actiondeps /path/to/repo
    actiondeps .                                  # scan current directory
    actiondeps /path/to/repo --offline            # no GitHub API calls
    actiondeps /path/to/repo --hostname ghe.example.com
    actiondeps /path/to/repo --json
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path

from actiondeps.core.github import DOTCOM
from actiondeps.core.logging import setup_logging
from actiondeps.engines.workflow_parser import (
    Dependency,
    GitCommitChecker,
    GitHubCommitChecker,
    OfflineCommitChecker,
    WorkflowFileParser,
    WorkflowParserError,
    discover_workflow_files,
)
from actiondeps.engines.workflow_parser.package_manager import describe


def _print_deps(deps: list[Dependency], parser: WorkflowFileParser, as_json: bool) -> None:
    package_manager = parser.ecosystem.package_manager

    if as_json:
        payload = {
            "ecosystem": {
                "name": parser.ecosystem.name,
                "package_manager": describe(package_manager),
            },
            "dependencies": [d.to_dict() for d in deps],
        }
        print(json.dumps(payload, indent=2))
        return

    if not deps:
        print("No dependencies found.")
        return

    # Group by declaring file
    by_file: dict[str, list[tuple[Dependency, str]]] = {}
    for d in deps:
        for req in d.requirements:
            by_file.setdefault(req.file, []).append((d, req.source.ref))

    print(f"Found {len(deps)} actions in {len(by_file)} manifest(s)")
    print(f"Representative version: {package_manager.version_to_s()}\n")

    for source_file, entries in sorted(by_file.items()):
        print(f"  {source_file}")
        for d, ref in entries:
            version = f" ({d.version})" if d.version else ""
            print(f"    {d.name}@{ref}{version}  -> {d.source_url}")
        print()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Scan a repo for GitHub Actions dependencies")
    parser.add_argument("target", help="Local repository path to scan")
    parser.add_argument(
        "--hostname",
        default=os.environ.get("ACTIONDEPS_SOURCE_HOSTNAME", DOTCOM),
        help="Source host of the repository (default: github.com)",
    )
    parser.add_argument(
        "--offline", action="store_true", help="Skip GitHub API reachability and pin checks"
    )
    parser.add_argument("--json", action="store_true", dest="as_json", help="Output as JSON")
    args = parser.parse_args(argv)

    setup_logging()

    repo = Path(args.target).resolve()
    if not repo.is_dir():
        print(f"Error: {repo} is not a directory", file=sys.stderr)
        return 1

    files = discover_workflow_files(repo)
    if not files:
        print("No workflow files found.", file=sys.stderr)
        return 1

    checker: GitCommitChecker = OfflineCommitChecker() if args.offline else GitHubCommitChecker()
    try:
        workflow_parser = WorkflowFileParser(files, checker, source_hostname=args.hostname)
        deps = workflow_parser.parse()
        _print_deps(deps, workflow_parser, args.as_json)
    except WorkflowParserError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        if isinstance(checker, GitHubCommitChecker):
            checker.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
