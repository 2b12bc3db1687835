"""Load workflow YAML and collect the ``uses`` strings it declares."""

from __future__ import annotations

from typing import Any

import yaml

from actiondeps.engines.workflow_parser.errors import DependencyFileNotParseable
from actiondeps.engines.workflow_parser.models import DependencyFile

JOBS_KEY = "jobs"
RUNS_KEY = "runs"
USES_KEY = "uses"
STEPS_KEY = "steps"


class WorkflowLoader(yaml.SafeLoader):
    """SafeLoader that keeps impossible implicit dates (``2024-13-45``) as strings."""


def _construct_timestamp(loader: WorkflowLoader, node: yaml.ScalarNode) -> Any:
    try:
        return yaml.SafeLoader.construct_yaml_timestamp(loader, node)
    except ValueError:
        return loader.construct_scalar(node)


WorkflowLoader.add_constructor("tag:yaml.org,2002:timestamp", _construct_timestamp)


def _has_cycle(node: Any, active: frozenset[int] = frozenset()) -> bool:
    """True if a self-referencing alias makes *node* contain itself."""
    if not isinstance(node, (dict, list)):
        return False
    if id(node) in active:
        return True
    active = active | {id(node)}
    children = node.values() if isinstance(node, dict) else node
    return any(_has_cycle(child, active) for child in children)


def load_manifest(file: DependencyFile) -> Any:
    """Parse *file* with :class:`WorkflowLoader`.

    Returns None for empty content. Syntax errors, disallowed or invalid
    tags and bad or recursive aliases raise :class:`DependencyFileNotParseable`.
    """
    if not file.content:
        return None
    try:
        document = yaml.load(file.content, Loader=WorkflowLoader)
    except (yaml.YAMLError, ValueError, TypeError) as exc:
        raise DependencyFileNotParseable(file.path) from exc
    if _has_cycle(document):
        raise DependencyFileNotParseable(file.path, f"{file.path} contains a recursive alias")
    return document


def manifest_root(document: Any) -> Any:
    """Return the subtree holding steps: ``jobs`` for workflows, ``runs`` for composite actions."""
    if not isinstance(document, dict):
        return None
    if JOBS_KEY in document:
        return document[JOBS_KEY]
    return document.get(RUNS_KEY)


def deep_fetch_uses(node: Any) -> list[str]:
    """Depth-first walk collecting ``uses`` values in document order.

    A mapping with ``uses`` yields that value and is not descended into.
    A mapping with ``steps`` is searched only under ``steps``; its other
    keys (``with``, ``env``, ``if``...) are ignored.
    """
    if isinstance(node, dict):
        if USES_KEY in node:
            value = node[USES_KEY]
            return [value] if isinstance(value, str) else []
        if STEPS_KEY in node:
            return deep_fetch_uses(node[STEPS_KEY])
        found: list[str] = []
        for value in node.values():
            found.extend(deep_fetch_uses(value))
        return found

    if isinstance(node, list):
        found = []
        for item in node:
            found.extend(deep_fetch_uses(item))
        return found

    return []


def extract_uses(document: Any) -> list[str]:
    """Unique ``uses`` strings of a loaded manifest, first occurrence wins."""
    return list(dict.fromkeys(deep_fetch_uses(manifest_root(document))))
