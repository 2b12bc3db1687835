"""Representative package-manager version for the GitHub Actions ecosystem."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from actiondeps.engines.workflow_parser.models import PackageManager
from actiondeps.engines.workflow_parser.reference import match_reference

NO_DEPENDENCY_NAME = "unknown"
NO_VERSION = "0.0.0"


def select_package_manager(uses_lists: Iterable[list[str]]) -> PackageManager:
    """Pick the first reference matching the grammar across all manifests.

    *uses_lists* holds each manifest's raw ``uses`` strings in file order.
    The match yields ``use_name=owner/repo`` and the raw ref as version;
    with no match anywhere the ``unknown@0.0.0`` placeholder is used.
    """
    for uses in uses_lists:
        for raw in uses:
            match = match_reference(raw)
            if match is not None:
                return PackageManager(use_name=match.name, version=match.ref)
    return PackageManager(use_name=NO_DEPENDENCY_NAME, version=NO_VERSION)


def describe(package_manager: PackageManager) -> dict[str, Any]:
    return {
        "name": package_manager.name,
        "use_name": package_manager.use_name,
        "version": package_manager.version,
        "deprecated": package_manager.deprecated,
        "unsupported": package_manager.unsupported,
    }
