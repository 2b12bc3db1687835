"""Exceptions raised by the workflow parser engine."""


class WorkflowParserError(Exception):
    """Base exception for all workflow parser errors."""


class DependencyFileNotParseable(WorkflowParserError):
    """Raised when a manifest's YAML cannot be loaded.

    Aborts the whole parse run; no partial dependency set is returned.
    """

    def __init__(self, file_path: str, message: str | None = None):
        self.file_path = file_path
        super().__init__(message or f"{file_path} is not a parseable workflow file")


class MissingManifestsError(WorkflowParserError):
    """Raised before parsing when no workflow files were supplied."""
