"""actiondeps — extract GitHub Actions dependencies from workflow manifests."""

__version__ = "0.1.0"
