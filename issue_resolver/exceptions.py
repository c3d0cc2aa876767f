"""
Exception hierarchy for AI Issue Resolver.

Parse failures (ExtractionError, SchemaValidationError) are expected and get
downgraded by the LLM analyzer. Everything else propagates to the entry point.
"""

from typing import Any, Optional


class IssueResolverError(Exception):
    """Base class for all resolver errors."""


class ConfigurationError(IssueResolverError):
    """Required configuration or event payload is missing or unreadable."""


class ExtractionError(IssueResolverError):
    """No parseable JSON could be recovered from a model response."""

    def __init__(self, raw_text: Optional[str], message: str = "No JSON found in model response") -> None:
        super().__init__(message)
        self.raw_text = raw_text


class SchemaValidationError(IssueResolverError):
    """
    Extracted JSON does not match the expected shape.

    Attributes:
        errors: One entry per failing field, each with ``loc`` (dotted path),
            ``msg`` and ``type``.
    """

    def __init__(self, shape_name: str, errors: list[dict[str, Any]]) -> None:
        self.shape_name = shape_name
        self.errors = errors
        paths = ", ".join(e["loc"] or "<root>" for e in errors)
        super().__init__(f"Response does not match {shape_name}: {paths}")

    @property
    def paths(self) -> list[str]:
        """Field paths that failed validation."""
        return [e["loc"] for e in self.errors]


class ProviderError(IssueResolverError):
    """The model provider call failed (auth, rate limit, timeout, config)."""


class RemoteError(IssueResolverError):
    """A GitHub REST call failed."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RemoteNotFound(RemoteError):
    """A branch, pull request or file is absent."""


class RemoteWriteConflict(RemoteError):
    """A file write was rejected because its sha no longer matches the branch."""
