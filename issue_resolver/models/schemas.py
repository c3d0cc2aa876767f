"""
Pydantic schemas for AI Issue Resolver.

Defines the shapes the model is asked to produce (code changes and review
feedback) and the parts of the GitHub event payload the workflows read.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator

Severity = Literal["low", "medium", "high"]
SecuritySeverity = Literal["low", "medium", "high", "critical"]
QualityIssueType = Literal["performance", "maintainability", "complexity"]


class ResponseModel(BaseModel):
    """
    Base for shapes parsed out of model responses.

    String fields are strict (a number is not coerced to a string) and unknown
    keys are ignored. Aliased fields are only read by alias, so a snake_case
    key never stands in for a required camelCase one.
    """

    model_config = ConfigDict(extra="ignore")


class CodeChange(ResponseModel):
    """
    A single file write instruction.

    Attributes:
        path: Repository-relative file path.
        content: Full new content of the file.
        message: Commit message for the write.
    """

    path: StrictStr = Field(..., min_length=1, description="Repository-relative file path")
    content: StrictStr = Field(..., description="Full file content")
    message: StrictStr = Field(..., min_length=1, description="Commit message")

    @field_validator("path", mode="after")
    @classmethod
    def validate_relative_path(cls, v: str) -> str:
        """Reject absolute paths."""
        if v.startswith("/"):
            raise ValueError("path must be relative to the repository root")
        return v


class QualityIssue(ResponseModel):
    """Code quality finding."""

    type: QualityIssueType
    file: StrictStr
    description: StrictStr
    suggestion: StrictStr
    severity: Severity


class SecurityIssue(ResponseModel):
    """Security finding."""

    type: StrictStr
    file: StrictStr
    description: StrictStr
    severity: SecuritySeverity
    remediation: StrictStr


class Improvement(ResponseModel):
    """Suggested improvement."""

    file: StrictStr
    description: StrictStr
    suggestion: StrictStr


class TestingSuggestion(ResponseModel):
    """Suggested tests for a file."""

    __test__ = False

    file: StrictStr
    description: StrictStr
    test_cases: list[StrictStr] = Field(..., alias="testCases")


class ReviewFeedback(ResponseModel):
    """
    Structured result of one code review call.

    All four lists are required; any of them may be empty.
    """

    quality_issues: list[QualityIssue] = Field(..., alias="qualityIssues")
    security_issues: list[SecurityIssue] = Field(..., alias="securityIssues")
    improvements: list[Improvement] = Field(...)
    testing_suggestions: list[TestingSuggestion] = Field(..., alias="testingSuggestions")

    @classmethod
    def empty(cls) -> "ReviewFeedback":
        """Feedback with all lists empty."""
        return cls.model_validate(
            {
                "qualityIssues": [],
                "securityIssues": [],
                "improvements": [],
                "testingSuggestions": [],
            }
        )

    @property
    def is_empty(self) -> bool:
        """True if no list has entries."""
        return not (
            self.quality_issues
            or self.security_issues
            or self.improvements
            or self.testing_suggestions
        )


class Label(BaseModel):
    """Issue label."""

    name: str


class IssueContext(BaseModel):
    """
    Issue section of an ``issues`` or ``issue_comment`` event.

    Attributes:
        number: Issue or pull request number.
        title: Issue title.
        body: Issue body; ``null`` in the payload becomes an empty string.
        labels: Labels on the issue.
        pull_request: Present when the issue is a pull request.
    """

    model_config = ConfigDict(extra="ignore")

    number: int = Field(..., ge=1)
    title: str = ""
    body: str = ""
    labels: list[Label] = Field(default_factory=list)
    pull_request: Optional[dict] = None

    @field_validator("body", "title", mode="before")
    @classmethod
    def normalize_null(cls, v: Optional[str]) -> str:
        """GitHub sends null for empty bodies."""
        return "" if v is None else v

    @property
    def label_names(self) -> set[str]:
        """Names of all labels on the issue."""
        return {label.name for label in self.labels}

    def has_label(self, name: str) -> bool:
        """Check whether the issue carries a label."""
        return name in self.label_names


class CommentContext(BaseModel):
    """Comment section of an ``issue_comment`` event."""

    model_config = ConfigDict(extra="ignore")

    body: str = ""
    issue_url: str = ""

    @field_validator("body", mode="before")
    @classmethod
    def normalize_null(cls, v: Optional[str]) -> str:
        """GitHub sends null for empty bodies."""
        return "" if v is None else v


class EventPayload(BaseModel):
    """
    Inbound event as seen by the dispatcher.

    Attributes:
        event_name: ``issues`` or ``issue_comment``; other names are ignored.
        action: Event action (``labeled``, ``created``, ...), if present.
        label: Label added or removed by a ``labeled`` or ``unlabeled`` action.
        issue: Issue section, if present.
        comment: Comment section, if present.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    event_name: str = Field(..., alias="eventName")
    action: Optional[str] = None
    label: Optional[Label] = None
    issue: Optional[IssueContext] = None
    comment: Optional[CommentContext] = None

    @classmethod
    def from_github(cls, event_name: str, payload: dict) -> "EventPayload":
        """Build from an event name and the raw webhook JSON."""
        return cls.model_validate({**payload, "eventName": event_name})
