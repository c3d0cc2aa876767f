"""
Models package for AI Issue Resolver.

Contains Pydantic models for model responses and event payloads.
"""

from issue_resolver.models.schemas import (
    CodeChange,
    CommentContext,
    EventPayload,
    Improvement,
    IssueContext,
    Label,
    QualityIssue,
    ReviewFeedback,
    SecurityIssue,
    TestingSuggestion,
)

__all__ = [
    "CodeChange",
    "ReviewFeedback",
    "QualityIssue",
    "SecurityIssue",
    "Improvement",
    "TestingSuggestion",
    "IssueContext",
    "CommentContext",
    "EventPayload",
    "Label",
]
