"""
Utilities package for AI Issue Resolver.

Contains markdown formatters and parsing helpers.
"""

from issue_resolver.utils.helpers import (
    format_applied_changes,
    format_code_review,
    format_no_changes,
    format_pr_description,
    match_command,
    parse_issue_number,
    truncate_string,
)

__all__ = [
    "format_applied_changes",
    "format_code_review",
    "format_no_changes",
    "format_pr_description",
    "match_command",
    "parse_issue_number",
    "truncate_string",
]
