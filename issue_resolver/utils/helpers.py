"""
Helper utilities for AI Issue Resolver.

Markdown rendering for comments and pull request descriptions, plus small
parsing helpers. All functions are pure.
"""

import re
from typing import Optional

from issue_resolver.models.schemas import CodeChange, ReviewFeedback


def parse_issue_number(issue_url: str) -> Optional[int]:
    """
    Extract the issue or PR number from an API or HTML URL.

    Supports formats:
    - https://api.github.com/repos/owner/repo/issues/123
    - https://github.com/owner/repo/pull/123

    Args:
        issue_url: URL ending in the number.

    Returns:
        The number, or None if the URL does not end in one.
    """
    match = re.search(r"/(\d+)/?$", issue_url.strip())
    if not match:
        return None
    return int(match.group(1))


def match_command(body: str, token: str) -> Optional[str]:
    """
    Match a comment body against a command token.

    A plain prefix match: whatever follows the token, punctuation included,
    is the remainder. Callers with overlapping tokens try the longer one first.

    Args:
        body: Comment body.
        token: Command token.

    Returns:
        The trimmed remainder after the token, or None if the body does not
        start with the token.
    """
    if not body.startswith(token):
        return None
    return body[len(token):].strip()


def truncate_string(
    text: str,
    max_length: int = 500,
    suffix: str = "...",
) -> str:
    """
    Truncate a string to a maximum length.

    Args:
        text: The text to truncate.
        max_length: Maximum length including suffix.
        suffix: Suffix to append when truncated.

    Returns:
        Truncated string.
    """
    if len(text) <= max_length:
        return text

    return text[: max_length - len(suffix)] + suffix


def format_code_review(
    review: ReviewFeedback,
    security_analysis: str,
    change_command: str = "/ai-issue-resolver-change",
) -> str:
    """
    Render review feedback as a PR comment.

    Args:
        review: Validated review feedback.
        security_analysis: Free-form security narrative.
        change_command: Command token advertised in the footer.

    Returns:
        Markdown comment body.
    """
    quality = "\n".join(
        f"- **{issue.file}** ({issue.type}, Severity: {issue.severity})\n"
        f"  - {issue.description}\n"
        f"  - 💡 Suggestion: {issue.suggestion}"
        for issue in review.quality_issues
    )

    security = "\n".join(
        f"- **{issue.file}** ({issue.type}, Severity: {issue.severity})\n"
        f"  - {issue.description}\n"
        f"  - 🛠️ Remediation: {issue.remediation}"
        for issue in review.security_issues
    )

    improvements = "\n".join(
        f"- **{imp.file}**\n"
        f"  - {imp.description}\n"
        f"  - 💡 {imp.suggestion}"
        for imp in review.improvements
    )

    testing_parts = []
    for test in review.testing_suggestions:
        cases = "\n".join(f"    - {case}" for case in test.test_cases)
        entry = f"- **{test.file}**\n  - {test.description}"
        if cases:
            entry += f"\n  - Test Cases:\n{cases}"
        testing_parts.append(entry)
    testing = "\n".join(testing_parts)

    none_found = "_None found._"
    security_section = "\n\n".join(p for p in (security, security_analysis.strip()) if p)

    return (
        "## 🤖 AI Code Review\n\n"
        f"### 🎯 Quality Issues\n{quality or none_found}\n\n"
        f"### 🔒 Security Analysis\n{security_section or none_found}\n\n"
        f"### ✨ Suggested Improvements\n{improvements or none_found}\n\n"
        f"### 🧪 Testing Suggestions\n{testing or none_found}\n\n"
        "---\n"
        f"To request specific changes, use `{change_command}` followed by your request."
    )


def format_pr_description(
    issue_number: int,
    changes: list[CodeChange],
    analysis: str,
) -> str:
    """
    Render the description of a generated pull request.

    Args:
        issue_number: Issue the PR resolves.
        changes: Changes committed to the PR branch.
        analysis: Issue analysis produced by the model.

    Returns:
        Markdown PR body.
    """
    change_list = "\n".join(f"- `{c.path}`: {c.message}" for c in changes)
    return (
        f"Resolves #{issue_number}\n\n"
        "## Analysis\n\n"
        f"{analysis.strip() or '_No analysis provided._'}\n\n"
        "## Changes\n\n"
        f"{change_list or '_No changes._'}\n\n"
        "---\n"
        "_This pull request was generated automatically. Review it carefully before merging._"
    )


def format_applied_changes(changes: list[CodeChange]) -> str:
    """Render the comment posted after applying requested changes."""
    if not changes:
        return "No changes were produced for this request."
    return "Applied requested changes:\n\n" + "\n".join(f"* {c.message}" for c in changes)


def format_no_changes(issue_number: int) -> str:
    """Render the comment posted when no changes could be generated for an issue."""
    return (
        f"Could not generate code changes for #{issue_number}. "
        "No pull request was opened."
    )
