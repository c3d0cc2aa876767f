"""
Pytest fixtures for AI Issue Resolver tests.

Provides reusable test fixtures, mocks, and sample data.
"""

import json
from unittest.mock import AsyncMock

import pytest

from issue_resolver.analyzers.llm_analyzer import LLMAnalyzer
from issue_resolver.config import Settings, get_settings
from issue_resolver.models.schemas import CodeChange, CommentContext, IssueContext
from issue_resolver.services.github_service import (
    GitHubService,
    PRFile,
    PullRequest,
    RemoteFile,
)
from issue_resolver.services.telemetry import Telemetry

ENV_VARS = [
    "GITHUB_TOKEN",
    "INPUT_GITHUB-TOKEN",
    "INPUT_GITHUB_TOKEN",
    "MODEL_API_KEY",
    "OPENAI_API_KEY",
    "INPUT_MODEL-API-KEY",
    "INPUT_MODEL_API_KEY",
    "INPUT_MODEL-NAME",
    "INPUT_MODEL-PROVIDER",
    "MODEL_PROVIDER",
    "MODEL_NAME",
    "MODEL_API_BASE",
    "INPUT_MODEL-API-BASE",
    "LOG_LEVEL",
    "GITHUB_REPOSITORY",
    "GITHUB_EVENT_NAME",
    "GITHUB_EVENT_PATH",
    "GITHUB_API_URL",
]

SAMPLE_CHANGES = [
    {
        "path": "src/calculator.py",
        "content": "def divide(a, b):\n    if b == 0:\n        raise ValueError('b is zero')\n    return a / b\n",
        "message": "Guard against division by zero",
    },
    {
        "path": "tests/test_calculator.py",
        "content": "def test_divide():\n    assert divide(4, 2) == 2\n",
        "message": "Add divide test",
    },
]

SAMPLE_REVIEW = {
    "qualityIssues": [
        {
            "type": "complexity",
            "file": "src/calculator.py",
            "description": "Nested conditionals",
            "suggestion": "Use early returns",
            "severity": "medium",
        }
    ],
    "securityIssues": [
        {
            "type": "injection",
            "file": "src/db.py",
            "description": "Query built with string formatting",
            "severity": "critical",
            "remediation": "Use parameterized queries",
        }
    ],
    "improvements": [
        {
            "file": "src/calculator.py",
            "description": "Missing type hints",
            "suggestion": "Annotate parameters",
        }
    ],
    "testingSuggestions": [
        {
            "file": "src/calculator.py",
            "description": "Division edge cases",
            "testCases": ["divide by zero", "negative numbers"],
        }
    ],
}


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's environment out of settings."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def mock_settings() -> Settings:
    """Provide settings with every required input set."""
    return Settings(
        github_token="test-github-token",
        model_api_key="test-api-key",
        github_repository="octocat/hello-world",
        log_level="DEBUG",
    )


@pytest.fixture
def telemetry() -> Telemetry:
    """Provide an enabled telemetry sink."""
    return Telemetry()


@pytest.fixture
def sample_changes() -> list[CodeChange]:
    """Provide validated code changes."""
    return [CodeChange(**c) for c in SAMPLE_CHANGES]


@pytest.fixture
def sample_review_json() -> str:
    """Provide a review response as the model would return it."""
    return json.dumps(SAMPLE_REVIEW)


@pytest.fixture
def sample_issue() -> IssueContext:
    """Provide a labeled issue."""
    return IssueContext(
        number=7,
        title="Division by zero crashes calculator",
        body="Calling divide(1, 0) raises ZeroDivisionError.",
        labels=[{"name": "ai-issue-resolver-pr"}],
    )


@pytest.fixture
def sample_comment() -> CommentContext:
    """Provide a comment on PR #12."""
    return CommentContext(
        body="/ai-issue-resolver-change add null check",
        issue_url="https://api.github.com/repos/octocat/hello-world/issues/12",
    )


@pytest.fixture
def sample_pr() -> PullRequest:
    """Provide pull request details."""
    return PullRequest(
        number=12,
        title="AI: Division by zero crashes calculator",
        body="Resolves #7",
        state="open",
        head_ref="ai-pr/7",
        base_ref="main",
        html_url="https://github.com/octocat/hello-world/pull/12",
    )


@pytest.fixture
def sample_pr_files() -> list[PRFile]:
    """Provide files changed in a pull request."""
    return [
        PRFile(
            filename="src/calculator.py",
            status="modified",
            additions=3,
            deletions=1,
            changes=4,
            patch="@@ -1,2 +1,4 @@",
        ),
        PRFile(
            filename="old.py",
            status="removed",
            additions=0,
            deletions=10,
            changes=10,
        ),
    ]


@pytest.fixture
def mock_github_service(sample_pr, sample_pr_files) -> GitHubService:
    """Provide a GitHub service mock with canned responses."""
    service = AsyncMock(spec=GitHubService)
    service.get_content.return_value = None
    service.get_pull_request.return_value = sample_pr
    service.list_pr_files.return_value = sample_pr_files
    service.get_file_text.return_value = "def divide(a, b):\n    return a / b\n"
    service.create_pull_request.return_value = 13
    service.create_branch.return_value = "abc1234def"
    return service


@pytest.fixture
def mock_llm_analyzer(sample_changes) -> LLMAnalyzer:
    """Provide an LLM analyzer mock with canned responses."""
    analyzer = AsyncMock(spec=LLMAnalyzer)
    analyzer.analyze_issue.return_value = "Add a zero check to divide()."
    analyzer.generate_code_changes.return_value = sample_changes
    analyzer.generate_changes_from_feedback.return_value = sample_changes
    analyzer.analyze_security.return_value = "No obvious vulnerabilities."
    return analyzer


@pytest.fixture
def existing_file() -> RemoteFile:
    """Provide a file that exists on the branch."""
    return RemoteFile(path="src/calculator.py", sha="f00dbabe1234")
