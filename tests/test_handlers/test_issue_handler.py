"""
Tests for the Generate-PR workflow.
"""

import pytest

from issue_resolver.exceptions import ProviderError, RemoteError
from issue_resolver.handlers.issue_handler import IssueHandler


@pytest.fixture
def handler(mock_github_service, mock_llm_analyzer, telemetry) -> IssueHandler:
    return IssueHandler(mock_github_service, mock_llm_analyzer, telemetry=telemetry)


class TestIssueHandler:
    """Tests for IssueHandler class."""

    def test_branch_name(self, handler, sample_issue):
        """Test branch name derives from the issue number."""
        assert handler.branch_name(sample_issue) == "ai-pr/7"

    @pytest.mark.asyncio
    async def test_handle_issue(self, handler, sample_issue, mock_github_service, mock_llm_analyzer):
        """Test the full workflow from issue to labeled PR."""
        pr_number = await handler.handle_issue(sample_issue)

        assert pr_number == 13
        mock_llm_analyzer.analyze_issue.assert_awaited_once_with(sample_issue.body)
        mock_llm_analyzer.generate_code_changes.assert_awaited_once_with(
            "Add a zero check to divide()."
        )
        mock_github_service.create_branch.assert_awaited_once_with("ai-pr/7", "main")

        writes = mock_github_service.create_or_update_file.call_args_list
        assert [w.kwargs["path"] for w in writes] == ["src/calculator.py", "tests/test_calculator.py"]
        assert all(w.kwargs["branch"] == "ai-pr/7" for w in writes)
        assert writes[0].kwargs["message"] == "Guard against division by zero"

        pr_kwargs = mock_github_service.create_pull_request.call_args.kwargs
        assert pr_kwargs["title"] == "AI: Division by zero crashes calculator"
        assert pr_kwargs["head"] == "ai-pr/7"
        assert pr_kwargs["base"] == "main"
        assert pr_kwargs["body"].startswith("Resolves #7")

        mock_github_service.add_labels.assert_awaited_once_with(13, ["ai-issue-resolver-pr"])
        mock_github_service.create_comment.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_branch_created_before_writes(
        self, handler, sample_issue, mock_github_service
    ):
        """Test branch exists before the first commit and PR after the last."""
        await handler.handle_issue(sample_issue)

        calls = [c[0] for c in mock_github_service.mock_calls]
        assert calls.index("create_branch") < calls.index("create_or_update_file")
        last_write = len(calls) - 1 - calls[::-1].index("create_or_update_file")
        assert last_write < calls.index("create_pull_request")

    @pytest.mark.asyncio
    async def test_no_changes(self, handler, sample_issue, mock_github_service, mock_llm_analyzer):
        """Test no branch or PR when the model produced nothing."""
        mock_llm_analyzer.generate_code_changes.return_value = []

        result = await handler.handle_issue(sample_issue)

        assert result is None
        mock_github_service.create_branch.assert_not_awaited()
        mock_github_service.create_pull_request.assert_not_awaited()
        number, body = mock_github_service.create_comment.call_args.args
        assert number == 7
        assert "No pull request was opened." in body

    @pytest.mark.asyncio
    async def test_custom_base_and_prefix(self, mock_github_service, mock_llm_analyzer, sample_issue):
        """Test configured base branch and branch prefix."""
        handler = IssueHandler(
            mock_github_service,
            mock_llm_analyzer,
            base_branch="develop",
            branch_prefix="bot/",
            pr_label="",
        )

        await handler.handle_issue(sample_issue)

        mock_github_service.create_branch.assert_awaited_once_with("bot/7", "develop")
        assert mock_github_service.create_pull_request.call_args.kwargs["base"] == "develop"
        mock_github_service.add_labels.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_existing_branch_aborts(self, handler, sample_issue, mock_github_service):
        """Test branch creation failure stops the workflow."""
        mock_github_service.create_branch.side_effect = RemoteError("Reference already exists", 422)

        with pytest.raises(RemoteError):
            await handler.handle_issue(sample_issue)

        mock_github_service.create_or_update_file.assert_not_awaited()
        mock_github_service.create_pull_request.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_provider_failure_propagates(self, handler, sample_issue, mock_llm_analyzer, mock_github_service):
        """Test model errors stop the workflow before any write."""
        mock_llm_analyzer.analyze_issue.side_effect = ProviderError("unauthorized")

        with pytest.raises(ProviderError):
            await handler.handle_issue(sample_issue)

        mock_github_service.create_branch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_timed(self, handler, sample_issue, telemetry):
        """Test workflow duration is recorded."""
        await handler.handle_issue(sample_issue)

        operations = [e.properties.get("operation") for e in telemetry.events if e.name == "operation_end"]
        assert operations == ["handle_issue"]
