"""
PR Handler for AI Issue Resolver.

Apply-Feedback and Review workflows, started by command comments on a
pull request.
"""

import logging
from dataclasses import asdict
from typing import Any, Optional

from issue_resolver.analyzers.llm_analyzer import LLMAnalyzer
from issue_resolver.exceptions import RemoteNotFound
from issue_resolver.models.schemas import CodeChange, CommentContext, ReviewFeedback
from issue_resolver.services.change_applier import ChangeSetApplier
from issue_resolver.services.github_service import GitHubService, PullRequest
from issue_resolver.services.telemetry import Telemetry
from issue_resolver.utils.helpers import (
    format_applied_changes,
    format_code_review,
    parse_issue_number,
    truncate_string,
)

FEEDBACK_COMMIT_PREFIX = "AI Update: "
MAX_FILE_CHARS = 20_000


class PRHandler:
    """Handles change and review requests on a pull request."""

    def __init__(
        self,
        github_service: GitHubService,
        llm_analyzer: LLMAnalyzer,
        applier: Optional[ChangeSetApplier] = None,
        change_command: str = "/ai-issue-resolver-change",
        telemetry: Optional[Telemetry] = None,
    ) -> None:
        """
        Initialize the PR Handler.

        Args:
            github_service: Repository collaborator.
            llm_analyzer: Model collaborator.
            applier: Change-set applier. Created from ``github_service`` if not provided.
            change_command: Command token advertised in review comments.
            telemetry: Event sink.
        """
        self._logger = logging.getLogger("issue_resolver.handlers.pr")
        self._github = github_service
        self._llm = llm_analyzer
        self._telemetry = telemetry or Telemetry(enabled=False)
        self._applier = applier or ChangeSetApplier(github_service, self._telemetry)
        self._change_command = change_command

    async def _get_pull_request(self, comment: CommentContext) -> PullRequest:
        number = parse_issue_number(comment.issue_url)
        if number is None:
            raise RemoteNotFound(f"No pull request number in {comment.issue_url!r}")
        return await self._github.get_pull_request(number)

    async def _collect_files(self, pr: PullRequest, with_content: bool) -> list[dict[str, Any]]:
        """Changed files as plain dicts, optionally with their content on the head branch."""
        files = []
        for pr_file in await self._github.list_pr_files(pr.number):
            entry = asdict(pr_file)
            if with_content and pr_file.status != "removed":
                content = await self._github.get_file_text(pr_file.filename, pr.head_ref)
                if content is not None:
                    entry["content"] = truncate_string(content, MAX_FILE_CHARS)
            files.append(entry)
        return files

    async def handle_change_request(self, comment: CommentContext, feedback: str) -> list[CodeChange]:
        """
        Run the Apply-Feedback workflow.

        Args:
            comment: Comment that carried the change command.
            feedback: Comment text after the command token, trimmed.

        Returns:
            The changes committed to the PR head branch.
        """
        pr = await self._get_pull_request(comment)
        self._logger.info(f"Applying feedback to PR #{pr.number} on {pr.head_ref}")

        with self._telemetry.timer("handle_change_request"):
            files = await self._collect_files(pr, with_content=True)
            changes = await self._llm.generate_changes_from_feedback(
                feedback=feedback,
                files=files,
                pr_context={
                    "number": pr.number,
                    "title": pr.title,
                    "body": pr.body or "",
                    "head": pr.head_ref,
                    "base": pr.base_ref,
                },
            )

            await self._applier.apply(pr.head_ref, changes, message_prefix=FEEDBACK_COMMIT_PREFIX)
            await self._github.create_comment(pr.number, format_applied_changes(changes))

        return changes

    async def handle_review_request(self, comment: CommentContext) -> ReviewFeedback:
        """
        Run the Review workflow.

        Args:
            comment: Comment that carried the review command.

        Returns:
            The feedback that was posted.
        """
        pr = await self._get_pull_request(comment)
        self._logger.info(f"Reviewing PR #{pr.number}")

        with self._telemetry.timer("handle_review_request"):
            files = await self._collect_files(pr, with_content=False)
            review = await self._llm.review_code(files)
            security_analysis = await self._llm.analyze_security(files)

            await self._github.create_comment(
                pr.number,
                format_code_review(review, security_analysis, self._change_command),
            )

        return review
