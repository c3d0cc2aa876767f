"""
Issue Handler for AI Issue Resolver.

Generate-PR workflow: turns a labeled issue into a branch, commits and a
pull request.
"""

import logging
from typing import Optional

from issue_resolver.analyzers.llm_analyzer import LLMAnalyzer
from issue_resolver.models.schemas import IssueContext
from issue_resolver.services.change_applier import ChangeSetApplier
from issue_resolver.services.github_service import GitHubService
from issue_resolver.services.telemetry import Telemetry
from issue_resolver.utils.helpers import format_no_changes, format_pr_description


class IssueHandler:
    """Generates a pull request for an issue."""

    def __init__(
        self,
        github_service: GitHubService,
        llm_analyzer: LLMAnalyzer,
        applier: Optional[ChangeSetApplier] = None,
        base_branch: str = "main",
        branch_prefix: str = "ai-pr/",
        pr_label: str = "ai-issue-resolver-pr",
        telemetry: Optional[Telemetry] = None,
    ) -> None:
        """
        Initialize the Issue Handler.

        Args:
            github_service: Repository collaborator.
            llm_analyzer: Model collaborator.
            applier: Change-set applier. Created from ``github_service`` if not provided.
            base_branch: Branch to start from and open the PR against.
            branch_prefix: Prefix of the generated branch name.
            pr_label: Label added to the PR; empty to skip labeling.
            telemetry: Event sink.
        """
        self._logger = logging.getLogger("issue_resolver.handlers.issue")
        self._github = github_service
        self._llm = llm_analyzer
        self._telemetry = telemetry or Telemetry(enabled=False)
        self._applier = applier or ChangeSetApplier(github_service, self._telemetry)
        self._base_branch = base_branch
        self._branch_prefix = branch_prefix
        self._pr_label = pr_label

    def branch_name(self, issue: IssueContext) -> str:
        """Branch created for an issue."""
        return f"{self._branch_prefix}{issue.number}"

    async def handle_issue(self, issue: IssueContext) -> Optional[int]:
        """
        Run the Generate-PR workflow.

        Args:
            issue: The labeled issue.

        Returns:
            Number of the opened pull request, or None if the model produced
            no usable changes (a comment is posted on the issue instead).
        """
        self._logger.info(f"Generating pull request for issue #{issue.number}: {issue.title}")

        with self._telemetry.timer("handle_issue"):
            analysis = await self._llm.analyze_issue(issue.body)
            changes = await self._llm.generate_code_changes(analysis)

            if not changes:
                self._logger.warning(f"No changes produced for issue #{issue.number}")
                await self._github.create_comment(issue.number, format_no_changes(issue.number))
                return None

            branch = self.branch_name(issue)
            await self._github.create_branch(branch, self._base_branch)
            await self._applier.apply(branch, changes)

            pr_number = await self._github.create_pull_request(
                title=f"AI: {issue.title}",
                body=format_pr_description(issue.number, changes, analysis),
                head=branch,
                base=self._base_branch,
            )
            if self._pr_label:
                await self._github.add_labels(pr_number, [self._pr_label])

        self._logger.info(f"Opened PR #{pr_number} for issue #{issue.number}")
        return pr_number
