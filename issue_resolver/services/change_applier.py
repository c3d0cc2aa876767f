"""
Change-Set Applier for AI Issue Resolver.

Commits validated code changes to a branch, one commit per change.
"""

import logging
from typing import Optional

from issue_resolver.models.schemas import CodeChange
from issue_resolver.services.github_service import GitHubService
from issue_resolver.services.telemetry import Telemetry


class ChangeSetApplier:
    """
    Applies an ordered change-set to a branch.

    Changes are written strictly in input order and one at a time, so commit
    order on the branch matches the change-set. The existence lookup and the
    write are not atomic; a concurrent writer surfaces as RemoteWriteConflict
    from the write and is not retried.
    """

    def __init__(
        self,
        github_service: GitHubService,
        telemetry: Optional[Telemetry] = None,
    ) -> None:
        self._logger = logging.getLogger("issue_resolver.change_applier")
        self._github = github_service
        self._telemetry = telemetry or Telemetry(enabled=False)

    async def apply(
        self,
        branch: str,
        changes: list[CodeChange],
        message_prefix: str = "",
    ) -> None:
        """
        Commit each change to ``branch``.

        Args:
            branch: Target branch.
            changes: Validated changes, in commit order.
            message_prefix: Prepended to every commit message.
        """
        self._logger.info(f"Applying {len(changes)} change(s) to {branch}")

        for change in changes:
            message = f"{message_prefix}{change.message}"
            existing = await self._github.get_content(change.path, branch)

            if existing is None:
                self._logger.info(f"Creating {change.path}")
                await self._github.create_or_update_file(
                    path=change.path,
                    content=change.content,
                    message=message,
                    branch=branch,
                )
            else:
                self._logger.info(f"Updating {change.path} ({existing.sha[:7]})")
                await self._github.create_or_update_file(
                    path=change.path,
                    content=change.content,
                    message=message,
                    branch=branch,
                    sha=existing.sha,
                )

        self._telemetry.log_performance_metric("changes_applied", float(len(changes)), branch=branch)
