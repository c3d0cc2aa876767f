"""
Command Dispatcher for AI Issue Resolver.

Classifies an inbound event into one of the supported workflows and invokes
it. Stateless: every event is classified on its own.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from issue_resolver.handlers.issue_handler import IssueHandler
from issue_resolver.handlers.pr_handler import PRHandler
from issue_resolver.models.schemas import CommentContext, EventPayload, IssueContext
from issue_resolver.utils.helpers import match_command


class Workflow(str, Enum):
    """Workflows an event can start."""

    GENERATE_PR = "generate_pr"
    APPLY_FEEDBACK = "apply_feedback"
    REVIEW = "review"


@dataclass
class Dispatch:
    """Outcome of classifying an event."""

    workflow: Workflow
    issue: Optional[IssueContext] = None
    comment: Optional[CommentContext] = None
    feedback: str = ""


class CommandDispatcher:
    """
    Routes events to workflows.

    Rules, in priority order:
    - ``issues`` ``labeled`` with the trigger label -> Generate-PR
    - ``issue_comment`` starting with the change token -> Apply-Feedback
    - ``issue_comment`` starting with the review token -> Review
    - anything else -> no-op

    When one command token is a prefix of the other, the longer token is
    tried first.
    """

    def __init__(
        self,
        issue_handler: IssueHandler,
        pr_handler: PRHandler,
        trigger_label: str = "ai-issue-resolver-pr",
        change_command: str = "/ai-issue-resolver-change",
        review_command: str = "/ai-issue-resolver-review",
    ) -> None:
        self._logger = logging.getLogger("issue_resolver.dispatcher")
        self._issue_handler = issue_handler
        self._pr_handler = pr_handler
        self._trigger_label = trigger_label
        # sorted() is stable: change wins over review on equal length.
        self._commands = sorted(
            [
                (change_command, Workflow.APPLY_FEEDBACK),
                (review_command, Workflow.REVIEW),
            ],
            key=lambda item: len(item[0]),
            reverse=True,
        )

    def _is_trigger(self, event: EventPayload) -> bool:
        """
        Check an ``issues`` event for the trigger label being applied.

        Only ``labeled`` counts, and only when the label just added is the
        trigger label. Other actions on an issue that already carries it
        (edited, reopened, another label added) are ignored.
        """
        if event.issue is None or not event.issue.has_label(self._trigger_label):
            return False
        if event.action is None:
            return True
        if event.action != "labeled":
            return False
        return event.label is None or event.label.name == self._trigger_label

    def classify(self, event: EventPayload) -> Optional[Dispatch]:
        """
        Select the workflow for an event.

        Args:
            event: Inbound event.

        Returns:
            The dispatch decision, or None if the event is not handled.
        """
        if event.event_name == "issues":
            if self._is_trigger(event):
                return Dispatch(workflow=Workflow.GENERATE_PR, issue=event.issue)
            return None

        if event.event_name == "issue_comment" and event.comment is not None:
            for token, workflow in self._commands:
                remainder = match_command(event.comment.body, token)
                if remainder is not None:
                    return Dispatch(
                        workflow=workflow,
                        issue=event.issue,
                        comment=event.comment,
                        feedback=remainder if workflow == Workflow.APPLY_FEEDBACK else "",
                    )

        return None

    async def dispatch(self, event: EventPayload) -> Optional[Dispatch]:
        """
        Classify an event and run the matching workflow.

        Args:
            event: Inbound event.

        Returns:
            The dispatch that ran, or None for an ignored event.
        """
        decision = self.classify(event)
        if decision is None:
            self._logger.info(f"No workflow for {event.event_name} event; nothing to do")
            return None

        self._logger.info(f"Dispatching {event.event_name} event to {decision.workflow.value}")

        if decision.workflow == Workflow.GENERATE_PR:
            await self._issue_handler.handle_issue(decision.issue)
        elif decision.workflow == Workflow.APPLY_FEEDBACK:
            await self._pr_handler.handle_change_request(decision.comment, decision.feedback)
        else:
            await self._pr_handler.handle_review_request(decision.comment)

        return decision
