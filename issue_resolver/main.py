"""
GitHub Action entry point for AI Issue Resolver.

Reads configuration and the event payload, wires the collaborators together
and dispatches the event. Any uncaught error fails the run with its message.
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from issue_resolver import __version__
from issue_resolver.analyzers.llm_analyzer import LLMAnalyzer
from issue_resolver.config import Settings, get_settings, setup_logging
from issue_resolver.dispatcher import CommandDispatcher, Dispatch
from issue_resolver.exceptions import ConfigurationError
from issue_resolver.handlers.issue_handler import IssueHandler
from issue_resolver.handlers.pr_handler import PRHandler
from issue_resolver.models.schemas import EventPayload
from issue_resolver.services.change_applier import ChangeSetApplier
from issue_resolver.services.github_service import GitHubService
from issue_resolver.services.telemetry import Telemetry

logger = logging.getLogger("issue_resolver.main")


def load_event(event_name: str, event_path: str) -> EventPayload:
    """
    Load the inbound event.

    Args:
        event_name: Event name (``GITHUB_EVENT_NAME``).
        event_path: Path to the webhook JSON (``GITHUB_EVENT_PATH``).

    Returns:
        Parsed event payload.

    Raises:
        ConfigurationError: If the name or path is missing or the file is unreadable.
    """
    if not event_name:
        raise ConfigurationError("Event name not provided (GITHUB_EVENT_NAME)")
    if not event_path:
        raise ConfigurationError("Event payload path not provided (GITHUB_EVENT_PATH)")

    try:
        payload = json.loads(Path(event_path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot read event payload {event_path}: {e}") from e

    try:
        return EventPayload.from_github(event_name, payload)
    except ValidationError as e:
        raise ConfigurationError(f"Malformed {event_name} payload: {e}") from e


def check_settings(settings: Settings) -> None:
    """
    Verify required inputs are present.

    Raises:
        ConfigurationError: Naming the first missing input.
    """
    if not settings.is_github_configured:
        raise ConfigurationError("Input required and not supplied: github-token")
    if not settings.is_model_configured:
        raise ConfigurationError("Input required and not supplied: model-api-key")
    if not settings.github_repository:
        raise ConfigurationError("Repository not provided (GITHUB_REPOSITORY)")


def build_dispatcher(settings: Settings, telemetry: Telemetry) -> CommandDispatcher:
    """Construct the dispatcher and every collaborator it needs."""
    github_service = GitHubService(
        token=settings.github_token,
        repository=settings.github_repository,
        api_url=settings.github_api_url,
        timeout=settings.request_timeout,
        telemetry=telemetry,
    )
    llm_analyzer = LLMAnalyzer(
        api_key=settings.model_api_key,
        model=settings.model_name,
        provider=settings.model_provider,
        temperature=settings.model_temperature,
        max_tokens=settings.model_max_tokens,
        base_url=settings.model_api_base,
        telemetry=telemetry,
    )
    applier = ChangeSetApplier(github_service, telemetry)

    return CommandDispatcher(
        issue_handler=IssueHandler(
            github_service,
            llm_analyzer,
            applier=applier,
            base_branch=settings.base_branch,
            branch_prefix=settings.branch_prefix,
            pr_label=settings.pr_label,
            telemetry=telemetry,
        ),
        pr_handler=PRHandler(
            github_service,
            llm_analyzer,
            applier=applier,
            change_command=settings.change_command,
            telemetry=telemetry,
        ),
        trigger_label=settings.trigger_label,
        change_command=settings.change_command,
        review_command=settings.review_command,
    )


async def run(
    settings: Settings,
    event: EventPayload,
    telemetry: Optional[Telemetry] = None,
) -> Optional[Dispatch]:
    """
    Handle one event.

    Args:
        settings: Resolved settings.
        event: Inbound event.
        telemetry: Event sink; a fresh one is created if not provided.

    Returns:
        The dispatch that ran, or None if the event was ignored.
    """
    check_settings(settings)
    telemetry = telemetry or Telemetry()
    dispatcher = build_dispatcher(settings, telemetry)
    return await dispatcher.dispatch(event)


def set_failed(message: str) -> None:
    """Report a failed run to the Actions runner."""
    # Workflow command data must escape %, CR and LF.
    escaped = message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
    print(f"::error::{escaped}", flush=True)


def main(argv: Optional[list[str]] = None) -> int:
    """
    Command-line entry point.

    Returns:
        Process exit code: 0 on success (including ignored events), 1 on failure.
    """
    parser = argparse.ArgumentParser(
        prog="issue-resolver",
        description="Resolve GitHub issues and review pull requests with an LLM.",
    )
    parser.add_argument("--event-name", help="Event name; defaults to GITHUB_EVENT_NAME")
    parser.add_argument("--event-path", help="Event payload file; defaults to GITHUB_EVENT_PATH")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    args = parser.parse_args(argv)

    try:
        settings = get_settings()
        setup_logging(settings)

        event = load_event(
            args.event_name or settings.github_event_name,
            args.event_path or settings.github_event_path,
        )
        asyncio.run(run(settings, event))
    except Exception as e:
        logger.error(f"Run failed: {e}", exc_info=True)
        set_failed(str(e))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
