"""
Services package for AI Issue Resolver.

Contains the GitHub integration, the change-set applier and telemetry.
"""

from issue_resolver.services.change_applier import ChangeSetApplier
from issue_resolver.services.github_service import GitHubService
from issue_resolver.services.telemetry import Telemetry

__all__ = [
    "ChangeSetApplier",
    "GitHubService",
    "Telemetry",
]
