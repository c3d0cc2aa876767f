"""
Handlers package for AI Issue Resolver.

Contains the workflows started by the dispatcher.
"""

from issue_resolver.handlers.issue_handler import IssueHandler
from issue_resolver.handlers.pr_handler import PRHandler

__all__ = [
    "IssueHandler",
    "PRHandler",
]
