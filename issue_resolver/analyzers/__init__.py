"""
Analyzers package for AI Issue Resolver.

Contains the LLM integration.
"""

from issue_resolver.analyzers.llm_analyzer import LLMAnalyzer

__all__ = [
    "LLMAnalyzer",
]
