"""
AI Issue Resolver.

GitHub Action that turns labeled issues into pull requests and answers
change and review commands on pull requests using an LLM.
"""

__version__ = "1.0.0"
