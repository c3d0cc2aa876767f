"""
Parsing package for AI Issue Resolver.

Turns free-form model text into validated, typed data.
"""

from issue_resolver.parsing.extraction import extract_json
from issue_resolver.parsing.validation import (
    CODE_CHANGES,
    format_instructions,
    parse_structured,
    validate,
)

__all__ = [
    "CODE_CHANGES",
    "extract_json",
    "format_instructions",
    "parse_structured",
    "validate",
]
