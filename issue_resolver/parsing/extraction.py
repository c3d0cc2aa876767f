"""
JSON extraction from model responses.

Models are told to answer with bare JSON but often wrap it in prose or a
markdown fence. Extraction tries the whole text first, then the widest span
from the first opening bracket/brace to the last closing one.
"""

import json
import logging
import re
from typing import Any

from issue_resolver.exceptions import ExtractionError

logger = logging.getLogger("issue_resolver.parsing.extraction")

# Greedy: first '[' or '{' through the last ']' or '}'.
_JSON_SPAN = re.compile(r"[\[{].*[\]}]", re.DOTALL)


def extract_json(raw_text: str) -> Any:
    """
    Recover a JSON value from a model response.

    Args:
        raw_text: Raw text returned by the model.

    Returns:
        The parsed JSON value.

    Raises:
        ExtractionError: If neither the whole text nor the bracketed span parses.
    """
    if not raw_text or not raw_text.strip():
        raise ExtractionError(raw_text, "Model response is empty")

    try:
        return json.loads(raw_text)
    except json.JSONDecodeError:
        pass

    match = _JSON_SPAN.search(raw_text)
    if match is None:
        raise ExtractionError(raw_text)

    try:
        value = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise ExtractionError(raw_text, f"Embedded JSON is invalid: {e}") from e

    logger.debug(f"Recovered JSON span at offset {match.start()} of {len(raw_text)} chars")
    return value
