"""
Tests for JSON extraction.

Tests recovery of JSON payloads from free-form model responses.
"""

import pytest

from issue_resolver.exceptions import ExtractionError
from issue_resolver.parsing.extraction import extract_json


class TestExtractJson:
    """Tests for extract_json function."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ('[{"path": "a.py"}]', [{"path": "a.py"}]),
            ('{"a": 1, "b": [true, null]}', {"a": 1, "b": [True, None]}),
            ("[]", []),
            ("  \n{}\n", {}),
            ("42", 42),
            ('"text"', "text"),
        ],
    )
    def test_valid_json_unchanged(self, text, expected):
        """Test valid JSON is returned as parsed."""
        assert extract_json(text) == expected

    def test_array_in_markdown_fence(self):
        """Test JSON array wrapped in prose and a code fence."""
        text = 'Sure, here:\n```json\n[{"path": "a.py", "content": "", "message": "m"}]\n```\nEnjoy.'

        assert extract_json(text) == [{"path": "a.py", "content": "", "message": "m"}]

    def test_object_after_prose(self):
        """Test JSON object preceded by prose."""
        text = 'Here is the review:\n{"qualityIssues": []}'

        assert extract_json(text) == {"qualityIssues": []}

    def test_nested_brackets(self):
        """Test greedy span keeps nested structures intact."""
        text = 'Result: {"files": [{"path": "a"}, {"path": "b"}]} done'

        assert extract_json(text) == {"files": [{"path": "a"}, {"path": "b"}]}

    def test_no_brackets(self):
        """Test text without any JSON span."""
        with pytest.raises(ExtractionError) as exc_info:
            extract_json("I could not produce any changes for this issue.")

        assert exc_info.value.raw_text == "I could not produce any changes for this issue."

    def test_invalid_span(self):
        """Test bracketed span that is not JSON."""
        with pytest.raises(ExtractionError):
            extract_json("Use [brackets] like {this}")

    def test_sibling_blocks_not_disambiguated(self):
        """Test two separate JSON blocks fail as one greedy span."""
        with pytest.raises(ExtractionError):
            extract_json('First: [1, 2]\nSecond: [3, 4]')

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_empty_response(self, text):
        """Test empty responses."""
        with pytest.raises(ExtractionError):
            extract_json(text)
