"""
Unit tests for parsing and repairing model JSON output.
"""

import json

import pytest

from data_model import MalformedResponseError
from llm_query.json_recovery import (
    close_open_structures,
    parse_json_array,
    truncate_to_last_record,
)

RECORD_A = {"id": "A", "narrative": "No dia 1"}
RECORD_B = {"id": "B", "narrative": "No dia 2"}


class TestStrictParse:
    """Test well-formed responses."""

    def test_array(self):
        assert parse_json_array(json.dumps([RECORD_A, RECORD_B])) == [RECORD_A, RECORD_B]

    def test_fenced(self):
        raw = "```json\n" + json.dumps([RECORD_A]) + "\n```"
        assert parse_json_array(raw) == [RECORD_A]

    def test_single_object(self):
        """A lone object counts as a one-element array."""
        assert parse_json_array(json.dumps(RECORD_A)) == [RECORD_A]

    def test_empty_array(self):
        assert parse_json_array("[]") == []


class TestRepair:
    """Test truncated responses."""

    def test_unterminated_string(self):
        raw = '[{"id": "A", "narrative": "No dia 1, a guarn'
        items = parse_json_array(raw)
        assert items == [{"id": "A", "narrative": "No dia 1, a guarn"}]

    def test_dangling_comma(self):
        raw = '[{"id": "A"},'
        assert parse_json_array(raw) == [{"id": "A"}]

    def test_close_open_structures(self):
        assert close_open_structures('[{"a": [1, 2') == '[{"a": [1, 2]}]'

    def test_escaped_quote_inside_string(self):
        raw = '[{"id": "A", "narrative": "disse \\"pare'
        assert parse_json_array(raw)[0]["narrative"] == 'disse "pare'

    def test_dangling_escape_dropped(self):
        fixed = close_open_structures('[{"n": "abc\\')
        assert json.loads(fixed) == [{"n": "abc"}]


class TestSalvage:
    """Test cutting back to the last complete record."""

    def test_truncate_to_last_record(self):
        text = json.dumps([RECORD_A])[:-1] + ', {"id": "B", "narrative": '
        assert json.loads(truncate_to_last_record(text)) == [RECORD_A]

    def test_salvage_used_when_repair_fails(self):
        """A cut after a key leaves unrepairable JSON; complete records survive."""
        raw = json.dumps([RECORD_A])[:-1] + ', {"id": "B", "narrative": '
        assert parse_json_array(raw) == [RECORD_A]

    def test_no_complete_record(self):
        assert truncate_to_last_record('[{"id": "A", "nar') is None

    def test_not_an_array(self):
        assert truncate_to_last_record('{"id": "A"}') is None


class TestFailures:
    """Test unrecoverable responses."""

    def test_empty(self):
        with pytest.raises(MalformedResponseError, match="empty"):
            parse_json_array("  ")

    def test_garbage(self):
        with pytest.raises(MalformedResponseError, match="fewer pages"):
            parse_json_array("Desculpe, não consegui processar o texto.")

    def test_scalar(self):
        with pytest.raises(MalformedResponseError):
            parse_json_array("42")
