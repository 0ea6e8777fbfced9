"""Unit tests for truncated-JSON repair."""

import json

import pytest

from litreview.core.services.json_repair import loads_lenient, repair_truncated_json

pytestmark = pytest.mark.unit


class TestRepairTruncatedJson:
    """Tests for closing truncated model output."""

    def test_valid_json_is_returned_unchanged(self):
        text = '{"a": 1, "b": ["x", "y"]}'
        assert repair_truncated_json(text) == text

    @pytest.mark.parametrize(
        "truncated,expected",
        [
            ('{"summary": "El estudio analiza', {"summary": "El estudio analiza"}),
            ('{"tags": ["IA", "docen', {"tags": ["IA", "docen"]}),
            ('{"a": 1, ', {"a": 1}),
            ('{"a": 1, "b', {"a": 1}),
            ('{"a": 1, "b":', {"a": 1, "b": None}),
            ('{"a": tru', {"a": None}),
            ('{"n": 12', {"n": 12}),
            ('{"a": {"b": [1, 2', {"a": {"b": [1, 2]}}),
            ('{"a": "x}y', {"a": "x}y"}),
        ],
    )
    def test_truncations_are_closed(self, truncated, expected):
        assert json.loads(repair_truncated_json(truncated)) == expected

    def test_dangling_escape_is_dropped(self):
        assert json.loads(repair_truncated_json('{"a": "linea\\')) == {"a": "linea"}

    def test_partial_unicode_escape_is_dropped(self):
        assert json.loads(repair_truncated_json('{"a": "caf\\u00')) == {"a": "caf"}

    def test_escaped_backslash_before_u_is_kept(self):
        repaired = repair_truncated_json('{"summary": "ruta C:\\\\u12')
        assert json.loads(repaired) == {"summary": "ruta C:\\u12"}

    def test_complete_escape_before_partial_one(self):
        repaired = repair_truncated_json('{"a": "caf\\u00e9 \\u0')
        assert json.loads(repaired) == {"a": "caf\u00e9 "}

    def test_escaped_backslash_loads_leniently(self):
        assert loads_lenient('{"ruta": "C:\\\\u') == {"ruta": "C:\\u"}

    def test_escaped_quotes_do_not_end_the_string(self):
        repaired = repair_truncated_json('{"a": "dijo \\"hola')
        assert json.loads(repaired) == {"a": 'dijo "hola'}

    def test_repair_is_idempotent(self):
        once = repair_truncated_json('{"tags": ["IA", "docen')
        assert repair_truncated_json(once) == once


class TestLoadsLenient:
    def test_valid_json(self):
        assert loads_lenient('{"a": [1]}') == {"a": [1]}

    def test_truncated_json_is_repaired(self):
        assert loads_lenient('{"topic": "IA en') == {"topic": "IA en"}

    def test_unrecoverable_text_raises(self):
        with pytest.raises(json.JSONDecodeError):
            loads_lenient("not json at all")
