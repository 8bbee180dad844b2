"""Tests for the response normalizer.

Covers:
- find_json_object / extract_json: brace-balance scan, prose and fences, failures
- normalize: JSON-mode passthrough, text mode wrapping, free-text extraction
"""

import unittest

from ai_fixtures import SAMPLE_OUTPUTS


def _result(raw_text, structured=None):
    from docextract.services.ai.common.providers.base import ProviderResult

    return ProviderResult(raw_text=raw_text, model="mock-v1", provider="mock", structured=structured)


class ExtractJsonTests(unittest.TestCase):
    """Tests for docextract.services.ai.common.json_tools.extract_json."""

    def test_bare_object(self):
        from docextract.services.ai.common.json_tools import extract_json

        result = extract_json('{"transactionId": "ABC123", "amount": 200}')
        self.assertEqual(result, {"transactionId": "ABC123", "amount": 200})

    def test_object_wrapped_in_prose(self):
        from docextract.services.ai.common.json_tools import extract_json

        bare = '{"transactionId": "ABC123"}'
        wrapped = f"Sure! Here is the data: {bare}\nLet me know if you need anything else."
        self.assertEqual(extract_json(wrapped), extract_json(bare))

    def test_markdown_fence(self):
        from docextract.services.ai.common.json_tools import extract_json

        text = '```json\n{"story": "ok", "isCorrectType": true}\n```'
        self.assertEqual(extract_json(text), {"story": "ok", "isCorrectType": True})

    def test_nested_braces(self):
        from docextract.services.ai.common.json_tools import extract_json

        result = extract_json('prefix {"a": {"b": {"c": 1}}} suffix')
        self.assertEqual(result["a"]["b"]["c"], 1)

    def test_braces_inside_strings_do_not_count(self):
        from docextract.services.ai.common.json_tools import extract_json

        result = extract_json('{"key": "Total {incl. tax}", "value": "}"} trailing }')
        self.assertEqual(result, {"key": "Total {incl. tax}", "value": "}"})

    def test_escaped_quotes(self):
        from docextract.services.ai.common.json_tools import extract_json

        result = extract_json('{"msg": "He said \\"hello {there}\\""}')
        self.assertEqual(result["msg"], 'He said "hello {there}"')

    def test_leftmost_object_wins(self):
        from docextract.services.ai.common.json_tools import extract_json

        result = extract_json('{"first": 1} and then {"second": 2}')
        self.assertEqual(result, {"first": 1})

    def test_find_json_object_returns_balanced_substring(self):
        from docextract.services.ai.common.json_tools import find_json_object

        self.assertEqual(find_json_object('x {"a": {"b": 1}} y'), '{"a": {"b": 1}}')

    def test_empty_text_is_no_json(self):
        from docextract.services.ai.common.errors import NoJsonFound
        from docextract.services.ai.common.json_tools import extract_json

        for text in ("", "   "):
            with self.assertRaises(NoJsonFound):
                extract_json(text)

    def test_plain_text_is_no_json(self):
        from docextract.services.ai.common.errors import NoJsonFound
        from docextract.services.ai.common.json_tools import extract_json

        with self.assertRaises(NoJsonFound):
            extract_json("I could not read the document, sorry.")

    def test_unclosed_object_is_no_json(self):
        from docextract.services.ai.common.errors import NoJsonFound
        from docextract.services.ai.common.json_tools import extract_json

        with self.assertRaises(NoJsonFound):
            extract_json('{"a": {"b": 1}')

    def test_invalid_json_is_malformed(self):
        from docextract.services.ai.common.errors import MalformedJson
        from docextract.services.ai.common.json_tools import extract_json

        with self.assertRaises(MalformedJson):
            extract_json("{invalid json}")

    def test_trailing_comma_is_malformed(self):
        from docextract.services.ai.common.errors import MalformedJson
        from docextract.services.ai.common.json_tools import extract_json

        with self.assertRaises(MalformedJson):
            extract_json('{"a": 1,}')

    def test_malformed_is_a_normalization_error(self):
        from docextract.services.ai.common.errors import MalformedJson, NoJsonFound, NormalizationError

        self.assertTrue(issubclass(MalformedJson, NormalizationError))
        self.assertTrue(issubclass(NoJsonFound, NormalizationError))


class NormalizeTests(unittest.TestCase):
    """Tests for docextract.services.ai.common.json_tools.normalize."""

    def test_structured_answer_passes_through(self):
        from docextract.services.ai.common.json_tools import normalize
        from docextract.services.ai.operations import get_registry

        registry = get_registry()
        for name, output in SAMPLE_OUTPUTS.items():
            with self.subTest(operation=name):
                candidate = normalize(_result("ignored", structured=output), registry.lookup(name))
                self.assertEqual(candidate, output)

    def test_free_text_answer_is_extracted(self):
        import json

        from docextract.services.ai.common.json_tools import normalize
        from docextract.services.ai.operations import get_registry

        registry = get_registry()
        for name, output in SAMPLE_OUTPUTS.items():
            with self.subTest(operation=name):
                text = f"Here is the data: {json.dumps(output)}"
                self.assertEqual(normalize(_result(text), registry.lookup(name)), output)

    def test_text_operation_wraps_answer(self):
        from docextract.services.ai.common.json_tools import normalize
        from docextract.services.ai.operations import get_registry

        operation = get_registry().lookup("extract_text")
        candidate = normalize(_result("  INVOICE 42\nTotal: 100  "), operation)
        self.assertEqual(candidate, {"extracted_text": "INVOICE 42\nTotal: 100"})

    def test_text_operation_keeps_braces_verbatim(self):
        from docextract.services.ai.common.json_tools import normalize
        from docextract.services.ai.operations import get_registry

        operation = get_registry().lookup("extract_text")
        candidate = normalize(_result('{"not": "parsed"}'), operation)
        self.assertEqual(candidate, {"extracted_text": '{"not": "parsed"}'})

    def test_text_operation_empty_answer(self):
        from docextract.services.ai.common.errors import InvalidResponse
        from docextract.services.ai.common.json_tools import normalize
        from docextract.services.ai.operations import get_registry

        with self.assertRaises(InvalidResponse):
            normalize(_result("   "), get_registry().lookup("extract_text"))

    def test_no_json_in_free_text(self):
        from docextract.services.ai.common.errors import NoJsonFound
        from docextract.services.ai.common.json_tools import normalize
        from docextract.services.ai.operations import get_registry

        with self.assertRaises(NoJsonFound):
            normalize(_result("No data here."), get_registry().lookup("scan_id"))
