"""Tests for data URI parsing, input validation and prompt construction.

Covers:
- parse_data_uri: accepted forms, rejection of malformed URIs, size limit
- validate_input: InvalidInput messages and field names
- build_prompt: media placement, document order, JSON instructions
"""

import os
import unittest
from unittest.mock import patch

from ai_fixtures import JPEG_URI, PDF_URI, PNG_URI, SAMPLE_INPUTS

# ─── Data URIs ──────────────────────────────────────


class DataUriTests(unittest.TestCase):
    """Tests for docextract.services.ai.common.artifacts.parse_data_uri."""

    def test_png(self):
        from docextract.services.ai.common.artifacts import parse_data_uri

        artifact = parse_data_uri(PNG_URI)
        self.assertEqual(artifact.media_type, "image/png")
        self.assertEqual(artifact.data, b"\x00\x00\x00")
        self.assertEqual(artifact.to_data_uri(), PNG_URI)

    def test_media_type_lowercased(self):
        from docextract.services.ai.common.artifacts import parse_data_uri

        self.assertEqual(parse_data_uri("data:IMAGE/PNG;base64,AAAA").media_type, "image/png")

    def test_parameters_allowed(self):
        from docextract.services.ai.common.artifacts import parse_data_uri

        artifact = parse_data_uri("data:application/pdf;name=report.pdf;base64,JVBERi0xLjQ=")
        self.assertEqual(artifact.media_type, "application/pdf")
        self.assertEqual(artifact.data, b"%PDF-1.4")

    def test_rejects_malformed(self):
        from docextract.services.ai.common.artifacts import parse_data_uri
        from docextract.services.ai.common.errors import InvalidInput

        for value in (
            "",
            "not-a-uri",
            "data:image/png,AAAA",
            "data:image/png;base64,",
            "data:image/png;base64,@@@@",
            "data:image/png;base64,AAA",
            "https://example.com/bill.png",
        ):
            with self.subTest(value=value):
                with self.assertRaises(InvalidInput):
                    parse_data_uri(value)

    def test_rejects_non_string(self):
        from docextract.services.ai.common.artifacts import parse_data_uri
        from docextract.services.ai.common.errors import InvalidInput

        with self.assertRaises(InvalidInput):
            parse_data_uri(b"data:image/png;base64,AAAA")

    def test_size_limit(self):
        from docextract.services.ai.common.artifacts import parse_data_uri
        from docextract.services.ai.common.errors import InvalidInput

        self.assertEqual(len(parse_data_uri(PNG_URI, max_bytes=3).data), 3)
        with self.assertRaises(InvalidInput):
            parse_data_uri(PNG_URI, max_bytes=2)

    def test_repr_hides_payload(self):
        from docextract.services.ai.common.artifacts import parse_data_uri

        self.assertEqual(repr(parse_data_uri(PNG_URI)), "Artifact(media_type='image/png', size=3)")


# ─── Input validation ───────────────────────────────


class ValidateInputTests(unittest.TestCase):
    """Tests for docextract.services.ai.common.prompting.validate_input."""

    def _validate(self, operation_name, payload):
        from docextract.services.ai.common.prompting import validate_input
        from docextract.services.ai.operations import get_registry

        return validate_input(get_registry().lookup(operation_name), payload)

    def test_every_sample_input_is_valid(self):
        for name, payload in SAMPLE_INPUTS.items():
            with self.subTest(operation=name):
                self._validate(name, payload)

    def test_missing_required_artifact(self):
        from docextract.services.ai.common.errors import InvalidInput

        with self.assertRaises(InvalidInput) as ctx:
            self._validate("scan_payment", {})
        self.assertEqual(ctx.exception.message, "Missing photoDataUri")
        self.assertEqual(ctx.exception.field, "photoDataUri")

    def test_photo_or_text_required(self):
        from docextract.services.ai.common.errors import InvalidInput

        with self.assertRaises(InvalidInput) as ctx:
            self._validate("extract_billing", {})
        self.assertEqual(ctx.exception.message, "Missing photoDataUri or text")

    def test_malformed_data_uri(self):
        from docextract.services.ai.common.errors import InvalidInput

        with self.assertRaises(InvalidInput) as ctx:
            self._validate("scan_id", {"photoDataUri": "not-a-uri"})
        self.assertEqual(ctx.exception.field, "photoDataUri")
        self.assertTrue(ctx.exception.message.startswith("Invalid photoDataUri"))

    def test_blank_text_rejected(self):
        from docextract.services.ai.common.errors import InvalidInput

        with self.assertRaises(InvalidInput) as ctx:
            self._validate("extract_payment_details", {"text": "   "})
        self.assertEqual(ctx.exception.field, "text")

    @patch.dict(os.environ, {"AI_MAX_INPUT_TEXT_CHARS": "10"}, clear=False)
    def test_text_length_limit(self):
        from docextract.services.ai.common.errors import InvalidInput

        with self.assertRaises(InvalidInput) as ctx:
            self._validate("extract_medical", {"text": "x" * 11})
        self.assertEqual(ctx.exception.field, "text")

    @patch.dict(os.environ, {"AI_MAX_ARTIFACT_BYTES": "2"}, clear=False)
    def test_artifact_size_limit(self):
        from docextract.services.ai.common.errors import InvalidInput

        with self.assertRaises(InvalidInput):
            self._validate("scan_payment", {"photoDataUri": PNG_URI})

    def test_empty_document_list(self):
        from docextract.services.ai.common.errors import InvalidInput

        with self.assertRaises(InvalidInput) as ctx:
            self._validate("create_lead_story", {"reportDataUris": []})
        self.assertEqual(ctx.exception.field, "reportDataUris")

    def test_bad_document_in_list(self):
        from docextract.services.ai.common.errors import InvalidInput

        with self.assertRaises(InvalidInput) as ctx:
            self._validate("create_education_story", {"reportDataUris": [PNG_URI, "oops"]})
        self.assertEqual(ctx.exception.field, "reportDataUris.1")

    def test_non_mapping_payload(self):
        from docextract.services.ai.common.errors import InvalidInput

        with self.assertRaises(InvalidInput):
            self._validate("scan_id", ["data:image/png;base64,AAAA"])

    def test_snake_case_keys_accepted(self):
        request = self._validate("scan_payment", {"photo_data_uri": PNG_URI})
        self.assertEqual(request.photo_data_uri.media_type, "image/png")


# ─── Prompt construction ────────────────────────────


class BuildPromptTests(unittest.TestCase):
    """Tests for docextract.services.ai.common.prompting.build_prompt."""

    def _build(self, operation_name, payload):
        from docextract.services.ai.common.prompting import build_prompt
        from docextract.services.ai.operations import get_registry

        return build_prompt(get_registry().lookup(operation_name), payload)

    def test_every_operation_renders(self):
        for name, payload in SAMPLE_INPUTS.items():
            with self.subTest(operation=name):
                prompt = self._build(name, payload)
                self.assertTrue(prompt.segments)
                self.assertNotIn("{photo_data_uri}", prompt.text)

    def test_artifact_placed_inside_template(self):
        from docextract.services.ai.common.artifacts import Artifact

        prompt = self._build("extract_billing", {"photoDataUri": PNG_URI})

        self.assertEqual(len(prompt.artifacts), 1)
        self.assertIsInstance(prompt.segments[1], Artifact)
        self.assertTrue(prompt.segments[0].endswith("---\n"))
        self.assertIn("Document:\n---\n[media:image/png]\n---", prompt.text)

    def test_text_input_is_inlined(self):
        prompt = self._build("extract_billing", {"text": "ACME Ltd\nTotal 150.00"})

        self.assertEqual(prompt.artifacts, ())
        self.assertEqual(len(prompt.segments), 1)
        self.assertIn("---\nACME Ltd\nTotal 150.00\n---", prompt.text)

    def test_documents_keep_input_order(self):
        uris = [PDF_URI, PNG_URI, JPEG_URI]
        prompt = self._build("create_lead_story", {"reportDataUris": uris})

        self.assertEqual(
            [a.media_type for a in prompt.artifacts],
            ["application/pdf", "image/png", "image/jpeg"],
        )
        text = prompt.text
        self.assertLess(text.index("Document 1: [media:application/pdf]"), text.index("Document 2: [media:image/png]"))
        self.assertLess(text.index("Document 2: [media:image/png]"), text.index("Document 3: [media:image/jpeg]"))

    def test_json_operations_carry_schema(self):
        prompt = self._build("scan_payment", SAMPLE_INPUTS["scan_payment"])

        self.assertIsNotNone(prompt.response_schema)
        self.assertIn("transactionId", prompt.response_schema["properties"])
        self.assertIn("Return ONLY a single, valid JSON object", prompt.text)

    def test_text_operation_has_no_schema(self):
        prompt = self._build("extract_text", SAMPLE_INPUTS["extract_text"])

        self.assertIsNone(prompt.response_schema)
        self.assertNotIn("JSON", prompt.text)

    def test_escaped_braces_render_literally(self):
        prompt = self._build("extract_dynamic_form", SAMPLE_INPUTS["extract_dynamic_form"])
        self.assertIn('{"key": "First Name", "value": "John"}', prompt.text)

    def test_system_prompt_forwarded(self):
        from docextract.services.ai.common.prompting import build_prompt
        from docextract.services.ai.common.registry import Operation
        from docextract.services.ai.payment.contracts import ScanPaymentInput, TransactionId

        operation = Operation(
            name="probe",
            input_model=ScanPaymentInput,
            output_model=TransactionId,
            template="Image: {photo_data_uri}",
            system_prompt="You read receipts.",
        )
        prompt = build_prompt(operation, {"photoDataUri": PNG_URI})
        self.assertEqual(prompt.system, "You read receipts.")
        self.assertEqual(prompt.segments[0], "Image: ")

    def test_unknown_placeholder_is_a_programming_error(self):
        from docextract.services.ai.common.prompting import build_prompt
        from docextract.services.ai.common.registry import Operation
        from docextract.services.ai.payment.contracts import ScanPaymentInput, TransactionId

        operation = Operation(
            name="broken",
            input_model=ScanPaymentInput,
            output_model=TransactionId,
            template="Image: {photo}",
        )
        with self.assertRaises(KeyError):
            build_prompt(operation, {"photoDataUri": PNG_URI})

    def test_prompt_from_text(self):
        from docextract.services.ai.common.prompting import Prompt

        prompt = Prompt.from_text("ping")
        self.assertEqual(prompt.text, "ping")
        self.assertEqual(prompt.artifacts, ())
        self.assertIsNone(prompt.response_schema)
