import base64
import sys
import time
import unittest
from pathlib import Path
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.core.errors import (  # noqa: E402
    ResumeExtractionError,
    ResumeExtractionTimeout,
    ValidationError,
)
from app.parsing.resume_upload import (  # noqa: E402
    PDF_MIME,
    TEXT_MIME,
    decode_resume_payload,
    extract_pdf_text,
    extract_resume_text,
)


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


RESUME_TEXT = "Jane Doe\nSenior Python Engineer\nFastAPI, PostgreSQL, Docker"


class DecodeResumePayloadTests(unittest.TestCase):
    def test_bare_base64_defaults_to_pdf(self):
        decoded = decode_resume_payload(_b64(b"%PDF-1.4 fake"))
        self.assertEqual(decoded.mime, PDF_MIME)
        self.assertEqual(decoded.content, b"%PDF-1.4 fake")

    def test_data_uri_prefix_is_stripped(self):
        decoded = decode_resume_payload("data:application/pdf;base64," + _b64(b"%PDF-1.7"))
        self.assertEqual((decoded.mime, decoded.content), (PDF_MIME, b"%PDF-1.7"))

        decoded = decode_resume_payload("data:text/plain;charset=utf-8;base64," + _b64(b"hello"))
        self.assertEqual((decoded.mime, decoded.content), (TEXT_MIME, b"hello"))

    def test_rejects_empty_and_malformed_payloads(self):
        for payload in ["", "   ", "not base64 at all!!", "data:application/pdf;base64,"]:
            with self.subTest(payload=payload):
                with self.assertRaises(ValidationError):
                    decode_resume_payload(payload)

    def test_rejects_unsupported_mime(self):
        with self.assertRaises(ValidationError) as ctx:
            decode_resume_payload("data:image/png;base64," + _b64(b"\x89PNG"))
        self.assertIn("image/png", str(ctx.exception))


class ExtractResumeTextTests(unittest.IsolatedAsyncioTestCase):
    async def test_plain_text_upload_skips_pdf_parser(self):
        payload = "data:text/plain;base64," + _b64(RESUME_TEXT.encode("utf-8"))
        with patch("app.parsing.resume_upload.extract_pdf_text") as pdf:
            text = await extract_resume_text(payload)
        pdf.assert_not_called()
        self.assertEqual(text, RESUME_TEXT)

    async def test_pdf_upload_uses_pdf_parser(self):
        with patch("app.parsing.resume_upload.extract_pdf_text", return_value=RESUME_TEXT) as pdf:
            text = await extract_resume_text(_b64(b"%PDF-1.4 fake"))
        pdf.assert_called_once_with(b"%PDF-1.4 fake")
        self.assertEqual(text, RESUME_TEXT)

    async def test_slow_extraction_times_out(self):
        def slow(_content):
            time.sleep(0.5)
            return RESUME_TEXT

        with patch("app.parsing.resume_upload.extract_pdf_text", side_effect=slow):
            with self.assertRaises(ResumeExtractionTimeout) as ctx:
                await extract_resume_text(_b64(b"%PDF-1.4 fake"), timeout_s=0.05)
        self.assertEqual(ctx.exception.timeout_s, 0.05)
        self.assertIn("timed out", str(ctx.exception))

    async def test_blank_extraction_is_an_error(self):
        with patch("app.parsing.resume_upload.extract_pdf_text", return_value="  \n "):
            with self.assertRaises(ResumeExtractionError):
                await extract_resume_text(_b64(b"%PDF-1.4 fake"))


class ExtractPdfTextTests(unittest.TestCase):
    def test_garbage_bytes_raise_extraction_error(self):
        with self.assertRaises(ResumeExtractionError):
            extract_pdf_text(b"this is not a pdf")


if __name__ == "__main__":
    unittest.main()
