import importlib.util
import unittest

from domain.entities import PageText
from domain.interfaces import ExtractionError
from infrastructure.text_extraction.plain_text_extractor import PlainTextExtractor


class TestPlainTextExtractor(unittest.TestCase):
    def test_form_feed_separates_pages(self):
        pages = PlainTextExtractor().extract_pages("First page.\fSecond page.\f\fFourth page.")
        self.assertEqual(
            pages,
            [
                PageText(page_number=1, text="First page."),
                PageText(page_number=2, text="Second page."),
                PageText(page_number=4, text="Fourth page."),
            ],
        )

    def test_bytes_are_decoded(self):
        pages = PlainTextExtractor().extract_pages("Zellteilung läuft.".encode("utf-8"))
        self.assertEqual(pages, [PageText(page_number=1, text="Zellteilung läuft.")])

    def test_blank_text_has_no_pages(self):
        self.assertEqual(PlainTextExtractor().extract_pages("  \n "), [])


@unittest.skipIf(importlib.util.find_spec("pypdf") is None, "pypdf not installed")
class TestPdfExtractor(unittest.TestCase):
    def test_invalid_pdf_raises_extraction_error(self):
        from infrastructure.text_extraction.pdf_extractor import PdfExtractor

        with self.assertRaises(ExtractionError):
            PdfExtractor().extract_pages(b"this is not a pdf")

    def test_blank_pdf_has_no_pages(self):
        from io import BytesIO

        from pypdf import PdfWriter

        from infrastructure.text_extraction.pdf_extractor import PdfExtractor

        writer = PdfWriter()
        writer.add_blank_page(width=200, height=200)
        buffer = BytesIO()
        writer.write(buffer)
        self.assertEqual(PdfExtractor().extract_pages(buffer.getvalue()), [])


@unittest.skipIf(importlib.util.find_spec("docx") is None, "python-docx not installed")
class TestDocxExtractor(unittest.TestCase):
    def test_docx_is_a_single_page(self):
        from io import BytesIO

        from docx import Document

        from infrastructure.text_extraction.docx_extractor import DocxExtractor

        doc = Document()
        doc.add_paragraph("Cells divide by mitosis.")
        doc.add_paragraph("Meiosis creates gametes.")
        buffer = BytesIO()
        doc.save(buffer)
        pages = DocxExtractor().extract_pages(buffer.getvalue())
        self.assertEqual(pages, [PageText(page_number=1, text="Cells divide by mitosis.\nMeiosis creates gametes.")])

    def test_invalid_docx_raises_extraction_error(self):
        from infrastructure.text_extraction.docx_extractor import DocxExtractor

        with self.assertRaises(ExtractionError):
            DocxExtractor().extract_pages(b"not a zip archive")


if __name__ == "__main__":
    unittest.main()
