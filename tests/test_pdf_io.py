"""
Tests for embedded text extraction and page rasterization.
"""

import shutil

import pytest
from PIL import Image

from docsim.core.pdf_handler import PDFTextExtractor, document_label, normalize_filename
from docsim.core.validation import PageRasterizationError
from docsim.utils.page_rasterizer import PageRasterizer, RenderOptions


class TestPDFTextExtractor:

    def test_extracts_text_and_page_count(self, make_pdf):
        path = make_pdf("report.pdf", ["Page one heading\nbody text", "Page two heading"])

        text, page_count = PDFTextExtractor().extract_embedded_text(path)

        assert page_count == 2
        assert "Page one heading" in text
        assert text.index("Page one heading") < text.index("Page two heading")

    def test_scanned_pages_have_no_text(self, make_pdf):
        path = make_pdf("scan.pdf", [None, None, None])

        text, page_count = PDFTextExtractor().extract_embedded_text(path)

        assert text.strip() == ""
        assert page_count == 3

    def test_get_page_count(self, make_pdf):
        path = make_pdf("three.pdf", ["a", "b", "c"])
        assert PDFTextExtractor().get_page_count(path) == 3

    def test_reads_upload_without_extension(self, make_pdf, tmp_path):
        upload = tmp_path / "3f2a9c0d1e"
        shutil.copy(make_pdf("report.pdf", ["Uploaded heading", "Second page"]), upload)

        text, page_count = PDFTextExtractor().extract_embedded_text(upload)

        assert page_count == 2
        assert "Uploaded heading" in text
        assert PDFTextExtractor().get_page_count(upload) == 2

    def test_non_pdf_content_raises(self, tmp_path):
        path = tmp_path / "notes.pdf"
        path.write_text("plain text, not a PDF")

        with pytest.raises(RuntimeError):
            PDFTextExtractor().extract_embedded_text(path)

    def test_document_label_is_file_name(self, tmp_path):
        assert document_label(tmp_path / "sub" / "essay.pdf") == "essay.pdf"

    def test_normalize_filename_composes_unicode(self):
        assert normalize_filename("cafe\u0301.pdf") == "caf\u00e9.pdf"


class TestPageRasterizer:

    @pytest.fixture
    def rasterizer(self, tmp_path):
        return PageRasterizer(RenderOptions(density=72, width=120, height=160), temp_dir=tmp_path / "pages")

    def test_render_page_fits_target_size(self, make_pdf, rasterizer):
        path = make_pdf("doc.pdf", ["hello"])

        image_path = rasterizer.render_page(path, 1)

        assert image_path.exists()
        assert image_path.suffix == ".png"
        with Image.open(image_path) as img:
            assert img.width <= 120 and img.height <= 160
            assert img.width == 120 or img.height == 160
        image_path.unlink()

    def test_image_names_are_unique_per_render(self, make_pdf, rasterizer):
        path = make_pdf("doc.pdf", ["hello"])

        first = rasterizer.render_page(path, 1)
        second = rasterizer.render_page(path, 1)

        assert first != second
        assert first.name.startswith("doc_") and first.name.endswith("_p1.png")

    def test_rendered_page_removes_image(self, make_pdf, rasterizer):
        path = make_pdf("doc.pdf", ["hello", "world"])

        with rasterizer.rendered_page(path, 2) as image_path:
            assert image_path.exists()

        assert not image_path.exists()

    def test_rendered_page_removes_image_on_error(self, make_pdf, rasterizer):
        path = make_pdf("doc.pdf", ["hello"])

        with pytest.raises(ValueError):
            with rasterizer.rendered_page(path, 1) as image_path:
                raise ValueError("OCR blew up")

        assert not image_path.exists()

    def test_page_out_of_range(self, make_pdf, rasterizer):
        path = make_pdf("doc.pdf", ["hello"])

        with pytest.raises(PageRasterizationError) as exc_info:
            rasterizer.render_page(path, 2)

        assert exc_info.value.page_number == 2

    def test_unreadable_document(self, tmp_path, rasterizer):
        path = tmp_path / "broken.pdf"
        path.write_bytes(b"garbage")

        with pytest.raises(PageRasterizationError):
            rasterizer.render_page(path, 1)

        assert list(rasterizer.temp_dir.iterdir()) == []
