"""Tests for the document orchestrator: full PDF files parsed back with pypdf."""

import io

import pytest
from pypdf import PdfReader

from streampdf import Document, FontMetricsProvider, Painter, PageSize, Size, StaticFontResolver
from streampdf.exceptions import ResourceError, StateError


def hello_document(path, font_provider, text="Hello World!", **options):
    with Document(path, options=options or None, font_provider=font_provider) as document:
        page = document.create_page(PageSize.A4)
        painter = Painter(page)
        painter.set_font(document.create_font("Helvetica", 18))
        painter.draw_text(56.69, page.height - 56.69, text)
        painter.finish_page()
    return document


class FlakySink(io.BytesIO):
    """In-memory sink that fails the next write once armed."""

    fail_next = False

    def write(self, data):
        if self.fail_next:
            self.fail_next = False
            raise OSError("disk full")
        return super().write(data)


@pytest.mark.integration
class TestDocumentOutput:

    def test_hello_world_round_trip(self, temp_dir, font_provider):
        path = temp_dir / "hello.pdf"
        hello_document(path, font_provider)

        reader = PdfReader(path, strict=True)
        assert len(reader.pages) == 1
        assert "Hello World!" in reader.pages[0].extract_text()
        assert [float(v) for v in reader.pages[0].mediabox] == [0, 0, 595, 842]

    def test_uncompressed_content(self, temp_dir, font_provider):
        path = temp_dir / "plain.pdf"
        hello_document(path, font_provider, compress_streams=False)
        data = path.read_bytes()
        assert data.startswith(b"%PDF-1.7\n")
        assert data.endswith(b"%%EOF\n")
        assert b"/F1 18 Tf" in data
        assert b"(Hello World!) Tj" in data
        assert b"/BaseFont /Helvetica" in data

    def test_metadata(self, temp_dir, font_provider):
        path = temp_dir / "meta.pdf"
        with Document(path, font_provider=font_provider) as document:
            page = document.create_page(PageSize.LETTER)
            document.finish_page(page)
            document.set_metadata(
                title="Hello World",
                author="Someone",
                subject="Testing",
                keywords="Test;PDF;Hello World;",
                creator="tests",
            )

        metadata = PdfReader(path).metadata
        assert metadata.title == "Hello World"
        assert metadata.author == "Someone"
        assert metadata.subject == "Testing"
        assert metadata["/Keywords"] == "Test;PDF;Hello World;"
        assert metadata.creator == "tests"
        assert metadata.producer.startswith("streampdf")

    def test_unknown_metadata_field(self, make_document):
        document = make_document()
        with pytest.raises(TypeError):
            document.set_metadata(colour="red")
        document.close()

    def test_multiple_pages_share_resources(self, temp_dir, font_provider, jpeg_path):
        path = temp_dir / "pages.pdf"
        with Document(path, options={"compress_streams": False}, font_provider=font_provider) as document:
            font = document.create_font("Times-Roman")
            image = document.create_image(jpeg_path)
            painter = Painter()
            for number in range(3):
                page = document.create_page((300, 200 + number))
                painter.set_page(page)
                painter.set_font(font, 10)
                painter.draw_text(10, 10, f"Page {number + 1}")
                painter.draw_image(10, 50, image, 0.25, 0.25)
                painter.finish_page()

        data = path.read_bytes()
        assert data.count(b"/BaseFont /Times-Roman") == 1
        assert data.count(b"/Subtype /Image") == 1

        reader = PdfReader(path, strict=True)
        assert len(reader.pages) == 3
        assert [float(page.mediabox.height) for page in reader.pages] == [200, 201, 202]
        assert "Page 3" in reader.pages[2].extract_text()

    def test_jpeg_is_embedded_unchanged(self, temp_dir, font_provider, jpeg_path):
        path = temp_dir / "image.pdf"
        with Document(path, font_provider=font_provider) as document:
            page = document.create_page(PageSize.LETTER, landscape=True)
            painter = Painter(page)
            painter.draw_image(0, 0, document.create_image(jpeg_path), 0.5, 0.5)
            painter.finish_page()

        data = path.read_bytes()
        assert jpeg_path.read_bytes() in data
        assert b"/Filter /DCTDecode" in data

        xobjects = PdfReader(path).pages[0]["/Resources"]["/XObject"]
        image = xobjects["/Im1"].get_object()
        assert (image["/Width"], image["/Height"]) == (200, 100)

    def test_truetype_embedding(self, temp_dir, vera_ttf):
        path = temp_dir / "vera.pdf"
        provider = FontMetricsProvider(StaticFontResolver({"Bitstream Vera": vera_ttf}))
        with Document(path, font_provider=provider) as document:
            painter = Painter(document.create_page(PageSize.A5))
            painter.set_font(document.create_font("Bitstream Vera", 14))
            painter.draw_text(20, 300, "Embedded font")
            painter.finish_page()
        provider.close()

        reader = PdfReader(path, strict=True)
        font = reader.pages[0]["/Resources"]["/Font"]["/F1"].get_object()
        assert font["/Subtype"] == "/TrueType"
        assert font["/FirstChar"] == 32
        assert len(font["/Widths"]) == 224
        descriptor = font["/FontDescriptor"].get_object()
        font_file = descriptor["/FontFile2"].get_object()
        assert font_file.get_data() == vera_ttf.read_bytes()
        assert font_file["/Length1"] == len(vera_ttf.read_bytes())
        assert "Embedded font" in reader.pages[0].extract_text()

    def test_families_sharing_a_face_embed_once(self, temp_dir, vera_ttf):
        path = temp_dir / "shared.pdf"
        provider = FontMetricsProvider(StaticFontResolver({"Vera": vera_ttf, "Bitstream Vera": vera_ttf}))
        with Document(path, font_provider=provider) as document:
            painter = Painter(document.create_page(PageSize.A5))
            fonts = [document.create_font(family) for family in ("Vera", "Bitstream Vera", "Arial", "Helvetica")]
            assert len({id(font) for font in fonts}) == 4
            for number, font in enumerate(fonts):
                painter.set_font(font, 12)
                painter.draw_text(20, 300 - 20 * number, font.family)
            painter.finish_page()
        provider.close()

        data = path.read_bytes()
        assert data.count(b"/FontFile2") == 1
        assert data.count(b"/BaseFont /Helvetica") == 1
        resources = PdfReader(path, strict=True).pages[0]["/Resources"]["/Font"]
        assert resources.raw_get("/F1").idnum == resources.raw_get("/F2").idnum
        assert resources.raw_get("/F3").idnum == resources.raw_get("/F4").idnum
        assert resources.raw_get("/F1").idnum != resources.raw_get("/F3").idnum

    def test_caller_sink_is_left_open(self, font_provider):
        sink = io.BytesIO()
        hello_document(sink, font_provider)
        assert not sink.closed
        assert sink.getvalue().endswith(b"%%EOF\n")
        assert "Hello World!" in PdfReader(io.BytesIO(sink.getvalue())).pages[0].extract_text()

    def test_document_without_pages(self, temp_dir, font_provider):
        path = temp_dir / "empty.pdf"
        Document(path, font_provider=font_provider).close()
        assert len(PdfReader(path).pages) == 0


@pytest.mark.unit
class TestDocumentLifecycle:

    def test_close_with_unfinished_page(self, make_document):
        document = make_document()
        page = document.create_page(PageSize.A4)
        with pytest.raises(StateError):
            document.close()
        assert not document.closed
        document.finish_page(page)
        document.close()
        assert document.closed

    def test_finish_twice(self, make_document):
        document = make_document()
        page = document.create_page(PageSize.A4)
        painter = Painter(page)
        painter.finish_page()
        with pytest.raises(StateError):
            painter.finish_page()
        document.close()

    def test_write_failure_blocks_close(self, font_provider):
        sink = FlakySink()
        document = Document(sink, font_provider=font_provider)
        page = document.create_page(PageSize.A4)
        painter = Painter(page)
        painter.set_font(document.create_font("Helvetica"))
        painter.draw_text(10, 10, "lost")

        sink.fail_next = True
        with pytest.raises(ResourceError):
            painter.finish_page()
        assert page.finished
        assert page.object_id is None

        with pytest.raises(StateError):
            document.close()
        assert document.closed
        assert not sink.closed
        assert b"%%EOF" not in sink.getvalue()
        assert b"None 0 R" not in sink.getvalue()

    def test_close_twice(self, make_document):
        document = make_document()
        document.close()
        with pytest.raises(StateError):
            document.close()

    def test_use_after_close(self, make_document, jpeg_path):
        document = make_document()
        document.close()
        with pytest.raises(StateError):
            document.create_page(PageSize.A4)
        with pytest.raises(StateError):
            document.create_font("Helvetica")
        with pytest.raises(StateError):
            document.create_image(jpeg_path)
        with pytest.raises(StateError):
            document.set_metadata(title="late")

    def test_foreign_page(self, temp_dir, font_provider):
        first = Document(temp_dir / "a.pdf", font_provider=font_provider)
        second = Document(temp_dir / "b.pdf", font_provider=font_provider)
        page = first.create_page(PageSize.A4)
        with pytest.raises(StateError):
            second.finish_page(page)
        first.finish_page(page)
        first.close()
        second.close()

    def test_exception_aborts_document(self, temp_dir, font_provider):
        path = temp_dir / "aborted.pdf"
        with pytest.raises(RuntimeError):
            with Document(path, font_provider=font_provider) as document:
                document.create_page(PageSize.A4)
                raise RuntimeError("boom")
        assert document.closed
        assert not path.read_bytes().endswith(b"%%EOF\n")

    def test_unwritable_path(self, temp_dir):
        with pytest.raises(ResourceError):
            Document(temp_dir / "missing" / "out.pdf")

    def test_unsupported_sink(self):
        with pytest.raises(TypeError):
            Document(42)


@pytest.mark.unit
class TestPagesAndFonts:

    @pytest.mark.parametrize(
        "size, expected",
        [
            (PageSize.LETTER, (612.0, 792.0)),
            ("a4", (595.0, 842.0)),
            (Size(100, 200), (100.0, 200.0)),
            ((300, 400.5), (300.0, 400.5)),
        ],
    )
    def test_page_sizes(self, make_document, size, expected):
        document = make_document()
        page = document.create_page(size)
        assert (page.width, page.height) == expected
        assert page.size == Size(*expected)
        document.finish_page(page)
        document.close()

    def test_landscape(self, make_document):
        document = make_document()
        assert document.create_page(PageSize.LETTER, landscape=True).size == Size(792.0, 612.0)
        assert document.create_page((100, 200), landscape=True).size == Size(200.0, 100.0)

    @pytest.mark.parametrize("size", [(0, 100), (100, -1), (float("nan"), 10), "B5", ("a", "b")])
    def test_invalid_page_size(self, make_document, size):
        document = make_document()
        with pytest.raises(ResourceError):
            document.create_page(size)
        assert document.page_count == 0

    def test_page_indices(self, make_document):
        document = make_document()
        pages = [document.create_page(PageSize.A6) for _ in range(3)]
        assert [page.index for page in pages] == [0, 1, 2]
        assert document.page_at(1) is pages[1]
        with pytest.raises(StateError):
            document.page_at(7)

    def test_fonts_are_cached_per_family(self, make_document):
        document = make_document()
        arial = document.create_font("Arial")
        assert document.create_font("Arial") is arial
        courier = document.create_font("Courier")
        assert (arial.alias, courier.alias) == ("F1", "F2")
        assert arial.name == "Helvetica"
        assert arial.size == document.options.default_font_size
        assert document.owns_font(arial)
        assert document.fonts == (arial, courier)
        document.close()

    def test_default_font_size_option(self, make_document):
        document = make_document(default_font_size=9)
        assert document.create_font("Helvetica").size == 9
        document.close()
