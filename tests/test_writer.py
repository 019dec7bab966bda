"""Tests for PDF object serialization and the streaming writer."""

import io
import re
import zlib

import pytest

from streampdf.exceptions import ResourceError, StateError
from streampdf.writer import Name, PdfWriter, Reference, to_pdf
from streampdf.writer.utils import escape_pdf_string, format_pdf_number, pdf_date


@pytest.mark.unit
class TestSerialization:

    def test_numbers(self):
        assert format_pdf_number(12) == "12"
        assert format_pdf_number(12.0) == "12"
        assert format_pdf_number(0.12345) == "0.123"
        assert format_pdf_number(-0.0001) == "0"
        with pytest.raises(TypeError):
            format_pdf_number(True)

    def test_escape(self):
        assert escape_pdf_string("a(b)\\c") == "a\\(b\\)\\\\c"

    def test_names_and_references(self):
        assert to_pdf(Name("Type")) == "/Type"
        assert to_pdf(Name("A B#")) == "/A#20B#23"
        assert to_pdf(Reference(3)) == "3 0 R"

    def test_containers(self):
        value = {"Type": Name("Page"), "Kids": [Reference(1), Reference(2)], "Flag": True, "Nothing": None}
        assert to_pdf(value) == "<< /Type /Page /Kids [1 0 R 2 0 R] /Flag true /Nothing null >>"

    def test_strings(self):
        assert to_pdf("Hello (World)") == "(Hello \\(World\\))"
        assert to_pdf("Ω") == "<FEFF03A9>"
        assert to_pdf(b"\x01\xff") == "<01FF>"

    def test_unsupported_type(self):
        with pytest.raises(TypeError):
            to_pdf(object())

    def test_pdf_date(self):
        from datetime import datetime

        assert pdf_date(datetime(2024, 1, 31, 12, 0, 5)) == "D:20240131120005"


class NoTellSink:
    """Write-only sink without tell() or seek()."""

    def __init__(self):
        self.chunks = []

    def write(self, data):
        self.chunks.append(bytes(data))
        return len(data)

    def getvalue(self):
        return b"".join(self.chunks)


class FailingSink:

    def write(self, data):
        raise OSError("disk full")


@pytest.mark.unit
class TestPdfWriter:

    def test_header(self):
        sink = io.BytesIO()
        PdfWriter(sink, version="1.4")
        assert sink.getvalue().startswith(b"%PDF-1.4\n%")

    def test_sequential_ids_and_reservation(self):
        writer = PdfWriter(io.BytesIO())
        reserved = writer.reserve()
        first = writer.write_object({"A": 1})
        second = writer.write_object({"B": 2})
        assert (reserved, first, second) == (1, 2, 3)
        assert writer.write_object({"C": 3}, obj_id=reserved) == reserved
        assert writer.object_count == 3

    def test_filling_unreserved_id(self):
        writer = PdfWriter(io.BytesIO())
        with pytest.raises(StateError):
            writer.write_object({}, obj_id=5)

    def test_xref_offsets_point_at_objects(self):
        sink = NoTellSink()
        writer = PdfWriter(sink)
        pages = writer.reserve()
        writer.write_stream(None, b"0 0 10 10 re\nS\n", compress=False)
        writer.write_object({"Type": Name("Pages"), "Kids": [], "Count": 0}, obj_id=pages)
        root = writer.write_object({"Type": Name("Catalog"), "Pages": Reference(pages)})
        writer.close(root)

        data = sink.getvalue()
        start = int(re.search(rb"startxref\n(\d+)\n%%EOF\n$", data).group(1))
        assert data[start:].startswith(b"xref\n0 4\n0000000000 65535 f \n")
        entries = re.findall(rb"(\d{10}) 00000 n \n", data[start:])
        assert len(entries) == 3
        for obj_id, entry in enumerate(entries, start=1):
            offset = int(entry)
            assert data[offset:].startswith(f"{obj_id} 0 obj\n".encode())
            assert writer.offset_of(obj_id) == offset
        assert b"/Root 3 0 R" in data
        assert re.search(rb"/ID \[<[0-9A-F]{32}> <[0-9A-F]{32}>\]", data)

    def test_stream_compression(self):
        sink = io.BytesIO()
        writer = PdfWriter(sink, compress=True)
        payload = b"0 0 10 10 re\n" * 50
        writer.write_stream(None, payload)
        data = sink.getvalue()
        assert b"/Filter /FlateDecode" in data
        body = data.split(b"stream\n", 1)[1].rsplit(b"\nendstream", 1)[0]
        assert zlib.decompress(body) == payload
        assert f"/Length {len(body)}".encode() in data

    def test_prefiltered_stream_is_not_recompressed(self):
        sink = io.BytesIO()
        writer = PdfWriter(sink, compress=True)
        writer.write_stream({"Filter": Name("DCTDecode")}, b"\xff\xd8jpeg")
        assert b"\xff\xd8jpeg" in sink.getvalue()
        assert b"FlateDecode" not in sink.getvalue()

    def test_close_with_unfilled_reservation(self):
        writer = PdfWriter(io.BytesIO())
        writer.reserve()
        root = writer.write_object({"Type": Name("Catalog")})
        with pytest.raises(StateError):
            writer.close(root)

    def test_writes_after_close(self):
        writer = PdfWriter(io.BytesIO())
        root = writer.write_object({"Type": Name("Catalog")})
        writer.close(root)
        assert writer.closed
        with pytest.raises(StateError):
            writer.write_object({})
        with pytest.raises(StateError):
            writer.reserve()

    def test_sink_errors_become_resource_errors(self):
        with pytest.raises(ResourceError) as exc_info:
            PdfWriter(FailingSink())
        assert isinstance(exc_info.value.__cause__, OSError)
