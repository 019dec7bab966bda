"""Streaming PDF writer - emits objects as they are finished, then xref and trailer."""

from __future__ import annotations

import hashlib
import logging
import zlib
from typing import Any, BinaryIO, Dict, Mapping, Optional, Set

from ..exceptions import ResourceError, StateError
from .objects import Name, Reference, to_pdf

logger = logging.getLogger(__name__)

BINARY_MARKER = b"%\xe2\xe3\xcf\xd3\n"


class PdfWriter:
    """
    Writes indirect objects straight to a binary sink.

    Object ids are assigned sequentially in write order. An id can also be
    reserved up front (the page tree root, which every page references as
    its parent) and filled in later; the cross-reference table is always
    emitted in id order using the offsets recorded at write time. The byte
    offset is counted locally so the sink does not need ``tell()``.
    """

    def __init__(self, sink: BinaryIO, version: str = "1.7", compress: bool = True):
        if sink is None:
            raise ValueError("sink cannot be None")
        self._sink = sink
        self.version = version
        self.compress = compress
        self._offset = 0
        self._offsets: Dict[int, int] = {}
        self._reserved: Set[int] = set()
        self._next_id = 1
        self._digest = hashlib.md5()
        self._closed = False

        self._write(f"%PDF-{version}\n".encode("latin-1"))
        self._write(BINARY_MARKER)

    @property
    def offset(self) -> int:
        """Number of bytes written so far."""
        return self._offset

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def object_count(self) -> int:
        return self._next_id - 1

    def offset_of(self, obj_id: int) -> Optional[int]:
        return self._offsets.get(obj_id)

    def _write(self, data: bytes) -> None:
        try:
            self._sink.write(data)
        except OSError as exc:
            logger.error("IO error while writing PDF output: %s", exc)
            raise ResourceError("Cannot write PDF output", details=str(exc)) from exc
        self._digest.update(data)
        self._offset += len(data)

    def _flush(self) -> None:
        flush = getattr(self._sink, "flush", None)
        if flush is None:
            return
        try:
            flush()
        except OSError as exc:
            raise ResourceError("Cannot flush PDF output", details=str(exc)) from exc

    def _check_open(self) -> None:
        if self._closed:
            raise StateError("PDF writer is closed")

    def _claim_id(self, obj_id: Optional[int]) -> int:
        if obj_id is None:
            obj_id = self._next_id
            self._next_id += 1
            return obj_id
        if obj_id not in self._reserved:
            raise StateError(f"Object {obj_id} was not reserved or is already written")
        self._reserved.discard(obj_id)
        return obj_id

    def reserve(self) -> int:
        """Allocate an object id to be written later."""
        self._check_open()
        obj_id = self._next_id
        self._next_id += 1
        self._reserved.add(obj_id)
        return obj_id

    def write_object(self, body: Any, obj_id: Optional[int] = None) -> int:
        """Serialize *body* as an indirect object and return its id."""
        self._check_open()
        obj_id = self._claim_id(obj_id)
        self._offsets[obj_id] = self._offset
        self._write(f"{obj_id} 0 obj\n".encode("latin-1"))
        self._write(to_pdf(body).encode("latin-1"))
        self._write(b"\nendobj\n")
        self._flush()
        logger.debug("Wrote object %d at offset %d", obj_id, self._offsets[obj_id])
        return obj_id

    def write_stream(
        self,
        dictionary: Optional[Mapping[str, Any]],
        data: bytes,
        obj_id: Optional[int] = None,
        compress: Optional[bool] = None,
    ) -> int:
        """Write a stream object; /Length (and /Filter when compressing) are filled in here.

        Data that already carries a /Filter is written unchanged.
        """
        self._check_open()
        stream_dict: Dict[str, Any] = dict(dictionary or {})
        payload = bytes(data)

        should_compress = self.compress if compress is None else compress
        if should_compress and "Filter" not in stream_dict:
            compressed = zlib.compress(payload)
            if len(compressed) < len(payload):
                stream_dict["Filter"] = Name("FlateDecode")
                payload = compressed
        stream_dict["Length"] = len(payload)

        obj_id = self._claim_id(obj_id)
        self._offsets[obj_id] = self._offset
        self._write(f"{obj_id} 0 obj\n".encode("latin-1"))
        self._write(to_pdf(stream_dict).encode("latin-1"))
        self._write(b"\nstream\n")
        self._write(payload)
        self._write(b"\nendstream\nendobj\n")
        self._flush()
        logger.debug("Wrote stream %d (%d bytes) at offset %d", obj_id, len(payload), self._offsets[obj_id])
        return obj_id

    def close(self, root_id: int, info_id: Optional[int] = None) -> None:
        """Write the cross-reference table and trailer. No writes are accepted afterwards."""
        self._check_open()
        if self._reserved:
            raise StateError("Reserved objects were never written", details=", ".join(map(str, sorted(self._reserved))))
        if root_id not in self._offsets:
            raise StateError(f"Catalog object {root_id} was never written")

        size = self._next_id
        missing = [obj_id for obj_id in range(1, size) if obj_id not in self._offsets]
        if missing:
            raise StateError("Objects missing from cross-reference table", details=", ".join(map(str, missing)))

        xref_offset = self._offset
        lines = [f"xref\n0 {size}\n", "0000000000 65535 f \n"]
        for obj_id in range(1, size):
            lines.append(f"{self._offsets[obj_id]:010d} 00000 n \n")
        self._write("".join(lines).encode("latin-1"))

        file_id = self._digest.digest()
        trailer: Dict[str, Any] = {"Size": size, "Root": Reference(root_id)}
        if info_id is not None:
            trailer["Info"] = Reference(info_id)
        trailer["ID"] = [file_id, file_id]

        self._write(b"trailer\n")
        self._write(to_pdf(trailer).encode("latin-1"))
        self._write(f"\nstartxref\n{xref_offset}\n%%EOF\n".encode("latin-1"))
        self._flush()
        self._closed = True
        logger.debug("Closed PDF with %d objects, xref at %d", size - 1, xref_offset)
