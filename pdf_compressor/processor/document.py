"""Document-model adapter.

The pipeline only talks to a `DocumentModel`: load bytes, create an empty
document, copy pages across, save with options. `PikepdfDocumentModel` is
the production implementation; tests substitute spies.
"""

from __future__ import annotations

import io
import logging
import time
from typing import Any, Protocol

import pikepdf

from pdf_compressor.processor.presets import CompressionSettings

# US Letter, points
BLANK_PAGE_SIZE = (612, 792)


class DocumentModel(Protocol):
    def load(self, data: bytes) -> Any: ...

    def create(self) -> Any: ...

    def copy_pages(self, src: Any, dst: Any, objects_per_tick: int) -> int: ...

    def add_blank_page(self, doc: Any) -> None: ...

    def save(self, doc: Any, settings: CompressionSettings) -> bytes: ...

    def close(self, doc: Any) -> None: ...


class PikepdfDocumentModel:
    """`DocumentModel` backed by pikepdf (qpdf)."""

    def __init__(self) -> None:
        self.logger = logging.getLogger("pdf_compressor.document")

    def load(self, data: bytes) -> pikepdf.Pdf:
        # BytesIO copy keeps the caller's buffer untouched
        return pikepdf.Pdf.open(io.BytesIO(bytes(data)))

    def create(self) -> pikepdf.Pdf:
        return pikepdf.Pdf.new()

    def copy_pages(self, src: pikepdf.Pdf, dst: pikepdf.Pdf, objects_per_tick: int) -> int:
        """Append every page of `src` to `dst`, in order.

        After each batch of `objects_per_tick` pages the worker thread yields,
        so a long document does not hog the interpreter.
        """
        copied = 0
        for page in src.pages:
            dst.pages.append(page)
            copied += 1
            if copied % objects_per_tick == 0:
                time.sleep(0)
        return copied

    def add_blank_page(self, doc: pikepdf.Pdf) -> None:
        doc.add_blank_page(page_size=BLANK_PAGE_SIZE)

    def save(self, doc: pikepdf.Pdf, settings: CompressionSettings) -> bytes:
        mode = (
            pikepdf.ObjectStreamMode.generate
            if settings.use_object_streams
            else pikepdf.ObjectStreamMode.disable
        )
        # quality has no image re-encoding counterpart here
        self.logger.debug("Saving with options=%s", settings.as_save_options())
        out = io.BytesIO()
        doc.save(out, compress_streams=True, object_stream_mode=mode)
        return out.getvalue()

    def close(self, doc: pikepdf.Pdf) -> None:
        doc.close()


def pdf_page_count(data: bytes) -> int:
    """Count pages of a PDF held in memory."""
    with pikepdf.Pdf.open(io.BytesIO(data)) as pdf:
        return len(pdf.pages)
