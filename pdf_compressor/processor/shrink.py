"""PDF compression pipeline.

Steps
-----
1) Reject artifacts whose declared media type is not PDF (before parsing).
2) Parse the input bytes into a source document.
3) Create an empty output document.
4) Copy every page of the source, in order, into the output.
5) Save the output with the four settings fields as save options.

The size reduction comes from re-serialization: compressed streams and,
when requested, object streams. Page content is not altered.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Optional

from pdf_compressor.errors import DocumentProcessingError, InvalidInputKind
from pdf_compressor.processor.document import DocumentModel, PikepdfDocumentModel
from pdf_compressor.processor.presets import CompressionSettings

PDF_MARKER = "pdf"
OUTPUT_FILENAME = "compressed.pdf"
OUTPUT_MEDIA_TYPE = "application/pdf"


@dataclass(frozen=True)
class InputArtifact:
    """A user-selected file: declared media type plus raw bytes."""
    media_type: str
    data: bytes
    filename: str = "document.pdf"

    def is_pdf(self) -> bool:
        return PDF_MARKER in (self.media_type or "").lower()


@dataclass(frozen=True)
class CompressionResult:
    data: bytes
    page_count: int
    original_size: int
    compressed_size: int

    @property
    def reduction_percent(self) -> float:
        if self.original_size <= 0:
            return 0.0
        return (self.original_size - self.compressed_size) / self.original_size * 100


def _run(artifact: InputArtifact, settings: CompressionSettings, model: DocumentModel) -> tuple[bytes, int]:
    log = logging.getLogger("pdf_compressor.processor.shrink")

    if not artifact.is_pdf():
        log.info("Rejected %s: declared type %r is not PDF", artifact.filename, artifact.media_type)
        raise InvalidInputKind()

    src: Any = None
    dst: Any = None
    try:
        src = model.load(artifact.data)
        dst = model.create()
        pages = model.copy_pages(src, dst, settings.objects_per_tick)
        if pages == 0 and settings.add_default_page:
            model.add_blank_page(dst)
            pages = 1
        out = model.save(dst, settings)
    except Exception as e:
        log.exception("Compression failed for %s: %s", artifact.filename, e)
        raise DocumentProcessingError(str(e) or None) from e
    finally:
        # dst may still reference src streams until saved; close dst first
        for doc in (dst, src):
            if doc is not None:
                try:
                    model.close(doc)
                except Exception as e:
                    log.warning("Failed to close document: %s", e)

    log.info(
        "Compressed %s: pages=%s size=%s -> %s options=%s",
        artifact.filename,
        pages,
        len(artifact.data),
        len(out),
        settings.as_save_options(),
    )
    return out, pages


def compress_pdf(
        artifact: InputArtifact,
        settings: CompressionSettings,
        *,
        model: Optional[DocumentModel] = None,
) -> bytes:
    """Re-serialize `artifact` with `settings` and return the output bytes.

    Raises
    ------
    InvalidInputKind
        The declared media type does not contain "pdf". The model is not
        consulted.
    DocumentProcessingError
        Any parse, copy or save failure; the cause is chained.
    """
    out, _ = _run(artifact, settings, model or PikepdfDocumentModel())
    return out


def compress_with_stats(
        artifact: InputArtifact,
        settings: CompressionSettings,
        *,
        model: Optional[DocumentModel] = None,
) -> CompressionResult:
    out, pages = _run(artifact, settings, model or PikepdfDocumentModel())
    return CompressionResult(
        data=out,
        page_count=pages,
        original_size=len(artifact.data),
        compressed_size=len(out),
    )


async def compress_pdf_async(
        artifact: InputArtifact,
        settings: CompressionSettings,
        *,
        model: Optional[DocumentModel] = None,
) -> bytes:
    """`compress_pdf` in a worker thread so the event loop stays responsive."""
    return await asyncio.to_thread(compress_pdf, artifact, settings, model=model)


async def compress_with_stats_async(
        artifact: InputArtifact,
        settings: CompressionSettings,
        *,
        model: Optional[DocumentModel] = None,
) -> CompressionResult:
    return await asyncio.to_thread(compress_with_stats, artifact, settings, model=model)
