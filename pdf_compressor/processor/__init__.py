"""PDF compression services."""

from .document import DocumentModel, PikepdfDocumentModel, pdf_page_count
from .presets import (
    DEFAULT_CUSTOM_SETTINGS,
    DEFAULT_PRESET,
    PRESETS,
    CompressionSettings,
    Preset,
    PresetId,
    describe,
    list_presets,
    resolve,
)
from .shrink import (
    OUTPUT_FILENAME,
    OUTPUT_MEDIA_TYPE,
    CompressionResult,
    InputArtifact,
    compress_pdf,
    compress_pdf_async,
    compress_with_stats,
    compress_with_stats_async,
)

__all__ = [
    "CompressionResult",
    "CompressionSettings",
    "DEFAULT_CUSTOM_SETTINGS",
    "DEFAULT_PRESET",
    "DocumentModel",
    "InputArtifact",
    "OUTPUT_FILENAME",
    "OUTPUT_MEDIA_TYPE",
    "PRESETS",
    "PikepdfDocumentModel",
    "Preset",
    "PresetId",
    "compress_pdf",
    "compress_pdf_async",
    "compress_with_stats",
    "compress_with_stats_async",
    "describe",
    "list_presets",
    "pdf_page_count",
    "resolve",
]
