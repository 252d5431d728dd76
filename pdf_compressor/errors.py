"""Error hierarchy shared by the pipeline, the session layer and the web app."""

from __future__ import annotations


class CompressorError(Exception):
    """Base class for every error raised by this package."""

    default_message = "An error occurred while compressing the file"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInputKind(CompressorError):
    """The uploaded artifact is not declared as a PDF."""

    default_message = "Please upload a PDF file"


class DocumentProcessingError(CompressorError):
    """Parsing, page copy or save failed inside the document model."""


class InvalidSettings(CompressorError, ValueError):
    """A compression settings record failed validation."""

    default_message = "Invalid compression settings"


class UnknownPreset(CompressorError, ValueError):
    default_message = "Unknown compression preset"


class SessionBusy(CompressorError):
    default_message = "A compression is already running for this session"


class CustomNotSelected(CompressorError):
    default_message = "Custom settings can only be edited when the custom preset is selected"


class SessionNotFound(CompressorError):
    default_message = "Session not found"
