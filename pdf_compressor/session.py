"""Per-browser compression session.

State machine::

    idle -> running -> succeeded | failed
    succeeded | failed -> idle   (next file selection)

Only one run may be in flight per session; preset and custom-settings edits
are refused while a run is in progress.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from pdf_compressor.errors import CompressorError, CustomNotSelected, SessionBusy
from pdf_compressor.processor.document import DocumentModel
from pdf_compressor.processor.presets import (
    DEFAULT_CUSTOM_SETTINGS,
    DEFAULT_PRESET,
    CompressionSettings,
    PresetId,
    describe,
    resolve,
)
from pdf_compressor.processor.shrink import (
    OUTPUT_FILENAME,
    OUTPUT_MEDIA_TYPE,
    CompressionResult,
    InputArtifact,
    compress_with_stats_async,
)


INTERRUPTED_MESSAGE = "Compression was interrupted, please try again"


class SessionState(str, Enum):
    idle = "idle"
    running = "running"
    succeeded = "succeeded"
    failed = "failed"


@dataclass(frozen=True)
class OutputArtifact:
    """Downloadable result of the latest successful run."""
    data: bytes
    filename: str = OUTPUT_FILENAME
    media_type: str = OUTPUT_MEDIA_TYPE


class CompressionSession:
    def __init__(self, session_id: str, model: Optional[DocumentModel] = None) -> None:
        self.session_id = session_id
        self.model = model
        self.selected_preset: PresetId = DEFAULT_PRESET
        self.custom_settings: CompressionSettings = DEFAULT_CUSTOM_SETTINGS
        self.state = SessionState.idle
        self.error: Optional[str] = None
        self.output: Optional[OutputArtifact] = None
        self.last_result: Optional[CompressionResult] = None
        self.created_at = time.time()
        self.touched_at = self.created_at
        self._lock = asyncio.Lock()
        self.log = logging.LoggerAdapter(
            logging.getLogger("pdf_compressor.session"), {"session_id": session_id}
        )

    @property
    def is_loading(self) -> bool:
        return self.state is SessionState.running

    def touch(self) -> None:
        self.touched_at = time.time()

    def _ensure_not_running(self) -> None:
        if self.is_loading:
            raise SessionBusy()

    # ----------------------------
    # Settings
    # ----------------------------

    def select_preset(self, preset_id: PresetId | str) -> None:
        self._ensure_not_running()
        self.selected_preset = PresetId.parse(preset_id)
        self.log.info("Preset selected: %s", self.selected_preset.value)

    def update_custom(self, **fields: Any) -> CompressionSettings:
        """Apply user edits to the custom settings (snake_case field names)."""
        self._ensure_not_running()
        if self.selected_preset is not PresetId.custom:
            raise CustomNotSelected()
        self.custom_settings = CompressionSettings.from_mapping(fields, base=self.custom_settings)
        self.log.info("Custom settings updated: %s", self.custom_settings.as_save_options())
        return self.custom_settings

    def current_settings(self) -> CompressionSettings:
        return resolve(self.selected_preset, self.custom_settings)

    # ----------------------------
    # Runs
    # ----------------------------

    def select_file(self) -> None:
        """A new file was picked: leave succeeded/failed for idle."""
        self._ensure_not_running()
        if self.state in (SessionState.succeeded, SessionState.failed):
            self.state = SessionState.idle
            self.error = None

    async def run(self, artifact: InputArtifact) -> CompressionResult:
        """Compress `artifact` with the current settings.

        On success the previous output is replaced. On failure the error is
        recorded, the output cleared, and the error re-raised.
        """
        if self._lock.locked():
            raise SessionBusy()
        async with self._lock:
            self.select_file()
            settings = self.current_settings()
            self.state = SessionState.running
            self.error = None
            self.touch()
            self.log.info(
                "Run started: file=%s preset=%s", artifact.filename, self.selected_preset.value
            )
            try:
                result = await compress_with_stats_async(artifact, settings, model=self.model)
            except CompressorError as e:
                self.state = SessionState.failed
                self.error = e.message
                self.output = None
                self.last_result = None
                self.log.warning("Run failed: %s", e.message)
                raise
            except BaseException:
                # cancellation ends the run as failed
                self.state = SessionState.failed
                self.error = INTERRUPTED_MESSAGE
                self.output = None
                self.last_result = None
                self.log.warning("Run interrupted")
                raise
            finally:
                self.touch()

            self.output = OutputArtifact(data=result.data)
            self.last_result = result
            self.state = SessionState.succeeded
            self.log.info(
                "Run succeeded: pages=%s reduction=%.2f%%",
                result.page_count,
                result.reduction_percent,
            )
            return result

    def snapshot(self) -> Dict[str, Any]:
        stats = None
        if self.last_result is not None:
            stats = {
                "page_count": self.last_result.page_count,
                "original_size": self.last_result.original_size,
                "compressed_size": self.last_result.compressed_size,
                "reduction_percent": round(self.last_result.reduction_percent, 2),
            }
        return {
            "state": self.state.value,
            "is_loading": self.is_loading,
            "error": self.error,
            "preset": self.selected_preset.value,
            "description": describe(self.selected_preset),
            "settings": self.current_settings().as_save_options(),
            "custom_settings": self.custom_settings.as_save_options(),
            "has_output": self.output is not None,
            "stats": stats,
        }
