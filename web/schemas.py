"""
web/schemas.py

Request bodies for the session endpoints.
- `PresetIn.preset`: one of maximum|balanced|minimal|custom.
- `CustomSettingsIn`: any subset of the four settings fields, camelCase or
  snake_case; omitted fields keep their current value.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class PresetIn(BaseModel):
    preset: str


class CustomSettingsIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    quality: Optional[float] = None
    use_object_streams: Optional[bool] = Field(default=None, alias="useObjectStreams")
    add_default_page: Optional[bool] = Field(default=None, alias="addDefaultPage")
    objects_per_tick: Optional[int] = Field(default=None, alias="objectsPerTick")

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)
