"""Records stored for each breaking change or action to take."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ApiRecord(BaseModel):
    """Contextual data about one piece of API, flattened for the renderer.

    Only the fields that were explicitly set are serialized, so each change
    kind carries exactly the fields relevant to it.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)

    name: str
    api_type: str = Field(alias="apiType")
    file: str | None = None
    line: int | None = None
    class_name: str | None = Field(default=None, alias="class")
    function: str | None = None
    method: str | None = None
    message: str | None = None
    from_value: Any = Field(default=None, alias="from")
    to_value: Any = Field(default=None, alias="to")
    from_orig: str | None = Field(default=None, alias="fromOrig")
    to_orig: str | None = Field(default=None, alias="toOrig")
    is_now: bool | None = Field(default=None, alias="isNow")
    hint: str | None = None
    hint_orig: str | None = Field(default=None, alias="hintOrig")

    def extend(self, **fields: Any) -> ApiRecord:
        """Copy of this record with extra (or replaced) fields set."""
        data = self.model_dump(exclude_unset=True)
        data.update(fields)
        return ApiRecord(**data)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True)


__all__ = ["ApiRecord"]
