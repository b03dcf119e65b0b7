"""Base model for host-supplied option payloads.

Every option model inherits from :class:`OpenMapBaseModel` which
provides:

* frozen instances, so a parsed config can be shared between the
  controller, the marker manager and the lifecycle adapter.
* A ``model_validator(mode="before")`` that drops blank values
  (``None``, ``""``, whitespace) so the field default is used. Form
  driven hosts send every unset input as an empty string.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


class OpenMapBaseModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    @staticmethod
    def _clean_dict(values: dict[str, Any]) -> dict[str, Any]:
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            if isinstance(value, str) and not value.strip():
                continue
            cleaned[key] = value
        return cleaned

    @model_validator(mode="before")
    @classmethod
    def _drop_blank_values(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        return OpenMapBaseModel._clean_dict(values)
