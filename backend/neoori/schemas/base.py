"""Shared schema base and the response envelope."""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys; snake_case names are accepted too."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def envelope(data: Any = None, message: str | None = None) -> dict[str, Any]:
    """Build a success envelope: ``{"success": true, "data"?: ..., "message"?: ...}``."""
    body: dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = data
    if message is not None:
        body["message"] = message
    return body


def error_envelope(error: str) -> dict[str, Any]:
    return {"success": False, "error": error}
