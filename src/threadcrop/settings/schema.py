"""Schema helpers for the crop settings file."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from jsonschema import Draft202012Validator

from ..config import (
    DEFAULT_EAGER_INITIAL_CLAMP,
    DEFAULT_FRAME_FRACTION,
    DEFAULT_MAX_ZOOM,
    DEFAULT_OUTPUT_SIZE,
)

SETTINGS_SCHEMA: dict[str, Any] = {
    "$id": "threadcrop/settings.schema.json",
    "type": "object",
    "required": ["schema", "crop"],
    "properties": {
        "schema": {"const": "threadcrop/settings@1"},
        "crop": {
            "type": "object",
            "required": ["frame", "output"],
            "properties": {
                "frame": {
                    "type": "object",
                    "required": ["sizing", "value"],
                    "properties": {
                        "sizing": {"type": "string", "enum": ["fraction", "margin"]},
                        "value": {"type": "number", "minimum": 0},
                    },
                    "additionalProperties": False,
                },
                "output": {
                    "type": "object",
                    "required": ["width", "height"],
                    "properties": {
                        "width": {"type": "integer", "minimum": 1},
                        "height": {"type": "integer", "minimum": 1},
                    },
                    "additionalProperties": False,
                },
                "eager_initial_clamp": {"type": "boolean"},
                "max_zoom": {"type": ["number", "null"], "minimum": 1},
                "fallback_to_full_image": {"type": "boolean"},
            },
            "additionalProperties": True,
        },
    },
    "additionalProperties": True,
}

DEFAULT_SETTINGS: dict[str, Any] = {
    "schema": "threadcrop/settings@1",
    "crop": {
        "frame": {"sizing": "fraction", "value": DEFAULT_FRAME_FRACTION},
        "output": {"width": DEFAULT_OUTPUT_SIZE[0], "height": DEFAULT_OUTPUT_SIZE[1]},
        "eager_initial_clamp": DEFAULT_EAGER_INITIAL_CLAMP,
        "max_zoom": DEFAULT_MAX_ZOOM,
        "fallback_to_full_image": False,
    },
}

_validator = Draft202012Validator(SETTINGS_SCHEMA)


def merge_with_defaults(data: dict[str, Any] | None) -> dict[str, Any]:
    """Merge *data* with :data:`DEFAULT_SETTINGS` and validate the result."""

    merged = deepcopy(DEFAULT_SETTINGS)
    if data:
        for key, value in data.items():
            if key == "crop" and isinstance(value, dict):
                target = merged.setdefault("crop", {})
                for sub_key, sub_value in value.items():
                    if isinstance(sub_value, dict) and isinstance(target.get(sub_key), dict):
                        target[sub_key] = {**target[sub_key], **sub_value}
                        continue
                    target[sub_key] = sub_value
                continue
            merged[key] = value
    _validator.validate(merged)
    return merged


def validate_settings(data: dict[str, Any]) -> None:
    """Validate *data* against the settings schema."""

    _validator.validate(data)


__all__ = ["DEFAULT_SETTINGS", "SETTINGS_SCHEMA", "merge_with_defaults", "validate_settings"]
