"""Settings file management with validation and change notifications."""

from __future__ import annotations

import os
import sys
from copy import deepcopy
from pathlib import Path
from typing import Any

from jsonschema import ValidationError
from PySide6.QtCore import QObject, Signal

from ..crop.frame import CropFramePolicy, FrameSizing
from ..crop.session import CropOptions
from ..errors import SettingsLoadError, SettingsValidationError
from ..utils.jsonio import read_json, write_json
from .schema import DEFAULT_SETTINGS, merge_with_defaults


def default_settings_path() -> Path:
    """Return the default settings.json location for the current platform."""

    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "threadcrop" / "settings.json"
        return Path.home() / "AppData" / "Roaming" / "threadcrop" / "settings.json"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "threadcrop" / "settings.json"
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / "threadcrop" / "settings.json"
    return Path.home() / ".config" / "threadcrop" / "settings.json"


def crop_options_from_settings(data: dict[str, Any]) -> CropOptions:
    """Build engine :class:`CropOptions` from a validated settings mapping."""

    crop = data["crop"]
    frame = crop["frame"]
    output = crop["output"]
    max_zoom = crop.get("max_zoom")
    return CropOptions(
        policy=CropFramePolicy(FrameSizing(frame["sizing"]), float(frame["value"])),
        output_size=(int(output["width"]), int(output["height"])),
        eager_initial_clamp=bool(crop.get("eager_initial_clamp", True)),
        max_zoom=None if max_zoom is None else float(max_zoom),
        fallback_to_full_image=bool(crop.get("fallback_to_full_image", False)),
    )


class SettingsManager(QObject):
    """Load, validate and persist crop settings."""

    settingsChanged = Signal(str, object)

    def __init__(self, path: Path | None = None) -> None:
        super().__init__()
        self._path = path
        self._data: dict[str, Any] = deepcopy(DEFAULT_SETTINGS)

    @property
    def path(self) -> Path:
        return self._path or default_settings_path()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def load(self, *, persist: bool = True) -> None:
        """Load the settings JSON from disk, creating defaults if missing.

        With ``persist=False`` the merged settings are kept in memory only and
        the file on disk is left untouched.
        """

        path = self.path
        self._path = path
        if path.exists():
            try:
                payload = read_json(path)
            except (OSError, ValueError) as exc:
                raise SettingsLoadError(str(exc)) from exc
        else:
            payload = None
        if payload is not None and not isinstance(payload, dict):
            raise SettingsLoadError(f"settings file {path} does not contain an object")
        try:
            self._data = merge_with_defaults(payload)
        except ValidationError as exc:
            raise SettingsValidationError(exc.message) from exc
        if persist:
            self._write()

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return the value for *key*, supporting dotted access for nested keys."""

        target = self._data
        parts = key.split(".")
        for index, part in enumerate(parts):
            if not isinstance(target, dict) or part not in target:
                return default
            value = target[part]
            if index == len(parts) - 1:
                return value
            target = value
        return default

    def set(self, key: str, value: Any) -> None:
        """Update *key* with *value*, validate, persist and notify."""

        if isinstance(value, Path):
            value = str(value)
        candidate = deepcopy(self._data)
        parts = key.split(".")
        target: dict[str, Any] = candidate
        for part in parts[:-1]:
            branch = target.get(part)
            if not isinstance(branch, dict):
                branch = {}
                target[part] = branch
            target = branch
        target[parts[-1]] = value
        try:
            self._data = merge_with_defaults(candidate)
        except ValidationError as exc:
            raise SettingsValidationError(exc.message) from exc
        self._write()
        self.settingsChanged.emit(key, value)

    def crop_options(self) -> CropOptions:
        """Return the engine options described by the current settings."""

        return crop_options_from_settings(self._data)

    # ------------------------------------------------------------------
    # Internal utilities
    # ------------------------------------------------------------------
    def _write(self) -> None:
        path = self.path
        self._path = path
        write_json(path, self._data)


__all__ = ["SettingsManager", "crop_options_from_settings", "default_settings_path"]
