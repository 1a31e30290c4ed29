"""JSON file settings store.

Settings are an opaque mapping to the export pipeline; this store only
loads and replaces the whole blob. Missing files yield the defaults.
"""

from __future__ import annotations

import copy
import json
import os
from pathlib import Path
from typing import Any, Mapping

from core.errors import EtymologStoreError

_PUNCTUATION_MARKS = (
    "wordSeparator",
    "sentenceSeparator",
    "comma",
    "questionMark",
    "exclamationMark",
    "colon",
    "semicolon",
    "ellipsis",
    "quotationOpen",
    "quotationClose",
)

DEFAULT_SETTINGS: dict[str, Any] = {
    "conlangName": "",
    "simpleScriptSystem": False,
    "defaultGalleryView": "compact",
    "autoSaveInterval": 0,
    "autoManageGlyphs": False,
    "punctuation": {mark: {"graphemeId": None, "useNoGlyph": False} for mark in _PUNCTUATION_MARKS},
    "writingSystem": {
        "glyphDirection": "ltr",
        "wordOrder": "ltr",
        "lineProgression": "ttb",
        "glyphStacking": "horizontal",
        "wordWrap": "word",
        "baselineAlignment": "bottom",
    },
}


class JsonSettingsStore:
    """Settings blob persisted as one JSON file."""

    def __init__(self, settings_path: Path) -> None:
        self._settings_path = settings_path

    def load(self) -> dict[str, Any]:
        """Load settings, falling back to defaults when no file exists.

        Returns:
            Settings mapping.

        Raises:
            EtymologStoreError: If the file is unreadable or not a JSON object.
        """
        if not self._settings_path.exists():
            return copy.deepcopy(DEFAULT_SETTINGS)
        try:
            payload = json.loads(self._settings_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as error:
            raise EtymologStoreError(
                f"Failed to read settings from {self._settings_path}: {error}"
            ) from error
        if not isinstance(payload, dict):
            raise EtymologStoreError(
                f"Invalid settings file {self._settings_path}: expected JSON object"
            )
        return payload

    def save(self, settings: Mapping[str, Any]) -> None:
        """Replace the settings file atomically.

        Args:
            settings: Settings mapping to persist.

        Raises:
            EtymologStoreError: If the file cannot be written.
        """
        temporary_path = self._settings_path.with_suffix(".json.tmp")
        try:
            self._settings_path.parent.mkdir(parents=True, exist_ok=True)
            temporary_path.write_text(
                json.dumps(dict(settings), indent=2, ensure_ascii=False) + "\n",
                encoding="utf-8",
            )
            os.replace(temporary_path, self._settings_path)
        except (OSError, TypeError, ValueError) as error:
            raise EtymologStoreError(
                f"Failed to write settings to {self._settings_path}: {error}"
            ) from error
