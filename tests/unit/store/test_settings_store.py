"""Unit tests for the JSON settings store."""

from __future__ import annotations

import pytest

from core.errors import EtymologStoreError
from lexicon_fixtures import SAMPLE_SETTINGS
from store.settings_store import DEFAULT_SETTINGS, JsonSettingsStore


def test_load_returns_defaults_when_file_missing(tmp_path) -> None:
    """A missing settings file should yield a copy of the defaults."""
    store = JsonSettingsStore(tmp_path / "settings.json")

    settings = store.load()
    settings["conlangName"] = "changed"

    assert DEFAULT_SETTINGS["conlangName"] == ""
    assert len(settings["punctuation"]) == 10


def test_save_then_load_round_trips_blob(tmp_path) -> None:
    """Saved settings should load back unchanged, including unicode."""
    store = JsonSettingsStore(tmp_path / "nested" / "settings.json")
    settings = dict(SAMPLE_SETTINGS, conlangName="Kabanic ✓")

    store.save(settings)

    assert store.load() == settings
    assert not (tmp_path / "nested" / "settings.json.tmp").exists()


def test_load_rejects_malformed_file(tmp_path) -> None:
    """Corrupt settings files should raise a store error."""
    settings_path = tmp_path / "settings.json"
    settings_path.write_text("{broken", encoding="utf-8")

    with pytest.raises(EtymologStoreError, match="Failed to read settings"):
        JsonSettingsStore(settings_path).load()


def test_load_rejects_non_object_file(tmp_path) -> None:
    """Settings files must hold a JSON object."""
    settings_path = tmp_path / "settings.json"
    settings_path.write_text("[]", encoding="utf-8")

    with pytest.raises(EtymologStoreError, match="expected JSON object"):
        JsonSettingsStore(settings_path).load()
