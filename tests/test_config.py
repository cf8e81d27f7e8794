"""Tests for settings persistence."""

import json
import logging

from visualmapper.config import EditorSettings, load_settings, save_settings


class TestEditorSettings:

    def test_defaults(self):
        settings = EditorSettings()
        assert settings.snap_threshold == 15.0
        assert settings.overlap_snap_threshold == 5.0
        assert settings.mtv_max_iterations == 10

    def test_recent_exports(self):
        settings = EditorSettings(max_recent_exports=2)
        settings.add_recent_export("a.dxf")
        settings.add_recent_export("b.dxf")
        settings.add_recent_export("a.dxf")
        settings.add_recent_export("c.dxf")
        assert settings.recent_exports == ["c.dxf", "a.dxf"]


class TestLoadSave:

    def test_round_trip(self, tmp_path):
        path = tmp_path / "settings.json"
        settings = EditorSettings(snap_threshold=20.0, layer_prefix="VM_")
        assert save_settings(settings, path)
        assert load_settings(path) == settings

    def test_missing_file(self, tmp_path):
        assert load_settings(tmp_path / "none.json") == EditorSettings()

    def test_unknown_keys_ignored(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"snap_threshold": 9.0, "theme": "dark"}))
        assert load_settings(path).snap_threshold == 9.0

    def test_corrupt_file_warns(self, tmp_path, caplog):
        path = tmp_path / "settings.json"
        path.write_text("{not json")
        with caplog.at_level(logging.WARNING, logger="visualmapper.config"):
            assert load_settings(path) == EditorSettings()
        assert "Could not load settings" in caplog.text

    def test_save_failure(self, tmp_path):
        assert not save_settings(EditorSettings(), tmp_path / "missing" / "s.json")
