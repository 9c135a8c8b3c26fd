"""
Tests for searchfix.config — flag loading with per-key fallbacks.
"""

from pathlib import Path

from searchfix.config import default_config, load_config
from searchfix.system_info import DEFAULT_LOG_PATH


class TestLoadConfig:
    def test_missing_file_returns_defaults(self, tmp_path):
        missing = tmp_path / "nonexistent" / "config.toml"
        assert load_config(path=missing) == default_config()

    def test_defaults(self):
        cfg = default_config()
        assert cfg["verbose_logging"] is False
        assert cfg["auto_open_log"] is False
        assert cfg["confirm_before_delete"] is True
        assert cfg["log_path"] == DEFAULT_LOG_PATH

    def test_valid_toml_overrides_flags(self, tmp_path):
        cfg = tmp_path / "config.toml"
        cfg.write_text(
            "verbose_logging = true\n"
            "auto_open_log = true\n"
            "confirm_before_delete = false\n"
        )
        result = load_config(path=cfg)
        assert result["verbose_logging"] is True
        assert result["auto_open_log"] is True
        assert result["confirm_before_delete"] is False

    def test_log_path_expands_user(self, tmp_path):
        cfg = tmp_path / "config.toml"
        cfg.write_text('log_path = "~/searchfix-test.log"\n')
        assert load_config(path=cfg)["log_path"] == Path.home() / "searchfix-test.log"

    def test_malformed_toml_returns_defaults(self, tmp_path):
        cfg = tmp_path / "config.toml"
        cfg.write_text("verbose_logging = [not valid toml\n")
        assert load_config(path=cfg) == default_config()

    def test_wrong_type_falls_back_per_key(self, tmp_path):
        cfg = tmp_path / "config.toml"
        cfg.write_text(
            'auto_open_log = "yes"\n'
            "verbose_logging = true\n"
            "log_path = 42\n"
        )
        result = load_config(path=cfg)
        assert result["auto_open_log"] is False
        assert result["verbose_logging"] is True
        assert result["log_path"] == DEFAULT_LOG_PATH

    def test_comments_in_toml_preserved(self, tmp_path):
        cfg = tmp_path / "config.toml"
        cfg.write_text(
            "# This is a comment\n"
            "confirm_before_delete = false  # inline comment\n"
        )
        assert load_config(path=cfg)["confirm_before_delete"] is False

    def test_unreadable_file_returns_defaults(self, tmp_path, monkeypatch):
        cfg = tmp_path / "config.toml"
        cfg.write_text("verbose_logging = true\n")

        def deny(self):
            raise PermissionError("denied")

        monkeypatch.setattr(Path, "read_bytes", deny)
        assert load_config(path=cfg) == default_config()
