"""Tests for config loading and validation."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from pai.config import load_config
from pai.schemas.config import AuditConfig


class TestAuditConfig:
    """Test the AuditConfig Pydantic model directly."""

    def test_empty_config_is_valid(self) -> None:
        cfg = AuditConfig()
        assert cfg.target_url == ""
        assert cfg.output_format == "json"
        assert cfg.output_directory == "./output"
        assert (cfg.viewport_width, cfg.viewport_height) == (1280, 800)
        assert (cfg.max_text_candidates, cfg.max_contrast_checks) == (1500, 1000)
        assert cfg.extended_checks is False
        assert cfg.disabled_checks == []

    def test_target_url_is_stripped(self) -> None:
        cfg = AuditConfig(target_url="  https://example.com  ")
        assert cfg.target_url == "https://example.com"

    @pytest.mark.parametrize("url", ["example.com", "ftp://example.com", "https://"])
    def test_rejects_non_http_urls(self, url: str) -> None:
        with pytest.raises(ValidationError, match="target_url"):
            AuditConfig(target_url=url)

    def test_rejects_unknown_format(self) -> None:
        with pytest.raises(ValidationError):
            AuditConfig(output_format="pdf")

    def test_rejects_unknown_check_names(self) -> None:
        with pytest.raises(ValidationError, match="colour"):
            AuditConfig(disabled_checks=["contrast", "colour"])

    def test_rejects_negative_caps(self) -> None:
        with pytest.raises(ValidationError, match="negative"):
            AuditConfig(max_contrast_checks=-1)

    def test_rejects_empty_viewport(self) -> None:
        with pytest.raises(ValidationError, match="Viewport"):
            AuditConfig(viewport_width=0)


class TestLoadConfig:
    """Test YAML file loading."""

    def test_load_valid_config(self, tmp_config: Path) -> None:
        cfg = load_config(tmp_config)
        assert cfg.target_url == "https://example.com"
        assert cfg.output_format == "text"

    def test_file_not_found(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nonexistent.yml")

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        cfg_file = tmp_path / "empty.yml"
        cfg_file.write_text("")
        assert load_config(cfg_file) == AuditConfig()

    def test_non_mapping_rejected(self, tmp_path: Path) -> None:
        cfg_file = tmp_path / "list.yml"
        cfg_file.write_text("- just\n- a list\n")
        with pytest.raises(ValueError, match="YAML mapping"):
            load_config(cfg_file)

    def test_invalid_config_raises(self, tmp_path: Path) -> None:
        cfg_file = tmp_path / "bad.yml"
        cfg_file.write_text('target_url: "not a url"\n')
        with pytest.raises(ValidationError):
            load_config(cfg_file)

    def test_null_disabled_checks(self, tmp_path: Path) -> None:
        """A key with only commented-out items should load as empty list."""
        cfg_file = tmp_path / "null.yml"
        cfg_file.write_text("disabled_checks:\n  # - contrast\n")
        assert load_config(cfg_file).disabled_checks == []

    def test_full_config(self, tmp_path: Path) -> None:
        cfg_file = tmp_path / "full.yml"
        cfg_file.write_text(
            """\
target_url: "https://example.com/shop"
output_format: html
viewport_width: 1440
viewport_height: 900
max_text_candidates: 300
max_contrast_checks: 200
extended_checks: true
disabled_checks:
  - keyboard
"""
        )
        cfg = load_config(cfg_file)
        assert cfg.output_format == "html"
        assert cfg.viewport_width == 1440
        assert cfg.max_contrast_checks == 200
        assert cfg.extended_checks is True
        assert cfg.disabled_checks == ["keyboard"]
