from __future__ import annotations

from pathlib import Path

import pytest

from carebot.config import load_config, typing_delay


def test_default_config_file(config_path: Path, clean_env):
    cfg = load_config(str(config_path))
    assert cfg["bot"]["name"] == "DialysisCareBot"
    assert typing_delay(cfg) == 1.0
    assert cfg["server"]["cors_origins"] == ["*"]


def test_missing_file_falls_back_to_defaults(tmp_path: Path, clean_env):
    cfg = load_config(str(tmp_path / "missing.yaml"))
    assert cfg["chat"]["typing_delay"] == 1.0
    assert cfg["logging"]["level"] == "INFO"


def test_partial_file_is_merged_over_defaults(tmp_path: Path, clean_env):
    p = tmp_path / "cfg.yaml"
    p.write_text("chat:\n  typing_delay: 0.25\n", encoding="utf-8")
    cfg = load_config(str(p))
    assert typing_delay(cfg) == 0.25
    assert cfg["bot"]["name"] == "DialysisCareBot"


def test_env_path_and_overrides(tmp_path: Path, clean_env, monkeypatch: pytest.MonkeyPatch):
    p = tmp_path / "cfg.yaml"
    p.write_text("bot:\n  name: KidneyPal\n", encoding="utf-8")
    monkeypatch.setenv("CAREBOT_CONFIG", str(p))
    monkeypatch.setenv("CAREBOT__CHAT__TYPING_DELAY", "0.5")
    monkeypatch.setenv("CAREBOT__SERVER__DEBUG", "true")
    monkeypatch.setenv("CAREBOT__LOGGING__LEVEL", "DEBUG")
    cfg = load_config()
    assert cfg["bot"]["name"] == "KidneyPal"
    assert cfg["chat"]["typing_delay"] == 0.5
    assert cfg["server"]["debug"] is True
    assert cfg["logging"]["level"] == "DEBUG"


def test_negative_delay_clamped():
    assert typing_delay({"chat": {"typing_delay": -3}}) == 0.0


def test_invalid_yaml_raises(tmp_path: Path, clean_env):
    p = tmp_path / "bad.yaml"
    p.write_text("chat: [unclosed\n", encoding="utf-8")
    with pytest.raises(RuntimeError):
        load_config(str(p))


def test_non_mapping_yaml_raises(tmp_path: Path, clean_env):
    p = tmp_path / "list.yaml"
    p.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(RuntimeError):
        load_config(str(p))
