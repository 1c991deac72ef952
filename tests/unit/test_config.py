"""Unit tests for config.py"""

import pytest

from mdgarden.config import load_config


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Run each test away from any real config.yaml."""
    monkeypatch.chdir(tmp_path)


def test_load_config_defaults(monkeypatch):
    """Settings defaults apply when nothing else is set."""
    monkeypatch.delenv("MDGARDEN_DB_URL", raising=False)
    monkeypatch.delenv("MDGARDEN_MAX_DEPTH", raising=False)
    settings = load_config()
    assert settings.db_url == "sqlite:///mdgarden.db"
    assert settings.max_depth == 4
    assert settings.publish_key == "dg-publish"


def test_load_config_env_max_depth(monkeypatch):
    """MDGARDEN_MAX_DEPTH is coerced to int."""
    monkeypatch.setenv("MDGARDEN_MAX_DEPTH", "2")
    assert load_config().max_depth == 2


def test_load_config_env_overrides_config_yaml(tmp_path, monkeypatch):
    (tmp_path / "config.yaml").write_text("output_dir: site\n")
    monkeypatch.setenv("MDGARDEN_OUTPUT_DIR", "public")
    assert load_config().output_dir == "public"


def test_load_config_cli_overrides_env(monkeypatch):
    """A non-None CLI override beats the env var; None overrides are ignored."""
    monkeypatch.setenv("MDGARDEN_VAULT_DIR", "env-vault")
    assert load_config(overrides={"vault_dir": "cli-vault"}).vault_dir == "cli-vault"
    assert load_config(overrides={"vault_dir": None}).vault_dir == "env-vault"


def test_load_config_nested_lists(tmp_path):
    """Custom filters and path rewrite rules are read from config.yaml."""
    (tmp_path / "config.yaml").write_text(
        "custom_filters:\n"
        "  - pattern: foo\n"
        "    replace: bar\n"
        "path_rewrite_rules:\n"
        "  - from: private/\n"
        "    to: ''\n"
    )
    settings = load_config()
    assert settings.custom_filters[0].flags == "g"
    assert settings.path_rewrite_rules[0].from_ == "private/"


def test_load_config_invalid_yaml(tmp_path):
    (tmp_path / "config.yaml").write_text("key: [unclosed\n")
    with pytest.raises(ValueError, match="Invalid config.yaml"):
        load_config()


def test_load_config_invalid_value(monkeypatch):
    """max_depth must be at least 1."""
    monkeypatch.setenv("MDGARDEN_MAX_DEPTH", "0")
    with pytest.raises(ValueError, match="Invalid settings"):
        load_config()


def test_load_config_invalid_log_level(monkeypatch):
    monkeypatch.setenv("MDGARDEN_LOG_LEVEL", "LOUD")
    with pytest.raises(ValueError, match="Invalid settings"):
        load_config()
