"""Tests for configuration loading and validation."""

import pytest

from btmm.config_loader import (
    ConfigError,
    default_config,
    load_and_validate_config,
    load_config,
    validate_config,
)


def write(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_defaults(monkeypatch):
    """Test the configuration used without a file."""
    monkeypatch.delenv("BTMM_LANG", raising=False)

    assert default_config() == {
        "random_seed": None,
        "advance_per_group": 2,
        "lang": "pt",
        "db_path": None,
    }
    assert load_and_validate_config(None) == default_config()


def test_load_full_config(tmp_path):
    """Test a complete config file."""
    path = write(
        tmp_path,
        "random_seed: 42\nadvance_per_group: 1\nlang: en\ndb_path: data/cup.sqlite\n",
    )

    config = load_and_validate_config(path)

    assert config == {
        "random_seed": 42,
        "advance_per_group": 1,
        "lang": "en",
        "db_path": "data/cup.sqlite",
    }


def test_missing_file(tmp_path):
    """Test a path that does not exist."""
    with pytest.raises(ConfigError, match="not found"):
        load_config(str(tmp_path / "nope.yaml"))


def test_empty_and_invalid_yaml(tmp_path):
    """Test unreadable config files."""
    with pytest.raises(ConfigError, match="empty"):
        load_config(write(tmp_path, ""))

    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_config(write(tmp_path, "lang: [pt\n"))

    with pytest.raises(ConfigError, match="mapping"):
        load_config(write(tmp_path, "- pt\n- en\n"))


@pytest.mark.parametrize(
    "config, message",
    [
        ({"random_seed": "abc"}, "random_seed"),
        ({"random_seed": True}, "random_seed"),
        ({"advance_per_group": 0}, "advance_per_group"),
        ({"advance_per_group": "2"}, "advance_per_group"),
        ({"lang": "es"}, "lang"),
        ({"db_path": 5}, "db_path"),
    ],
)
def test_invalid_values(config, message):
    """Test that each setting is checked."""
    with pytest.raises(ConfigError, match=message):
        validate_config(config)


def test_unknown_keys_are_dropped():
    """Test that only known settings are returned."""
    assert "colour" not in validate_config({"colour": "blue"})


def test_language_from_environment(monkeypatch):
    """Test that BTMM_LANG picks the language when the file does not."""
    monkeypatch.setenv("BTMM_LANG", "en")

    assert validate_config({})["lang"] == "en"
    assert validate_config({"lang": "pt"})["lang"] == "pt"
