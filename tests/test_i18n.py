"""Tests for internationalization (i18n) module."""

import os
import pytest

from btmm.i18n import (
    load_strings,
    get_string,
    clear_cache,
    get_language_from_env,
    SUPPORTED_LANGUAGES,
    DEFAULT_LANGUAGE,
)


class TestI18n:
    """Test i18n functionality."""

    def setup_method(self):
        """Clear cache before each test."""
        clear_cache()
        if "BTMM_LANG" in os.environ:
            del os.environ["BTMM_LANG"]

    def teardown_method(self):
        """Clean up after each test."""
        clear_cache()
        if "BTMM_LANG" in os.environ:
            del os.environ["BTMM_LANG"]

    def test_load_strings_portuguese(self):
        """Test loading Portuguese strings."""
        strings = load_strings("pt")
        assert isinstance(strings, dict)
        assert strings["app"]["title"] == "Gerenciador de Torneios de Beach Tennis"

    def test_load_strings_english(self):
        """Test loading English strings."""
        strings = load_strings("en")
        assert strings["app"]["title"] == "Beach Tennis Tournament Manager"

    def test_load_strings_invalid_language(self):
        """Test loading strings with invalid language raises error."""
        with pytest.raises(ValueError, match="not supported"):
            load_strings("fr")

    def test_load_strings_caching(self):
        """Test that strings are cached after first load."""
        assert load_strings("pt") is load_strings("pt")

    def test_round_names(self):
        """Test bracket round names in both languages."""
        assert get_string("bracket.final", "pt") == "GRANDE FINAL"
        assert get_string("bracket.rounds.quarterfinal", "pt") == "Quartas"
        assert get_string("bracket.rounds.round_of_16", "pt") == "Oitavas"
        assert get_string("bracket.bye", "pt") == "Classificado"

        assert get_string("bracket.final", "en") == "Grand Final"
        assert get_string("bracket.rounds.semifinal", "en") == "Semifinal"

    def test_get_string_with_formatting(self):
        """Test getting a string with format variables."""
        result = get_string("bracket.match_label", "pt", round="Quartas", number=3)
        assert result == "Quartas 3"

        result = get_string("cli.draw.success", "en", pairs=8, groups=2, matches=12)
        assert "8" in result
        assert "12" in result

    def test_get_string_missing_format_variable(self):
        """Test that a missing variable returns the raw string."""
        assert get_string("bracket.match_label", "en", round="Final") == "{round} {number}"

    def test_get_string_missing_key(self):
        """Test getting a non-existent key returns the key itself."""
        assert get_string("nonexistent.key", "pt") == "nonexistent.key"

    def test_get_string_non_leaf_key(self):
        """Test that a key pointing at a section is not a string."""
        assert get_string("bracket.rounds", "en") == "bracket.rounds"

    def test_get_string_unknown_language_falls_back_to_english(self):
        """Test that an unsupported language uses English."""
        assert get_string("bracket.final", "fr") == "Grand Final"

    def test_get_language_from_env_default(self):
        """Test getting language from env when not set."""
        assert get_language_from_env() == DEFAULT_LANGUAGE == "pt"

    def test_get_language_from_env_set(self):
        """Test getting language from env when set."""
        os.environ["BTMM_LANG"] = "en"
        assert get_language_from_env() == "en"

    def test_get_language_from_env_invalid(self):
        """Test getting language from env with invalid value."""
        os.environ["BTMM_LANG"] = "fr"
        assert get_language_from_env() == DEFAULT_LANGUAGE

    def test_both_languages_have_the_same_keys(self):
        """Test that no key is translated in only one language."""

        def keys(strings, prefix=""):
            for key, value in strings.items():
                if isinstance(value, dict):
                    yield from keys(value, f"{prefix}{key}.")
                else:
                    yield f"{prefix}{key}"

        assert set(keys(load_strings("pt"))) == set(keys(load_strings("en")))

    def test_supported_languages(self):
        """Test that supported languages constant is correct."""
        assert SUPPORTED_LANGUAGES == ["pt", "en"]
