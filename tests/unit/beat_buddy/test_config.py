"""Tests for environment-based configuration."""
import os
from unittest.mock import patch

import pytest

from beat_buddy.config import BeatBuddyConfig

BASE_ENV = {"OPENAI_API_KEY": "sk-test", "LAST_FM_API_KEY": "lfm-test"}


class TestFromEnvironment:

    def test_defaults(self):
        with patch.dict(os.environ, BASE_ENV, clear=True):
            config = BeatBuddyConfig.from_environment()

        assert config.openai_api_key == "sk-test"
        assert config.lastfm_api_key == "lfm-test"
        assert config.lastfm_api_secret is None
        assert config.openai_model == "gpt-4o-mini"
        assert config.max_tokens == 250
        assert config.final_max_tokens == 75
        assert config.temperature == 0.7
        assert config.lastfm_cache_file == "lastfm_cache.db"

    def test_openai_key_fallback(self):
        env = {"OPENAI_KEY": "fallback", "LAST_FM_API_KEY": "lfm"}
        with patch.dict(os.environ, env, clear=True):
            assert BeatBuddyConfig.from_environment().openai_api_key == "fallback"

    def test_overrides(self):
        env = dict(
            BASE_ENV,
            OPENAI_MODEL="gpt-4o",
            BEAT_BUDDY_MAX_TOKENS="300",
            BEAT_BUDDY_FINAL_MAX_TOKENS="50",
            BEAT_BUDDY_TEMPERATURE="0.2",
            LAST_FM_API_SECRET="secret",
            LAST_FM_CACHE_FILE=":memory:",
        )
        with patch.dict(os.environ, env, clear=True):
            config = BeatBuddyConfig.from_environment()

        assert (config.openai_model, config.max_tokens, config.final_max_tokens) == ("gpt-4o", 300, 50)
        assert config.temperature == 0.2
        assert config.lastfm_api_secret == "secret"
        assert config.lastfm_cache_file == ":memory:"

    def test_missing_variables_all_reported(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(EnvironmentError, match="OPENAI_API_KEY, LAST_FM_API_KEY"):
                BeatBuddyConfig.from_environment()


class TestValidate:

    @pytest.mark.parametrize(
        "overrides,message",
        [
            ({"max_tokens": 0}, "max_tokens"),
            ({"final_max_tokens": -1}, "final_max_tokens"),
            ({"temperature": 2.5}, "temperature"),
        ],
    )
    def test_invalid_values(self, overrides, message):
        config = BeatBuddyConfig(openai_api_key="k", lastfm_api_key="l", **overrides)
        with pytest.raises(ValueError, match=message):
            config.validate()

    def test_repr_masks_secrets(self):
        config = BeatBuddyConfig(openai_api_key="sk-secret", lastfm_api_key="lfm-secret", lastfm_api_secret="s")
        text = repr(config)
        assert "sk-secret" not in text
        assert "lfm-secret" not in text
        assert "gpt-4o-mini" in text
