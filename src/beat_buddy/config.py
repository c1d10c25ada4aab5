"""Configuration management for Beat Buddy.

All configuration is read from environment variables (NO .env files).
"""
import os
from dataclasses import dataclass
from typing import Optional

from .conversation import (
    DEFAULT_FINAL_MAX_TOKENS,
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL,
    DEFAULT_TEMPERATURE,
)


@dataclass
class BeatBuddyConfig:
    """Configuration for the Beat Buddy assistant (reads from environment)."""

    # Required
    openai_api_key: str
    lastfm_api_key: str

    # Optional
    lastfm_api_secret: Optional[str] = None
    lastfm_cache_file: str = "lastfm_cache.db"
    openai_model: str = DEFAULT_MODEL
    max_tokens: int = DEFAULT_MAX_TOKENS
    final_max_tokens: int = DEFAULT_FINAL_MAX_TOKENS
    temperature: float = DEFAULT_TEMPERATURE

    @classmethod
    def from_environment(cls) -> 'BeatBuddyConfig':
        """Load configuration from environment variables.

        Returns:
            BeatBuddyConfig: Loaded configuration object

        Raises:
            EnvironmentError: If required environment variables are missing
            ValueError: If a numeric variable cannot be parsed
        """
        required = {
            'OPENAI_API_KEY': os.getenv('OPENAI_API_KEY') or os.getenv('OPENAI_KEY'),
            'LAST_FM_API_KEY': os.getenv('LAST_FM_API_KEY'),
        }

        missing = [var for var, value in required.items() if not value]
        if missing:
            raise EnvironmentError(
                f"Required environment variables missing: {', '.join(missing)}\n"
                f"These variables must be set in your shell environment (NOT in .env files).\n"
                f"Example: export LAST_FM_API_KEY='your-key'"
            )

        return cls(
            openai_api_key=required['OPENAI_API_KEY'],
            lastfm_api_key=required['LAST_FM_API_KEY'],
            lastfm_api_secret=os.getenv('LAST_FM_API_SECRET'),
            lastfm_cache_file=os.getenv('LAST_FM_CACHE_FILE', 'lastfm_cache.db'),
            openai_model=os.getenv('OPENAI_MODEL', DEFAULT_MODEL),
            max_tokens=int(os.getenv('BEAT_BUDDY_MAX_TOKENS', str(DEFAULT_MAX_TOKENS))),
            final_max_tokens=int(os.getenv('BEAT_BUDDY_FINAL_MAX_TOKENS', str(DEFAULT_FINAL_MAX_TOKENS))),
            temperature=float(os.getenv('BEAT_BUDDY_TEMPERATURE', str(DEFAULT_TEMPERATURE))),
        )

    def validate(self) -> None:
        """Validate completion parameters.

        Raises:
            ValueError: If token caps or temperature are out of range
        """
        if self.max_tokens <= 0:
            raise ValueError(f"Invalid max_tokens: {self.max_tokens}. Must be > 0")
        if self.final_max_tokens <= 0:
            raise ValueError(f"Invalid final_max_tokens: {self.final_max_tokens}. Must be > 0")
        if not 0 <= self.temperature <= 2:
            raise ValueError(
                f"Invalid temperature: {self.temperature}. Must be between 0 and 2"
            )

    def __repr__(self) -> str:
        """Return string representation with sensitive data masked."""
        return (
            f"BeatBuddyConfig("
            f"openai_api_key='***', "
            f"lastfm_api_key='***', "
            f"lastfm_api_secret={'***' if self.lastfm_api_secret else None}, "
            f"lastfm_cache_file='{self.lastfm_cache_file}', "
            f"openai_model='{self.openai_model}', "
            f"max_tokens={self.max_tokens}, "
            f"final_max_tokens={self.final_max_tokens}, "
            f"temperature={self.temperature}"
            f")"
        )
