"""Configuration management with environment variable support."""

import os
from dataclasses import dataclass, field


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class GameConfig:
    """Default game configuration."""

    score_limit: int = field(default_factory=lambda: _env_int("TWENTY_ONE_SCORE_LIMIT", 5))
    dealer_stand_value: int = field(
        default_factory=lambda: _env_int("TWENTY_ONE_DEALER_STANDS", 17)
    )
    default_user_name: str = "Player 1"
    target: int = 21

    def __post_init__(self) -> None:
        """Validate settings."""
        if self.score_limit < 1:
            raise ValueError("score_limit must be at least 1")
        if not 2 <= self.dealer_stand_value <= self.target:
            raise ValueError(f"dealer_stand_value must be between 2 and {self.target}")


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    game: GameConfig = field(default_factory=GameConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# Global configuration instance
config = AppConfig()
