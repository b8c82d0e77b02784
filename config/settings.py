"""Configuration settings loaded from .env file."""

from pathlib import Path

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings, loaded from .env file.

    These are process-wide defaults. Per-novel gate thresholds come from the
    novel's workflow config and are resolved by
    ``continuity.gate_config.resolve_continuity_gate_config`` on top of them.
    """

    # Continuity gate defaults
    default_review_pass_threshold: float = 7.4
    default_reject_score: float = 4.9
    default_max_repair_attempts: int = 1

    # Signal extraction
    opening_window_chars: int = 420
    max_anchor_signals: int = 8
    max_event_signals: int = 10
    max_hook_signals: int = 8

    # Hooks
    hook_reminder_threshold: int = 10  # Chapters before an active hook counts as overdue

    # Logging
    log_dir: Path = Path("./data/logs")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    @field_validator("default_max_repair_attempts")
    @classmethod
    def validate_max_repair_attempts(cls, v: int) -> int:
        if v < 0:
            raise ValueError("default_max_repair_attempts must be >= 0")
        return v

    @field_validator(
        "opening_window_chars", "max_anchor_signals", "max_event_signals", "max_hook_signals"
    )
    @classmethod
    def validate_signal_limits(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Signal limits must be >= 1")
        return v

    @field_validator("hook_reminder_threshold")
    @classmethod
    def validate_reminder_threshold(cls, v: int) -> int:
        if v < 1:
            raise ValueError("hook_reminder_threshold must be >= 1")
        return v

    @field_validator("log_dir")
    @classmethod
    def ensure_parent_dirs(cls, v: Path) -> Path:
        v.parent.mkdir(parents=True, exist_ok=True)
        return v

    @model_validator(mode="after")
    def validate_score_range(self) -> "Settings":
        if self.default_reject_score >= self.default_review_pass_threshold:
            raise ValueError(
                f"default_reject_score ({self.default_reject_score}) must be less than "
                f"default_review_pass_threshold ({self.default_review_pass_threshold})"
            )
        return self

    def gate_config_defaults(self) -> dict:
        """Keyword defaults for ``resolve_continuity_gate_config``."""
        return {
            "default_review_pass_threshold": self.default_review_pass_threshold,
            "default_reject_score": self.default_reject_score,
            "default_max_repair_attempts": self.default_max_repair_attempts,
        }

    def signal_limits(self) -> dict:
        """Keyword options for ``assess_chapter_continuity``."""
        return {
            "opening_window_chars": self.opening_window_chars,
            "max_anchor_signals": self.max_anchor_signals,
            "max_event_signals": self.max_event_signals,
            "max_hook_signals": self.max_hook_signals,
        }


_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """Get cached settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
