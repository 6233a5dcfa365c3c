"""Batch configuration via environment variables."""

from __future__ import annotations

import logging
import os

from pydantic import BaseModel, Field, field_validator

VALID_AGGREGATIONS = {"last", "max"}
VALID_TIE_BREAKS = {"label", "insertion"}
VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

DEFAULT_OUTPUT_PATH = "Output.txt"


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes")


class BatchConfig(BaseModel):
    """Runtime configuration resolved from environment."""

    output_path: str = Field(default=DEFAULT_OUTPUT_PATH)
    operation_timeout: float = Field(default=900.0)
    retry_max_attempts: int = Field(default=3)
    retry_base_delay: float = Field(default=1.0)
    retry_max_delay: float = Field(default=60.0)
    continue_on_error: bool = Field(default=False)
    aggregation: str = Field(default="last")
    tie_break: str = Field(default="label")
    confidence_digits: int = Field(default=2)
    log_level: str = Field(default="INFO")

    @field_validator("output_path")
    @classmethod
    def validate_output_path(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("output_path must not be empty")
        return value

    @field_validator("aggregation")
    @classmethod
    def validate_aggregation(cls, value: str) -> str:
        v = value.strip().lower()
        if v not in VALID_AGGREGATIONS:
            allowed = ", ".join(sorted(VALID_AGGREGATIONS))
            raise ValueError(f"Invalid aggregation '{value}'. Allowed: {allowed}")
        return v

    @field_validator("tie_break")
    @classmethod
    def validate_tie_break(cls, value: str) -> str:
        v = value.strip().lower()
        if v not in VALID_TIE_BREAKS:
            allowed = ", ".join(sorted(VALID_TIE_BREAKS))
            raise ValueError(f"Invalid tie-break '{value}'. Allowed: {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        v = value.strip().upper()
        if v not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level '{value}'")
        return v

    @field_validator("operation_timeout", "retry_base_delay", "retry_max_delay")
    @classmethod
    def validate_positive_floats(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("Timeouts and delays must be > 0")
        return value

    @field_validator("retry_max_attempts")
    @classmethod
    def validate_retry_max_attempts(cls, value: int) -> int:
        if value < 1:
            raise ValueError("retry_max_attempts must be >= 1")
        return value

    @field_validator("confidence_digits")
    @classmethod
    def validate_confidence_digits(cls, value: int) -> int:
        if not 0 <= value <= 6:
            raise ValueError("confidence_digits must be between 0 and 6")
        return value

    @classmethod
    def from_env(cls) -> BatchConfig:
        """Build config from environment variables.

        Numeric values stay strings here so pydantic coerces and validates them.
        """
        return cls(
            output_path=os.getenv("VIDEO_LABELS_OUTPUT", DEFAULT_OUTPUT_PATH),
            operation_timeout=os.getenv("VIDEO_LABELS_TIMEOUT", "900"),
            retry_max_attempts=os.getenv("VIDEO_LABELS_RETRY_MAX_ATTEMPTS", "3"),
            retry_base_delay=os.getenv("VIDEO_LABELS_RETRY_BASE_DELAY", "1.0"),
            retry_max_delay=os.getenv("VIDEO_LABELS_RETRY_MAX_DELAY", "60.0"),
            continue_on_error=_env_flag("VIDEO_LABELS_CONTINUE_ON_ERROR"),
            aggregation=os.getenv("VIDEO_LABELS_AGGREGATION", "last"),
            tie_break=os.getenv("VIDEO_LABELS_TIE_BREAK", "label"),
            confidence_digits=os.getenv("VIDEO_LABELS_DIGITS", "2"),
            log_level=os.getenv("VIDEO_LABELS_LOG_LEVEL", "INFO"),
        )


_config: BatchConfig | None = None


def get_config() -> BatchConfig:
    """Return the global config singleton, creating it on first access.

    Loads ``~/.config/video-label-batch/.env`` before reading env vars.
    Process environment always takes precedence over the config file.
    """
    global _config
    if _config is None:
        from .dotenv import load_dotenv

        injected = load_dotenv()
        if injected:
            logging.getLogger(__name__).info(
                "Loaded %d var(s) from config: %s",
                len(injected),
                ", ".join(injected.keys()),
            )
        _config = BatchConfig.from_env()
    return _config


def update_config(**overrides: object) -> BatchConfig:
    """Patch the live config with non-None overrides (used for CLI options)."""
    global _config
    data = get_config().model_dump()
    data.update({k: v for k, v in overrides.items() if v is not None})
    _config = BatchConfig(**data)
    return _config
