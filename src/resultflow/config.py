"""Configuration: validated defaults for retry policy and error messages.

Resolution order (lowest to highest precedence):
defaults < environment (``RESULTFLOW_*``, including a project ``.env``) <
explicit overrides. The pydantic ``Settings`` model is the single source of
truth for field names, types and bounds.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any

import dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from resultflow.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping

log = logging.getLogger(__name__)

ENV_PREFIX = "RESULTFLOW_"

_dotenv_loaded = False


class Settings(BaseModel):
    """Schema for resultflow configuration."""

    allow_retries: bool = Field(default=True)
    max_retries: int = Field(default=2, ge=0)
    initial_delay_s: float = Field(default=1.0, ge=0)
    backoff_factor: float = Field(default=2.0, gt=1)
    default_error_message: str = Field(default="Network error", min_length=1)

    model_config = {"frozen": True, "extra": "forbid"}

    @field_validator("default_error_message", mode="before")
    @classmethod
    def normalize_message(cls, v: Any) -> Any:
        """Trim surrounding whitespace on the fallback message."""
        if isinstance(v, str):
            return v.strip()
        return v


def _load_dotenv_once() -> None:
    global _dotenv_loaded
    if _dotenv_loaded:
        return
    # Never override variables that are already set in the process.
    dotenv.load_dotenv(override=False)
    _dotenv_loaded = True


def load_env() -> dict[str, Any]:
    """Read ``RESULTFLOW_*`` variables that name a known settings field.

    Values stay strings; pydantic coerces them during validation.
    """
    config: dict[str, Any] = {}
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        field_name = key[len(ENV_PREFIX) :].lower()
        if field_name not in Settings.model_fields:
            log.debug("Ignoring unknown environment setting %s", key)
            continue
        config[field_name] = value
    return config


def load_settings(overrides: Mapping[str, Any] | None = None) -> Settings:
    """Resolve and validate settings from environment and overrides.

    Raises:
        ConfigurationError: If the merged values fail validation.
    """
    _load_dotenv_once()
    merged: dict[str, Any] = {**load_env(), **dict(overrides or {})}
    try:
        return Settings.model_validate(merged)
    except ValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
        raise ConfigurationError(
            f"Invalid resultflow configuration: {', '.join(fields) or 'unknown'}",
            hint=f"Check {ENV_PREFIX}* environment variables and overrides.",
        ) from e
