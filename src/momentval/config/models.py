"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, momentval.toml only contains
overrides.  An empty file is a valid configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from momentval.domain.constraints import MomentConfig
from momentval.domain.timestamps import get_zone

# --- momentval.toml sections ---


class EvaluationConfig(BaseModel):
    """[evaluation] section."""

    model_config = {"frozen": True}

    default_timezone: str | None = None

    @field_validator("default_timezone")
    @classmethod
    def _known_zone(cls, v: str | None) -> str | None:
        if v is not None:
            get_zone(v)
        return v


class MomentvalConfig(BaseModel):
    """Root configuration composing all sections.

    ``messages`` overrides error message templates by kind, e.g.
    ``"moment.isAfter" = "must come after {date}"``.  ``presets`` holds
    named constraint presets usable with ``momentval check --preset``.
    """

    model_config = {"frozen": True}

    evaluation: EvaluationConfig = Field(default_factory=EvaluationConfig)
    messages: dict[str, str] = Field(default_factory=dict)
    presets: dict[str, MomentConfig] = Field(default_factory=dict)
