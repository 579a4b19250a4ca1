"""Configuration errors raised while loading settings and presets."""

from __future__ import annotations


class ConfigError(ValueError):
    """Invalid or unusable momentval configuration."""
