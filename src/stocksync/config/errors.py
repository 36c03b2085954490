"""Errors raised while reading stocksync settings."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """A ``STOCKSYNC_*`` setting is present but unusable."""


class MissingConfigurationError(ConfigurationError):
    """A required ``STOCKSYNC_*`` setting is unset or blank."""
