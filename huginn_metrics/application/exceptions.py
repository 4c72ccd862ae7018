"""Custom exception hierarchy for the metrics client."""

from __future__ import annotations


class ApplicationError(Exception):
    """Base exception for chart and derived-metric failures."""


class DataSourceError(ApplicationError):
    """Raised when records, profile or targets cannot be fetched."""


class ConfigurationError(ApplicationError):
    """Raised when the client is missing required configuration."""


__all__ = [
    "ApplicationError",
    "DataSourceError",
    "ConfigurationError",
]
