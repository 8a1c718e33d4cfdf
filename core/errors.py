"""Exceptions shared by the pipeline and the HTTP layer."""

from __future__ import annotations


class ValidationError(ValueError):
    """A required request field is missing or refers to something unknown."""

    status_code = 400


class UpstreamError(RuntimeError):
    """The model provider failed; the message is passed through untouched."""

    status_code = 500


class ConfigurationError(RuntimeError):
    """The process cannot start with the current environment."""
