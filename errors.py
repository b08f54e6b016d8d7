#!/usr/bin/env python3
"""
Error types for the blog feed build.
Both are raised to the caller; a feed is either built in full or not at all.
"""


class FeedError(Exception):
    """Base class for feed build failures."""


class ConfigurationError(FeedError):
    """Site configuration is missing or unusable (e.g. no absolute base URL)."""


class ValidationError(FeedError, ValueError):
    """A post record is missing a required field or has an unusable value."""

    def __init__(self, message: str, field: str = "", slug: str = ""):
        super().__init__(message)
        self.field = field
        self.slug = slug
