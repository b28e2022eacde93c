"""Custom exception hierarchy for pagecraft."""

__all__ = [
    "ConfigError",
    "DestinationError",
    "PageReadError",
    "PagecraftError",
    "RenderError",
    "TemplateNotFoundError",
]


class PagecraftError(Exception):
    """Base exception for all pagecraft errors."""


class ConfigError(PagecraftError):
    """Raised when configuration loading or saving fails."""


class PageReadError(PagecraftError):
    """Raised when a source page is missing or cannot be read."""


class RenderError(PagecraftError):
    """Raised when template rendering fails."""


class TemplateNotFoundError(RenderError):
    """Raised when a template file does not exist."""


class DestinationError(PagecraftError):
    """Raised when an output location is required but none is designated."""
