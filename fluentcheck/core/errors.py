"""
Exceptions for fluentcheck usage and configuration errors.

A false assertion is never an exception: it becomes a Fail line in the
scenario log. These exceptions cover calls that make no sense for the
current response kind, invalid suite configuration, and content that fails
its required format.
"""

from typing import Any


class FluentCheckError(Exception):
    """Base exception for all fluentcheck errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class UsageError(FluentCheckError):
    """
    Raised when the API is driven in a way it does not support, such as
    reconfiguring a scenario after it started.
    """

    pass


class UnsupportedOperationError(UsageError):
    """
    Raised when a response kind does not support the requested capability.

    Examples:
    - evaluate() on a stylesheet, script, video or generic resource
    - select()/select_all() on a video or generic resource
    """

    pass


class ConfigurationError(FluentCheckError):
    """
    Raised when suite or scenario configuration is invalid.

    Examples:
    - Empty base url
    - Base url without scheme or host
    - Unknown HTTP method
    """

    pass


class ContentFormatError(FluentCheckError):
    """
    Raised when fetched content fails the format its response kind requires.

    Examples:
    - JSON body that does not parse
    - Image body that cannot be opened
    """

    pass


ERROR_CATEGORY_MAP = {
    UnsupportedOperationError: "unsupported_operation",
    UsageError: "usage",
    ConfigurationError: "configuration",
    ContentFormatError: "content_format",
}


def get_error_category(error: Exception) -> str:
    """
    Get the log category for a given exception.

    Args:
        error: The exception instance

    Returns:
        Category string (defaults to "internal" for unknown errors)
    """
    return ERROR_CATEGORY_MAP.get(type(error), "internal")
