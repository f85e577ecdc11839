"""
FeedProxy Custom Exceptions
==========================

Custom exception hierarchy for FeedProxy with error codes, context
information, and caller-facing error messages.
"""

import asyncio
from typing import Optional, Dict, Any
from enum import Enum

import aiohttp


class ErrorCode(str, Enum):
    """Error codes for categorizing exceptions."""

    # Configuration errors (C001-C099)
    CONFIG_INVALID = "C001"
    CONFIG_MISSING = "C002"

    # Upstream fetch errors (F001-F099)
    UPSTREAM_NETWORK_ERROR = "F001"
    UPSTREAM_TIMEOUT = "F002"
    UPSTREAM_BAD_STATUS = "F003"

    # Parse errors (P001-P099)
    FEED_PARSE_ERROR = "P001"
    HTML_PARSE_ERROR = "P002"

    # Extraction errors (X001-X099)
    EXTRACT_ELEMENT_MISSING = "X001"
    EXTRACT_ATTRIBUTE_MISSING = "X002"
    EXTRACT_MARKER_MISSING = "X003"

    # Data repair errors (D001-D099)
    DATA_MARKER_MISSING = "D001"
    DATA_INVALID_JSON = "D002"
    DATA_TOO_FEW_RECORDS = "D003"

    # Output errors (O001-O099)
    SERIALIZE_FAILED = "O001"

    # Routing errors (R001-R099)
    UNKNOWN_FEED = "R001"
    PATH_TOO_SHORT = "R002"

    # System errors (S001-S099)
    UNEXPECTED = "S001"


class FeedProxyError(Exception):
    """Base exception for all FeedProxy errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[ErrorCode] = None,
        context: Optional[Dict[str, Any]] = None,
        user_message: Optional[str] = None,
        recoverable: bool = False,
    ):
        """Initialize FeedProxy error.

        Args:
            message: Technical error message for logging
            error_code: Categorized error code
            context: Additional context information
            user_message: Caller-facing error message
            recoverable: Whether the error is recoverable
        """
        super().__init__(message)
        self.error_code = error_code
        self.context = context or {}
        self.user_message = user_message or message
        self.recoverable = recoverable

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code.value if self.error_code else None,
            "error_message": str(self),
            "user_message": self.user_message,
            "context": self.context,
            "recoverable": self.recoverable,
        }

    def __str__(self) -> str:
        """String representation with error code."""
        if self.error_code:
            return f"[{self.error_code.value}] {super().__str__()}"
        return super().__str__()


def _forward_kwargs(kwargs: Dict[str, Any], *consumed: str) -> Dict[str, Any]:
    return {k: v for k, v in kwargs.items() if k not in consumed}


class ConfigurationError(FeedProxyError):
    """Configuration-related errors."""

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs):
        context = kwargs.get("context", {})
        if config_key:
            context["config_key"] = config_key

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.CONFIG_INVALID),
            context=context,
            user_message=kwargs.get("user_message", f"Configuration error: {message}"),
            **_forward_kwargs(kwargs, "context", "error_code", "user_message"),
        )


class UpstreamFetchError(FeedProxyError):
    """Network or transport failure fetching a feed or a page."""

    def __init__(self, message: str, url: Optional[str] = None, **kwargs):
        """Initialize upstream fetch error.

        Args:
            message: Error message
            url: Upstream URL that failed
            **kwargs: Additional arguments for FeedProxyError
        """
        context = kwargs.get("context", {})
        if url:
            context["url"] = url

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.UPSTREAM_NETWORK_ERROR),
            context=context,
            user_message=kwargs.get("user_message", message),
            recoverable=kwargs.get("recoverable", True),
            **_forward_kwargs(
                kwargs, "context", "error_code", "user_message", "recoverable"
            ),
        )


class ParseError(FeedProxyError):
    """Malformed feed or malformed HTML."""

    def __init__(self, message: str, url: Optional[str] = None, **kwargs):
        context = kwargs.get("context", {})
        if url:
            context["url"] = url

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.FEED_PARSE_ERROR),
            context=context,
            user_message=kwargs.get("user_message", message),
            **_forward_kwargs(kwargs, "context", "error_code", "user_message"),
        )


class ExtractError(FeedProxyError):
    """Expected selector, attribute or marker absent from a fetched page."""

    def __init__(self, message: str, selector: Optional[str] = None, **kwargs):
        """Initialize extraction error.

        Args:
            message: Error message
            selector: CSS selector or literal marker that did not match
            **kwargs: Additional arguments for FeedProxyError
        """
        context = kwargs.get("context", {})
        if selector:
            context["selector"] = selector

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.EXTRACT_ELEMENT_MISSING),
            context=context,
            user_message=kwargs.get("user_message", message),
            **_forward_kwargs(kwargs, "context", "error_code", "user_message"),
        )


class DataRepairError(FeedProxyError):
    """Embedded data blob could not be repaired into usable records."""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.DATA_INVALID_JSON),
            context=kwargs.get("context", {}),
            user_message=kwargs.get("user_message", message),
            **_forward_kwargs(kwargs, "context", "error_code", "user_message"),
        )


class SerializeError(FeedProxyError):
    """Output feed could not be serialized."""

    def __init__(self, message: str, feed_title: Optional[str] = None, **kwargs):
        context = kwargs.get("context", {})
        if feed_title:
            context["feed_title"] = feed_title

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.SERIALIZE_FAILED),
            context=context,
            user_message=kwargs.get("user_message", message),
            **_forward_kwargs(kwargs, "context", "error_code", "user_message"),
        )


class UnknownFeedError(FeedProxyError):
    """Feed identifier is not present in the registry."""

    def __init__(self, feed_id: str, **kwargs):
        context = kwargs.get("context", {})
        context["feed_id"] = feed_id
        self.feed_id = feed_id

        super().__init__(
            message=f"Unknown feed: {feed_id}",
            error_code=ErrorCode.UNKNOWN_FEED,
            context=context,
            user_message=kwargs.get("user_message", "Feed not found"),
        )


class PathSegmentError(FeedProxyError, IndexError):
    """Item link has fewer than four '/'-delimited parts."""

    def __init__(self, link: str, **kwargs):
        context = kwargs.get("context", {})
        context["link"] = link
        self.link = link

        super().__init__(
            message=f"Link has no path segment after the host: {link}",
            error_code=ErrorCode.PATH_TOO_SHORT,
            context=context,
            user_message=kwargs.get("user_message", None),
        )


# Exception handling utilities


def handle_exception(
    exception: Exception,
    logger,
    operation: str,
    context: Optional[Dict[str, Any]] = None,
) -> FeedProxyError:
    """Convert generic exceptions to FeedProxy exceptions with proper logging.

    Args:
        exception: Original exception
        logger: Logger instance for error logging
        operation: Operation that was being performed
        context: Additional context information

    Returns:
        FeedProxy exception with proper categorization
    """
    context = context or {}
    context["operation"] = operation
    context["original_exception_type"] = type(exception).__name__

    if isinstance(exception, FeedProxyError):
        logger.error(f"Operation '{operation}' failed", extra=exception.to_dict())
        return exception

    elif isinstance(exception, asyncio.TimeoutError):
        error = UpstreamFetchError(
            message=f"Timeout during {operation}",
            error_code=ErrorCode.UPSTREAM_TIMEOUT,
            context=context,
        )

    elif isinstance(exception, (aiohttp.ClientError, ConnectionError)):
        error = UpstreamFetchError(
            message=f"Network error during {operation}: {exception}",
            error_code=ErrorCode.UPSTREAM_NETWORK_ERROR,
            context=context,
        )

    else:
        error = FeedProxyError(
            message=f"Unexpected error during {operation}: {exception}",
            error_code=ErrorCode.UNEXPECTED,
            context=context,
            user_message="An unexpected error occurred",
        )

    logger.error(f"Operation '{operation}' failed", extra=error.to_dict())
    return error
