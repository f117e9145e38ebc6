"""
Domain errors raised and reported by the rendering pipeline.

Every error carries a stable ``kind`` (see :class:`ErrorKind`), an
``operational`` flag and a ``context`` mapping with the details needed to
explain it to a user. User-facing text is produced by
:func:`format_user_message`, and :func:`serialize_error` turns any exception
into a plain record that can cross a process boundary.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping, TypedDict


class ErrorKind(str, Enum):
    PLUGIN_ALREADY_REGISTERED = "PLUGIN_ALREADY_REGISTERED"
    PLUGIN_NOT_FOUND = "PLUGIN_NOT_FOUND"
    PLUGIN_INIT_ERROR = "PLUGIN_INIT_ERROR"
    PLUGIN_LOAD_ERROR = "PLUGIN_LOAD_ERROR"
    PLUGIN_RENDER_ERROR = "PLUGIN_RENDER_ERROR"
    PLUGIN_CONFIG_ERROR = "PLUGIN_CONFIG_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


_USER_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.PLUGIN_ALREADY_REGISTERED: 'The plugin "{plugin_id}" is already active.',
    ErrorKind.PLUGIN_NOT_FOUND: 'The plugin "{plugin_id}" is not installed.',
    ErrorKind.PLUGIN_INIT_ERROR: (
        'The plugin "{plugin_id}" failed to start properly. '
        "Some features may not work correctly."
    ),
    ErrorKind.PLUGIN_LOAD_ERROR: (
        'The plugin "{plugin_id}" could not be loaded. Some features may be unavailable.'
    ),
    ErrorKind.PLUGIN_RENDER_ERROR: (
        'The "{plugin_id}" plugin encountered an error while rendering content.'
    ),
    ErrorKind.PLUGIN_CONFIG_ERROR: (
        'The plugin "{plugin_id}" has an invalid configuration. Please check its settings.'
    ),
}

_FALLBACK_MESSAGE = "An unexpected error occurred."


class SerializedError(TypedDict):
    name: str
    kind: str
    message: str
    context: dict[str, Any]
    operational: bool


class DomainError(Exception):
    """Base class for expected, recoverable errors."""

    kind: ErrorKind = ErrorKind.UNKNOWN_ERROR
    operational: bool = True

    def __init__(self, message: str, context: Mapping[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = dict(context or {})
        self.timestamp = datetime.now(timezone.utc)

    def to_user_message(self) -> str:
        return format_user_message(self.kind, self.context, default=self.message)


class PluginError(DomainError):
    """Base class for errors attributable to a single plugin."""

    def __init__(self, plugin_id: str, message: str, **context: Any):
        super().__init__(message, {"plugin_id": plugin_id, **context})
        self.plugin_id = plugin_id


class PluginAlreadyRegisteredError(PluginError):
    kind = ErrorKind.PLUGIN_ALREADY_REGISTERED

    def __init__(self, plugin_id: str):
        super().__init__(plugin_id, f"Plugin already registered: '{plugin_id}'")


class PluginNotFoundError(PluginError):
    kind = ErrorKind.PLUGIN_NOT_FOUND

    def __init__(self, plugin_id: str):
        super().__init__(plugin_id, f"Plugin not found: '{plugin_id}'")


class PluginInitError(PluginError):
    kind = ErrorKind.PLUGIN_INIT_ERROR

    def __init__(self, plugin_id: str, reason: str | None = None):
        super().__init__(
            plugin_id,
            f"Failed to initialize plugin '{plugin_id}'",
            reason=reason or "Unknown error",
        )


class PluginLoadError(PluginError):
    kind = ErrorKind.PLUGIN_LOAD_ERROR

    def __init__(self, plugin_id: str, reason: str):
        super().__init__(
            plugin_id, f"Failed to load plugin '{plugin_id}': {reason}", reason=reason
        )


class PluginRenderError(PluginError):
    kind = ErrorKind.PLUGIN_RENDER_ERROR

    def __init__(self, plugin_id: str, reason: str):
        super().__init__(
            plugin_id, f"Plugin '{plugin_id}' render failed: {reason}", reason=reason
        )


class PluginConfigError(PluginError):
    kind = ErrorKind.PLUGIN_CONFIG_ERROR

    def __init__(self, plugin_id: str, config_key: str, reason: str):
        super().__init__(
            plugin_id,
            f"Invalid plugin configuration for '{plugin_id}': {reason}",
            config_key=config_key,
            reason=reason,
        )


def format_user_message(
    kind: ErrorKind | str,
    context: Mapping[str, Any] | None = None,
    default: str | None = None,
) -> str:
    """
    Map an error kind and its context to a message suitable for end users.

    Unknown kinds (or a context missing the fields a template needs) fall back
    to ``default``, then to a generic message.
    """
    try:
        template = _USER_MESSAGES[ErrorKind(kind)]
    except (KeyError, ValueError):
        return default or _FALLBACK_MESSAGE
    try:
        return template.format(**(context or {}))
    except KeyError:
        return default or _FALLBACK_MESSAGE


def serialize_error(error: BaseException) -> SerializedError:
    """Return the plain-record form of ``error`` used for transport and logging."""
    if isinstance(error, DomainError):
        return {
            "name": type(error).__name__,
            "kind": error.kind.value,
            "message": error.message,
            "context": dict(error.context),
            "operational": error.operational,
        }
    return {
        "name": type(error).__name__,
        "kind": ErrorKind.UNKNOWN_ERROR.value,
        "message": str(error),
        "context": {},
        "operational": False,
    }


def is_serialized_error(obj: Any) -> bool:
    if not isinstance(obj, Mapping):
        return False
    return (
        isinstance(obj.get("name"), str)
        and isinstance(obj.get("kind"), str)
        and isinstance(obj.get("message"), str)
        and isinstance(obj.get("operational"), bool)
    )
