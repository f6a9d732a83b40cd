"""
Errors - typed failures surfaced to the host.

The core never retries: there is no I/O worth retrying. Every failure is
raised synchronously out of the host callback that produced it, except
an invalid surface, which the engine absorbs (draws become no-ops until
a valid surface arrives).
"""

from enum import Enum
from typing import Optional


class ErrorType(Enum):
    """Classification of watch face failures."""
    ASSET = "asset"        # Background frame unavailable, startup fails
    SURFACE = "surface"    # Non-positive surface dimensions
    DRAW = "draw"          # Drawing primitive failed, host recreates surface
    CONFIG = "config"      # Invalid configuration values
    UNKNOWN = "unknown"


class WatchFaceError(Exception):
    """Base class for watch face errors."""
    error_type: ErrorType = ErrorType.UNKNOWN


class AssetLoadFailure(WatchFaceError):
    """A background frame could not be loaded. No partial asset set is kept."""
    error_type = ErrorType.ASSET

    def __init__(self, resource_id: str, reason: Optional[object] = None):
        self.resource_id = resource_id
        self.reason = reason
        message = f"could not load asset '{resource_id}'"
        if reason is not None:
            message += f": {reason}"
        super().__init__(message)


class SurfaceInvalid(WatchFaceError):
    """Host reported a zero-sized or negative surface."""
    error_type = ErrorType.SURFACE

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        super().__init__(f"invalid surface {width}x{height}")


class DrawPrimitiveFailure(WatchFaceError):
    """A canvas primitive failed."""
    error_type = ErrorType.DRAW

    def __init__(self, primitive: str, cause: Optional[BaseException] = None):
        self.primitive = primitive
        self.cause = cause
        message = f"{primitive} failed"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class ConfigError(WatchFaceError):
    """Configuration values are not usable."""
    error_type = ErrorType.CONFIG


def classify_error(error: BaseException) -> ErrorType:
    """
    Classify an exception into an error type.

    Watch face errors carry their own type; anything else is UNKNOWN.
    """
    if isinstance(error, WatchFaceError):
        return error.error_type
    return ErrorType.UNKNOWN
