from __future__ import annotations

__all__ = ["XWingBaseError", "ExportError", "IconDecodeError"]


class XWingBaseError(RuntimeError):
    """Base class for user-facing engine failures."""


class ExportError(XWingBaseError):
    """Raised when an export is rejected or the surface cannot be serialized."""


class IconDecodeError(XWingBaseError):
    """Raised when uploaded ship icon bytes cannot be decoded."""
