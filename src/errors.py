"""Exceptions raised by deprecheck."""

from __future__ import annotations


class DeprecheckError(Exception):
    """Base exception for all deprecheck errors."""

    def __init__(self, message: str, details: dict[str, str] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class ModuleResolutionError(DeprecheckError):
    """Raised when a file path does not belong to any cloned module.

    This indicates the symbol data was not produced from the expected clone
    layout, so no comparison results can be trusted.
    """


class UnknownApiTypeError(DeprecheckError):
    """Raised when a symbol cannot be mapped onto a known API type."""


class SnapshotError(DeprecheckError):
    """Raised when a symbol snapshot file cannot be read or validated."""


__all__ = [
    "DeprecheckError",
    "ModuleResolutionError",
    "SnapshotError",
    "UnknownApiTypeError",
]
