"""Exceptions raised by the variable datastore."""

from __future__ import annotations


class DataSmartError(Exception):
    """Base class for datastore errors."""


class DataConversionError(DataSmartError):
    """A stored value does not have the type that was asked for."""

    def __init__(self, message: str = "Unable to convert") -> None:
        super().__init__(message)


class RecursiveReferenceError(DataSmartError):
    """A variable references itself, directly or through other variables."""

    def __init__(self, var: str) -> None:
        super().__init__("A variable references itself")
        self.var = var