"""
polizas.errors
==============

Exception types raised by the classification engine and its adapters.
"""

from __future__ import annotations


class PolizasError(Exception):
    """Base class for every error raised by :pymod:`polizas`."""


class InvalidDateError(PolizasError, ValueError):
    """A raw record carried a date string that is not valid ISO‑8601."""

    def __init__(self, field: str, value: object) -> None:
        self.field = field
        self.value = value
        super().__init__(f"invalid date for {field!r}: {value!r}")


class UnknownStatusError(PolizasError, ValueError):
    """A status string outside the closed :class:`PolicyStatus` set."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"unknown policy status: {value!r}")
