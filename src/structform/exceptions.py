#!/usr/bin/env python3
"""
Structform-specific exceptions.

All Structform exceptions inherit from StructformError for easy catching.
"""

from __future__ import annotations

from typing import Optional


class StructformError(Exception):
    """Base exception for all Structform errors."""


class InvalidInputError(StructformError, TypeError):
    """The record handed to the encoder is not a supported structure."""


class EncodingError(StructformError):
    """
    Writing a field into the multipart body failed.

    The original exception is chained as ``__cause__``.

    Attributes:
        field_name: Wire name of the field being written, if known
    """

    def __init__(self, message: str, field_name: Optional[str] = None):
        super().__init__(message)
        self.field_name = field_name


class FinalizationError(StructformError):
    """Closing the multipart writer (trailing boundary) failed."""


class UnsupportedFieldError(StructformError):
    """A field value has a kind with no form-data encoding (strict mode only)."""

    def __init__(self, field_name: str, value_type: type):
        super().__init__(
            f"field {field_name!r} has unsupported type {value_type.__name__}"
        )
        self.field_name = field_name
        self.value_type = value_type
