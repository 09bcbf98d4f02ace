#!/usr/bin/env python3
"""
Structform Data Models

Field annotations, field descriptors and the encoded form returned to callers.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Protocol, runtime_checkable

from pydantic import BaseModel


# Wire name that excludes a field from encoding
SKIP = "-"


# ============================================================================
# Field Annotations
# ============================================================================

@dataclass(frozen=True)
class FormField:
    """
    Metadata annotation for record fields.

    Used with typing.Annotated to control how a field is written:

        avatar: Annotated[bytes, FormField(name="file", filename="me.png")]
        internal_id: Annotated[str, FormField(name="-")]

    Attributes:
        name: Wire name of the field. Defaults to the lowercased attribute
              name; "-" skips the field entirely.
        filename: Filename for binary (file) fields. Ignored for other kinds.
    """
    name: Optional[str] = None
    filename: Optional[str] = None


@dataclass(frozen=True)
class FieldDescriptor:
    """
    Per-field encoding metadata, resolved on every encode call.

    Attributes:
        attribute: Attribute to read from the record
        name: Wire name of the field
        filename: Explicit filename override for binary fields
    """
    attribute: str
    name: str
    filename: Optional[str] = None

    @property
    def skip(self) -> bool:
        return self.name == SKIP

    @classmethod
    def resolve(
        cls,
        attribute: str,
        name: Optional[str] = None,
        filename: Optional[str] = None,
    ) -> FieldDescriptor:
        """Build a descriptor, defaulting the wire name to the lowercased attribute."""
        return cls(
            attribute=attribute,
            name=name or attribute.lower(),
            filename=filename or None,
        )


@runtime_checkable
class DescribesFields(Protocol):
    """
    Protocol for records that list their own fields.

    Any object with a matching `describe_fields()` method can be encoded
    without being a dataclass or pydantic model.

    Example:
        >>> class Upload:
        ...     def __init__(self, title, payload):
        ...         self.title = title
        ...         self.payload = payload
        ...     def describe_fields(self):
        ...         return [
        ...             FieldDescriptor.resolve("title"),
        ...             FieldDescriptor.resolve("payload", name="file"),
        ...         ]
    """

    def describe_fields(self) -> List[FieldDescriptor]:
        ...


# ============================================================================
# Value Kinds
# ============================================================================

class FieldKind(Enum):
    """Closed set of value kinds the encoder dispatches on."""
    TEXT = "text"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    FILE = "file"
    SEQUENCE = "sequence"
    NESTED = "nested"  # dataclass, pydantic model or describe_fields() record
    NULL = "null"
    UNSUPPORTED = "unsupported"


def is_structure(value: Any) -> bool:
    """True for dataclass, pydantic model and describe_fields() instances."""
    if isinstance(value, type):
        return False
    if isinstance(value, (BaseModel, DescribesFields)):
        return True
    return dataclasses.is_dataclass(value)


def classify_value(value: Any) -> FieldKind:
    """
    Classify a Python value into a FieldKind.

    bool is checked before int since bool subclasses int.
    """
    if value is None:
        return FieldKind.NULL
    if isinstance(value, bool):
        return FieldKind.BOOLEAN
    if isinstance(value, int):
        return FieldKind.INTEGER
    if isinstance(value, float):
        return FieldKind.FLOAT
    if isinstance(value, str):
        return FieldKind.TEXT
    if isinstance(value, (bytes, bytearray, memoryview)):
        return FieldKind.FILE
    if isinstance(value, (list, tuple)):
        return FieldKind.SEQUENCE
    if is_structure(value):
        return FieldKind.NESTED
    return FieldKind.UNSUPPORTED


# ============================================================================
# Encoded Output
# ============================================================================

@dataclass(frozen=True)
class EncodedForm:
    """
    A fully encoded multipart/form-data body.

    Attributes:
        body: The complete multipart body
        content_type: Content-Type header value, including the boundary
        boundary: The boundary token delimiting the parts
    """
    body: bytes
    content_type: str
    boundary: str

    def __len__(self) -> int:
        return len(self.body)
