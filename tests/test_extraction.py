#!/usr/bin/env python3
"""Tests for resolving field descriptors from records."""

import sys
sys.path.insert(0, "src")

from dataclasses import dataclass, field
from typing import Annotated, Optional

import pytest
from pydantic import BaseModel, Field

from structform import (
    SKIP, FieldDescriptor, FieldKind, FormField, InvalidInputError,
    classify_value, encode, extract_descriptors,
)


# ============================================================================
# Test Records
# ============================================================================

@dataclass
class Document:
    Title: str
    body: Annotated[bytes, FormField(name="file", filename="doc.pdf")]
    legacy: str = field(default="", metadata={"form": "old_name", "filename": "ignored.txt"})
    hidden: Annotated[str, FormField(name=SKIP)] = ""
    marker: Annotated[int, FormField] = 0
    thumbnail: Annotated[Optional[bytes], FormField(filename="thumb.png")] = None
    preview: Optional[Annotated[bytes, FormField(name="peek")]] = None
    _cache: str = ""


@dataclass
class PartlyResolvable:
    """String annotations as left by `from __future__ import annotations`."""
    title: "str"
    secret: "Annotated[str, FormField(name='-')]" = ""
    photo: "Annotated[bytes, FormField(filename='photo.png')]" = b""
    other: "Optional[UndefinedType]" = None  # noqa: F821


@dataclass
class UnresolvableFormField:
    title: "str"
    payload: "Annotated[UndefinedType, FormField(name='-')]" = None  # noqa: F821


class Labelled:
    def __init__(self, label):
        self.label = label

    def describe_fields(self):
        return [FieldDescriptor.resolve("label")]


class Account(BaseModel):
    user_id: int = Field(alias="userId")
    Nickname: str
    avatar: Annotated[bytes, FormField(name="picture", filename="me.png")]
    password: Annotated[str, FormField(name="-")]


# ============================================================================
# Descriptor Tests
# ============================================================================

def test_dataclass_descriptors():
    """Test names, filenames and skips for a dataclass."""
    doc = Document(Title="Report", body=b"%PDF")
    descriptors = extract_descriptors(doc)

    assert descriptors == [
        FieldDescriptor("Title", "title"),
        FieldDescriptor("body", "file", "doc.pdf"),
        FieldDescriptor("legacy", "old_name", "ignored.txt"),
        FieldDescriptor("hidden", "-"),
        FieldDescriptor("marker", "marker"),
        FieldDescriptor("thumbnail", "thumbnail", "thumb.png"),
        FieldDescriptor("preview", "peek"),
    ]
    assert [d.skip for d in descriptors] == [False, False, False, True, False, False, False]


def test_pydantic_descriptors():
    """Test aliases and FormField metadata on pydantic models."""
    account = Account(userId=7, Nickname="ada", avatar=b"\x89PNG", password="pw")
    descriptors = extract_descriptors(account)

    assert [(d.attribute, d.name, d.filename) for d in descriptors] == [
        ("user_id", "userId", None),
        ("Nickname", "nickname", None),
        ("avatar", "picture", "me.png"),
        ("password", "-", None),
    ]


def test_unresolvable_hint_keeps_other_annotations():
    """Test that one unresolvable annotation does not drop FormField elsewhere."""
    descriptors = extract_descriptors(PartlyResolvable(title="t", secret="pw"))

    assert [(d.name, d.filename) for d in descriptors] == [
        ("title", None),
        ("-", None),
        ("photo", "photo.png"),
        ("other", None),
    ]


def test_unresolvable_hint_still_skips_field(decode):
    """Test that a skipped field stays off the wire next to an unresolvable hint."""
    parts = decode(encode(PartlyResolvable(title="t", secret="pw")))

    assert [p.name for p in parts] == ["title", "photo"]
    assert all(p.data != b"pw" for p in parts)


def test_unresolvable_form_field_annotation_raises():
    """Test that a FormField annotation that cannot be resolved is rejected."""
    with pytest.raises(InvalidInputError, match="payload"):
        extract_descriptors(UnresolvableFormField(title="t"))


def test_descriptors_are_not_cached():
    """Test that every call resolves fresh descriptor lists."""
    doc = Document(Title="Report", body=b"%PDF")

    assert extract_descriptors(doc) is not extract_descriptors(doc)


def test_resolve_defaults():
    """Test FieldDescriptor.resolve defaults."""
    assert FieldDescriptor.resolve("CamelCase") == FieldDescriptor("CamelCase", "camelcase")
    assert FieldDescriptor.resolve("x", name="-").skip
    assert FieldDescriptor.resolve("x", filename="").filename is None


@pytest.mark.parametrize("record", [1, 2.5, "s", b"b", {"a": 1}, [1], object(), Document])
def test_rejects_non_structures(record):
    """Test that anything but a structure instance is rejected."""
    with pytest.raises(InvalidInputError):
        extract_descriptors(record)


# ============================================================================
# Classification Tests
# ============================================================================

@pytest.mark.parametrize("value,kind", [
    ("text", FieldKind.TEXT),
    (3, FieldKind.INTEGER),
    (True, FieldKind.BOOLEAN),
    (2.5, FieldKind.FLOAT),
    (b"raw", FieldKind.FILE),
    (bytearray(b"raw"), FieldKind.FILE),
    (["a"], FieldKind.SEQUENCE),
    (("a",), FieldKind.SEQUENCE),
    (Document(Title="t", body=b""), FieldKind.NESTED),
    (Labelled("x"), FieldKind.NESTED),
    (None, FieldKind.NULL),
    ({"a": 1}, FieldKind.UNSUPPORTED),
    ({1, 2}, FieldKind.UNSUPPORTED),
    (Document, FieldKind.UNSUPPORTED),
])
def test_classify_value(value, kind):
    """Test value kind classification."""
    assert classify_value(value) is kind
