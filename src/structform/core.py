#!/usr/bin/env python3
"""
Structform Core API

Module-level entry points using the global configuration.
"""

from __future__ import annotations

from typing import Any, BinaryIO, Optional

from .config import EncoderConfig
from .encoder import MultipartEncoder
from .models import EncodedForm


def encode(record: Any, config: Optional[EncoderConfig] = None) -> EncodedForm:
    """
    Encode a record as multipart/form-data.

    Args:
        record: Dataclass instance, pydantic model instance, or object
                implementing describe_fields()
        config: Configuration for this call (defaults to the global one)

    Returns:
        EncodedForm with body, content_type and boundary
    """
    return MultipartEncoder(config).encode(record)


def encode_into(
    record: Any,
    stream: BinaryIO,
    config: Optional[EncoderConfig] = None
) -> str:
    """Encode a record into a binary stream and return its Content-Type."""
    return MultipartEncoder(config).encode_into(record, stream)
