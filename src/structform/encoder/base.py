#!/usr/bin/env python3
"""
Structform Encoder Interface

Protocol for encoding records into request bodies.
"""

from __future__ import annotations

from typing import Any, BinaryIO, Protocol

from ..models import EncodedForm


class Encoder(Protocol):
    """
    Protocol for encoders that convert records to request bodies.
    """

    def encode(self, record: Any) -> EncodedForm:
        """
        Encode a record into an in-memory body.

        Args:
            record: The record to encode

        Returns:
            EncodedForm holding the body and its Content-Type
        """
        ...

    def encode_into(self, record: Any, stream: BinaryIO) -> str:
        """
        Encode a record into a binary stream.

        Args:
            record: The record to encode
            stream: Destination for the body

        Returns:
            Content-Type header value for the written body
        """
        ...
