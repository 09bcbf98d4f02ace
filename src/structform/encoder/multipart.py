#!/usr/bin/env python3
"""
Structform Multipart Encoder

Encode records as multipart/form-data, one part per field.

Field kinds map to parts as follows:
    TEXT        form field with the raw text; empty strings are omitted
    INTEGER     form field with the decimal value (zero included)
    FLOAT       form field with the shortest round-trip decimal
    BOOLEAN     form field "true" / "false"
    FILE        file part; filename from FormField or sniffed extension
    SEQUENCE    one form field per text or integer element, same name
    NESTED      form field with the compact JSON of the nested record;
                describe_fields() records list only their unskipped fields
    NULL        nothing
    UNSUPPORTED UnsupportedFieldError in strict mode, dropped otherwise
"""

from __future__ import annotations

import io
import logging
import math
from decimal import Decimal
from typing import Any, BinaryIO, Callable, Dict, Optional, Union

from pydantic_core import PydanticSerializationError, to_json

from .base import Encoder
from ..config import EncoderConfig, get_config
from ..exceptions import (
    EncodingError, FinalizationError, InvalidInputError, UnsupportedFieldError,
)
from ..extraction import extract_descriptors
from ..models import (
    DescribesFields, EncodedForm, FieldDescriptor, FieldKind, classify_value,
)
from ..writer import MultipartWriter


logger = logging.getLogger(__name__)


# ============================================================================
# Scalar Formatting
# ============================================================================

def format_float(value: float) -> str:
    """
    Format a float as the shortest decimal that round-trips.

    Plain notation, no exponent, no trailing zeros:
    3.0 -> "3", 1e21 -> "1000000000000000000000", 1e-7 -> "0.0000001".
    """
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    # repr() gives the shortest round-trip digits
    return format(Decimal(repr(value)).normalize(), 'f')


def format_integer(value: int) -> str:
    # int() drops IntEnum and other subclass reprs
    return str(int(value))


def format_boolean(value: bool) -> str:
    return "true" if value else "false"


# ============================================================================
# Encoder
# ============================================================================

class MultipartEncoder(Encoder):
    """
    Encoder producing multipart/form-data bodies.

    Uses the given EncoderConfig, or the module configuration (see
    structform.configure) when none is given.

    Example:
        ```python
        @dataclass
        class Upload:
            title: str
            photo: Annotated[bytes, FormField(name="file")]
            tags: list[str]

        form = MultipartEncoder().encode(Upload("Beach", jpeg_bytes, ["sea"]))
        httpx.post(url, content=form.body,
                   headers={"Content-Type": form.content_type})
        ```
    """

    def __init__(self, config: Optional[EncoderConfig] = None):
        self.config = config
        self._handlers: Dict[FieldKind, Callable[..., None]] = {
            FieldKind.TEXT: self._encode_text,
            FieldKind.INTEGER: self._encode_integer,
            FieldKind.FLOAT: self._encode_float,
            FieldKind.BOOLEAN: self._encode_boolean,
            FieldKind.FILE: self._encode_file,
            FieldKind.SEQUENCE: self._encode_sequence,
            FieldKind.NESTED: self._encode_nested,
            FieldKind.NULL: self._encode_null,
            FieldKind.UNSUPPORTED: self._encode_unsupported,
        }

    def get_config(self) -> EncoderConfig:
        """Return the explicit config, falling back to the module config."""
        return self.config if self.config is not None else get_config()

    def encode(self, record: Any) -> EncodedForm:
        """
        Encode a record into an in-memory multipart body.

        Args:
            record: Dataclass instance, pydantic model instance, or object
                    implementing describe_fields()

        Returns:
            EncodedForm with the body, Content-Type and boundary

        Raises:
            InvalidInputError: The record is not a supported structure
            UnsupportedFieldError: Strict mode met a value it cannot encode
            EncodingError: Writing a part failed
            FinalizationError: Writing the closing boundary failed
        """
        buffer = io.BytesIO()
        writer = self._encode(record, buffer)
        return EncodedForm(
            body=buffer.getvalue(),
            content_type=writer.content_type,
            boundary=writer.boundary,
        )

    def encode_into(self, record: Any, stream: BinaryIO) -> str:
        """
        Encode a record into a binary stream.

        On failure the stream holds a partial body that must be discarded.

        Returns:
            Content-Type header value for the written body
        """
        return self._encode(record, stream).content_type

    def _encode(self, record: Any, stream: BinaryIO) -> MultipartWriter:
        config = self.get_config()
        descriptors = extract_descriptors(record)
        writer = MultipartWriter(stream)

        for descriptor in descriptors:
            if descriptor.skip:
                logger.debug(f"Skipping field {descriptor.attribute}")
                continue

            try:
                value = getattr(record, descriptor.attribute)
            except AttributeError as e:
                raise InvalidInputError(
                    f"record has no attribute {descriptor.attribute!r}"
                ) from e

            kind = classify_value(value)
            self._handlers[kind](writer, descriptor, value, config)

        try:
            writer.close()
        except Exception as e:
            raise FinalizationError(f"failed to close multipart writer: {e}") from e

        logger.debug(
            f"Encoded {type(record).__name__} into {writer.part_count} parts"
        )
        return writer

    # ------------------------------------------------------------------------
    # Part writing
    # ------------------------------------------------------------------------

    def _write_field(
        self,
        writer: MultipartWriter,
        name: str,
        data: Union[str, bytes],
    ) -> None:
        try:
            payload = data.encode("utf-8") if isinstance(data, str) else data
            writer.create_form_field(name).write(payload)
        except Exception as e:
            raise EncodingError(
                f"failed to write field {name!r}: {e}", field_name=name
            ) from e

    def _write_file(
        self,
        writer: MultipartWriter,
        name: str,
        filename: str,
        data: bytes,
    ) -> None:
        try:
            writer.create_form_file(name, filename).write(data)
        except Exception as e:
            raise EncodingError(
                f"failed to write file {name!r}: {e}", field_name=name
            ) from e

    # ------------------------------------------------------------------------
    # Per-kind encoders
    # ------------------------------------------------------------------------

    def _encode_text(self, writer, descriptor: FieldDescriptor, value: str, config):
        if value == "":
            logger.debug(f"Omitting empty text field {descriptor.name}")
            return
        self._write_field(writer, descriptor.name, value)

    def _encode_integer(self, writer, descriptor: FieldDescriptor, value: int, config):
        self._write_field(writer, descriptor.name, format_integer(value))

    def _encode_float(self, writer, descriptor: FieldDescriptor, value: float, config):
        self._write_field(writer, descriptor.name, format_float(value))

    def _encode_boolean(self, writer, descriptor: FieldDescriptor, value: bool, config):
        self._write_field(writer, descriptor.name, format_boolean(value))

    def _encode_file(self, writer, descriptor: FieldDescriptor, value, config: EncoderConfig):
        data = bytes(value)
        filename = descriptor.filename
        if not filename:
            extension = config.sniffer.detect(data) or config.default_extension
            filename = descriptor.name + extension
            logger.debug(f"Generated filename {filename!r} for {descriptor.name}")

        self._write_file(writer, descriptor.name, filename, data)

    def _encode_sequence(self, writer, descriptor: FieldDescriptor, value, config: EncoderConfig):
        for element in value:
            kind = classify_value(element)
            if kind is FieldKind.TEXT:
                self._write_field(writer, descriptor.name, element)
            elif kind is FieldKind.INTEGER:
                self._write_field(writer, descriptor.name, format_integer(element))
            else:
                self._unsupported(descriptor, element, config)

    def _encode_nested(self, writer, descriptor: FieldDescriptor, value, config):
        if isinstance(value, DescribesFields):
            # Attribute names of the listed fields; skipped fields left out
            value = {
                d.attribute: getattr(value, d.attribute, None)
                for d in value.describe_fields() if not d.skip
            }

        try:
            # Field names as declared on the nested type, not aliased
            payload = to_json(value, by_alias=False, bytes_mode='base64')
        except PydanticSerializationError as e:
            raise EncodingError(
                f"failed to serialize field {descriptor.name!r} as JSON: {e}",
                field_name=descriptor.name,
            ) from e

        self._write_field(writer, descriptor.name, payload)

    def _encode_null(self, writer, descriptor: FieldDescriptor, value, config):
        logger.debug(f"Omitting null field {descriptor.name}")

    def _encode_unsupported(self, writer, descriptor: FieldDescriptor, value, config):
        self._unsupported(descriptor, value, config)

    def _unsupported(self, descriptor: FieldDescriptor, value: Any, config: EncoderConfig) -> None:
        if config.strict:
            raise UnsupportedFieldError(descriptor.name, type(value))
        logger.debug(
            f"Dropping {type(value).__name__} value of field {descriptor.name}"
        )
