#!/usr/bin/env python3
"""
Structform - Records to multipart/form-data

Encode dataclasses and pydantic models as multipart/form-data request bodies,
uploading binary fields as files alongside their metadata.

Usage:
    from dataclasses import dataclass, field
    from typing import Annotated
    import structform
    from structform import FormField

    @dataclass
    class UploadRequest:
        username: str
        email: str
        file: bytes
        avatar: Annotated[bytes, FormField(filename="avatar.png")]
        tags: list[str] = field(default_factory=list)
        session: Annotated[str, FormField(name="-")] = ""

    form = structform.encode(UploadRequest(...))
    httpx.post(url, content=form.body, headers={"Content-Type": form.content_type})

Field Encoding:
    str             form field (empty strings omitted)
    int / float     decimal form field
    bool            "true" / "false"
    bytes           file part, filename "<name><sniffed extension>"
    list / tuple    repeated form fields with the same name
    nested record   JSON form field
    None            omitted

Annotation Types:
    FormField - Set the wire name ("-" skips the field) and file name
    FieldDescriptor - Explicit field list returned by describe_fields()
"""

from .config import (
    configure,
    get_config,
    reset_config,
    EncoderConfig,
)

from .core import encode, encode_into

from .models import (
    SKIP,
    FormField,
    FieldDescriptor,
    FieldKind,
    DescribesFields,
    EncodedForm,
    classify_value,
)

from .exceptions import (
    StructformError,
    InvalidInputError,
    EncodingError,
    FinalizationError,
    UnsupportedFieldError,
)

from .encoder import Encoder, MultipartEncoder
from .extraction import extract_descriptors
from .sniff import (
    ContentSniffer,
    MimeRegistry,
    FiletypeSniffer,
    SystemMimeRegistry,
    ExtensionSniffer,
    detect_extension,
)
from .writer import MultipartWriter


try:
    from structform._version import version as __version__
except ImportError:
    __version__ = "0.0.0+dev"


__all__ = [
    # Core API
    'encode',
    'encode_into',
    'configure',
    'get_config',
    'reset_config',
    'EncoderConfig',

    # Models
    'SKIP',
    'FormField',
    'FieldDescriptor',
    'FieldKind',
    'DescribesFields',
    'EncodedForm',
    'classify_value',
    'extract_descriptors',

    # Errors
    'StructformError',
    'InvalidInputError',
    'EncodingError',
    'FinalizationError',
    'UnsupportedFieldError',

    # Encoder
    'Encoder',
    'MultipartEncoder',
    'MultipartWriter',

    # Sniffing
    'ContentSniffer',
    'MimeRegistry',
    'FiletypeSniffer',
    'SystemMimeRegistry',
    'ExtensionSniffer',
    'detect_extension',
]
