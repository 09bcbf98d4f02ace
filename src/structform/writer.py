#!/usr/bin/env python3
"""
Structform Multipart Writer

Incremental multipart/form-data writer over a binary stream.
Part headers are rendered by urllib3's RequestField; the boundary comes from
urllib3's choose_boundary().
"""

from __future__ import annotations

from typing import BinaryIO, Optional, Union

from urllib3.fields import RequestField
from urllib3.filepost import choose_boundary


DEFAULT_FILE_CONTENT_TYPE = "application/octet-stream"


def format_quoted_param(name: str, value: Union[str, bytes]) -> str:
    """
    Render a Content-Disposition parameter as a quoted string.

    Backslashes and double quotes are backslash-escaped, so parsers recover
    the value verbatim.
    """
    if isinstance(value, bytes):
        value = value.decode("utf-8")
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'{name}="{escaped}"'


class PartWriter:
    """Writes the body of the current part straight into the stream."""

    def __init__(self, stream: BinaryIO):
        self._stream = stream

    def write(self, data: bytes) -> int:
        return self._stream.write(data)


class MultipartWriter:
    """
    Writer producing a multipart/form-data body part by part.

    Parts are written in creation order. Each create_* call writes the
    boundary delimiter and the part headers, then returns a PartWriter for
    the part body. close() writes the closing boundary.

    Example:
        ```python
        buffer = io.BytesIO()
        writer = MultipartWriter(buffer)
        writer.create_form_field("title").write(b"Holiday")
        writer.create_form_file("photo", "photo.jpg").write(jpeg_bytes)
        writer.close()
        ```
    """

    def __init__(self, stream: BinaryIO, boundary: Optional[str] = None):
        """
        Initialize the writer.

        Args:
            stream: Binary stream receiving the body
            boundary: Boundary token; a random one is chosen if omitted
        """
        self._stream = stream
        self.boundary = boundary or choose_boundary()
        self._part_count = 0
        self._closed = False

    @property
    def content_type(self) -> str:
        """Content-Type header value matching this writer's boundary."""
        return f"multipart/form-data; boundary={self.boundary}"

    @property
    def part_count(self) -> int:
        return self._part_count

    def create_part(self, field: RequestField) -> PartWriter:
        """
        Start a new part with the headers of a RequestField.

        The field's data is ignored; write the body through the returned
        PartWriter.
        """
        if self._closed:
            raise ValueError("multipart writer is closed")

        if self._part_count == 0:
            delimiter = f"--{self.boundary}\r\n"
        else:
            delimiter = f"\r\n--{self.boundary}\r\n"

        self._stream.write(delimiter.encode("latin-1"))
        self._stream.write(field.render_headers().encode("utf-8"))
        self._part_count += 1
        return PartWriter(self._stream)

    def create_form_field(self, name: str) -> PartWriter:
        """Start a plain form field part."""
        field = RequestField(name=name, data=b"", header_formatter=format_quoted_param)
        field.make_multipart(content_disposition="form-data")
        return self.create_part(field)

    def create_form_file(
        self,
        name: str,
        filename: str,
        content_type: str = DEFAULT_FILE_CONTENT_TYPE,
    ) -> PartWriter:
        """Start a file part carrying a filename and a content type."""
        field = RequestField(
            name=name, data=b"", filename=filename, header_formatter=format_quoted_param
        )
        field.make_multipart(content_disposition="form-data", content_type=content_type)
        return self.create_part(field)

    def close(self) -> None:
        """Write the closing boundary. Further calls are no-ops."""
        if self._closed:
            return

        if self._part_count == 0:
            trailer = f"--{self.boundary}--\r\n"
        else:
            trailer = f"\r\n--{self.boundary}--\r\n"

        self._stream.write(trailer.encode("latin-1"))
        self._closed = True
