"""Pytest configuration for structform tests"""

from dataclasses import dataclass
from typing import Dict, List, Optional

import pytest
from python_multipart.multipart import MultipartParser, parse_options_header

from structform import reset_config


@dataclass
class Part:
    """A decoded multipart part."""
    name: str
    filename: Optional[str]
    headers: Dict[str, str]
    data: bytes

    @property
    def text(self) -> str:
        return self.data.decode("utf-8")


def decode_parts(body: bytes, content_type: str) -> List[Part]:
    """Decode a multipart/form-data body with python-multipart."""
    _, params = parse_options_header(content_type)
    boundary = params[b"boundary"]

    parts: List[Part] = []
    current: dict = {}
    header_field = bytearray()
    header_value = bytearray()

    def on_part_begin():
        current.clear()
        current.update(headers={}, data=bytearray())

    def on_header_field(data, start, end):
        header_field.extend(data[start:end])

    def on_header_value(data, start, end):
        header_value.extend(data[start:end])

    def on_header_end():
        key = bytes(header_field).decode("latin-1").lower()
        current["headers"][key] = bytes(header_value).decode("utf-8")
        header_field.clear()
        header_value.clear()

    def on_part_data(data, start, end):
        current["data"].extend(data[start:end])

    def on_part_end():
        _, options = parse_options_header(current["headers"]["content-disposition"])
        filename = options.get(b"filename")
        parts.append(Part(
            name=options[b"name"].decode("utf-8"),
            filename=filename.decode("utf-8") if filename is not None else None,
            headers=dict(current["headers"]),
            data=bytes(current["data"]),
        ))

    parser = MultipartParser(boundary, callbacks={
        "on_part_begin": on_part_begin,
        "on_header_field": on_header_field,
        "on_header_value": on_header_value,
        "on_header_end": on_header_end,
        "on_part_data": on_part_data,
        "on_part_end": on_part_end,
    })
    parser.write(body)
    parser.finalize()
    return parts


@pytest.fixture
def decode():
    """Decode an EncodedForm into a list of Parts."""
    def _decode(form):
        return decode_parts(form.body, form.content_type)
    return _decode


@pytest.fixture(autouse=True)
def reset_global_config():
    """Reset the module configuration after each test."""
    yield
    reset_config()
