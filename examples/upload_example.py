#!/usr/bin/env python3
"""
Upload Example

Encode a file upload with metadata and POST it to httpbin.

Run from the repository root:
    python examples/upload_example.py
"""

import json
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Annotated, List

import httpx

sys.path.insert(0, "src")

import structform
from structform import FormField


# ============================================================================
# Request Model
# ============================================================================

@dataclass
class UploadRequest:
    """A file upload with metadata."""
    username: str
    email: str
    description: str
    file: Annotated[bytes, FormField(filename="example.txt")]
    tags: List[str] = field(default_factory=list)


def main() -> None:
    logging.basicConfig(level=logging.DEBUG)

    file_data = (Path(__file__).parent / "example.txt").read_bytes()

    request = UploadRequest(
        username="johndoe",
        email="john@example.com",
        description="An example file upload",
        file=file_data,
        tags=["example", "upload", "python"],
    )

    form = structform.encode(request)

    response = httpx.post(
        "https://httpbin.org/post",
        content=form.body,
        headers={"Content-Type": form.content_type},
    )
    response.raise_for_status()

    echoed = response.json()
    print("Form:", json.dumps(echoed["form"], indent=2))
    print("Files:", json.dumps(echoed["files"], indent=2))


if __name__ == "__main__":
    main()
