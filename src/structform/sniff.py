#!/usr/bin/env python3
"""
Structform Extension Sniffer

Guess a filename extension for binary payloads from their leading bytes.

Detection is two injectable steps: a ContentSniffer maps bytes to a MIME type
(magic numbers, via the filetype library) and a MimeRegistry maps the MIME
type to an extension (the host's mimetypes registry).
"""

from __future__ import annotations

import logging
import mimetypes
from typing import Optional, Protocol

import filetype


logger = logging.getLogger(__name__)

# Alternate JPEG spelling and the one used instead
_JPEG_ALTERNATE = ".jpe"
_JPEG_CANONICAL = ".jpg"


class ContentSniffer(Protocol):
    """Protocol for MIME type detection from content."""

    def sniff(self, data: bytes) -> Optional[str]:
        """
        Guess the MIME type of a payload.

        Args:
            data: The payload, or its leading bytes

        Returns:
            MIME type string, or None if it cannot be determined
        """
        ...


class MimeRegistry(Protocol):
    """Protocol for MIME type to filename extension lookup."""

    def extension_for(self, mime_type: str) -> Optional[str]:
        """
        Return the preferred extension (with leading dot) for a MIME type.

        Returns None if the type has no registered extension.
        """
        ...


class FiletypeSniffer:
    """Magic-number sniffer backed by the filetype library."""

    def sniff(self, data: bytes) -> Optional[str]:
        return filetype.guess_mime(bytes(data))


class SystemMimeRegistry:
    """MIME registry backed by the standard mimetypes tables."""

    def __init__(self, strict: bool = True):
        self.strict = strict

    def extension_for(self, mime_type: str) -> Optional[str]:
        # Drop media type parameters such as "; charset=utf-8"
        base_type = mime_type.split(';', 1)[0].strip().lower()
        extensions = mimetypes.guess_all_extensions(base_type, strict=self.strict)
        return extensions[0] if extensions else None


class ExtensionSniffer:
    """
    Combine a ContentSniffer and a MimeRegistry into extension detection.

    Detection never raises: anything inconclusive yields an empty string.
    """

    def __init__(
        self,
        sniffer: Optional[ContentSniffer] = None,
        registry: Optional[MimeRegistry] = None,
    ):
        self.sniffer = sniffer if sniffer is not None else FiletypeSniffer()
        self.registry = registry if registry is not None else SystemMimeRegistry()

    def detect(self, data: bytes) -> str:
        """
        Detect the filename extension of a payload.

        Args:
            data: The binary payload

        Returns:
            Extension with leading dot (e.g. ".png"), or "" if unknown
        """
        try:
            mime_type = self.sniffer.sniff(data)
            if not mime_type:
                return ""

            extension = self.registry.extension_for(mime_type)
        except Exception as e:
            logger.debug(f"Extension detection failed: {e}")
            return ""

        if not extension:
            logger.debug(f"No extension registered for {mime_type}")
            return ""

        if extension == _JPEG_ALTERNATE:
            return _JPEG_CANONICAL

        return extension


_default_sniffer: Optional[ExtensionSniffer] = None


def detect_extension(data: bytes) -> str:
    """Detect an extension with the default filetype/mimetypes sniffer."""
    global _default_sniffer

    if _default_sniffer is None:
        _default_sniffer = ExtensionSniffer()
    return _default_sniffer.detect(data)
