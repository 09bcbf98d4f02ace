#!/usr/bin/env python3
"""
Structform Configuration

Global encoder configuration, set once at application startup.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .sniff import ExtensionSniffer


@dataclass
class EncoderConfig:
    """
    Configuration for multipart encoding.

    Attributes:
        strict: Raise UnsupportedFieldError for values with no form encoding.
                When False, such values are dropped (best effort).
        default_extension: Extension used when sniffing finds none
        sniffer: Extension sniffer for unnamed file fields
    """
    strict: bool = True
    default_extension: str = ""
    sniffer: Optional[ExtensionSniffer] = None

    def __post_init__(self):
        """Set default sniffer if not provided."""
        if self.sniffer is None:
            self.sniffer = ExtensionSniffer()


# Global state
_config: Optional[EncoderConfig] = None


def configure(
    strict: bool = True,
    default_extension: str = "",
    sniffer: Optional[ExtensionSniffer] = None
) -> None:
    """
    Configure the module-level encoder.

    Args:
        strict: Raise on unsupported field kinds (default: True)
        default_extension: Fallback extension for undetected files (default: "")
        sniffer: ExtensionSniffer instance (defaults to filetype + mimetypes)

    Example:
        ```python
        import structform

        structform.configure(strict=False, default_extension=".bin")
        ```
    """
    global _config

    _config = EncoderConfig(
        strict=strict,
        default_extension=default_extension,
        sniffer=sniffer
    )


def get_config() -> EncoderConfig:
    """Get the current configuration, creating the default on first use."""
    global _config

    if _config is None:
        _config = EncoderConfig()
    return _config


def reset_config() -> None:
    """Restore the default configuration."""
    global _config

    _config = None
