#!/usr/bin/env python3
"""
Structform Encoders

Encoders for serializing records to multipart/form-data.
"""

from .base import Encoder
from .multipart import MultipartEncoder, format_float

__all__ = ['Encoder', 'MultipartEncoder', 'format_float']
