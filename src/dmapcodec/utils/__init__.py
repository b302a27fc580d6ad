"""Utility functions for dmapcodec.

This module provides size calculation for fields and records.
"""

from __future__ import annotations

from .sizing import body_size, encoded_size, field_size, field_sizes

__all__ = [
    "body_size",
    "encoded_size",
    "field_size",
    "field_sizes",
]
