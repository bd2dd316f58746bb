"""Vendor and binary pre-filters."""

from .binary import is_binary_content, sniff_sample
from .vendor import is_vendor_path

__all__ = ["is_binary_content", "is_vendor_path", "sniff_sample"]
