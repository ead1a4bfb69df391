"""Utility modules for FHE Productivity Analytics"""

from .helpers import (
    setup_logging,
    bytes_to_str,
    str_to_bytes,
    ciphertext_handle,
    category_hash,
    shorten_address
)

__all__ = ['setup_logging', 'bytes_to_str', 'str_to_bytes', 'ciphertext_handle', 'category_hash',
           'shorten_address']
