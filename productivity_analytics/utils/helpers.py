"""
Helper utility functions for FHE Productivity Analytics
"""

import base64
import hashlib
import logging
import sys

from ..config import LOGGING_CONFIG


def setup_logging(log_file=None):
    """
    Configure root logging with a file handler and a stdout handler

    Args:
        log_file: path of the log file (defaults to LOGGING_CONFIG['log_file'])
    """
    handlers = [logging.StreamHandler(sys.stdout)]
    log_file = log_file or LOGGING_CONFIG['log_file']
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=LOGGING_CONFIG['level'],
        format=LOGGING_CONFIG['format'],
        handlers=handlers
    )


def bytes_to_str(obj):
    """Convert bytes to base64 for JSON serialization"""
    if isinstance(obj, bytes):
        return base64.b64encode(obj).decode('utf-8')
    elif isinstance(obj, dict):
        return {k: bytes_to_str(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [bytes_to_str(v) for v in obj]
    return obj


def str_to_bytes(value):
    """Decode a base64 string produced by bytes_to_str"""
    if not value:
        return b''
    return base64.b64decode(value.encode('utf-8'), validate=True)


def ciphertext_handle(ciphertext):
    """
    Derive the handle of a serialized ciphertext

    Args:
        ciphertext: serialized ciphertext bytes

    Returns:
        str: '0x' prefixed sha256 hex digest
    """
    return '0x' + hashlib.sha256(ciphertext).hexdigest()


def category_hash(category):
    """Hash identifying a category in the contract's counter table"""
    return '0x' + hashlib.sha256(category.encode('utf-8')).hexdigest()


def shorten_address(address):
    """0x1234...abcd style address for display"""
    if not address or len(address) < 10:
        return address or ''
    return f"{address[:6]}...{address[38:]}"
