"""Productivity contract: record storage and encrypted metric store"""

from .errors import (
    ContractError,
    SignerRequired,
    NotManager,
    UnknownMetric,
    UnknownRequest,
    UnknownCategory,
    AlreadyRevealed,
    InvalidSignature
)
from .storage import KeyValueStore
from .productivity import ProductivityContract, EncryptedMetric, RevealedMetric

__all__ = ['ContractError', 'SignerRequired', 'NotManager', 'UnknownMetric', 'UnknownRequest',
           'UnknownCategory', 'AlreadyRevealed', 'InvalidSignature', 'KeyValueStore',
           'ProductivityContract', 'EncryptedMetric', 'RevealedMetric']
