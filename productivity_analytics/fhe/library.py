"""
FHE library surface used by the contract

Ciphertexts never reach the contract directly: they are kept here and the
contract works with handles. Decryption goes through the oracle, and the
contract checks every oracle result with check_signatures.
"""

import logging
import threading
from typing import Dict, List

from ..contract.errors import InvalidSignature
from ..utils.helpers import ciphertext_handle
from .oracle import DecryptionCallback, DecryptionOracle
from .tenseal_wrapper import TenSEALWrapper

logger = logging.getLogger(__name__)


class FHELibrary:
    """Handle-based homomorphic operations backed by TenSEAL"""

    def __init__(self, wrapper: TenSEALWrapper = None, signing_key=None):
        if wrapper is None:
            wrapper = TenSEALWrapper()
            wrapper.generate_context()
        self.wrapper = wrapper
        self._ciphertexts: Dict[str, bytes] = {}
        self._lock = threading.Lock()
        self.oracle = DecryptionOracle(self._decrypt_handle, signing_key=signing_key)

    def _store(self, ciphertext: bytes) -> str:
        handle = ciphertext_handle(ciphertext)
        with self._lock:
            self._ciphertexts[handle] = ciphertext
        return handle

    def resolve(self, handle: str) -> bytes:
        try:
            return self._ciphertexts[handle]
        except KeyError:
            raise ValueError(f"Unknown ciphertext handle: {handle}")

    def public_context(self) -> bytes:
        return self.wrapper.public_context()

    def from_external(self, ciphertext: bytes) -> str:
        """Import a client-encrypted value and return its handle"""
        if not ciphertext:
            raise ValueError("Empty ciphertext")
        self.wrapper.load_vector(ciphertext)
        return self._store(ciphertext)

    def as_encrypted(self, value: int) -> str:
        """Trivially encrypt a constant"""
        return self._store(self.wrapper.encrypt_value(value))

    def as_zero(self) -> str:
        return self.as_encrypted(0)

    def add(self, left: str, right: str) -> str:
        return self._store(self.wrapper.add(self.resolve(left), self.resolve(right)))

    def _decrypt_handle(self, handle: str) -> int:
        return self.wrapper.decrypt_value(self.resolve(handle))

    def request_decryption(self, handles: List[str], callback: DecryptionCallback) -> int:
        for handle in handles:
            self.resolve(handle)
        return self.oracle.submit(handles, callback)

    def check_signatures(self, request_id: int, cleartexts: List[int], proof: str):
        """Raise InvalidSignature unless the oracle signed these cleartexts"""
        if not self.oracle.verify(request_id, cleartexts, proof):
            logger.warning(f"⚠️ Rejected decryption proof for request {request_id}")
            raise InvalidSignature(f"Invalid decryption proof for request {request_id}")
