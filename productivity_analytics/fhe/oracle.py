"""
Decryption oracle

Holds the secret context. Contracts queue decryption requests; fulfilment
decrypts the requested handles, signs the cleartexts and hands them back
through the callback the contract registered.
"""

import hashlib
import hmac
import json
import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from ..config import ORACLE_CONFIG

logger = logging.getLogger(__name__)

DecryptionCallback = Callable[[int, List[int], str], None]


@dataclass
class DecryptionRequest:
    request_id: int
    handles: List[str]
    callback: DecryptionCallback
    fulfilled: bool = False
    cleartexts: List[int] = field(default_factory=list)


class DecryptionOracle:
    """Off-chain decryption service signing every result it returns"""

    def __init__(self, decrypt: Callable[[str], int], signing_key=None):
        """
        Args:
            decrypt: resolves a handle and returns its plaintext
            signing_key: shared secret used to sign decryption results
        """
        self._decrypt = decrypt
        self._key = (signing_key or ORACLE_CONFIG['signing_key']).encode('utf-8')
        self._lock = threading.Lock()
        self._next_id = 1
        self.requests: Dict[int, DecryptionRequest] = {}
        self._in_flight = set()

    def submit(self, handles: List[str], callback: DecryptionCallback) -> int:
        """Queue a request and return its id"""
        with self._lock:
            request_id = self._next_id
            self._next_id += 1
            self.requests[request_id] = DecryptionRequest(request_id, list(handles), callback)

        logger.info(f"📨 Decryption request {request_id} queued ({len(handles)} handles)")
        return request_id

    def pending(self) -> List[int]:
        return [r.request_id for r in self.requests.values() if not r.fulfilled]

    def sign(self, request_id: int, cleartexts: List[int]) -> str:
        message = json.dumps({'request_id': request_id, 'cleartexts': list(cleartexts)},
                             separators=(',', ':')).encode('utf-8')
        return hmac.new(self._key, message, hashlib.sha256).hexdigest()

    def verify(self, request_id: int, cleartexts: List[int], proof: str) -> bool:
        if not proof:
            return False
        return hmac.compare_digest(self.sign(request_id, cleartexts), proof)

    def fulfil(self, request_id: int) -> Optional[List[int]]:
        """
        Decrypt, sign and deliver one request

        Returns the delivered cleartexts, or None when another worker is
        already delivering this request.
        """
        with self._lock:
            request = self.requests.get(request_id)
            if request is None:
                raise KeyError(f"Unknown decryption request: {request_id}")
            if request.fulfilled:
                return request.cleartexts
            if request_id in self._in_flight:
                logger.info(f"Decryption request {request_id} already in flight")
                return None
            self._in_flight.add(request_id)

        # the callback takes the contract lock, so it runs outside ours
        try:
            cleartexts = [self._decrypt(handle) for handle in request.handles]
            proof = self.sign(request_id, cleartexts)
            request.callback(request_id, cleartexts, proof)
            with self._lock:
                request.fulfilled = True
                request.cleartexts = cleartexts
        finally:
            with self._lock:
                self._in_flight.discard(request_id)

        logger.info(f"🔓 Decryption request {request_id} fulfilled")
        return cleartexts

    def fulfil_pending(self) -> int:
        """Fulfil every queued request; returns how many were delivered"""
        delivered = 0
        for request_id in self.pending():
            if self.fulfil(request_id) is not None:
                delivered += 1
        return delivered
