"""
Generic string-keyed byte storage

The frontend keeps its JSON records here; the contract never interprets
the stored bytes.
"""

import logging
import threading
import time
from typing import Any, Callable, Dict, List

from .errors import SignerRequired

logger = logging.getLogger(__name__)


class KeyValueStore:
    """Contract storage slots addressed by string keys"""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._lock = threading.RLock()
        self._slots: Dict[str, bytes] = {}
        self.events: List[Dict[str, Any]] = []

    def now(self) -> int:
        return int(self._clock())

    def _emit(self, name: str, **fields):
        event = {'event': name, 'timestamp': self.now(), **fields}
        self.events.append(event)
        logger.info(f"📣 {name} {fields}")

    @staticmethod
    def _require_sender(sender):
        if not sender:
            raise SignerRequired("Transaction requires a signer")

    def is_available(self) -> bool:
        return True

    def set_data(self, sender: str, key: str, data: bytes):
        self._require_sender(sender)
        with self._lock:
            self._slots[key] = bytes(data)
            self._emit('DataStored', key=key, sender=sender, size=len(data))

    def get_data(self, key: str) -> bytes:
        """Stored bytes, or empty bytes when the key was never written"""
        return self._slots.get(key, b'')
