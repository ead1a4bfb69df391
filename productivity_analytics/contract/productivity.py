"""
Productivity analytics contract

Generic record storage plus an encrypted metric store. Metrics are kept as
ciphertext handles until the decryption oracle calls back with signed
plaintexts. Tasks of each submission can also be folded into an encrypted
per-category counter that only the manager may reveal.
"""

import logging
import time
from dataclasses import asdict, dataclass
from typing import Callable, Dict, List, Optional

from ..config import CONTRACT_CONFIG
from ..utils.helpers import category_hash
from .errors import (
    AlreadyRevealed,
    NotManager,
    UnknownCategory,
    UnknownMetric,
    UnknownRequest,
)
from .storage import KeyValueStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EncryptedMetric:
    id: int
    output: str
    hours: str
    tasks: str
    submitted_at: int
    submitter: str


@dataclass
class RevealedMetric:
    output: int = 0
    hours: int = 0
    tasks: int = 0
    revealed: bool = False

    def to_dict(self):
        return asdict(self)


class ProductivityContract(KeyValueStore):
    """Encrypted key-value store with a decryption request/callback table"""

    def __init__(self, fhe, manager: Optional[str] = None, categories: Optional[List[str]] = None,
                 clock: Callable[[], float] = time.time):
        """
        Args:
            fhe: FHE library (handles, homomorphic add, oracle access, signature check)
            manager: account allowed to reveal category counters
            categories: fixed category names accepted for task counters
            clock: source of block timestamps
        """
        super().__init__(clock=clock)
        self.fhe = fhe
        self.manager = (manager or CONTRACT_CONFIG['manager']).lower()
        self.categories = {category_hash(c): c for c in (categories or CONTRACT_CONFIG['categories'])}

        self.metric_count = 0
        self.encrypted_metrics: Dict[int, EncryptedMetric] = {}
        self.revealed_metrics: Dict[int, RevealedMetric] = {}

        self.encrypted_task_counters: Dict[str, str] = {}
        self.revealed_task_counts: Dict[str, int] = {}

        self._request_to_metric: Dict[int, int] = {}
        self._request_to_category: Dict[int, str] = {}
        self._handled_category_requests = set()

    # ------------------------------------------------------------------
    # Encrypted metrics
    # ------------------------------------------------------------------

    def submit_encrypted_metric(self, sender: str, output: bytes, hours: bytes, tasks: bytes,
                                work_type: Optional[str] = None) -> int:
        """Store three client ciphertexts under a new metric id"""
        self._require_sender(sender)
        with self._lock:
            cat_hash = None
            if work_type is not None:
                cat_hash = self._known_category(work_type)

            output_handle = self.fhe.from_external(output)
            hours_handle = self.fhe.from_external(hours)
            tasks_handle = self.fhe.from_external(tasks)

            counter_handle = None
            if cat_hash is not None:
                counter = self.encrypted_task_counters.get(cat_hash)
                if counter is None:
                    counter = self.fhe.as_zero()
                counter_handle = self.fhe.add(counter, tasks_handle)

            # state changes only below this line
            self.metric_count += 1
            metric_id = self.metric_count
            self.encrypted_metrics[metric_id] = EncryptedMetric(
                id=metric_id,
                output=output_handle,
                hours=hours_handle,
                tasks=tasks_handle,
                submitted_at=self.now(),
                submitter=sender.lower()
            )
            self.revealed_metrics[metric_id] = RevealedMetric()

            if counter_handle is not None:
                self.encrypted_task_counters[cat_hash] = counter_handle

            self._emit('MetricSubmitted', metric_id=metric_id, sender=sender.lower(), work_type=work_type)
            return metric_id

    def request_metric_decryption(self, metric_id: int) -> int:
        with self._lock:
            metric = self.get_encrypted_metric(metric_id)
            if self.revealed_metrics[metric_id].revealed:
                raise AlreadyRevealed(f"Metric {metric_id} already revealed")

            request_id = self.fhe.request_decryption(
                [metric.output, metric.hours, metric.tasks],
                self.handle_metric_decryption
            )
            self._request_to_metric[request_id] = metric_id
            self._emit('DecryptionRequested', request_id=request_id, metric_id=metric_id)
            return request_id

    def handle_metric_decryption(self, request_id: int, cleartexts: List[int], proof: str):
        """Oracle callback writing the plaintext metric exactly once"""
        with self._lock:
            metric_id = self._request_to_metric.get(request_id)
            if metric_id is None:
                raise UnknownRequest(f"Unknown decryption request: {request_id}")

            self.fhe.check_signatures(request_id, cleartexts, proof)

            revealed = self.revealed_metrics[metric_id]
            if revealed.revealed:
                raise AlreadyRevealed(f"Metric {metric_id} already revealed")
            if len(cleartexts) != 3:
                raise ValueError("Expected 3 cleartexts (output, hours, tasks)")

            revealed.output, revealed.hours, revealed.tasks = (int(v) for v in cleartexts)
            revealed.revealed = True
            self._emit('MetricRevealed', request_id=request_id, metric_id=metric_id)

    def get_encrypted_metric(self, metric_id: int) -> EncryptedMetric:
        metric = self.encrypted_metrics.get(metric_id)
        if metric is None:
            raise UnknownMetric(f"Unknown metric: {metric_id}")
        return metric

    def get_revealed_metric(self, metric_id: int) -> RevealedMetric:
        self.get_encrypted_metric(metric_id)
        return self.revealed_metrics[metric_id]

    # ------------------------------------------------------------------
    # Category counters
    # ------------------------------------------------------------------

    def _known_category(self, category: str) -> str:
        cat_hash = category_hash(category)
        if cat_hash not in self.categories:
            raise UnknownCategory(f"Unknown category: {category}")
        return cat_hash

    def get_encrypted_task_counter(self, category: str) -> str:
        cat_hash = self._known_category(category)
        counter = self.encrypted_task_counters.get(cat_hash)
        if counter is None:
            raise UnknownCategory(f"No encrypted counter for category: {category}")
        return counter

    def request_category_decryption(self, sender: str, category: str) -> int:
        """Manager-only request to reveal a category's task counter"""
        if not sender or sender.lower() != self.manager:
            raise NotManager("Only the manager can reveal category counters")

        with self._lock:
            counter = self.get_encrypted_task_counter(category)
            request_id = self.fhe.request_decryption([counter], self.handle_category_decryption)
            self._request_to_category[request_id] = category_hash(category)
            self._emit('DecryptionRequested', request_id=request_id, category=category)
            return request_id

    def handle_category_decryption(self, request_id: int, cleartexts: List[int], proof: str):
        with self._lock:
            cat_hash = self._request_to_category.get(request_id)
            if cat_hash is None:
                raise UnknownRequest(f"Unknown decryption request: {request_id}")
            if request_id in self._handled_category_requests:
                raise AlreadyRevealed(f"Request {request_id} already handled")

            self.fhe.check_signatures(request_id, cleartexts, proof)
            if len(cleartexts) != 1:
                raise ValueError("Expected 1 cleartext (task count)")

            self.revealed_task_counts[cat_hash] = int(cleartexts[0])
            self._handled_category_requests.add(request_id)
            self._emit('CategoryRevealed', request_id=request_id, category=self.categories[cat_hash],
                       tasks=int(cleartexts[0]))

    def get_revealed_category_count(self, category: str) -> Optional[int]:
        """Last revealed task count, or None before the first reveal"""
        return self.revealed_task_counts.get(self._known_category(category))
