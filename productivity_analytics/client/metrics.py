"""
Encrypted metric submission
Encrypts output / hours / tasks with the contract's public context
"""

import logging
from typing import Any, Dict, List, Optional

from .contract_client import ContractCallError, ContractClient

logger = logging.getLogger(__name__)


class EncryptedMetricSubmitter:
    """Client side of the encrypted metric store"""

    def __init__(self, contract: ContractClient):
        self.contract = contract
        self._wrapper = None

    def encryptor(self):
        """Encrypt-only TenSEAL wrapper built from the service's public context"""
        if self._wrapper is None:
            from ..fhe.tenseal_wrapper import TenSEALWrapper

            self._wrapper = TenSEALWrapper.from_public_context(self.contract.public_context())
        return self._wrapper

    def submit(self, output: int, hours: int, tasks: int, work_type: Optional[str] = None) -> int:
        wrapper = self.encryptor()
        metric_id = self.contract.submit_encrypted_metric(
            wrapper.encrypt_value(output),
            wrapper.encrypt_value(hours),
            wrapper.encrypt_value(tasks),
            work_type=work_type
        )
        logger.info(f"🔒 Encrypted metric {metric_id} submitted")
        return metric_id

    def submit_form(self, form: Dict[str, Any], productivity_score: int) -> int:
        """Output is the productivity score, floored at zero for the unsigned counter"""
        return self.submit(max(productivity_score, 0), form['hoursWorked'], form['tasksCompleted'],
                           work_type=form['workType'])

    def request_reveal(self, metric_id: int) -> int:
        return self.contract.request_metric_decryption(metric_id)

    def revealed(self, metric_id: int) -> Dict[str, Any]:
        return self.contract.get_revealed_metric(metric_id)

    def reveal_states(self, metric_ids: List[int]) -> Dict[int, Optional[Dict[str, Any]]]:
        """
        Revealed values per metric id

        Ids the service no longer knows (e.g. after a restart) map to None.
        """
        states = {}
        for metric_id in metric_ids:
            try:
                states[metric_id] = self.revealed(metric_id)
            except ContractCallError as e:
                logger.warning(f"Could not read metric {metric_id}: {e}")
                states[metric_id] = None
        return states

