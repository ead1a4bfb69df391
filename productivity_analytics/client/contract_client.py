"""
Contract binding

Read calls go through a read-only binding; writes need a signer binding
carrying the connected account.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from ..config import SERVER_CONFIG
from ..utils.helpers import bytes_to_str, str_to_bytes

logger = logging.getLogger(__name__)


class ContractCallError(Exception):
    """A contract call that failed or was reverted"""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ContractClient:
    """HTTP binding for the productivity contract"""

    def __init__(self, server_url: Optional[str] = None, account: Optional[str] = None,
                 http_client: Optional[httpx.Client] = None):
        self.server_url = (server_url or SERVER_CONFIG['url']).rstrip('/')
        self.account = account or None
        self._http = http_client or httpx.Client(timeout=SERVER_CONFIG['timeout'])

    @property
    def has_signer(self) -> bool:
        return bool(self.account)

    def with_signer(self, account: str) -> 'ContractClient':
        """Same binding, signing writes as the given account"""
        if not account:
            raise ContractCallError("Failed to get contract with signer")
        return ContractClient(self.server_url, account=account, http_client=self._http)

    def _request(self, method: str, path: str, signed: bool = False, **kwargs) -> Dict[str, Any]:
        headers = kwargs.pop('headers', {})
        if signed:
            if not self.account:
                raise ContractCallError("Transaction requires a connected wallet", status_code=401)
            headers['X-Account'] = self.account

        url = f"{self.server_url}{path}"
        try:
            response = self._http.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"❌ {method} {path} failed: {e}")
            raise ContractCallError(str(e) or "Connection failed")

        if response.status_code >= 400:
            try:
                detail = response.json().get('detail', response.text)
            except ValueError:
                detail = response.text
            raise ContractCallError(str(detail), status_code=response.status_code)
        return response.json()

    # Generic storage

    def is_available(self) -> bool:
        return bool(self._request('GET', '/is_available').get('available'))

    def get_data(self, key: str) -> bytes:
        return str_to_bytes(self._request('GET', f'/data/{key}').get('data'))

    def set_data(self, key: str, data: bytes):
        self._request('PUT', f'/data/{key}', signed=True, json={'data': bytes_to_str(data)})

    # Wallet / service

    def health(self) -> Dict[str, Any]:
        return self._request('GET', '/health')

    def accounts(self) -> List[str]:
        return self._request('GET', '/accounts').get('accounts', [])

    def events(self, since: int = 0) -> List[Dict[str, Any]]:
        return self._request('GET', '/events', params={'since': since}).get('events', [])

    # Encrypted metrics

    def public_context(self) -> bytes:
        return str_to_bytes(self._request('GET', '/fhe/public_context')['context'])

    def submit_encrypted_metric(self, output: bytes, hours: bytes, tasks: bytes,
                                work_type: Optional[str] = None) -> int:
        payload = {
            'output': bytes_to_str(output),
            'hours': bytes_to_str(hours),
            'tasks': bytes_to_str(tasks),
            'work_type': work_type
        }
        return self._request('POST', '/metrics', signed=True, json=payload)['metric_id']

    def get_encrypted_metric(self, metric_id: int) -> Dict[str, Any]:
        return self._request('GET', f'/metrics/{metric_id}')

    def request_metric_decryption(self, metric_id: int) -> int:
        return self._request('POST', f'/metrics/{metric_id}/decrypt', signed=True)['request_id']

    def get_revealed_metric(self, metric_id: int) -> Dict[str, Any]:
        return self._request('GET', f'/metrics/{metric_id}/revealed')

    def handle_metric_decryption(self, request_id: int, cleartexts: List[int], proof: str):
        self._request('POST', '/metrics/decryption_callback',
                      json={'request_id': request_id, 'cleartexts': cleartexts, 'proof': proof})

    # Category counters

    def get_encrypted_task_counter(self, category: str) -> str:
        return self._request('GET', f'/categories/{category}/counter')['handle']

    def request_category_decryption(self, category: str) -> int:
        return self._request('POST', f'/categories/{category}/decrypt', signed=True)['request_id']

    def get_revealed_category_count(self, category: str) -> Optional[int]:
        return self._request('GET', f'/categories/{category}/revealed').get('tasks')

    def handle_category_decryption(self, request_id: int, cleartexts: List[int], proof: str):
        self._request('POST', '/categories/decryption_callback',
                      json={'request_id': request_id, 'cleartexts': cleartexts, 'proof': proof})

