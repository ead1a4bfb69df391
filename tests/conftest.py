"""
Pytest configuration and fixtures
"""
import pytest
from fastapi.testclient import TestClient

from productivity_analytics.client.contract_client import ContractClient
from productivity_analytics.config import DEV_ACCOUNTS
from productivity_analytics.contract import InvalidSignature, ProductivityContract
from productivity_analytics.fhe.oracle import DecryptionOracle
from productivity_analytics.server.server import create_app
from productivity_analytics.utils.helpers import ciphertext_handle

MANAGER = DEV_ACCOUNTS[0]
USER = DEV_ACCOUNTS[1]
NOW = 1_700_000_000


class PlainFHE:
    """Test double for the FHE library: ciphertexts are ASCII integers"""

    def __init__(self):
        self._values = {}
        self.oracle = DecryptionOracle(lambda handle: self._values[handle], signing_key='test-oracle-key')

    def _store(self, value):
        handle = ciphertext_handle(f"{value}:{len(self._values)}".encode())
        self._values[handle] = value
        return handle

    def public_context(self):
        return b'plain-context'

    def from_external(self, ciphertext):
        return self._store(int(ciphertext.decode()))

    def as_zero(self):
        return self._store(0)

    def add(self, left, right):
        return self._store(self._values[left] + self._values[right])

    def request_decryption(self, handles, callback):
        return self.oracle.submit(handles, callback)

    def check_signatures(self, request_id, cleartexts, proof):
        if not self.oracle.verify(request_id, cleartexts, proof):
            raise InvalidSignature("bad proof")


def enc(value):
    return str(value).encode()


@pytest.fixture
def fhe():
    return PlainFHE()


@pytest.fixture
def contract(fhe):
    return ProductivityContract(fhe, manager=MANAGER, categories=['remote', 'office'], clock=lambda: NOW)


@pytest.fixture
def test_client(contract):
    return TestClient(create_app(contract))


@pytest.fixture
def contract_client(test_client):
    """Read-only binding talking to the in-process service"""
    return ContractClient("http://testserver", http_client=test_client)
