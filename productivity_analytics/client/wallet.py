"""Wallet connection state and account-change notifications"""

import logging
from typing import Callable, List

from .contract_client import ContractCallError, ContractClient

logger = logging.getLogger(__name__)


class WalletManager:
    """Tracks the connected account of the frontend"""

    def __init__(self, contract: ContractClient):
        self.contract = contract
        self.account = ''
        self.available_accounts: List[str] = []
        self._listeners: List[Callable[[str], None]] = []

    @property
    def connected(self) -> bool:
        return bool(self.account)

    def discover_accounts(self) -> List[str]:
        try:
            self.available_accounts = self.contract.accounts()
        except ContractCallError as e:
            logger.error(f"Account discovery failed: {e}")
            self.available_accounts = []
        return self.available_accounts

    def on_accounts_changed(self, listener: Callable[[str], None]):
        self._listeners.append(listener)

    def _notify(self):
        for listener in self._listeners:
            listener(self.account)

    def connect(self, account: str) -> ContractClient:
        """Connect an account and return a signer binding for it"""
        if not account:
            raise ContractCallError("Failed to connect wallet")
        if self.available_accounts and account not in self.available_accounts:
            raise ContractCallError(f"Unknown account: {account}")
        changed = account != self.account
        self.account = account
        logger.info(f"🔌 Wallet connected: {account}")
        if changed:
            self._notify()
        return self.signer()

    def switch_account(self, account: str):
        """Provider-side account change (first account of the new list, or none)"""
        if account == self.account:
            return
        self.account = account or ''
        self._notify()

    def disconnect(self):
        if self.account:
            self.account = ''
            self._notify()

    def signer(self) -> ContractClient:
        return self.contract.with_signer(self.account)
