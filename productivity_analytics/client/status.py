"""Transient transaction status banner"""

import time
from dataclasses import dataclass
from typing import Callable, Optional

from ..config import STATUS_BANNER

PENDING = 'pending'
SUCCESS = 'success'
ERROR = 'error'


@dataclass
class TransactionStatus:
    """pending / success / error banner that hides itself after a delay"""

    visible: bool = False
    status: str = PENDING
    message: str = ''
    hide_at: Optional[float] = None

    def __post_init__(self):
        self._clock: Callable[[], float] = time.time

    def use_clock(self, clock: Callable[[], float]) -> 'TransactionStatus':
        self._clock = clock
        return self

    def show(self, status: str, message: str, dismiss_after: Optional[float] = None):
        if status not in (PENDING, SUCCESS, ERROR):
            raise ValueError(f"Unknown status: {status}")
        if dismiss_after is None and status != PENDING:
            dismiss_after = STATUS_BANNER['success_delay' if status == SUCCESS else 'error_delay']

        self.visible = True
        self.status = status
        self.message = message
        self.hide_at = self._clock() + dismiss_after if dismiss_after is not None else None

    def pending(self, message: str):
        self.show(PENDING, message)

    def success(self, message: str):
        self.show(SUCCESS, message)

    def error(self, message: str):
        self.show(ERROR, message)

    def hide(self):
        self.visible = False
        self.status = PENDING
        self.message = ''
        self.hide_at = None

    def is_visible(self) -> bool:
        """Current visibility; an expired banner is reset on read"""
        if self.visible and self.hide_at is not None and self._clock() >= self.hide_at:
            self.hide()
        return self.visible
