"""
Tests for the transaction status banner
"""
import pytest

from productivity_analytics.client.status import TransactionStatus


class Clock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def status(clock):
    return TransactionStatus().use_clock(clock)


def test_hidden_by_default(status):
    assert not status.is_visible()


def test_pending_stays_until_replaced(status, clock):
    status.pending("Encrypting productivity data with FHE...")
    clock.now += 60
    assert status.is_visible()
    assert status.status == 'pending'


def test_success_hides_after_two_seconds(status, clock):
    status.success("Encrypted productivity data submitted!")
    clock.now += 1.9
    assert status.is_visible()
    clock.now += 0.1
    assert not status.is_visible()
    assert status.message == ''
    assert status.status == 'pending'


def test_error_hides_after_three_seconds(status, clock):
    status.error("Submission failed: boom")
    clock.now += 2.5
    assert status.is_visible()
    assert status.status == 'error'
    clock.now += 0.5
    assert not status.is_visible()


def test_new_message_restarts_timer(status, clock):
    status.success("first")
    clock.now += 1.5
    status.error("second")
    clock.now += 1.5
    assert status.is_visible()
    assert status.message == "second"


def test_unknown_status(status):
    with pytest.raises(ValueError):
        status.show('warning', 'nope')
