"""
Tests for the productivity contract: storage, encrypted metrics, category counters
"""
import pytest

from conftest import MANAGER, NOW, USER, enc
from productivity_analytics.contract import (
    AlreadyRevealed,
    InvalidSignature,
    NotManager,
    SignerRequired,
    UnknownCategory,
    UnknownMetric,
    UnknownRequest,
)


class TestKeyValueStore:

    def test_missing_key_reads_empty(self, contract):
        assert contract.get_data("record_keys") == b''

    def test_set_then_get(self, contract):
        contract.set_data(USER, "record_1", b'{"a":1}')
        assert contract.get_data("record_1") == b'{"a":1}'

    def test_overwrite(self, contract):
        contract.set_data(USER, "k", b'old')
        contract.set_data(USER, "k", b'new')
        assert contract.get_data("k") == b'new'

    def test_write_requires_signer(self, contract):
        with pytest.raises(SignerRequired):
            contract.set_data(None, "k", b'x')
        assert contract.get_data("k") == b''

    def test_is_available(self, contract):
        assert contract.is_available() is True

    def test_write_emits_event(self, contract):
        contract.set_data(USER, "k", b'abc')
        assert contract.events[-1]['event'] == 'DataStored'
        assert contract.events[-1]['size'] == 3
        assert contract.events[-1]['timestamp'] == NOW


class TestEncryptedMetrics:

    def submit(self, contract, output=7, hours=8, tasks=5, work_type=None):
        return contract.submit_encrypted_metric(USER, enc(output), enc(hours), enc(tasks), work_type=work_type)

    def test_ids_are_monotonic(self, contract):
        assert [self.submit(contract) for _ in range(3)] == [1, 2, 3]
        assert contract.metric_count == 3

    def test_submitted_metric_is_unrevealed(self, contract):
        metric_id = self.submit(contract)
        metric = contract.get_encrypted_metric(metric_id)
        assert metric.submitted_at == NOW
        assert metric.submitter == USER.lower()
        assert metric.output.startswith('0x')
        assert contract.get_revealed_metric(metric_id).revealed is False

    def test_submit_requires_signer(self, contract):
        with pytest.raises(SignerRequired):
            contract.submit_encrypted_metric('', enc(1), enc(1), enc(1))
        assert contract.metric_count == 0

    def test_invalid_ciphertext_leaves_no_trace(self, contract):
        self.submit(contract, tasks=5, work_type='remote')
        counter = contract.get_encrypted_task_counter('remote')
        events = list(contract.events)

        with pytest.raises(ValueError):
            contract.submit_encrypted_metric(USER, enc(7), enc(8), b'junk', work_type='remote')
        with pytest.raises(ValueError):
            contract.submit_encrypted_metric(USER, b'junk', b'junk', b'junk')

        assert contract.metric_count == 1
        assert list(contract.encrypted_metrics) == [1]
        assert list(contract.revealed_metrics) == [1]
        assert contract.get_encrypted_task_counter('remote') == counter
        assert contract.events == events
        assert self.submit(contract) == 2

    def test_decryption_round_trip(self, contract, fhe):
        metric_id = self.submit(contract, output=7, hours=8, tasks=5)
        contract.request_metric_decryption(metric_id)
        assert fhe.oracle.fulfil_pending() == 1

        revealed = contract.get_revealed_metric(metric_id)
        assert (revealed.output, revealed.hours, revealed.tasks, revealed.revealed) == (7, 8, 5, True)
        assert contract.events[-1]['event'] == 'MetricRevealed'

    def test_second_callback_is_rejected(self, contract, fhe):
        metric_id = self.submit(contract)
        request_id = contract.request_metric_decryption(metric_id)
        cleartexts = fhe.oracle.fulfil(request_id)
        proof = fhe.oracle.sign(request_id, cleartexts)

        with pytest.raises(AlreadyRevealed):
            contract.handle_metric_decryption(request_id, cleartexts, proof)

    def test_second_pending_request_cannot_overwrite(self, contract, fhe):
        metric_id = self.submit(contract, output=3)
        first = contract.request_metric_decryption(metric_id)
        second = contract.request_metric_decryption(metric_id)
        fhe.oracle.fulfil(first)

        forged_values = [99, 99, 99]
        with pytest.raises(AlreadyRevealed):
            contract.handle_metric_decryption(second, forged_values, fhe.oracle.sign(second, forged_values))
        assert contract.get_revealed_metric(metric_id).output == 3

    def test_request_after_reveal_is_rejected(self, contract, fhe):
        metric_id = self.submit(contract)
        contract.request_metric_decryption(metric_id)
        fhe.oracle.fulfil_pending()

        with pytest.raises(AlreadyRevealed):
            contract.request_metric_decryption(metric_id)

    def test_unknown_metric(self, contract):
        with pytest.raises(UnknownMetric):
            contract.request_metric_decryption(42)
        with pytest.raises(UnknownMetric):
            contract.get_revealed_metric(42)

    def test_unknown_request(self, contract, fhe):
        with pytest.raises(UnknownRequest):
            contract.handle_metric_decryption(5, [1, 2, 3], fhe.oracle.sign(5, [1, 2, 3]))

    def test_forged_proof_is_rejected(self, contract):
        metric_id = self.submit(contract)
        request_id = contract.request_metric_decryption(metric_id)

        with pytest.raises(InvalidSignature):
            contract.handle_metric_decryption(request_id, [1, 1, 1], 'deadbeef')
        assert contract.get_revealed_metric(metric_id).revealed is False


class TestCategoryCounters:

    def submit(self, contract, tasks, work_type):
        return contract.submit_encrypted_metric(USER, enc(1), enc(8), enc(tasks), work_type=work_type)

    def test_counter_accumulates_tasks(self, contract, fhe):
        self.submit(contract, 5, 'remote')
        self.submit(contract, 4, 'remote')
        self.submit(contract, 9, 'office')

        contract.request_category_decryption(MANAGER, 'remote')
        fhe.oracle.fulfil_pending()

        assert contract.get_revealed_category_count('remote') == 9
        assert contract.get_revealed_category_count('office') is None

    def test_manager_address_is_case_insensitive(self, contract, fhe):
        self.submit(contract, 2, 'office')
        contract.request_category_decryption(MANAGER.upper().replace('0X', '0x'), 'office')
        fhe.oracle.fulfil_pending()
        assert contract.get_revealed_category_count('office') == 2

    def test_only_manager_can_request(self, contract):
        self.submit(contract, 2, 'office')
        with pytest.raises(NotManager):
            contract.request_category_decryption(USER, 'office')

    def test_unknown_category_on_submit(self, contract):
        with pytest.raises(UnknownCategory):
            self.submit(contract, 2, 'hybrid')
        assert contract.metric_count == 0

    def test_unknown_category_on_request(self, contract):
        with pytest.raises(UnknownCategory):
            contract.request_category_decryption(MANAGER, 'hybrid')

    def test_category_without_counter(self, contract):
        with pytest.raises(UnknownCategory):
            contract.request_category_decryption(MANAGER, 'remote')
        with pytest.raises(UnknownCategory):
            contract.get_encrypted_task_counter('remote')

    def test_replayed_category_callback_is_rejected(self, contract, fhe):
        self.submit(contract, 3, 'remote')
        request_id = contract.request_category_decryption(MANAGER, 'remote')
        cleartexts = fhe.oracle.fulfil(request_id)

        with pytest.raises(AlreadyRevealed):
            contract.handle_category_decryption(request_id, cleartexts, fhe.oracle.sign(request_id, cleartexts))

    def test_unknown_category_request(self, contract, fhe):
        with pytest.raises(UnknownRequest):
            contract.handle_category_decryption(1, [3], fhe.oracle.sign(1, [3]))

    def test_metric_request_id_is_not_a_category_request(self, contract, fhe):
        metric_id = self.submit(contract, 3, 'remote')
        request_id = contract.request_metric_decryption(metric_id)
        with pytest.raises(UnknownRequest):
            contract.handle_category_decryption(request_id, [3], fhe.oracle.sign(request_id, [3]))

    def test_counter_can_be_revealed_again_after_new_submissions(self, contract, fhe):
        self.submit(contract, 3, 'remote')
        contract.request_category_decryption(MANAGER, 'remote')
        fhe.oracle.fulfil_pending()
        self.submit(contract, 4, 'remote')
        contract.request_category_decryption(MANAGER, 'remote')
        fhe.oracle.fulfil_pending()

        assert contract.get_revealed_category_count('remote') == 7
