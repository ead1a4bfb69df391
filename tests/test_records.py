"""
Tests for the frontend record manager
"""
import base64
import json
import re

import pytest

from conftest import USER
from productivity_analytics.client.contract_client import ContractCallError
from productivity_analytics.client.records import (
    ProductivityRecord,
    RecordManager,
    compute_productivity_score,
    decode_placeholder,
    describe_submission_error,
    encode_placeholder,
    generate_record_id,
    is_owner,
    round_half_up,
    summarize_records,
    validate_form,
)
from productivity_analytics.config import DEFAULT_RECORD


class MemoryContract:
    """Minimal stand-in for the contract binding"""

    def __init__(self, account=USER):
        self.slots = {}
        self.account = account
        self.writes = []
        self.fail_keys = set()

    @property
    def has_signer(self):
        return bool(self.account)

    def get_data(self, key):
        if key in self.fail_keys:
            raise ContractCallError("network down")
        return self.slots.get(key, b'')

    def set_data(self, key, data):
        self.writes.append(key)
        self.slots[key] = data


def stored(timestamp, work_type='remote', score=5):
    return json.dumps({'data': 'FHE-x', 'timestamp': timestamp, 'owner': USER,
                       'workType': work_type, 'productivityScore': score}).encode()


class TestScore:

    def test_default_form(self):
        # 5 / 8 * 10 - 2 * 0.5 = 5.25
        assert compute_productivity_score(5, 8, 2) == 5

    def test_rounds_half_up(self):
        assert compute_productivity_score(1, 4, 0) == 3

    def test_negative_half_rounds_toward_positive(self):
        assert round_half_up(-0.5) == 0
        assert round_half_up(-1.5) == -1
        assert round_half_up(-1.6) == -2

    def test_distractions_can_make_score_negative(self):
        assert compute_productivity_score(0, 8, 20) == -10

    def test_zero_hours(self):
        with pytest.raises(ValueError):
            compute_productivity_score(3, 0, 0)


class TestPlaceholder:

    def test_encoding_matches_json_layout(self):
        encoded = encode_placeholder(DEFAULT_RECORD)
        assert encoded.startswith('FHE-')
        raw = base64.b64decode(encoded[4:]).decode()
        assert raw == '{"workType":"remote","hoursWorked":8,"tasksCompleted":5,"distractions":2}'

    def test_decode(self):
        form = {'workType': 'office', 'hoursWorked': 9, 'tasksCompleted': 12, 'distractions': 0}
        assert decode_placeholder(encode_placeholder(form)) == form

    def test_decode_rejects_foreign_payload(self):
        with pytest.raises(ValueError):
            decode_placeholder('abc')


class TestFormAndIds:

    def test_record_id_format(self):
        record_id = generate_record_id(1700000000123)
        assert re.fullmatch(r'1700000000123-[0-9a-z]{7}', record_id)

    def test_validate_coerces_numbers(self):
        form = validate_form({'workType': 'remote', 'hoursWorked': '8', 'tasksCompleted': '5',
                              'distractions': 2})
        assert form['hoursWorked'] == 8 and form['tasksCompleted'] == 5

    @pytest.mark.parametrize('field,value', [
        ('hoursWorked', 0), ('hoursWorked', 17), ('tasksCompleted', 51), ('distractions', -1),
        ('distractions', 'many')
    ])
    def test_validate_bounds(self, field, value):
        form = dict(DEFAULT_RECORD, **{field: value})
        with pytest.raises(ValueError):
            validate_form(form)

    def test_validate_work_type(self):
        with pytest.raises(ValueError):
            validate_form(dict(DEFAULT_RECORD, workType='hybrid'))

    def test_is_owner_ignores_case(self):
        assert is_owner(USER.upper(), USER)
        assert not is_owner('', USER)
        assert not is_owner(USER, '0x0')


class TestLoadRecords:

    def test_empty_storage(self):
        assert RecordManager(MemoryContract()).load_records() == []

    def test_sorted_newest_first(self):
        contract = MemoryContract()
        contract.slots['record_keys'] = json.dumps(['a', 'b', 'c']).encode()
        contract.slots['record_a'] = stored(100)
        contract.slots['record_b'] = stored(300)
        contract.slots['record_c'] = stored(200)

        records = RecordManager(contract).load_records()
        assert [r.id for r in records] == ['b', 'c', 'a']

    def test_corrupt_key_index_is_empty(self):
        contract = MemoryContract()
        contract.slots['record_keys'] = b'not json'
        assert RecordManager(contract).load_records() == []

    def test_missing_and_corrupt_records_are_skipped(self):
        contract = MemoryContract()
        contract.slots['record_keys'] = json.dumps(['ok', 'missing', 'bad', 'partial']).encode()
        contract.slots['record_ok'] = stored(100)
        contract.slots['record_bad'] = b'{'
        contract.slots['record_partial'] = json.dumps({'timestamp': 1}).encode()

        records = RecordManager(contract).load_records()
        assert [r.id for r in records] == ['ok']

    def test_failing_record_read_is_skipped(self):
        contract = MemoryContract()
        contract.slots['record_keys'] = json.dumps(['a', 'b']).encode()
        contract.slots['record_a'] = stored(100)
        contract.slots['record_b'] = stored(200)
        contract.fail_keys.add('record_b')

        assert [r.id for r in RecordManager(contract).load_records()] == ['a']

    def test_failing_key_index_read(self):
        contract = MemoryContract()
        contract.fail_keys.add('record_keys')
        assert RecordManager(contract).load_records() == []


class TestSubmitRecord:

    def test_submit_then_load(self):
        contract = MemoryContract()
        manager = RecordManager(contract, clock=lambda: 1700000000.5)

        record = manager.submit_record(DEFAULT_RECORD, USER)
        loaded, = manager.load_records()

        assert loaded == record
        assert loaded.timestamp == 1700000000
        assert loaded.productivity_score == 5
        assert loaded.work_type == 'remote'
        assert decode_placeholder(loaded.encrypted_data) == DEFAULT_RECORD

    def test_record_written_before_key_index(self):
        contract = MemoryContract()
        record = RecordManager(contract).submit_record(DEFAULT_RECORD, USER)
        assert contract.writes == [f'record_{record.id}', 'record_keys']

    def test_appends_to_existing_keys(self):
        contract = MemoryContract()
        contract.slots['record_keys'] = json.dumps(['older']).encode()
        record = RecordManager(contract).submit_record(DEFAULT_RECORD, USER)
        assert json.loads(contract.slots['record_keys']) == ['older', record.id]

    def test_requires_signer(self):
        contract = MemoryContract(account=None)
        with pytest.raises(ContractCallError):
            RecordManager(contract).submit_record(DEFAULT_RECORD, USER)
        assert contract.writes == []

    def test_invalid_form_writes_nothing(self):
        contract = MemoryContract()
        with pytest.raises(ValueError):
            RecordManager(contract).submit_record(dict(DEFAULT_RECORD, hoursWorked=0), USER)
        assert contract.writes == []


class TestSummary:

    def test_empty(self):
        summary = summarize_records([])
        assert summary == {'total': 0, 'remote_count': 0, 'avg_remote_score': 0.0,
                           'office_count': 0, 'avg_office_score': 0.0}

    def test_averages(self):
        records = [
            ProductivityRecord('a', 'FHE-x', 1, USER, 'remote', 4),
            ProductivityRecord('b', 'FHE-x', 2, USER, 'remote', 7),
            ProductivityRecord('c', 'FHE-x', 3, USER, 'office', 6),
        ]
        summary = summarize_records(records)
        assert summary['total'] == 3
        assert summary['remote_count'] == 2
        assert summary['avg_remote_score'] == pytest.approx(5.5)
        assert summary['avg_office_score'] == pytest.approx(6.0)


def test_error_messages():
    assert describe_submission_error(Exception("user rejected transaction")) == "Transaction rejected by user"
    assert describe_submission_error(Exception("boom")) == "Submission failed: boom"
    assert describe_submission_error(Exception()) == "Submission failed: Unknown error"
