"""
Record Manager Module
Loads, scores, encodes and submits productivity records kept in contract storage
"""

import base64
import json
import logging
import math
import random
import string
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import pandas as pd

from ..config import CONTRACT_CONFIG, FORM_LIMITS, WORK_TYPES
from .contract_client import ContractCallError, ContractClient

logger = logging.getLogger(__name__)

PLACEHOLDER_PREFIX = 'FHE-'
_BASE36 = string.digits + string.ascii_lowercase


@dataclass
class ProductivityRecord:
    id: str
    encrypted_data: str
    timestamp: int
    owner: str
    work_type: str
    productivity_score: int

    @classmethod
    def from_stored(cls, record_id: str, stored: Dict[str, Any]) -> 'ProductivityRecord':
        return cls(
            id=record_id,
            encrypted_data=stored['data'],
            timestamp=int(stored['timestamp']),
            owner=stored['owner'],
            work_type=stored['workType'],
            productivity_score=int(stored['productivityScore'])
        )

    def to_stored(self) -> Dict[str, Any]:
        return {
            'data': self.encrypted_data,
            'timestamp': self.timestamp,
            'owner': self.owner,
            'workType': self.work_type,
            'productivityScore': self.productivity_score
        }


def round_half_up(value: float) -> int:
    """Math.round semantics: halves go toward +infinity"""
    return int(math.floor(value + 0.5))


def compute_productivity_score(tasks_completed, hours_worked, distractions) -> int:
    """
    Simplified productivity score

    Args:
        tasks_completed: tasks finished during the day
        hours_worked: hours worked, must be positive
        distractions: number of distractions

    Returns:
        int: round(tasks / hours * 10 - distractions * 0.5)
    """
    if hours_worked <= 0:
        raise ValueError("Hours worked must be positive")
    return round_half_up(tasks_completed / hours_worked * 10 - distractions * 0.5)


def validate_form(form: Dict[str, Any]) -> Dict[str, Any]:
    """Coerce and bound-check create-record form input"""
    if form.get('workType') not in WORK_TYPES:
        raise ValueError(f"Work type must be one of {', '.join(WORK_TYPES)}")

    cleaned = {'workType': form['workType']}
    for field_name, (low, high) in FORM_LIMITS.items():
        try:
            value = int(form[field_name])
        except (KeyError, TypeError, ValueError):
            raise ValueError(f"{field_name} must be a number")
        if not low <= value <= high:
            raise ValueError(f"{field_name} must be between {low} and {high}")
        cleaned[field_name] = value
    return cleaned


def encode_placeholder(form: Dict[str, Any]) -> str:
    """Stand-in for client encryption: 'FHE-' + base64 of the form JSON"""
    payload = json.dumps({
        'workType': form['workType'],
        'hoursWorked': form['hoursWorked'],
        'tasksCompleted': form['tasksCompleted'],
        'distractions': form['distractions']
    }, separators=(',', ':'))
    return PLACEHOLDER_PREFIX + base64.b64encode(payload.encode('utf-8')).decode('ascii')


def decode_placeholder(encrypted_data: str) -> Dict[str, Any]:
    if not encrypted_data.startswith(PLACEHOLDER_PREFIX):
        raise ValueError("Not an FHE placeholder payload")
    return json.loads(base64.b64decode(encrypted_data[len(PLACEHOLDER_PREFIX):]))


def generate_record_id(now_ms: Optional[int] = None) -> str:
    """'<epoch millis>-<7 base36 chars>'"""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    suffix = ''.join(random.choice(_BASE36) for _ in range(7))
    return f"{now_ms}-{suffix}"


def is_owner(account: str, address: str) -> bool:
    return bool(account) and account.lower() == (address or '').lower()


def records_to_frame(records: List[ProductivityRecord]) -> pd.DataFrame:
    columns = ['id', 'work_type', 'productivity_score', 'timestamp', 'owner']
    if not records:
        return pd.DataFrame(columns=columns)
    df = pd.DataFrame([r.__dict__ for r in records])[columns]
    df['date'] = pd.to_datetime(df['timestamp'], unit='s').dt.date
    return df


def summarize_records(records: List[ProductivityRecord]) -> Dict[str, Any]:
    """Counts and average score per work type (0 when a group is empty)"""
    df = records_to_frame(records)
    summary = {'total': len(df)}
    for work_type in WORK_TYPES:
        group = df[df['work_type'] == work_type]
        summary[f'{work_type}_count'] = len(group)
        summary[f'avg_{work_type}_score'] = float(group['productivity_score'].mean()) if len(group) else 0.0
    return summary


class RecordManager:
    """Keeps productivity records as JSON blobs in contract storage"""

    def __init__(self, contract: ContractClient, clock=time.time):
        self.contract = contract
        self._clock = clock
        self.keys_key = CONTRACT_CONFIG['record_keys_key']
        self.prefix = CONTRACT_CONFIG['record_prefix']

    def _load_keys(self) -> List[str]:
        keys_bytes = self.contract.get_data(self.keys_key)
        if not keys_bytes:
            return []
        try:
            keys = json.loads(keys_bytes.decode('utf-8'))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error(f"Error parsing record keys: {e}")
            return []
        if not isinstance(keys, list):
            logger.error("Error parsing record keys: not a list")
            return []
        return [str(k) for k in keys]

    def load_records(self) -> List[ProductivityRecord]:
        """All readable records, newest first"""
        try:
            keys = self._load_keys()
        except ContractCallError as e:
            logger.error(f"Error loading records: {e}")
            return []

        records = []
        for key in keys:
            try:
                record_bytes = self.contract.get_data(f"{self.prefix}{key}")
            except ContractCallError as e:
                logger.error(f"Error loading record {key}: {e}")
                continue
            if not record_bytes:
                continue
            try:
                stored = json.loads(record_bytes.decode('utf-8'))
                records.append(ProductivityRecord.from_stored(key, stored))
            except (UnicodeDecodeError, ValueError, KeyError, TypeError) as e:
                logger.error(f"Error parsing record data for {key}: {e}")

        records.sort(key=lambda r: r.timestamp, reverse=True)
        return records

    def submit_record(self, form: Dict[str, Any], owner: str) -> ProductivityRecord:
        """
        Write a record then append its id to the key index

        The two writes are separate transactions: a failure in between leaves
        the record stored but unlisted.
        """
        if not self.contract.has_signer:
            raise ContractCallError("Failed to get contract with signer")

        form = validate_form(form)
        now = self._clock()
        record = ProductivityRecord(
            id=generate_record_id(int(now * 1000)),
            encrypted_data=encode_placeholder(form),
            timestamp=int(now),
            owner=owner,
            work_type=form['workType'],
            productivity_score=compute_productivity_score(
                form['tasksCompleted'], form['hoursWorked'], form['distractions'])
        )

        self.contract.set_data(f"{self.prefix}{record.id}",
                               json.dumps(record.to_stored()).encode('utf-8'))

        keys = self._load_keys()
        keys.append(record.id)
        self.contract.set_data(self.keys_key, json.dumps(keys).encode('utf-8'))

        logger.info(f"✅ Record {record.id} submitted (score {record.productivity_score})")
        return record


def describe_submission_error(error: Exception) -> str:
    message = str(error)
    if 'user rejected transaction' in message:
        return "Transaction rejected by user"
    return "Submission failed: " + (message or "Unknown error")
