"""Contract binding and record management for the frontend"""

from .contract_client import (
    ContractClient,
    ContractCallError
)
from .records import (
    ProductivityRecord,
    RecordManager,
    compute_productivity_score,
    encode_placeholder,
    decode_placeholder,
    summarize_records,
    describe_submission_error
)
from .status import TransactionStatus
from .wallet import WalletManager

__all__ = ['ContractClient', 'ContractCallError', 'ProductivityRecord', 'RecordManager',
           'compute_productivity_score', 'encode_placeholder', 'decode_placeholder', 'summarize_records',
           'describe_submission_error', 'TransactionStatus', 'WalletManager']
