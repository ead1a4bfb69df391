import streamlit as st

from ..client.contract_client import ContractClient
from ..client.status import TransactionStatus
from ..client.wallet import WalletManager
from ..config import DEFAULT_RECORD, SERVER_CONFIG


def initialize_session_state():
    """Initialize all session state variables"""
    defaults = {
        'server_url': SERVER_CONFIG['url'],
        'records': [],
        'records_loaded': False,
        'selected_record_id': None,
        'show_create_form': False,
        'show_faq': False,
        'new_record_data': dict(DEFAULT_RECORD),
        'submit_encrypted_metric': False,
        'metric_ids': [],
        'transaction_status': None,
        'wallet': None
    }
    for k, v in defaults.items():
        if k not in st.session_state:
            st.session_state[k] = v

    if st.session_state.transaction_status is None:
        st.session_state.transaction_status = TransactionStatus()
    if st.session_state.wallet is None:
        st.session_state.wallet = WalletManager(ContractClient(st.session_state.server_url))


def reset_record_form():
    st.session_state.new_record_data = dict(DEFAULT_RECORD)
    st.session_state.show_create_form = False
