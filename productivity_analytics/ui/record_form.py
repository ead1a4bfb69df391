import logging

import streamlit as st

from ..client.metrics import EncryptedMetricSubmitter
from ..client.records import RecordManager, compute_productivity_score, describe_submission_error
from ..config import FORM_LIMITS, WORK_TYPES
from ..utils.session_state import reset_record_form

logger = logging.getLogger(__name__)


def submit_record(form):
    """Write the record (and optionally the encrypted metric) through the signer binding"""
    wallet = st.session_state.wallet
    status = st.session_state.transaction_status

    if not wallet.connected:
        st.warning("Please connect wallet first")
        return False

    status.pending("Encrypting productivity data with FHE...")
    try:
        signer = wallet.signer()
        record = RecordManager(signer).submit_record(form, wallet.account)

        if st.session_state.submit_encrypted_metric:
            metric_id = EncryptedMetricSubmitter(signer).submit_form(form, record.productivity_score)
            st.session_state.metric_ids.append(metric_id)

        status.success("Encrypted productivity data submitted!")
        st.session_state.records = RecordManager(wallet.contract).load_records()
        reset_record_form()
        return True
    except Exception as e:
        logger.error(f"❌ Submission error: {e}")
        status.error(describe_submission_error(e))
        return False


def record_form():
    """Add Productivity Record form"""
    data = st.session_state.new_record_data

    with st.form("create_record_form"):
        st.subheader("Add Productivity Record")
        st.info("🔒 Your data will be encrypted with FHE")

        col1, col2 = st.columns(2)
        with col1:
            work_type = st.selectbox("Work Type *", WORK_TYPES,
                                     index=WORK_TYPES.index(data['workType']),
                                     format_func=str.title)
            low, high = FORM_LIMITS['hoursWorked']
            hours = st.number_input("Hours Worked *", min_value=low, max_value=high,
                                    value=int(data['hoursWorked']))
        with col2:
            low, high = FORM_LIMITS['tasksCompleted']
            tasks = st.number_input("Tasks Completed *", min_value=low, max_value=high,
                                    value=int(data['tasksCompleted']))
            low, high = FORM_LIMITS['distractions']
            distractions = st.number_input("Distractions *", min_value=low, max_value=high,
                                           value=int(data['distractions']))

        encrypted = st.checkbox("Also submit TenSEAL-encrypted metric",
                                value=st.session_state.submit_encrypted_metric)
        st.caption("🛡️ Your individual data remains encrypted during analysis")

        form = {'workType': work_type, 'hoursWorked': hours, 'tasksCompleted': tasks,
                'distractions': distractions}
        st.caption(f"Estimated score: {compute_productivity_score(tasks, hours, distractions)}")

        col1, col2 = st.columns(2)
        with col1:
            cancelled = st.form_submit_button("Cancel")
        with col2:
            submitted = st.form_submit_button("Submit Record", type="primary")

    if cancelled:
        st.session_state.show_create_form = False
        st.rerun()
    if submitted:
        st.session_state.new_record_data = form
        st.session_state.submit_encrypted_metric = encrypted
        with st.spinner("Encrypting with FHE..."):
            submit_record(form)
        st.rerun()


def encrypted_metrics_panel():
    """Metrics this session submitted, with reveal requests"""
    ids = st.session_state.metric_ids
    if not ids:
        return

    wallet = st.session_state.wallet
    with st.expander(f"🔐 My Encrypted Metrics ({len(ids)})"):
        submitter = EncryptedMetricSubmitter(wallet.signer() if wallet.connected else wallet.contract)
        for metric_id, revealed in submitter.reveal_states(ids).items():
            if revealed is None:
                st.write(f"**Metric #{metric_id}** · unavailable on the contract service")
                continue
            col1, col2 = st.columns([3, 1])
            with col1:
                if revealed['revealed']:
                    st.write(f"**Metric #{metric_id}** · output {revealed['output']} · "
                             f"hours {revealed['hours']} · tasks {revealed['tasks']}")
                else:
                    st.write(f"**Metric #{metric_id}** · 🔒 encrypted")
            with col2:
                if not revealed['revealed'] and wallet.connected and st.button("Decrypt", key=f"decrypt_{metric_id}"):
                    try:
                        submitter.request_reveal(metric_id)
                        st.session_state.transaction_status.success(f"Decryption requested for metric #{metric_id}")
                    except Exception as e:
                        st.session_state.transaction_status.error(describe_submission_error(e))
                    st.rerun()
