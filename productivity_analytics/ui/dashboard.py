from datetime import datetime

import plotly.graph_objects as go
import streamlit as st

from ..client.contract_client import ContractCallError
from ..client.records import RecordManager, is_owner, records_to_frame, summarize_records
from ..config import CONTRACT_CONFIG, FAQ_ITEMS, UI_THEME
from ..utils.helpers import shorten_address


def load_records():
    """Reload records from contract storage into session state"""
    wallet = st.session_state.wallet
    with st.spinner("Refreshing..."):
        st.session_state.records = RecordManager(wallet.contract).load_records()
    st.session_state.records_loaded = True


def check_contract_availability():
    status = st.session_state.transaction_status
    try:
        if st.session_state.wallet.contract.is_available():
            status.success("FHE contract is available and ready!")
        else:
            status.error("Contract is not available")
    except ContractCallError as e:
        status.error("Availability check failed: " + (e.message or "Unknown error"))


def render_status_banner():
    status = st.session_state.transaction_status
    if not status.is_visible():
        return
    if status.status == 'pending':
        st.info(f"⏳ {status.message}")
    elif status.status == 'success':
        st.success(f"✅ {status.message}")
    else:
        st.error(f"❌ {status.message}")


def render_stats_panel(summary):
    st.subheader("Productivity Insights")
    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Total Records", summary['total'])
    with col2:
        st.metric("Remote Days", summary['remote_count'])
    with col3:
        st.metric("Office Days", summary['office_count'])


def render_productivity_chart(summary):
    st.subheader("Average Productivity Score")
    fig = go.Figure(go.Bar(
        x=['Remote', 'Office'],
        y=[summary['avg_remote_score'], summary['avg_office_score']],
        marker_color=[UI_THEME['remote_color'], UI_THEME['office_color']],
        text=[f"{summary['avg_remote_score']:.1f}", f"{summary['avg_office_score']:.1f}"],
        textposition='outside'
    ))
    fig.update_layout(template=UI_THEME['chart_template'], height=UI_THEME['chart_height'],
                      yaxis_title='Score')
    st.plotly_chart(fig, use_container_width=True)
    st.caption(f"Remote: {summary['avg_remote_score']:.1f} · Office: {summary['avg_office_score']:.1f}")


def render_record_details():
    st.subheader("Data Details")
    selected = next((r for r in st.session_state.records
                     if r.id == st.session_state.selected_record_id), None)
    if selected is None:
        st.info("Select a record to view details")
        return

    st.markdown(f"""
    - **Record ID:** #{selected.id[:8]}
    - **Work Type:** {selected.work_type}
    - **Productivity Score:** {selected.productivity_score}
    - **Date:** {datetime.fromtimestamp(selected.timestamp):%Y-%m-%d}
    - **Owner:** {shorten_address(selected.owner)}
    """)
    if is_owner(st.session_state.wallet.account, selected.owner):
        st.caption("🔑 You own this record")
    if st.button("Back to List", key="back_to_list"):
        st.session_state.selected_record_id = None
        st.session_state.record_selector = None
        st.rerun()


def render_records_table():
    col1, col2 = st.columns([4, 1])
    with col1:
        st.subheader("Encrypted Productivity Records")
    with col2:
        if st.button("🔄 Refresh", key="refresh_records"):
            load_records()

    records = st.session_state.records
    if not records:
        st.info("No productivity records found")
        if st.button("Add First Record", type="primary", key="add_first_record"):
            st.session_state.show_create_form = True
            st.rerun()
        return

    df = records_to_frame(records)
    df['short_id'] = '#' + df['id'].str[:6]
    st.dataframe(
        df[['short_id', 'work_type', 'productivity_score', 'date']].rename(columns={
            'short_id': 'ID', 'work_type': 'Work Type', 'productivity_score': 'Score', 'date': 'Date'
        }),
        use_container_width=True,
        hide_index=True
    )

    options = [r.id for r in records]
    selected = st.selectbox("View record", [None] + options,
                            format_func=lambda rid: "Select a record" if rid is None else f"#{rid[:6]}",
                            key="record_selector")
    if selected != st.session_state.selected_record_id and selected is not None:
        st.session_state.selected_record_id = selected
        st.rerun()


def render_category_counters():
    """Manager view of the encrypted per-category task counters"""
    wallet = st.session_state.wallet
    contract = wallet.contract
    with st.expander("🧮 Encrypted Task Counters"):
        for category in CONTRACT_CONFIG['categories']:
            col1, col2, col3 = st.columns([2, 2, 1])
            try:
                handle = contract.get_encrypted_task_counter(category)
                revealed = contract.get_revealed_category_count(category)
            except ContractCallError:
                handle, revealed = None, None
            with col1:
                st.write(f"**{category.title()}**")
                st.caption(handle[:18] + '...' if handle else "No submissions yet")
            with col2:
                st.metric("Revealed tasks", revealed if revealed is not None else "🔒")
            with col3:
                if handle and st.button("Reveal", key=f"reveal_{category}"):
                    status = st.session_state.transaction_status
                    try:
                        wallet.signer().request_category_decryption(category)
                        status.success(f"Decryption requested for {category}")
                    except ContractCallError as e:
                        status.error("Reveal failed: " + (e.message or "Unknown error"))
                    st.rerun()


def render_faq():
    col1, col2 = st.columns([4, 1])
    with col1:
        st.subheader("FHE Productivity Analytics FAQ")
    with col2:
        label = "Hide FAQ" if st.session_state.show_faq else "Show FAQ"
        if st.button(label, key="toggle_faq"):
            st.session_state.show_faq = not st.session_state.show_faq
            st.rerun()

    if st.session_state.show_faq:
        for item in FAQ_ITEMS:
            st.markdown(f"**Q: {item['question']}**")
            st.markdown(f"A: {item['answer']}")


def dashboard_page():
    if not st.session_state.records_loaded:
        load_records()

    summary = summarize_records(st.session_state.records)

    col1, col2 = st.columns(2)
    with col1:
        st.subheader("Confidential Hybrid Work Analysis")
        st.write("Using Fully Homomorphic Encryption to analyze productivity while preserving employee privacy")
        st.caption("🔐 FHE-Powered Analytics")
    with col2:
        render_stats_panel(summary)

    st.markdown("---")
    col1, col2 = st.columns(2)
    with col1:
        render_productivity_chart(summary)
    with col2:
        render_record_details()

    st.markdown("---")
    render_records_table()
    render_category_counters()

    st.markdown("---")
    render_faq()
