import streamlit as st

from productivity_analytics.client.contract_client import ContractCallError
from productivity_analytics.config import APP_CONFIG
from productivity_analytics.ui import (
    check_contract_availability,
    dashboard_page,
    encrypted_metrics_panel,
    record_form,
    render_status_banner
)
from productivity_analytics.utils.helpers import setup_logging, shorten_address
from productivity_analytics.utils.session_state import initialize_session_state


def render_sidebar():
    """Server status and wallet connection"""
    wallet = st.session_state.wallet

    st.sidebar.title("🔐 FHE Productivity")
    st.sidebar.markdown("---")

    try:
        health = wallet.contract.health()
        st.sidebar.success("✅ Contract Connected")
        with st.sidebar.expander("Contract Info"):
            st.json(health)
    except ContractCallError:
        st.sidebar.error("❌ Contract Offline")

    st.sidebar.subheader("Wallet")
    if wallet.connected:
        st.sidebar.metric("Account", shorten_address(wallet.account))
        if st.sidebar.button("Disconnect"):
            wallet.disconnect()
            st.rerun()
    else:
        accounts = wallet.available_accounts or wallet.discover_accounts()
        if accounts:
            account = st.sidebar.selectbox("Select Account", accounts, format_func=shorten_address)
            if st.sidebar.button("Connect Wallet", type="primary"):
                try:
                    wallet.connect(account)
                except ContractCallError:
                    st.sidebar.error("Failed to connect wallet")
                st.rerun()
        else:
            st.sidebar.warning("No wallet accounts available")


def main():
    st.set_page_config(
        page_title=APP_CONFIG['page_title'],
        page_icon=APP_CONFIG['page_icon'],
        layout=APP_CONFIG['layout'],
        initial_sidebar_state="expanded"
    )

    initialize_session_state()
    render_sidebar()

    col1, col2, col3 = st.columns([3, 1, 1])
    with col1:
        st.title("⚙️ FHE Productivity Analytics")
    with col2:
        if st.button("➕ Add Record", type="primary"):
            st.session_state.show_create_form = True
    with col3:
        if st.button("Check FHE Status"):
            check_contract_availability()

    render_status_banner()

    if st.session_state.show_create_form:
        record_form()

    encrypted_metrics_panel()
    dashboard_page()

    st.markdown("---")
    st.caption("Confidential analysis of hybrid work productivity using FHE technology · FHE-Powered Privacy")


if __name__ == "__main__":
    setup_logging()
    main()
