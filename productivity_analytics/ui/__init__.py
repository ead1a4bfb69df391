"""User interface modules"""

from .dashboard import dashboard_page, render_status_banner, check_contract_availability
from .record_form import record_form, encrypted_metrics_panel

__all__ = ['dashboard_page', 'render_status_banner', 'check_contract_availability', 'record_form',
           'encrypted_metrics_panel']
