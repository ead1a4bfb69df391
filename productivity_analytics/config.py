"""
Configuration file for FHE Productivity Analytics
Contains all constants, settings, and configuration parameters
"""

import hashlib
import os


def _dev_account(index):
    """Deterministic development account address"""
    return '0x' + hashlib.sha256(f'productivity-dev-account-{index}'.encode()).hexdigest()[:40]


# Application Configuration
APP_CONFIG = {
    'app_name': 'FHE Productivity Analytics',
    'version': '1.0.0',
    'page_title': 'FHE Productivity Analytics',
    'page_icon': '🔐',
    'layout': 'wide'
}

# Contract service
SERVER_CONFIG = {
    'host': os.environ.get('PRODUCTIVITY_HOST', '0.0.0.0'),
    'port': int(os.environ.get('PRODUCTIVITY_PORT', '8000')),
    'url': os.environ.get('PRODUCTIVITY_SERVER_URL', 'http://localhost:8000'),
    'timeout': 10.0,
    'health_timeout': 2.0
}

# Wallet accounts exposed by the development service
DEV_ACCOUNTS = [_dev_account(i) for i in range(5)]

# Contract settings
CONTRACT_CONFIG = {
    'manager': os.environ.get('PRODUCTIVITY_MANAGER', DEV_ACCOUNTS[0]),
    'categories': ['remote', 'office'],
    'record_keys_key': 'record_keys',
    'record_prefix': 'record_'
}

# BFV parameters for the TenSEAL backend
FHE_PARAMS = {
    'scheme': 'BFV',
    'poly_modulus_degree': 4096,
    'plain_modulus': 1032193
}

# Decryption oracle
ORACLE_CONFIG = {
    'signing_key': os.environ.get('PRODUCTIVITY_ORACLE_KEY', 'productivity-oracle-dev-key')
}

# Create-record form bounds
FORM_LIMITS = {
    'hoursWorked': (1, 16),
    'tasksCompleted': (0, 50),
    'distractions': (0, 20)
}

WORK_TYPES = ['remote', 'office']

DEFAULT_RECORD = {
    'workType': 'remote',
    'hoursWorked': 8,
    'tasksCompleted': 5,
    'distractions': 2
}

# Transaction status banner (seconds before auto-dismiss)
STATUS_BANNER = {
    'success_delay': 2.0,
    'error_delay': 3.0
}

# Logging Configuration
LOGGING_CONFIG = {
    'level': os.environ.get('PRODUCTIVITY_LOG_LEVEL', 'INFO'),
    'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    'log_file': os.environ.get('PRODUCTIVITY_LOG_FILE', 'fhe_productivity.log')
}

# UI Colors and Themes
UI_THEME = {
    'remote_color': '#4facfe',
    'office_color': '#764ba2',
    'chart_height': 360,
    'chart_template': 'plotly_white'
}

FAQ_ITEMS = [
    {
        'question': 'How does FHE protect my productivity data?',
        'answer': 'Fully Homomorphic Encryption allows your productivity metrics to be analyzed while '
                  'remaining encrypted. Your sensitive work patterns are never exposed, even during computation.'
    },
    {
        'question': 'What data is collected?',
        'answer': 'We collect encrypted metrics like hours worked, tasks completed, and distractions. '
                  'All data is anonymized and encrypted before analysis.'
    },
    {
        'question': 'How is productivity calculated?',
        'answer': 'Our FHE algorithms compute productivity scores based on encrypted inputs. The formula '
                  'considers task efficiency, focus duration, and output quality without decrypting your data.'
    },
    {
        'question': 'Who can see my individual data?',
        'answer': 'Only you can see your individual encrypted records. HR sees only aggregated, anonymized '
                  'insights for policy decisions.'
    }
]
