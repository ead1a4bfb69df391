"""Contract service"""

from .server import app, create_app, build_contract

__all__ = ['app', 'create_app', 'build_contract']
