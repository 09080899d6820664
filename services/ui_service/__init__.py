"""
UI service - Streamlit pages for authentication and the marketplace.
"""

from .auth_interface import AuthInterface, get_auth_interface
from .marketplace_interface import MarketplaceInterface, get_marketplace_interface, format_price

__all__ = [
    'AuthInterface',
    'get_auth_interface',
    'MarketplaceInterface',
    'get_marketplace_interface',
    'format_price'
]
