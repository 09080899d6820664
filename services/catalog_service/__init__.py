"""
Catalog service - product listings, shopping cart and purchase history.
"""

from .models import (
    ALL_CATEGORIES,
    Category,
    ProductDraft,
    ProductUpdate,
    ProductRecord,
    CartLine,
    PurchaseRecord,
    cart_total
)
from .catalog_store import CatalogStore, get_catalog_store
from .validation import validate_product_form, parse_price

__all__ = [
    'ALL_CATEGORIES',
    'Category',
    'ProductDraft',
    'ProductUpdate',
    'ProductRecord',
    'CartLine',
    'PurchaseRecord',
    'cart_total',
    'CatalogStore',
    'get_catalog_store',
    'validate_product_form',
    'parse_price'
]
