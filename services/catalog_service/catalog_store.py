"""
Catalog store - listings, the shopping cart and purchase history.

Every mutation writes the full affected collection through to the
key-value store before the in-memory copy is replaced, so a failed write
leaves both sides as they were.
"""

import uuid
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import ValidationError

from services.auth_service.models import SessionUser
from services.catalog_service.models import (
    ALL_CATEGORIES,
    CartLine,
    Category,
    ProductDraft,
    ProductRecord,
    ProductUpdate,
    PurchaseRecord,
    cart_total
)
from services.catalog_service.sample_data import get_sample_products
from infrastructure.config.settings import get_config
from infrastructure.monitoring.logging_service import (
    get_logger,
    log_execution_time,
    log_marketplace_event
)
from infrastructure.storage import (
    KeyValueStore,
    RecordCodec,
    RecordRepository,
    get_key_value_store,
    utc_now
)


class CatalogStore:
    """
    State container for products, cart lines and purchases.
    Calls that depend on who is signed in take the session user explicitly.
    """

    def __init__(self, store: KeyValueStore = None, seed_sample_data: bool = None,
                 clock: Callable[[], datetime] = utc_now):
        """
        Initialize the catalog store and load persisted collections

        Args:
            store: Key-value store (defaults to the global store)
            seed_sample_data: Seed demo listings when no catalog exists yet
                (defaults to config setting)
            clock: Source of creation timestamps
        """
        config = get_config()
        self.logger = get_logger(__name__)
        self.store = store or get_key_value_store()
        self.clock = clock
        keys = config.storage.keys

        self._products_repo = RecordRepository(
            self.store, keys.products, RecordCodec("products", List[ProductRecord]), list
        )
        self._cart_repo = RecordRepository(
            self.store, keys.cart, RecordCodec("cart", List[CartLine]), list
        )
        self._purchases_repo = RecordRepository(
            self.store, keys.purchases, RecordCodec("purchases", List[PurchaseRecord]), list
        )

        if seed_sample_data is None:
            seed_sample_data = config.catalog.seed_sample_data

        if seed_sample_data and not self._products_repo.exists():
            self._products = get_sample_products()
            self._products_repo.save(self._products)
            self.logger.info(f"Seeded {len(self._products)} sample products")
        else:
            self._products = self._products_repo.load()

        self._cart: List[CartLine] = self._cart_repo.load()
        self._purchases: List[PurchaseRecord] = self._purchases_repo.load()

        self.search_term = ""
        self.selected_category = ALL_CATEGORIES

    @property
    def products(self) -> List[ProductRecord]:
        return list(self._products)

    @property
    def cart(self) -> List[CartLine]:
        return list(self._cart)

    @staticmethod
    def categories() -> List[str]:
        return [ALL_CATEGORIES] + [category.value for category in Category]

    # Listings

    def get_product(self, product_id: str) -> Optional[ProductRecord]:
        for product in self._products:
            if product.id == product_id:
                return product
        return None

    def add_product(self, session_user: Optional[SessionUser],
                    draft: Union[ProductDraft, Dict[str, Any]]) -> Optional[ProductRecord]:
        """
        List a new product for the signed-in seller (newest first)

        Returns:
            The stored ProductRecord, or None without a session user or on invalid input
        """
        if session_user is None:
            self.logger.warning("add_product called without a signed-in user")
            return None

        if not isinstance(draft, ProductDraft):
            try:
                draft = ProductDraft.model_validate(draft)
            except ValidationError as e:
                self.logger.warning(f"Product rejected: {e.error_count()} invalid field(s)")
                return None

        product = ProductRecord(
            id=str(uuid.uuid4()),
            seller_id=session_user.id,
            seller_name=session_user.seller_label,
            created_at=self.clock(),
            **draft.model_dump()
        )

        products = [product] + self._products
        self._products_repo.save(products)
        self._products = products

        log_marketplace_event(self.logger, "product_added", product.id, seller_id=session_user.id)
        return product

    def update_product(self, session_user: Optional[SessionUser], product_id: str,
                       changes: Union[ProductUpdate, Dict[str, Any]]) -> bool:
        """
        Merge listing fields into a product owned by the session user

        Returns:
            True if updated; False for unknown products, other sellers' products
            or invalid fields
        """
        product = self._owned_product(session_user, product_id, "update")
        if product is None:
            return False

        if not isinstance(changes, ProductUpdate):
            try:
                changes = ProductUpdate.model_validate(changes)
            except ValidationError as e:
                self.logger.warning(f"Product update rejected: {e.error_count()} invalid field(s)")
                return False

        updated = product.model_copy(update=changes.changes())
        products = [updated if item.id == product_id else item for item in self._products]
        self._products_repo.save(products)
        self._products = products

        log_marketplace_event(self.logger, "product_updated", product_id,
                              fields=sorted(changes.changes()))
        return True

    def delete_product(self, session_user: Optional[SessionUser], product_id: str) -> bool:
        """Remove a product owned by the session user"""
        if self._owned_product(session_user, product_id, "delete") is None:
            return False

        products = [item for item in self._products if item.id != product_id]
        self._products_repo.save(products)
        self._products = products

        log_marketplace_event(self.logger, "product_deleted", product_id)
        return True

    def _owned_product(self, session_user: Optional[SessionUser], product_id: str,
                       action: str) -> Optional[ProductRecord]:
        if session_user is None:
            self.logger.warning(f"{action} of {product_id} without a signed-in user")
            return None

        product = self.get_product(product_id)
        if product is None:
            self.logger.warning(f"{action} of unknown product: {product_id}")
            return None

        if product.seller_id != session_user.id:
            self.logger.warning(f"{action} of {product_id} refused: not the seller")
            return None

        return product

    def get_user_products(self, session_user: Optional[SessionUser]) -> List[ProductRecord]:
        if session_user is None:
            return []
        return [product for product in self._products if product.seller_id == session_user.id]

    def set_search_term(self, term: str) -> None:
        self.search_term = term

    def set_selected_category(self, category: str) -> None:
        if category not in self.categories():
            raise ValueError(f"Unknown category: {category}")
        self.selected_category = category

    def get_filtered_products(self, search_term: Optional[str] = None,
                              category: Optional[str] = None) -> List[ProductRecord]:
        """
        Products matching the category (exact, unless "All") and the search
        term (case-insensitive, title or description). Arguments default to
        the store's current filter state.
        """
        if search_term is None:
            search_term = self.search_term
        if category is None:
            category = self.selected_category

        filtered = self._products

        if category != ALL_CATEGORIES:
            filtered = [product for product in filtered if product.category == category]

        if search_term:
            filtered = [product for product in filtered if product.matches(search_term)]

        return list(filtered)

    # Cart

    def add_to_cart(self, product: ProductRecord) -> CartLine:
        """Add one unit; an existing line for the product is incremented instead"""
        cart = list(self._cart)
        for index, line in enumerate(cart):
            if line.id == product.id:
                cart[index] = line.model_copy(update={"quantity": line.quantity + 1})
                break
        else:
            cart.append(CartLine.from_product(product))

        self._cart_repo.save(cart)
        self._cart = cart
        return next(line for line in cart if line.id == product.id)

    def remove_from_cart(self, product_id: str) -> bool:
        """Drop the whole line for a product"""
        cart = [line for line in self._cart if line.id != product_id]
        if len(cart) == len(self._cart):
            return False

        self._cart_repo.save(cart)
        self._cart = cart
        return True

    def clear_cart(self) -> None:
        self._cart_repo.save([])
        self._cart = []

    def cart_count(self) -> int:
        return sum(line.quantity for line in self._cart)

    def cart_total(self) -> float:
        return cart_total(self._cart)

    # Purchases

    def complete_purchase(self, session_user: Optional[SessionUser]) -> Optional[PurchaseRecord]:
        """
        Turn the cart into a purchase and empty it

        Returns:
            The new PurchaseRecord, or None when there is no session user or the cart is empty
        """
        if session_user is None or not self._cart:
            return None

        purchase = PurchaseRecord(
            id=str(uuid.uuid4()),
            buyer_id=session_user.id,
            lines=list(self._cart),
            total=cart_total(self._cart),
            created_at=self.clock()
        )
        purchases = [purchase] + self._purchases

        # Purchase and emptied cart land in a single write
        purchases_key, purchases_value = self._purchases_repo.encode_item(purchases)
        cart_key, cart_value = self._cart_repo.encode_item([])
        with log_execution_time(self.logger, "complete_purchase", buyer_id=session_user.id):
            self.store.set_many({purchases_key: purchases_value, cart_key: cart_value})

        self._purchases = purchases
        self._cart = []

        log_marketplace_event(self.logger, "purchase_completed", purchase.id,
                              buyer_id=session_user.id, total=purchase.total)
        return purchase

    def get_purchases(self, session_user: Optional[SessionUser]) -> List[PurchaseRecord]:
        """Purchases made by the session user, newest first"""
        if session_user is None:
            return []
        return [purchase for purchase in self._purchases if purchase.buyer_id == session_user.id]


# Global catalog store instance
_catalog_store: Optional[CatalogStore] = None


def get_catalog_store() -> CatalogStore:
    """Get the global catalog store instance"""
    global _catalog_store
    if _catalog_store is None:
        _catalog_store = CatalogStore()
    return _catalog_store
