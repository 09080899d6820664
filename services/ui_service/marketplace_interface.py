"""
Marketplace interface - browsing, selling, cart and purchase history pages.
"""

import streamlit as st
from typing import Optional

from infrastructure.config.settings import get_config
from infrastructure.monitoring.logging_service import get_logger, log_user_interaction
from services.auth_service import SessionUser
from services.catalog_service import (
    CatalogStore,
    ProductRecord,
    get_catalog_store,
    validate_product_form
)


PLACEHOLDER_IMAGE = "https://placehold.co/400x300?text=EcoFinds"


def format_price(amount: float, currency: str = "USD") -> str:
    symbol = "$" if currency == "USD" else f"{currency} "
    return f"{symbol}{amount:,.2f}"


class MarketplaceInterface:
    """
    Streamlit pages in front of the catalog store
    """

    def __init__(self, catalog_store: CatalogStore = None):
        self.logger = get_logger(__name__)
        self.config = get_config()
        self.catalog = catalog_store or get_catalog_store()

    def _price(self, amount: float) -> str:
        return format_price(amount, self.config.catalog.currency)

    def render_browse_page(self, session_user: Optional[SessionUser]):
        st.header("🛍️ Browse")

        col1, col2 = st.columns([3, 1])
        with col1:
            search_term = st.text_input("🔍 Search", value=self.catalog.search_term,
                                        placeholder="Search by title or description")
        with col2:
            categories = self.catalog.categories()
            category = st.selectbox("Category", categories,
                                    index=categories.index(self.catalog.selected_category))

        self.catalog.set_search_term(search_term)
        self.catalog.set_selected_category(category)

        products = self.catalog.get_filtered_products()
        st.caption(f"{len(products)} listing{'s' if len(products) != 1 else ''}")

        for product in products:
            self._render_product_card(product, session_user)

    def _render_product_card(self, product: ProductRecord, session_user: Optional[SessionUser]):
        with st.container(border=True):
            col1, col2 = st.columns([1, 3])
            with col1:
                st.image(product.image or PLACEHOLDER_IMAGE, use_container_width=True)
            with col2:
                st.subheader(product.title)
                st.write(f"**{self._price(product.price)}** · {product.category.value} · sold by {product.seller_name}")
                with st.expander("Details"):
                    st.write(product.description)
                    st.caption(f"Listed {product.created_at:%d %b %Y}")

                own_listing = session_user is not None and product.seller_id == session_user.id
                if own_listing:
                    st.caption("Your listing")
                elif st.button("🛒 Add to cart", key=f"add_{product.id}"):
                    self.catalog.add_to_cart(product)
                    log_user_interaction(self.logger, "add_to_cart", product_id=product.id)
                    st.toast(f"Added {product.title} to your cart")

    def render_sell_page(self, session_user: SessionUser):
        st.header("➕ List an Item")
        categories = self.catalog.categories()[1:]

        with st.form("add_product_form", clear_on_submit=True):
            title = st.text_input("Title *")
            description = st.text_area("Description *")
            price = st.text_input("Price (USD) *", placeholder="0.00")
            category = st.selectbox("Category *", categories)
            image = st.text_input("Image URL", placeholder="https://...")
            submitted = st.form_submit_button("List Item", type="primary")

        if not submitted:
            return

        draft, errors = validate_product_form(title, description, price, category, image)
        if errors:
            for message in errors.values():
                st.error(message)
            return

        product = self.catalog.add_product(session_user, draft)
        if product:
            st.success(f"✅ {product.title} is now listed")

    def render_my_listings_page(self, session_user: SessionUser):
        st.header("📦 My Listings")
        products = self.catalog.get_user_products(session_user)

        if not products:
            st.info("You have not listed anything yet.")
            return

        editing_id = st.session_state.get("editing_product_id")

        for product in products:
            with st.container(border=True):
                st.subheader(product.title)
                st.write(f"{self._price(product.price)} · {product.category.value}")

                if editing_id == product.id:
                    self._render_edit_form(session_user, product)
                    continue

                col1, col2 = st.columns(2)
                with col1:
                    if st.button("✏️ Edit", key=f"edit_{product.id}"):
                        st.session_state.editing_product_id = product.id
                        st.rerun()
                with col2:
                    if st.button("🗑️ Delete", key=f"delete_{product.id}"):
                        if self.catalog.delete_product(session_user, product.id):
                            st.toast(f"Deleted {product.title}")
                            st.rerun()
                        else:
                            st.error("This listing could not be deleted")

    def _render_edit_form(self, session_user: SessionUser, product: ProductRecord):
        categories = self.catalog.categories()[1:]

        with st.form(f"edit_form_{product.id}"):
            title = st.text_input("Title *", value=product.title)
            description = st.text_area("Description *", value=product.description)
            price = st.text_input("Price (USD) *", value=f"{product.price:.2f}")
            category = st.selectbox("Category *", categories,
                                    index=categories.index(product.category.value))
            image = st.text_input("Image URL", value=product.image)
            col1, col2 = st.columns(2)
            with col1:
                saved = st.form_submit_button("💾 Save", type="primary")
            with col2:
                cancelled = st.form_submit_button("Cancel")

        if cancelled:
            st.session_state.editing_product_id = None
            st.rerun()

        if not saved:
            return

        draft, errors = validate_product_form(title, description, price, category, image)
        if errors:
            for message in errors.values():
                st.error(message)
            return

        if self.catalog.update_product(session_user, product.id, draft.model_dump()):
            st.session_state.editing_product_id = None
            st.rerun()
        else:
            st.error("Product not found")

    def render_cart_page(self, session_user: SessionUser):
        st.header("🛒 Cart")
        cart = self.catalog.cart

        if not cart:
            st.info("Your cart is empty.")
            return

        for line in cart:
            col1, col2, col3 = st.columns([3, 1, 1])
            with col1:
                st.write(f"**{line.title}** × {line.quantity}")
            with col2:
                st.write(self._price(line.line_total))
            with col3:
                if st.button("Remove", key=f"remove_{line.id}"):
                    self.catalog.remove_from_cart(line.id)
                    st.rerun()

        st.divider()
        st.subheader(f"Total: {self._price(self.catalog.cart_total())}")

        col1, col2 = st.columns(2)
        with col1:
            if st.button("✅ Checkout", type="primary", use_container_width=True):
                purchase = self.catalog.complete_purchase(session_user)
                if purchase:
                    log_user_interaction(self.logger, "checkout", purchase_id=purchase.id)
                    st.success(f"Purchase complete! You paid {self._price(purchase.total)}.")
                    st.balloons()
        with col2:
            if st.button("Clear cart", use_container_width=True):
                self.catalog.clear_cart()
                st.rerun()

    def render_purchases_page(self, session_user: SessionUser):
        st.header("🧾 Purchases")
        purchases = self.catalog.get_purchases(session_user)

        if not purchases:
            st.info("No purchases yet.")
            return

        for purchase in purchases:
            label = f"{purchase.created_at:%d %b %Y %H:%M} · {purchase.item_count} item(s) · {self._price(purchase.total)}"
            with st.expander(label):
                for line in purchase.lines:
                    st.write(f"{line.title} × {line.quantity}: {self._price(line.line_total)} (from {line.seller_name})")


# Global marketplace interface instance
_marketplace_interface: Optional[MarketplaceInterface] = None


def get_marketplace_interface() -> MarketplaceInterface:
    """Get the global marketplace interface instance"""
    global _marketplace_interface
    if _marketplace_interface is None:
        _marketplace_interface = MarketplaceInterface()
    return _marketplace_interface
