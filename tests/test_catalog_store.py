"""
Tests for listings, cart and purchases
"""

import pytest

from infrastructure.storage import InMemoryKeyValueStore
from services.auth_service import SessionUser
from services.catalog_service import (
    ALL_CATEGORIES,
    CatalogStore,
    Category,
    ProductDraft,
    validate_product_form,
    parse_price
)


ANN = SessionUser(id="u1", email="ann@x.io", display_name="Ann", username="ann")
BOB = SessionUser(id="u2", email="bob@x.io", display_name="Bob", username="bob")


def lamp_draft(**overrides):
    fields = {
        "title": "Lamp",
        "description": "Brass desk lamp",
        "price": 10.0,
        "category": "Electronics",
    }
    fields.update(overrides)
    return fields


class TestCatalogSeeding:
    """Test first-run sample data"""

    def test_seeds_empty_profile(self):
        store = InMemoryKeyValueStore()
        catalog = CatalogStore(store, seed_sample_data=True)

        assert len(catalog.products) == 8
        assert store.get("ecofinds_products") is not None

    def test_does_not_reseed_existing_catalog(self):
        store = InMemoryKeyValueStore()
        catalog = CatalogStore(store, seed_sample_data=True)
        for product in catalog.products:
            catalog.delete_product(
                SessionUser(id=product.seller_id, email="s@x.io", display_name="Seller",
                            username="seller"),
                product.id
            )

        reopened = CatalogStore(store, seed_sample_data=True)
        assert reopened.products == []

    def test_seeding_disabled(self):
        assert CatalogStore(InMemoryKeyValueStore(), seed_sample_data=False).products == []


class TestListings:
    """Test product listing operations"""

    def setup_method(self):
        self.store = InMemoryKeyValueStore()
        self.catalog = CatalogStore(self.store, seed_sample_data=False)

    def test_add_product(self):
        product = self.catalog.add_product(ANN, lamp_draft())

        assert product.seller_id == "u1"
        assert product.seller_name == "ann"
        assert product.category == Category.ELECTRONICS
        assert self.catalog.get_product(product.id) == product

    def test_newest_first(self):
        first = self.catalog.add_product(ANN, lamp_draft(title="First"))
        second = self.catalog.add_product(ANN, lamp_draft(title="Second"))

        assert [p.id for p in self.catalog.products] == [second.id, first.id]

    def test_add_product_requires_session_user(self):
        assert self.catalog.add_product(None, lamp_draft()) is None
        assert self.catalog.products == []

    def test_add_product_rejects_invalid_draft(self):
        assert self.catalog.add_product(ANN, lamp_draft(price=0)) is None
        assert self.catalog.add_product(ANN, lamp_draft(title="  ")) is None
        assert self.catalog.add_product(ANN, lamp_draft(category="Weapons")) is None
        assert self.catalog.add_product(ANN, lamp_draft(seller_id="u2")) is None

    def test_add_product_accepts_draft_model(self):
        product = self.catalog.add_product(ANN, ProductDraft(**lamp_draft()))
        assert product.title == "Lamp"

    def test_products_persist(self):
        product = self.catalog.add_product(ANN, lamp_draft())

        reopened = CatalogStore(self.store, seed_sample_data=False)
        assert reopened.get_product(product.id) == product

    def test_update_product(self):
        product = self.catalog.add_product(ANN, lamp_draft())

        assert self.catalog.update_product(ANN, product.id, {"price": 12.5}) is True

        updated = self.catalog.get_product(product.id)
        assert updated.price == 12.5
        assert updated.title == "Lamp"
        assert updated.seller_id == "u1"

    def test_update_product_rejects_identity_fields(self):
        product = self.catalog.add_product(ANN, lamp_draft())

        assert self.catalog.update_product(ANN, product.id, {"seller_id": "u2"}) is False
        assert self.catalog.update_product(ANN, product.id, {"price": -1}) is False
        assert self.catalog.get_product(product.id) == product

    def test_only_seller_can_update_or_delete(self):
        product = self.catalog.add_product(ANN, lamp_draft())

        assert self.catalog.update_product(BOB, product.id, {"price": 1.0}) is False
        assert self.catalog.delete_product(BOB, product.id) is False
        assert self.catalog.delete_product(None, product.id) is False
        assert self.catalog.get_product(product.id) == product

    def test_delete_product(self):
        product = self.catalog.add_product(ANN, lamp_draft())

        assert self.catalog.delete_product(ANN, product.id) is True
        assert self.catalog.get_product(product.id) is None
        assert self.catalog.delete_product(ANN, product.id) is False

    def test_update_unknown_product(self):
        assert self.catalog.update_product(ANN, "missing", {"price": 1.0}) is False

    def test_get_user_products(self):
        mine = self.catalog.add_product(ANN, lamp_draft())
        self.catalog.add_product(BOB, lamp_draft(title="Chair", category="Furniture"))

        assert self.catalog.get_user_products(ANN) == [mine]
        assert self.catalog.get_user_products(None) == []


class TestFiltering:
    """Test search and category filtering"""

    def setup_method(self):
        self.catalog = CatalogStore(InMemoryKeyValueStore(), seed_sample_data=False)
        self.catalog.add_product(ANN, lamp_draft(title="iPhone 12", description="Unlocked phone"))
        self.catalog.add_product(ANN, lamp_draft(title="Headphones", description="Wireless"))
        self.catalog.add_product(ANN, lamp_draft(title="Phone stand", description="Oak",
                                                  category="Furniture"))
        self.catalog.add_product(ANN, lamp_draft(title="Toaster", description="Two slots"))

    def test_category_and_search(self):
        titles = {p.title for p in self.catalog.get_filtered_products("phone", "Electronics")}

        assert titles == {"iPhone 12", "Headphones"}

    def test_all_categories(self):
        titles = {p.title for p in self.catalog.get_filtered_products("PHONE", ALL_CATEGORIES)}

        assert titles == {"iPhone 12", "Headphones", "Phone stand"}

    def test_search_matches_description(self):
        titles = [p.title for p in self.catalog.get_filtered_products("slots", ALL_CATEGORIES)]

        assert titles == ["Toaster"]

    def test_empty_search_returns_category(self):
        assert len(self.catalog.get_filtered_products("", "Electronics")) == 3

    def test_filter_state_defaults(self):
        self.catalog.set_search_term("stand")
        self.catalog.set_selected_category("Furniture")

        assert [p.title for p in self.catalog.get_filtered_products()] == ["Phone stand"]

    def test_unknown_category(self):
        with pytest.raises(ValueError):
            self.catalog.set_selected_category("Weapons")

    def test_categories(self):
        categories = CatalogStore.categories()

        assert categories[0] == ALL_CATEGORIES
        assert "Home & Garden" in categories
        assert len(categories) == 10


class TestCartAndPurchases:
    """Test cart quantities and checkout"""

    def setup_method(self):
        self.store = InMemoryKeyValueStore()
        self.catalog = CatalogStore(self.store, seed_sample_data=False)
        self.lamp = self.catalog.add_product(BOB, lamp_draft())
        self.chair = self.catalog.add_product(BOB, lamp_draft(title="Chair", price=2.5,
                                                             category="Furniture"))

    def test_add_same_product_twice(self):
        self.catalog.add_to_cart(self.lamp)
        line = self.catalog.add_to_cart(self.lamp)

        assert line.quantity == 2
        assert len(self.catalog.cart) == 1
        assert self.catalog.cart_count() == 2
        assert self.catalog.cart_total() == 20.0

    def test_cart_persists(self):
        self.catalog.add_to_cart(self.lamp)

        reopened = CatalogStore(self.store, seed_sample_data=False)
        assert reopened.cart_count() == 1

    def test_remove_from_cart_drops_whole_line(self):
        self.catalog.add_to_cart(self.lamp)
        self.catalog.add_to_cart(self.lamp)

        assert self.catalog.remove_from_cart(self.lamp.id) is True
        assert self.catalog.cart == []
        assert self.catalog.remove_from_cart(self.lamp.id) is False

    def test_clear_cart(self):
        self.catalog.add_to_cart(self.lamp)
        self.catalog.clear_cart()

        assert self.catalog.cart == []

    def test_complete_purchase(self):
        self.catalog.add_to_cart(self.lamp)
        self.catalog.add_to_cart(self.lamp)
        self.catalog.add_to_cart(self.chair)

        purchase = self.catalog.complete_purchase(ANN)

        assert purchase.buyer_id == "u1"
        assert purchase.total == 22.5
        assert purchase.item_count == 3
        assert self.catalog.cart == []
        assert self.catalog.get_purchases(ANN) == [purchase]

        reopened = CatalogStore(self.store, seed_sample_data=False)
        assert reopened.cart == []
        assert reopened.get_purchases(ANN) == [purchase]

    def test_purchase_with_empty_cart_is_noop(self):
        assert self.catalog.complete_purchase(ANN) is None
        assert self.catalog.get_purchases(ANN) == []

    def test_purchase_requires_session_user(self):
        self.catalog.add_to_cart(self.lamp)

        assert self.catalog.complete_purchase(None) is None
        assert self.catalog.cart_count() == 1

    def test_purchases_are_per_buyer_newest_first(self):
        self.catalog.add_to_cart(self.lamp)
        first = self.catalog.complete_purchase(ANN)
        self.catalog.add_to_cart(self.chair)
        second = self.catalog.complete_purchase(ANN)
        self.catalog.add_to_cart(self.chair)
        self.catalog.complete_purchase(BOB)

        assert self.catalog.get_purchases(ANN) == [second, first]
        assert self.catalog.get_purchases(None) == []

    def test_purchase_keeps_line_snapshot(self):
        self.catalog.add_to_cart(self.lamp)
        purchase = self.catalog.complete_purchase(ANN)

        self.catalog.update_product(BOB, self.lamp.id, {"price": 99.0})

        assert purchase.lines[0].price == 10.0
        assert self.catalog.get_purchases(ANN)[0].total == 10.0


class TestProductFormValidation:

    def test_valid_form(self):
        draft, errors = validate_product_form("Lamp", "Desk lamp", "10.50", "Electronics")

        assert errors == {}
        assert draft.price == 10.5

    def test_invalid_form(self):
        draft, errors = validate_product_form(" ", "", "abc", "Weapons")

        assert draft is None
        assert set(errors) == {"title", "description", "price", "category"}

    @pytest.mark.parametrize("text", ["0", "-3", "nan", "inf", "", "ten"])
    def test_parse_price_rejects(self, text):
        assert parse_price(text) is None
