"""
End-to-end marketplace flow against a SQLite profile
"""

import os
import shutil
import tempfile
from urllib.parse import parse_qs, urlparse

from infrastructure.storage import SQLiteKeyValueStore
from services.auth_service import CredentialService, UserRepository
from services.catalog_service import CatalogStore
from services.notification_service import LoggingVerificationSender


class TestMarketplaceFlow:
    """Register, list, buy, verify and reopen the profile"""

    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()
        self.db_path = os.path.join(self.temp_dir, "ecofinds.db")
        self.sender = LoggingVerificationSender(delay_seconds=0)
        self._open()

    def teardown_method(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _open(self):
        store = SQLiteKeyValueStore(db_path=self.db_path)
        self.credentials = CredentialService(
            user_repository=UserRepository(store, bcrypt_rounds=4),
            sender=self.sender
        )
        self.catalog = CatalogStore(store, seed_sample_data=False)

    def test_full_flow(self):
        assert self.credentials.register("ann@x.io", "Secret1!x", "Ann") is True
        ann = self.credentials.get_session_user()
        assert ann.username == "ann"

        lamp = self.catalog.add_product(ann, {
            "title": "Lamp",
            "description": "Brass desk lamp",
            "price": 10,
            "category": "Electronics"
        })
        assert lamp.seller_name == "ann"

        self.catalog.add_to_cart(lamp)
        self.catalog.add_to_cart(lamp)
        purchase = self.catalog.complete_purchase(ann)

        assert purchase.total == 20.0
        assert purchase.lines[0].quantity == 2
        assert self.catalog.cart == []

        link = self.sender.latest_link("ann@x.io")
        token = parse_qs(urlparse(link).query)["token"][0]
        assert self.credentials.verify_email(token) is True

        # New process, same profile
        self._open()

        session_user = self.credentials.get_session_user()
        assert session_user.email_verified is True
        assert self.catalog.get_product(lamp.id) == lamp
        assert self.catalog.get_purchases(session_user)[0].total == 20.0
        assert self.catalog.cart_count() == 0

    def test_corrupt_cart_falls_back_to_empty(self):
        store = SQLiteKeyValueStore(db_path=self.db_path)
        store.set("ecofinds_cart", '{"kind": "cart", "schema_version": 1, "data": [{"id": 3}]}')

        catalog = CatalogStore(store, seed_sample_data=False)

        assert catalog.cart == []
        assert store.get("ecofinds_cart") is None
        assert store.get("ecofinds_cart.corrupt") is not None
