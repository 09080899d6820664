"""
Catalog data models: listings, cart lines and purchases.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator

from infrastructure.storage.record_codec import Timestamp, utc_now


class Category(str, Enum):
    """Fixed set of listing categories"""
    ELECTRONICS = "Electronics"
    FURNITURE = "Furniture"
    CLOTHING = "Clothing"
    BOOKS = "Books"
    SPORTS = "Sports"
    HOME_AND_GARDEN = "Home & Garden"
    TOYS_AND_GAMES = "Toys & Games"
    AUTOMOTIVE = "Automotive"
    OTHERS = "Others"


ALL_CATEGORIES = "All"


def _required_text(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("This field is required")
    return value


class ProductDraft(BaseModel):
    """Seller-supplied listing fields"""
    model_config = ConfigDict(extra="forbid")

    title: str
    description: str
    price: float = Field(gt=0)
    category: Category
    image: str = ""

    @field_validator("title", "description")
    @classmethod
    def _check_required(cls, value: str) -> str:
        return _required_text(value)

    @field_validator("image")
    @classmethod
    def _strip_image(cls, value: str) -> str:
        return value.strip()


class ProductUpdate(BaseModel):
    """Partial listing edit; identity and seller fields cannot change"""
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, gt=0)
    category: Optional[Category] = None
    image: Optional[str] = None

    @field_validator("title", "description")
    @classmethod
    def _check_required(cls, value: Optional[str]) -> Optional[str]:
        return _required_text(value) if value is not None else value

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class ProductRecord(BaseModel):
    """A listed item"""
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str
    price: float = Field(gt=0)
    category: Category
    image: str = ""
    seller_id: str
    seller_name: str
    created_at: Timestamp = Field(default_factory=utc_now)

    def matches(self, search_term: str) -> bool:
        """Case-insensitive substring match over title and description"""
        term = search_term.lower()
        return term in self.title.lower() or term in self.description.lower()


class CartLine(ProductRecord):
    """A product in the cart with its quantity"""
    quantity: PositiveInt = 1

    @property
    def line_total(self) -> float:
        return self.price * self.quantity

    @classmethod
    def from_product(cls, product: ProductRecord, quantity: int = 1) -> 'CartLine':
        return cls(**product.model_dump(), quantity=quantity)


class PurchaseRecord(BaseModel):
    """A completed checkout; never modified after creation"""
    model_config = ConfigDict(frozen=True)

    id: str
    buyer_id: str
    lines: List[CartLine]
    total: float
    created_at: Timestamp = Field(default_factory=utc_now)

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)


def cart_total(lines: List[CartLine]) -> float:
    """Sum of price x quantity, rounded to cents"""
    return round(sum(line.line_total for line in lines), 2)
