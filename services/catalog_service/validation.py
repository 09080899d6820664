"""
Listing form validation.
"""

from typing import Dict, Optional, Tuple

from pydantic import ValidationError

from services.catalog_service.models import Category, ProductDraft


FIELD_MESSAGES = {
    "title": "Title is required",
    "description": "Description is required",
    "price": "Please enter a valid price",
    "category": "Please choose a category",
    "image": "Please enter a valid image URL",
}


def parse_price(price_text: str) -> Optional[float]:
    try:
        price = float(str(price_text).strip())
    except ValueError:
        return None
    # Rejects NaN as well as non-positive values
    if not price > 0 or price == float("inf"):
        return None
    return price


def validate_product_form(title: str, description: str, price_text: str,
                          category: str, image: str = "") -> Tuple[Optional[ProductDraft], Dict[str, str]]:
    """
    Turn raw form input into a ProductDraft

    Returns:
        (draft, errors) - draft is None whenever errors is non-empty
    """
    errors: Dict[str, str] = {}

    if not title.strip():
        errors["title"] = FIELD_MESSAGES["title"]
    if not description.strip():
        errors["description"] = FIELD_MESSAGES["description"]

    price = parse_price(price_text)
    if price is None:
        errors["price"] = FIELD_MESSAGES["price"]

    if category not in {c.value for c in Category}:
        errors["category"] = FIELD_MESSAGES["category"]

    if errors:
        return None, errors

    try:
        draft = ProductDraft(
            title=title,
            description=description,
            price=price,
            category=category,
            image=image or ""
        )
    except ValidationError as e:
        for error in e.errors():
            field = str(error["loc"][0]) if error["loc"] else "form"
            errors[field] = FIELD_MESSAGES.get(field, error["msg"])
        return None, errors

    return draft, {}
