"""
Demo listings seeded into an empty catalog.
"""

from typing import List

from services.catalog_service.models import ProductRecord


SAMPLE_PRODUCTS = [
    {
        "id": "1",
        "title": "Vintage Leather Armchair",
        "description": "Beautiful vintage brown leather armchair in excellent condition. Perfect for any living room or study. Shows minimal wear and has been well maintained.",
        "price": 299.99,
        "category": "Furniture",
        "seller_id": "sample1",
        "seller_name": "Sarah M.",
        "created_at": "2024-01-15T10:00:00Z",
    },
    {
        "id": "2",
        "title": "iPhone 12 Pro 128GB",
        "description": "Unlocked iPhone 12 Pro in Space Gray. 128GB storage, battery health at 87%. Includes original box and charger. No scratches on screen.",
        "price": 549.00,
        "category": "Electronics",
        "seller_id": "sample2",
        "seller_name": "Mike Chen",
        "created_at": "2024-01-14T14:30:00Z",
    },
    {
        "id": "3",
        "title": "Designer Winter Coat",
        "description": "Authentic Marc Jacobs winter coat, size M. Worn only a few times. Perfect for cold weather. Navy blue color with fur-lined hood.",
        "price": 180.00,
        "category": "Clothing",
        "seller_id": "sample3",
        "seller_name": "Emma K.",
        "created_at": "2024-01-13T09:15:00Z",
    },
    {
        "id": "4",
        "title": "Complete Harry Potter Book Set",
        "description": "Full collection of Harry Potter books 1-7 in hardcover. All in great condition with dust jackets. Perfect for collectors or new readers.",
        "price": 75.00,
        "category": "Books",
        "seller_id": "sample4",
        "seller_name": "BookLover99",
        "created_at": "2024-01-12T16:45:00Z",
    },
    {
        "id": "5",
        "title": "Road Bike - Trek FX 2",
        "description": "Trek FX 2 hybrid bike in excellent condition. Size L frame, 21-speed, perfect for commuting or recreational riding. Recently serviced.",
        "price": 320.00,
        "category": "Sports",
        "seller_id": "sample5",
        "seller_name": "CycleGuru",
        "created_at": "2024-01-11T11:20:00Z",
    },
    {
        "id": "6",
        "title": "Organic Herb Garden Kit",
        "description": "Complete indoor herb garden kit with planters, organic soil, and seeds for basil, mint, cilantro, and parsley. Great for apartment living.",
        "price": 45.00,
        "category": "Home & Garden",
        "seller_id": "sample6",
        "seller_name": "GreenThumb",
        "created_at": "2024-01-10T08:00:00Z",
    },
    {
        "id": "7",
        "title": "Nintendo Switch Console",
        "description": "Nintendo Switch console with Joy-Con controllers. Includes dock, all cables, and 3 games: Mario Kart, Zelda, and Super Mario Odyssey.",
        "price": 275.00,
        "category": "Toys & Games",
        "seller_id": "sample7",
        "seller_name": "GamerDad",
        "created_at": "2024-01-09T19:30:00Z",
    },
    {
        "id": "8",
        "title": "2015 Toyota Camry Wheels",
        "description": "Set of 4 alloy wheels from 2015 Toyota Camry. Size 16 inch, in good condition with minimal curb rash. Perfect as replacement or upgrade.",
        "price": 400.00,
        "category": "Automotive",
        "seller_id": "sample8",
        "seller_name": "AutoParts",
        "created_at": "2024-01-08T13:15:00Z",
    },
]


def get_sample_products() -> List[ProductRecord]:
    return [ProductRecord.model_validate(product) for product in SAMPLE_PRODUCTS]
