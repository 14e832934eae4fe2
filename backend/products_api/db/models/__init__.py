"""Database models package."""
from products_api.db.models.product import Product

__all__ = ["Product"]
