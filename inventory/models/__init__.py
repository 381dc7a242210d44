from inventory.models.category import Category
from inventory.models.product import Product

__all__ = ["Category", "Product"]
