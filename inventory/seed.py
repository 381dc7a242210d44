import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from inventory.models.category import Category
from inventory.models.product import Product
from inventory.services.statistics_service import invalidate_statistics
from inventory.utils.db import store_errors

logger = logging.getLogger(__name__)

SEED_CATEGORIES = ["Electrónica", "Oficina"]

# (id, name, quantity, description, category name)
SEED_PRODUCTS = [
    ("P001", "Auriculares Sony WH-1000XM4", 7, "Auriculares con cancelación de ruido", "Electrónica"),
    ("P002", "Escritorio Ajustable", 3, "Escritorio de altura ajustable", "Oficina"),
    ("P003", "Impresora Multifuncional Canon", 12, "Impresora, escáner y copiadora", "Electrónica"),
    ("P004", "Laptop HP Pavilion", 15, "Laptop con procesador i7", "Electrónica"),
    ("P005", "Monitor LG UltraWide", 8, "Monitor ultrawide de 34 pulgadas", "Electrónica"),
    ("P006", "Silla de Oficina Ergonómica", 5, "Silla ergonómica con soporte lumbar", "Oficina"),
    ("P007", "Tablet Samsung Galaxy Tab S7", 9, "Tablet Android con pantalla de 11 pulgadas", "Electrónica"),
    ("P008", "Teclado Mecánico Logitech", 25, "Teclado mecánico con retroiluminación RGB", "Electrónica"),
]


def seed_database(db: Session) -> bool:
    """
    Insert the demo categories and products into an empty store.

    Nothing is written when any category already exists.

    Returns:
        True if the demo data was inserted, False if it was skipped
    """
    with store_errors(db, "Error al inicializar la base de datos"):
        if db.query(func.count(Category.id)).scalar() > 0:
            logger.info("Categories already exist, skipping seed data")
            return False

        categories = {name: Category(name=name) for name in SEED_CATEGORIES}
        db.add_all(categories.values())
        db.flush()

        db.add_all(
            Product(
                id=product_id,
                name=name,
                quantity=quantity,
                description=description,
                category_id=categories[category_name].id,
            )
            for product_id, name, quantity, description, category_name in SEED_PRODUCTS
        )
        db.commit()

    invalidate_statistics()
    logger.info(f"Seeded {len(SEED_CATEGORIES)} categories and {len(SEED_PRODUCTS)} products")
    return True
