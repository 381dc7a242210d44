import logging

from inventory.config import get_settings
from inventory.database import SessionLocal
from inventory.models.product import Product
from inventory.tasks.celery_app import celery_app

logger = logging.getLogger(__name__)

settings = get_settings()


@celery_app.task(bind=True, name="notify_low_stock", max_retries=3)
def notify_low_stock(self, product_id: str) -> dict:
    """
    Report a product whose stock fell to or under the low-stock threshold.

    Quantities can change between dispatch and execution, so the product is
    re-read and nothing is reported if it has been restocked (or deleted)
    meanwhile.

    Args:
        product_id: Identifier of the product to check

    Returns:
        Dictionary with the notification result
    """
    db = SessionLocal()

    try:
        product = db.query(Product).filter(Product.id == product_id).first()

        if not product:
            logger.info(f"Low stock check skipped: product {product_id} no longer exists")
            return {"status": "skipped", "product_id": product_id, "reason": "not_found"}

        if product.quantity > settings.LOW_STOCK_THRESHOLD:
            return {"status": "skipped", "product_id": product_id, "reason": "restocked"}

        logger.warning(
            f"Low stock: {product.id} '{product.name}' has {product.quantity} units "
            f"(threshold {settings.LOW_STOCK_THRESHOLD})"
        )

        return {
            "status": "notified",
            "product_id": product.id,
            "quantity": product.quantity,
            "category": product.category_name,
        }

    except Exception as e:
        logger.error(f"Error checking low stock for product {product_id}: {e}")
        raise self.retry(exc=e, countdown=30)

    finally:
        db.close()
