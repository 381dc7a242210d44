import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from inventory.config import get_settings
from inventory.models.category import Category
from inventory.models.product import Product
from inventory.schemas.statistics import StatisticsResponse
from inventory.utils.cache import cache_service
from inventory.utils.db import store_errors

logger = logging.getLogger(__name__)

settings = get_settings()

CACHE_PREFIX = "statistics"
GENERATION_KEY = "generation"


def invalidate_statistics() -> None:
    """Retire the cached statistics after any product or category write."""
    cache_service.incr(CACHE_PREFIX, GENERATION_KEY)


def _summary_key(generation) -> str:
    return f"summary:{generation or 0}"


class StatisticsService:
    """
    Aggregate inventory figures, computed from products and categories.

    Results are cached in Redis under the current write generation. Every
    write bumps the generation, so a result computed while a write was
    committing is stored under the old generation and never served again.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_statistics(self) -> StatisticsResponse:
        # Read the generation before computing so a concurrent write invalidates this result
        key = _summary_key(cache_service.get(CACHE_PREFIX, GENERATION_KEY))
        cached = cache_service.get(CACHE_PREFIX, key)
        if cached:
            return StatisticsResponse.model_validate(cached)

        statistics = self._compute()
        cache_service.set(CACHE_PREFIX, key, statistics.model_dump(by_alias=True))
        return statistics

    def _compute(self) -> StatisticsResponse:
        with store_errors(self.db, "Error al obtener estadísticas"):
            total_products = self.db.query(func.count(Product.id)).scalar()
            total_stock = self.db.query(func.coalesce(func.sum(Product.quantity), 0)).scalar()
            low_stock = (
                self.db.query(func.count(Product.id))
                .filter(Product.quantity <= settings.LOW_STOCK_THRESHOLD)
                .scalar()
            )

            product_count = func.count(Product.id).label("product_count")
            by_category = (
                self.db.query(Category.name, product_count)
                .outerjoin(Product, Product.category_id == Category.id)
                .group_by(Category.name)
                .order_by(product_count.desc(), Category.name)
                .all()
            )

        logger.debug(f"Statistics computed: {total_products} products, {total_stock} units")

        return StatisticsResponse(
            total_products=total_products,
            total_stock=int(total_stock),
            low_stock=low_stock,
            by_category=[{"name": name, "count": count} for name, count in by_category],
        )
