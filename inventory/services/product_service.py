from sqlalchemy.orm import Session
from sqlalchemy import BigInteger, case, cast, delete, or_, update
from sqlalchemy.exc import IntegrityError
from typing import Optional, List
import logging

from inventory.config import get_settings
from inventory.exceptions import ConflictError, NotFoundError, StoreError, ValidationError
from inventory.models.category import Category
from inventory.models.product import Product
from inventory.schemas.product import MAX_QUANTITY, ProductCreate, ProductUpdate
from inventory.services.id_allocator import IdentifierAllocator
from inventory.services.statistics_service import invalidate_statistics
from inventory.utils.db import store_errors

logger = logging.getLogger(__name__)

settings = get_settings()


class ProductService:
    """
    Service class for Product operations.

    This service handles:
    - Listing products with category, text and low-stock filters
    - Creating products with a sequential identifier
    - Full-record edits and deletion
    - Stock adjustments clamped at zero
    - Statistics cache invalidation after every write
    """

    def __init__(self, db: Session):
        self.db = db

    def get_all(
        self,
        category_id: Optional[int] = None,
        search: Optional[str] = None,
        low_stock: bool = False,
    ) -> List[Product]:
        """
        List products ordered by identifier.

        Args:
            category_id: Only products of this category
            search: Case-insensitive match on product name, identifier or category name
            low_stock: Only products at or under the low-stock threshold

        Returns:
            Matching products with their category loaded
        """
        with store_errors(self.db, "Error al obtener productos"):
            query = self.db.query(Product).join(Category, Product.category_id == Category.id)

            if category_id is not None:
                query = query.filter(Category.id == category_id)

            if search:
                term = f"%{search}%"
                query = query.filter(
                    or_(
                        Product.name.ilike(term),
                        Product.id.ilike(term),
                        Category.name.ilike(term),
                    )
                )

            if low_stock:
                query = query.filter(Product.quantity <= settings.LOW_STOCK_THRESHOLD)

            return query.order_by(Product.id).all()

    def get_by_id(self, product_id: str) -> Product:
        """
        Get a product by identifier.

        Raises:
            NotFoundError: If the product doesn't exist
        """
        with store_errors(self.db, "Error al obtener producto"):
            product = self.db.query(Product).filter(Product.id == product_id).first()

        if not product:
            raise NotFoundError("Producto no encontrado")
        return product

    def create(self, product_data: ProductCreate) -> Product:
        """
        Create a new product with the next sequential identifier.

        If the insert loses a race for the allocated identifier (duplicate key),
        allocation starts over, up to ``PRODUCT_ID_MAX_ATTEMPTS`` times.

        Args:
            product_data: Validated product fields

        Returns:
            Created product with its category resolved

        Raises:
            ValidationError: If the category doesn't exist
            ConflictError: If no free identifier could be claimed
            StoreError: On any other database failure
        """
        self._ensure_category_exists(product_data.category_id)
        allocator = IdentifierAllocator(self.db)

        for attempt in range(1, allocator.max_attempts + 1):
            with store_errors(self.db, "Error al crear producto"):
                product_id = allocator.allocate()
                product = Product(
                    id=product_id,
                    name=product_data.name,
                    quantity=product_data.quantity,
                    description=product_data.description,
                    category_id=product_data.category_id,
                )
                self.db.add(product)
                try:
                    self.db.commit()
                except IntegrityError as e:
                    self.db.rollback()
                    if not allocator.exists(product_id):
                        logger.error(f"Integrity error creating product {product_id}: {e}")
                        raise StoreError("Error al crear producto") from e
                    logger.warning(
                        f"Product ID {product_id} was taken by a concurrent request "
                        f"(attempt {attempt}/{allocator.max_attempts})"
                    )
                    continue

            invalidate_statistics()
            logger.info(f"Product {product_id} created in category #{product_data.category_id}")
            return self.get_by_id(product_id)

        raise ConflictError("No se pudo generar un ID de producto único, intente de nuevo")

    def update(self, product_id: str, product_data: ProductUpdate) -> Product:
        """
        Replace every editable field of a product.

        Raises:
            NotFoundError: If the product doesn't exist
            ValidationError: If the new category doesn't exist
        """
        product = self.get_by_id(product_id)
        self._ensure_category_exists(product_data.category_id)

        with store_errors(self.db, "Error al actualizar producto"):
            product.name = product_data.name
            product.quantity = product_data.quantity
            product.description = product_data.description
            product.category_id = product_data.category_id
            self.db.commit()

        invalidate_statistics()
        logger.info(f"Product {product_id} updated")
        return self.get_by_id(product_id)

    def delete(self, product_id: str) -> None:
        """
        Delete a product permanently.

        Raises:
            NotFoundError: If the product doesn't exist
        """
        with store_errors(self.db, "Error al eliminar producto"):
            result = self.db.execute(
                delete(Product)
                .where(Product.id == product_id)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                self.db.rollback()
                raise NotFoundError("Producto no encontrado")
            self.db.commit()

        invalidate_statistics()
        logger.info(f"Product {product_id} deleted")

    def adjust_quantity(self, product_id: str, delta: int) -> Product:
        """
        Apply a signed delta to a product's stock.

        The new quantity is computed and written by a single UPDATE, so
        concurrent adjustments cannot lose each other's changes. Results
        below zero are clamped to 0 rather than rejected, and results above
        the column range are capped at MAX_QUANTITY. The sum is computed as
        BIGINT so it cannot overflow before the comparison:

            UPDATE productos
            SET cantidad = CASE WHEN cantidad + :delta < 0 THEN 0
                                WHEN cantidad + :delta > :max THEN :max
                                ELSE cantidad + :delta END
            WHERE id = :product_id

        Args:
            product_id: Identifier of the product
            delta: Positive to add units, negative to remove them

        Returns:
            Updated product with its category resolved

        Raises:
            NotFoundError: If the product doesn't exist
        """
        total = cast(Product.quantity, BigInteger) + delta
        new_quantity = case(
            (total < 0, 0),
            (total > MAX_QUANTITY, MAX_QUANTITY),
            else_=total,
        )

        with store_errors(self.db, "Error al actualizar cantidad"):
            result = self.db.execute(
                update(Product)
                .where(Product.id == product_id)
                .values(quantity=new_quantity)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                self.db.rollback()
                raise NotFoundError("Producto no encontrado")
            self.db.commit()

        invalidate_statistics()
        product = self.get_by_id(product_id)
        logger.info(f"Product {product_id} adjusted by {delta:+d}, quantity now {product.quantity}")
        return product

    def _ensure_category_exists(self, category_id: int) -> None:
        with store_errors(self.db, "Error al verificar categoría"):
            exists = self.db.query(Category.id).filter(Category.id == category_id).first()
        if exists is None:
            raise ValidationError("La categoría no existe")
