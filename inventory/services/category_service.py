from sqlalchemy.orm import Session
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from typing import List
import logging

from inventory.exceptions import ConflictError, NotFoundError, StoreError, ValidationError
from inventory.models.category import Category
from inventory.models.product import Product
from inventory.schemas.category import CategoryCreate, CategoryUpdate
from inventory.services.statistics_service import invalidate_statistics
from inventory.utils.db import store_errors

logger = logging.getLogger(__name__)


class CategoryService:
    """
    Service class for Category CRUD operations.

    Name uniqueness is checked with a read before every insert or rename.
    Two concurrent requests with the same name can both pass that check; the
    unique constraint then rejects one of them, which is reported as a
    generic failure.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_all(self) -> List[Category]:
        """Get every category ordered by name."""
        with store_errors(self.db, "Error al obtener categorías"):
            return self.db.query(Category).order_by(Category.name).all()

    def get_by_id(self, category_id: int) -> Category:
        """
        Get a category by ID.

        Raises:
            NotFoundError: If the category doesn't exist
        """
        with store_errors(self.db, "Error al obtener categoría"):
            category = self.db.query(Category).filter(Category.id == category_id).first()

        if not category:
            raise NotFoundError("Categoría no encontrada")
        return category

    def create(self, category_data: CategoryCreate) -> Category:
        """
        Create a new category.

        Raises:
            ConflictError: If another category already uses the name
            StoreError: If the insert fails, including a lost race on the name
        """
        if self._name_taken(category_data.name):
            raise ConflictError("Ya existe una categoría con ese nombre")

        category = Category(name=category_data.name)
        with store_errors(self.db, "Error al crear categoría"):
            self.db.add(category)
            self._commit("Error al crear categoría")
            self.db.refresh(category)

        invalidate_statistics()
        logger.info(f"Category #{category.id} '{category.name}' created")
        return category

    def update(self, category_id: int, category_data: CategoryUpdate) -> Category:
        """
        Rename a category.

        Raises:
            NotFoundError: If the category doesn't exist
            ConflictError: If another category already uses the new name
        """
        category = self.get_by_id(category_id)

        if self._name_taken(category_data.name, exclude_id=category_id):
            raise ConflictError("Ya existe otra categoría con ese nombre")

        with store_errors(self.db, "Error al actualizar categoría"):
            category.name = category_data.name
            self._commit("Error al actualizar categoría")
            self.db.refresh(category)

        invalidate_statistics()
        logger.info(f"Category #{category_id} renamed to '{category.name}'")
        return category

    def delete(self, category_id: int) -> None:
        """
        Delete a category that no product references.

        Raises:
            ValidationError: If products still belong to the category
            NotFoundError: If the category doesn't exist
        """
        with store_errors(self.db, "Error al eliminar categoría"):
            product_count = (
                self.db.query(func.count(Product.id))
                .filter(Product.category_id == category_id)
                .scalar()
            )

        if product_count > 0:
            raise ValidationError(
                "No se puede eliminar la categoría porque tiene productos asociados"
            )

        category = self.get_by_id(category_id)
        with store_errors(self.db, "Error al eliminar categoría"):
            self.db.delete(category)
            self._commit("Error al eliminar categoría")

        invalidate_statistics()
        logger.info(f"Category #{category_id} deleted")

    def _name_taken(self, name: str, exclude_id: int = None) -> bool:
        with store_errors(self.db, "Error al verificar categoría"):
            query = self.db.query(Category.id).filter(Category.name == name)
            if exclude_id is not None:
                query = query.filter(Category.id != exclude_id)
            return query.first() is not None

    def _commit(self, message: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            # Unique name or restrict-on-delete violation missed by the pre-checks
            self.db.rollback()
            logger.error(f"Integrity error on categories: {e}")
            raise StoreError(message) from e
