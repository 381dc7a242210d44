from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from inventory.database import Base


class Product(Base):
    """
    Product model representing an item held in stock.

    Attributes:
        id: Human-readable code such as ``P001``, assigned on creation and immutable
        name: Product name
        quantity: Units in stock (never negative)
        description: Optional free text
        category_id: Reference to the owning category
        created_at: Timestamp when the product was created
    """
    __tablename__ = "productos"

    id = Column(String(10), primary_key=True, index=True)
    name = Column("nombre", String(200), nullable=False, index=True)
    quantity = Column("cantidad", Integer, nullable=False, default=0)
    description = Column("descripcion", Text, nullable=True)
    category_id = Column(
        "categoria_id",
        Integer,
        ForeignKey("categorias.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    created_at = Column("fecha_creacion", DateTime, server_default=func.now())

    __table_args__ = (
        CheckConstraint("cantidad >= 0", name="check_cantidad_non_negative"),
    )

    category = relationship("Category", back_populates="products", lazy="joined")

    @property
    def category_name(self):
        """Name of the owning category, resolved for display."""
        return self.category.name if self.category is not None else None

    def __repr__(self):
        return f"<Product(id='{self.id}', name='{self.name}', quantity={self.quantity})>"
