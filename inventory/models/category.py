from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from inventory.database import Base


class Category(Base):
    """
    Category grouping products together.

    Attributes:
        id: Store-assigned identifier
        name: Unique, non-empty display name
    """
    __tablename__ = "categorias"

    id = Column(Integer, primary_key=True, index=True)
    name = Column("nombre", String(100), unique=True, nullable=False)

    # Products block deletion of their category (ON DELETE RESTRICT)
    products = relationship("Product", back_populates="category", passive_deletes="all")

    def __repr__(self):
        return f"<Category(id={self.id}, name='{self.name}')>"
