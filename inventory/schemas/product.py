from pydantic import BaseModel, Field, ConfigDict, field_validator
from datetime import datetime
from typing import Optional

# Largest value the INTEGER quantity column holds
MAX_QUANTITY = 2_147_483_647


class ProductBase(BaseModel):
    """
    Base schema for Product with common attributes.

    Field names are English; the JSON keys are the Spanish aliases the
    inventory UI sends and expects.
    """
    name: str = Field(..., alias="nombre", max_length=200, description="Product name")
    quantity: int = Field(..., alias="cantidad", ge=0, le=MAX_QUANTITY, description="Units in stock (must be non-negative)")
    description: Optional[str] = Field(None, alias="descripcion", description="Optional description")
    category_id: int = Field(..., alias="categoria_id", gt=0, description="ID of an existing category")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("El nombre del producto es obligatorio")
        return value


class ProductCreate(ProductBase):
    """Schema for creating a new product. The identifier is allocated by the server."""
    pass


class ProductUpdate(ProductBase):
    """Schema for a full-record product edit. Every field is replaced."""
    pass


class QuantityAdjustment(BaseModel):
    """Signed stock adjustment: positive adds units, negative removes them."""
    delta: int = Field(..., alias="cambio", ge=-MAX_QUANTITY, le=MAX_QUANTITY, description="Signed quantity change")

    model_config = ConfigDict(populate_by_name=True)


class ProductResponse(BaseModel):
    """Schema for product response including the resolved category name."""
    id: str
    name: str = Field(..., alias="nombre")
    quantity: int = Field(..., alias="cantidad")
    description: Optional[str] = Field(None, alias="descripcion")
    category_id: int = Field(..., alias="categoria_id")
    category_name: Optional[str] = Field(None, alias="categoria")
    created_at: Optional[datetime] = Field(None, alias="fecha_creacion")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
