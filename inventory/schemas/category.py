from pydantic import BaseModel, Field, ConfigDict, field_validator


class CategoryBase(BaseModel):
    """Base schema for Category with common attributes."""
    name: str = Field(..., alias="nombre", max_length=100, description="Category name")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("El nombre de la categoría es obligatorio")
        return value


class CategoryCreate(CategoryBase):
    """Schema for creating a new category."""
    pass


class CategoryUpdate(CategoryBase):
    """Schema for renaming a category."""
    pass


class CategoryResponse(BaseModel):
    """Schema for category response."""
    id: int
    name: str = Field(..., alias="nombre")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
