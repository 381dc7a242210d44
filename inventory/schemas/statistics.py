from pydantic import BaseModel, Field, ConfigDict


class CategoryCount(BaseModel):
    """Number of products in one category."""
    name: str = Field(..., alias="nombre")
    count: int = Field(..., alias="cantidad")

    model_config = ConfigDict(populate_by_name=True)


class StatisticsResponse(BaseModel):
    """Aggregate inventory figures."""
    total_products: int = Field(..., alias="totalProductos")
    total_stock: int = Field(..., alias="totalStock")
    low_stock: int = Field(..., alias="stockBajo")
    by_category: list[CategoryCount] = Field(default_factory=list, alias="porCategoria")

    model_config = ConfigDict(populate_by_name=True)
