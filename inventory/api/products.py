from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from inventory.config import get_settings
from inventory.database import get_db
from inventory.services.product_service import ProductService
from inventory.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    QuantityAdjustment,
)
from inventory.tasks.stock_tasks import notify_low_stock

router = APIRouter(prefix="/productos", tags=["Products"])

settings = get_settings()


@router.get(
    "",
    response_model=list[ProductResponse],
    summary="List products",
    description="List all products ordered by ID, optionally filtered by category, text or low stock."
)
def list_products(
    category_id: Optional[int] = Query(None, alias="categoria", description="Category ID"),
    search: Optional[str] = Query(None, alias="busqueda", description="Match on name, ID or category name"),
    low_stock: bool = Query(False, alias="stockBajo", description="Only products with quantity <= 10"),
    db: Session = Depends(get_db)
):
    """Get products matching the optional filters."""
    service = ProductService(db)
    products = service.get_all(category_id=category_id, search=search, low_stock=low_stock)
    return [ProductResponse.model_validate(p) for p in products]


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new product",
    description="Create a product; the server assigns the next sequential ID (P001, P002, ...)."
)
def create_product(
    product_data: ProductCreate,
    db: Session = Depends(get_db)
):
    """
    Create a new product.

    - **nombre**: Product name (required)
    - **cantidad**: Initial stock, must be non-negative (required)
    - **descripcion**: Free text (optional)
    - **categoria_id**: ID of an existing category (required)
    """
    service = ProductService(db)
    return service.create(product_data)


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Get product by ID",
    description="Get a product with its category name."
)
def get_product(
    product_id: str,
    db: Session = Depends(get_db)
):
    """Get a product by ID."""
    service = ProductService(db)
    return service.get_by_id(product_id)


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Update a product",
    description="Replace name, quantity, description and category of a product."
)
def update_product(
    product_id: str,
    product_data: ProductUpdate,
    db: Session = Depends(get_db)
):
    """Full-record product edit. The ID never changes."""
    service = ProductService(db)
    return service.update(product_id, product_data)


@router.delete(
    "/{product_id}",
    summary="Delete a product",
    description="Delete a product permanently."
)
def delete_product(
    product_id: str,
    db: Session = Depends(get_db)
):
    """Delete a product."""
    service = ProductService(db)
    service.delete(product_id)
    return {"message": "Producto eliminado correctamente"}


@router.patch(
    "/{product_id}/cantidad",
    response_model=ProductResponse,
    summary="Adjust product quantity",
    description="""
    Add or remove stock with a signed delta.

    **Clamping:**
    A decrement larger than the available stock sets the quantity to 0 and
    still succeeds; quantities never go negative.

    When a decrement leaves the product at or under the low-stock threshold,
    a background Celery task reports it.
    """
)
def adjust_quantity(
    product_id: str,
    adjustment: QuantityAdjustment,
    db: Session = Depends(get_db)
):
    """
    Adjust stock.

    - **cambio**: Signed integer, positive to add units and negative to remove them (required)
    """
    service = ProductService(db)
    product = service.adjust_quantity(product_id, adjustment.delta)

    if adjustment.delta < 0 and product.quantity <= settings.LOW_STOCK_THRESHOLD:
        notify_low_stock.delay(product.id)

    return product
