from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from inventory.database import get_db
from inventory.services.category_service import CategoryService
from inventory.schemas.category import (
    CategoryCreate,
    CategoryUpdate,
    CategoryResponse,
)

router = APIRouter(prefix="/categorias", tags=["Categories"])


@router.get(
    "",
    response_model=list[CategoryResponse],
    summary="List categories",
    description="Get all categories ordered by name."
)
def list_categories(db: Session = Depends(get_db)):
    service = CategoryService(db)
    return [CategoryResponse.model_validate(c) for c in service.get_all()]


@router.post(
    "",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new category",
    description="Create a category. Names must be unique."
)
def create_category(
    category_data: CategoryCreate,
    db: Session = Depends(get_db)
):
    service = CategoryService(db)
    return service.create(category_data)


@router.get(
    "/{category_id}",
    response_model=CategoryResponse,
    summary="Get category by ID"
)
def get_category(
    category_id: int,
    db: Session = Depends(get_db)
):
    service = CategoryService(db)
    return service.get_by_id(category_id)


@router.put(
    "/{category_id}",
    response_model=CategoryResponse,
    summary="Rename a category",
    description="Rename a category. The new name must not belong to another category."
)
def update_category(
    category_id: int,
    category_data: CategoryUpdate,
    db: Session = Depends(get_db)
):
    service = CategoryService(db)
    return service.update(category_id, category_data)


@router.delete(
    "/{category_id}",
    summary="Delete a category",
    description="Delete a category. Categories that still have products cannot be deleted."
)
def delete_category(
    category_id: int,
    db: Session = Depends(get_db)
):
    service = CategoryService(db)
    service.delete(category_id)
    return {"message": "Categoría eliminada correctamente"}
