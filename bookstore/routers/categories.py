"""
Categories Router (category service)

CRUD endpoints for category records, plus a lookup by isbn used by the
gateway to attach a category to a book.
"""

import logging
from typing import List

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import select

from bookstore.dependencies import DbSession
from bookstore.models import Category
from bookstore.schemas import CategoryCreate, CategoryResponse, CategoryUpdate

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/categories",
    tags=["Categories"],
    responses={
        404: {"description": "Category not found"},
    },
)


def get_category_or_404(db: DbSession, category_id: int) -> Category:
    """Get a category by ID or raise 404."""
    category = db.get(Category, category_id)
    if category is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Category with id {category_id} not found",
        )
    return category


@router.get(
    "",
    response_model=List[CategoryResponse],
    summary="List all categories",
)
def list_categories(db: DbSession) -> List[CategoryResponse]:
    stmt = select(Category).order_by(Category.category_id)
    categories = db.execute(stmt).scalars().all()
    return [CategoryResponse.model_validate(c) for c in categories]


@router.get(
    "/isbn/{isbn}",
    response_model=CategoryResponse,
    summary="Get the category of a book",
    description="Look up the category record attached to a book's isbn.",
)
def get_category_by_isbn(isbn: str, db: DbSession) -> CategoryResponse:
    stmt = select(Category).where(Category.isbn == isbn).order_by(Category.category_id).limit(1)
    category = db.execute(stmt).scalar_one_or_none()
    if category is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Category for isbn {isbn} not found",
        )
    return CategoryResponse.model_validate(category)


@router.get(
    "/{category_id}",
    response_model=CategoryResponse,
    summary="Get a category by ID",
)
def get_category(category_id: int, db: DbSession) -> CategoryResponse:
    return CategoryResponse.model_validate(get_category_or_404(db, category_id))


@router.post(
    "",
    response_model=CategoryResponse,
    summary="Create a category",
)
def create_category(category_data: CategoryCreate, db: DbSession) -> CategoryResponse:
    category = Category(isbn=category_data.isbn, genre=category_data.genre)
    db.add(category)
    db.commit()
    db.refresh(category)

    logger.info(f"Created category {category.category_id} ({category.genre}) for isbn {category.isbn}")
    return CategoryResponse.model_validate(category)


@router.patch(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Update a category",
)
def update_category(category_id: int, category_data: CategoryUpdate, db: DbSession) -> None:
    category = get_category_or_404(db, category_id)
    for field, value in category_data.model_dump(exclude_unset=True).items():
        setattr(category, field, value)
    db.commit()


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a category",
)
def delete_category(category_id: int, db: DbSession) -> None:
    category = get_category_or_404(db, category_id)
    db.delete(category)
    db.commit()
