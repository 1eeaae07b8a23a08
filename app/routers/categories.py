import uuid
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.exceptions import NotFound, ValidationFailure, FieldError
from app.models import Category
from app.schemas.category import CategoryCreate, CategoryResponse, CategoryListResponse

router = APIRouter(prefix="/api/categories", tags=["categories"])
logger = logging.getLogger(__name__)


@router.get("", response_model=CategoryListResponse)
def get_categories(db: Session = Depends(get_db)):
    """Получить все категории"""
    items = db.query(Category).order_by(Category.name.asc()).all()
    return CategoryListResponse(items=items, total=len(items))


@router.post("", response_model=CategoryResponse, status_code=201)
def create_category(category_in: CategoryCreate, db: Session = Depends(get_db)):
    """Создать категорию"""
    if db.query(Category).filter(Category.slug == category_in.slug).first():
        raise ValidationFailure(
            [FieldError(field="slug", message=f'Slug "{category_in.slug}" is already taken')]
        )

    category = Category(id=str(uuid.uuid4()), **category_in.model_dump())
    db.add(category)
    db.commit()
    db.refresh(category)
    logger.info(f"Created category {category.slug}")
    return category


@router.get("/{slug}", response_model=CategoryResponse)
def get_category(slug: str, db: Session = Depends(get_db)):
    """Получить категорию по slug"""
    category = db.query(Category).filter(Category.slug == slug).first()
    if not category:
        raise NotFound("Category not found")
    return category


@router.delete("/{slug}")
def delete_category(slug: str, db: Session = Depends(get_db)):
    """Удалить категорию"""
    category = db.query(Category).filter(Category.slug == slug).first()
    if not category:
        raise NotFound("Category not found")
    db.delete(category)
    db.commit()
    return {"success": True, "message": "Category deleted successfully", "slug": slug}
