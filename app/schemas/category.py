import re
from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, model_validator


def slugify(name: str) -> str:
    """Название категории -> URL-совместимый slug"""
    slug = re.sub(r"\s+", "-", name.strip().lower())
    return re.sub(r"[^a-z0-9-]", "", slug)


class CategoryCreate(BaseModel):
    """Схема для создания категории; slug генерируется из названия, если не задан"""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=2, max_length=255)
    description: str = Field(..., min_length=10)
    slug: Optional[str] = Field(None, max_length=255)
    icon: Optional[str] = Field(None, max_length=255)

    @model_validator(mode="after")
    def fill_slug(self):
        if not self.slug:
            self.slug = slugify(self.name)
        if len(self.slug) < 2:
            raise ValueError("Slug must be at least 2 characters.")
        if self.slug != slugify(self.slug):
            raise ValueError("Slug may only contain lowercase letters, digits and hyphens.")
        return self


class CategoryResponse(BaseModel):
    """Схема ответа с категорией"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str
    description: str
    icon: Optional[str] = None
    created_at: datetime


class CategoryListResponse(BaseModel):
    items: List[CategoryResponse]
    total: int
