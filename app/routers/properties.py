import logging
from typing import Dict, List, Optional, Tuple

from fastapi import APIRouter, Depends, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile

from app.config import get_settings
from app.database import get_db
from app.schemas.property import (
    PropertyType, PropertyFilter, PropertyListResponse, Pagination, PropertyEnvelope, PropertyCreatedResponse
)
from app.services.image_store import ImageStore, get_image_store
from app.services.listing_service import ListingService, ImageUpload
from app.services.property_repository import PropertyRepository

router = APIRouter(prefix="/api/properties", tags=["properties"])
logger = logging.getLogger(__name__)
settings = get_settings()

# Файлы изображений приходят в полях image_0, image_1, ... (или в повторяющемся поле images)
IMAGE_FIELD_PREFIX = "image_"


async def read_listing_form(request: Request) -> Tuple[Dict[str, str], List[ImageUpload]]:
    """Разделяет multipart-форму на текстовые поля и файлы изображений"""
    form = await request.form()
    fields: Dict[str, str] = {}
    images: List[ImageUpload] = []

    for key, value in form.multi_items():
        if isinstance(value, UploadFile):
            if not (key.startswith(IMAGE_FIELD_PREFIX) or key == "images") or not value.filename:
                continue
            images.append(ImageUpload(filename=value.filename, content=await value.read()))
        else:
            fields[key] = value

    return fields, images


@router.get("", response_model=PropertyListResponse)
def get_properties(
    property_type: Optional[PropertyType] = Query(None, alias="propertyType"),
    min_price: Optional[float] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[float] = Query(None, alias="maxPrice", ge=0),
    city: Optional[str] = None,
    page: int = Query(1, ge=1),
    count: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    db: Session = Depends(get_db),
    image_store: ImageStore = Depends(get_image_store),
):
    """Получить список объектов с фильтрацией и пагинацией"""
    filters = PropertyFilter(
        property_type=property_type,
        min_price=min_price,
        max_price=max_price,
        city_contains=city or None,
    )
    result = ListingService(db, image_store).list_listings(filters, page, count)

    return PropertyListResponse(
        properties=result.items,
        pagination=Pagination(
            total=result.total,
            page=result.page,
            count=result.page_size,
            total_pages=result.total_pages,
        ),
    )


@router.post("", response_model=PropertyCreatedResponse, status_code=201)
async def create_property(
    request: Request,
    db: Session = Depends(get_db),
    image_store: ImageStore = Depends(get_image_store),
):
    """Создать объявление из multipart-формы"""
    fields, images = await read_listing_form(request)
    service = ListingService(db, image_store)
    created = await run_in_threadpool(service.create_listing, fields, images)
    return PropertyCreatedResponse(property=created)


@router.get("/images")
def get_property_image(
    image_id: Optional[str] = Query(None, alias="imageId"),
    image_store: ImageStore = Depends(get_image_store),
):
    """Отдать изображение объекта; при отсутствии файла отдается заглушка"""
    image = image_store.retrieve(image_id)
    return Response(
        content=image.content,
        media_type=image.content_type,
        headers={"Content-Disposition": f'inline; filename="{image.filename}"'},
    )


@router.get("/cities")
def get_cities(db: Session = Depends(get_db)):
    """Получить список всех городов из объектов недвижимости"""
    return {"cities": PropertyRepository(db).cities()}


@router.get("/stats/summary")
def get_properties_stats(db: Session = Depends(get_db)):
    """Получить статистику по объектам недвижимости для дашборда"""
    return PropertyRepository(db).summary()


@router.get("/{property_id}", response_model=PropertyEnvelope)
def get_property(
    property_id: str,
    db: Session = Depends(get_db),
    image_store: ImageStore = Depends(get_image_store),
):
    """Получить объект недвижимости по ID"""
    return PropertyEnvelope(property=ListingService(db, image_store).get_listing(property_id))


@router.put("/{property_id}", response_model=PropertyEnvelope)
async def update_property(
    property_id: str,
    request: Request,
    db: Session = Depends(get_db),
    image_store: ImageStore = Depends(get_image_store),
):
    """Обновить объект недвижимости"""
    fields, images = await read_listing_form(request)
    service = ListingService(db, image_store)
    updated = await run_in_threadpool(service.update_listing, property_id, fields, images)
    return PropertyEnvelope(property=updated)


@router.delete("/{property_id}")
def delete_property(
    property_id: str,
    db: Session = Depends(get_db),
    image_store: ImageStore = Depends(get_image_store),
):
    """Удалить объект недвижимости"""
    ListingService(db, image_store).delete_listing(property_id)
    return {"success": True, "message": "Property deleted successfully"}
