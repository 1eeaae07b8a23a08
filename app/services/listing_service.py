import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence

from sqlalchemy.orm import Session

from app.exceptions import NotFound, QueryFailure, StorageFailure, ValidationFailure
from app.schemas.property import PropertyFilter, PropertyPage, PropertyResponse, PropertyUpdate
from app.services.image_store import ImageStore
from app.services.property_repository import PropertyRepository
from app.services.validation import validate_property_form, validate_property_update_form

logger = logging.getLogger(__name__)


@dataclass
class ImageUpload:
    """Загруженный файл изображения"""
    filename: Optional[str]
    content: bytes


class ListingService:
    """
    Сценарии работы с объявлениями поверх репозитория и хранилища изображений.

    Создание: проверка -> вставка строки -> сохранение изображений -> запись ссылок.
    Если сохранение изображений не удалось, уже записанные файлы и строка удаляются,
    так что объявление без части изображений не остается в БД.
    """

    def __init__(self, db: Session, image_store: ImageStore):
        self.repository = PropertyRepository(db)
        self.image_store = image_store

    def _store_images(self, listing_id: str, images: Sequence[ImageUpload]) -> List[str]:
        """Сохраняет изображения по порядку; при ошибке удаляет уже сохраненные"""
        references: List[str] = []
        try:
            for image in images:
                references.append(self.image_store.store(listing_id, image.content, image.filename))
        except StorageFailure:
            self._discard_images(references)
            raise
        return references

    def _discard_images(self, references: Sequence[str]):
        for reference in references:
            try:
                self.image_store.delete(reference)
            except StorageFailure:
                logger.warning(f"Could not remove orphaned image {reference}")

    def create_listing(self, fields: Mapping[str, Any], images: Sequence[ImageUpload] = ()) -> PropertyResponse:
        result = validate_property_form(fields)
        if not result.ok:
            raise ValidationFailure(result.errors)

        created = self.repository.insert(result.data)
        if not images:
            return created

        references: List[str] = []
        try:
            references = self._store_images(created.id, images)
            return self.repository.update(
                created.id, PropertyUpdate(image_urls=created.image_urls + references)
            )
        except (StorageFailure, QueryFailure):
            logger.warning(f"Rolling back property {created.id}: image upload failed")
            self._discard_images(references)
            self.repository.remove(created.id)
            raise

    def list_listings(self, filters: Optional[PropertyFilter] = None, page: int = 1, page_size: int = 10) -> PropertyPage:
        return self.repository.search(filters, page, page_size)

    def get_listing(self, listing_id: str) -> PropertyResponse:
        return self.repository.get(listing_id)

    def update_listing(
        self, listing_id: str, fields: Mapping[str, Any], images: Sequence[ImageUpload] = ()
    ) -> PropertyResponse:
        """Обновляет переданные поля; новые изображения добавляются после существующих"""
        result = validate_property_update_form(fields)
        if not result.ok:
            raise ValidationFailure(result.errors)
        patch: PropertyUpdate = result.data

        current = self.repository.get(listing_id)
        if not images:
            return self.repository.update(listing_id, patch)

        references = self._store_images(listing_id, images)
        base = patch.image_urls if patch.image_urls is not None else current.image_urls
        patch.image_urls = base + references
        try:
            return self.repository.update(listing_id, patch)
        except (QueryFailure, NotFound):
            self._discard_images(references)
            raise

    def delete_listing(self, listing_id: str):
        """Удаляет объявление и его изображения; файлы других объявлений не трогаются"""
        current = self.repository.get(listing_id)
        if not self.repository.remove(listing_id):
            raise NotFound("Property not found")
        owned = [ref for ref in current.image_urls if self.image_store.owns(listing_id, ref)]
        foreign = len(current.image_urls) - len(owned)
        if foreign:
            logger.warning(f"Property {listing_id} referenced {foreign} image(s) it does not own; left in place")
        self._discard_images(owned)
