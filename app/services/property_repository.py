import json
import math
import uuid
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.exceptions import NotFound, QueryFailure, SerializationFailure, ValidationFailure, FieldError
from app.models import Property
from app.schemas.property import (
    PropertyCreate, PropertyUpdate, PropertyResponse, PropertyFilter, PropertyPage, PropertyType, PropertyStatus
)
from app.services.validation import validate_property

logger = logging.getLogger(__name__)

# Колонки, в которых хранится JSON-массив ссылок
REFERENCE_COLUMNS = ("image_urls", "floor_plans")


def serialize_references(value: Any, column: str = "references") -> str:
    """
    Сериализует список ссылок в JSON-массив.
    Все, что не является списком строк, отклоняется до записи.
    """
    if not isinstance(value, (list, tuple)):
        raise SerializationFailure(f"{column} must be a list, got {type(value).__name__}")
    for item in value:
        if not isinstance(item, str):
            raise SerializationFailure(f"{column} must contain only strings")
    return json.dumps(list(value))


def deserialize_references(raw: Any, column: str = "references") -> List[str]:
    """Разбирает сохраненный JSON-массив ссылок с сохранением порядка"""
    if raw is None:
        return []
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise SerializationFailure(f"Malformed {column} payload") from e
    if not isinstance(raw, list) or not all(isinstance(item, str) for item in raw):
        raise SerializationFailure(f"{column} payload is not an array of strings")
    return raw


def escape_like(value: str) -> str:
    """Экранирует спецсимволы LIKE, чтобы подстрока искалась буквально"""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PropertyRepository:
    """
    Доступ к таблице properties: поиск с фильтрацией и пагинацией,
    вставка, обновление и удаление, преобразование строк в схему ответа.
    """

    def __init__(self, db: Session):
        self.db = db

    def to_response(self, row: Property) -> PropertyResponse:
        """Преобразует строку БД во внешний формат"""
        data: Dict[str, Any] = {
            column.name: getattr(row, column.name) for column in Property.__table__.columns
        }
        for column in REFERENCE_COLUMNS:
            data[column] = deserialize_references(data[column], column)
        return PropertyResponse.model_validate(data)

    def _filtered_query(self, filters: PropertyFilter):
        query = self.db.query(Property)

        if filters.property_type:
            query = query.filter(Property.property_type == _plain(filters.property_type))
        if filters.min_price is not None:
            query = query.filter(Property.price >= filters.min_price)
        if filters.max_price is not None:
            query = query.filter(Property.price <= filters.max_price)
        if filters.city_contains:
            pattern = f"%{escape_like(filters.city_contains.lower())}%"
            query = query.filter(func.lower(Property.city).like(pattern, escape="\\"))

        return query

    def search(self, filters: Optional[PropertyFilter] = None, page: int = 1, page_size: int = 10) -> PropertyPage:
        """Возвращает страницу объектов, новые первыми, и общее число совпадений"""
        errors = []
        if page < 1:
            errors.append(FieldError(field="page", message="Must be greater than or equal to 1"))
        if page_size < 1:
            errors.append(FieldError(field="count", message="Must be greater than or equal to 1"))
        if errors:
            raise ValidationFailure(errors)

        filters = filters or PropertyFilter()
        try:
            query = self._filtered_query(filters)
            total = query.order_by(None).count()
            rows = query.order_by(Property.created_at.desc(), Property.id.desc())\
                .offset((page - 1) * page_size)\
                .limit(page_size)\
                .all()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Property search failed: {e}")
            raise QueryFailure("Failed to fetch properties") from e

        return PropertyPage(
            items=[self.to_response(row) for row in rows],
            total=total,
            page=page,
            page_size=page_size,
            total_pages=math.ceil(total / page_size),
        )

    def _get_row(self, property_id: str) -> Optional[Property]:
        try:
            return self.db.query(Property).filter(Property.id == property_id).first()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Property lookup failed for {property_id}: {e}")
            raise QueryFailure("Failed to fetch property") from e

    def get(self, property_id: str) -> PropertyResponse:
        row = self._get_row(property_id)
        if not row:
            raise NotFound("Property not found")
        return self.to_response(row)

    def insert(self, data: PropertyCreate) -> PropertyResponse:
        """Создает объект: id и метки времени назначаются здесь"""
        result = validate_property(data)
        if not result.ok:
            raise ValidationFailure(result.errors)

        values = {name: _plain(value) for name, value in data.model_dump(exclude={"image_urls", "floor_plans"}).items()}
        values["image_urls"] = serialize_references(data.image_urls, "image_urls")
        values["floor_plans"] = serialize_references(data.floor_plans, "floor_plans")

        now = _utcnow()
        row = Property(id=str(uuid.uuid4()), created_at=now, updated_at=now, **values)

        try:
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Property insert failed: {e}")
            raise QueryFailure("Failed to create property listing") from e

        logger.info(f"Created property {row.id} ({row.title})")
        return self.to_response(row)

    def update(self, property_id: str, patch: PropertyUpdate) -> PropertyResponse:
        """Применяет только переданные поля и обновляет updated_at"""
        row = self._get_row(property_id)
        if not row:
            raise NotFound("Property not found")

        update_data = patch.model_dump(exclude_unset=True)
        for key, value in update_data.items():
            if key in REFERENCE_COLUMNS:
                value = serialize_references(value, key)
            setattr(row, key, _plain(value))

        # Строка после слияния должна проходить те же проверки, что и при создании
        result = validate_property(row)
        if not result.ok:
            self.db.rollback()
            raise ValidationFailure(result.errors)
        row.updated_at = _utcnow()

        try:
            self.db.commit()
            self.db.refresh(row)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Property update failed for {property_id}: {e}")
            raise QueryFailure("Failed to update property") from e

        logger.info(f"Updated property {property_id}: {sorted(update_data)}")
        return self.to_response(row)

    def remove(self, property_id: str) -> bool:
        """Удаляет объект; повторное удаление не ошибка. Возвращает, существовала ли строка"""
        try:
            deleted = self.db.query(Property).filter(Property.id == property_id).delete()
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Property delete failed for {property_id}: {e}")
            raise QueryFailure("Failed to delete property") from e

        if deleted:
            logger.info(f"Deleted property {property_id}")
        return deleted > 0

    def cities(self) -> List[str]:
        """Список всех городов из объектов недвижимости"""
        try:
            cities = self.db.query(Property.city).distinct().order_by(Property.city).all()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"City lookup failed: {e}")
            raise QueryFailure("Failed to fetch cities") from e
        return [c[0] for c in cities if c[0]]

    def summary(self) -> Dict[str, Any]:
        """Статистика для дашборда"""
        try:
            total = self.db.query(Property).count()

            by_type = {ptype.value: 0 for ptype in PropertyType}
            for ptype, count in self.db.query(Property.property_type, func.count(Property.id))\
                    .group_by(Property.property_type).all():
                by_type[ptype] = count

            by_status = {status.value: 0 for status in PropertyStatus}
            for status, count in self.db.query(Property.status, func.count(Property.id))\
                    .group_by(Property.status).all():
                by_status[status] = count

            average_price = self.db.query(func.avg(Property.price)).scalar()

            cities = self.db.query(
                Property.city, func.count(Property.id).label('count')
            ).group_by(Property.city).order_by(func.count(Property.id).desc()).limit(5).all()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Property stats failed: {e}")
            raise QueryFailure("Failed to fetch property statistics") from e

        return {
            "total": total,
            "by_type": by_type,
            "by_status": by_status,
            "average_price": round(float(average_price), 2) if average_price is not None else None,
            "top_cities": [{"city": c[0], "count": c[1]} for c in cities if c[0]]
        }
