"""
Разбор и проверка полей формы объявления.
Проверки возвращают ValidationResult вместо исключений: вызывающий код сам решает,
как сообщить об ошибках.
"""
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError
from pydantic.alias_generators import to_camel

from app.exceptions import FieldError
from app.schemas.property import PropertyCreate, PropertyUpdate, REQUIRED_FIELDS

ModelT = TypeVar("ModelT", bound=BaseModel)

# Поля формы, которые приходят как JSON-массив в строке
LIST_FIELDS = ("floorPlans",)

# Ссылки на изображения выдает только хранилище, из формы они не принимаются
STORE_MANAGED_FIELDS = ("imageUrls", "image_urls")


@dataclass
class ValidationResult:
    """Результат проверки: ok, список ошибок и разобранные данные"""
    ok: bool
    errors: List[FieldError] = field(default_factory=list)
    data: Optional[Any] = None


def _field_name(loc) -> str:
    if not loc:
        return "__all__"
    return str(loc[0])


def _from_pydantic(exc: ValidationError) -> List[FieldError]:
    errors = []
    for err in exc.errors():
        message = err["msg"]
        # Сообщения model_validator приходят с префиксом "Value error, "
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.append(FieldError(field=_field_name(err["loc"]), message=message))
    return errors


def normalize_form(fields: Mapping[str, Any]) -> ValidationResult:
    """
    Приводит поля multipart-формы к виду, пригодному для pydantic-схемы.
    Пустые строки считаются отсутствующими значениями, списки разбираются из JSON.
    Поля imageUrls в форме игнорируются.
    """
    data: Dict[str, Any] = {}
    errors: List[FieldError] = []

    for key, value in fields.items():
        if key in STORE_MANAGED_FIELDS:
            continue

        if isinstance(value, str):
            value = value.strip()
            if value == "":
                continue

        if key in LIST_FIELDS and isinstance(value, str):
            try:
                value = json.loads(value)
            except json.JSONDecodeError:
                errors.append(FieldError(field=key, message="Must be a JSON array of strings"))
                continue
            if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
                errors.append(FieldError(field=key, message="Must be a JSON array of strings"))
                continue

        data[key] = value

    return ValidationResult(ok=not errors, errors=errors, data=data)


def _parse(model: Type[ModelT], fields: Mapping[str, Any]) -> ValidationResult:
    normalized = normalize_form(fields)
    if not normalized.ok:
        return normalized

    try:
        parsed = model.model_validate(normalized.data)
    except ValidationError as e:
        return ValidationResult(ok=False, errors=_from_pydantic(e))

    return ValidationResult(ok=True, data=parsed)


def validate_property_form(fields: Mapping[str, Any]) -> ValidationResult:
    """Проверяет форму создания объявления; data - PropertyCreate"""
    result = _parse(PropertyCreate, fields)
    if not result.ok:
        return result
    return validate_property(result.data)


def validate_property_update_form(fields: Mapping[str, Any]) -> ValidationResult:
    """Проверяет форму обновления объявления; data - PropertyUpdate"""
    return _parse(PropertyUpdate, fields)


def validate_property(data) -> ValidationResult:
    """
    Проверка уже типизированных данных перед записью в БД: PropertyCreate
    или строка Property после применения изменений.
    Нужна для объектов, собранных в обход валидации pydantic (model_construct).
    """
    errors = []

    for name in REQUIRED_FIELDS:
        value = getattr(data, name, None)
        if value is None or (isinstance(value, str) and not value.strip()):
            errors.append(FieldError(field=to_camel(name), message="Field required"))

    for name in ("price", "bedrooms", "bathrooms"):
        value = getattr(data, name, None)
        if value is not None and value < 0:
            errors.append(FieldError(field=to_camel(name), message="Must be greater than or equal to 0"))

    return ValidationResult(ok=not errors, errors=errors, data=data if not errors else None)
