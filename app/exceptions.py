"""
Ошибки предметной области.
Каждая ошибка знает свой HTTP-статус; обработчик в app.main превращает их в ответ.
"""
from dataclasses import dataclass, asdict
from typing import List, Optional


@dataclass
class FieldError:
    """Ошибка конкретного поля формы"""
    field: str
    message: str

    def to_dict(self) -> dict:
        return asdict(self)


class ListingError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        if message:
            self.message = message
        super().__init__(self.message)


class ValidationFailure(ListingError):
    """Отсутствует обязательное поле или значение вне допустимого диапазона"""
    status_code = 422
    message = "Validation failed"

    def __init__(self, errors: List[FieldError], message: Optional[str] = None):
        self.errors = errors
        super().__init__(message)


class NotFound(ListingError):
    status_code = 404
    message = "Not found"


class QueryFailure(ListingError):
    """Хранилище недоступно или запрос не выполнился"""


class StorageFailure(ListingError):
    """Ошибка записи/чтения файла изображения"""


class SerializationFailure(ListingError):
    """Список ссылок не является JSON-массивом строк"""
