from enum import Enum
from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class PropertyType(str, Enum):
    HOUSE = "HOUSE"
    APARTMENT = "APARTMENT"
    CONDO = "CONDO"
    LAND = "LAND"
    TOWNHOUSE = "TOWNHOUSE"
    MULTI_FAMILY = "MULTI_FAMILY"
    COMMERCIAL = "COMMERCIAL"


class PropertyStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    AVAILABLE = "AVAILABLE"
    SOLD = "SOLD"
    OFF_MARKET = "OFF_MARKET"


class HeatingType(str, Enum):
    NONE = "NONE"
    GAS = "GAS"
    ELECTRIC = "ELECTRIC"
    WOOD = "WOOD"
    GEOTHERMAL = "GEOTHERMAL"
    SOLAR = "SOLAR"


class CoolingType(str, Enum):
    NONE = "NONE"
    CENTRAL_AIR = "CENTRAL_AIR"
    WINDOW_UNIT = "WINDOW_UNIT"
    EVAPORATIVE = "EVAPORATIVE"
    GEOTHERMAL = "GEOTHERMAL"


# Поля, которые не могут быть пустыми ни при создании, ни при обновлении
REQUIRED_FIELDS = (
    "title", "price", "property_type", "bedrooms", "bathrooms",
    "address", "city", "state", "postal_code", "country", "agent_id",
)


class CamelModel(BaseModel):
    """Внешний контракт использует camelCase, внутри - snake_case"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        use_enum_values=True,
        validate_default=True,
    )


class PropertyBase(CamelModel):
    """Базовая схема объекта недвижимости"""
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    price: float = Field(..., ge=0)
    property_type: PropertyType
    bedrooms: int = Field(..., ge=0)
    bathrooms: int = Field(..., ge=0)
    square_feet: Optional[int] = Field(None, ge=0)
    lot_size: Optional[int] = Field(None, ge=0)
    year_built: Optional[int] = None
    status: PropertyStatus = PropertyStatus.PENDING
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    postal_code: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    has_garage: bool = False
    has_pool: bool = False
    has_basement: bool = False
    has_fireplace: bool = False
    parking_spaces: Optional[int] = Field(None, ge=0)
    heating_type: HeatingType = HeatingType.NONE
    cooling_type: CoolingType = CoolingType.NONE
    video_url: Optional[str] = None
    floor_plans: List[str] = []
    agent_id: str = Field(..., min_length=1)


class PropertyCreate(PropertyBase):
    """Схема для создания объекта"""
    image_urls: List[str] = []


class PropertyUpdate(CamelModel):
    """Схема для обновления объекта: применяются только переданные поля"""
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    property_type: Optional[PropertyType] = None
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[int] = Field(None, ge=0)
    square_feet: Optional[int] = Field(None, ge=0)
    lot_size: Optional[int] = Field(None, ge=0)
    year_built: Optional[int] = None
    status: Optional[PropertyStatus] = None
    address: Optional[str] = Field(None, min_length=1)
    city: Optional[str] = Field(None, min_length=1)
    state: Optional[str] = Field(None, min_length=1)
    postal_code: Optional[str] = Field(None, min_length=1)
    country: Optional[str] = Field(None, min_length=1)
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    has_garage: Optional[bool] = None
    has_pool: Optional[bool] = None
    has_basement: Optional[bool] = None
    has_fireplace: Optional[bool] = None
    parking_spaces: Optional[int] = Field(None, ge=0)
    heating_type: Optional[HeatingType] = None
    cooling_type: Optional[CoolingType] = None
    image_urls: Optional[List[str]] = None
    video_url: Optional[str] = None
    floor_plans: Optional[List[str]] = None
    agent_id: Optional[str] = Field(None, min_length=1)

    @model_validator(mode="after")
    def check_required_not_cleared(self):
        for name in REQUIRED_FIELDS:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f'Field "{to_camel(name)}" cannot be empty')
        return self


class PropertyResponse(PropertyBase):
    """Схема ответа с объектом недвижимости"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    image_urls: List[str] = []
    created_at: datetime
    updated_at: datetime


class PropertyFilter(BaseModel):
    """Условия поиска; все условия объединяются через AND"""
    property_type: Optional[PropertyType] = None
    min_price: Optional[float] = Field(None, ge=0)
    max_price: Optional[float] = Field(None, ge=0)
    city_contains: Optional[str] = None


class PropertyPage(BaseModel):
    """Страница результатов поиска"""
    items: List[PropertyResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


class Pagination(CamelModel):
    total: int
    page: int
    count: int
    total_pages: int


class PropertyListResponse(CamelModel):
    """Схема списка объектов с пагинацией"""
    properties: List[PropertyResponse]
    pagination: Pagination


class PropertyEnvelope(CamelModel):
    property: PropertyResponse


class PropertyCreatedResponse(CamelModel):
    success: bool = True
    property: PropertyResponse
