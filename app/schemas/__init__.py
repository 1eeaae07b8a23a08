from app.schemas.property import (
    PropertyType, PropertyStatus, HeatingType, CoolingType,
    PropertyBase, PropertyCreate, PropertyUpdate, PropertyResponse, PropertyFilter, PropertyPage,
    PropertyListResponse, Pagination
)
from app.schemas.agent import AgentCreate, AgentUpdate, AgentResponse, AgentListResponse
from app.schemas.category import CategoryCreate, CategoryResponse, CategoryListResponse

__all__ = [
    "PropertyType", "PropertyStatus", "HeatingType", "CoolingType",
    "PropertyBase", "PropertyCreate", "PropertyUpdate", "PropertyResponse", "PropertyFilter", "PropertyPage",
    "PropertyListResponse", "Pagination",
    "AgentCreate", "AgentUpdate", "AgentResponse", "AgentListResponse",
    "CategoryCreate", "CategoryResponse", "CategoryListResponse",
]
