from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, ConfigDict, EmailStr, Field


class AgentBase(BaseModel):
    """Базовая схема агента"""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=255)
    contact_number: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    agency: Optional[str] = Field(None, max_length=255)
    license_number: str = Field(..., min_length=1, max_length=100)


class AgentCreate(AgentBase):
    """Схема для создания агента"""
    pass


class AgentUpdate(BaseModel):
    """Схема для обновления агента"""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    contact_number: Optional[str] = Field(None, min_length=1, max_length=50)
    email: Optional[EmailStr] = None
    agency: Optional[str] = Field(None, max_length=255)
    license_number: Optional[str] = Field(None, min_length=1, max_length=100)


class AgentResponse(AgentBase):
    """Схема ответа с агентом"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: datetime
    updated_at: datetime


class AgentListResponse(BaseModel):
    """Схема списка агентов с пагинацией"""
    items: List[AgentResponse]
    total: int
    page: int
    per_page: int
    pages: int
