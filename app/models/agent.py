from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from app.database import Base


class Agent(Base):
    """
    Агент по недвижимости: контакты и лицензия
    """
    __tablename__ = "agents"

    id = Column(String(36), primary_key=True)
    name = Column(String(255), nullable=False)
    contact_number = Column(String(50), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    agency = Column(String(255), nullable=True)
    license_number = Column(String(100), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Agent(id={self.id}, name={self.name}, agency={self.agency})>"
