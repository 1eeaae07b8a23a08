from sqlalchemy import Column, Integer, String, Float, DateTime, Text, Boolean, Numeric
from sqlalchemy.sql import func
from app.database import Base


class Property(Base):
    """
    Объект недвижимости, выставленный на продажу или в аренду.
    Списки изображений и планировок хранятся как JSON-массивы в текстовых колонках.
    """
    __tablename__ = "properties"

    id = Column(String(36), primary_key=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(12, 2, asdecimal=False), nullable=False)

    property_type = Column(String(50), nullable=False, index=True)
    bedrooms = Column(Integer, nullable=False)
    bathrooms = Column(Integer, nullable=False)
    square_feet = Column(Integer, nullable=True)
    lot_size = Column(Integer, nullable=True)
    year_built = Column(Integer, nullable=True)
    status = Column(String(50), nullable=False, default="PENDING", index=True)

    address = Column(String(255), nullable=False)
    city = Column(String(255), nullable=False, index=True)
    state = Column(String(255), nullable=False)
    postal_code = Column(String(50), nullable=False)
    country = Column(String(255), nullable=False)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    has_garage = Column(Boolean, nullable=False, default=False)
    has_pool = Column(Boolean, nullable=False, default=False)
    has_basement = Column(Boolean, nullable=False, default=False)
    has_fireplace = Column(Boolean, nullable=False, default=False)
    parking_spaces = Column(Integer, nullable=True)
    heating_type = Column(String(50), nullable=False, default="NONE")
    cooling_type = Column(String(50), nullable=False, default="NONE")

    image_urls = Column(Text, nullable=False, default="[]")
    video_url = Column(String(1000), nullable=True)
    floor_plans = Column(Text, nullable=False, default="[]")

    # Ссылка на агента без внешнего ключа: удаление агента не затрагивает объекты
    agent_id = Column(String(36), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    def __repr__(self):
        return f"<Property(id={self.id}, city={self.city}, title={self.title[:50] if self.title else None})>"
