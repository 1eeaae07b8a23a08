from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    app_name: str = "Realtor Listings"
    debug: bool = True

    # Полная строка подключения имеет приоритет над отдельными параметрами
    database_url: Optional[str] = None
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = "password"
    db_name: str = "realtor_db"
    db_ssl: bool = False  # Включить TLS для продакшена
    db_pool_size: int = 2
    db_max_overflow: int = 8

    # Хранилище изображений объектов
    upload_dir: str = "public/uploads/properties"
    placeholder_image: str = "public/placeholder-property.jpg"

    # Пагинация
    default_page_size: int = 10
    max_page_size: int = 100

    @property
    def sqlalchemy_database_url(self) -> str:
        if self.database_url:
            return self.database_url
        return (
            f"postgresql://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    class Config:
        env_file = ".env"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
