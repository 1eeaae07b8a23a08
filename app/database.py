from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from app.config import get_settings

settings = get_settings()


def build_engine(url: str):
    """Создает engine с учетом диалекта и настроек TLS"""
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})

    connect_args = {}
    if settings.db_ssl:
        connect_args["sslmode"] = "require"

    return create_engine(
        url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


engine = build_engine(settings.sqlalchemy_database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
