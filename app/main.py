import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.config import get_settings
from app.database import engine, Base
from app.exceptions import ListingError, ValidationFailure
from app.routers import properties_router, agents_router, categories_router

settings = get_settings()

log_level = logging.DEBUG if settings.debug else logging.INFO
logging.basicConfig(
    level=log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logging.getLogger("multipart").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)

Base.metadata.create_all(bind=engine)

app = FastAPI(
    title=settings.app_name,
    description="Объявления о недвижимости: объекты, агенты, категории и изображения",
    version="1.0.0"
)

app.include_router(properties_router)
app.include_router(agents_router)
app.include_router(categories_router)


def _error_response(status_code: int, message: str, errors=None) -> JSONResponse:
    content = {"success": False, "error": message}
    if errors is not None:
        content["errors"] = errors
    return JSONResponse(status_code=status_code, content=content)


@app.exception_handler(ListingError)
async def listing_error_handler(request: Request, exc: ListingError):
    if exc.status_code >= 500:
        # Детали ошибки хранилища остаются в логах
        logger.error(f"{request.method} {request.url.path} failed: {exc}", exc_info=exc)
        return _error_response(exc.status_code, "Internal server error")

    errors = None
    if isinstance(exc, ValidationFailure):
        errors = [error.to_dict() for error in exc.errors]
    return _error_response(exc.status_code, exc.message, errors)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": str(err["loc"][-1]) if err["loc"] else "__all__", "message": err["msg"]}
        for err in exc.errors()
    ]
    return _error_response(422, "Validation failed", errors)


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"{request.method} {request.url.path} database error: {exc}", exc_info=exc)
    return _error_response(500, "Internal server error")


@app.get("/health")
async def health_check():
    return {"status": "ok"}
