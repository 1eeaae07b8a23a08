from app.routers.properties import router as properties_router
from app.routers.agents import router as agents_router
from app.routers.categories import router as categories_router

__all__ = ["properties_router", "agents_router", "categories_router"]
