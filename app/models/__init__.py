from app.models.property import Property
from app.models.agent import Agent
from app.models.category import Category

__all__ = ["Property", "Agent", "Category"]
