import uuid
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from sqlalchemy import or_

from app.database import get_db
from app.exceptions import NotFound
from app.models import Agent
from app.schemas.agent import AgentCreate, AgentUpdate, AgentResponse, AgentListResponse

router = APIRouter(prefix="/api/agents", tags=["agents"])
logger = logging.getLogger(__name__)


def _get_agent_or_404(db: Session, agent_id: str) -> Agent:
    agent = db.query(Agent).filter(Agent.id == agent_id).first()
    if not agent:
        raise NotFound("Agent not found")
    return agent


@router.get("", response_model=AgentListResponse)
def get_agents(
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    search: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """Получить список агентов с поиском и пагинацией"""
    query = db.query(Agent)

    if search:
        query = query.filter(
            or_(
                Agent.name.ilike(f"%{search}%"),
                Agent.agency.ilike(f"%{search}%"),
                Agent.email.ilike(f"%{search}%")
            )
        )

    total = query.count()
    pages = (total + per_page - 1) // per_page

    items = query.order_by(Agent.name.asc())\
        .offset((page - 1) * per_page)\
        .limit(per_page)\
        .all()

    return AgentListResponse(
        items=items,
        total=total,
        page=page,
        per_page=per_page,
        pages=pages
    )


@router.post("", response_model=AgentResponse, status_code=201)
def create_agent(agent_in: AgentCreate, db: Session = Depends(get_db)):
    """Создать агента"""
    agent = Agent(id=str(uuid.uuid4()), **agent_in.model_dump())
    db.add(agent)
    db.commit()
    db.refresh(agent)
    logger.info(f"Created agent {agent.id} ({agent.name})")
    return agent


@router.get("/{agent_id}", response_model=AgentResponse)
def get_agent(agent_id: str, db: Session = Depends(get_db)):
    """Получить агента по ID"""
    return _get_agent_or_404(db, agent_id)


@router.put("/{agent_id}", response_model=AgentResponse)
def update_agent(agent_id: str, agent_update: AgentUpdate, db: Session = Depends(get_db)):
    """Обновить агента"""
    agent = _get_agent_or_404(db, agent_id)

    update_data = agent_update.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        setattr(agent, key, value)

    db.commit()
    db.refresh(agent)
    return agent


@router.delete("/{agent_id}")
def delete_agent(agent_id: str, db: Session = Depends(get_db)):
    """Удалить агента. Объекты недвижимости агента не затрагиваются"""
    agent = _get_agent_or_404(db, agent_id)
    db.delete(agent)
    db.commit()
    logger.info(f"Deleted agent {agent_id}")
    return {"success": True, "message": "Agent deleted successfully", "id": agent_id}
