"""
Router para o domínio do dia (CRUD autenticado por JWT do Supabase)
"""
import logging
from datetime import date
from typing import Any, Dict, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from mainalysis.database import get_db
from mainalysis.dependencies.auth import get_current_user
from mainalysis.models.domain_of_the_day import DomainOfTheDay
from mainalysis.schemas.domain_of_the_day import (
    DomainOfTheDayCreate,
    DomainOfTheDayUpdate,
    DomainOfTheDayResponse,
)
from mainalysis.utils.responses import error_response

logger = logging.getLogger(__name__)
router = APIRouter()


def _serialize(entry: Optional[DomainOfTheDay]) -> Optional[Dict[str, Any]]:
    if entry is None:
        return None
    return DomainOfTheDayResponse.model_validate(entry).model_dump(mode="json")


def _owned_entry(db: Session, entry_id: UUID, user_id: str) -> Optional[DomainOfTheDay]:
    return db.query(DomainOfTheDay).filter(
        DomainOfTheDay.id == entry_id,
        DomainOfTheDay.created_by == user_id,
    ).first()


@router.get("/domain-of-the-day")
async def get_domain_of_the_day(
    date_filter: Optional[date] = Query(None, alias="date"),
    db: Session = Depends(get_db),
    user: Dict[str, Any] = Depends(get_current_user),
):
    """Domínio de uma data específica ou o destaque mais recente."""
    query = db.query(DomainOfTheDay)
    if date_filter:
        query = query.filter(DomainOfTheDay.featured_date == date_filter)

    entry = query.order_by(DomainOfTheDay.featured_date.desc()).first()
    return {"data": _serialize(entry)}


@router.post("/domain-of-the-day", status_code=status.HTTP_201_CREATED)
async def create_domain_of_the_day(
    payload: DomainOfTheDayCreate,
    db: Session = Depends(get_db),
    user: Dict[str, Any] = Depends(get_current_user),
):
    if not payload.domain_name or not payload.featured_date:
        return error_response(
            status.HTTP_400_BAD_REQUEST, "domain_name and featured_date are required"
        )

    entry = DomainOfTheDay(
        domain_name=payload.domain_name,
        description=payload.description,
        valuation=payload.valuation,
        market_score=payload.market_score,
        seo_value=payload.seo_value,
        growth_potential=payload.growth_potential,
        tags=payload.tags,
        featured_date=payload.featured_date,
        created_by=user["sub"],
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)

    logger.info(f"Domain of the day created: {entry.domain_name} ({entry.featured_date})")
    return {"data": _serialize(entry)}


@router.put("/domain-of-the-day")
async def update_domain_of_the_day(
    payload: DomainOfTheDayUpdate,
    entry_id: Optional[UUID] = Query(None, alias="id"),
    db: Session = Depends(get_db),
    user: Dict[str, Any] = Depends(get_current_user),
):
    """Atualiza apenas os campos enviados. Só o criador pode alterar."""
    if entry_id is None:
        return error_response(status.HTTP_400_BAD_REQUEST, "ID parameter required for updates")

    entry = _owned_entry(db, entry_id, user["sub"])
    if not entry:
        return error_response(status.HTTP_404_NOT_FOUND, "Domain of the day not found")

    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(entry, field, value)
    db.commit()
    db.refresh(entry)

    return {"data": _serialize(entry)}


@router.delete("/domain-of-the-day")
async def delete_domain_of_the_day(
    entry_id: Optional[UUID] = Query(None, alias="id"),
    db: Session = Depends(get_db),
    user: Dict[str, Any] = Depends(get_current_user),
):
    if entry_id is None:
        return error_response(status.HTTP_400_BAD_REQUEST, "ID parameter required for deletion")

    entry = _owned_entry(db, entry_id, user["sub"])
    if not entry:
        return error_response(status.HTTP_404_NOT_FOUND, "Domain of the day not found")

    db.delete(entry)
    db.commit()

    return {"message": "Domain of the day deleted successfully"}
