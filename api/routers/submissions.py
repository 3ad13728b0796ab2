# api/routers/submissions.py
import logging
from datetime import datetime, timezone
from typing import Any, Optional
from fastapi import APIRouter, HTTPException, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db.database import get_db
from db.models import ContactMessage, ValuationRequest
from api.schemas.cars import OkResponse
from api.schemas.submissions import ContactMessageRequest, ValuationRequestPayload

logger = logging.getLogger(__name__)
router = APIRouter()


def parse_client_timestamp(value: Any) -> Optional[datetime]:
    """ISO-8601 strings and epoch milliseconds; anything else is None"""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)
    return None


def resolve_submitted_at(value: Any) -> datetime:
    """Use the client's timestamp when it parses, else now (UTC)"""
    parsed = parse_client_timestamp(value)
    if parsed is None:
        if value not in (None, ""):
            logger.debug(f"Ignoring unparseable submitted_at: {value!r}")
        return datetime.now(timezone.utc)
    return parsed


def append_row(db: Session, row, label: str) -> OkResponse:
    try:
        db.add(row)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error storing {label}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="DB error")

    logger.info(f"Stored {label} {row.id}")
    return OkResponse(ok=True)


@router.post("/messages", response_model=OkResponse)
async def submit_message(payload: Optional[ContactMessageRequest] = None, db: Session = Depends(get_db)):
    """Store a contact form submission"""
    payload = payload or ContactMessageRequest()
    row = ContactMessage(
        vorname=payload.vorname,
        nachname=payload.nachname,
        email=payload.email,
        telefon=payload.telefon,
        nachricht=payload.nachricht,
        submitted_at=resolve_submitted_at(payload.submitted_at),
    )
    return append_row(db, row, "contact message")


@router.post("/valuations", response_model=OkResponse)
async def submit_valuation(payload: Optional[ValuationRequestPayload] = None, db: Session = Depends(get_db)):
    """Store a vehicle valuation request"""
    payload = payload or ValuationRequestPayload()
    row = ValuationRequest(
        marke=payload.marke,
        modell=payload.modell,
        jahr=payload.jahr,
        km=payload.km,
        kraftstoff=payload.kraftstoff,
        zustand=payload.zustand,
        kontakt=payload.kontakt,
        anmerkung=payload.anmerkung,
        submitted_at=resolve_submitted_at(payload.submitted_at),
    )
    return append_row(db, row, "valuation request")
