from __future__ import annotations
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.db import get_session
from app.deps import mailer
from app.schemas.moderation import DenialDispatchRequest, DenialDispatchSummary
from app.services.denial_notices import clean_photo_ids, send_denial_notices

router = APIRouter(prefix="/notifications", tags=["notifications"])
log = structlog.get_logger()


@router.post("/photo-denied", response_model=DenialDispatchSummary)
async def photo_denied(
    payload: DenialDispatchRequest,
    session: AsyncSession = Depends(get_session),
    sender=Depends(mailer),
):
    ids = clean_photo_ids(payload.photo_ids)
    if not ids:
        raise HTTPException(status_code=400, detail="photoIds array is required.")
    try:
        return await send_denial_notices(session, ids, sender)
    except SQLAlchemyError as e:
        log.error("photo_denied_load_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Could not load photos for email.")
