from __future__ import annotations
from typing import Awaitable, Callable
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
import structlog

from app.models.photo import Photo
from app.schemas.photo import PhotoDetailsResult, PhotoOut, ProfileOut, ActivityOut, UserOut
from app.services.identity import lookup_account_email

log = structlog.get_logger()

EmailLookup = Callable[[AsyncSession, str], Awaitable[str | None]]


async def get_photo_details(
    session: AsyncSession,
    photo_id: int,
    email_lookup: EmailLookup = lookup_account_email,
) -> PhotoDetailsResult:
    """
    Photo + submitting profile + activity, and the owning account's email
    when it resolves. Only a missing photo (or a failed photo read) is an error;
    a failed identity lookup just leaves `user` out.
    """
    try:
        photo = await session.scalar(
            select(Photo)
            .where(Photo.photo_id == photo_id)
            .options(selectinload(Photo.profile), selectinload(Photo.activity))
        )
    except SQLAlchemyError as e:
        log.error("photo_details_failed", photo_id=photo_id, error=str(e))
        return PhotoDetailsResult(error=str(getattr(e, "orig", None) or e) or "Failed to load photo details")
    if photo is None:
        return PhotoDetailsResult(error="Photo not found")

    profile, activity = photo.profile, photo.activity

    user = None
    if profile is not None and profile.user_id:
        try:
            email = await email_lookup(session, profile.user_id)
        except Exception:
            log.warning("photo_details_identity_lookup_failed", photo_id=photo_id, account_id=profile.user_id, exc_info=True)
            email = None
        if email:
            user = UserOut(email=email)

    return PhotoDetailsResult(
        photo=PhotoOut.model_validate(photo),
        profile=ProfileOut.model_validate(profile) if profile is not None else None,
        activity=ActivityOut.model_validate(activity) if activity is not None else None,
        user=user,
    )
