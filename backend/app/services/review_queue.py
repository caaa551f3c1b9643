from __future__ import annotations
from typing import Sequence, TypeVar
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.photo import Photo, PhotoStatus
from app.models.profile import Profile
from app.models.activity import Activity
from app.schemas.photo import PhotoListItem, ReviewQueue

T = TypeVar("T")

# where the dashboard goes when there is nothing left to review
EMPTY_QUEUE_REDIRECT = "/photos"


def reorder_with_photo_first(photos: Sequence[T], photo_id: int | None) -> list[T]:
    """Move the requested photo to the front; everything else keeps its order."""
    photos = list(photos)
    if photo_id is None:
        return photos
    idx = next((i for i, p in enumerate(photos) if p.photo_id == photo_id), -1)
    if idx <= 0:
        return photos
    picked = photos.pop(idx)
    return [picked, *photos]


async def list_photos_by_status(session: AsyncSession, status: PhotoStatus) -> list[PhotoListItem]:
    """Photos in one moderation state, oldest upload first."""
    q = (
        select(Photo, Activity.title, Profile.nickname)
        .outerjoin(Activity, Activity.id == Photo.activity_id)
        .outerjoin(Profile, Profile.id == Photo.profile_id)
        .where(Photo.status == status)
        .order_by(Photo.uploaded_at.asc(), Photo.photo_id.asc())
    )
    rows = (await session.execute(q)).all()
    return [
        PhotoListItem(
            photo_id=p.photo_id,
            photo_url=p.photo_url,
            uploaded_at=p.uploaded_at,
            status=p.status,
            reason=p.reason,
            activity_id=p.activity_id,
            profile_id=p.profile_id,
            activity_title=title,
            profile_nickname=nickname,
        )
        for (p, title, nickname) in rows
    ]


async def load_review_queue(session: AsyncSession, photo_id: int | None = None) -> ReviewQueue:
    photos = await list_photos_by_status(session, PhotoStatus.AWAITING_REVIEW)
    if not photos:
        return ReviewQueue(photos=[], empty=True, redirect=EMPTY_QUEUE_REDIRECT)
    return ReviewQueue(photos=reorder_with_photo_first(photos, photo_id), empty=False)
