from __future__ import annotations
from typing import Iterable
from sqlalchemy import select, update, delete
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.models.photo import Photo, PhotoStatus
from app.schemas.moderation import ActionResult
from app.services.best_effort import best_effort
from app.services.moderation import reported, validate_reason, remove_stored_objects
from app.services.storage_paths import storage_path_from_public_url

log = structlog.get_logger()

# Set-oriented variants of the single-photo transitions. Each store mutation is
# one UPDATE/DELETE ... WHERE photo_id IN (...) committed together; ids that
# match nothing are ignored and results are reported per batch.


def _unique(photo_ids: Iterable[int]) -> list[int]:
    return list(dict.fromkeys(photo_ids or []))


async def _set_status(session: AsyncSession, ids: list[int], **values) -> int:
    res = await session.execute(update(Photo).where(Photo.photo_id.in_(ids)).values(**values))
    await session.commit()
    return res.rowcount


@reported("Failed to approve photos")
async def bulk_approve(session: AsyncSession, photo_ids: list[int]) -> ActionResult:
    ids = _unique(photo_ids)
    if not ids:
        return ActionResult.noop()
    n = await _set_status(session, ids, status=PhotoStatus.APPROVED)
    log.info("photos_approved", requested=len(ids), matched=n)
    return ActionResult.success()


@reported("Failed to deny photos")
async def bulk_deny(session: AsyncSession, dispatcher, photo_ids: list[int], reason: str | None) -> ActionResult:
    ids = _unique(photo_ids)
    if not ids:
        return ActionResult.noop()
    reason = validate_reason(reason)
    n = await _set_status(session, ids, status=PhotoStatus.DENIED, reason=reason)
    log.info("photos_denied", requested=len(ids), matched=n)
    # one dispatch for the whole batch
    await best_effort("denial_dispatch", dispatcher.dispatch, ids, photo_ids=ids)
    return ActionResult.success()


@reported("Failed to move to for review")
async def bulk_return_to_review(session: AsyncSession, photo_ids: list[int]) -> ActionResult:
    ids = _unique(photo_ids)
    if not ids:
        return ActionResult.noop()
    n = await _set_status(session, ids, status=PhotoStatus.AWAITING_REVIEW)
    log.info("photos_returned_to_review", requested=len(ids), matched=n)
    return ActionResult.success()


@reported("Failed to delete photos")
async def bulk_delete(session: AsyncSession, store, photo_ids: list[int]) -> ActionResult:
    """
    Removes every resolvable backing object (best-effort, per-object failures
    logged) and then all matching records in one DELETE. A crash between the
    two steps leaves records whose objects are gone; re-running is safe since
    removing a missing object is not an error.
    """
    ids = _unique(photo_ids)
    if not ids:
        return ActionResult.noop()

    urls = (await session.execute(select(Photo.photo_url).where(Photo.photo_id.in_(ids)))).scalars().all()
    keys = [k for k in (storage_path_from_public_url(u, store.bucket) for u in urls) if k]
    if keys:
        await best_effort("storage_remove", remove_stored_objects, store, keys, photo_ids=ids, keys=len(keys))

    res = await session.execute(delete(Photo).where(Photo.photo_id.in_(ids)))
    await session.commit()
    log.info("photos_deleted", requested=len(ids), matched=res.rowcount, objects=len(keys))
    return ActionResult.success()
