from __future__ import annotations
import asyncio
import functools
from sqlalchemy import select, update, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.models.photo import Photo, PhotoStatus
from app.schemas.moderation import ActionResult, FailureKind
from app.services.best_effort import best_effort
from app.services.storage_paths import storage_path_from_public_url

log = structlog.get_logger()

REASON_REQUIRED = "A reason for denial is required."


class ModerationError(Exception):
    kind: FailureKind = "store"


class ValidationFailed(ModerationError):
    kind: FailureKind = "validation"


class PhotoNotFound(ModerationError):
    kind: FailureKind = "not_found"

    def __init__(self, photo_id: int):
        super().__init__("Photo not found")
        self.photo_id = photo_id


def validate_reason(reason: str | None) -> str:
    trimmed = (reason or "").strip()
    if not trimmed:
        raise ValidationFailed(REASON_REQUIRED)
    return trimmed


def _store_message(e: SQLAlchemyError, fallback: str) -> str:
    orig = getattr(e, "orig", None)
    return str(orig or e) or fallback


def reported(fallback: str):
    """
    Turn a transition into an ActionResult: moderation errors and store
    failures roll the session back and come back as `error`; anything
    else propagates.
    """
    def deco(fn):
        @functools.wraps(fn)
        async def wrapper(session: AsyncSession, *args, **kwargs) -> ActionResult:
            try:
                return await fn(session, *args, **kwargs)
            except ModerationError as e:
                await session.rollback()
                log.info("moderation_rejected", op=fn.__name__, kind=e.kind, error=str(e))
                return ActionResult.failure(e.kind, str(e))
            except SQLAlchemyError as e:
                await session.rollback()
                log.error("moderation_store_failed", op=fn.__name__, error=str(e))
                return ActionResult.failure("store", _store_message(e, fallback))
        return wrapper
    return deco


async def _update_one(session: AsyncSession, photo_id: int, **values) -> None:
    res = await session.execute(update(Photo).where(Photo.photo_id == photo_id).values(**values))
    if res.rowcount == 0:
        raise PhotoNotFound(photo_id)
    await session.commit()


async def remove_stored_objects(store, keys: list[str]) -> None:
    failed = await asyncio.to_thread(store.remove_many, keys)
    if failed:
        log.warning("storage_cleanup_incomplete", bucket=store.bucket, failed=failed, attempted=len(keys))


@reported("Failed to approve photo")
async def approve_photo(session: AsyncSession, photo_id: int) -> ActionResult:
    await _update_one(session, photo_id, status=PhotoStatus.APPROVED)
    log.info("photo_approved", photo_id=photo_id)
    return ActionResult.success()


@reported("Failed to deny photo")
async def deny_photo(session: AsyncSession, dispatcher, photo_id: int, reason: str | None) -> ActionResult:
    reason = validate_reason(reason)
    await _update_one(session, photo_id, status=PhotoStatus.DENIED, reason=reason)
    log.info("photo_denied", photo_id=photo_id)
    # the status change is already committed; the email never undoes it
    await best_effort("denial_dispatch", dispatcher.dispatch, [photo_id], photo_ids=[photo_id])
    return ActionResult.success()


@reported("Failed to move to for review")
async def return_to_review(session: AsyncSession, photo_id: int) -> ActionResult:
    # reason stays in the row; read schemas hide it for non-denied photos
    await _update_one(session, photo_id, status=PhotoStatus.AWAITING_REVIEW)
    log.info("photo_returned_to_review", photo_id=photo_id)
    return ActionResult.success()


@reported("Failed to delete photo")
async def delete_photo(session: AsyncSession, store, photo_id: int) -> ActionResult:
    url = await session.scalar(select(Photo.photo_url).where(Photo.photo_id == photo_id))
    if url is None:
        raise PhotoNotFound(photo_id)

    # storage first, record second; the record goes even if the object can't be removed
    key = storage_path_from_public_url(url, store.bucket)
    if key:
        await best_effort("storage_remove", asyncio.to_thread, store.remove, key, photo_id=photo_id, key=key)
    else:
        log.warning("storage_path_unresolved", photo_id=photo_id, bucket=store.bucket)

    await session.execute(delete(Photo).where(Photo.photo_id == photo_id))
    await session.commit()
    log.info("photo_deleted", photo_id=photo_id)
    return ActionResult.success()
