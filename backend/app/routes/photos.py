from __future__ import annotations
from fastapi import APIRouter, Depends, Query, Path
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import get_session
from app.deps import object_store, denial_dispatcher
from app.schemas.moderation import ActionResult, DenyRequest, BulkRequest, BulkDenyRequest
from app.schemas.photo import PhotoListItem, PhotoDetailsResult, ReviewQueue, TAB_STATUS
from app.services import moderation, bulk_moderation
from app.services.photo_details import get_photo_details
from app.services.review_queue import list_photos_by_status, load_review_queue

router = APIRouter(prefix="/photos", tags=["photos"])

_STATUS_FOR_KIND = {"validation": 422, "not_found": 404, "store": 503}


def _respond(result: ActionResult) -> JSONResponse:
    code = 200 if result.ok else _STATUS_FOR_KIND.get(result.kind, 500)
    return JSONResponse(status_code=code, content=result.model_dump())


@router.get("", response_model=list[PhotoListItem])
async def list_photos(
    tab: str = Query(default="for-review"),
    session: AsyncSession = Depends(get_session),
):
    # unknown tabs fall back to the review tab
    status = TAB_STATUS.get(tab, TAB_STATUS["for-review"])
    return await list_photos_by_status(session, status)


@router.get("/review", response_model=ReviewQueue)
async def review_queue(
    photo: str | None = Query(default=None, description="photo to show first"),
    session: AsyncSession = Depends(get_session),
):
    try:
        photo_id = int(photo) if photo is not None else None
    except ValueError:
        photo_id = None
    return await load_review_queue(session, photo_id)


@router.post("/bulk/approve", response_model=ActionResult)
async def bulk_approve(payload: BulkRequest, session: AsyncSession = Depends(get_session)):
    return _respond(await bulk_moderation.bulk_approve(session, payload.photo_ids))


@router.post("/bulk/deny", response_model=ActionResult)
async def bulk_deny(
    payload: BulkDenyRequest,
    session: AsyncSession = Depends(get_session),
    dispatcher=Depends(denial_dispatcher),
):
    return _respond(await bulk_moderation.bulk_deny(session, dispatcher, payload.photo_ids, payload.reason))


@router.post("/bulk/return-to-review", response_model=ActionResult)
async def bulk_return_to_review(payload: BulkRequest, session: AsyncSession = Depends(get_session)):
    return _respond(await bulk_moderation.bulk_return_to_review(session, payload.photo_ids))


@router.post("/bulk/delete", response_model=ActionResult)
async def bulk_delete(
    payload: BulkRequest,
    session: AsyncSession = Depends(get_session),
    store=Depends(object_store),
):
    return _respond(await bulk_moderation.bulk_delete(session, store, payload.photo_ids))


@router.get("/{photo_id}", response_model=PhotoDetailsResult)
async def photo_details(photo_id: int = Path(...), session: AsyncSession = Depends(get_session)):
    result = await get_photo_details(session, photo_id)
    if result.error:
        code = 404 if result.error == "Photo not found" else 503
        return JSONResponse(status_code=code, content=result.model_dump(mode="json"))
    return result


@router.post("/{photo_id}/approve", response_model=ActionResult)
async def approve(photo_id: int = Path(...), session: AsyncSession = Depends(get_session)):
    return _respond(await moderation.approve_photo(session, photo_id))


@router.post("/{photo_id}/deny", response_model=ActionResult)
async def deny(
    payload: DenyRequest,
    photo_id: int = Path(...),
    session: AsyncSession = Depends(get_session),
    dispatcher=Depends(denial_dispatcher),
):
    return _respond(await moderation.deny_photo(session, dispatcher, photo_id, payload.reason))


@router.post("/{photo_id}/return-to-review", response_model=ActionResult)
async def return_to_review(photo_id: int = Path(...), session: AsyncSession = Depends(get_session)):
    return _respond(await moderation.return_to_review(session, photo_id))


@router.delete("/{photo_id}", response_model=ActionResult)
async def delete(
    photo_id: int = Path(...),
    session: AsyncSession = Depends(get_session),
    store=Depends(object_store),
):
    return _respond(await moderation.delete_photo(session, store, photo_id))
