from __future__ import annotations
from types import SimpleNamespace
import pytest

from app.models.photo import PhotoStatus
from app.services.review_queue import reorder_with_photo_first, load_review_queue, list_photos_by_status
from datetime import datetime, timedelta, timezone

T0 = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


def _queue():
    return [SimpleNamespace(photo_id=i) for i in (1, 2, 3)]


def _ids(photos):
    return [p.photo_id for p in photos]


def test_jump_to_moves_photo_to_front():
    assert _ids(reorder_with_photo_first(_queue(), 3)) == [3, 1, 2]


def test_jump_to_absent_photo_keeps_fifo():
    assert _ids(reorder_with_photo_first(_queue(), 9)) == [1, 2, 3]


def test_jump_to_first_photo_is_unchanged():
    assert _ids(reorder_with_photo_first(_queue(), 1)) == [1, 2, 3]


def test_no_jump_target():
    assert _ids(reorder_with_photo_first(_queue(), None)) == [1, 2, 3]


def test_reorder_does_not_mutate_input():
    q = _queue()
    reorder_with_photo_first(q, 2)
    assert _ids(q) == [1, 2, 3]


@pytest.mark.asyncio
async def test_queue_is_oldest_first_and_awaiting_only(session, add_photo):
    late = await add_photo(uploaded_at=T0 + timedelta(hours=3))
    early = await add_photo(uploaded_at=T0 + timedelta(hours=1))
    await add_photo(status=PhotoStatus.APPROVED, uploaded_at=T0)
    mid = await add_photo(uploaded_at=T0 + timedelta(hours=2))

    q = await load_review_queue(session)
    assert not q.empty
    assert _ids(q.photos) == [early, mid, late]
    assert q.photos[0].activity_title == "Spot a bird"
    assert q.photos[0].profile_nickname == "Robbie"

    q2 = await load_review_queue(session, late)
    assert _ids(q2.photos) == [late, early, mid]


@pytest.mark.asyncio
async def test_empty_queue_signals_redirect(session, add_photo):
    await add_photo(status=PhotoStatus.DENIED, reason="blurry")
    q = await load_review_queue(session, 1)
    assert q.empty is True
    assert q.photos == []
    assert q.redirect == "/photos"


@pytest.mark.asyncio
async def test_gallery_hides_reason_unless_denied(session, add_photo):
    # a photo denied earlier and then approved keeps its old reason in the row
    await add_photo(status=PhotoStatus.APPROVED, reason="old reason")
    await add_photo(status=PhotoStatus.DENIED, reason="not a bird")

    approved = await list_photos_by_status(session, PhotoStatus.APPROVED)
    denied = await list_photos_by_status(session, PhotoStatus.DENIED)
    assert [p.reason for p in approved] == [None]
    assert [p.reason for p in denied] == ["not a bird"]
