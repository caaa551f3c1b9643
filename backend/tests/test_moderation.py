from __future__ import annotations
import pytest
from sqlalchemy.exc import OperationalError

from app.models.photo import PhotoStatus
from app.services import moderation


@pytest.mark.asyncio
@pytest.mark.parametrize("reason", ["", "   ", None])
async def test_deny_requires_reason(session, add_photo, read_photo, dispatcher, reason):
    pid = await add_photo()
    res = await moderation.deny_photo(session, dispatcher, pid, reason)
    assert res.error == "A reason for denial is required."
    assert res.kind == "validation"
    assert (await read_photo(pid)).status == PhotoStatus.AWAITING_REVIEW
    assert dispatcher.calls == []


@pytest.mark.asyncio
async def test_deny_persists_trimmed_reason_and_notifies(session, add_photo, read_photo, dispatcher):
    pid = await add_photo()
    res = await moderation.deny_photo(session, dispatcher, pid, "  reason  ")
    assert res.ok
    assert res.invalidate == ["/photos", "/photos/review"]
    photo = await read_photo(pid)
    assert photo.status == PhotoStatus.DENIED
    assert photo.reason == "reason"
    assert dispatcher.calls == [[pid]]


@pytest.mark.asyncio
async def test_deny_succeeds_when_dispatch_fails(session, add_photo, read_photo, failing_dispatcher):
    pid = await add_photo()
    d = failing_dispatcher
    res = await moderation.deny_photo(session, d, pid, "not a bird")
    assert res.ok
    assert (await read_photo(pid)).status == PhotoStatus.DENIED
    assert d.calls == [[pid]]


@pytest.mark.asyncio
@pytest.mark.parametrize("start", list(PhotoStatus))
async def test_approve_from_any_status_is_idempotent(session, add_photo, read_photo, start):
    pid = await add_photo(status=start, reason="x" if start == PhotoStatus.DENIED else None)
    assert (await moderation.approve_photo(session, pid)).ok
    assert (await moderation.approve_photo(session, pid)).ok
    assert (await read_photo(pid)).status == PhotoStatus.APPROVED


@pytest.mark.asyncio
async def test_return_deny_return_ends_awaiting_review(session, add_photo, read_photo, dispatcher):
    pid = await add_photo(status=PhotoStatus.APPROVED)
    assert (await moderation.return_to_review(session, pid)).ok
    assert (await moderation.deny_photo(session, dispatcher, pid, "too dark")).ok
    assert (await moderation.return_to_review(session, pid)).ok
    assert (await read_photo(pid)).status == PhotoStatus.AWAITING_REVIEW


@pytest.mark.asyncio
async def test_single_transitions_report_missing_photo(session, dispatcher, store):
    for res in (
        await moderation.approve_photo(session, 404),
        await moderation.deny_photo(session, dispatcher, 404, "nope"),
        await moderation.return_to_review(session, 404),
        await moderation.delete_photo(session, store, 404),
    ):
        assert res.kind == "not_found"
        assert res.error == "Photo not found"
    assert dispatcher.calls == []
    assert store.calls == []


@pytest.mark.asyncio
async def test_delete_removes_object_then_record(session, add_photo, read_photo, store):
    pid = await add_photo(url="https://x/storage/v1/object/public/user-activity-photos/acc-1/kite.jpg")
    res = await moderation.delete_photo(session, store, pid)
    assert res.ok
    assert store.removed == ["acc-1/kite.jpg"]
    assert await read_photo(pid) is None
    # a second delete is a not-found, not a crash
    assert (await moderation.delete_photo(session, store, pid)).kind == "not_found"


@pytest.mark.asyncio
async def test_delete_survives_storage_failure(session, add_photo, read_photo, broken_store):
    pid = await add_photo()
    s = broken_store
    res = await moderation.delete_photo(session, s, pid)
    assert res.ok
    assert len(s.calls) == 1
    assert await read_photo(pid) is None


@pytest.mark.asyncio
async def test_delete_with_foreign_url_skips_storage(session, add_photo, read_photo, store):
    pid = await add_photo(url="https://elsewhere.example.com/pic.jpg")
    assert (await moderation.delete_photo(session, store, pid)).ok
    assert store.calls == []
    assert await read_photo(pid) is None


class _BrokenSession:
    def __init__(self):
        self.rolled_back = False

    async def execute(self, *a, **kw):
        raise OperationalError("UPDATE user_activity_photos", {}, Exception("connection refused"))

    async def scalar(self, *a, **kw):
        raise OperationalError("SELECT photo_url", {}, Exception("connection refused"))

    async def commit(self):
        pass

    async def rollback(self):
        self.rolled_back = True


@pytest.mark.asyncio
async def test_store_failure_is_reported_verbatim(dispatcher, store):
    s = _BrokenSession()
    res = await moderation.approve_photo(s, 1)
    assert res.kind == "store"
    assert res.error == "connection refused"
    assert s.rolled_back

    res = await moderation.delete_photo(_BrokenSession(), store, 1)
    assert res.kind == "store"
    assert store.calls == []
