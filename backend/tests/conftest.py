from __future__ import annotations
import os

# must be set before app.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("PHOTO_BUCKET", "user-activity-photos")

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import httpx
import pytest
import pytest_asyncio
from sqlalchemy import select
from sqlalchemy.pool import StaticPool
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from app.db import Base, get_session
from app.deps import object_store, denial_dispatcher, mailer
from app.main import app
from app.models.account import Account
from app.models.activity import Activity
from app.models.photo import Photo, PhotoStatus
from app.models.profile import Profile

BUCKET = "user-activity-photos"
T0 = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


def public_url(key: str, bucket: str = BUCKET) -> str:
    return f"https://proj.supabase.co/storage/v1/object/public/{bucket}/{key}"


class FakeStore:
    def __init__(self, bucket: str = BUCKET, fail_keys: set[str] | None = None, explode: bool = False):
        self.bucket = bucket
        self.fail_keys = fail_keys or set()
        self.explode = explode
        self.removed: list[str] = []
        self.calls: list[list[str]] = []

    def remove(self, key: str) -> None:
        self.calls.append([key])
        if self.explode or key in self.fail_keys:
            raise RuntimeError(f"storage unavailable for {key}")
        self.removed.append(key)

    def remove_many(self, keys: list[str]) -> list[str]:
        self.calls.append(list(keys))
        if self.explode:
            raise RuntimeError("storage unavailable")
        failed = [k for k in keys if k in self.fail_keys]
        self.removed.extend(k for k in keys if k not in self.fail_keys)
        return failed


class FakeDispatcher:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls: list[list[int]] = []

    async def dispatch(self, photo_ids: list[int]) -> None:
        self.calls.append(list(photo_ids))
        if self.fail:
            raise httpx.ConnectError("notification endpoint unreachable")


class FakeMailer:
    def __init__(self, fail_for: set[str] | None = None):
        self.fail_for = fail_for or set()
        self.sent: list[dict] = []

    async def send(self, to, subject, html_part=None, text_part=None):
        if to in self.fail_for:
            from app.services.mailer import EmailSendError
            raise EmailSendError("Email could not be sent: 500")
        self.sent.append({"to": to, "subject": subject, "html": html_part, "text": text_part})


@pytest_asyncio.fixture
async def engine():
    eng = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as s:
        yield s


@pytest_asyncio.fixture
async def family(session_factory):
    """One parent account, one child profile, one activity."""
    async with session_factory() as s:
        s.add(Account(id="acc-1", email="parent@example.com"))
        profile = Profile(name="Robin", nickname="Robbie", colour="#2D5A27", xp=40, team=1, user_id="acc-1")
        activity = Activity(name="bird-hunt", title="Spot a bird", description="Find any bird outside", xp=10)
        s.add_all([profile, activity])
        await s.commit()
        return SimpleNamespace(account_id="acc-1", profile_id=profile.id, activity_id=activity.id)


@pytest_asyncio.fixture
async def add_photo(session_factory, family):
    counter = {"n": 0}

    async def _add(
        status: PhotoStatus = PhotoStatus.AWAITING_REVIEW,
        reason: str | None = None,
        uploaded_at: datetime | None = None,
        url: str | None = None,
        profile_id: int | None = None,
        activity_id: int | None = -1,
    ) -> int:
        counter["n"] += 1
        n = counter["n"]
        async with session_factory() as s:
            p = Photo(
                photo_url=url if url is not None else public_url(f"acc-1/{n}.jpg"),
                uploaded_at=uploaded_at or T0 + timedelta(minutes=n),
                status=status,
                reason=reason,
                profile_id=profile_id or family.profile_id,
                activity_id=family.activity_id if activity_id == -1 else activity_id,
                user_activity_id=100 + n,
            )
            s.add(p)
            await s.commit()
            return p.photo_id

    return _add


@pytest_asyncio.fixture
async def read_photo(session_factory):
    async def _read(photo_id: int) -> Photo | None:
        async with session_factory() as s:
            return await s.scalar(select(Photo).where(Photo.photo_id == photo_id))
    return _read


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def dispatcher():
    return FakeDispatcher()


@pytest.fixture
def fake_mailer():
    return FakeMailer()


@pytest_asyncio.fixture
async def client(session_factory, store, dispatcher, fake_mailer):
    async def _session():
        async with session_factory() as s:
            yield s

    app.dependency_overrides[get_session] = _session
    app.dependency_overrides[object_store] = lambda: store
    app.dependency_overrides[denial_dispatcher] = lambda: dispatcher
    app.dependency_overrides[mailer] = lambda: fake_mailer
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def failing_dispatcher():
    return FakeDispatcher(fail=True)


@pytest.fixture
def broken_store():
    return FakeStore(explode=True)
