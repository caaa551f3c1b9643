from __future__ import annotations
import httpx
import structlog
from app.config import settings

log = structlog.get_logger()


class DenialDispatcher:
    """Fire-and-forget hand-off of freshly denied photo ids; fan-out happens at the target."""

    async def dispatch(self, photo_ids: list[int]) -> None:
        raise NotImplementedError


class HttpDenialDispatcher(DenialDispatcher):
    def __init__(self, url: str, token: str = "", timeout: float = 10.0, transport: httpx.AsyncBaseTransport | None = None):
        self.url = url
        self.token = token
        self.timeout = timeout
        self._transport = transport

    async def dispatch(self, photo_ids: list[int]) -> None:
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
            r = await client.post(self.url, json={"photoIds": list(photo_ids)}, headers=headers)
        r.raise_for_status()


class LocalDenialDispatcher(DenialDispatcher):
    """Runs the denial notice sender in this process, on its own session."""

    def __init__(self, session_factory=None, mailer_factory=None):
        self._session_factory = session_factory
        self._mailer_factory = mailer_factory

    async def dispatch(self, photo_ids: list[int]) -> None:
        from app.db import SessionLocal
        from app.services.denial_notices import send_denial_notices
        from app.services.mailer import MailjetMailer

        session_factory = self._session_factory or SessionLocal
        mailer = (self._mailer_factory or MailjetMailer.from_settings)()
        async with session_factory() as session:
            await send_denial_notices(session, photo_ids, mailer)


def get_denial_dispatcher() -> DenialDispatcher:
    if settings.photo_denied_webhook_url:
        return HttpDenialDispatcher(
            settings.photo_denied_webhook_url,
            settings.photo_denied_webhook_token,
            settings.notify_timeout_seconds,
        )
    return LocalDenialDispatcher()
