from __future__ import annotations
import httpx
import structlog
from app.config import settings

log = structlog.get_logger()

MAILJET_SEND_URL = "https://api.mailjet.com/v3.1/send"


class MailerConfigError(RuntimeError):
    pass


class EmailSendError(RuntimeError):
    pass


class MailjetMailer:
    """Sends one transactional email per call through the Mailjet Send API v3.1."""

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        from_email: str,
        from_name: str = "Huntly Club",
        reply_to: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ):
        if not api_key or not api_secret or not from_email:
            raise MailerConfigError(
                "Missing Mailjet configuration (MAILJET_API_KEY, MAILJET_API_SECRET, MAILJET_FROM_EMAIL)"
            )
        self.api_key = api_key
        self.api_secret = api_secret
        self.from_email = from_email
        self.from_name = from_name
        self.reply_to = reply_to or None
        self._transport = transport
        self._timeout = timeout

    @classmethod
    def from_settings(cls) -> "MailjetMailer":
        return cls(
            settings.mailjet_api_key,
            settings.mailjet_api_secret,
            settings.mailjet_from_email,
            settings.mailjet_from_name,
            settings.mailjet_reply_to,
        )

    def build_message(
        self,
        to: str,
        subject: str,
        html_part: str | None = None,
        text_part: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict:
        if not html_part and not text_part:
            raise ValueError("At least one of html_part or text_part is required")
        msg_headers = dict(headers or {})
        msg_headers["Reply-To"] = self.reply_to or self.from_email
        msg: dict = {
            "From": {"Email": self.from_email, "Name": self.from_name},
            "To": [{"Email": to}],
            "Subject": subject,
            "Headers": msg_headers,
        }
        if text_part:
            msg["TextPart"] = text_part
        if html_part:
            msg["HTMLPart"] = html_part
        return {"Messages": [msg]}

    async def send(self, to: str, subject: str, html_part: str | None = None, text_part: str | None = None) -> None:
        body = self.build_message(to, subject, html_part, text_part)
        async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
            r = await client.post(MAILJET_SEND_URL, json=body, auth=(self.api_key, self.api_secret))
        if r.status_code >= 300:
            log.error("mailjet_send_failed", status=r.status_code, body=r.text[:500])
            raise EmailSendError(f"Email could not be sent: {r.status_code}")
