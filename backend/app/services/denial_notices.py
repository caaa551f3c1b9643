from __future__ import annotations
from html import escape
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
import structlog

from app.models.photo import Photo
from app.schemas.moderation import DenialDispatchSummary
from app.services.identity import lookup_account_email
from app.services.mailer import EmailSendError

log = structlog.get_logger()

SUBJECT = "Your Huntly World photo was not approved"
DEFAULT_REASON = "The photo did not meet our activity guidelines."


def clean_photo_ids(raw) -> list[int]:
    """Keep integer ids only (bools and floats like 1.5 are dropped), first occurrence order."""
    if not isinstance(raw, list):
        return []
    out: list[int] = []
    for v in raw:
        if isinstance(v, bool):
            continue
        if isinstance(v, float) and v.is_integer():
            v = int(v)
        if isinstance(v, int) and v not in out:
            out.append(v)
    return out


def compose_denial_email(child_name: str | None, activity_title: str | None, reason: str | None) -> tuple[str, str, str]:
    """Returns (subject, html, text)."""
    greeting = f"Hi {child_name}," if child_name else "Hi,"
    title = activity_title or "an activity"
    reason = (reason or "").strip()

    if reason:
        reason_html = "<p><strong>Reason:</strong><br />" + escape(reason).replace("\n", "<br />") + "</p>"
    else:
        reason_html = "<p>We couldn't approve this photo because it didn't meet our activity guidelines.</p>"
    html = (
        f"<p>{escape(greeting)}</p>"
        f"<p>Thanks for submitting a photo for <strong>{escape(title)}</strong> on Huntly World.</p>"
        "<p>Our team reviewed your photo but unfortunately we couldn't approve it.</p>"
        f"{reason_html}"
        "<p>You’re welcome to try again with a new photo that better matches the activity instructions.</p>"
        "<p>— The Huntly World team</p>"
    )
    text = (
        f"{greeting}\n\n"
        f'Thanks for submitting a photo for "{title}" on Huntly World.\n'
        "Our team reviewed your photo but unfortunately we couldn't approve it.\n\n"
        f"Reason:\n{reason or DEFAULT_REASON}\n\n"
        "You’re welcome to try again with a new photo that better matches the activity instructions.\n\n"
        "— The Huntly World team"
    )
    return SUBJECT, html, text


async def send_denial_notices(
    session: AsyncSession, photo_ids: list[int], mailer, email_lookup=lookup_account_email
) -> DenialDispatchSummary:
    """
    Email the owning account of each denied photo.
    - all photos are loaded in one query (profile + activity eagerly)
    - an unresolvable recipient is skipped, a failed send is counted;
      either way the remaining photos are still attempted
    Store errors while loading propagate to the caller.
    """
    summary = DenialDispatchSummary()
    if not photo_ids:
        return summary

    rows = (await session.execute(
        select(Photo)
        .where(Photo.photo_id.in_(photo_ids))
        .options(selectinload(Photo.profile), selectinload(Photo.activity))
    )).scalars().all()

    for p in rows:
        profile = p.profile
        if profile is None or not profile.user_id:
            log.warning("denial_notice_no_recipient", photo_id=p.photo_id, profile_id=p.profile_id)
            summary.skipped += 1
            continue

        try:
            email = await email_lookup(session, profile.user_id)
        except Exception:
            log.warning("denial_notice_recipient_lookup_failed", photo_id=p.photo_id,
                        account_id=profile.user_id, exc_info=True)
            summary.skipped += 1
            continue
        if not email:
            log.warning("denial_notice_no_recipient", photo_id=p.photo_id, account_id=profile.user_id)
            summary.skipped += 1
            continue

        subject, html, text = compose_denial_email(
            profile.nickname or profile.name,
            p.activity.title if p.activity else None,
            p.reason,
        )
        try:
            await mailer.send(email, subject, html_part=html, text_part=text)
        except EmailSendError:
            log.error("denial_notice_not_sent", photo_id=p.photo_id)
            summary.failed += 1
            continue
        except Exception:
            log.exception("denial_notice_unexpected_error", photo_id=p.photo_id)
            summary.failed += 1
            continue
        summary.sent += 1

    log.info("denial_notices_done", requested=len(photo_ids), sent=summary.sent, skipped=summary.skipped, failed=summary.failed)
    return summary
