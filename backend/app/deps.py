from __future__ import annotations
from fastapi import HTTPException
from app.services.mailer import MailjetMailer, MailerConfigError
from app.services.notifications import DenialDispatcher, get_denial_dispatcher
from app.services.storage import PhotoObjectStore, get_object_store


# Collaborators resolved per request so tests can override them
def object_store() -> PhotoObjectStore:
    return get_object_store()


def denial_dispatcher() -> DenialDispatcher:
    return get_denial_dispatcher()


def mailer() -> MailjetMailer:
    try:
        return MailjetMailer.from_settings()
    except MailerConfigError as e:
        raise HTTPException(status_code=503, detail=str(e))
