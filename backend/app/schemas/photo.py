from __future__ import annotations
from datetime import datetime
from typing import Literal
from pydantic import BaseModel, ConfigDict, model_validator

from app.models.photo import PhotoStatus

GalleryTab = Literal["for-review", "approved", "denied"]

TAB_STATUS: dict[str, PhotoStatus] = {
    "for-review": PhotoStatus.AWAITING_REVIEW,
    "approved": PhotoStatus.APPROVED,
    "denied": PhotoStatus.DENIED,
}


class PhotoListItem(BaseModel):
    photo_id: int
    photo_url: str
    uploaded_at: datetime
    status: int
    reason: str | None = None
    activity_id: int | None = None
    profile_id: int
    activity_title: str | None = None
    profile_nickname: str | None = None

    @model_validator(mode="after")
    def _reason_only_when_denied(self):
        # a reason left over from an earlier denial must never be shown
        if self.status != PhotoStatus.DENIED:
            self.reason = None
        return self


class ReviewQueue(BaseModel):
    photos: list[PhotoListItem]
    empty: bool
    redirect: str | None = None


class PhotoOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    photo_id: int
    photo_url: str
    uploaded_at: datetime
    status: int
    reason: str | None = None
    user_activity_id: int
    profile_id: int
    activity_id: int | None = None

    @model_validator(mode="after")
    def _reason_only_when_denied(self):
        if self.status != PhotoStatus.DENIED:
            self.reason = None
        return self


class ProfileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    nickname: str | None = None
    colour: str
    xp: int
    team: int
    user_id: str | None = None
    created_at: datetime


class ActivityOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    title: str
    description: str | None = None
    xp: int | None = None


class UserOut(BaseModel):
    email: str | None = None


class PhotoDetailsResult(BaseModel):
    error: str | None = None
    photo: PhotoOut | None = None
    profile: ProfileOut | None = None
    activity: ActivityOut | None = None
    user: UserOut | None = None
