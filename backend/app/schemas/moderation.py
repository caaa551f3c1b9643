from __future__ import annotations
from typing import Any, Literal
from pydantic import BaseModel, Field

FailureKind = Literal["validation", "not_found", "store"]

# Read views a dashboard should refresh after any successful transition
PHOTO_VIEWS = ["/photos", "/photos/review"]


class ActionResult(BaseModel):
    """Outcome of a transition. No `error` means success."""
    error: str | None = None
    kind: FailureKind | None = None
    invalidate: list[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls) -> "ActionResult":
        return cls(invalidate=list(PHOTO_VIEWS))

    @classmethod
    def noop(cls) -> "ActionResult":
        return cls()

    @classmethod
    def failure(cls, kind: FailureKind, message: str) -> "ActionResult":
        return cls(error=message, kind=kind)


class DenyRequest(BaseModel):
    reason: str | None = None


class BulkRequest(BaseModel):
    photo_ids: list[int] = Field(default_factory=list)


class BulkDenyRequest(BulkRequest):
    reason: str | None = None


class DenialDispatchRequest(BaseModel):
    # wire name kept for callers of the hosted function
    # shape is checked by clean_photo_ids
    photo_ids: Any = Field(default_factory=list, alias="photoIds")

    model_config = {"populate_by_name": True}


class DenialDispatchSummary(BaseModel):
    status: str = "ok"
    sent: int = 0
    skipped: int = 0
    failed: int = 0
