from __future__ import annotations
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from app.models.account import Account


async def lookup_account_email(session: AsyncSession, account_id: str | None) -> str | None:
    """Email of the owning account, or None when it cannot be resolved."""
    if not account_id:
        return None
    email = await session.scalar(select(Account.email).where(Account.id == account_id))
    return email or None
