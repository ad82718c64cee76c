"""PartyRepository Protocol — interface contract for persistence layer."""
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_party.domain.models import Party


class PartyRepositoryProtocol(Protocol):
    async def get_by_id(self, user_id: str, db: AsyncSession) -> Party | None: ...

    async def get_many(self, user_ids: list[str], db: AsyncSession) -> dict[str, Party]: ...
