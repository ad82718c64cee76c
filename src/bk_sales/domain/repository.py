# src/bk_sales/domain/repository.py
"""SaleRepository Protocol — interface contract for persistence layer."""
from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_sales.domain.models import Sale, SalesStatistics


class SaleRepositoryProtocol(Protocol):
    async def save(self, sale: Sale, db: AsyncSession) -> None: ...

    async def get_by_id(self, sale_id: str, db: AsyncSession) -> Sale | None: ...

    async def update_status(
        self,
        sale: Sale,
        status: str | None,
        order_status: str | None,
        db: AsyncSession,
    ) -> str | None: ...

    async def list_sales(
        self,
        user_id: str | None,
        start: datetime | None,
        end: datetime | None,
        db: AsyncSession,
    ) -> list[Sale]: ...

    async def get_statistics(self, db: AsyncSession) -> SalesStatistics: ...
