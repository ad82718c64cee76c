# src/bk_catalog/domain/repository.py
"""ProductRepository Protocol — interface contract for persistence layer."""
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_catalog.domain.models import Product


class ProductRepositoryProtocol(Protocol):
    async def get_by_id(self, product_id: str, db: AsyncSession) -> Product | None: ...

    async def get_many(
        self, product_ids: list[str], db: AsyncSession
    ) -> dict[str, Product]: ...

    async def decrement_stock(
        self, product_id: str, quantity: int, db: AsyncSession
    ) -> Product | None: ...
