# src/bk_catalog/infrastructure/persistence.py
"""ProductRepository — raw SQL persistence implementation.

Stock decrement is a single conditional UPDATE ... RETURNING: the row is only
touched when enough stock remains, so concurrent sales can never oversell.
Zero rows returned means insufficient stock (or the product is gone).

Transaction ownership: the caller (application service) commits or rolls back.
"""
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_catalog.domain.models import Product

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_SELECT_COLUMNS = """
    id, name, brand, price_cents, stock, category_id, provider_id,
    created_at, updated_at
"""

_GET_PRODUCT_BY_ID_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM products WHERE id = :id
""")

_GET_PRODUCTS_BY_IDS_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM products
    WHERE id = ANY(CAST(:ids AS VARCHAR[]))
""")

_DECREMENT_STOCK_SQL = text(f"""
    UPDATE products
    SET stock = stock - :quantity,
        updated_at = NOW()
    WHERE id = :id AND stock >= :quantity
    RETURNING {_SELECT_COLUMNS}
""")


# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_product(row: Any) -> Product:
    """Convert a DB result row to a Product domain object."""
    return Product(
        id=row.id,
        name=row.name,
        brand=row.brand,
        price_cents=row.price_cents,
        stock=row.stock,
        category_id=row.category_id,
        provider_id=row.provider_id,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class ProductRepository:
    """Concrete implementation of ProductRepositoryProtocol using raw SQL."""

    async def get_by_id(self, product_id: str, db: AsyncSession) -> Product | None:
        result = await db.execute(_GET_PRODUCT_BY_ID_SQL, {"id": product_id})
        row = result.fetchone()
        return _row_to_product(row) if row else None

    async def get_many(
        self, product_ids: list[str], db: AsyncSession
    ) -> dict[str, Product]:
        if not product_ids:
            return {}
        result = await db.execute(
            _GET_PRODUCTS_BY_IDS_SQL, {"ids": sorted(set(product_ids))}
        )
        products = [_row_to_product(row) for row in result.fetchall()]
        return {p.id: p for p in products}

    async def decrement_stock(
        self, product_id: str, quantity: int, db: AsyncSession
    ) -> Product | None:
        result = await db.execute(
            _DECREMENT_STOCK_SQL, {"id": product_id, "quantity": quantity}
        )
        row = result.fetchone()
        return _row_to_product(row) if row else None
