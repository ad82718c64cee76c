# src/bk_sales/infrastructure/persistence.py
"""SaleRepository — raw SQL persistence implementation.

A sale is one row in ``sales`` plus its ordered line items in ``sale_items``.
Line items are inserted once and never updated.
"""
from collections import defaultdict
from datetime import datetime
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_sales.domain.models import DeliveryAddress, LineItem, Sale, SalesStatistics

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_INSERT_SALE_SQL = text("""
    INSERT INTO sales (id, user_id, user_name, user_email,
        total_cents, shipping_cost_cents, payment_method, status,
        delivery_method, order_status,
        delivery_street, delivery_city, delivery_postal_code,
        delivery_country, delivery_notes,
        created_at, updated_at)
    VALUES (:id, :user_id, :user_name, :user_email,
        :total_cents, :shipping_cost_cents, :payment_method, :status,
        :delivery_method, :order_status,
        :delivery_street, :delivery_city, :delivery_postal_code,
        :delivery_country, :delivery_notes,
        :created_at, :updated_at)
""")

_INSERT_ITEM_SQL = text("""
    INSERT INTO sale_items (sale_id, line_no, product_id, product_name, quantity, price_cents)
    VALUES (:sale_id, :line_no, :product_id, :product_name, :quantity, :price_cents)
""")

_UPDATE_STATUS_SQL = text("""
    UPDATE sales AS s
    SET status = COALESCE(CAST(:status AS VARCHAR), s.status),
        order_status = COALESCE(CAST(:order_status AS VARCHAR), s.order_status),
        updated_at = NOW()
    FROM (SELECT id, order_status FROM sales WHERE id = :id FOR UPDATE) AS prev
    WHERE s.id = prev.id
    RETURNING s.status, s.order_status, s.updated_at,
        prev.order_status AS previous_order_status
""")

_SELECT_COLUMNS = """
    id, user_id, user_name, user_email,
    total_cents, shipping_cost_cents, payment_method, status,
    delivery_method, order_status,
    delivery_street, delivery_city, delivery_postal_code,
    delivery_country, delivery_notes,
    created_at, updated_at
"""

_GET_SALE_BY_ID_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM sales WHERE id = :id
""")

_LIST_SALES_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM sales
    WHERE (CAST(:user_id AS TEXT) IS NULL OR user_id = CAST(:user_id AS TEXT))
      AND (CAST(:start AS TIMESTAMPTZ) IS NULL OR created_at >= CAST(:start AS TIMESTAMPTZ))
      AND (CAST(:end AS TIMESTAMPTZ) IS NULL OR created_at <= CAST(:end AS TIMESTAMPTZ))
    ORDER BY created_at DESC, id DESC
""")

_ITEMS_FOR_SALES_SQL = text("""
    SELECT sale_id, line_no, product_id, product_name, quantity, price_cents
    FROM sale_items
    WHERE sale_id = ANY(CAST(:sale_ids AS VARCHAR[]))
    ORDER BY sale_id, line_no
""")

_STATS_SQL = text("""
    SELECT
        COUNT(*) AS total_sales,
        COALESCE(SUM(total_cents), 0) AS total_revenue,
        COUNT(*) FILTER (WHERE status = 'completed') AS completed_sales,
        COUNT(*) FILTER (WHERE status = 'pending') AS pending_sales,
        COUNT(*) FILTER (WHERE delivery_method = 'home_delivery') AS home_delivery_sales,
        COUNT(*) FILTER (WHERE delivery_method = 'local_pickup') AS local_pickup_sales
    FROM sales
""")


# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_item(row: Any) -> LineItem:
    return LineItem(
        product_id=row.product_id,
        product_name=row.product_name,
        quantity=row.quantity,
        price_cents=row.price_cents,
    )


def _row_to_sale(row: Any, items: list[LineItem]) -> Sale:
    """Convert a sales row plus its item rows to a Sale domain object."""
    address = None
    if row.delivery_street is not None:
        address = DeliveryAddress(
            street=row.delivery_street,
            city=row.delivery_city,
            postal_code=row.delivery_postal_code,
            country=row.delivery_country,
            notes=row.delivery_notes,
        )
    return Sale(
        id=row.id,
        user_id=row.user_id,
        user_name=row.user_name,
        user_email=row.user_email,
        items=items,
        total_cents=row.total_cents,
        shipping_cost_cents=row.shipping_cost_cents,
        payment_method=row.payment_method,
        status=row.status,
        delivery_method=row.delivery_method,
        order_status=row.order_status,
        delivery_address=address,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class SaleRepository:
    """Concrete implementation of SaleRepositoryProtocol using raw SQL."""

    async def save(self, sale: Sale, db: AsyncSession) -> None:
        address = sale.delivery_address
        await db.execute(
            _INSERT_SALE_SQL,
            {
                "id": sale.id,
                "user_id": sale.user_id,
                "user_name": sale.user_name,
                "user_email": sale.user_email,
                "total_cents": sale.total_cents,
                "shipping_cost_cents": sale.shipping_cost_cents,
                "payment_method": sale.payment_method,
                "status": sale.status,
                "delivery_method": sale.delivery_method,
                "order_status": sale.order_status,
                "delivery_street": address.street if address else None,
                "delivery_city": address.city if address else None,
                "delivery_postal_code": address.postal_code if address else None,
                "delivery_country": address.country if address else None,
                "delivery_notes": address.notes if address else None,
                "created_at": sale.created_at,
                "updated_at": sale.updated_at,
            },
        )
        await db.execute(
            _INSERT_ITEM_SQL,
            [
                {
                    "sale_id": sale.id,
                    "line_no": line_no,
                    "product_id": item.product_id,
                    "product_name": item.product_name,
                    "quantity": item.quantity,
                    "price_cents": item.price_cents,
                }
                for line_no, item in enumerate(sale.items, start=1)
            ],
        )

    async def get_by_id(self, sale_id: str, db: AsyncSession) -> Sale | None:
        result = await db.execute(_GET_SALE_BY_ID_SQL, {"id": sale_id})
        row = result.fetchone()
        if row is None:
            return None
        items = await self._load_items([row.id], db)
        return _row_to_sale(row, items.get(row.id, []))

    async def update_status(
        self,
        sale: Sale,
        status: str | None,
        order_status: str | None,
        db: AsyncSession,
    ) -> str | None:
        """Write only the supplied fields under a row lock and refresh ``sale``.

        Returns the order_status the write replaced, or None if the row is gone.
        """
        result = await db.execute(
            _UPDATE_STATUS_SQL,
            {"id": sale.id, "status": status, "order_status": order_status},
        )
        row = result.fetchone()
        if row is None:
            return None
        sale.status = row.status
        sale.order_status = row.order_status
        sale.updated_at = row.updated_at
        return row.previous_order_status

    async def list_sales(
        self,
        user_id: str | None,
        start: datetime | None,
        end: datetime | None,
        db: AsyncSession,
    ) -> list[Sale]:
        result = await db.execute(
            _LIST_SALES_SQL, {"user_id": user_id, "start": start, "end": end}
        )
        rows = result.fetchall()
        if not rows:
            return []
        items = await self._load_items([row.id for row in rows], db)
        return [_row_to_sale(row, items.get(row.id, [])) for row in rows]

    async def get_statistics(self, db: AsyncSession) -> SalesStatistics:
        row = (await db.execute(_STATS_SQL)).fetchone()
        if row is None:
            return SalesStatistics()
        return SalesStatistics(
            total_sales=int(row.total_sales),
            total_revenue_cents=int(row.total_revenue),
            completed_sales=int(row.completed_sales),
            pending_sales=int(row.pending_sales),
            home_delivery_sales=int(row.home_delivery_sales),
            local_pickup_sales=int(row.local_pickup_sales),
        )

    async def _load_items(
        self, sale_ids: list[str], db: AsyncSession
    ) -> dict[str, list[LineItem]]:
        result = await db.execute(
            _ITEMS_FOR_SALES_SQL, {"sale_ids": sale_ids}
        )
        grouped: dict[str, list[LineItem]] = defaultdict(list)
        for row in result.fetchall():
            grouped[row.sale_id].append(_row_to_item(row))
        return grouped
