"""Unit tests for SaleRepository using MagicMock AsyncSession."""
from datetime import UTC, datetime
from typing import Any
from unittest.mock import AsyncMock, MagicMock

from src.bk_sales.domain.models import DeliveryAddress, LineItem, Sale
from src.bk_sales.infrastructure.persistence import SaleRepository


def _make_sale_row(**kwargs: Any) -> MagicMock:
    row = MagicMock()
    row.id = kwargs.get("id", "sale-1")
    row.user_id = kwargs.get("user_id", "user-1")
    row.user_name = "Ana"
    row.user_email = "ana@example.com"
    row.total_cents = kwargs.get("total_cents", 2500)
    row.shipping_cost_cents = kwargs.get("shipping_cost_cents", 500)
    row.payment_method = "cash"
    row.status = kwargs.get("status", "completed")
    row.delivery_method = kwargs.get("delivery_method", "home_delivery")
    row.order_status = kwargs.get("order_status", "En preparación")
    row.delivery_street = kwargs.get("delivery_street", "Calle 1")
    row.delivery_city = "Rosario"
    row.delivery_postal_code = "2000"
    row.delivery_country = "AR"
    row.delivery_notes = None
    row.created_at = datetime.now(UTC)
    row.updated_at = datetime.now(UTC)
    return row


def _make_item_row(sale_id: str = "sale-1", line_no: int = 1, **kwargs: Any) -> MagicMock:
    row = MagicMock()
    row.sale_id = sale_id
    row.line_no = line_no
    row.product_id = kwargs.get("product_id", "BK-1")
    row.product_name = kwargs.get("product_name", "Rayuela")
    row.quantity = kwargs.get("quantity", 2)
    row.price_cents = kwargs.get("price_cents", 1000)
    return row


def _result(one: Any = None, many: list[Any] | None = None) -> MagicMock:
    result = MagicMock()
    result.fetchone.return_value = one
    result.fetchall.return_value = many or []
    return result


def _make_sale() -> Sale:
    return Sale(
        id="sale-1",
        user_id="user-1",
        user_name="Ana",
        user_email="ana@example.com",
        items=[LineItem("BK-1", "Rayuela", 2, 1000), LineItem("BK-2", "Ficciones", 1, 500)],
        total_cents=2500,
        payment_method="cash",
        delivery_method="local_pickup",
    )


class TestSaleRepository:
    async def test_save_inserts_sale_then_items(self) -> None:
        db = AsyncMock()
        await SaleRepository().save(_make_sale(), db)

        assert db.execute.await_count == 2
        sale_params = db.execute.await_args_list[0].args[1]
        assert sale_params["delivery_street"] is None
        item_params = db.execute.await_args_list[1].args[1]
        assert [p["line_no"] for p in item_params] == [1, 2]
        assert item_params[1]["product_name"] == "Ficciones"

    async def test_save_stores_address_columns(self) -> None:
        db = AsyncMock()
        sale = _make_sale()
        sale.delivery_method = "home_delivery"
        sale.delivery_address = DeliveryAddress("Calle 1", "Rosario", "2000", "AR", "Timbre")
        await SaleRepository().save(sale, db)

        params = db.execute.await_args_list[0].args[1]
        assert params["delivery_city"] == "Rosario"
        assert params["delivery_notes"] == "Timbre"

    async def test_get_by_id_returns_sale_with_items(self) -> None:
        db = AsyncMock()
        db.execute.side_effect = [
            _result(one=_make_sale_row()),
            _result(many=[_make_item_row(), _make_item_row(line_no=2, product_id="BK-2")]),
        ]

        sale = await SaleRepository().get_by_id("sale-1", db)

        assert sale is not None
        assert sale.product_ids == ["BK-1", "BK-2"]
        assert sale.delivery_address is not None
        assert sale.delivery_address.city == "Rosario"

    async def test_get_by_id_not_found(self) -> None:
        db = AsyncMock()
        db.execute.return_value = _result(one=None)
        assert await SaleRepository().get_by_id("missing", db) is None

    async def test_pickup_row_has_no_address(self) -> None:
        db = AsyncMock()
        db.execute.side_effect = [
            _result(one=_make_sale_row(delivery_method="local_pickup", delivery_street=None)),
            _result(many=[_make_item_row()]),
        ]
        sale = await SaleRepository().get_by_id("sale-1", db)
        assert sale is not None
        assert sale.delivery_address is None

    async def test_update_status_only_binds_supplied_fields(self) -> None:
        db = AsyncMock()
        row = MagicMock()
        row.status = "cancelled"
        row.order_status = "Entregado"
        row.updated_at = datetime(2026, 3, 15, tzinfo=UTC)
        row.previous_order_status = "Entregado"
        db.execute.return_value = _result(one=row)
        sale = _make_sale()

        previous = await SaleRepository().update_status(sale, "cancelled", None, db)

        params = db.execute.await_args.args[1]
        assert params == {"id": "sale-1", "status": "cancelled", "order_status": None}
        assert previous == "Entregado"
        # Stored value wins over the stale one read earlier
        assert sale.order_status == "Entregado"
        assert sale.status == "cancelled"

    async def test_update_status_sql_keeps_absent_fields(self) -> None:
        db = AsyncMock()
        db.execute.return_value = _result(one=None)
        await SaleRepository().update_status(_make_sale(), None, "Preparado", db)
        sql = str(db.execute.await_args.args[0])
        assert "COALESCE(CAST(:status AS VARCHAR), s.status)" in sql
        assert "COALESCE(CAST(:order_status AS VARCHAR), s.order_status)" in sql
        assert "FOR UPDATE" in sql

    async def test_update_status_missing_row(self) -> None:
        db = AsyncMock()
        db.execute.return_value = _result(one=None)
        sale = _make_sale()
        assert await SaleRepository().update_status(sale, "pending", None, db) is None
        assert sale.status == "completed"

    async def test_list_sales_groups_items_per_sale(self) -> None:
        db = AsyncMock()
        db.execute.side_effect = [
            _result(many=[_make_sale_row(id="s2"), _make_sale_row(id="s1")]),
            _result(many=[_make_item_row("s1"), _make_item_row("s2"), _make_item_row("s2", 2)]),
        ]

        sales = await SaleRepository().list_sales("user-1", None, None, db)

        assert [s.id for s in sales] == ["s2", "s1"]
        assert len(sales[0].items) == 2
        assert len(sales[1].items) == 1
        items_params = db.execute.await_args_list[1].args[1]
        assert items_params == {"sale_ids": ["s2", "s1"]}

    async def test_list_sales_empty_skips_item_query(self) -> None:
        db = AsyncMock()
        db.execute.return_value = _result(many=[])
        assert await SaleRepository().list_sales(None, None, None, db) == []
        db.execute.assert_awaited_once()

    async def test_get_statistics(self) -> None:
        row = MagicMock()
        row.total_sales = 3
        row.total_revenue = 7500
        row.completed_sales = 2
        row.pending_sales = 1
        row.home_delivery_sales = 1
        row.local_pickup_sales = 2
        db = AsyncMock()
        db.execute.return_value = _result(one=row)

        stats = await SaleRepository().get_statistics(db)

        assert stats.total_sales == 3
        assert stats.total_revenue_cents == 7500
        assert stats.average_sale_cents == 2500
