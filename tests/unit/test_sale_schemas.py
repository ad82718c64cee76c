"""Unit tests for sales request/response schemas."""

from datetime import UTC, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from src.bk_sales.application.schemas import (
    CreateSaleRequest,
    DeliveryAddressRequest,
    SaleResponse,
    SalesStatisticsResponse,
    UpdateSaleStatusRequest,
)
from src.bk_sales.domain.models import DeliveryAddress, LineItem, Sale, SalesStatistics


def _make_sale(**kwargs) -> Sale:
    return Sale(
        id="7300000000000000001",
        user_id="user-1",
        user_name=kwargs.get("user_name", "Ana"),
        user_email="ana@example.com",
        items=kwargs.get("items", [LineItem("BK-1", "Rayuela", 2, 1000)]),
        total_cents=2500,
        payment_method="cash",
        delivery_method="home_delivery",
        shipping_cost_cents=500,
        delivery_address=DeliveryAddress("Calle 1", "Rosario", "2000", "AR", notes="Timbre 2"),
        created_at=kwargs.get("created_at", datetime(2026, 3, 14, 18, 30, tzinfo=UTC)),
    )


class TestCreateSaleRequest:
    def test_empty_body_is_accepted_for_workflow_validation(self) -> None:
        req = CreateSaleRequest()
        assert req.items == []
        assert req.payment_method is None
        assert req.shipping_cost_cents == 0

    def test_unknown_payment_method_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CreateSaleRequest(payment_method="bitcoin")

    def test_negative_shipping_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CreateSaleRequest(shipping_cost_cents=-1)

    def test_quantity_passes_through_unvalidated(self) -> None:
        req = CreateSaleRequest(
            items=[{"product_id": "BK-1", "quantity": 1.5}], delivery_method="local_pickup"
        )
        assert req.items[0].quantity == 1.5


class TestDeliveryAddressRequest:
    def test_missing_fields_reports_blank_values(self) -> None:
        addr = DeliveryAddressRequest(street="Calle 1", city="  ", postal_code="2000")
        assert addr.missing_fields() == ["city", "country"]

    def test_to_domain_strips(self) -> None:
        addr = DeliveryAddressRequest(
            street=" Calle 1 ", city="Rosario", postal_code="2000", country="AR", notes="  "
        )
        domain = addr.to_domain()
        assert domain.street == "Calle 1"
        assert domain.notes is None


class TestUpdateSaleStatusRequest:
    def test_status_must_be_known(self) -> None:
        with pytest.raises(ValidationError):
            UpdateSaleStatusRequest(status="refunded")

    def test_both_fields_optional(self) -> None:
        req = UpdateSaleStatusRequest()
        assert req.status is None and req.order_status is None


class TestSaleResponse:
    def test_presentation_shape(self) -> None:
        resp = SaleResponse.from_domain(_make_sale())
        assert resp.total_display == "$25.00"
        assert resp.date == "2026-03-14"
        assert resp.items[0].subtotal_cents == 2000
        assert resp.delivery_address is not None
        assert resp.delivery_address.notes == "Timbre 2"

    def test_date_is_utc_calendar_day(self) -> None:
        # 22:30 in Buenos Aires (UTC-3) is already the next day in UTC
        local = datetime(2026, 3, 14, 22, 30, tzinfo=timezone(timedelta(hours=-3)))
        resp = SaleResponse.from_domain(_make_sale(created_at=local))
        assert resp.date == "2026-03-15"

    def test_snapshot_names_win_over_resolved(self) -> None:
        resp = SaleResponse.from_domain(
            _make_sale(), user_name="Ana María", product_names={"BK-1": "Rayuela (2da ed.)"}
        )
        assert resp.user_name == "Ana"
        assert resp.items[0].product_name == "Rayuela"

    def test_resolved_names_fill_blank_snapshots(self) -> None:
        sale = _make_sale(user_name="", items=[LineItem("BK-1", "", 1, 2000)])
        resp = SaleResponse.from_domain(sale, user_name="Ana", product_names={"BK-1": "Rayuela"})
        assert resp.user_name == "Ana"
        assert resp.items[0].product_name == "Rayuela"


class TestSalesStatisticsResponse:
    def test_from_domain(self) -> None:
        stats = SalesStatistics(
            total_sales=2,
            total_revenue_cents=5001,
            completed_sales=1,
            pending_sales=1,
            home_delivery_sales=2,
        )
        resp = SalesStatisticsResponse.from_domain(stats)
        assert resp.average_sale_cents == 2501
        assert resp.total_revenue_display == "$50.01"
        assert resp.local_pickup_sales == 0
