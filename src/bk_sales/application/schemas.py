# src/bk_sales/application/schemas.py
"""Request / response schemas for the sales API.

Request fields the workflow validates itself (presence of items, payment and
delivery method, address completeness, quantities) are optional here so each
failure surfaces with its own error code instead of a generic 422.
"""
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field

from src.bk_common.cents import cents_to_display
from src.bk_common.enums import DeliveryMethod, PaymentMethod, SaleStatus
from src.bk_sales.domain.models import DeliveryAddress, LineItem, Sale, SalesStatistics

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class SaleItemRequest(BaseModel):
    product_id: str | None = None
    quantity: Any = None


class DeliveryAddressRequest(BaseModel):
    street: str = ""
    city: str = ""
    postal_code: str = ""
    country: str = ""
    notes: str | None = None

    def missing_fields(self) -> list[str]:
        return [
            name
            for name in ("street", "city", "postal_code", "country")
            if not getattr(self, name).strip()
        ]

    def to_domain(self) -> DeliveryAddress:
        return DeliveryAddress(
            street=self.street.strip(),
            city=self.city.strip(),
            postal_code=self.postal_code.strip(),
            country=self.country.strip(),
            notes=(self.notes or "").strip() or None,
        )


class CreateSaleRequest(BaseModel):
    items: list[SaleItemRequest] = Field(default_factory=list)
    payment_method: PaymentMethod | None = None
    delivery_method: DeliveryMethod | None = None
    delivery_address: DeliveryAddressRequest | None = None
    shipping_cost_cents: int = Field(0, ge=0)


class UpdateSaleStatusRequest(BaseModel):
    status: SaleStatus | None = None
    order_status: str | None = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class LineItemResponse(BaseModel):
    product_id: str
    product_name: str
    quantity: int
    price_cents: int
    price_display: str
    subtotal_cents: int

    @classmethod
    def from_domain(cls, item: LineItem, product_name: str | None = None) -> "LineItemResponse":
        return cls(
            product_id=item.product_id,
            product_name=item.product_name or product_name or "",
            quantity=item.quantity,
            price_cents=item.price_cents,
            price_display=cents_to_display(item.price_cents),
            subtotal_cents=item.subtotal_cents,
        )


class DeliveryAddressResponse(BaseModel):
    street: str
    city: str
    postal_code: str
    country: str
    notes: str | None = None


class SaleResponse(BaseModel):
    id: str
    user_id: str
    user_name: str
    user_email: str
    items: list[LineItemResponse]
    total_cents: int
    total_display: str
    shipping_cost_cents: int
    payment_method: str
    status: str
    delivery_method: str
    delivery_address: DeliveryAddressResponse | None = None
    order_status: str
    date: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_domain(
        cls,
        sale: Sale,
        user_name: str | None = None,
        product_names: dict[str, str] | None = None,
    ) -> "SaleResponse":
        """Build the presentation shape; snapshot names win over resolved ones."""
        names = product_names or {}
        address = sale.delivery_address
        return cls(
            id=sale.id,
            user_id=sale.user_id,
            user_name=sale.user_name or user_name or "",
            user_email=sale.user_email,
            items=[
                LineItemResponse.from_domain(item, names.get(item.product_id))
                for item in sale.items
            ],
            total_cents=sale.total_cents,
            total_display=cents_to_display(sale.total_cents),
            shipping_cost_cents=sale.shipping_cost_cents,
            payment_method=sale.payment_method,
            status=sale.status,
            delivery_method=sale.delivery_method,
            delivery_address=(
                DeliveryAddressResponse(
                    street=address.street,
                    city=address.city,
                    postal_code=address.postal_code,
                    country=address.country,
                    notes=address.notes,
                )
                if address
                else None
            ),
            order_status=sale.order_status,
            date=sale.created_at.astimezone(UTC).date().isoformat() if sale.created_at else None,
            created_at=sale.created_at,
            updated_at=sale.updated_at,
        )


class SaleListResponse(BaseModel):
    items: list[SaleResponse]
    count: int


class SalesStatisticsResponse(BaseModel):
    total_sales: int
    total_revenue_cents: int
    total_revenue_display: str
    completed_sales: int
    pending_sales: int
    home_delivery_sales: int
    local_pickup_sales: int
    average_sale_cents: int
    average_sale_display: str

    @classmethod
    def from_domain(cls, stats: SalesStatistics) -> "SalesStatisticsResponse":
        return cls(
            total_sales=stats.total_sales,
            total_revenue_cents=stats.total_revenue_cents,
            total_revenue_display=cents_to_display(stats.total_revenue_cents),
            completed_sales=stats.completed_sales,
            pending_sales=stats.pending_sales,
            home_delivery_sales=stats.home_delivery_sales,
            local_pickup_sales=stats.local_pickup_sales,
            average_sale_cents=stats.average_sale_cents,
            average_sale_display=cents_to_display(stats.average_sale_cents),
        )

