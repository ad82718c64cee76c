"""Sale domain model — pure dataclasses, no SQLAlchemy dependency."""
from dataclasses import dataclass, field
from datetime import datetime

from src.bk_common.cents import line_total, mean_cents
from src.bk_common.enums import DeliveryMethod, OrderProgress, SaleStatus


@dataclass(frozen=True)
class LineItem:
    """One product line, snapshotted at sale time and never rewritten."""

    product_id: str
    product_name: str
    quantity: int  # >= 1
    price_cents: int  # unit price at sale time, >= 0

    @property
    def subtotal_cents(self) -> int:
        return line_total(self.price_cents, self.quantity)


@dataclass
class DeliveryAddress:
    street: str
    city: str
    postal_code: str
    country: str
    notes: str | None = None


@dataclass
class Sale:
    id: str
    user_id: str
    # Snapshot of the buyer at creation time
    user_name: str
    user_email: str
    items: list[LineItem]
    total_cents: int  # items + shipping, fixed at creation
    payment_method: str
    delivery_method: str
    status: str = SaleStatus.COMPLETED.value
    order_status: str = OrderProgress.IN_PREPARATION.value
    shipping_cost_cents: int = 0
    delivery_address: DeliveryAddress | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    product_ids: list[str] = field(init=False)

    def __post_init__(self) -> None:
        self.product_ids = [item.product_id for item in self.items]

    @property
    def items_total_cents(self) -> int:
        return sum(item.subtotal_cents for item in self.items)

    @property
    def is_home_delivery(self) -> bool:
        return self.delivery_method == DeliveryMethod.HOME_DELIVERY

    @property
    def is_delivered(self) -> bool:
        return self.order_status == OrderProgress.DELIVERED


@dataclass
class SalesStatistics:
    total_sales: int = 0
    total_revenue_cents: int = 0
    completed_sales: int = 0
    pending_sales: int = 0
    home_delivery_sales: int = 0
    local_pickup_sales: int = 0

    @property
    def average_sale_cents(self) -> int:
        return mean_cents(self.total_revenue_cents, self.total_sales)
