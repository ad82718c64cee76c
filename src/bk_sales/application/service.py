# src/bk_sales/application/service.py
"""SalesApplicationService: sale creation, status transitions, listing, statistics.

Sale creation validates everything first (fail-fast, fixed order), then runs
all stock decrements and the sale insert inside one transaction. Each decrement
is an atomic conditional UPDATE, so a concurrent sale that drained the stock in
between makes the whole sale roll back instead of overselling.
"""
import logging
from collections import defaultdict
from datetime import date

from fastapi import BackgroundTasks
from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_catalog.domain.repository import ProductRepositoryProtocol
from src.bk_catalog.infrastructure.persistence import ProductRepository
from src.bk_common.datetime_utils import end_of_day, start_of_day, utc_now
from src.bk_common.enums import DeliveryMethod, SaleStatus
from src.bk_common.errors import (
    DeliveryAddressRequiredError,
    DeliveryMethodRequiredError,
    EmptySaleError,
    ForbiddenError,
    InsufficientStockError,
    InvalidOrderStatusError,
    InvalidQuantityError,
    NonPositiveTotalError,
    PaymentMethodRequiredError,
    ProductIdRequiredError,
    ProductNotFoundError,
    SaleNotFoundError,
    UserNotFoundError,
)
from src.bk_common.id_generator import generate_id
from src.bk_notify.dispatcher import NotificationDispatcher
from src.bk_party.domain.models import Party
from src.bk_party.domain.repository import PartyRepositoryProtocol
from src.bk_party.infrastructure.persistence import PartyRepository
from src.bk_sales.application.schemas import (
    CreateSaleRequest,
    SaleListResponse,
    SaleResponse,
    SalesStatisticsResponse,
    UpdateSaleStatusRequest,
)
from src.bk_sales.domain.models import DeliveryAddress, LineItem, Sale
from src.bk_sales.domain.order_progress import (
    INITIAL_ORDER_STATUS,
    allowed_order_statuses,
    becomes_delivered,
    is_allowed_order_status,
)
from src.bk_sales.domain.repository import SaleRepositoryProtocol
from src.bk_sales.infrastructure.persistence import SaleRepository

logger = logging.getLogger("bk.sales")

_ADDRESS_FIELDS = ["street", "city", "postal_code", "country"]


def _whole_quantity(value: object) -> int | None:
    """Return ``value`` as an int when it is a whole JSON number, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


class SalesApplicationService:
    def __init__(
        self,
        sales: SaleRepositoryProtocol | None = None,
        products: ProductRepositoryProtocol | None = None,
        parties: PartyRepositoryProtocol | None = None,
        notifier: NotificationDispatcher | None = None,
    ) -> None:
        self._sales: SaleRepositoryProtocol = sales or SaleRepository()
        self._products: ProductRepositoryProtocol = products or ProductRepository()
        self._parties: PartyRepositoryProtocol = parties or PartyRepository()
        self._notifier = notifier or NotificationDispatcher()

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    async def create_sale(
        self, db: AsyncSession, caller_id: str, req: CreateSaleRequest
    ) -> SaleResponse:
        address = self._validate_request_shape(req)
        buyer = await self._resolve_buyer(db, caller_id)
        lines = await self._price_lines(db, req)

        items_total = sum(line.subtotal_cents for line in lines)
        if items_total <= 0:
            raise NonPositiveTotalError()

        now = utc_now()
        sale = Sale(
            id=generate_id(),
            user_id=buyer.id,
            user_name=buyer.name,
            user_email=buyer.email,
            items=lines,
            total_cents=items_total + req.shipping_cost_cents,
            shipping_cost_cents=req.shipping_cost_cents,
            payment_method=req.payment_method.value,  # type: ignore[union-attr]
            delivery_method=req.delivery_method.value,  # type: ignore[union-attr]
            status=SaleStatus.COMPLETED.value,
            order_status=INITIAL_ORDER_STATUS,
            delivery_address=address,
            created_at=now,
            updated_at=now,
        )

        try:
            for line in lines:
                updated = await self._products.decrement_stock(
                    line.product_id, line.quantity, db
                )
                if updated is None:
                    current = await self._products.get_by_id(line.product_id, db)
                    raise InsufficientStockError(
                        line.product_name, line.quantity, current.stock if current else 0
                    )
            await self._sales.save(sale, db)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Sale %s created for user %s: %d item(s), total=%d cents",
            sale.id,
            sale.user_id,
            len(sale.items),
            sale.total_cents,
        )
        return SaleResponse.from_domain(sale)

    def _validate_request_shape(self, req: CreateSaleRequest) -> DeliveryAddress | None:
        if not req.items:
            raise EmptySaleError()
        if req.payment_method is None:
            raise PaymentMethodRequiredError()
        if req.delivery_method is None:
            raise DeliveryMethodRequiredError()
        if req.delivery_method != DeliveryMethod.HOME_DELIVERY:
            return None
        if req.delivery_address is None:
            raise DeliveryAddressRequiredError(_ADDRESS_FIELDS)
        missing = req.delivery_address.missing_fields()
        if missing:
            raise DeliveryAddressRequiredError(missing)
        return req.delivery_address.to_domain()

    async def _resolve_buyer(self, db: AsyncSession, caller_id: str) -> Party:
        buyer = await self._parties.get_by_id(caller_id, db)
        if buyer is None:
            raise UserNotFoundError(caller_id)
        if not buyer.is_client:
            raise ForbiddenError(f"role {buyer.role} cannot create sales")
        return buyer

    async def _price_lines(self, db: AsyncSession, req: CreateSaleRequest) -> list[LineItem]:
        """Check every item in input order and snapshot name and unit price.

        Stock already claimed by earlier lines of the same request counts
        against later lines for the same product.
        """
        lines: list[LineItem] = []
        claimed: dict[str, int] = defaultdict(int)
        for position, item in enumerate(req.items, start=1):
            if not item.product_id:
                raise ProductIdRequiredError(position)
            product = await self._products.get_by_id(item.product_id, db)
            if product is None:
                raise ProductNotFoundError(item.product_id)
            quantity = _whole_quantity(item.quantity)
            if quantity is None or quantity < 1:
                raise InvalidQuantityError(item.product_id, item.quantity)
            available = product.stock - claimed[product.id]
            if available < quantity:
                raise InsufficientStockError(product.name, quantity, available)
            claimed[product.id] += quantity
            lines.append(
                LineItem(
                    product_id=product.id,
                    product_name=product.name,
                    quantity=quantity,
                    price_cents=product.price_cents,
                )
            )
        return lines

    # ------------------------------------------------------------------
    # Status transitions
    # ------------------------------------------------------------------

    async def update_sale_status(
        self,
        db: AsyncSession,
        sale_id: str,
        req: UpdateSaleStatusRequest,
        background: BackgroundTasks | None = None,
    ) -> SaleResponse:
        sale = await self._sales.get_by_id(sale_id, db)
        if sale is None:
            raise SaleNotFoundError(sale_id)

        if req.order_status is not None and not is_allowed_order_status(
            sale.delivery_method, req.order_status
        ):
            raise InvalidOrderStatusError(
                req.order_status,
                sale.delivery_method,
                allowed_order_statuses(sale.delivery_method),
            )

        if req.status is None and req.order_status is None:
            return SaleResponse.from_domain(sale)

        # Absent fields are not written; previous value comes from the locked row
        try:
            previous_order_status = await self._sales.update_status(
                sale,
                req.status.value if req.status is not None else None,
                req.order_status,
                db,
            )
            if previous_order_status is None:
                raise SaleNotFoundError(sale_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Sale %s status=%s order_status=%s (was %s)",
            sale.id,
            sale.status,
            sale.order_status,
            previous_order_status,
        )

        if becomes_delivered(previous_order_status, req.order_status):
            if background is not None:
                background.add_task(self._notifier.notify_delivered, sale)
            else:
                await self._notifier.notify_delivered(sale)

        return SaleResponse.from_domain(sale)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_sale(
        self, db: AsyncSession, sale_id: str, owner_id: str | None = None
    ) -> SaleResponse:
        """Fetch one sale. With ``owner_id`` set, other users' sales are forbidden."""
        sale = await self._sales.get_by_id(sale_id, db)
        if sale is None:
            raise SaleNotFoundError(sale_id)
        if owner_id is not None and sale.user_id != owner_id:
            raise ForbiddenError("sale belongs to another user")
        parties = await self._parties.get_many([sale.user_id], db)
        products = await self._products.get_many(sale.product_ids, db)
        owner = parties.get(sale.user_id)
        return SaleResponse.from_domain(
            sale,
            user_name=owner.name if owner else None,
            product_names={pid: p.name for pid, p in products.items()},
        )

    async def list_sales(
        self,
        db: AsyncSession,
        user_id: str | None,
        start_date: date | None,
        end_date: date | None,
    ) -> SaleListResponse:
        sales = await self._sales.list_sales(
            user_id,
            start_of_day(start_date) if start_date else None,
            end_of_day(end_date) if end_date else None,
            db,
        )

        # Post-query filter: drop sales whose buyer or any product no longer resolves
        parties = await self._parties.get_many([s.user_id for s in sales], db)
        products = await self._products.get_many(
            [pid for s in sales for pid in s.product_ids], db
        )
        product_names = {pid: p.name for pid, p in products.items()}
        items: list[SaleResponse] = []
        for sale in sales:
            owner = parties.get(sale.user_id)
            if owner is None or any(pid not in products for pid in sale.product_ids):
                logger.debug("Skipping sale %s with dangling references", sale.id)
                continue
            items.append(
                SaleResponse.from_domain(sale, user_name=owner.name, product_names=product_names)
            )
        return SaleListResponse(items=items, count=len(items))

    async def get_statistics(self, db: AsyncSession) -> SalesStatisticsResponse:
        stats = await self._sales.get_statistics(db)
        return SalesStatisticsResponse.from_domain(stats)
