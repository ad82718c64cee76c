"""Delivery-progress rules: which order_status values each delivery method accepts.

home_delivery: En preparación → En envío  → Entregado
local_pickup:  En preparación → Preparado → Entregado

Only set membership is enforced. Any allowed value may be written at any time,
including the current one; ordering between steps is not checked.
"""
from src.bk_common.enums import DeliveryMethod, OrderProgress

ALLOWED_ORDER_STATUSES: dict[str, tuple[str, ...]] = {
    DeliveryMethod.HOME_DELIVERY.value: (
        OrderProgress.IN_PREPARATION.value,
        OrderProgress.SHIPPING.value,
        OrderProgress.DELIVERED.value,
    ),
    DeliveryMethod.LOCAL_PICKUP.value: (
        OrderProgress.IN_PREPARATION.value,
        OrderProgress.READY.value,
        OrderProgress.DELIVERED.value,
    ),
}

INITIAL_ORDER_STATUS = OrderProgress.IN_PREPARATION.value
TERMINAL_ORDER_STATUS = OrderProgress.DELIVERED.value


def allowed_order_statuses(delivery_method: str) -> tuple[str, ...]:
    return ALLOWED_ORDER_STATUSES.get(delivery_method, ())


def is_allowed_order_status(delivery_method: str, order_status: str) -> bool:
    return order_status in allowed_order_statuses(delivery_method)


def becomes_delivered(previous: str, new: str | None) -> bool:
    """True when a write moves the order into the terminal delivered state."""
    return new == TERMINAL_ORDER_STATUS and previous != TERMINAL_ORDER_STATUS
