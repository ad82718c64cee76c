"""Global enums — must match DB CHECK constraints exactly."""

from enum import Enum


class UserRole(str, Enum):
    ADMIN = "admin"
    EMPLOYEE = "employee"
    CLIENT = "client"


class PaymentMethod(str, Enum):
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    CASH = "cash"
    TRANSFER = "transfer"


class SaleStatus(str, Enum):
    """Financial state of a sale."""
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class DeliveryMethod(str, Enum):
    HOME_DELIVERY = "home_delivery"
    LOCAL_PICKUP = "local_pickup"


class OrderProgress(str, Enum):
    """Delivery progress of a sale. Values are stored and shown as-is."""
    IN_PREPARATION = "En preparación"
    SHIPPING = "En envío"
    READY = "Preparado"
    DELIVERED = "Entregado"
