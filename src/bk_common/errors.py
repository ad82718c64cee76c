"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/User
  2xxx: Catalog
  3xxx: Party
  4xxx: Sales
  5xxx: Notification
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth/User ---

class EmailExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(1002, "Email already exists", 409)


class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid email or password", 401)


class AccountDisabledError(AppError):
    def __init__(self) -> None:
        super().__init__(1004, "User is inactive", 403)


class InvalidRefreshTokenError(AppError):
    def __init__(self) -> None:
        super().__init__(1005, "Refresh token is invalid or expired", 401)


class RoleNotAllowedError(AppError):
    def __init__(self, role: str) -> None:
        super().__init__(1006, f"Role {role} is not allowed to access this resource", 403)


# --- 2xxx: Catalog ---

class ProductNotFoundError(AppError):
    def __init__(self, product_id: str) -> None:
        super().__init__(2001, f"Product not found: {product_id}", 404)


class InsufficientStockError(AppError):
    def __init__(self, product_name: str, requested: int, available: int) -> None:
        super().__init__(
            2002,
            f"Insufficient stock for {product_name}: requested {requested}, available {available}",
            422,
        )


# --- 3xxx: Party ---

class UserNotFoundError(AppError):
    def __init__(self, user_id: str) -> None:
        super().__init__(3001, f"User not found: {user_id}", 404)


class ForbiddenError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(3002, f"Forbidden: {detail}", 403)


# --- 4xxx: Sales ---

class EmptySaleError(AppError):
    def __init__(self) -> None:
        super().__init__(4001, "A sale must contain at least one product", 422)


class PaymentMethodRequiredError(AppError):
    def __init__(self) -> None:
        super().__init__(4002, "Payment method is required", 422)


class DeliveryMethodRequiredError(AppError):
    def __init__(self) -> None:
        super().__init__(4003, "Delivery method is required", 422)


class DeliveryAddressRequiredError(AppError):
    def __init__(self, missing: list[str]) -> None:
        super().__init__(
            4004,
            f"Delivery address is incomplete for home_delivery, missing: {', '.join(missing)}",
            422,
        )


class ProductIdRequiredError(AppError):
    def __init__(self, position: int) -> None:
        super().__init__(4005, f"Item {position} has no product id", 422)


class InvalidQuantityError(AppError):
    def __init__(self, product_id: str, quantity: object) -> None:
        super().__init__(
            4006, f"Invalid quantity for product {product_id}: {quantity}", 422
        )


class NonPositiveTotalError(AppError):
    def __init__(self) -> None:
        super().__init__(4007, "Sale total must be greater than zero", 422)


class SaleNotFoundError(AppError):
    def __init__(self, sale_id: str) -> None:
        super().__init__(4008, f"Sale not found: {sale_id}", 404)


class InvalidOrderStatusError(AppError):
    def __init__(self, order_status: str, delivery_method: str, allowed: tuple[str, ...]) -> None:
        super().__init__(
            4009,
            f"Invalid order status '{order_status}' for delivery method {delivery_method}. "
            f"Allowed: {', '.join(allowed)}",
            422,
        )


# --- 5xxx: Notification ---

class NotificationError(AppError):
    """Raised by email channels; contained by the dispatcher, never returned to clients."""

    def __init__(self, detail: str) -> None:
        super().__init__(5001, f"Notification dispatch failed: {detail}", 502)


# --- 9xxx: System ---

class RateLimitError(AppError):
    def __init__(self) -> None:
        super().__init__(9001, "Rate limit exceeded", 429)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class RequestValidationFailedError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(9003, f"Request validation failed: {detail}", 422)
