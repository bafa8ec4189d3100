"""
Domain errors raised by the service layer.

Each class carries a stable ``code`` and the HTTP ``status_code`` the
exception handler in :mod:`hotel_booking.error_handlers` answers with.

Services report every failure by raising one of these rather than returning
a result value. Each operation fails with exactly one kind, and always
before anything has been written.
"""


class HotelBookingError(Exception):
    status_code = 400
    code = "error"
    default_detail = "Request failed"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class NotFound(HotelBookingError):
    status_code = 404
    code = "not_found"
    default_detail = "Resource not found"


class PermissionDenied(HotelBookingError):
    status_code = 403
    code = "permission_denied"
    default_detail = "Not allowed to modify this resource"


class InvalidStateTransition(HotelBookingError):
    code = "invalid_state_transition"

    def __init__(self, current, action, detail: str | None = None):
        self.current = current
        self.action = action
        super().__init__(
            detail or f"Cannot {action.value} a hotel in status {current.value}"
        )


class HotelNotApproved(HotelBookingError):
    code = "hotel_not_approved"
    default_detail = "Hotel is not approved; rooms cannot be added"


class InsufficientStock(HotelBookingError):
    code = "insufficient_stock"

    def __init__(self, stock: int, delta: int):
        self.stock = stock
        self.delta = delta
        super().__init__(f"Insufficient stock: {stock} available, change of {delta} requested")


class UsernameTaken(HotelBookingError):
    code = "username_taken"
    default_detail = "Username already exists"


class InvalidCredentials(HotelBookingError):
    status_code = 401
    code = "invalid_credentials"
    default_detail = "Incorrect username or password"
