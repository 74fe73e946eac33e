"""
Custom exceptions for Brewline business logic.

Services raise these; blueprints translate them into HTTP responses.
"""


class BrewlineError(Exception):
    """Base exception for all Brewline business logic errors."""

    def __init__(self, message: str, code: str = "BREWLINE_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class NotFoundError(BrewlineError):
    """Resource not found."""

    def __init__(self, resource: str, identifier=None):
        message = f"{resource} not found"
        self.identifier = identifier
        super().__init__(message, f"{resource.upper()}_NOT_FOUND")


class CustomerNotFoundError(NotFoundError):
    """Customer not found."""

    def __init__(self, identifier=None):
        super().__init__("Customer", identifier)


class ProfileNotFoundError(NotFoundError):
    """Coffee profile not found."""

    def __init__(self, identifier=None):
        super().__init__("Profile", identifier)


class ValidationError(BrewlineError):
    """Invalid input data."""

    def __init__(self, message: str, field: str = None):
        self.field = field
        code = f"INVALID_{field.upper()}" if field else "VALIDATION_ERROR"
        super().__init__(message, code)


class InsufficientOrdersError(ValidationError):
    """Not enough completed orders to infer a coffee profile."""

    def __init__(self, found: int, required: int):
        self.found = found
        self.required = required
        super().__init__(f"Need at least {required} orders to generate profile")
        self.code = "INSUFFICIENT_ORDERS"


class InsufficientPointsError(BrewlineError):
    """Not enough points for the operation."""

    def __init__(self, current: int, required: int):
        self.current = current
        self.required = required
        super().__init__("Insufficient points", "INSUFFICIENT_POINTS")
