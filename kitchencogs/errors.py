"""Domain errors raised by kitchenCOGS services."""

from typing import Any, Dict, Optional


class KitchenError(Exception):
    """Base class for domain errors."""

    code = "KITCHEN_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class NotFoundError(KitchenError):
    """Referenced record does not exist."""

    code = "NOT_FOUND"

    def __init__(self, resource: str, identifier: str):
        super().__init__(
            f"{resource} not found: {identifier}",
            details={"resource": resource, "identifier": identifier},
        )


class ValidationError(KitchenError):
    """Input is well-formed but not acceptable."""

    code = "VALIDATION_ERROR"


class ConflictError(KitchenError):
    """Operation conflicts with current state (open session, stale version)."""

    code = "CONFLICT"


class InsufficientPaymentError(KitchenError):
    """Cash handed over does not cover the sale total."""

    code = "INSUFFICIENT_PAYMENT"

    def __init__(self, total: float, amount_given: float):
        super().__init__(
            f"Amount given ({amount_given:.2f}) is less than total ({total:.2f})",
            details={"total": total, "amount_given": amount_given},
        )
