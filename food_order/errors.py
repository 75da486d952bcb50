"""Error taxonomy and operation results."""

from __future__ import annotations

from dataclasses import dataclass


class OrderError(Exception):
    """Base class for failures surfaced to the customer or the operator."""

    retryable = False

    def __init__(self, message: str, user_message: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.user_message = user_message or message


class ValidationError(OrderError):
    """Local input problem; fixed by correcting the input."""

    def __init__(self, code: str, user_message: str | None = None) -> None:
        super().__init__(code, user_message)
        self.code = code


class InsufficientStock(OrderError):
    """Requested quantity exceeds remaining stock."""

    def __init__(self, item_id: int, requested: int, remaining: int) -> None:
        super().__init__(
            f"insufficient stock for item {item_id}: requested {requested}, remaining {remaining}",
            f"Only {remaining} left. Please lower the quantity.",
        )
        self.item_id = item_id
        self.requested = requested
        self.remaining = remaining


class RemoteWriteError(OrderError):
    """An append, update or remove against the order store failed."""

    retryable = True


class RemoteReadError(OrderError):
    """The order subscription could not deliver a snapshot."""

    retryable = True


@dataclass(frozen=True)
class OperationResult:
    """Outcome of a user-initiated operation."""

    ok: bool
    message: str | None = None
    error: OrderError | None = None
    order_id: str | None = None
    cancelled: bool = False

    @property
    def retryable(self) -> bool:
        return self.error is not None and self.error.retryable

    @classmethod
    def success(cls, message: str | None = None, order_id: str | None = None) -> "OperationResult":
        return cls(ok=True, message=message, order_id=order_id)

    @classmethod
    def failure(cls, error: OrderError, message: str | None = None) -> "OperationResult":
        return cls(ok=False, message=message or error.user_message, error=error)

    @classmethod
    def declined(cls, message: str | None = None) -> "OperationResult":
        return cls(ok=False, message=message, cancelled=True)
