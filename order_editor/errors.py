from __future__ import annotations


class OrderEditorError(Exception):
    """Base class for failures surfaced to the person editing an order."""

    default_message = ""

    def __init__(self, message: str | None = None) -> None:
        message = self.default_message if message is None else message
        super().__init__(message)
        self.message = message

    def user_message(self, fallback: str | None = None) -> str:
        """The error's own message, else the caller's fallback, else a generic one."""
        return self.message or fallback or "Unknown error occurred"


class OrderNotLoadedError(OrderEditorError):
    """No active order for the session; every action is blocked."""

    default_message = "Order not loaded"


class OrderValidationError(OrderEditorError):
    """Input rejected before any store call was made."""


class StoreError(OrderEditorError):
    """An order store or catalog call reported failure."""
