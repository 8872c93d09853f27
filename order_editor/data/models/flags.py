from __future__ import annotations

from enum import IntEnum

# Shared sentinel for "no customer", "no storekeeper" and "not synced to the server"
UNSET_ID = -1


class OrderApprovalFlag(IntEnum):
    """Approval workflow position of an order."""
    UNSET = -1
    NEW_ORDER = 0
    SEND_TO_STOREKEEPER = 1
    VERIFIED_BY_STOREKEEPER = 2
    COMPLETED = 3
    REJECTED = 4
    CANCELLED = 5
    SEND_TO_CHECKER = 6
    CHECKER_IS_CHECKING = 7


class OrderFlag(IntEnum):
    """Lifecycle of the order record itself."""
    DELETED = 0
    ACTIVE = 1
    TEMP = 2
    DRAFT = 3


class LineItemFlag(IntEnum):
    """Lifecycle of a line item record."""
    DELETED = 0
    ACTIVE = 1
    TEMP = 2


class LineItemStatus(IntEnum):
    """Checking workflow of a single line item."""
    NEW_ITEM = 0
    NOT_CHECKED = 1
    IN_STOCK = 2
    OUT_OF_STOCK = 3
    REPORTED = 4
    NOT_AVAILABLE = 5
    CANCELLED = 6
    REPLACED = 7


NON_CANCELLABLE_FLAGS = frozenset({
    OrderApprovalFlag.SEND_TO_STOREKEEPER,
    OrderApprovalFlag.COMPLETED,
    OrderApprovalFlag.CANCELLED,
})
