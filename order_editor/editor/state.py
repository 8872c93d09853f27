from __future__ import annotations

from enum import Enum
from typing import Callable, FrozenSet, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from ..data.models import Order, OrderLineItem
from .totals import calculate_total


class EditorPhase(str, Enum):
    LOADING = "loading"
    LOAD_FAILED = "load_failed"
    EDITING_TEMP = "editing_temp"
    EDITING_DRAFT = "editing_draft"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"
    CANCELLED = "cancelled"
    DISCARDED = "discarded"


class EditorSnapshot(BaseModel):
    """Immutable view of the editor handed to subscribers."""
    model_config = ConfigDict(frozen=True)

    phase: EditorPhase = Field(default=EditorPhase.LOADING, description="Current state machine phase")
    order: Optional[Order] = Field(default=None, description="Active order, None until resolved")
    confirmed_items: Tuple[OrderLineItem, ...] = Field(default=(), description="Line items as last read from the store")
    pending_removals: FrozenSet[int] = Field(default=frozenset(), description="Line ids hidden ahead of store confirmation")
    note_text: str = Field(default="", description="Note field contents")
    freight_text: str = Field(default="0.00", description="Freight field contents")
    message: Optional[str] = Field(default=None, description="Last message for the user")
    closed: bool = Field(default=False, description="Whether the editor asked to be closed")

    @property
    def line_items(self) -> List[OrderLineItem]:
        """Confirmed items with pending removals applied."""
        return [i for i in self.confirmed_items if i.id not in self.pending_removals]

    @property
    def total(self) -> float:
        return calculate_total(self.line_items, self.freight_text)

    @property
    def is_editable(self) -> bool:
        return self.phase in (EditorPhase.EDITING_TEMP, EditorPhase.EDITING_DRAFT)


Listener = Callable[[EditorSnapshot], None]


class EditorStateStore:
    """Holds the current snapshot and notifies subscribers of every change."""

    def __init__(self, initial: Optional[EditorSnapshot] = None) -> None:
        self._snapshot = initial or EditorSnapshot()
        self._listeners: List[Listener] = []

    @property
    def snapshot(self) -> EditorSnapshot:
        return self._snapshot

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def update(self, **changes) -> EditorSnapshot:
        self._snapshot = self._snapshot.model_copy(update=changes)
        for listener in list(self._listeners):
            listener(self._snapshot)
        return self._snapshot

    def mark_removed(self, line_id: int) -> EditorSnapshot:
        return self.update(pending_removals=self._snapshot.pending_removals | {line_id})

    def reconcile(self, items: List[OrderLineItem]) -> EditorSnapshot:
        """Replace the confirmed items with a fresh store read and drop the overlay."""
        return self.update(confirmed_items=tuple(items), pending_removals=frozenset())
