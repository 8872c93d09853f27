from __future__ import annotations

from enum import Enum
from typing import Optional, Sequence

from ..data.models import Order, OrderLineItem


class BackPrompt(str, Enum):
    """What leaving the editor requires."""
    LEAVE = "leave"        # nothing to lose
    CONFIRM = "confirm"    # ask: cancel / discard / save


class BackAction(str, Enum):
    STAY = "stay"
    DISCARD = "discard"
    SAVE_DRAFT = "save"


_CHOICES = {
    "cancel": BackAction.STAY,
    "discard": BackAction.DISCARD,
    "save": BackAction.SAVE_DRAFT,
}


def has_unsaved_changes(order: Optional[Order], items: Sequence[OrderLineItem], note_text: str) -> bool:
    if order is None:
        return False
    return bool(items) or order.has_customer or bool(note_text)


def back_prompt(order: Optional[Order], items: Sequence[OrderLineItem], note_text: str) -> BackPrompt:
    if has_unsaved_changes(order, items, note_text):
        return BackPrompt.CONFIRM
    return BackPrompt.LEAVE


def resolve_back_choice(choice: Optional[str]) -> BackAction:
    """Map the dialog result to an action. Any other dismissal means stay."""
    return _CHOICES.get(choice, BackAction.STAY)
