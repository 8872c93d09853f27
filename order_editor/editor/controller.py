from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from ..config import get_config
from ..data.interface import OrderStore, ProductCatalog
from ..data.models import (
    UNSET_ID,
    NON_CANCELLABLE_FLAGS,
    Customer,
    Order,
    OrderLineItem,
)
from ..errors import (
    OrderEditorError,
    OrderNotLoadedError,
    OrderValidationError,
    StoreError,
)
from ..logging import get_logger
from .line_items import LineItemForm, apply_line_item_edit, build_edit_form, build_new_form, new_line_item
from .navigation import BackAction, BackPrompt, back_prompt, resolve_back_choice
from .state import EditorPhase, EditorSnapshot, EditorStateStore
from .totals import calculate_total, format_amount, parse_freight


class ActionResult(BaseModel):
    """Outcome of an editor action as shown to the user."""
    ok: bool = Field(description="Whether the action succeeded")
    message: Optional[str] = Field(default=None, description="Message to show, if any")
    closed: bool = Field(default=False, description="Whether the editor should now close")


class OrderEditorController:
    """Create/Edit Order controller.

    Resolves the order for the session, keeps the note and freight fields,
    and drives the order store through the temp -> draft -> submitted
    lifecycle. Handlers never raise OrderEditorError; failures come back as
    an ActionResult and as the snapshot message.

    Every state update after an await goes through `_publish`, which drops it
    once the controller has been detached from its view.
    """

    def __init__(
        self,
        store: OrderStore,
        catalog: ProductCatalog,
        state: Optional[EditorStateStore] = None,
    ) -> None:
        self.store = store
        self.catalog = catalog
        self.config = get_config()
        self.state = state or EditorStateStore(EditorSnapshot(freight_text=self.config.default_freight_text))
        self.logger = get_logger(__name__)
        self._attached = True

    # ---------- lifecycle / state helpers ----------

    @property
    def attached(self) -> bool:
        return self._attached

    def detach(self) -> None:
        """Called when the view goes away; later results are discarded."""
        self._attached = False

    @property
    def snapshot(self) -> EditorSnapshot:
        return self.state.snapshot

    @property
    def total(self) -> float:
        snap = self.snapshot
        return calculate_total(snap.line_items, snap.freight_text)

    def _publish(self, **changes) -> None:
        if not self._attached:
            self.logger.debug(f"Editor detached, dropping update of {sorted(changes)}")
            return
        self.state.update(**changes)

    def _require_order(self) -> Order:
        order = self.snapshot.order
        if order is None:
            raise OrderNotLoadedError()
        return order

    def _require_editable(self) -> Order:
        order = self._require_order()
        if not self.snapshot.is_editable:
            raise OrderValidationError("Order can no longer be edited")
        return order

    def _fail(self, exc: OrderEditorError, fallback: Optional[str] = None) -> ActionResult:
        message = exc.user_message(fallback)
        self.logger.warning(f"{type(exc).__name__}: {message}")
        self._publish(message=message)
        return ActionResult(ok=False, message=message)

    async def _reload_items(self, order_id: int) -> bool:
        try:
            items = await self.store.list_line_items(order_id)
        except StoreError as exc:
            self.logger.warning(f"Could not refresh items of order {order_id}: {exc.user_message()}")
            # fall back to the last confirmed list so hidden items are not lost
            self._publish(pending_removals=frozenset())
            return False
        if self._attached:
            self.state.reconcile(items)
        return True

    # ---------- field edits ----------

    def set_note_text(self, text: str) -> None:
        self._publish(note_text=text)

    def set_freight_text(self, text: str) -> None:
        self._publish(freight_text=text)

    # ---------- order resolution ----------

    async def load(self, draft_id: Optional[int] = None, customer: Optional[Customer] = None) -> Optional[Order]:
        """Resolve the order for this session.

        Args:
            draft_id (int, optional): Saved draft to edit. A temp order is used when omitted.
            customer (Customer, optional): Customer to preassign to a temp order that has none.
        Returns:
            Order | None: The active order, or None when it could not be loaded.
        """
        self._publish(phase=EditorPhase.LOADING, message=None, closed=False)
        freight_text = self.snapshot.freight_text
        items: List[OrderLineItem] = []
        try:
            if draft_id is not None:
                order = await self.store.get_draft_order(draft_id)
                if order is not None:
                    freight_text = format_amount(order.freight_charge)
            else:
                order = await self.store.create_temp_order()
                if order is not None and customer is not None and not order.has_customer:
                    await self.store.set_customer(order.id, customer.customer_id, customer.name)
                    order = order.model_copy(update={
                        "customer_id": customer.customer_id,
                        "customer_name": customer.name,
                    })
            if order is not None:
                items = await self.store.list_line_items(order.id)
        except StoreError as exc:
            self.logger.warning(f"Loading order failed: {exc.user_message()}")
            order = None

        if order is None:
            self._publish(phase=EditorPhase.LOAD_FAILED, order=None, message="Failed to load order")
            return None

        self.logger.info(f"Editing order {order.id} ({'draft' if order.is_draft else 'temp'}) with {len(items)} items")
        self._publish(
            phase=EditorPhase.EDITING_DRAFT if order.is_draft else EditorPhase.EDITING_TEMP,
            order=order,
            confirmed_items=tuple(items),
            pending_removals=frozenset(),
            note_text=order.note or "",
            freight_text=freight_text,
        )
        return order

    async def refresh_line_items(self) -> ActionResult:
        try:
            order = self._require_order()
        except OrderEditorError as exc:
            return self._fail(exc)
        if not await self._reload_items(order.id):
            return self._fail(StoreError(), "Failed to load items")
        return ActionResult(ok=True)

    async def select_customer(self, customer: Customer) -> ActionResult:
        try:
            order = self._require_editable()
            await self.store.set_customer(order.id, customer.customer_id, customer.name)
        except OrderEditorError as exc:
            return self._fail(exc, "Failed to set customer")
        self._publish(
            order=order.model_copy(update={"customer_id": customer.customer_id, "customer_name": customer.name}),
            message=None,
        )
        await self._reload_items(order.id)
        return ActionResult(ok=True)

    # ---------- line items ----------

    async def add_line_item(
        self,
        product_id: int,
        quantity: float,
        unit_id: Optional[int] = None,
        rate: Optional[float] = None,
        narration: str = "",
    ) -> ActionResult:
        """Add a product to the order.

        The unit defaults to the product's default unit, then its base unit, then
        its first unit. The rate defaults to the product price.
        """
        try:
            order = self._require_editable()
            product = await self.catalog.get_product(product_id)
            if product is None:
                raise StoreError("Product not found")
            form = build_new_form(product, quantity, unit_id=unit_id, rate=rate, narration=narration)
            added = await self.store.add_line_item(new_line_item(order, form))
        except OrderEditorError as exc:
            return self._fail(exc, "Failed to add item")
        unit = product.find_unit(added.unit_id)
        self.logger.info(f"Added {added.quantity:g} {unit.label} of product {product_id} to order {order.id}")
        await self._reload_items(order.id)
        return ActionResult(ok=True)

    async def begin_edit(self, item: OrderLineItem) -> Optional[LineItemForm]:
        """Look up the item's product and return a form filled from the item."""
        try:
            self._require_editable()
            product = await self.catalog.get_product(item.product_id)
            if product is None:
                raise StoreError("Product not found")
        except OrderEditorError as exc:
            self._fail(exc)
            return None
        return build_edit_form(product, item)

    async def confirm_edit(self, item: OrderLineItem, form: LineItemForm) -> ActionResult:
        """Store the edited item locally; it reaches the server only on send."""
        try:
            order = self._require_editable()
            await self.store.upsert_line_item(apply_line_item_edit(item, form))
        except OrderEditorError as exc:
            return self._fail(exc, "Failed to update item")
        await self._reload_items(order.id)
        return ActionResult(ok=True)

    async def remove_line_item(self, item: OrderLineItem) -> ActionResult:
        """Hide the item at once, delete it, then re-read the list whatever the outcome."""
        try:
            order = self._require_editable()
        except OrderEditorError as exc:
            return self._fail(exc)

        if self._attached:
            self.state.mark_removed(item.id)

        error: Optional[StoreError] = None
        try:
            await self.store.delete_line_item(item.id)
        except StoreError as exc:
            error = exc

        reloaded = await self._reload_items(order.id)
        if error is not None:
            return self._fail(error, "Failed to remove item")
        if not reloaded:
            # the delete went through, so the line leaves the confirmed list too
            confirmed = tuple(i for i in self.snapshot.confirmed_items if i.id != item.id)
            self._publish(confirmed_items=confirmed)
        return ActionResult(ok=True)

    # ---------- save / send / cancel ----------

    async def save_as_draft(self) -> ActionResult:
        try:
            order = self._require_editable()
            await self.store.set_note(order.id, self.snapshot.note_text)
            snap = self.snapshot
            total = calculate_total(snap.line_items, snap.freight_text)
            draft = await self.store.save_draft(order.id, parse_freight(snap.freight_text), total)
        except OrderEditorError as exc:
            return self._fail(exc, "Failed to save draft")
        self._publish(order=draft, phase=EditorPhase.EDITING_DRAFT, closed=True, message=None)
        return ActionResult(ok=True, closed=True)

    async def send_order(self) -> ActionResult:
        try:
            order = self._require_editable()
            if not order.has_customer:
                raise OrderValidationError("Please select a customer!")
        except OrderEditorError as exc:
            return self._fail(exc)

        previous = self.snapshot.phase
        try:
            await self.store.set_note(order.id, self.snapshot.note_text)
            snap = self.snapshot
            total = calculate_total(snap.line_items, snap.freight_text)
            self._publish(phase=EditorPhase.SUBMITTING, message=None)
            # No storekeeper is assigned: every storekeeper is notified and any one may accept
            submitted = await self.store.submit(
                order.id, parse_freight(snap.freight_text), total, storekeeper_id=UNSET_ID,
            )
        except StoreError as exc:
            self._publish(phase=previous)
            return self._fail(exc, "Failed to send order")

        try:
            await self.store.delete_order_and_items(order.id)
        except StoreError as exc:
            self.logger.warning(
                f"Order {order.id} was sent as {submitted.server_id} but the local copy "
                f"could not be removed: {exc.user_message()}"
            )
        self.logger.info(f"Sent order {order.id} as {submitted.server_id}")
        self._publish(order=submitted, phase=EditorPhase.SUBMITTED, closed=True, message=None)
        return ActionResult(ok=True, closed=True)

    @property
    def can_cancel(self) -> bool:
        order = self.snapshot.order
        return order is not None and order.approve_flag not in NON_CANCELLABLE_FLAGS

    async def cancel_order(self, confirmed: bool) -> ActionResult:
        """Cancel the order once the user has confirmed."""
        try:
            order = self._require_order()
            if not self.can_cancel:
                raise OrderValidationError("Order can no longer be cancelled")
        except OrderEditorError as exc:
            return self._fail(exc)
        if not confirmed:
            return ActionResult(ok=False)

        try:
            cancelled = await self.store.cancel(order)
        except StoreError as exc:
            return self._fail(exc, "Failed to cancel order")
        message = "Order cancelled"
        self._publish(order=cancelled, phase=EditorPhase.CANCELLED, closed=True, message=message)
        return ActionResult(ok=True, message=message, closed=True)

    # ---------- back navigation ----------

    def request_back(self) -> BackPrompt:
        """Decide whether leaving needs the cancel/discard/save dialog."""
        snap = self.snapshot
        if not snap.is_editable:
            prompt = BackPrompt.LEAVE
        else:
            prompt = back_prompt(snap.order, snap.line_items, snap.note_text)
        if prompt is BackPrompt.LEAVE:
            self._publish(closed=True)
        return prompt

    async def resolve_back(self, choice: Optional[str]) -> ActionResult:
        """Act on the dialog result: 'cancel', 'discard' or 'save'."""
        action = resolve_back_choice(choice)
        if action is BackAction.STAY:
            return ActionResult(ok=True)
        if action is BackAction.SAVE_DRAFT:
            return await self.save_as_draft()

        try:
            order = self._require_order()
            await self.store.delete_order_and_items(order.id)
        except OrderEditorError as exc:
            return self._fail(exc, "Failed to discard order")
        self.logger.info(f"Discarded order {order.id}")
        self._publish(
            order=None,
            confirmed_items=(),
            pending_removals=frozenset(),
            phase=EditorPhase.DISCARDED,
            closed=True,
            message=None,
        )
        return ActionResult(ok=True, closed=True)
