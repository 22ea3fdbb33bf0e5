"""
Order Lifecycle Engine

Creates orders, exposes them to their customer or vendor, and moves them through
ORDERED -> PROCESSING -> DELIVERED. Every write happens before any notification,
and a failed notification never undoes the write.
"""
import logging
from typing import List

from errors import NotFound, InvalidState, Forbidden
from policy import Actor, ensure_can_view_order, ensure_can_transition_order
from schemas import MealStatus, Order, OrderStatus, UserRole

logger = logging.getLogger(__name__)


class OrderService:
    def __init__(self, gateway, notifier):
        self.gateway = gateway
        self.notifier = notifier

    def create_order(self, meal_id: str, quantity: int, customer_id: str) -> dict:
        meal = self.gateway.find_meal(meal_id)
        if not meal:
            raise NotFound("Meal not found")
        # Point-in-time check only; stock is not reserved or decremented.
        if meal.get("status") != MealStatus.IN_STOCK:
            raise InvalidState("Meal is out of stock")

        order = self.gateway.create_order(Order(
            meal_id=meal_id,
            customer_id=customer_id,
            vendor_id=meal["vendor_id"],
            quantity=quantity,
            total_price=meal["price"] * quantity,
            status=OrderStatus.ORDERED,
        ))
        logger.info("Order %s created by customer %s for meal %s", order["_id"], customer_id, meal_id)

        self._notify(self.notifier.send_order_invoice, order.get("customer"), order)
        self._notify(self.notifier.send_order_invoice, order.get("vendor"), order)
        return order

    def list_orders(self, actor: Actor) -> List[dict]:
        if actor.role == UserRole.CUSTOMER:
            return self.gateway.list_orders({"customer_id": actor.id})
        if actor.role == UserRole.VENDOR:
            return self.gateway.list_orders({"vendor_id": actor.id})
        raise Forbidden("Invalid role for accessing orders")

    def get_order(self, order_id: str, actor: Actor) -> dict:
        order = self.gateway.find_order(order_id)
        if not order:
            raise NotFound("Order not found")
        ensure_can_view_order(actor, order)
        return order

    def update_status(self, order_id: str, status: OrderStatus, actor: Actor) -> dict:
        order = self.gateway.find_order(order_id)
        if not order:
            raise NotFound("Order not found")
        ensure_can_transition_order(actor, order, status)

        updated = self.gateway.update_order_status(order_id, status)
        if not updated:
            raise NotFound("Order not found")
        logger.info("Order %s moved from %s to %s by %s %s",
                    order_id, order["status"], updated["status"], actor.role.value, actor.id)

        if status == OrderStatus.PROCESSING:
            self._notify(self.notifier.send_order_status_update, updated.get("customer"), updated, "Processing")
        elif status == OrderStatus.DELIVERED:
            self._notify(self.notifier.send_delivery_notification, updated.get("customer"), updated)
            self._notify(self.notifier.send_delivery_notification, updated.get("vendor"), updated)
        return updated

    def _notify(self, send, recipient, order: dict, *args) -> None:
        if not recipient or not recipient.get("email"):
            logger.warning("Order %s: no recipient address for %s", order["_id"], send.__name__)
            return
        try:
            sent = send(recipient["email"], order, *args)
        except Exception:
            # best-effort: the order write already stands
            logger.exception("Order %s: %s to %s failed", order["_id"], send.__name__, recipient["email"])
            return
        if not sent:
            logger.warning("Order %s: %s to %s was not sent", order["_id"], send.__name__, recipient["email"])
