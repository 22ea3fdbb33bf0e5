"""
Authorization Policy

Pure allow/deny rules over (actor role, actor id, resource owner, action).
The can_* functions answer yes/no, the ensure_* functions raise Forbidden.
Only CUSTOMER and VENDOR exist; there is no override role.
"""
from typing import Optional
from pydantic import BaseModel

from errors import Forbidden
from schemas import UserRole, OrderStatus


class Actor(BaseModel):
    id: str
    role: UserRole
    email: Optional[str] = None


# ===================== Meals =====================

def can_create_meal(role) -> bool:
    return role == UserRole.VENDOR


def can_modify_meal(role, actor_id: str, owner_id: str) -> bool:
    """Update and delete share one rule: the owning vendor only."""
    return role == UserRole.VENDOR and owner_id == actor_id


def ensure_can_create_meal(actor: Actor) -> None:
    if not can_create_meal(actor.role):
        raise Forbidden("Only vendors can create meals")


def ensure_can_update_meal(actor: Actor, meal: dict) -> None:
    if not can_modify_meal(actor.role, actor.id, meal["vendor_id"]):
        raise Forbidden("You can only update your own meals")


def ensure_can_delete_meal(actor: Actor, meal: dict) -> None:
    if not can_modify_meal(actor.role, actor.id, meal["vendor_id"]):
        raise Forbidden("You can only delete your own meals")


# ===================== Orders =====================

def can_view_order(role, actor_id: str, order: dict) -> bool:
    if role == UserRole.CUSTOMER:
        return order["customer_id"] == actor_id
    if role == UserRole.VENDOR:
        return order["vendor_id"] == actor_id
    return False


def ensure_can_view_order(actor: Actor, order: dict) -> None:
    if actor.role not in (UserRole.CUSTOMER, UserRole.VENDOR):
        raise Forbidden("Invalid role for accessing orders")
    if not can_view_order(actor.role, actor.id, order):
        raise Forbidden("Access denied to this order")


def transition_denial(role, actor_id: str, order: dict, target) -> Optional[str]:
    """Return the reason a status change is refused, or None when allowed.

    Customers are not checked for ownership, and vendors may set any status
    on their own orders, including moving it backwards.
    """
    if role == UserRole.CUSTOMER:
        if target != OrderStatus.DELIVERED:
            return "Customers can only mark orders as delivered"
        return None
    if role == UserRole.VENDOR:
        if order["vendor_id"] != actor_id:
            return "You can only update orders for your meals"
        return None
    return "Invalid role for updating orders"


def can_transition_order(role, actor_id: str, order: dict, target) -> bool:
    return transition_denial(role, actor_id, order, target) is None


def ensure_can_transition_order(actor: Actor, order: dict, target) -> None:
    reason = transition_denial(actor.role, actor.id, order, target)
    if reason is not None:
        raise Forbidden(reason)


# ===================== Roles =====================

def require_role(actor: Actor, *roles) -> None:
    if actor.role not in roles:
        raise Forbidden("Insufficient role for this action")
