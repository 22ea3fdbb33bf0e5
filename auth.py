"""
Authentication stage for the API.

Tokenless demo auth: the caller names itself with the X-User-Id header and the
user is looked up through the gateway. Routes receive a typed Actor and pass it
explicitly into the order engine.
"""
from typing import Optional
from fastapi import Depends, Header

from database import MongoGateway, get_gateway
from errors import Forbidden, Unauthorized
from policy import Actor, require_role
from schemas import UserRole

KNOWN_ROLES = {role.value for role in UserRole}


def get_actor(x_user_id: Optional[str] = Header(None), gateway: MongoGateway = Depends(get_gateway)) -> Actor:
    if not x_user_id:
        raise Unauthorized("Missing X-User-Id header")
    user = gateway.find_user(x_user_id)
    if not user:
        raise Unauthorized("Unknown user")
    if user.get("role") not in KNOWN_ROLES:
        raise Forbidden("Invalid role for accessing orders")
    return Actor(id=user["_id"], role=user["role"], email=user.get("email"))


def role_required(*roles):
    def dependency(actor: Actor = Depends(get_actor)) -> Actor:
        require_role(actor, *roles)
        return actor
    return dependency
