"""FastAPI dependencies that hand the resolved caller to route handlers."""

from fastapi import Request

from storefront.access.context import Actor
from storefront.exceptions import Forbidden, Unauthenticated


def current_actor(request: Request) -> Actor | None:
    return getattr(request.state, "actor", None)


def require_actor(request: Request) -> Actor:
    actor = current_actor(request)
    if actor is None:
        raise Unauthenticated()
    return actor


def require_admin(request: Request) -> Actor:
    actor = require_actor(request)
    if not actor.is_admin:
        raise Forbidden("Administrator access required")
    return actor
