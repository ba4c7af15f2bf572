"""Access gate for the dashboard and administration areas.

Runs before routing: resolves the :class:`Actor` from the session cookie,
stores it on ``request.state.actor`` for every request, and redirects
browsers away from areas they may not enter.
"""

from urllib.parse import quote
from uuid import uuid4

from fastapi import Request
from starlette.responses import RedirectResponse

from storefront.access.context import Actor
from storefront.utils.logging import bind_request, get_logger

logger = get_logger(__name__)

LOGIN_PATH = "/auth/login"
DASHBOARD_PATH = "/dashboard"
PROTECTED_PREFIXES = ("/dashboard", "/admin")
ADMIN_PREFIXES = ("/admin",)


def _matches(path, prefixes):
    return any(path == prefix or path.startswith(prefix + "/") for prefix in prefixes)


def gate_decision(path: str, actor: Actor | None) -> str | None:
    """Where to send the caller instead, or ``None`` when the request may proceed."""
    if not _matches(path, PROTECTED_PREFIXES):
        return None
    if actor is None:
        return f"{LOGIN_PATH}?next={quote(path, safe='')}"
    if _matches(path, ADMIN_PREFIXES) and not actor.is_admin:
        return DASHBOARD_PATH
    return None


async def access_gate(request: Request, call_next):
    actor = Actor.from_session(request.session)
    request.state.actor = actor

    bind_request(
        request_id=request.headers.get("x-request-id") or uuid4().hex,
        path=request.url.path,
        user_id=actor.user_id if actor else None,
    )

    redirect_to = gate_decision(request.url.path, actor)
    if redirect_to is not None:
        logger.info(
            "access_redirected",
            role=actor.role if actor else None,
            location=redirect_to,
        )
        return RedirectResponse(redirect_to, status_code=303)

    return await call_next(request)
