"""Session endpoints.

Credentials are verified by the external identity provider; this router only
exchanges a known user for a signed session cookie. The direct sign-in
endpoint exists for development and tests and is disabled in production.
"""

from fastapi import APIRouter, Depends, Request

from storefront.access.context import Actor, sign_in, sign_out
from storefront.api.deps import require_actor
from storefront.api.schemas import LoginInfoResponse, SignInRequest, StatusResponse, UserResponse
from storefront.exceptions import Forbidden, Unauthenticated
from storefront.identity.registration import find_user
from storefront.settings import get_settings
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/login", response_model=LoginInfoResponse)
async def login(next: str | None = None) -> LoginInfoResponse:
    return LoginInfoResponse(message="Sign in with your identity provider to continue", next=next)


@router.post("/session", response_model=UserResponse)
async def create_session(body: SignInRequest, request: Request) -> UserResponse:
    if not get_settings().dev_login_enabled:
        raise Forbidden("Direct sign-in is disabled")

    user = find_user(external_id=body.external_id) if body.external_id else find_user(email=body.email)
    if user is None:
        raise Unauthenticated("Unknown user")

    sign_in(request, user)
    logger.info("user_signed_in", user_id=str(user.id), role=user.role)
    return UserResponse.from_user(user)


@router.post("/logout", response_model=StatusResponse)
async def logout(request: Request) -> StatusResponse:
    sign_out(request)
    return StatusResponse()


@router.get("/me", response_model=UserResponse)
async def me(actor: Actor = Depends(require_actor)) -> UserResponse:
    user = find_user(user_id=actor.user_id)
    if user is None:
        raise Unauthenticated("Session user no longer exists")
    return UserResponse.from_user(user)
