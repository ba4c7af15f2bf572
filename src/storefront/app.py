"""Storefront FastAPI application.

Every request runs inside the storefront domain context. The session cookie
is decoded first, then the access gate resolves the caller and guards the
dashboard and administration areas before any route runs.

Usage:
    uvicorn storefront.app:create_app --factory --host 0.0.0.0 --port 8000 --reload
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from storefront.access.gate import access_gate
from storefront.api.errors import register_error_handlers
from storefront.domain import init_domain, storefront
from storefront.settings import get_settings


def create_app() -> FastAPI:
    init_domain()
    settings = get_settings()

    app = FastAPI(
        title="Storefront API",
        description="Catalogue, cart, checkout and order administration",
    )

    # Last added runs outermost: session, CORS, domain context, gate
    @app.middleware("http")
    async def gate(request: Request, call_next):
        return await access_gate(request, call_next)

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the storefront domain context for each request."""
        with storefront.domain_context():
            response = await call_next(request)
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        session_cookie=settings.session_cookie,
        max_age=settings.session_max_age,
        same_site="lax",
        https_only=settings.is_production,
    )

    register_error_handlers(app)

    from storefront.api import (
        admin_router,
        auth_router,
        cart_router,
        category_router,
        dashboard_router,
        order_router,
        product_router,
        review_router,
        wishlist_router,
    )

    app.include_router(auth_router)
    app.include_router(product_router)
    app.include_router(review_router)
    app.include_router(category_router)
    app.include_router(cart_router)
    app.include_router(order_router)
    app.include_router(wishlist_router)
    app.include_router(dashboard_router)
    app.include_router(admin_router)

    @app.get("/health")
    async def health():
        return JSONResponse(content={"status": "ok", "domain": storefront.name})

    return app
