"""Exception-to-HTTP mappings producing ``{"error", "message", "details"}`` bodies."""

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError

from storefront.exceptions import StorefrontError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _body(kind, message, details=None):
    return {"error": kind, "message": message, "details": details or {}}


def _field_errors(errors):
    details = {}
    for error in errors:
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        details.setdefault(".".join(location) or "request", []).append(error.get("msg", "Invalid value"))
    return details


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StorefrontError)
    async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
        logger.info(
            "request_failed",
            path=request.url.path,
            kind=exc.kind,
            message=exc.message,
        )
        return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_dict()))

    @app.exception_handler(ValidationError)
    async def domain_validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content=jsonable_encoder(_body("ValidationFailed", "Request validation failed", exc.messages)),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content=jsonable_encoder(
                _body("ValidationFailed", "Request validation failed", _field_errors(exc.errors()))
            ),
        )

    @app.exception_handler(ObjectNotFoundError)
    async def not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content=_body("NotFound", "Resource not found"))

    @app.exception_handler(Exception)
    async def internal_failure_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled_error", path=request.url.path, method=request.method)
        return JSONResponse(status_code=500, content=_body("InternalFailure", "An unexpected error occurred"))
