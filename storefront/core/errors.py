"""Error taxonomy shared by every storefront operation.

Operations raise these; ``register_error_handlers`` converts them into
``{"error": message}`` responses carrying the matching HTTP status. Handlers
that must never fail (add to cart, product image edits) convert them into an
``ActionResult`` instead.
"""
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
import structlog

logger = structlog.get_logger(__name__)

GENERIC_MESSAGE = "An unexpected error occurred"


class StorefrontError(Exception):
    status_code = 500
    message = GENERIC_MESSAGE

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class ValidationError(StorefrontError):
    status_code = 400
    message = "Missing required fields"


class AuthenticationRequired(StorefrontError):
    status_code = 401
    message = "Authentication required"

    def __init__(self, message: Optional[str] = None, redirect_url: str = "/auth/login"):
        super().__init__(message)
        self.redirect_url = redirect_url


class AuthorizationError(StorefrontError):
    status_code = 403
    message = "Unauthorized: Admin access required"


class NotFound(StorefrontError):
    status_code = 404
    message = "Not found"


class ProductNotFound(NotFound):
    message = "Product not found"


class OrderNotFound(NotFound):
    message = "Order not found"


class Conflict(StorefrontError):
    status_code = 409
    message = "Conflict"


class OrderInsertFailed(StorefrontError):
    message = "Failed to create order"


class OrderItemsInsertFailed(StorefrontError):
    message = "Failed to create order items"


class StorageError(StorefrontError):
    status_code = 502
    message = "Storage operation failed"


class ActionResult(BaseModel):
    """Tagged result returned by operations that never raise to the caller."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool
    message: str
    requires_auth: Optional[bool] = None
    redirect_url: Optional[str] = None

    @classmethod
    def ok(cls, message: str) -> "ActionResult":
        return cls(success=True, message=message)

    @classmethod
    def fail(cls, message: str) -> "ActionResult":
        return cls(success=False, message=message)

    @classmethod
    def from_error(cls, err: StorefrontError) -> "ActionResult":
        if isinstance(err, AuthenticationRequired):
            return cls(success=False, message=err.message, requires_auth=True, redirect_url=err.redirect_url)
        return cls(success=False, message=err.message)


def error_body(err: StorefrontError) -> dict:
    body = {"error": err.message}
    if isinstance(err, AuthenticationRequired):
        body["redirectUrl"] = err.redirect_url
    return body


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StorefrontError)
    async def storefront_error_handler(request: Request, exc: StorefrontError):
        if exc.status_code >= 500:
            logger.error("request_failed", path=request.url.path, error=exc.message)
        return JSONResponse(status_code=exc.status_code, content=error_body(exc))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("unhandled_error", path=request.url.path)
        return JSONResponse(status_code=500, content={"error": GENERIC_MESSAGE})
