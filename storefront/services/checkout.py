from typing import Optional
import httpx
from sqlalchemy.orm import Session
import structlog

from storefront.core.errors import StorefrontError, ValidationError
from storefront.schemas import CheckoutRequest, CreateOrderRequest, OrderLine, ShippingAddress
from storefront.services.cart import cart_totals, list_lines

logger = structlog.get_logger(__name__)

CREATE_ORDER_FUNCTION = "/functions/v1/create-order"


def build_order_request(db: Session, user_id: str, payload: CheckoutRequest) -> CreateOrderRequest:
    lines = [it for it in list_lines(db, user_id) if it.product]
    if not lines:
        raise ValidationError("Cart is empty")
    totals = cart_totals((it.product.price, it.quantity) for it in lines)
    return CreateOrderRequest(
        user_id=user_id,
        total=totals['total'],
        shipping_address=ShippingAddress(
            name=f"{payload.first_name} {payload.last_name}".strip(),
            address=payload.address,
            city=payload.city,
            state=payload.state or '',
            postal_code=payload.postal_code,
            country=payload.country,
        ),
        payment_method=payload.payment_method,
        cart_items=[OrderLine(product_id=it.product_id, quantity=it.quantity, price=it.product.price) for it in lines],
        request_id=payload.request_id,
    )


def invoke_create_order(client: httpx.Client, order: CreateOrderRequest, authorization: Optional[str]) -> dict:
    """Call the create-order function with the caller's bearer token."""
    headers = {"Authorization": authorization} if authorization else {}
    try:
        resp = client.post(CREATE_ORDER_FUNCTION, content=order.model_dump_json(by_alias=True, exclude_none=True),
                           headers={**headers, "Content-Type": "application/json"})
    except httpx.RequestError as e:
        logger.error("create_order_unreachable", user_id=order.user_id, error=str(e))
        raise StorefrontError("Order service unavailable")
    body = resp.json() if resp.content else {}
    if resp.status_code >= 400:
        err = StorefrontError(body.get("error") or "Failed to create order")
        err.status_code = resp.status_code
        raise err
    return body


def checkout(db: Session, client: httpx.Client, user_id: str, payload: CheckoutRequest, authorization: Optional[str]) -> dict:
    order = build_order_request(db, user_id, payload)
    logger.info("checkout_submitted", user_id=user_id, total=str(order.total), lines=len(order.cart_items))
    return invoke_create_order(client, order, authorization)
