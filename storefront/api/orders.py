from typing import List, Optional
import httpx
from fastapi import APIRouter, Depends, Header, Response
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from storefront.api.deps import get_db, get_privileged_db, get_functions_client, get_view_cache
from storefront.core.auth import get_current_identity, require_admin
from storefront.core.errors import AuthorizationError, OrderNotFound, StorefrontError, error_body
from storefront.schemas import CheckoutRequest, CreateOrderRequest, CreateOrderResponse, OrderRead, OrderStatusUpdate
from storefront.services import orders as order_service
from storefront.services.checkout import checkout as run_checkout
from storefront.store.view_cache import ViewCache

router = APIRouter()

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

def _place(payload: CreateOrderRequest, identity: dict, db: Session, cache: ViewCache) -> CreateOrderResponse:
    order_service.validate_request(payload)
    # writes run under the privileged session, so the caller may only order for itself
    if payload.user_id != identity["sub"] and identity.get("role") != "admin":
        raise AuthorizationError("Cannot create orders for another user")
    return CreateOrderResponse(order_id=order_service.create_order(db, cache, payload))

@router.post("/api/create-order", response_model=CreateOrderResponse, response_model_by_alias=True)
def create_order(payload: CreateOrderRequest, identity: dict = Depends(get_current_identity),
                 db: Session = Depends(get_privileged_db), cache: ViewCache = Depends(get_view_cache)):
    return _place(payload, identity, db, cache)

@router.options("/functions/v1/create-order")
def create_order_preflight():
    return Response(content="ok", headers=CORS_HEADERS)

@router.post("/functions/v1/create-order", response_model=CreateOrderResponse, response_model_by_alias=True)
def create_order_function(payload: CreateOrderRequest, response: Response,
                          identity: dict = Depends(get_current_identity),
                          db: Session = Depends(get_privileged_db),
                          cache: ViewCache = Depends(get_view_cache)):
    try:
        result = _place(payload, identity, db, cache)
    except StorefrontError as e:
        return JSONResponse(status_code=e.status_code, content=error_body(e), headers=CORS_HEADERS)
    response.headers.update(CORS_HEADERS)
    return result

@router.post("/v1/checkout", response_model=CreateOrderResponse, response_model_by_alias=True)
def checkout(payload: CheckoutRequest, identity: dict = Depends(get_current_identity),
             authorization: Optional[str] = Header(default=None, alias="Authorization"),
             db: Session = Depends(get_db), client: httpx.Client = Depends(get_functions_client)):
    return run_checkout(db, client, identity["sub"], payload, authorization)

@router.get("/v1/orders", response_model=List[OrderRead])
def my_orders(identity: dict = Depends(get_current_identity), db: Session = Depends(get_db)):
    return order_service.list_orders(db, identity["sub"])

@router.get("/v1/orders/track/{tracking_id}", response_model=OrderRead)
def track(tracking_id: str, identity: dict = Depends(get_current_identity), db: Session = Depends(get_db)):
    return order_service.track_order(db, identity["sub"], tracking_id)

@router.get("/v1/admin/orders", response_model=List[OrderRead])
def all_orders(status: Optional[str] = None, limit: int = 50, offset: int = 0,
               _=Depends(require_admin), db: Session = Depends(get_db)):
    return order_service.list_all_orders(db, status=status, limit=limit, offset=offset)

@router.patch("/v1/admin/orders/{order_id}/status", response_model=OrderRead)
def set_status(order_id: str, payload: OrderStatusUpdate, _=Depends(require_admin), db: Session = Depends(get_db)):
    return order_service.update_order_status(db, order_id, payload.status)

@router.get("/v1/orders/{order_id}", response_model=OrderRead)
def get_order(order_id: str, identity: dict = Depends(get_current_identity), db: Session = Depends(get_db)):
    order = order_service.get_order(db, order_id)
    if order.user_id != identity["sub"] and identity.get("role") != "admin":
        raise OrderNotFound()
    return order
