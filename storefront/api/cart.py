from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_db, get_view_cache
from storefront.core.auth import get_current_identity, get_optional_identity
from storefront.core.errors import ActionResult
from storefront.schemas import CartAdd, CartCount, CartQuantityUpdate, CartRead
from storefront.services import cart as cart_service
from storefront.store.view_cache import ViewCache

router = APIRouter()

@router.get("/v1/cart", response_model=CartRead)
def get_my_cart(identity: dict = Depends(get_current_identity), db: Session = Depends(get_db)):
    return cart_service.get_cart(db, identity["sub"])

@router.get("/v1/cart/count", response_model=CartCount)
def count(identity: Optional[dict] = Depends(get_optional_identity), db: Session = Depends(get_db),
          cache: ViewCache = Depends(get_view_cache)):
    return {"count": cart_service.cart_count(db, cache, identity)}

@router.post("/v1/cart/items", response_model=ActionResult, response_model_by_alias=True, response_model_exclude_none=True)
def add_item(payload: CartAdd, identity: Optional[dict] = Depends(get_optional_identity),
             db: Session = Depends(get_db), cache: ViewCache = Depends(get_view_cache)):
    return cart_service.add_to_cart(db, cache, identity, payload.product_id, payload.quantity)

@router.patch("/v1/cart/items/{item_id}", response_model=CartRead)
def update_item(item_id: str, payload: CartQuantityUpdate, identity: dict = Depends(get_current_identity),
                db: Session = Depends(get_db), cache: ViewCache = Depends(get_view_cache)):
    cart_service.update_quantity(db, cache, identity["sub"], item_id, payload.quantity)
    return cart_service.get_cart(db, identity["sub"])

@router.delete("/v1/cart/items/{item_id}", response_model=CartRead)
def remove_item(item_id: str, identity: dict = Depends(get_current_identity),
                db: Session = Depends(get_db), cache: ViewCache = Depends(get_view_cache)):
    cart_service.remove_item(db, cache, identity["sub"], item_id)
    return cart_service.get_cart(db, identity["sub"])
