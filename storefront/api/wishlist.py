from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from storefront.api.deps import get_db, get_view_cache
from storefront.core.auth import ensure_user, get_current_identity
from storefront.schemas import WishlistAdd, WishlistItemRead
from storefront.services import wishlist
from storefront.store.view_cache import ViewCache

router = APIRouter()

@router.get("/v1/wishlist", response_model=List[WishlistItemRead])
def my_wishlist(identity: dict = Depends(get_current_identity), db: Session = Depends(get_db)):
    return wishlist.list_wishlist(db, identity["sub"])

@router.post("/v1/wishlist", response_model=WishlistItemRead, status_code=201)
def add(payload: WishlistAdd, identity: dict = Depends(get_current_identity), db: Session = Depends(get_db)):
    user = ensure_user(db, identity)
    return wishlist.add_to_wishlist(db, user.id, payload.product_id)

@router.delete("/v1/wishlist/{item_id}", status_code=204)
def remove(item_id: str, identity: dict = Depends(get_current_identity), db: Session = Depends(get_db)):
    wishlist.remove_from_wishlist(db, identity["sub"], item_id)

@router.post("/v1/wishlist/{item_id}/move-to-cart", status_code=204)
def move_to_cart(item_id: str, identity: dict = Depends(get_current_identity), db: Session = Depends(get_db),
                 cache: ViewCache = Depends(get_view_cache)):
    wishlist.move_to_cart(db, cache, identity["sub"], item_id)
