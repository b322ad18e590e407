from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload
import structlog

from storefront.core.errors import NotFound, ProductNotFound
from storefront.db.models import Product, WishlistItem
from storefront.services.cart import add_line
from storefront.store.view_cache import ViewCache

logger = structlog.get_logger(__name__)


def list_wishlist(db: Session, user_id: str) -> List[WishlistItem]:
    stmt = (
        select(WishlistItem)
        .options(joinedload(WishlistItem.product))
        .where(WishlistItem.user_id == user_id)
        .order_by(WishlistItem.created_at.desc())
    )
    return list(db.execute(stmt).scalars().unique().all())


def add_to_wishlist(db: Session, user_id: str, product_id: str) -> WishlistItem:
    if not db.get(Product, product_id):
        raise ProductNotFound()
    existing = db.execute(
        select(WishlistItem).where(WishlistItem.user_id == user_id, WishlistItem.product_id == product_id)
    ).scalar_one_or_none()
    if existing:
        return existing
    item = WishlistItem(user_id=user_id, product_id=product_id)
    db.add(item); db.commit(); db.refresh(item)
    return item


def _own_item(db: Session, user_id: str, item_id: str) -> WishlistItem:
    item = db.get(WishlistItem, item_id)
    if not item or item.user_id != user_id:
        raise NotFound("Item not in wishlist")
    return item


def remove_from_wishlist(db: Session, user_id: str, item_id: str) -> None:
    item = _own_item(db, user_id, item_id)
    db.delete(item); db.commit()


def move_to_cart(db: Session, cache: ViewCache, user_id: str, item_id: str) -> None:
    """Add one unit of the wishlisted product to the cart; the wishlist entry stays."""
    item = _own_item(db, user_id, item_id)
    add_line(db, user_id, item.product_id, 1)
    cache.invalidate("/cart")
    logger.info("wishlist_moved_to_cart", user_id=user_id, product_id=item.product_id)
