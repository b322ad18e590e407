"""Position-ordered list of products pinned to the home page."""
from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.orm import Session, joinedload
import structlog

from storefront.core.errors import Conflict, NotFound, ProductNotFound
from storefront.db.models import FeaturedProduct, Product
from storefront.store.view_cache import ViewCache

logger = structlog.get_logger(__name__)

HOME_VIEW = "/"


def list_featured(db: Session, limit: Optional[int] = None) -> List[FeaturedProduct]:
    stmt = select(FeaturedProduct).options(joinedload(FeaturedProduct.product)).order_by(FeaturedProduct.position)
    if limit:
        stmt = stmt.limit(limit)
    rows = db.execute(stmt).scalars().unique().all()
    return [r for r in rows if r.product is not None]


def add_featured(db: Session, cache: ViewCache, product_id: str) -> FeaturedProduct:
    if not db.get(Product, product_id):
        raise ProductNotFound()
    if db.execute(select(FeaturedProduct).where(FeaturedProduct.product_id == product_id)).first():
        raise Conflict("This product is already in the featured list")
    top = db.scalar(select(func.max(FeaturedProduct.position)))
    item = FeaturedProduct(product_id=product_id, position=0 if top is None else top + 1)
    db.add(item); db.commit(); db.refresh(item)
    cache.invalidate(HOME_VIEW)
    return item


def remove_featured(db: Session, cache: ViewCache, featured_id: str) -> None:
    item = db.get(FeaturedProduct, featured_id)
    if not item:
        raise NotFound("Featured product not found")
    db.delete(item); db.commit()
    cache.invalidate(HOME_VIEW)


def move_position(db: Session, cache: ViewCache, featured_id: str, direction: str) -> bool:
    """Swap an entry with its neighbour; returns False when there is nothing to move."""
    items = list(db.execute(select(FeaturedProduct).order_by(FeaturedProduct.position)).scalars())
    idx = next((i for i, it in enumerate(items) if it.id == featured_id), -1)
    if idx == -1:
        return False
    swap_idx = idx - 1 if direction == "up" else idx + 1
    if swap_idx < 0 or swap_idx >= len(items):
        return False

    current, other = items[idx], items[swap_idx]
    current.position, other.position = other.position, current.position
    # both rows change in one commit
    db.add_all([current, other]); db.commit()
    cache.invalidate(HOME_VIEW)
    logger.info("featured_moved", featured_id=featured_id, direction=direction, position=current.position)
    return True
