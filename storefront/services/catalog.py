from decimal import Decimal
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import structlog

from storefront.core.auth import check_admin
from storefront.core.errors import ActionResult, Conflict, ProductNotFound, StorefrontError
from storefront.db.models import Category, Product
from storefront.schemas import ProductCreate, ProductUpdate
from storefront.services.featured import HOME_VIEW
from storefront.services.storage import BlobStorage
from storefront.store.view_cache import ViewCache

logger = structlog.get_logger(__name__)

SORTS = {
    'price-low': Product.price.asc(),
    'price-high': Product.price.desc(),
    'name-asc': Product.name.asc(),
    'name-desc': Product.name.desc(),
    'newest': Product.created_at.desc(),
}


def product_views(product_id: str) -> tuple:
    # the home page renders featured products inline
    return (f"/products/{product_id}", "/products", "/admin/products", HOME_VIEW)


def list_products(db: Session, q: Optional[str] = None, categories: Optional[str] = None,
                  min_price: Optional[Decimal] = None, max_price: Optional[Decimal] = None,
                  rating: Optional[str] = None, sort: Optional[str] = None,
                  limit: int = 50, offset: int = 0) -> List[Product]:
    stmt = select(Product)
    if q:
        stmt = stmt.where(Product.name.ilike(f"%{q}%"))
    if categories:
        ids = [c for c in categories.split(',') if c]
        if ids: stmt = stmt.where(Product.category_id.in_(ids))
    if min_price is not None: stmt = stmt.where(Product.price >= min_price)
    if max_price is not None: stmt = stmt.where(Product.price <= max_price)
    if rating and rating.isdigit():
        stmt = stmt.where(Product.rating >= int(rating))
    stmt = stmt.order_by(SORTS.get(sort or 'newest', SORTS['newest'])).offset(offset).limit(limit)
    return list(db.execute(stmt).scalars().all())


def get_product(db: Session, product_id: str) -> Product:
    obj = db.get(Product, product_id)
    if not obj: raise ProductNotFound()
    return obj


def list_categories(db: Session) -> List[Category]:
    return list(db.execute(select(Category).order_by(Category.name)).scalars().all())


def create_category(db: Session, name: str) -> Category:
    if db.execute(select(Category).where(Category.name == name)).first():
        raise Conflict('Category already exists')
    obj = Category(name=name)
    db.add(obj); db.commit(); db.refresh(obj)
    return obj


def _apply_images(obj: Product, images: List[str]):
    obj.image_url = images[0] if images else None
    obj.additional_images = list(images[1:])


def create_product(db: Session, cache: ViewCache, payload: ProductCreate) -> Product:
    data = payload.model_dump(exclude={'images'})
    obj = Product(**data)
    _apply_images(obj, payload.images)
    db.add(obj); db.commit(); db.refresh(obj)
    cache.invalidate(*product_views(obj.id))
    return obj


def update_product(db: Session, cache: ViewCache, product_id: str, payload: ProductUpdate) -> Product:
    obj = get_product(db, product_id)
    changes = payload.model_dump(exclude_unset=True)
    images = changes.pop('images', None)
    for k, v in changes.items(): setattr(obj, k, v)
    if images is not None:
        _apply_images(obj, images)
    db.add(obj); db.commit(); db.refresh(obj)
    cache.invalidate(*product_views(product_id))
    return obj


def delete_product(db: Session, cache: ViewCache, product_id: str) -> None:
    obj = get_product(db, product_id)
    db.delete(obj); db.commit()
    cache.invalidate(*product_views(product_id))


def update_product_images(db: Session, cache: ViewCache, identity: Optional[dict], product_id: str,
                          image_urls: List[str]) -> ActionResult:
    try:
        check_admin(db, identity)
        obj = get_product(db, product_id)
        _apply_images(obj, image_urls)
        db.add(obj); db.commit()
        cache.invalidate(*product_views(product_id))
        return ActionResult.ok("Product images updated successfully")
    except StorefrontError as e:
        return ActionResult.from_error(e)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("product_images_update_failed", product_id=product_id, error=str(e))
        return ActionResult.fail("Failed to update product images")


def delete_product_image(db: Session, cache: ViewCache, storage: BlobStorage, identity: Optional[dict],
                         product_id: str, image_url: str) -> ActionResult:
    """Remove one image from a product, promoting the first additional image when the primary goes."""
    try:
        check_admin(db, identity)
        obj = get_product(db, product_id)
        extra = list(obj.additional_images or [])
        if obj.image_url == image_url:
            obj.image_url = extra[0] if extra else None
            obj.additional_images = extra[1:]
        elif image_url in extra:
            obj.additional_images = [u for u in extra if u != image_url]
        db.add(obj); db.commit()

        storage.delete(image_url)
        cache.invalidate(*product_views(product_id))
        return ActionResult.ok("Product image deleted successfully")
    except StorefrontError as e:
        return ActionResult.from_error(e)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("product_image_delete_failed", product_id=product_id, error=str(e))
        return ActionResult.fail("Failed to delete product image")
