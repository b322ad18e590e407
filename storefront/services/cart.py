"""Cart line items keyed by (user, product)."""
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional

from sqlalchemy import select, update, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload
import structlog

from storefront.core.auth import ensure_user
from storefront.core.config import settings
from storefront.core.errors import ActionResult, AuthenticationRequired, NotFound, StorefrontError, ValidationError
from storefront.db.models import CartItem, Product, User
from storefront.store.view_cache import ViewCache

logger = structlog.get_logger(__name__)

CENTS = Decimal('0.01')
LOGIN_REDIRECT = "/auth/login?redirect=/products"


def money(value) -> Decimal:
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def cart_totals(lines: Iterable) -> dict:
    """Subtotal, tax, shipping and total for ``(price, quantity)`` pairs."""
    subtotal = sum((Decimal(price) * qty for price, qty in lines), Decimal(0))
    subtotal = money(subtotal)
    tax = money(subtotal * settings.TAX_RATE)
    shipping = money(settings.SHIPPING_FLAT)
    return {'subtotal': subtotal, 'tax': tax, 'shipping': shipping, 'total': money(subtotal + tax + shipping)}


def _increment(db: Session, user_id: str, product_id: str, quantity: int) -> bool:
    res = db.execute(
        update(CartItem)
        .where(CartItem.user_id == user_id, CartItem.product_id == product_id)
        .values(quantity=CartItem.quantity + quantity)
    )
    return res.rowcount > 0


def add_line(db: Session, user_id: str, product_id: str, quantity: int = 1) -> None:
    """Increment the (user, product) line or create it.

    The increment is one UPDATE statement, so concurrent adds do not lose
    updates; an insert that loses the race to the unique constraint falls
    back to the increment.
    """
    if _increment(db, user_id, product_id, quantity):
        db.commit()
        return
    db.add(CartItem(user_id=user_id, product_id=product_id, quantity=quantity))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        if not _increment(db, user_id, product_id, quantity):
            raise
        db.commit()


def add_to_cart(db: Session, cache: ViewCache, identity: Optional[dict], product_id: str, quantity: int = 1) -> ActionResult:
    try:
        if not product_id:
            return ActionResult.fail("Invalid product ID")
        if not identity:
            raise AuthenticationRequired(redirect_url=LOGIN_REDIRECT)
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")

        user = ensure_user(db, identity)
        if not db.get(Product, product_id):
            return ActionResult.fail("Product not found")

        add_line(db, user.id, product_id, quantity)
        cache.invalidate("/cart")
        logger.info("cart_item_added", user_id=user.id, product_id=product_id, quantity=quantity)
        return ActionResult.ok("Item added to cart")
    except StorefrontError as e:
        return ActionResult.from_error(e)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("cart_add_failed", product_id=product_id, error=str(e))
        return ActionResult.fail("Failed to add item to cart")
    except Exception:
        db.rollback()
        logger.exception("cart_add_failed", product_id=product_id)
        return ActionResult.fail("Failed to add item to cart")


def cart_count(db: Session, cache: ViewCache, identity: Optional[dict]) -> int:
    if not identity:
        return 0
    user_id = identity["sub"]
    cached = cache.get(f"/cart:{user_id}")
    if cached is not None:
        return int(cached)
    if not db.get(User, user_id):
        return 0
    count = db.scalar(select(func.count()).select_from(CartItem).where(CartItem.user_id == user_id)) or 0
    cache.set(f"/cart:{user_id}", count)
    return count


def list_lines(db: Session, user_id: str) -> List[CartItem]:
    stmt = (
        select(CartItem)
        .options(joinedload(CartItem.product))
        .where(CartItem.user_id == user_id)
        .order_by(CartItem.created_at)
    )
    return list(db.execute(stmt).scalars().unique().all())


def get_cart(db: Session, user_id: str) -> dict:
    lines = list_lines(db, user_id)
    totals = cart_totals((it.product.price, it.quantity) for it in lines if it.product)
    return {'items': lines, **totals}


def _own_line(db: Session, user_id: str, item_id: str) -> CartItem:
    item = db.get(CartItem, item_id)
    if not item or item.user_id != user_id:
        raise NotFound("Item not in cart")
    return item


def update_quantity(db: Session, cache: ViewCache, user_id: str, item_id: str, quantity: int) -> None:
    if quantity < 1:
        raise ValidationError("Quantity must be at least 1")
    item = _own_line(db, user_id, item_id)
    item.quantity = quantity
    db.add(item); db.commit()
    cache.invalidate("/cart")


def remove_item(db: Session, cache: ViewCache, user_id: str, item_id: str) -> None:
    item = _own_line(db, user_id, item_id)
    db.delete(item); db.commit()
    cache.invalidate("/cart")
