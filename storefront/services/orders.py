"""Order placement and order lookups.

``create_order`` writes in three steps, each committed on its own:

1. the order header (status ``pending``);
2. the order items, priced with the prices the caller sent;
3. removal of the user's cart lines.

A failure in step 2 leaves the header from step 1 in place without items.
A failure in step 3 is logged and the order still counts as placed.
"""
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload
import structlog

from storefront.core.errors import OrderInsertFailed, OrderItemsInsertFailed, OrderNotFound, ValidationError
from storefront.db.models import CartItem, Order, OrderItem, Product, utcnow
from storefront.events.producer import send
from storefront.schemas import CreateOrderRequest
from storefront.store.view_cache import ViewCache

logger = structlog.get_logger(__name__)

TRACKING_PREFIX_LEN = 8


def validate_request(payload: CreateOrderRequest):
    if not payload.user_id or not payload.total or not payload.shipping_address or not payload.cart_items:
        raise ValidationError("Missing required fields")


def _replayed(db: Session, payload: CreateOrderRequest) -> Optional[Order]:
    if not payload.request_id:
        return None
    return db.execute(
        select(Order).where(Order.request_id == payload.request_id, Order.user_id == payload.user_id)
    ).scalar_one_or_none()


def _check_prices(db: Session, order_id: str, rows: List[dict]):
    ids = {r['product_id'] for r in rows}
    live = {p.id: p.price for p in db.execute(select(Product).where(Product.id.in_(ids))).scalars()}
    for r in rows:
        if r['product_id'] in live and Decimal(live[r['product_id']]) != Decimal(r['price']):
            logger.warning("order_item_price_mismatch", order_id=order_id, product_id=r['product_id'],
                           submitted=str(r['price']), current=str(live[r['product_id']]))


def insert_order(db: Session, payload: CreateOrderRequest) -> str:
    order = Order(
        user_id=payload.user_id,
        status="pending",
        total=payload.total,
        shipping_address=payload.shipping_address.model_dump(),
        payment_method=payload.payment_method,
        request_id=payload.request_id,
        created_at=utcnow(),
        updated_at=utcnow(),
    )
    try:
        db.add(order); db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("order_insert_failed", user_id=payload.user_id, error=str(e))
        raise OrderInsertFailed()
    if not order.id:
        raise OrderInsertFailed()
    return order.id


def insert_order_items(db: Session, rows: List[dict]) -> None:
    db.execute(insert(OrderItem), rows)
    db.commit()


def clear_cart(db: Session, user_id: str) -> None:
    db.execute(delete(CartItem).where(CartItem.user_id == user_id))
    db.commit()


def create_order(db: Session, cache: ViewCache, payload: CreateOrderRequest) -> str:
    """Place an order from a cart snapshot and return its id.

    ``db`` must be a privileged session: the writes are made on behalf of
    ``payload.user_id`` rather than under the caller's own row policies.
    """
    validate_request(payload)

    existing = _replayed(db, payload)
    if existing:
        logger.info("order_replayed", order_id=existing.id, request_id=payload.request_id)
        return existing.id

    order_id = insert_order(db, payload)

    rows = [
        {'order_id': order_id, 'product_id': it.product_id, 'quantity': it.quantity, 'price': it.price}
        for it in payload.cart_items
    ]
    _check_prices(db, order_id, rows)
    try:
        insert_order_items(db, rows)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("order_items_insert_failed", order_id=order_id, error=str(e))
        raise OrderItemsInsertFailed()

    try:
        clear_cart(db, payload.user_id)
    except SQLAlchemyError as e:
        db.rollback()
        # the order stands; stale lines stay in the cart
        logger.error("cart_clear_failed", user_id=payload.user_id, order_id=order_id, error=str(e))
    else:
        cache.invalidate("/cart")

    send("order.events", key=order_id, value={
        "type": "order.created",
        "order_id": order_id,
        "user_id": payload.user_id,
        "total": str(payload.total),
        "items": [{"product_id": r['product_id'], "quantity": r['quantity'], "price": str(r['price'])} for r in rows],
    })
    logger.info("order_created", order_id=order_id, user_id=payload.user_id, items=len(rows))
    return order_id


def list_orders(db: Session, user_id: str) -> List[Order]:
    stmt = (
        select(Order)
        .options(selectinload(Order.items))
        .where(Order.user_id == user_id)
        .order_by(Order.created_at.desc())
    )
    return list(db.execute(stmt).scalars().all())


def track_order(db: Session, user_id: str, tracking_id: str) -> Order:
    """Find one of the user's orders by full id or by its short (8 character) prefix."""
    tracking_id = (tracking_id or '').strip()
    if tracking_id:
        for order in list_orders(db, user_id):
            if order.id == tracking_id or order.id[:TRACKING_PREFIX_LEN] == tracking_id:
                return order
    raise OrderNotFound()


def get_order(db: Session, order_id: str) -> Order:
    order = db.get(Order, order_id)
    if not order:
        raise OrderNotFound()
    return order


def update_order_status(db: Session, order_id: str, status: str) -> Order:
    order = get_order(db, order_id)
    order.status = status
    order.updated_at = utcnow()
    db.add(order); db.commit(); db.refresh(order)
    logger.info("order_status_updated", order_id=order_id, status=status)
    return order


def list_all_orders(db: Session, status: Optional[str] = None, limit: int = 50, offset: int = 0) -> List[Order]:
    stmt = select(Order).options(selectinload(Order.items)).order_by(Order.created_at.desc())
    if status:
        stmt = stmt.where(Order.status == status)
    return list(db.execute(stmt.offset(offset).limit(limit)).scalars().all())
