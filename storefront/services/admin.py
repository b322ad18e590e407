"""Back-office reporting and user role management."""
import secrets
import string
from collections import defaultdict
from datetime import datetime, time, timedelta
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import select, func, or_
from sqlalchemy.orm import Session, joinedload
import structlog

from storefront.core.errors import Conflict, NotFound
from storefront.db.models import Order, User, utcnow
from storefront.services.cart import money

logger = structlog.get_logger(__name__)

RECENT_ORDERS = 5
SALES_WINDOW_DAYS = 30
_ID_ALPHABET = string.ascii_lowercase + string.digits


def dashboard(db: Session) -> dict:
    total_sales = db.scalar(select(func.coalesce(func.sum(Order.total), 0)))
    total_orders = db.scalar(select(func.count()).select_from(Order)) or 0
    total_customers = db.scalar(select(func.count()).select_from(User).where(User.role == 'customer')) or 0
    total_sales = money(total_sales or 0)
    average = money(total_sales / total_orders) if total_orders else money(0)

    recent = db.execute(
        select(Order).options(joinedload(Order.user)).order_by(Order.created_at.desc()).limit(RECENT_ORDERS)
    ).scalars().all()

    today = utcnow().date()
    start = today - timedelta(days=SALES_WINDOW_DAYS - 1)
    by_day = defaultdict(Decimal)
    for created_at, total in db.execute(select(Order.created_at, Order.total).where(Order.created_at >= datetime.combine(start, time.min))):
        by_day[created_at.date()] += Decimal(total)

    return {
        'total_sales': total_sales,
        'total_orders': total_orders,
        'total_customers': total_customers,
        'average_order_value': average,
        'recent_orders': [
            {
                'id': o.id, 'total': o.total, 'status': o.status, 'created_at': o.created_at,
                'customer_name': f"{o.user.first_name} {o.user.last_name}".strip() if o.user else '',
            }
            for o in recent
        ],
        'sales_by_day': [
            {'day': start + timedelta(days=i), 'sales': money(by_day[start + timedelta(days=i)])}
            for i in range(SALES_WINDOW_DAYS)
        ],
    }


def list_users(db: Session, role: Optional[str] = None, search: Optional[str] = None) -> List[User]:
    stmt = select(User).order_by(User.created_at.desc())
    if role and role != 'all':
        stmt = stmt.where(User.role == role)
    if search:
        like = f"%{search.lower()}%"
        stmt = stmt.where(or_(
            func.lower(User.email).like(like),
            func.lower(User.first_name).like(like),
            func.lower(User.last_name).like(like),
        ))
    return list(db.execute(stmt).scalars().all())


def change_role(db: Session, user_id: str, role: str) -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFound("User not found")
    user.role = role
    user.updated_at = utcnow()
    db.add(user); db.commit(); db.refresh(user)
    logger.info("user_role_changed", user_id=user_id, role=role)
    return user


def add_user(db: Session, email: str, role: str) -> User:
    """Create a bare user record; the person signs in later through the normal auth flow."""
    if db.execute(select(User).where(User.email == email)).first():
        raise Conflict("Email already registered")
    user = User(
        id="user_" + "".join(secrets.choice(_ID_ALPHABET) for _ in range(8)),
        email=email, role=role, created_at=utcnow(), updated_at=utcnow(),
    )
    db.add(user); db.commit(); db.refresh(user)
    return user
