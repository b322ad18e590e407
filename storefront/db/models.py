from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Integer, String, Text, Boolean, ForeignKey, DateTime, Numeric, JSON, Float, UniqueConstraint, CheckConstraint
from datetime import datetime
from decimal import Decimal
from typing import Optional
import uuid
from storefront.db.session import Base

def new_id() -> str:
    return str(uuid.uuid4())

def utcnow() -> datetime:
    return datetime.utcnow()


class User(Base):
    __tablename__ = 'users'
    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    role: Mapped[str] = mapped_column(String(32), default='customer')
    first_name: Mapped[str] = mapped_column(String(120), default='')
    last_name: Mapped[str] = mapped_column(String(120), default='')
    phone: Mapped[str] = mapped_column(String(64), default='')
    address: Mapped[str] = mapped_column(String(255), default='')
    city: Mapped[str] = mapped_column(String(120), default='')
    state: Mapped[str] = mapped_column(String(120), default='')
    postal_code: Mapped[str] = mapped_column(String(32), default='')
    country: Mapped[str] = mapped_column(String(120), default='')
    profile_image: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(), default=utcnow)
    refresh_tokens = relationship('RefreshToken', back_populates='user', cascade='all, delete-orphan')

class RefreshToken(Base):
    __tablename__ = 'refresh_tokens'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[str] = mapped_column(ForeignKey('users.id', ondelete='CASCADE'))
    jti: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    token_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(), nullable=False)
    revoked: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(), default=utcnow)
    user = relationship('User', back_populates='refresh_tokens')

class Category(Base):
    __tablename__ = 'categories'
    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(120), unique=True, nullable=False)
    products = relationship('Product', back_populates='category')

class Product(Base):
    __tablename__ = 'products'
    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(240), nullable=False)
    description: Mapped[str] = mapped_column(Text, default='')
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    image_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    additional_images: Mapped[list] = mapped_column(JSON, default=list)
    category_id: Mapped[Optional[str]] = mapped_column(ForeignKey('categories.id'), nullable=True)
    stock_quantity: Mapped[int] = mapped_column(Integer, default=0)
    rating: Mapped[float] = mapped_column(Float, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(), default=utcnow)
    category = relationship('Category', back_populates='products')

class CartItem(Base):
    __tablename__ = 'cart_items'
    __table_args__ = (
        UniqueConstraint('user_id', 'product_id', name='uq_cart_items_user_product'),
        CheckConstraint('quantity >= 1', name='ck_cart_items_quantity'),
    )
    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(ForeignKey('users.id', ondelete='CASCADE'), index=True)
    product_id: Mapped[str] = mapped_column(ForeignKey('products.id', ondelete='CASCADE'))
    quantity: Mapped[int] = mapped_column(Integer, default=1)
    created_at: Mapped[datetime] = mapped_column(DateTime(), default=utcnow)
    product = relationship('Product')

class Order(Base):
    __tablename__ = 'orders'
    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(ForeignKey('users.id'), index=True)
    status: Mapped[str] = mapped_column(String(32), default='pending')
    total: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    shipping_address: Mapped[dict] = mapped_column(JSON, nullable=False)
    payment_method: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    request_id: Mapped[Optional[str]] = mapped_column(String(64), unique=True, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(), default=utcnow)
    items = relationship('OrderItem', back_populates='order', cascade='all, delete-orphan')
    user = relationship('User')

class OrderItem(Base):
    __tablename__ = 'order_items'
    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    order_id: Mapped[str] = mapped_column(ForeignKey('orders.id', ondelete='CASCADE'), index=True)
    product_id: Mapped[str] = mapped_column(ForeignKey('products.id'))
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    # price at purchase time, independent of later product price changes
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    order = relationship('Order', back_populates='items')
    product = relationship('Product')

class WishlistItem(Base):
    __tablename__ = 'wishlist_items'
    __table_args__ = (UniqueConstraint('user_id', 'product_id', name='uq_wishlist_items_user_product'),)
    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(ForeignKey('users.id', ondelete='CASCADE'), index=True)
    product_id: Mapped[str] = mapped_column(ForeignKey('products.id', ondelete='CASCADE'))
    created_at: Mapped[datetime] = mapped_column(DateTime(), default=utcnow)
    product = relationship('Product')

class FeaturedProduct(Base):
    __tablename__ = 'featured_products'
    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    product_id: Mapped[str] = mapped_column(ForeignKey('products.id', ondelete='CASCADE'), unique=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    product = relationship('Product')

class AboutUs(Base):
    __tablename__ = 'about_us'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(240), default='')
    content: Mapped[str] = mapped_column(Text, default='')
    mission: Mapped[str] = mapped_column(Text, default='')
    vision: Mapped[str] = mapped_column(Text, default='')
    team_members: Mapped[list] = mapped_column(JSON, default=list)
    updated_at: Mapped[datetime] = mapped_column(DateTime(), default=utcnow)

class ContactUs(Base):
    __tablename__ = 'contact_us'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(240), default='')
    content: Mapped[str] = mapped_column(Text, default='')
    email: Mapped[str] = mapped_column(String(255), default='')
    phone: Mapped[str] = mapped_column(String(64), default='')
    address: Mapped[str] = mapped_column(Text, default='')
    map_url: Mapped[str] = mapped_column(String(1024), default='')
    social_media: Mapped[list] = mapped_column(JSON, default=list)
    updated_at: Mapped[datetime] = mapped_column(DateTime(), default=utcnow)

class ContactMessage(Base):
    __tablename__ = 'contact_messages'
    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(240), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    subject: Mapped[str] = mapped_column(String(240), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(32), default='unread')
    created_at: Mapped[datetime] = mapped_column(DateTime(), default=utcnow)
