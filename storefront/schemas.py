from pydantic import BaseModel, EmailStr, Field
from pydantic.alias_generators import to_camel
from typing import Optional, List, Literal
from decimal import Decimal
from datetime import datetime, date

# --- auth ---
class RegisterPayload(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)
    first_name: Optional[str] = ''
    last_name: Optional[str] = ''

class LoginPayload(BaseModel):
    email: EmailStr
    password: str

class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = 'bearer'

class RefreshRequest(BaseModel):
    refresh_token: str

class UserRead(BaseModel):
    id: str
    email: str
    role: str
    first_name: Optional[str] = ''
    last_name: Optional[str] = ''
    created_at: Optional[datetime] = None
    class Config: from_attributes = True

# --- catalog ---
class CategoryCreate(BaseModel):
    name: str = Field(min_length=1)
class CategoryRead(CategoryCreate):
    id: str
    class Config: from_attributes = True

class ProductBase(BaseModel):
    name: str
    description: Optional[str] = ''
    price: Decimal = Field(ge=0, decimal_places=2)
    category_id: Optional[str] = None
    stock_quantity: int = Field(default=0, ge=0)
class ProductCreate(ProductBase):
    images: List[str] = []
class ProductUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    category_id: Optional[str] = None
    stock_quantity: Optional[int] = Field(default=None, ge=0)
    images: Optional[List[str]] = None
class ProductRead(ProductBase):
    id: str
    image_url: Optional[str] = None
    additional_images: List[str] = []
    rating: float = 0
    created_at: Optional[datetime] = None
    class Config: from_attributes = True

class ProductImagesUpdate(BaseModel):
    image_urls: List[str]
class ProductImageDelete(BaseModel):
    image_url: str

# --- cart ---
class CartAdd(BaseModel):
    product_id: str = ''
    quantity: int = Field(default=1, ge=1)

class CartQuantityUpdate(BaseModel):
    quantity: int

class CartItemRead(BaseModel):
    id: str
    product_id: str
    quantity: int
    product: Optional[ProductRead] = None
    class Config: from_attributes = True

class CartTotals(BaseModel):
    subtotal: Decimal
    tax: Decimal
    shipping: Decimal
    total: Decimal

class CartRead(CartTotals):
    items: List[CartItemRead] = []

class CartCount(BaseModel):
    count: int

# --- orders ---
class ShippingAddress(BaseModel):
    name: str
    address: str
    city: str
    state: Optional[str] = ''
    postal_code: str
    country: str

class OrderLine(BaseModel):
    product_id: str
    quantity: int = Field(ge=1)
    price: Decimal = Field(ge=0)
    class Config:
        alias_generator = to_camel
        populate_by_name = True

class CreateOrderRequest(BaseModel):
    """Wire contract shared by the create-order endpoint and its function twin."""
    user_id: Optional[str] = None
    total: Optional[Decimal] = None
    shipping_address: Optional[ShippingAddress] = None
    payment_method: Optional[str] = None
    cart_items: Optional[List[OrderLine]] = None
    request_id: Optional[str] = None
    class Config:
        alias_generator = to_camel
        populate_by_name = True

class CreateOrderResponse(BaseModel):
    success: bool = True
    order_id: str
    class Config:
        alias_generator = to_camel
        populate_by_name = True

class CheckoutRequest(BaseModel):
    first_name: str
    last_name: str
    address: str
    city: str
    state: Optional[str] = ''
    postal_code: str
    country: str
    phone: Optional[str] = ''
    payment_method: str = 'card'
    request_id: Optional[str] = None

class OrderItemRead(BaseModel):
    id: str
    product_id: str
    quantity: int
    price: Decimal
    class Config: from_attributes = True

class OrderRead(BaseModel):
    id: str
    user_id: str
    status: str
    total: Decimal
    shipping_address: dict
    payment_method: Optional[str] = None
    created_at: Optional[datetime] = None
    items: List[OrderItemRead] = []
    class Config: from_attributes = True

class OrderStatusUpdate(BaseModel):
    status: Literal['pending', 'processing', 'shipped', 'delivered', 'cancelled']

# --- featured ---
class FeaturedAdd(BaseModel):
    product_id: str
class FeaturedMove(BaseModel):
    direction: Literal['up', 'down']
class FeaturedRead(BaseModel):
    id: str
    product_id: str
    position: int
    product: Optional[ProductRead] = None
    class Config: from_attributes = True

# --- wishlist ---
class WishlistAdd(BaseModel):
    product_id: str
class WishlistItemRead(BaseModel):
    id: str
    product_id: str
    product: Optional[ProductRead] = None
    created_at: Optional[datetime] = None
    class Config: from_attributes = True

# --- account ---
class ProfileUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    profile_image: Optional[str] = None
class ProfileRead(UserRead):
    phone: Optional[str] = ''
    address: Optional[str] = ''
    city: Optional[str] = ''
    state: Optional[str] = ''
    postal_code: Optional[str] = ''
    country: Optional[str] = ''
    profile_image: Optional[str] = None

# --- content ---
class TeamMember(BaseModel):
    name: str = ''
    position: str = ''
    bio: str = ''
class AboutUsPayload(BaseModel):
    title: str = ''
    content: str = ''
    mission: str = ''
    vision: str = ''
    team_members: List[TeamMember] = []
class AboutUsRead(AboutUsPayload):
    updated_at: Optional[datetime] = None
    class Config: from_attributes = True

class SocialLink(BaseModel):
    platform: str = ''
    url: str = ''
class ContactUsPayload(BaseModel):
    title: str = ''
    content: str = ''
    email: str = ''
    phone: str = ''
    address: str = ''
    map_url: str = ''
    social_media: List[SocialLink] = []
class ContactUsRead(ContactUsPayload):
    updated_at: Optional[datetime] = None
    class Config: from_attributes = True

class ContactMessageCreate(BaseModel):
    name: Optional[str] = ''
    email: Optional[str] = ''
    subject: Optional[str] = ''
    message: Optional[str] = ''
class ContactMessageRead(BaseModel):
    id: str
    name: str
    email: str
    subject: str
    message: str
    status: str
    created_at: Optional[datetime] = None
    class Config: from_attributes = True
class MessageStatusUpdate(BaseModel):
    status: Literal['unread', 'read', 'replied', 'archived']

# --- admin ---
class RecentOrder(BaseModel):
    id: str
    total: Decimal
    status: str
    customer_name: str
    created_at: Optional[datetime] = None
class DailySales(BaseModel):
    day: date
    sales: Decimal
class DashboardStats(BaseModel):
    total_sales: Decimal
    total_orders: int
    total_customers: int
    average_order_value: Decimal
    recent_orders: List[RecentOrder] = []
    sales_by_day: List[DailySales] = []

class RoleUpdate(BaseModel):
    role: Literal['admin', 'customer']
class AdminUserCreate(BaseModel):
    email: EmailStr
    role: Literal['admin', 'customer'] = 'customer'
