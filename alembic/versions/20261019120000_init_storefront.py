from alembic import op
import sqlalchemy as sa

revision = "20261019120000"
down_revision = None

NOW = sa.text("(now() at time zone 'utc')")

def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True, index=True),
        sa.Column('password_hash', sa.String(255)),
        sa.Column('role', sa.String(32), nullable=False, server_default='customer'),
        sa.Column('first_name', sa.String(120), server_default=''),
        sa.Column('last_name', sa.String(120), server_default=''),
        sa.Column('phone', sa.String(64), server_default=''),
        sa.Column('address', sa.String(255), server_default=''),
        sa.Column('city', sa.String(120), server_default=''),
        sa.Column('state', sa.String(120), server_default=''),
        sa.Column('postal_code', sa.String(32), server_default=''),
        sa.Column('country', sa.String(120), server_default=''),
        sa.Column('profile_image', sa.String(1024)),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=NOW),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=NOW),
    )
    op.create_table(
        'refresh_tokens',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.String(64), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('jti', sa.String(64), nullable=False, unique=True),
        sa.Column('token_hash', sa.String(64), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('revoked', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=NOW),
    )
    op.create_table(
        'categories',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('name', sa.String(120), nullable=False, unique=True),
    )
    op.create_table(
        'products',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('name', sa.String(240), nullable=False),
        sa.Column('description', sa.Text(), server_default=''),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('image_url', sa.String(1024)),
        sa.Column('additional_images', sa.JSON(), nullable=False, server_default='[]'),
        sa.Column('category_id', sa.String(64), sa.ForeignKey('categories.id')),
        sa.Column('stock_quantity', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('rating', sa.Float(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=NOW),
    )
    op.create_table(
        'cart_items',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('user_id', sa.String(64), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('product_id', sa.String(64), sa.ForeignKey('products.id', ondelete='CASCADE'), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=NOW),
        sa.UniqueConstraint('user_id', 'product_id', name='uq_cart_items_user_product'),
        sa.CheckConstraint('quantity >= 1', name='ck_cart_items_quantity'),
    )
    op.create_table(
        'orders',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('user_id', sa.String(64), sa.ForeignKey('users.id'), nullable=False, index=True),
        sa.Column('status', sa.String(32), nullable=False, server_default='pending'),
        sa.Column('total', sa.Numeric(10, 2), nullable=False),
        sa.Column('shipping_address', sa.JSON(), nullable=False),
        sa.Column('payment_method', sa.String(64)),
        sa.Column('request_id', sa.String(64), unique=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=NOW),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=NOW),
    )
    op.create_table(
        'order_items',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('order_id', sa.String(64), sa.ForeignKey('orders.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('product_id', sa.String(64), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
    )
    op.create_table(
        'wishlist_items',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('user_id', sa.String(64), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('product_id', sa.String(64), sa.ForeignKey('products.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=NOW),
        sa.UniqueConstraint('user_id', 'product_id', name='uq_wishlist_items_user_product'),
    )
    op.create_table(
        'featured_products',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('product_id', sa.String(64), sa.ForeignKey('products.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('position', sa.Integer(), nullable=False),
    )
    op.create_table(
        'about_us',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(240), server_default=''),
        sa.Column('content', sa.Text(), server_default=''),
        sa.Column('mission', sa.Text(), server_default=''),
        sa.Column('vision', sa.Text(), server_default=''),
        sa.Column('team_members', sa.JSON(), nullable=False, server_default='[]'),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=NOW),
    )
    op.create_table(
        'contact_us',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(240), server_default=''),
        sa.Column('content', sa.Text(), server_default=''),
        sa.Column('email', sa.String(255), server_default=''),
        sa.Column('phone', sa.String(64), server_default=''),
        sa.Column('address', sa.Text(), server_default=''),
        sa.Column('map_url', sa.String(1024), server_default=''),
        sa.Column('social_media', sa.JSON(), nullable=False, server_default='[]'),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=NOW),
    )
    op.create_table(
        'contact_messages',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('name', sa.String(240), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('subject', sa.String(240), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('status', sa.String(32), nullable=False, server_default='unread'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=NOW),
    )

def downgrade():
    for table in ('contact_messages', 'contact_us', 'about_us', 'featured_products', 'wishlist_items',
                  'order_items', 'orders', 'cart_items', 'products', 'categories', 'refresh_tokens', 'users'):
        op.drop_table(table)
