from fastapi import FastAPI
from prometheus_fastapi_instrumentator import Instrumentator
import structlog

from storefront.version import VERSION
from storefront.core.errors import register_error_handlers
from storefront.core.logging import configure_logging
from storefront.api import (
    account, admin, cart, categories, content, featured, orders, products, routes_auth, upload, wishlist,
)

configure_logging()
logger = structlog.get_logger(__name__)

# Create instrumentator first
instrumentator = Instrumentator()

app = FastAPI(title='Storefront Service', version=VERSION)

# Instrument the app BEFORE adding routes or middleware
instrumentator.instrument(app).expose(
    app,
    include_in_schema=False,
    endpoint="/metrics",
    should_gzip=True,
)

register_error_handlers(app)

@app.get('/health')
def health(): return {'status': 'ok'}

@app.get('/v1/_info')
def info(): return {'service': 'storefront', 'version': VERSION}

@app.on_event("startup")
async def startup_event():
    for route in app.routes:
        if hasattr(route, "methods") and hasattr(route, "path"):
            logger.debug("route_registered", methods=sorted(route.methods), path=route.path)

app.include_router(routes_auth.router, prefix='/auth', tags=['auth'])
app.include_router(categories.router, prefix='/v1/categories', tags=['categories'])
app.include_router(products.router, prefix='/v1/products', tags=['products'])
app.include_router(cart.router, tags=['cart'])
app.include_router(orders.router, tags=['orders'])
app.include_router(featured.router, tags=['featured'])
app.include_router(wishlist.router, tags=['wishlist'])
app.include_router(account.router, tags=['account'])
app.include_router(content.router, tags=['content'])
app.include_router(admin.router, tags=['admin'])
app.include_router(upload.router, tags=['upload'])
