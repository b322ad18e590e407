from decimal import Decimal
from fastapi import APIRouter, Depends, UploadFile, File
from typing import List, Optional
from sqlalchemy.orm import Session
from storefront.api.deps import get_db, get_storage, get_view_cache
from storefront.core.auth import get_current_identity, get_optional_identity, require_admin
from storefront.core.errors import ActionResult, StorefrontError
from storefront.schemas import ProductCreate, ProductUpdate, ProductRead, ProductImagesUpdate, ProductImageDelete
from storefront.services import catalog
from storefront.services.storage import BlobStorage, check_image
from storefront.store.view_cache import ViewCache

router = APIRouter()

@router.get('/', response_model=List[ProductRead])
def list_products(db: Session = Depends(get_db), q: Optional[str] = None, categories: Optional[str] = None,
                  minPrice: Optional[Decimal] = None, maxPrice: Optional[Decimal] = None,
                  rating: Optional[str] = None, sort: Optional[str] = None, limit: int = 50, offset: int = 0):
    return catalog.list_products(db, q=q, categories=categories, min_price=minPrice, max_price=maxPrice,
                                 rating=rating, sort=sort, limit=limit, offset=offset)

@router.get('/{product_id}', response_model=ProductRead)
def get_product(product_id: str, db: Session = Depends(get_db), cache: ViewCache = Depends(get_view_cache)):
    cached = cache.get(f"/products/{product_id}")
    if cached is not None:
        return cached
    obj = ProductRead.model_validate(catalog.get_product(db, product_id))
    cache.set(f"/products/{product_id}", obj.model_dump(mode='json'))
    return obj

@router.post('/', response_model=ProductRead, status_code=201)
def create_product(payload: ProductCreate, _=Depends(require_admin), db: Session = Depends(get_db),
                   cache: ViewCache = Depends(get_view_cache)):
    return catalog.create_product(db, cache, payload)

@router.patch('/{product_id}', response_model=ProductRead)
def update_product(product_id: str, payload: ProductUpdate, _=Depends(require_admin), db: Session = Depends(get_db),
                   cache: ViewCache = Depends(get_view_cache)):
    return catalog.update_product(db, cache, product_id, payload)

@router.delete('/{product_id}', status_code=204)
def delete_product(product_id: str, _=Depends(require_admin), db: Session = Depends(get_db),
                   cache: ViewCache = Depends(get_view_cache)):
    catalog.delete_product(db, cache, product_id)

@router.put('/{product_id}/images', response_model=ActionResult, response_model_exclude_none=True)
def set_images(product_id: str, payload: ProductImagesUpdate, identity: Optional[dict] = Depends(get_optional_identity),
               db: Session = Depends(get_db), cache: ViewCache = Depends(get_view_cache)):
    return catalog.update_product_images(db, cache, identity, product_id, payload.image_urls)

@router.post('/{product_id}/images/remove', response_model=ActionResult, response_model_exclude_none=True)
def remove_image(product_id: str, payload: ProductImageDelete, identity: Optional[dict] = Depends(get_optional_identity),
                 db: Session = Depends(get_db), cache: ViewCache = Depends(get_view_cache), storage: BlobStorage = Depends(get_storage)):
    return catalog.delete_product_image(db, cache, storage, identity, product_id, payload.image_url)

@router.post('/{product_id}/images', response_model=ProductRead)
async def upload_product_image(product_id: str, file: UploadFile = File(...), _=Depends(require_admin),
                               identity: dict = Depends(get_current_identity),
                               db: Session = Depends(get_db), cache: ViewCache = Depends(get_view_cache),
                               storage: BlobStorage = Depends(get_storage)):
    obj = catalog.get_product(db, product_id)
    content = await file.read()
    check_image(content, file.content_type)
    blob = storage.upload(content, file.content_type, file.filename or 'image', folder='products')
    images = ([obj.image_url] if obj.image_url else []) + list(obj.additional_images or []) + [blob['url']]
    result = catalog.update_product_images(db, cache, identity, product_id, images)
    if not result.success:
        raise StorefrontError(result.message)
    db.refresh(obj)
    return obj
