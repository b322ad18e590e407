from typing import List, Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from storefront.api.deps import get_db, get_view_cache
from storefront.core.auth import require_admin
from storefront.schemas import FeaturedAdd, FeaturedMove, FeaturedRead, ProductRead
from storefront.services import featured
from storefront.store.view_cache import ViewCache

router = APIRouter()

HOME_LIMIT = 4

@router.get("/v1/home", response_model=List[ProductRead])
def home(db: Session = Depends(get_db), cache: ViewCache = Depends(get_view_cache)):
    cached = cache.get(featured.HOME_VIEW)
    if cached is not None:
        return cached
    products = [ProductRead.model_validate(f.product) for f in featured.list_featured(db, limit=HOME_LIMIT)]
    cache.set(featured.HOME_VIEW, [p.model_dump(mode='json') for p in products])
    return products

@router.get("/v1/featured", response_model=List[FeaturedRead])
def list_featured(limit: Optional[int] = None, db: Session = Depends(get_db)):
    return featured.list_featured(db, limit=limit)

@router.post("/v1/featured", response_model=FeaturedRead, status_code=201)
def add_featured(payload: FeaturedAdd, _=Depends(require_admin), db: Session = Depends(get_db),
                 cache: ViewCache = Depends(get_view_cache)):
    return featured.add_featured(db, cache, payload.product_id)

@router.delete("/v1/featured/{featured_id}", status_code=204)
def remove_featured(featured_id: str, _=Depends(require_admin), db: Session = Depends(get_db),
                    cache: ViewCache = Depends(get_view_cache)):
    featured.remove_featured(db, cache, featured_id)

@router.post("/v1/featured/{featured_id}/move", response_model=List[FeaturedRead])
def move(featured_id: str, payload: FeaturedMove, _=Depends(require_admin), db: Session = Depends(get_db),
         cache: ViewCache = Depends(get_view_cache)):
    featured.move_position(db, cache, featured_id, payload.direction)
    return featured.list_featured(db)
