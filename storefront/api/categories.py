from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from storefront.api.deps import get_db
from storefront.core.auth import require_admin
from storefront.schemas import CategoryCreate, CategoryRead
from storefront.services import catalog

router = APIRouter()

@router.get('/', response_model=List[CategoryRead])
def list_categories(db: Session = Depends(get_db)):
    return catalog.list_categories(db)

@router.post('/', response_model=CategoryRead, status_code=201)
def create_category(payload: CategoryCreate, _=Depends(require_admin), db: Session = Depends(get_db)):
    return catalog.create_category(db, payload.name)
