from typing import List, Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from storefront.api.deps import get_db
from storefront.core.auth import require_admin
from storefront.schemas import AdminUserCreate, DashboardStats, RoleUpdate, UserRead
from storefront.services import admin

router = APIRouter()

@router.get("/v1/admin/dashboard", response_model=DashboardStats)
def dashboard(_=Depends(require_admin), db: Session = Depends(get_db)):
    return admin.dashboard(db)

@router.get("/v1/admin/users", response_model=List[UserRead])
def users(role: Optional[str] = None, q: Optional[str] = None, _=Depends(require_admin), db: Session = Depends(get_db)):
    return admin.list_users(db, role=role, search=q)

@router.patch("/v1/admin/users/{user_id}/role", response_model=UserRead)
def change_role(user_id: str, payload: RoleUpdate, _=Depends(require_admin), db: Session = Depends(get_db)):
    return admin.change_role(db, user_id, payload.role)

@router.post("/v1/admin/users", response_model=UserRead, status_code=201)
def add_user(payload: AdminUserCreate, _=Depends(require_admin), db: Session = Depends(get_db)):
    return admin.add_user(db, str(payload.email), payload.role)
