from fastapi import APIRouter, Depends, UploadFile, File
from sqlalchemy.orm import Session
from storefront.api.deps import get_db, get_storage
from storefront.core.auth import ensure_user, get_current_identity
from storefront.db.models import utcnow
from storefront.schemas import ProfileRead, ProfileUpdate
from storefront.services.storage import BlobStorage, check_image

router = APIRouter()

@router.get("/v1/account", response_model=ProfileRead)
def get_profile(identity: dict = Depends(get_current_identity), db: Session = Depends(get_db)):
    return ensure_user(db, identity)

@router.patch("/v1/account", response_model=ProfileRead)
def update_profile(payload: ProfileUpdate, identity: dict = Depends(get_current_identity), db: Session = Depends(get_db)):
    user = ensure_user(db, identity)
    for k, v in payload.model_dump(exclude_unset=True).items(): setattr(user, k, v)
    user.updated_at = utcnow()
    db.add(user); db.commit(); db.refresh(user)
    return user

@router.post("/v1/account/profile-image", response_model=ProfileRead)
async def upload_profile_image(file: UploadFile = File(...), identity: dict = Depends(get_current_identity),
                               db: Session = Depends(get_db), storage: BlobStorage = Depends(get_storage)):
    user = ensure_user(db, identity)
    content = await file.read()
    check_image(content, file.content_type)
    blob = storage.upload(content, file.content_type, file.filename or 'avatar', folder='profiles')
    user.profile_image = blob['url']
    user.updated_at = utcnow()
    db.add(user); db.commit(); db.refresh(user)
    return user
