from typing import List
from fastapi import APIRouter, Depends, Request
from storefront.api.deps import get_storage
from storefront.core.auth import require_admin
from storefront.core.errors import ValidationError
from storefront.services.storage import BlobStorage, check_image

router = APIRouter()

@router.post("/api/upload")
async def upload(request: Request, filename: str = "", folder: str = "uploads", _=Depends(require_admin),
                 storage: BlobStorage = Depends(get_storage)):
    if not filename:
        raise ValidationError("Filename is required")
    data = await request.body()
    content_type = request.headers.get("content-type", "application/octet-stream")
    check_image(data, content_type)
    return storage.upload(data, content_type, filename, folder=folder or "uploads")

@router.get("/api/upload", response_model=List[dict])
def list_uploads(prefix: str = "uploads", _=Depends(require_admin), storage: BlobStorage = Depends(get_storage)):
    return storage.list(prefix)
