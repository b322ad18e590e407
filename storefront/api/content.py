from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from storefront.api.deps import get_db
from storefront.core.auth import require_admin
from storefront.schemas import (
    AboutUsPayload, AboutUsRead, ContactUsPayload, ContactUsRead,
    ContactMessageCreate, ContactMessageRead, MessageStatusUpdate,
)
from storefront.services import content

router = APIRouter()

@router.get("/v1/about", response_model=AboutUsRead)
def about(db: Session = Depends(get_db)):
    return content.get_about(db)

@router.put("/v1/about", response_model=AboutUsRead)
def save_about(payload: AboutUsPayload, _=Depends(require_admin), db: Session = Depends(get_db)):
    return content.save_about(db, payload)

@router.get("/v1/contact", response_model=ContactUsRead)
def contact(db: Session = Depends(get_db)):
    return content.get_contact(db)

@router.put("/v1/contact", response_model=ContactUsRead)
def save_contact(payload: ContactUsPayload, _=Depends(require_admin), db: Session = Depends(get_db)):
    return content.save_contact(db, payload)

@router.post("/v1/contact/messages", response_model=ContactMessageRead, status_code=201)
def send_message(payload: ContactMessageCreate, db: Session = Depends(get_db)):
    return content.submit_message(db, payload)

@router.get("/v1/admin/messages", response_model=List[ContactMessageRead])
def messages(_=Depends(require_admin), db: Session = Depends(get_db)):
    return content.list_messages(db)

@router.patch("/v1/admin/messages/{message_id}", response_model=ContactMessageRead)
def set_message_status(message_id: str, payload: MessageStatusUpdate, _=Depends(require_admin), db: Session = Depends(get_db)):
    return content.set_message_status(db, message_id, payload.status)
