"""About page, contact page and messages sent through the contact form."""
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session
import structlog

from storefront.core.errors import NotFound, ValidationError
from storefront.db.models import AboutUs, ContactMessage, ContactUs, utcnow
from storefront.schemas import AboutUsPayload, ContactMessageCreate, ContactUsPayload

logger = structlog.get_logger(__name__)

PAGE_ROW_ID = 1


def _single(db: Session, model):
    return db.execute(select(model).order_by(model.id).limit(1)).scalar_one_or_none()


def get_about(db: Session) -> AboutUs:
    return _single(db, AboutUs) or AboutUs(id=PAGE_ROW_ID, title='', content='', mission='', vision='', team_members=[])


def save_about(db: Session, payload: AboutUsPayload) -> AboutUs:
    row = _single(db, AboutUs) or AboutUs(id=PAGE_ROW_ID)
    for k, v in payload.model_dump().items(): setattr(row, k, v)
    row.updated_at = utcnow()
    db.add(row); db.commit(); db.refresh(row)
    return row


def get_contact(db: Session) -> ContactUs:
    return _single(db, ContactUs) or ContactUs(
        id=PAGE_ROW_ID, title='', content='', email='', phone='', address='', map_url='', social_media=[],
    )


def save_contact(db: Session, payload: ContactUsPayload) -> ContactUs:
    row = _single(db, ContactUs) or ContactUs(id=PAGE_ROW_ID)
    for k, v in payload.model_dump().items(): setattr(row, k, v)
    row.updated_at = utcnow()
    db.add(row); db.commit(); db.refresh(row)
    return row


def submit_message(db: Session, payload: ContactMessageCreate) -> ContactMessage:
    fields = payload.model_dump()
    if not all((fields.get(k) or '').strip() for k in ('name', 'email', 'subject', 'message')):
        raise ValidationError("Please fill in all fields")
    msg = ContactMessage(**{k: v.strip() for k, v in fields.items()}, status='unread', created_at=utcnow())
    db.add(msg); db.commit(); db.refresh(msg)
    logger.info("contact_message_received", message_id=msg.id)
    return msg


def list_messages(db: Session) -> List[ContactMessage]:
    return list(db.execute(select(ContactMessage).order_by(ContactMessage.created_at.desc())).scalars().all())


def set_message_status(db: Session, message_id: str, status: str) -> ContactMessage:
    msg = db.get(ContactMessage, message_id)
    if not msg:
        raise NotFound("Message not found")
    msg.status = status
    db.add(msg); db.commit(); db.refresh(msg)
    return msg
