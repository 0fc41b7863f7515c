import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ...models.contact_request import ContactRequest
from ...platform.database import get_db
from ...schemas.contact import ContactRequestCreate, ContactRequestResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/contact-requests", tags=["Contact"])


@router.post("", response_model=ContactRequestResponse, status_code=status.HTTP_201_CREATED)
def create_contact_request(data: ContactRequestCreate, db: Session = Depends(get_db)):
    contact = ContactRequest(**data.model_dump(), status="new")
    db.add(contact)
    try:
        db.commit()
        db.refresh(contact)
    except Exception:
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to submit contact request")
    logger.info("Contact request received company=%s plan=%s", contact.company_name, contact.preferred_plan)
    return contact
