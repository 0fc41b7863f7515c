from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...models.section import Section
from ...platform.database import get_db
from ...schemas.question import SectionResponse

router = APIRouter(tags=["Questions"])


@router.get("/sections", response_model=List[SectionResponse])
def list_sections(db: Session = Depends(get_db)):
    return db.query(Section).order_by(Section.display_order.asc()).all()
