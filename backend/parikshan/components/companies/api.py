import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ...models.company import Company
from ...models.profile import Profile
from ...platform.database import get_db
from ...platform.security import get_current_profile, require_admin
from ...schemas.company import CompanyOnboard, CompanyResponse
from ...schemas.profile import ProfileResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Companies"])


@router.get("/profiles/me", response_model=ProfileResponse)
def get_my_profile(current_profile: Profile = Depends(get_current_profile)):
    return current_profile


@router.get("/companies/me", response_model=CompanyResponse)
def get_my_company(
    db: Session = Depends(get_db),
    current_profile: Profile = Depends(require_admin),
):
    company = None
    if current_profile.company_id:
        company = db.query(Company).filter(Company.id == current_profile.company_id).first()
    if not company:
        raise HTTPException(status_code=404, detail="Company not found")
    return company


@router.post("/companies/onboard", response_model=CompanyResponse, status_code=status.HTTP_201_CREATED)
def onboard_company(
    data: CompanyOnboard,
    db: Session = Depends(get_db),
    current_profile: Profile = Depends(require_admin),
):
    """Create the admin's company (or reuse the one registered under its email) and link the profile."""
    name = data.name.strip()
    industry = data.industry.strip()
    if not name or not industry:
        raise HTTPException(status_code=400, detail="Company name and industry are required")

    company = db.query(Company).filter(Company.email == current_profile.email).first()
    if not company:
        company = Company(name=name, industry=industry, email=current_profile.email)
        db.add(company)
        db.flush()
    current_profile.company_id = company.id
    try:
        db.commit()
        db.refresh(company)
    except Exception:
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to onboard company")
    logger.info("Company onboarded company_id=%s admin=%s", company.id, current_profile.id)
    return company
