from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...platform.database import get_db
from ...schemas.test_library import TestLibraryItemResponse, TestSelectionSummary, TestSelectionSummaryRequest
from .service import active_tests, selection_summary

router = APIRouter(prefix="/test-library", tags=["Test Library"])


@router.get("", response_model=List[TestLibraryItemResponse])
def list_test_library(
    category: Optional[str] = Query(default=None),
    sub_category: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
):
    return active_tests(db, category=category, sub_category=sub_category)


@router.post("/summary", response_model=TestSelectionSummary)
def summarize_selection(data: TestSelectionSummaryRequest, db: Session = Depends(get_db)):
    return selection_summary(db, data.test_ids)
