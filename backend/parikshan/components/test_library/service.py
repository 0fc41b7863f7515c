from typing import List, Optional

from sqlalchemy.orm import Session

from ...models.test_library import TestLibraryItem


def active_tests(db: Session, category: Optional[str] = None, sub_category: Optional[str] = None) -> List[TestLibraryItem]:
    query = db.query(TestLibraryItem).filter(TestLibraryItem.is_active.is_(True))
    if category:
        query = query.filter(TestLibraryItem.category == category)
    if sub_category:
        query = query.filter(TestLibraryItem.sub_category == sub_category)
    return query.order_by(TestLibraryItem.category.asc(), TestLibraryItem.name.asc()).all()


def selection_summary(db: Session, test_ids: List[str]) -> dict:
    """Totals shown on the test-selection wizard for the chosen items."""
    ids = list(dict.fromkeys(test_ids))
    items = db.query(TestLibraryItem).filter(TestLibraryItem.id.in_(ids)).all() if ids else []
    return {
        "test_count": len(items),
        "total_duration_minutes": sum(item.duration_minutes or 0 for item in items),
        "total_questions": sum(item.question_count or 0 for item in items),
    }
