"""
Generate per-candidate questions from the question templates.

Usage (from backend/):
  python -m parikshan.scripts.generate_questions              # every pending candidate
  python -m parikshan.scripts.generate_questions <candidate_id>

Sections that already have questions for a candidate are skipped, so the
script can be re-run safely.
"""
from __future__ import annotations

import sys
from typing import List, Optional

from parikshan.components.questions.service import (
    CandidateNotFound,
    generate_questions_for_candidate,
    generate_questions_for_pending,
)
from parikshan.platform.database import SessionLocal
from parikshan.platform.logging import setup_logging


def main(argv: Optional[List[str]] = None) -> int:
    setup_logging()
    args = sys.argv[1:] if argv is None else argv
    db = SessionLocal()
    try:
        if args:
            candidate_id = args[0].strip()
            try:
                summary = generate_questions_for_candidate(db, candidate_id)
            except CandidateNotFound:
                print(f"Candidate not found: {candidate_id}", file=sys.stderr)
                return 2
            print("Summary:", summary)
        else:
            results = generate_questions_for_pending(db)
            failed = [r for r in results if "error" in r]
            print(f"Processed {len(results)} pending candidates ({len(failed)} failed)")
            if failed:
                return 1
        print("Done")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
