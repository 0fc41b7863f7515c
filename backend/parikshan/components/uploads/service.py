"""CSV helpers and n8n payload builders for candidate uploads."""

from __future__ import annotations

import csv
import json
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ...schemas.test_library import TestConfiguration

DEFAULT_UPLOAD_FILENAME = "upload.csv"


class InvalidTestConfiguration(ValueError):
    pass


def new_batch_id() -> str:
    return f"BATCH_{int(time.time() * 1000)}"


def _data_rows(csv_text: str) -> List[List[str]]:
    lines = [line for line in csv_text.splitlines() if line.strip()]
    if len(lines) < 2:
        return []
    rows = []
    for values in csv.reader(lines[1:]):
        values = [v.strip() for v in values]
        if len(values) >= 2:
            rows.append(values)
    return rows


def decode_csv(content: bytes) -> str:
    return content.decode("utf-8-sig", errors="replace")


def count_candidate_rows(csv_text: str) -> int:
    """Data rows (header excluded) with at least a name and an email column."""
    return len(_data_rows(csv_text))


def parse_candidate_rows(csv_text: str, company_id: str) -> List[Dict[str, Any]]:
    return [
        {
            "full_name": values[0] or "",
            "email": values[1] or "",
            "phone": (values[2] if len(values) > 2 else "") or None,
            "company_id": company_id,
        }
        for values in _data_rows(csv_text)
    ]


def parse_test_configuration(raw: Optional[str]) -> Optional[TestConfiguration]:
    if raw is None or not raw.strip():
        return None
    try:
        return TestConfiguration.model_validate(json.loads(raw))
    except (json.JSONDecodeError, ValidationError) as exc:
        raise InvalidTestConfiguration(f"Invalid testConfiguration: {exc}") from exc


def user_creation_fields(
    *,
    admin_user_id: str,
    company_id: str,
    company_name: Optional[str],
    industry: Optional[str],
    filename: str,
    batch_id: str,
    test_configuration: Optional[TestConfiguration] = None,
) -> Dict[str, str]:
    fields = {
        "adminUserId": admin_user_id,
        "companyId": company_id,
        "companyName": company_name or "",
        "industry": industry or "",
        "filename": filename,
        "batch_id": batch_id,
    }
    if test_configuration is not None:
        fields["testConfiguration"] = test_configuration.model_dump_json()
    return fields


def bulk_candidates_payload(
    *,
    candidates: List[Dict[str, Any]],
    company_id: str,
    admin_user_id: str,
    company_name: Optional[str],
    industry: Optional[str],
    filename: Optional[str],
) -> Dict[str, Any]:
    return {
        "action": "bulk_create_candidates",
        "candidates": candidates,
        "company_id": company_id,
        "admin_user_id": admin_user_id,
        "company_name": company_name or "",
        "industry": industry or "",
        "filename": filename or "",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
