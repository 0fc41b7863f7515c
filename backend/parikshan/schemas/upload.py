from typing import Optional

from pydantic import BaseModel


class BulkCsvUploadRequest(BaseModel):
    """CSV sent as text by older clients of ``/n8n/csv-upload``."""

    csvContent: str = ""
    companyId: str = ""
    adminUserId: str = ""
    companyName: Optional[str] = None
    industry: Optional[str] = None
    filename: Optional[str] = None

    @property
    def has_required_fields(self) -> bool:
        return bool(self.csvContent.strip() and self.companyId.strip() and self.adminUserId.strip())
