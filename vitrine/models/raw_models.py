"""VITRINE — Raw Sheet Snapshot Models (Immutable)."""

from datetime import datetime, timezone
from typing import Optional
from sqlmodel import SQLModel, Field


class RawSheetSnapshot(SQLModel, table=True):
    """Immutable copy of the tabs fetched in one ingestion cycle.

    Never modify this data — it's the audit trail and the fallback source
    when the spreadsheet cannot be reached.
    """

    __tablename__ = "raw_sheet_snapshots"

    id: Optional[int] = Field(default=None, primary_key=True)
    source: str = Field(index=True, description="URL the workbook was fetched from")
    tab_count: int = Field(default=0)
    row_count: int = Field(default=0, description="Data rows, headers excluded")
    fetched_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    payload_json: str = Field(description="Tabs as [{name, rows}] JSON")
