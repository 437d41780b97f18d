"""Pydantic schemas for sync endpoints."""

from typing import Optional

from pydantic import BaseModel

from papertrade.services import SyncReport


class SyncReportResponse(BaseModel):
    """Result of a drain pass."""

    attempted: int
    synced: list[str]
    failed: Optional[str] = None
    remaining: int

    @classmethod
    def from_report(cls, report: SyncReport) -> "SyncReportResponse":
        return cls(
            attempted=report.attempted,
            synced=list(report.synced),
            failed=report.failed,
            remaining=report.remaining,
        )
