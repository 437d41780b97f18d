"""Manual reconciliation endpoint."""

from fastapi import APIRouter, Depends

from papertrade.api.deps import get_sync_coordinator
from papertrade.api.schemas import SyncReportResponse
from papertrade.services import SyncCoordinator

router = APIRouter(prefix="/sync", tags=["sync"])


@router.post("", response_model=SyncReportResponse)
async def drain_queue(coordinator: SyncCoordinator = Depends(get_sync_coordinator)):
    """Push locally queued transactions to the remote store now."""
    return SyncReportResponse.from_report(await coordinator.drain())
