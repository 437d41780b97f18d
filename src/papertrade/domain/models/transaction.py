"""Transaction and LocalQueueEntry domain models."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from papertrade.domain.models.enums import TradeSide, SyncState

LOCAL_ID_PREFIX = "local_"


def new_local_id() -> str:
    """Generate an id that cannot collide with remote-assigned ids."""
    return f"{LOCAL_ID_PREFIX}{uuid.uuid4().hex}"


@dataclass(frozen=True)
class Transaction:
    """
    Record of one executed trade (immutable).

    - ``total`` is fixed at creation as ``shares * price`` and never recomputed
    - ``timestamp`` is the execution instant (tz-aware UTC)
    - ``client_id`` is the locally generated id the trade was created with;
      remote copies carry it so they can be matched to queue entries
    """

    id: str
    user_id: str
    symbol: str
    side: TradeSide
    shares: int
    price: Decimal
    total: Decimal
    timestamp: datetime
    sync_pending: bool
    client_id: Optional[str] = None

    def __post_init__(self) -> None:
        if isinstance(self.side, str):
            object.__setattr__(self, "side", TradeSide(self.side))
        if self.client_id is None:
            object.__setattr__(self, "client_id", self.id)
        if self.total != self.shares * self.price:
            raise ValueError(
                f"Transaction {self.id}: total {self.total} != {self.shares} x {self.price}"
            )

    @classmethod
    def new(
        cls,
        user_id: str,
        symbol: str,
        side: TradeSide,
        shares: int,
        price: Decimal,
        timestamp: datetime,
    ) -> "Transaction":
        """Create a locally-identified transaction for a freshly executed trade."""
        txn_id = new_local_id()
        return cls(
            id=txn_id,
            user_id=user_id,
            symbol=symbol,
            side=side,
            shares=shares,
            price=price,
            total=shares * price,
            timestamp=timestamp,
            sync_pending=False,
            client_id=txn_id,
        )

    @property
    def is_local(self) -> bool:
        """Return True if this record carries a locally generated id."""
        return self.id.startswith(LOCAL_ID_PREFIX)


@dataclass
class LocalQueueEntry:
    """
    A transaction waiting in the local durable queue for a remote commit.

    ``state`` is in-memory only; every persisted entry is PENDING.
    """

    transaction: Transaction
    enqueued_at: datetime
    saved_locally: bool = True
    sync_pending: bool = True
    state: SyncState = field(default=SyncState.PENDING)

    @property
    def id(self) -> str:
        return self.transaction.id

    @property
    def user_id(self) -> str:
        return self.transaction.user_id
