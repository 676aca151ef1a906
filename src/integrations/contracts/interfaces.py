from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from src.domain.models import OutboundTransferRequest, OutboundTransferResponse, TransferContinuation


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class TransactionStatus(str, Enum):
    PENDING = "PENDING"
    SUCCESSFUL = "SUCCESSFUL"
    FAILED = "FAILED"


class Provider(str, Enum):
    MTN = "MTN"
    AIRTEL = "AIRTEL"
    TNM = "TNM"


# ---------------------------------------------------------------------------
# CBS data shapes
# ---------------------------------------------------------------------------

@dataclass
class KycResult:
    msisdn: str
    first_name: str = ""
    last_name: str = ""
    middle_name: str = ""
    found: bool = True
    is_barred: bool = False
    account_status: str = ""             # operator-specific, e.g. "Y", "NOT FOUND"
    status_code: int = 200
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def display_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)


@dataclass
class DisbursementRequest:
    msisdn: str
    amount: str                          # decimal string
    currency: str
    reference: str                       # scheme transaction id
    narration: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class CollectionRequest:
    msisdn: str
    amount: str
    currency: str
    reference: str                       # outbound transfer id, echoed back by the callback
    narration: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class RefundRequest:
    reference: str                       # CBS money id / receipt of the original movement
    reason: str = ""
    amount: Optional[str] = None
    currency: Optional[str] = None


@dataclass
class CBSAck:
    reference: str
    cbs_reference: str
    status: TransactionStatus
    message: str = ""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    raw: Dict[str, Any] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Collaborator interfaces
# ---------------------------------------------------------------------------

class CoreBankingClient(ABC):
    """Every mobile money operator integration must implement this interface.

    Implementations raise ``src.domain.errors.CBSError`` when the operator
    cannot be reached or rejects the request.
    """

    @property
    @abstractmethod
    def provider(self) -> Provider:
        """Return the provider enum value."""

    @abstractmethod
    async def lookup_identity(self, msisdn: str) -> KycResult:
        """Fetch KYC details for a subscriber."""

    @abstractmethod
    async def disburse(self, request: DisbursementRequest) -> CBSAck:
        """Pay funds out to a subscriber wallet."""

    @abstractmethod
    async def collect(self, request: CollectionRequest) -> CBSAck:
        """Request a debit from a subscriber wallet."""

    @abstractmethod
    async def refund(self, request: RefundRequest) -> CBSAck:
        """Reverse a previously executed money movement."""

    @abstractmethod
    async def enquire_transaction_status(self, transaction_id: str) -> TransactionStatus:
        """Poll the status of a previously initiated collection."""


class SchemeAdapterClient(ABC):
    """Outbound API of the interoperability scheme adapter.

    Implementations raise ``src.domain.errors.SchemeAdapterError`` on failure.
    """

    @abstractmethod
    async def initiate_outbound_transfer(self, request: OutboundTransferRequest) -> OutboundTransferResponse:
        """Start a payer-side transfer (party lookup, quote, optional FX)."""

    @abstractmethod
    async def continue_outbound_transfer(
        self, transfer_id: str, continuation: TransferContinuation
    ) -> OutboundTransferResponse:
        """Accept / reject conversion terms or the quote of a running transfer."""
