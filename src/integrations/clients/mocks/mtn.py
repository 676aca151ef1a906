"""
MTN Mobile Money: mock client.

This is a mock implementation for development and testing.
Replace with the real MTN MoMo API client once credentials are available.
Responses mimic MTN's shapes (given_name / family_name, "NOT FOUND" status
for unknown subscribers) with configurable success/failure scenarios via
the MTNMockClient constructor.
"""

import logging
import random
import uuid
from typing import Any, Dict, Optional

from src.domain.errors import CBSError
from src.integrations.contracts.interfaces import (
    CBSAck,
    CollectionRequest,
    CoreBankingClient,
    DisbursementRequest,
    KycResult,
    Provider,
    RefundRequest,
    TransactionStatus,
)
from src.integrations.contracts.payments import validate_money_movement

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------

_MOCK_SUBSCRIBERS: Dict[str, Dict[str, Any]] = {
    "260961234567": {"given_name": "Mutale", "family_name": "Banda", "status": "200"},
    "260967654321": {"given_name": "Chilufya", "family_name": "Phiri", "status": "200"},
    "260960000000": {"given_name": "", "family_name": "", "status": "NOT FOUND"},
}


# ---------------------------------------------------------------------------
# Mock client
# ---------------------------------------------------------------------------

class MTNMockClient(CoreBankingClient):
    """
    Mock MTN MoMo client.

    Parameters
    ----------
    payment_success_rate : float
        Probability (0–1) that a collection settles. Default 1.0.
    pending_enquiries : int
        How many status enquiries answer PENDING before the final status. Default 0.
    fail_disbursements / fail_refunds : bool
        Raise CBSError from disburse / refund. Default False.
    """

    def __init__(
        self,
        payment_success_rate: float = 1.0,
        pending_enquiries: int = 0,
        fail_disbursements: bool = False,
        fail_refunds: bool = False,
        subscribers: Optional[Dict[str, Dict[str, Any]]] = None,
    ):
        self._success_rate = payment_success_rate
        self._pending_enquiries = pending_enquiries
        self._fail_disbursements = fail_disbursements
        self._fail_refunds = fail_refunds
        self._subscribers = dict(subscribers if subscribers is not None else _MOCK_SUBSCRIBERS)

        # In-memory stores (reset on restart)
        self._transactions: Dict[str, TransactionStatus] = {}
        self._enquiries: Dict[str, int] = {}
        self.disbursements: list = []
        self.collections: list = []
        self.refunds: list = []

        logger.info("[MTN MOCK] Client initialised (success_rate=%.0f%%)", payment_success_rate * 100)

    # ------------------------------------------------------------------
    # Provider identity
    # ------------------------------------------------------------------

    @property
    def provider(self) -> Provider:
        return Provider.MTN

    def _new_provider_ref(self) -> str:
        return f"MTN-{uuid.uuid4().hex[:12].upper()}"

    # ------------------------------------------------------------------
    # KYC
    # ------------------------------------------------------------------

    async def lookup_identity(self, msisdn: str) -> KycResult:
        raw = self._subscribers.get(msisdn, {"given_name": "", "family_name": "", "status": "NOT FOUND"})
        status = str(raw.get("status", ""))
        if status == "NOT FOUND":
            logger.warning("[MTN MOCK] Subscriber not found msisdn=%s", msisdn)
        return KycResult(
            msisdn=msisdn,
            first_name=raw.get("given_name", ""),
            last_name=raw.get("family_name", ""),
            found=status != "NOT FOUND",
            account_status=status,
            status_code=int(status) if status.isdigit() else 404,
            raw=dict(raw),
        )

    # ------------------------------------------------------------------
    # Money movement
    # ------------------------------------------------------------------

    async def disburse(self, request: DisbursementRequest) -> CBSAck:
        errors = validate_money_movement(request)
        if errors:
            raise CBSError(f"[MTN MOCK] Invalid disbursement: {'; '.join(errors)}")
        if self._fail_disbursements:
            raise CBSError(f"[MTN MOCK] Disbursement {request.reference} rejected by MTN")

        self.disbursements.append(request)
        provider_ref = self._new_provider_ref()
        self._transactions[provider_ref] = TransactionStatus.SUCCESSFUL
        logger.info("[MTN MOCK] Disbursed %s %s to %s ref=%s", request.amount, request.currency,
                    request.msisdn, request.reference)
        return CBSAck(reference=request.reference, cbs_reference=provider_ref, status=TransactionStatus.SUCCESSFUL)

    async def collect(self, request: CollectionRequest) -> CBSAck:
        errors = validate_money_movement(request)
        if errors:
            raise CBSError(f"[MTN MOCK] Invalid collection: {'; '.join(errors)}")

        self.collections.append(request)
        provider_ref = self._new_provider_ref()
        if random.random() < self._success_rate:
            self._transactions[provider_ref] = TransactionStatus.SUCCESSFUL
        else:
            self._transactions[provider_ref] = TransactionStatus.FAILED
        logger.info("[MTN MOCK] Request to pay %s %s from %s ref=%s", request.amount, request.currency,
                    request.msisdn, request.reference)
        return CBSAck(reference=request.reference, cbs_reference=provider_ref, status=TransactionStatus.PENDING)

    async def refund(self, request: RefundRequest) -> CBSAck:
        if self._fail_refunds:
            raise CBSError(f"[MTN MOCK] Refund {request.reference} rejected by MTN")
        self.refunds.append(request)
        logger.info("[MTN MOCK] Refunded %s. Reason: %s", request.reference, request.reason)
        return CBSAck(reference=request.reference, cbs_reference=self._new_provider_ref(),
                      status=TransactionStatus.SUCCESSFUL, message=f"Reversed. Reason: {request.reason}")

    async def enquire_transaction_status(self, transaction_id: str) -> TransactionStatus:
        seen = self._enquiries.get(transaction_id, 0)
        self._enquiries[transaction_id] = seen + 1
        if seen < self._pending_enquiries:
            return TransactionStatus.PENDING
        # Unknown reference: PENDING so callers retry
        return self._transactions.get(transaction_id, TransactionStatus.PENDING)
