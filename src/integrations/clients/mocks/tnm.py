"""
TNM Mpamba: mock client.

This is a mock implementation for development and testing.
TNM reports KYC success through the response message; anything other than
"Completed successfully" means the wallet cannot receive funds.
"""

import logging
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

_COMPLETED = "Completed successfully"

_MOCK_SUBSCRIBERS: Dict[str, str] = {
    "265881234567": "Chikondi Banda",
    "265889876543": "Tawonga Mhango",
}


class TNMMockClient(CoreBankingClient):
    def __init__(
        self,
        fail_disbursements: bool = False,
        fail_refunds: bool = False,
        subscribers: Optional[Dict[str, str]] = None,
    ):
        self._fail_disbursements = fail_disbursements
        self._fail_refunds = fail_refunds
        self._subscribers = dict(subscribers if subscribers is not None else _MOCK_SUBSCRIBERS)
        self._transactions: Dict[str, TransactionStatus] = {}
        self.disbursements: list = []
        self.collections: list = []
        self.refunds: list = []

    @property
    def provider(self) -> Provider:
        return Provider.TNM

    def _new_receipt(self) -> str:
        return f"TNM{uuid.uuid4().hex[:10].upper()}"

    async def lookup_identity(self, msisdn: str) -> KycResult:
        full_name = self._subscribers.get(msisdn)
        message = _COMPLETED if full_name else "Failed"
        raw: Dict[str, Any] = {"message": message, "data": {"full_name": full_name or ""}}
        first, _, last = (full_name or "").partition(" ")
        return KycResult(
            msisdn=msisdn,
            first_name=first,
            last_name=last,
            found=message == _COMPLETED,
            account_status="SUCCESS" if full_name else "FAILED",
            status_code=200 if full_name else 404,
            raw=raw,
        )

    async def disburse(self, request: DisbursementRequest) -> CBSAck:
        errors = validate_money_movement(request)
        if errors:
            raise CBSError(f"[TNM MOCK] Invalid payment: {'; '.join(errors)}")
        if self._fail_disbursements:
            raise CBSError(f"[TNM MOCK] Payment {request.reference} failed")
        self.disbursements.append(request)
        receipt = self._new_receipt()
        self._transactions[receipt] = TransactionStatus.SUCCESSFUL
        logger.info("[TNM MOCK] Paid %s %s to %s", request.amount, request.currency, request.msisdn)
        return CBSAck(reference=request.reference, cbs_reference=receipt, status=TransactionStatus.SUCCESSFUL)

    async def collect(self, request: CollectionRequest) -> CBSAck:
        errors = validate_money_movement(request)
        if errors:
            raise CBSError(f"[TNM MOCK] Invalid invoice: {'; '.join(errors)}")
        self.collections.append(request)
        receipt = self._new_receipt()
        self._transactions[receipt] = TransactionStatus.PENDING
        logger.info("[TNM MOCK] Invoice %s raised for %s", request.reference, request.msisdn)
        return CBSAck(reference=request.reference, cbs_reference=receipt, status=TransactionStatus.PENDING)

    async def refund(self, request: RefundRequest) -> CBSAck:
        if self._fail_refunds:
            raise CBSError(f"[TNM MOCK] Refund of receipt {request.reference} failed")
        self.refunds.append(request)
        return CBSAck(reference=request.reference, cbs_reference=self._new_receipt(),
                      status=TransactionStatus.SUCCESSFUL)

    async def enquire_transaction_status(self, transaction_id: str) -> TransactionStatus:
        return self._transactions.get(transaction_id, TransactionStatus.PENDING)
