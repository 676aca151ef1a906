"""
Airtel Money: mock client.

This is a mock implementation for development and testing.
Replace with the real Airtel Money API client once credentials are available.
KYC answers follow Airtel's envelope ({"data": {...}, "status": {...}}) and
flag barred wallets through ``data.is_barred``. Settlement is reported
through the callback endpoint with status code "TS" / "TF".
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


_MOCK_SUBSCRIBERS: Dict[str, Dict[str, Any]] = {
    "971938765": {"first_name": "Chimweso", "last_name": "Mukoko", "is_barred": False, "account_status": "Y"},
    "978980797": {"first_name": "Niza", "last_name": "Tembo", "is_barred": False, "account_status": "Y"},
    "970000001": {"first_name": "Barred", "last_name": "Wallet", "is_barred": True, "account_status": "N"},
}


class AirtelMockClient(CoreBankingClient):
    """
    Mock Airtel Money client.

    Parameters
    ----------
    fail_disbursements / fail_collections / fail_refunds : bool
        Raise CBSError from the matching call. Default False.
    """

    def __init__(
        self,
        fail_disbursements: bool = False,
        fail_collections: bool = False,
        fail_refunds: bool = False,
        subscribers: Optional[Dict[str, Dict[str, Any]]] = None,
    ):
        self._fail_disbursements = fail_disbursements
        self._fail_collections = fail_collections
        self._fail_refunds = fail_refunds
        self._subscribers = dict(subscribers if subscribers is not None else _MOCK_SUBSCRIBERS)

        self._transactions: Dict[str, TransactionStatus] = {}
        self.disbursements: list = []
        self.collections: list = []
        self.refunds: list = []

        logger.info("[AIRTEL MOCK] Client initialised")

    @property
    def provider(self) -> Provider:
        return Provider.AIRTEL

    def _new_airtel_money_id(self) -> str:
        return f"AM{uuid.uuid4().hex[:10].upper()}"

    async def lookup_identity(self, msisdn: str) -> KycResult:
        data = self._subscribers.get(msisdn)
        if data is None:
            logger.warning("[AIRTEL MOCK] Subscriber not found msisdn=%s", msisdn)
            raw = {"data": {}, "status": {"code": "404", "message": "not found", "success": False}}
            return KycResult(msisdn=msisdn, found=False, status_code=404, raw=raw)

        raw = {"data": {"msisdn": msisdn, **data}, "status": {"code": "200", "message": "success", "success": True}}
        return KycResult(
            msisdn=msisdn,
            first_name=data.get("first_name", ""),
            last_name=data.get("last_name", ""),
            is_barred=bool(data.get("is_barred")),
            account_status=str(data.get("account_status", "")),
            status_code=200,
            raw=raw,
        )

    async def disburse(self, request: DisbursementRequest) -> CBSAck:
        errors = validate_money_movement(request)
        if errors:
            raise CBSError(f"[AIRTEL MOCK] Invalid disbursement: {'; '.join(errors)}")
        if self._fail_disbursements:
            raise CBSError(f"[AIRTEL MOCK] Disbursement {request.reference} failed (DP00800001006)")

        self.disbursements.append(request)
        money_id = self._new_airtel_money_id()
        self._transactions[money_id] = TransactionStatus.SUCCESSFUL
        logger.info("[AIRTEL MOCK] B2C %s %s to %s ref=%s", request.amount, request.currency,
                    request.msisdn, request.reference)
        return CBSAck(reference=request.reference, cbs_reference=money_id, status=TransactionStatus.SUCCESSFUL)

    async def collect(self, request: CollectionRequest) -> CBSAck:
        errors = validate_money_movement(request)
        if errors:
            raise CBSError(f"[AIRTEL MOCK] Invalid collection: {'; '.join(errors)}")
        if self._fail_collections:
            raise CBSError(f"[AIRTEL MOCK] USSD push for {request.reference} failed")

        self.collections.append(request)
        money_id = self._new_airtel_money_id()
        self._transactions[money_id] = TransactionStatus.PENDING
        logger.info("[AIRTEL MOCK] USSD push %s %s to %s ref=%s", request.amount, request.currency,
                    request.msisdn, request.reference)
        return CBSAck(reference=request.reference, cbs_reference=money_id, status=TransactionStatus.PENDING)

    async def refund(self, request: RefundRequest) -> CBSAck:
        if self._fail_refunds:
            raise CBSError(f"[AIRTEL MOCK] Refund of {request.reference} failed")
        self.refunds.append(request)
        self._transactions[request.reference] = TransactionStatus.FAILED
        logger.info("[AIRTEL MOCK] Refunded airtel_money_id=%s", request.reference)
        return CBSAck(reference=request.reference, cbs_reference=self._new_airtel_money_id(),
                      status=TransactionStatus.SUCCESSFUL)

    async def enquire_transaction_status(self, transaction_id: str) -> TransactionStatus:
        return self._transactions.get(transaction_id, TransactionStatus.PENDING)
