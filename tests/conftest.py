"""Pytest fixtures for connector tests."""

from decimal import Decimal
from typing import Dict, List, Optional

import pytest

from src.database.redis import PendingTransferStore
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
from src.integrations.clients.mocks import MockSchemeAdapterClient
from src.utils.config_loader import FeePolicy, OperatorProfile


class RecordingCBSClient(CoreBankingClient):
    """CBS double that records every call and can be told to fail."""

    def __init__(
        self,
        wallets: Optional[Dict[str, KycResult]] = None,
        disburse_error: Optional[Exception] = None,
        refund_error: Optional[Exception] = None,
        statuses: Optional[List[TransactionStatus]] = None,
    ):
        self.wallets = wallets or {}
        self.disburse_error = disburse_error
        self.refund_error = refund_error
        self.statuses = list(statuses or [])
        self.calls: List[tuple] = []

    @property
    def provider(self) -> Provider:
        return Provider.AIRTEL

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)

    async def lookup_identity(self, msisdn: str) -> KycResult:
        self.calls.append(("lookup_identity", msisdn))
        return self.wallets.get(msisdn, KycResult(msisdn=msisdn, found=False, status_code=404))

    async def disburse(self, request: DisbursementRequest) -> CBSAck:
        self.calls.append(("disburse", request))
        if self.disburse_error is not None:
            raise self.disburse_error
        return CBSAck(reference=request.reference, cbs_reference="CBS-D-1", status=TransactionStatus.SUCCESSFUL)

    async def collect(self, request: CollectionRequest) -> CBSAck:
        self.calls.append(("collect", request))
        return CBSAck(reference=request.reference, cbs_reference="CBS-C-1", status=TransactionStatus.PENDING)

    async def refund(self, request: RefundRequest) -> CBSAck:
        self.calls.append(("refund", request))
        if self.refund_error is not None:
            raise self.refund_error
        return CBSAck(reference=request.reference, cbs_reference="CBS-R-1", status=TransactionStatus.SUCCESSFUL)

    async def enquire_transaction_status(self, transaction_id: str) -> TransactionStatus:
        self.calls.append(("enquire_transaction_status", transaction_id))
        if self.statuses:
            return self.statuses.pop(0)
        return TransactionStatus.PENDING


@pytest.fixture
def airtel_profile():
    return OperatorProfile(
        name="airtel",
        currency="ZMW",
        country="ZM",
        fsp_id="airtelzambia",
        lei="AIRTELZM0000000001",
        service_charge_percentage=Decimal("5"),
        expiration_hours=24,
        fee_policy=FeePolicy.PASS_THROUGH,
        barred_account_statuses=["BARRED"],
        callback_success_codes=["TS"],
        settlement_mode="callback",
    )


@pytest.fixture
def mtn_profile():
    return OperatorProfile(
        name="mtn",
        currency="ZMW",
        country="ZM",
        fsp_id="mtnzambia",
        service_charge_percentage=Decimal("2.5"),
        expiration_hours=1,
        fee_policy=FeePolicy.ADD_FEE,
        barred_account_statuses=["NOT FOUND"],
        callback_success_codes=["SUCCESSFUL"],
        settlement_mode="poll",
        transaction_enquiry_wait_seconds=5,
        transaction_enquiry_max_attempts=3,
    )


@pytest.fixture
def wallets():
    return {
        "971938765": KycResult(msisdn="971938765", first_name="Chimweso", last_name="Mukoko", account_status="Y"),
        "970000001": KycResult(msisdn="970000001", first_name="Barred", last_name="Wallet", is_barred=True),
    }


@pytest.fixture
def cbs(wallets):
    return RecordingCBSClient(wallets=wallets)


@pytest.fixture
def sdk():
    return MockSchemeAdapterClient(payee_name="Jane Payee")


@pytest.fixture
def store():
    return PendingTransferStore()


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def fake_sleep(sleeps):
    async def _sleep(seconds):
        sleeps.append(seconds)

    return _sleep
