"""Tests for the operator mock CBS clients."""

import pytest

from src.domain.errors import CBSError
from src.integrations.clients.mocks import AirtelMockClient, MTNMockClient, TNMMockClient
from src.integrations.contracts.interfaces import (
    CollectionRequest,
    DisbursementRequest,
    RefundRequest,
    TransactionStatus,
)
from src.integrations.contracts.payments import validate_money_movement


def test_validate_money_movement_collects_every_problem():
    errors = validate_money_movement(DisbursementRequest(msisdn="", amount="abc", currency="", reference=""))

    assert "reference is required" in errors
    assert "msisdn is required" in errors
    assert "currency is required" in errors
    assert any("not a decimal" in error for error in errors)


def test_validate_money_movement_rejects_non_positive_amounts():
    request = CollectionRequest(msisdn="971938765", amount="0", currency="ZMW", reference="t-1")

    assert validate_money_movement(request) == ["amount must be greater than zero"]


@pytest.mark.asyncio
async def test_airtel_kyc_flags_barred_wallets():
    client = AirtelMockClient()

    barred = await client.lookup_identity("970000001")
    unknown = await client.lookup_identity("979999999")

    assert barred.is_barred is True
    assert barred.raw["status"]["success"] is True
    assert unknown.found is False
    assert unknown.status_code == 404


@pytest.mark.asyncio
async def test_airtel_collection_settles_only_after_refund_or_callback():
    client = AirtelMockClient()

    ack = await client.collect(CollectionRequest(msisdn="971938765", amount="100", currency="ZMW", reference="t-1"))

    assert ack.status == TransactionStatus.PENDING
    assert ack.cbs_reference.startswith("AM")
    assert await client.enquire_transaction_status(ack.cbs_reference) == TransactionStatus.PENDING


@pytest.mark.asyncio
async def test_airtel_failure_flags_raise_cbs_errors():
    client = AirtelMockClient(fail_disbursements=True, fail_refunds=True)

    with pytest.raises(CBSError):
        await client.disburse(DisbursementRequest(msisdn="971938765", amount="10", currency="ZMW", reference="t-1"))
    with pytest.raises(CBSError):
        await client.refund(RefundRequest(reference="AM1"))
    assert client.disbursements == []


@pytest.mark.asyncio
async def test_mtn_unknown_subscriber_is_not_found():
    client = MTNMockClient()

    result = await client.lookup_identity("260969999999")

    assert result.found is False
    assert result.account_status == "NOT FOUND"


@pytest.mark.asyncio
async def test_mtn_enquiry_answers_pending_before_final_status():
    client = MTNMockClient(payment_success_rate=1.0, pending_enquiries=2)
    ack = await client.collect(CollectionRequest(msisdn="260961234567", amount="50", currency="ZMW", reference="t-1"))

    statuses = [await client.enquire_transaction_status(ack.cbs_reference) for _ in range(3)]

    assert statuses == [TransactionStatus.PENDING, TransactionStatus.PENDING, TransactionStatus.SUCCESSFUL]


@pytest.mark.asyncio
async def test_mtn_collection_can_fail():
    client = MTNMockClient(payment_success_rate=0.0)
    ack = await client.collect(CollectionRequest(msisdn="260961234567", amount="50", currency="ZMW", reference="t-1"))

    assert await client.enquire_transaction_status(ack.cbs_reference) == TransactionStatus.FAILED


@pytest.mark.asyncio
async def test_mtn_rejects_invalid_disbursement():
    client = MTNMockClient()

    with pytest.raises(CBSError):
        await client.disburse(DisbursementRequest(msisdn="260961234567", amount="-5", currency="ZMW", reference="t-1"))


@pytest.mark.asyncio
async def test_tnm_kyc_reads_message():
    client = TNMMockClient()

    known = await client.lookup_identity("265881234567")
    unknown = await client.lookup_identity("265880000000")

    assert known.display_name == "Chikondi Banda"
    assert known.raw["message"] == "Completed successfully"
    assert unknown.found is False
    assert unknown.account_status == "FAILED"


@pytest.mark.asyncio
async def test_tnm_disbursement_records_receipt():
    client = TNMMockClient()

    ack = await client.disburse(DisbursementRequest(msisdn="265881234567", amount="700", currency="MWK", reference="t-1"))

    assert ack.cbs_reference.startswith("TNM")
    assert client.disbursements[0].amount == "700"
    assert await client.enquire_transaction_status(ack.cbs_reference) == TransactionStatus.SUCCESSFUL
