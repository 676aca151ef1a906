"""Tests for inbound quote handling."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from src.domain.errors import (
    AccountBarredError,
    NotEnoughInformationError,
    PayeeBlockedError,
    UnsupportedCurrencyError,
    UnsupportedIdTypeError,
)
from src.domain.models import QuoteRequest
from src.domain.party_resolver import PartyResolver
from src.domain.quote_service import QuoteService, to_json_timestamp
from src.integrations.contracts.interfaces import KycResult
from src.utils.config_loader import FeePolicy

NOW = datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)


def fixed_clock():
    return NOW


def _quote_request(**overrides):
    data = {
        "quoteId": "q-1",
        "transactionId": "tx-1",
        "to": {"idType": "MSISDN", "idValue": "971938765", "extensionList": [{"key": "payee", "value": "1"}]},
        "from": {"idType": "MSISDN", "idValue": "256700000001", "extensionList": [{"key": "payer", "value": "2"}]},
        "amountType": "SEND",
        "amount": "100",
        "currency": "ZMW",
        "extensionList": [{"key": "request", "value": "0"}],
    }
    data.update(overrides)
    return QuoteRequest.model_validate(data)


@pytest.fixture
def quote_service(cbs, airtel_profile):
    return QuoteService(PartyResolver(cbs, airtel_profile), airtel_profile, clock=fixed_clock)


@pytest.mark.asyncio
async def test_quote_fee_is_five_for_hundred_at_five_percent(quote_service):
    response = await quote_service.quote(_quote_request())

    assert response.payee_fsp_fee_amount == "5"
    assert response.payee_fsp_commission_amount == "0"
    assert response.transfer_amount == "100"
    assert response.payee_receive_amount == "100"
    assert response.transfer_amount_currency == "ZMW"


@pytest.mark.asyncio
async def test_add_fee_policy_adds_fee_to_transfer_amount(cbs, airtel_profile):
    profile = airtel_profile.model_copy(update={"fee_policy": FeePolicy.ADD_FEE})
    service = QuoteService(PartyResolver(cbs, profile), profile, clock=fixed_clock)

    response = await service.quote(_quote_request())

    assert response.transfer_amount == "105"


@pytest.mark.asyncio
async def test_expiration_is_now_plus_configured_hours(quote_service):
    response = await quote_service.quote(_quote_request())

    assert response.expiration == to_json_timestamp(NOW + timedelta(hours=24))
    assert response.expiration == "2024-05-02T10:00:00.000Z"


@pytest.mark.asyncio
async def test_expiration_is_in_the_future_with_real_clock(cbs, airtel_profile):
    service = QuoteService(PartyResolver(cbs, airtel_profile), airtel_profile)
    before = datetime.now(timezone.utc)

    response = await service.quote(_quote_request())

    expires = datetime.fromisoformat(response.expiration.replace("Z", "+00:00"))
    assert expires > before


@pytest.mark.asyncio
async def test_identical_requests_give_identical_amounts(quote_service):
    request = _quote_request()

    first = await quote_service.quote(request)
    second = await quote_service.quote(request)

    assert first.to_wire() == second.to_wire()


@pytest.mark.asyncio
async def test_extension_lists_are_echoed(quote_service):
    response = await quote_service.quote(_quote_request())

    assert [entry.key for entry in response.extension_list] == ["request", "payer", "payee"]


@pytest.mark.asyncio
async def test_missing_extension_lists_only_warn(quote_service):
    request = _quote_request(
        to={"idType": "MSISDN", "idValue": "971938765"},
        **{"from": {"idType": "MSISDN", "idValue": "256700000001"}},
        extensionList=None,
    )

    response = await quote_service.quote(request)

    assert response.extension_list == []


@pytest.mark.asyncio
async def test_wrong_currency_and_id_type_are_rejected(quote_service, cbs):
    with pytest.raises(UnsupportedCurrencyError):
        await quote_service.quote(_quote_request(currency="USD"))
    with pytest.raises(UnsupportedIdTypeError):
        await quote_service.quote(_quote_request(to={"idType": "IBAN", "idValue": "X"}))
    assert cbs.calls == []


@pytest.mark.asyncio
async def test_barred_payee_is_blocked(quote_service):
    with pytest.raises(PayeeBlockedError):
        await quote_service.quote(_quote_request(to={"idType": "MSISDN", "idValue": "970000001"}))


@pytest.mark.asyncio
async def test_payee_barred_between_lookups_is_blocked(cbs, airtel_profile):
    class FlippingWallets(dict):
        def get(self, key, default=None):
            barred = cbs.count("lookup_identity") > 1
            return KycResult(msisdn=key, first_name="Flip", is_barred=barred)

    cbs.wallets = FlippingWallets()
    service = QuoteService(PartyResolver(cbs, airtel_profile), airtel_profile, clock=fixed_clock)

    with pytest.raises(PayeeBlockedError) as excinfo:
        await service.quote(_quote_request())
    assert isinstance(excinfo.value.__cause__, AccountBarredError)
    assert cbs.count("lookup_identity") == 2


@pytest.mark.asyncio
async def test_out_of_range_amount_is_not_enough_information(quote_service):
    request = _quote_request().model_copy(update={"amount": "1e30"})

    with pytest.raises(NotEnoughInformationError):
        await quote_service.quote(request)


def test_negative_and_oversized_amounts_fail_validation():
    with pytest.raises(ValidationError):
        _quote_request(amount="-5")
    with pytest.raises(ValidationError):
        _quote_request(amount="1e30")
