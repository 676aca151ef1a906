"""Tests for the scheme adapter HTTP client and response normalisation."""

import json

import httpx
import pytest

from src.domain.errors import SchemeAdapterError
from src.domain.models import AmountType, OutboundParty, OutboundTransferRequest, TransferContinuation
from src.integrations.clients.real_http.scheme_adapter import RealSchemeAdapterClient
from src.integrations.policy.response_wrappers import normalize_outbound_transfer_response


def _transfer_body(state="WAITING_FOR_QUOTE_ACCEPTANCE", **extra):
    body = {
        "transferId": "sdk-1",
        "homeTransactionId": "home-1",
        "from": {"idType": "MSISDN", "idValue": "971938765"},
        "to": {"idType": "MSISDN", "idValue": "256700000002", "fspId": "payeefsp"},
        "amountType": "SEND",
        "currency": "ZMW",
        "amount": "250",
        "currentState": state,
        "quoteResponse": {
            "body": {
                "transferAmount": {"amount": "250", "currency": "ZMW"},
                "payeeReceiveAmount": {"amount": "250", "currency": "ZMW"},
                "payeeFspFee": {"amount": "0", "currency": "ZMW"},
                "payeeFspCommission": {"amount": "0", "currency": "ZMW"},
            }
        },
    }
    body.update(extra)
    return body


def _request():
    return OutboundTransferRequest(
        home_transaction_id="home-1",
        from_=OutboundParty(id_type="MSISDN", id_value="971938765"),
        to=OutboundParty(id_type="MSISDN", id_value="256700000002"),
        amount_type=AmountType.SEND,
        currency="ZMW",
        amount="250",
    )


@pytest.mark.asyncio
async def test_initiate_posts_wire_payload():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=_transfer_body())

    client = RealSchemeAdapterClient("http://sdk:4001/", transport=httpx.MockTransport(handler))
    response = await client.initiate_outbound_transfer(_request())

    assert response.transfer_id == "sdk-1"
    assert response.current_state == "WAITING_FOR_QUOTE_ACCEPTANCE"
    assert response.quote_response.body.transfer_amount.amount == "250"
    assert seen[0].method == "POST"
    assert str(seen[0].url) == "http://sdk:4001/transfers"
    sent = json.loads(seen[0].content)
    assert sent["homeTransactionId"] == "home-1"
    assert sent["from"]["idValue"] == "971938765"


@pytest.mark.asyncio
async def test_continue_puts_acceptance():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=_transfer_body(state="COMPLETED"))

    client = RealSchemeAdapterClient("http://sdk:4001", transport=httpx.MockTransport(handler))
    response = await client.continue_outbound_transfer("sdk-1", TransferContinuation(accept_quote=True))

    assert response.current_state == "COMPLETED"
    assert seen[0].method == "PUT"
    assert seen[0].url.path == "/transfers/sdk-1"
    assert json.loads(seen[0].content) == {"acceptQuote": True}


@pytest.mark.asyncio
async def test_http_error_becomes_scheme_adapter_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"statusCode": "2001", "message": "boom"})

    client = RealSchemeAdapterClient("http://sdk:4001", transport=httpx.MockTransport(handler))

    with pytest.raises(SchemeAdapterError) as excinfo:
        await client.initiate_outbound_transfer(_request())

    assert "HTTP 500" in excinfo.value.message
    assert excinfo.value.payload == {"statusCode": "2001", "message": "boom"}


@pytest.mark.asyncio
async def test_unreachable_adapter_becomes_scheme_adapter_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = RealSchemeAdapterClient("http://sdk:4001", transport=httpx.MockTransport(handler))

    with pytest.raises(SchemeAdapterError):
        await client.initiate_outbound_transfer(_request())


@pytest.mark.asyncio
async def test_missing_base_url(monkeypatch):
    monkeypatch.delenv("SDK_BASE_URL", raising=False)
    client = RealSchemeAdapterClient()

    with pytest.raises(SchemeAdapterError):
        await client.initiate_outbound_transfer(_request())


def test_error_occurred_state_surfaces_last_error():
    body = _transfer_body(state="ERROR_OCCURRED", lastError={"msg": "Payee FSP timed out"})

    with pytest.raises(SchemeAdapterError) as excinfo:
        normalize_outbound_transfer_response(body)

    assert excinfo.value.message == "Payee FSP timed out"


def test_unknown_state_is_rejected():
    with pytest.raises(SchemeAdapterError):
        normalize_outbound_transfer_response(_transfer_body(state="SOMETHING_ELSE"))


def test_state_is_normalised_and_snake_case_accepted():
    body = _transfer_body()
    del body["currentState"]
    body["current_state"] = " waiting_for_conversion_acceptance "

    response = normalize_outbound_transfer_response(body)

    assert response.current_state == "WAITING_FOR_CONVERSION_ACCEPTANCE"


def test_incomplete_response_fails_validation():
    body = _transfer_body()
    del body["to"]

    with pytest.raises(SchemeAdapterError):
        normalize_outbound_transfer_response(body)
