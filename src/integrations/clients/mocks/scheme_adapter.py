"""
Scheme adapter (SDK outbound API): mock client.

Development / test stand-in for the Mojaloop SDK scheme adapter.
Builds a quote for every outbound transfer from the request itself, with
an optional FX leg that stops at WAITING_FOR_CONVERSION_ACCEPTANCE.
"""

import logging
import uuid
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from src.domain.amounts import format_amount, to_decimal
from src.domain.errors import SchemeAdapterError
from src.domain.models import (
    AmountType,
    ConversionTerms,
    FxQuotesResponse,
    FxQuotesResponseBody,
    GetPartiesResponse,
    LookupParty,
    LookupPartyBody,
    MoneyAmount,
    OutboundQuoteResponse,
    OutboundTransferRequest,
    OutboundTransferResponse,
    QuoteResponseBody,
    TransferContinuation,
)
from src.integrations.contracts.interfaces import SchemeAdapterClient

logger = logging.getLogger(__name__)


class MockSchemeAdapterClient(SchemeAdapterClient):
    """
    Parameters
    ----------
    payee_name : str
        Name returned in getPartiesResponse.
    fee / commission : str
        Payee FSP fee and commission placed in the quote. Default "0".
    target_currency / fx_rate
        When target_currency is set the transfer needs a currency conversion.
    target_amount_override : str
        Forces the conversion target amount (to produce bad terms).
    fail_initiate / fail_continue : bool
        Raise SchemeAdapterError from the matching call.
    """

    def __init__(
        self,
        payee_name: str = "Mock Payee",
        fee: str = "0",
        commission: str = "0",
        target_currency: Optional[str] = None,
        fx_rate: str = "1",
        target_amount_override: Optional[str] = None,
        fail_initiate: bool = False,
        fail_continue: bool = False,
    ):
        self.payee_name = payee_name
        self.fee = fee
        self.commission = commission
        self.target_currency = target_currency
        self.fx_rate = fx_rate
        self.target_amount_override = target_amount_override
        self.fail_initiate = fail_initiate
        self.fail_continue = fail_continue

        self._transfers: Dict[str, OutboundTransferResponse] = {}
        self.initiated: List[OutboundTransferRequest] = []
        self.continuations: List[Tuple[str, TransferContinuation]] = []

    async def initiate_outbound_transfer(self, request: OutboundTransferRequest) -> OutboundTransferResponse:
        self.initiated.append(request)
        if self.fail_initiate:
            raise SchemeAdapterError("[SDK MOCK] Outbound transfer request failed")

        transfer_id = str(uuid.uuid4())
        response = self._build_response(transfer_id, request)
        self._transfers[transfer_id] = response
        logger.info("[SDK MOCK] Transfer %s initiated in state %s", transfer_id, response.current_state)
        return response

    async def continue_outbound_transfer(
        self, transfer_id: str, continuation: TransferContinuation
    ) -> OutboundTransferResponse:
        self.continuations.append((transfer_id, continuation))
        if self.fail_continue:
            raise SchemeAdapterError(f"[SDK MOCK] Update of transfer {transfer_id} failed")

        current = self._transfers.get(transfer_id)
        if current is None:
            raise SchemeAdapterError(f"[SDK MOCK] Unknown transfer {transfer_id}", http_status=404)

        if continuation.accept_conversion is not None:
            state = "WAITING_FOR_QUOTE_ACCEPTANCE" if continuation.accept_conversion else "ABORTED"
        elif continuation.accept_quote is not None:
            state = "COMPLETED" if continuation.accept_quote else "ABORTED"
        else:
            state = current.current_state

        updated = current.model_copy(update={"current_state": state})
        self._transfers[transfer_id] = updated
        logger.info("[SDK MOCK] Transfer %s moved to %s", transfer_id, state)
        return updated

    # ------------------------------------------------------------------
    # Response building
    # ------------------------------------------------------------------

    def _build_response(self, transfer_id: str, request: OutboundTransferRequest) -> OutboundTransferResponse:
        amount = to_decimal(request.amount)
        fee = to_decimal(self.fee)
        commission = to_decimal(self.commission)
        quote_currency = self.target_currency or request.currency

        terms = None
        if self.target_currency:
            converted = amount * to_decimal(self.fx_rate)
            target = self.target_amount_override or format_amount(converted)
            terms = ConversionTerms(
                source_amount=MoneyAmount(amount=request.amount, currency=request.currency),
                target_amount=MoneyAmount(amount=target, currency=self.target_currency),
            )
            amount = converted

        if request.amount_type == AmountType.SEND:
            transfer_amount = amount + commission
            receive_amount = amount
        else:
            transfer_amount = amount + commission - fee
            receive_amount = transfer_amount

        quote = QuoteResponseBody(
            transfer_amount=self._money(transfer_amount, quote_currency),
            payee_receive_amount=self._money(receive_amount, quote_currency),
            payee_fsp_fee=self._money(fee, quote_currency),
            payee_fsp_commission=self._money(commission, quote_currency),
        )

        payee = request.to.model_copy(
            update={"fsp_id": request.to.fsp_id or "mockpayeefsp", "supported_currencies": [quote_currency]}
        )
        return OutboundTransferResponse(
            transfer_id=transfer_id,
            home_transaction_id=request.home_transaction_id,
            from_=request.from_,
            to=payee,
            amount_type=request.amount_type,
            currency=request.currency,
            amount=request.amount,
            current_state="WAITING_FOR_CONVERSION_ACCEPTANCE" if terms else "WAITING_FOR_QUOTE_ACCEPTANCE",
            get_parties_response=GetPartiesResponse(body=LookupPartyBody(party=LookupParty(name=self.payee_name))),
            quote_response=OutboundQuoteResponse(body=quote),
            fx_quotes_response=FxQuotesResponse(body=FxQuotesResponseBody(conversion_terms=terms)) if terms else None,
        )

    @staticmethod
    def _money(value: Decimal, currency: str) -> MoneyAmount:
        return MoneyAmount(amount=format_amount(value), currency=currency)
