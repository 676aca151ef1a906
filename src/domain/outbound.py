"""
Payer-side send-money orchestration against the scheme adapter.

    INITIATED -> WAITING_FOR_CONVERSION_ACCEPTANCE -> (accept) -> QUOTE_VALIDATED -> COMPLETED
                                                   -> (reject) -> FAILED
    INITIATED -> QUOTE_VALIDATED -> COMPLETED
    any quote check failure -> FAILED

Calls are issued strictly in sequence: payer KYC lookup, initiate transfer,
then at most one conversion accept/reject. A rejected conversion ends the run.
"""

from __future__ import annotations

import logging
import uuid
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from src.domain.amounts import ZERO, amounts_equal, to_decimal
from src.domain.errors import (
    ConnectorError,
    InvalidConversionQuoteError,
    InvalidReturnedQuoteError,
    NoQuoteReturnedError,
    QuoteNotAcceptedError,
    QuoteValidationError,
    TransferIdNotDefinedError,
    UnsupportedCurrencyError,
)
from src.domain.models import (
    AmountType,
    ConversionTerms,
    ExtensionEntry,
    OutboundParty,
    OutboundQuoteResponse,
    OutboundTransferRequest,
    OutboundTransferResponse,
    PayeeDetails,
    SendMoneyConfirmation,
    SendMoneyConfirmationResult,
    SendMoneyRequest,
    SendMoneyResponse,
    SettlementStatus,
    TransferContinuation,
)
from src.domain.party_resolver import PartyResolver
from src.domain.settlement import SettlementCallbackHandler
from src.integrations.contracts.interfaces import CollectionRequest, CoreBankingClient, SchemeAdapterClient
from src.utils.config_loader import OperatorProfile

logger = logging.getLogger(__name__)

WAITING_FOR_CONVERSION_ACCEPTANCE = "WAITING_FOR_CONVERSION_ACCEPTANCE"


class OutboundState(str, Enum):
    INITIATED = "INITIATED"
    WAITING_FOR_CONVERSION_ACCEPTANCE = "WAITING_FOR_CONVERSION_ACCEPTANCE"
    QUOTE_VALIDATED = "QUOTE_VALIDATED"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class OutboundTransferState(BaseModel):
    """Per-run record; only a COMPLETED run is kept, as the pending transfer."""

    home_transaction_id: str
    current_state: OutboundState = OutboundState.INITIATED
    payer_id: str
    amount: str
    currency: str
    amount_type: AmountType
    transfer_id: Optional[str] = None
    conversion_terms: Optional[ConversionTerms] = None
    conversion_accepted: Optional[bool] = None
    quote_response: Optional[OutboundQuoteResponse] = None
    history: List[OutboundState] = Field(default_factory=lambda: [OutboundState.INITIATED])

    def transition(self, state: OutboundState) -> None:
        logger.debug("Outbound %s: %s -> %s", self.home_transaction_id, self.current_state.value, state.value)
        self.current_state = state
        self.history.append(state)


class OutboundTransferOrchestrator:
    def __init__(
        self,
        sdk_client: SchemeAdapterClient,
        cbs_client: CoreBankingClient,
        party_resolver: PartyResolver,
        settlement: SettlementCallbackHandler,
        profile: OperatorProfile,
        pending_store,
        pending_ttl_seconds: int = 3600,
    ):
        self.sdk_client = sdk_client
        self.cbs_client = cbs_client
        self.party_resolver = party_resolver
        self.settlement = settlement
        self.profile = profile
        self.pending_store = pending_store
        self.pending_ttl_seconds = pending_ttl_seconds

    # ------------------------------------------------------------------
    # Send money
    # ------------------------------------------------------------------

    async def send_money(self, request: SendMoneyRequest) -> SendMoneyResponse:
        logger.info("Send money from %s to %s %s", request.payer_id, request.payee_id_type, request.payee_id)
        if request.send_currency != self.profile.currency:
            raise UnsupportedCurrencyError(request.send_currency)

        transfer_request = await self._outbound_transfer_request(request)
        state = OutboundTransferState(
            home_transaction_id=transfer_request.home_transaction_id,
            payer_id=request.payer_id,
            amount=request.send_amount,
            currency=request.send_currency,
            amount_type=request.amount_type,
        )

        try:
            response = await self.sdk_client.initiate_outbound_transfer(transfer_request)
            state.transfer_id = response.transfer_id

            if response.current_state == WAITING_FOR_CONVERSION_ACCEPTANCE:
                state.transition(OutboundState.WAITING_FOR_CONVERSION_ACCEPTANCE)
                response = await self._respond_to_conversion_terms(state, response)

            if not self.validate_returned_quote(response):
                raise InvalidReturnedQuoteError()

            state.quote_response = response.quote_response
            state.transfer_id = response.transfer_id or state.transfer_id
            state.transition(OutboundState.QUOTE_VALIDATED)
            send_money_response = self._send_money_response(response, state)
        except ConnectorError:
            state.transition(OutboundState.FAILED)
            raise

        state.transition(OutboundState.COMPLETED)
        self.pending_store.save(
            send_money_response.transaction_id,
            state.model_dump(mode="json"),
            ttl=self.pending_ttl_seconds,
        )
        return send_money_response

    async def _respond_to_conversion_terms(
        self, state: OutboundTransferState, response: OutboundTransferResponse
    ) -> OutboundTransferResponse:
        if not response.transfer_id:
            raise TransferIdNotDefinedError("Transfer id not defined in transfer response")

        state.conversion_terms = response.conversion_terms
        if not self.validate_conversion_terms(response):
            state.conversion_accepted = False
            await self.sdk_client.continue_outbound_transfer(
                response.transfer_id, TransferContinuation(accept_conversion=False)
            )
            raise InvalidConversionQuoteError()

        state.conversion_accepted = True
        return await self.sdk_client.continue_outbound_transfer(
            response.transfer_id, TransferContinuation(accept_conversion=True)
        )

    async def _outbound_transfer_request(self, request: SendMoneyRequest) -> OutboundTransferRequest:
        resolved = await self.party_resolver.get_party(request.payer_id, self.profile.supported_id_type)
        payer = resolved.party
        return OutboundTransferRequest(
            home_transaction_id=str(uuid.uuid4()),
            from_=OutboundParty(
                id_type=self.profile.supported_id_type,
                id_value=request.payer_id,
                fsp_id=self.profile.fsp_id,
                display_name=payer.display_name,
                first_name=payer.first_name,
                middle_name=payer.middle_name or payer.first_name,
                last_name=payer.last_name,
                merchant_classification_code=self.profile.merchant_classification_code,
                extension_list=self._payer_extension_list(request),
                supported_currencies=[self.profile.currency],
            ),
            to=OutboundParty(id_type=request.payee_id_type, id_value=request.payee_id),
            amount_type=request.amount_type,
            currency=request.send_currency,
            amount=request.send_amount,
            transaction_type=request.transaction_type,
            note=request.note,
        )

    @staticmethod
    def _payer_extension_list(request: SendMoneyRequest) -> Optional[List[ExtensionEntry]]:
        birth = request.payer_date_and_place_of_birth
        if birth is None:
            return None
        prefix = "CdtTrfTxInf.Dbtr.PrvtId.DtAndPlcOfBirth"
        entries = [
            ExtensionEntry(key=f"{prefix}.BirthDt", value=birth.birth_dt),
            ExtensionEntry(key=f"{prefix}.PrvcOfBirth", value=birth.prvc_of_birth or "Not defined"),
        ]
        if birth.city_of_birth:
            entries.append(ExtensionEntry(key=f"{prefix}.CityOfBirth", value=birth.city_of_birth))
        if birth.ctry_of_birth:
            entries.append(ExtensionEntry(key=f"{prefix}.CtryOfBirth", value=birth.ctry_of_birth))
        return entries

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate_conversion_terms(self, response: OutboundTransferResponse) -> bool:
        logger.info("Validating conversion terms for transfer %s amount %s", response.transfer_id, response.amount)
        terms = response.conversion_terms
        if terms is None:
            return False

        result = terms.source_amount.currency == self.profile.currency
        quoted = response.quote_response.body if response.quote_response else None

        if response.amount_type == AmountType.SEND:
            if not amounts_equal(response.amount, terms.source_amount.amount):
                result = False
            if response.to.supported_currencies is None:
                raise QuoteValidationError("Payee supported currencies not defined")
            if quoted is None or quoted.transfer_amount.currency not in response.to.supported_currencies:
                result = False
            if response.currency != terms.source_amount.currency:
                result = False
        else:
            if not amounts_equal(response.amount, terms.target_amount.amount):
                result = False
            if quoted is None or response.currency != quoted.transfer_amount.currency:
                result = False
            if response.from_.supported_currencies is None:
                raise QuoteValidationError("Payer supported currencies not defined")
            if terms.target_amount.currency not in response.from_.supported_currencies:
                result = False
        return result

    def validate_returned_quote(self, response: OutboundTransferResponse) -> bool:
        logger.info("Validating returned quote for transfer %s amount %s", response.transfer_id, response.amount)
        if response.quote_response is None:
            raise NoQuoteReturnedError()

        terms = response.conversion_terms
        result = True
        if terms is not None and not self.validate_conversion_terms(response):
            result = False

        quoted = response.quote_response.body
        requested = to_decimal(response.amount)
        transfer_amount = to_decimal(quoted.transfer_amount.amount)
        commission = to_decimal(quoted.payee_fsp_commission.amount if quoted.payee_fsp_commission else None, default=ZERO)
        fee = to_decimal(quoted.payee_fsp_fee.amount if quoted.payee_fsp_fee else None, default=ZERO)

        if response.amount_type == AmountType.SEND:
            if requested != transfer_amount - commission:
                result = False
            if quoted.payee_receive_amount is None:
                raise QuoteValidationError("Payee receive amount not defined")
            if to_decimal(quoted.payee_receive_amount.amount) != transfer_amount - commission:
                result = False
        else:
            if requested != transfer_amount - commission + fee:
                result = False
            if quoted.payee_receive_amount is None or to_decimal(quoted.payee_receive_amount.amount) != transfer_amount:
                result = False

        if terms is not None and to_decimal(terms.target_amount.amount) != transfer_amount:
            result = False
        return result

    # ------------------------------------------------------------------
    # Response mapping
    # ------------------------------------------------------------------

    def _send_money_response(self, response: OutboundTransferResponse, state: OutboundTransferState) -> SendMoneyResponse:
        if not response.transfer_id:
            raise TransferIdNotDefinedError("Transfer id not defined in transfer response")
        logger.info("Send money response for transfer %s", response.transfer_id)

        quoted = response.quote_response.body if response.quote_response else None
        terms = response.conversion_terms
        display_name = None
        if response.get_parties_response is not None:
            display_name = response.get_parties_response.body.party.name

        if terms is not None:
            receive_currency = terms.target_amount.currency
        elif quoted is not None and quoted.payee_receive_amount is not None:
            receive_currency = quoted.payee_receive_amount.currency
        else:
            receive_currency = None

        return SendMoneyResponse(
            payee_details=PayeeDetails(
                id_type=response.to.id_type,
                id_value=response.to.id_value,
                fsp_id=response.to.fsp_id,
                display_name=display_name or response.to.display_name,
                first_name=response.to.first_name,
                last_name=response.to.last_name,
                date_of_birth=response.to.date_of_birth,
            ),
            receive_amount=quoted.payee_receive_amount.amount if quoted and quoted.payee_receive_amount else None,
            receive_currency=receive_currency,
            fees=quoted.payee_fsp_fee.amount if quoted and quoted.payee_fsp_fee else None,
            fee_currency=quoted.payee_fsp_fee.currency if quoted and quoted.payee_fsp_fee else None,
            transaction_id=response.transfer_id,
            home_transaction_id=state.home_transaction_id,
        )

    # ------------------------------------------------------------------
    # Send money confirmation
    # ------------------------------------------------------------------

    async def confirm_send_money(
        self, confirmation: SendMoneyConfirmation, transfer_id: str
    ) -> SendMoneyConfirmationResult:
        """Collect the payer's funds once they accept the quote."""
        logger.info("Confirming send money for %s, transfer %s", confirmation.msisdn, transfer_id)
        if not confirmation.accept_quote:
            raise QuoteNotAcceptedError()

        pending = self.pending_store.get(transfer_id)
        if pending is None:
            raise TransferIdNotDefinedError(f"No pending transfer {transfer_id}")

        if pending.get("cbs_reference"):
            # Already collected: answer with the stored reference, never collect twice.
            logger.warning("Transfer %s already collected (cbs_reference=%s)", transfer_id, pending["cbs_reference"])
            return SendMoneyConfirmationResult(
                transfer_id=transfer_id,
                status=SettlementStatus.PENDING,
                cbs_reference=pending["cbs_reference"],
            )

        ack = await self.cbs_client.collect(
            CollectionRequest(
                msisdn=confirmation.msisdn,
                amount=confirmation.amount,
                currency=self.profile.currency,
                reference=transfer_id,
                narration=confirmation.narration or "",
            )
        )
        self.pending_store.update(
            transfer_id, {"cbs_reference": ack.cbs_reference, "collected_amount": confirmation.amount}
        )

        if self.profile.settlement_mode == "callback":
            return SendMoneyConfirmationResult(
                transfer_id=transfer_id,
                status=SettlementStatus.PENDING,
                cbs_reference=ack.cbs_reference,
            )

        outcome = await self.settlement.await_settlement(
            transfer_id, ack.cbs_reference or ack.reference, cbs_reference=ack.cbs_reference
        )
        return SendMoneyConfirmationResult(
            transfer_id=transfer_id,
            status=SettlementStatus.SETTLED if outcome.accepted and outcome.notified else SettlementStatus.REJECTED,
            cbs_reference=ack.cbs_reference,
        )
