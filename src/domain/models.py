"""
Interoperability message models.

Shapes exchanged with the SDK scheme adapter (inbound quote / transfer
requests, outbound transfer responses) and with the payer DFSP (send-money).
All models accept either camelCase wire names or snake_case attribute names
and serialize back to camelCase.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Annotated, Any, Dict, List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# Mojaloop amounts carry at most 18 integer digits.
MAX_AMOUNT_DIGITS = 18


def _check_decimal_string(value: str) -> str:
    value = value.strip()
    try:
        parsed = Decimal(value)
    except InvalidOperation as exc:
        raise ValueError(f"{value!r} is not a decimal amount") from exc
    if not parsed.is_finite():
        raise ValueError(f"{value!r} is not a finite amount")
    if parsed < 0:
        raise ValueError(f"{value!r} is a negative amount")
    if parsed.adjusted() >= MAX_AMOUNT_DIGITS:
        raise ValueError(f"{value!r} exceeds {MAX_AMOUNT_DIGITS} integer digits")
    return value


# Monetary values travel as decimal strings and are never parsed as floats.
Money = Annotated[str, AfterValidator(_check_decimal_string)]


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class AmountType(str, Enum):
    SEND = "SEND"
    RECEIVE = "RECEIVE"


class PartyType(str, Enum):
    CONSUMER = "CONSUMER"
    AGENT = "AGENT"
    BUSINESS = "BUSINESS"
    DEVICE = "DEVICE"


class ExtensionEntry(WireModel):
    key: str
    value: str


class PartyId(WireModel):
    id_type: str
    id_value: str
    fsp_id: Optional[str] = None
    extension_list: Optional[List[ExtensionEntry]] = None


# ---------------------------------------------------------------------------
# Parties
# ---------------------------------------------------------------------------


class Party(WireModel):
    id_type: str
    id_value: str
    type: PartyType = PartyType.CONSUMER
    display_name: str = ""
    first_name: str = ""
    middle_name: str = ""
    last_name: str = ""
    kyc_information: str = ""
    extension_list: List[ExtensionEntry] = Field(default_factory=list)
    supported_currencies: List[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Inbound quotes
# ---------------------------------------------------------------------------


class QuoteRequest(WireModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    quote_id: str
    transaction_id: str
    to: PartyId
    from_: PartyId = Field(alias="from")
    amount_type: AmountType
    amount: Money
    currency: str
    transaction_type: str = "TRANSFER"
    note: Optional[str] = None
    extension_list: Optional[List[ExtensionEntry]] = None


class QuoteResponse(WireModel):
    quote_id: str
    transaction_id: str
    transfer_amount: Money
    transfer_amount_currency: str
    payee_receive_amount: Money
    payee_receive_amount_currency: str
    payee_fsp_fee_amount: Money
    payee_fsp_fee_amount_currency: str
    payee_fsp_commission_amount: Money
    payee_fsp_commission_amount_currency: str
    expiration: str
    extension_list: List[ExtensionEntry] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Inbound transfers
# ---------------------------------------------------------------------------


class TransferQuote(WireModel):
    quote_id: Optional[str] = None
    transaction_id: Optional[str] = None
    transfer_amount: Money
    transfer_amount_currency: Optional[str] = None
    payee_fsp_commission_amount: Optional[Money] = None
    payee_fsp_fee_amount: Optional[Money] = None
    payee_receive_amount: Optional[Money] = None
    expiration: Optional[str] = None


class TransferRequest(WireModel):
    transfer_id: str
    to: PartyId
    from_: PartyId = Field(alias="from")
    amount_type: AmountType
    amount: Money
    currency: str
    transaction_type: str = "TRANSFER"
    quote: TransferQuote
    note: Optional[str] = None


class TransferState(str, Enum):
    RECEIVED = "RECEIVED"
    RESERVED = "RESERVED"
    COMMITTED = "COMMITTED"
    ABORTED = "ABORTED"


class TransferResponse(WireModel):
    completed_timestamp: str
    home_transaction_id: str
    transfer_state: TransferState = TransferState.RESERVED


class MoneyAmount(WireModel):
    amount: Money
    currency: str


class PartyIdInfo(WireModel):
    party_id_type: str
    party_identifier: str


class QuoteRequestParty(WireModel):
    party_id_info: PartyIdInfo


class PatchQuoteRequestBody(WireModel):
    transaction_id: str
    payee: QuoteRequestParty
    amount: MoneyAmount
    note: Optional[str] = None


class PatchQuoteRequest(WireModel):
    body: PatchQuoteRequestBody


class TransferPatchNotification(WireModel):
    current_state: str
    direction: Optional[str] = None
    final_notification: Optional[Dict[str, Any]] = None
    quote_request: Optional[PatchQuoteRequest] = None


# ---------------------------------------------------------------------------
# Outbound transfers (scheme adapter)
# ---------------------------------------------------------------------------


class OutboundParty(WireModel):
    id_type: str
    id_value: str
    fsp_id: Optional[str] = None
    display_name: Optional[str] = None
    first_name: Optional[str] = None
    middle_name: Optional[str] = None
    last_name: Optional[str] = None
    date_of_birth: Optional[str] = None
    merchant_classification_code: Optional[str] = None
    extension_list: Optional[List[ExtensionEntry]] = None
    supported_currencies: Optional[List[str]] = None


class OutboundTransferRequest(WireModel):
    home_transaction_id: str
    from_: OutboundParty = Field(alias="from")
    to: OutboundParty
    amount_type: AmountType
    currency: str
    amount: Money
    transaction_type: str = "TRANSFER"
    note: Optional[str] = None


class ConversionTerms(WireModel):
    source_amount: MoneyAmount
    target_amount: MoneyAmount


class FxQuotesResponseBody(WireModel):
    conversion_terms: ConversionTerms


class FxQuotesResponse(WireModel):
    body: FxQuotesResponseBody


class QuoteResponseBody(WireModel):
    transfer_amount: MoneyAmount
    payee_receive_amount: Optional[MoneyAmount] = None
    payee_fsp_fee: Optional[MoneyAmount] = None
    payee_fsp_commission: Optional[MoneyAmount] = None
    expiration: Optional[str] = None


class OutboundQuoteResponse(WireModel):
    body: QuoteResponseBody


class LookupParty(WireModel):
    name: Optional[str] = None


class LookupPartyBody(WireModel):
    party: LookupParty


class GetPartiesResponse(WireModel):
    body: LookupPartyBody


class OutboundTransferResponse(WireModel):
    transfer_id: Optional[str] = None
    home_transaction_id: Optional[str] = None
    from_: OutboundParty = Field(alias="from")
    to: OutboundParty
    amount_type: AmountType
    currency: str
    amount: Money
    current_state: str
    get_parties_response: Optional[GetPartiesResponse] = None
    quote_response: Optional[OutboundQuoteResponse] = None
    fx_quotes_response: Optional[FxQuotesResponse] = None

    @property
    def conversion_terms(self) -> Optional[ConversionTerms]:
        if self.fx_quotes_response is None:
            return None
        return self.fx_quotes_response.body.conversion_terms


class TransferContinuation(WireModel):
    accept_conversion: Optional[bool] = None
    accept_quote: Optional[bool] = None


# ---------------------------------------------------------------------------
# Payer DFSP (send money)
# ---------------------------------------------------------------------------


class DateAndPlaceOfBirth(WireModel):
    birth_dt: str
    prvc_of_birth: Optional[str] = None
    city_of_birth: Optional[str] = None
    ctry_of_birth: Optional[str] = None


class SendMoneyRequest(WireModel):
    payer_id: str
    payer_date_and_place_of_birth: Optional[DateAndPlaceOfBirth] = None
    payee_id: str
    payee_id_type: str
    send_amount: Money
    send_currency: str
    transaction_type: str = "TRANSFER"
    amount_type: AmountType = AmountType.SEND
    note: Optional[str] = None


class PayeeDetails(WireModel):
    id_type: str
    id_value: str
    fsp_id: Optional[str] = None
    display_name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    date_of_birth: Optional[str] = None


class SendMoneyResponse(WireModel):
    payee_details: PayeeDetails
    receive_amount: Optional[str] = None
    receive_currency: Optional[str] = None
    fees: Optional[str] = None
    fee_currency: Optional[str] = None
    transaction_id: str
    home_transaction_id: str


class SendMoneyConfirmation(WireModel):
    accept_quote: bool
    msisdn: str
    amount: Money
    narration: Optional[str] = None


class SettlementStatus(str, Enum):
    PENDING = "PENDING"
    SETTLED = "SETTLED"
    REJECTED = "REJECTED"


class SendMoneyConfirmationResult(WireModel):
    transfer_id: str
    status: SettlementStatus
    cbs_reference: Optional[str] = None


class CallbackPayload(WireModel):
    transaction_id: str
    status_code: str
    cbs_reference: Optional[str] = None
    message: Optional[str] = None
