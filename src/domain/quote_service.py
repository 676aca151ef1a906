"""
Inbound quote handling (payee side).
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, List

from src.domain.amounts import ZERO, compute_fee, format_amount, to_decimal
from src.domain.errors import AccountBarredError, PayeeBlockedError, UnsupportedCurrencyError
from src.domain.models import ExtensionEntry, QuoteRequest, QuoteResponse
from src.domain.party_resolver import PartyResolver
from src.utils.config_loader import FeePolicy, OperatorProfile

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_json_timestamp(value: datetime) -> str:
    """ISO-8601 UTC with millisecond precision, e.g. 2024-05-01T10:00:00.000Z"""
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class QuoteService:
    def __init__(
        self,
        party_resolver: PartyResolver,
        profile: OperatorProfile,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.party_resolver = party_resolver
        self.profile = profile
        self.clock = clock

    async def quote(self, request: QuoteRequest) -> QuoteResponse:
        logger.info("Quote request %s for %s %s", request.quote_id, request.to.id_type, request.to.id_value)
        self.party_resolver.check_id_type(request.to.id_type)
        if request.currency != self.profile.currency:
            raise UnsupportedCurrencyError(request.currency)

        resolved = await self.party_resolver.lookup(request.to.id_value, request.to.id_type)

        if not (request.to.extension_list and request.from_.extension_list):
            logger.warning("Quote %s: payer or payee extensionList is missing", request.quote_id)

        if resolved.barred:
            raise PayeeBlockedError()

        amount = to_decimal(request.amount)
        fee = compute_fee(amount, self.profile.service_charge_percentage)

        # Barred status is read again right before the quote is issued.
        try:
            await self.party_resolver.ensure_not_barred(request.to.id_value)
        except AccountBarredError as exc:
            raise PayeeBlockedError() from exc

        expiration = self.clock() + timedelta(hours=self.profile.expiration_hours)

        if self.profile.fee_policy == FeePolicy.ADD_FEE:
            transfer_amount = amount + fee
        else:
            transfer_amount = amount

        return QuoteResponse(
            quote_id=request.quote_id,
            transaction_id=request.transaction_id,
            transfer_amount=format_amount(transfer_amount),
            transfer_amount_currency=request.currency,
            payee_receive_amount=format_amount(amount),
            payee_receive_amount_currency=request.currency,
            payee_fsp_fee_amount=format_amount(fee),
            payee_fsp_fee_amount_currency=request.currency,
            payee_fsp_commission_amount=format_amount(ZERO),
            payee_fsp_commission_amount_currency=request.currency,
            expiration=to_json_timestamp(expiration),
            extension_list=self._extension_list(request),
        )

    @staticmethod
    def _extension_list(request: QuoteRequest) -> List[ExtensionEntry]:
        entries: List[ExtensionEntry] = []
        for source in (request.extension_list, request.from_.extension_list, request.to.extension_list):
            if source:
                entries.extend(source)
        return entries
