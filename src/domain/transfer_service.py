"""
Inbound transfers (payee side): reservation and commit.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from src.domain.amounts import format_amount, reconcile_transfer_amounts, to_decimal
from src.domain.errors import (
    CBSError,
    DisbursementFailedError,
    InvalidQuoteError,
    QuoteNotDefinedError,
    TransferNotCompletedError,
    UnsupportedCurrencyError,
)
from src.domain.models import TransferPatchNotification, TransferRequest, TransferResponse, TransferState
from src.domain.party_resolver import PartyResolver
from src.domain.quote_service import to_json_timestamp, utcnow
from src.domain.settlement import RefundCompensator
from src.integrations.contracts.interfaces import CoreBankingClient, DisbursementRequest, RefundRequest
from src.utils.config_loader import OperatorProfile

logger = logging.getLogger(__name__)


class TransferAcceptanceService:
    def __init__(
        self,
        party_resolver: PartyResolver,
        cbs_client: CoreBankingClient,
        compensator: RefundCompensator,
        profile: OperatorProfile,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.party_resolver = party_resolver
        self.cbs_client = cbs_client
        self.compensator = compensator
        self.profile = profile
        self.clock = clock

    async def reserve(self, request: TransferRequest) -> TransferResponse:
        """Validate an inbound transfer and promise to settle it."""
        logger.info("Transfer %s for %s %s", request.transfer_id, request.to.id_type, request.to.id_value)
        self.party_resolver.check_id_type(request.to.id_type)
        if request.currency != self.profile.currency:
            raise UnsupportedCurrencyError(request.currency)

        if not (request.to.extension_list and request.from_.extension_list):
            logger.warning("Transfer %s: payer or payee extensionList is missing", request.transfer_id)

        if not reconcile_transfer_amounts(request.amount_type, request.amount, request.quote):
            raise InvalidQuoteError()

        await self.party_resolver.ensure_not_barred(request.to.id_value)

        return TransferResponse(
            completed_timestamp=to_json_timestamp(self.clock()),
            home_transaction_id=request.transfer_id,
            transfer_state=TransferState.RESERVED,
        )

    async def finalize(self, notification: TransferPatchNotification, transfer_id: str) -> None:
        """Disburse a committed transfer to the payee wallet.

        If the CBS rejects the disbursement a refund is attempted exactly once.
        A successful refund surfaces as DisbursementFailedError; a failed refund
        re-raises the original CBS error.
        """
        logger.info("Committing transfer %s", transfer_id)
        if notification.current_state != "COMPLETED":
            raise TransferNotCompletedError()

        disbursement = self._disbursement_request(notification, transfer_id)
        try:
            ack = await self.cbs_client.disburse(disbursement)
        except CBSError as exc:
            logger.error("Disbursement for transfer %s failed: %s", transfer_id, exc)
            refund = RefundRequest(
                reference=disbursement.reference,
                reason=f"Disbursement failed for transfer {transfer_id}",
                amount=disbursement.amount,
                currency=disbursement.currency,
            )
            try:
                await self.compensator.compensate(refund)
            except Exception:
                raise exc
            raise DisbursementFailedError(
                f"Disbursement for transfer {transfer_id} failed; refund issued",
                payload={"transferId": transfer_id, "reference": disbursement.reference},
            ) from exc

        logger.info("Transfer %s disbursed (cbs_reference=%s)", transfer_id, ack.cbs_reference)

    def _disbursement_request(self, notification: TransferPatchNotification, transfer_id: str) -> DisbursementRequest:
        if notification.quote_request is None:
            raise QuoteNotDefinedError()

        body = notification.quote_request.body
        return DisbursementRequest(
            msisdn=body.payee.party_id_info.party_identifier,
            amount=format_amount(to_decimal(body.amount.amount)),
            currency=self.profile.currency,
            reference=body.transaction_id,
            narration=body.note or "",
            metadata={"transfer_id": transfer_id, "wallet_type": self.profile.wallet_type},
        )
