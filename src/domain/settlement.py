"""
Settlement of outbound transfers.

The CBS confirms a payer collection either by calling back
(``handle_callback``) or, for operators without callbacks, through a bounded
status enquiry loop (``await_settlement``). Both paths report the result to the
scheme adapter and fall back to a refund when that report fails after funds
have already moved.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

from src.domain.errors import SchemeAdapterError, TransferIdNotDefinedError
from src.domain.models import CallbackPayload, TransferContinuation
from src.integrations.contracts.interfaces import (
    CBSAck,
    CoreBankingClient,
    RefundRequest,
    SchemeAdapterClient,
    TransactionStatus,
)
from src.integrations.contracts.payments import is_terminal_status
from src.utils.config_loader import OperatorProfile

logger = logging.getLogger(__name__)


@dataclass
class SettlementOutcome:
    transfer_id: str
    accepted: bool
    notified: bool
    refunded: bool = False


class RefundCompensator:
    """Reverses an executed money movement. Failures are logged and re-raised."""

    def __init__(self, cbs_client: CoreBankingClient):
        self.cbs_client = cbs_client

    async def compensate(self, request: RefundRequest) -> CBSAck:
        logger.warning("Refunding %s: %s", request.reference, request.reason)
        try:
            ack = await self.cbs_client.refund(request)
        except Exception:
            logger.error("Refund failed for %s. Manual refund required.", request.reference, exc_info=True)
            raise
        logger.info("Refund issued for %s (cbs_reference=%s)", request.reference, ack.cbs_reference)
        return ack


class SettlementCallbackHandler:
    def __init__(
        self,
        sdk_client: SchemeAdapterClient,
        cbs_client: CoreBankingClient,
        profile: OperatorProfile,
        pending_store,
        compensator: RefundCompensator,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.sdk_client = sdk_client
        self.cbs_client = cbs_client
        self.profile = profile
        self.pending_store = pending_store
        self.compensator = compensator
        self._sleep = sleep

    async def handle_callback(self, payload: CallbackPayload) -> SettlementOutcome:
        logger.info("Handling callback for transaction %s (status=%s)", payload.transaction_id, payload.status_code)
        pending = self.pending_store.pop(payload.transaction_id)
        if pending is None:
            raise TransferIdNotDefinedError(f"No pending transfer for transaction {payload.transaction_id}")

        funds_moved = self.profile.is_success_code(payload.status_code)
        return await self._notify(
            payload.transaction_id,
            funds_moved,
            refund_reference=payload.cbs_reference or pending.get("cbs_reference") or payload.transaction_id,
            pending=pending,
        )

    async def await_settlement(
        self,
        transfer_id: str,
        transaction_id: str,
        cbs_reference: Optional[str] = None,
    ) -> SettlementOutcome:
        """Poll the CBS until the collection settles; a timeout counts as failure."""
        max_attempts = self.profile.transaction_enquiry_max_attempts
        status = TransactionStatus.PENDING
        for attempt in range(1, max_attempts + 1):
            status = await self.cbs_client.enquire_transaction_status(transaction_id)
            logger.info("Transaction %s status %s (attempt %d/%d)", transaction_id, status.value, attempt, max_attempts)
            if is_terminal_status(status):
                break
            if attempt < max_attempts:
                await self._sleep(self.profile.transaction_enquiry_wait_seconds)

        if not is_terminal_status(status):
            logger.warning("Transaction %s still pending after %d enquiries; rejecting", transaction_id, max_attempts)

        pending = self.pending_store.pop(transfer_id) or {}
        return await self._notify(
            transfer_id,
            status == TransactionStatus.SUCCESSFUL,
            refund_reference=cbs_reference or transaction_id,
            pending=pending,
        )

    async def _notify(
        self,
        transfer_id: str,
        funds_moved: bool,
        *,
        refund_reference: str,
        pending: Dict[str, Any],
    ) -> SettlementOutcome:
        try:
            await self.sdk_client.continue_outbound_transfer(
                transfer_id, TransferContinuation(accept_quote=funds_moved)
            )
        except SchemeAdapterError as exc:
            logger.warning("Could not notify scheme adapter about transfer %s: %s", transfer_id, exc)
            if not funds_moved:
                return SettlementOutcome(transfer_id, accepted=False, notified=False)
            await self.compensator.compensate(
                RefundRequest(
                    reference=refund_reference,
                    reason=f"Scheme adapter notification failed for transfer {transfer_id}",
                    amount=pending.get("collected_amount") or pending.get("amount"),
                    currency=pending.get("currency"),
                )
            )
            return SettlementOutcome(transfer_id, accepted=True, notified=False, refunded=True)

        return SettlementOutcome(transfer_id, accepted=funds_moved, notified=True)
