"""
CoreConnector: one object per running connector, wiring the domain services
over a single CBS client, scheme-adapter client, operator profile and
pending-transfer store.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from src.domain.models import (
    CallbackPayload,
    Party,
    QuoteRequest,
    QuoteResponse,
    SendMoneyConfirmation,
    SendMoneyConfirmationResult,
    SendMoneyRequest,
    SendMoneyResponse,
    TransferPatchNotification,
    TransferRequest,
    TransferResponse,
)
from src.domain.outbound import OutboundTransferOrchestrator
from src.domain.party_resolver import PartyResolver
from src.domain.quote_service import QuoteService
from src.domain.settlement import RefundCompensator, SettlementCallbackHandler, SettlementOutcome
from src.domain.transfer_service import TransferAcceptanceService
from src.integrations.contracts.interfaces import CoreBankingClient, SchemeAdapterClient
from src.utils.config_loader import OperatorProfile

logger = logging.getLogger(__name__)


class CoreConnector:
    def __init__(
        self,
        profile: OperatorProfile,
        cbs_client: CoreBankingClient,
        sdk_client: SchemeAdapterClient,
        pending_store,
        pending_ttl_seconds: int = 3600,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.profile = profile
        self.cbs_client = cbs_client
        self.sdk_client = sdk_client
        self.pending_store = pending_store

        self.party_resolver = PartyResolver(cbs_client, profile)
        self.compensator = RefundCompensator(cbs_client)
        self.quotes = QuoteService(self.party_resolver, profile)
        self.transfers = TransferAcceptanceService(self.party_resolver, cbs_client, self.compensator, profile)
        self.settlement = SettlementCallbackHandler(
            sdk_client, cbs_client, profile, pending_store, self.compensator, sleep=sleep
        )
        self.outbound = OutboundTransferOrchestrator(
            sdk_client,
            cbs_client,
            self.party_resolver,
            self.settlement,
            profile,
            pending_store,
            pending_ttl_seconds=pending_ttl_seconds,
        )
        logger.info("Core connector ready for %s (%s)", profile.name, cbs_client.provider.value)

    # Inbound (scheme adapter -> payee DFSP)

    async def get_party(self, id_type: str, id_value: str) -> Party:
        resolved = await self.party_resolver.get_party(id_value, id_type)
        return resolved.party

    async def quote(self, request: QuoteRequest) -> QuoteResponse:
        return await self.quotes.quote(request)

    async def reserve_transfer(self, request: TransferRequest) -> TransferResponse:
        return await self.transfers.reserve(request)

    async def finalize_transfer(self, notification: TransferPatchNotification, transfer_id: str) -> None:
        await self.transfers.finalize(notification, transfer_id)

    # Outbound (payer DFSP -> scheme adapter)

    async def send_money(self, request: SendMoneyRequest) -> SendMoneyResponse:
        return await self.outbound.send_money(request)

    async def confirm_send_money(
        self, confirmation: SendMoneyConfirmation, transfer_id: str
    ) -> SendMoneyConfirmationResult:
        return await self.outbound.confirm_send_money(confirmation, transfer_id)

    async def handle_callback(self, payload: CallbackPayload) -> SettlementOutcome:
        return await self.settlement.handle_callback(payload)

    def is_healthy(self) -> bool:
        return bool(self.pending_store.ping())


def build_connector(
    profile: OperatorProfile,
    cbs_client: CoreBankingClient,
    sdk_client: SchemeAdapterClient,
    pending_store,
    pending_ttl_seconds: Optional[int] = None,
) -> CoreConnector:
    return CoreConnector(
        profile,
        cbs_client,
        sdk_client,
        pending_store,
        pending_ttl_seconds=pending_ttl_seconds or 3600,
    )
