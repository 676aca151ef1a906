"""
Party resolution against the CBS KYC lookup.

Results are never cached: barred status can change between two calls within
the same request.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import List, Optional

from src.domain.errors import AccountBarredError, UnsupportedIdTypeError
from src.domain.models import ExtensionEntry, Party, PartyType
from src.integrations.contracts.interfaces import CoreBankingClient, KycResult
from src.utils.config_loader import OperatorProfile

logger = logging.getLogger(__name__)


@dataclass
class ResolvedParty:
    party: Party
    barred: bool
    status_code: int
    kyc: KycResult


class PartyResolver:
    def __init__(self, cbs_client: CoreBankingClient, profile: OperatorProfile):
        self.cbs_client = cbs_client
        self.profile = profile

    def check_id_type(self, id_type: Optional[str]) -> None:
        if id_type != self.profile.supported_id_type:
            raise UnsupportedIdTypeError(id_type)

    async def lookup(self, id_value: str, id_type: Optional[str] = None) -> ResolvedParty:
        """KYC lookup mapped into the interoperability party shape."""
        self.check_id_type(id_type or self.profile.supported_id_type)

        kyc = await self.cbs_client.lookup_identity(id_value)
        barred = self.is_barred(kyc)
        if barred:
            logger.info("Party %s is barred or unknown (status=%s)", id_value, kyc.account_status or kyc.status_code)

        return ResolvedParty(
            party=self._to_party(kyc, id_value),
            barred=barred,
            status_code=kyc.status_code,
            kyc=kyc,
        )

    async def get_party(self, id_value: str, id_type: str) -> ResolvedParty:
        logger.info("Get party for %s %s", id_type, id_value)
        resolved = await self.lookup(id_value, id_type)
        if resolved.barred:
            raise AccountBarredError()
        return resolved

    async def ensure_not_barred(self, id_value: str) -> None:
        kyc = await self.cbs_client.lookup_identity(id_value)
        if self.is_barred(kyc):
            raise AccountBarredError()

    def is_barred(self, kyc: KycResult) -> bool:
        return not kyc.found or kyc.is_barred or self.profile.is_barred_status(kyc.account_status)

    def _to_party(self, kyc: KycResult, id_value: str) -> Party:
        return Party(
            id_type=self.profile.supported_id_type,
            id_value=id_value,
            type=PartyType.CONSUMER,
            display_name=kyc.display_name,
            first_name=kyc.first_name,
            middle_name=kyc.middle_name,
            last_name=kyc.last_name,
            kyc_information=json.dumps(kyc.raw, default=str),
            extension_list=self._extension_list(),
            supported_currencies=[self.profile.currency],
        )

    def _extension_list(self) -> List[ExtensionEntry]:
        return [
            ExtensionEntry(key="Rpt.UpdtdPtyAndAcctId.Agt.FinInstnId.LEI", value=self.profile.lei),
            ExtensionEntry(key="Rpt.UpdtdPtyAndAcctId.Pty.CtryOfRes", value=self.profile.country),
        ]
