"""
Integrations layer.
This package contains all code used to communicate with external systems:
- the operator core banking system (KYC, disbursement, collection, refund)
- the Mojaloop SDK scheme adapter (outbound transfers)

Key rule:
- Domain services MUST NOT call external APIs directly.
- They call integration clients through the contracts in src/integrations/contracts.
- We use MOCK clients during development and swap to REAL_HTTP clients when APIs are available.

Switching implementations:
- The selection of mock vs real clients happens in ONE place (src/api/main.py).
"""

from .contracts.interfaces import (
    CBSAck,
    CollectionRequest,
    CoreBankingClient,
    DisbursementRequest,
    KycResult,
    Provider,
    RefundRequest,
    SchemeAdapterClient,
    TransactionStatus,
)
from .contracts.payments import is_terminal_status, validate_money_movement

__all__ = [
    # interfaces
    "CBSAck", "CollectionRequest", "CoreBankingClient", "DisbursementRequest",
    "KycResult", "Provider", "RefundRequest", "SchemeAdapterClient", "TransactionStatus",
    # payments
    "is_terminal_status", "validate_money_movement",
]
