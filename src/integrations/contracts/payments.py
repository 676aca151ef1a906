"""
Money-movement contract helpers.

Shared by every CBS client (mock or real) so that disbursements and
collections are checked the same way regardless of operator.
"""

from decimal import Decimal, InvalidOperation
from typing import List, Union

from .interfaces import CollectionRequest, DisbursementRequest, TransactionStatus

MoneyMovement = Union[DisbursementRequest, CollectionRequest]


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

def validate_money_movement(request: MoneyMovement) -> List[str]:
    """
    Return a list of validation errors.
    Empty list means the request is valid.
    """
    errors: List[str] = []

    if not request.reference:
        errors.append("reference is required")
    if not request.msisdn:
        errors.append("msisdn is required")
    if not request.currency:
        errors.append("currency is required")

    try:
        amount = Decimal(str(request.amount))
    except (InvalidOperation, ValueError):
        errors.append(f"amount {request.amount!r} is not a decimal")
    else:
        if not amount.is_finite() or amount <= 0:
            errors.append("amount must be greater than zero")

    return errors


def is_terminal_status(status: TransactionStatus) -> bool:
    """Return True if the transaction has reached a final, non-changeable state."""
    return status in {TransactionStatus.SUCCESSFUL, TransactionStatus.FAILED}
