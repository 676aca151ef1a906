"""
Amount reconciliation rules.

Pure functions over decimal strings. Nothing here talks to a collaborator, so
every rule can be exercised directly in unit tests.

    SEND:    amount == transferAmount - commission
             payeeReceiveAmount == transferAmount - fee
    RECEIVE: amount == transferAmount - commission + fee
             payeeReceiveAmount == transferAmount

Comparisons are exact ``Decimal`` equality; only fee computation rounds
(two decimals, half-up).
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

from src.domain.errors import NotEnoughInformationError
from src.domain.models import AmountType, TransferQuote

logger = logging.getLogger(__name__)

MONEY_STEP = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value: Any, *, default: Optional[Decimal] = None) -> Decimal:
    if value is None or (isinstance(value, str) and not value.strip()):
        if default is not None:
            return default
        raise NotEnoughInformationError("Amount is not defined")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # floats only reach here from mis-typed callers; go through repr, not binary
        value = repr(value)
    try:
        return Decimal(str(value).replace(",", "").strip())
    except InvalidOperation as exc:
        raise NotEnoughInformationError(f"Amount {value!r} is not a decimal") from exc


def format_amount(value: Decimal) -> str:
    """Plain decimal string without exponent or trailing zeros ("5", "12.5", "500")."""
    if value == value.to_integral_value():
        return format(value.quantize(Decimal("1")), "f")
    return format(value.normalize(), "f")


def compute_fee(amount: Any, percentage: Any) -> Decimal:
    fee = to_decimal(percentage) / Decimal("100") * to_decimal(amount)
    try:
        return fee.quantize(MONEY_STEP, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise NotEnoughInformationError(f"Amount {amount!r} is out of range") from exc


def amounts_equal(left: Any, right: Any) -> bool:
    return to_decimal(left) == to_decimal(right)


def reconcile_transfer_amounts(amount_type: AmountType, amount: Any, quote: TransferQuote) -> bool:
    """Return True when ``amount`` is consistent with the quote sub-record.

    Raises NotEnoughInformationError when the quote lacks payeeReceiveAmount or
    payeeFspFeeAmount, which means the upstream message is malformed.
    """
    if not quote.payee_receive_amount or not quote.payee_fsp_fee_amount:
        raise NotEnoughInformationError(
            "transfer.quote.payeeReceiveAmount or transfer.quote.payeeFspFeeAmount not defined"
        )

    requested = to_decimal(amount)
    transfer_amount = to_decimal(quote.transfer_amount)
    commission = to_decimal(quote.payee_fsp_commission_amount, default=ZERO)
    fee = to_decimal(quote.payee_fsp_fee_amount)
    receive_amount = to_decimal(quote.payee_receive_amount)

    if amount_type == AmountType.SEND:
        checks = (
            requested == transfer_amount - commission,
            receive_amount == transfer_amount - fee,
        )
    elif amount_type == AmountType.RECEIVE:
        checks = (
            requested == transfer_amount - commission + fee,
            receive_amount == transfer_amount,
        )
    else:
        raise NotEnoughInformationError(f"Unknown amountType {amount_type!r}")

    if not all(checks):
        logger.info(
            "Quote reconciliation failed for %s amount=%s transferAmount=%s fee=%s commission=%s receive=%s",
            amount_type.value,
            requested,
            transfer_amount,
            fee,
            commission,
            receive_amount,
        )
        return False
    return True
