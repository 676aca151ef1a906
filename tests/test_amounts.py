from decimal import Decimal

import pytest

from src.domain.amounts import compute_fee, format_amount, reconcile_transfer_amounts, to_decimal
from src.domain.errors import NotEnoughInformationError
from src.domain.models import AmountType, TransferQuote


def _quote(**overrides):
    data = {
        "transferAmount": "100",
        "payeeFspCommissionAmount": "0",
        "payeeFspFeeAmount": "10",
        "payeeReceiveAmount": "90",
    }
    data.update(overrides)
    return TransferQuote.model_validate(data)


def test_fee_for_hundred_at_five_percent_is_five():
    assert format_amount(compute_fee("100", Decimal("5"))) == "5"


def test_fee_rounds_half_up_to_cents():
    assert compute_fee("0.10", "5") == Decimal("0.01")
    assert format_amount(compute_fee("333", "2.5")) == "8.33"


def test_fee_on_out_of_range_amount_is_not_enough_information():
    with pytest.raises(NotEnoughInformationError):
        compute_fee("1e30", "5")


def test_format_amount_drops_trailing_zeros():
    assert format_amount(Decimal("12.50")) == "12.5"
    assert format_amount(Decimal("500.00")) == "500"
    assert format_amount(Decimal("0.00")) == "0"


def test_to_decimal_defaults_and_errors():
    assert to_decimal(None, default=Decimal("0")) == Decimal("0")
    assert to_decimal("1,250.75") == Decimal("1250.75")
    with pytest.raises(NotEnoughInformationError):
        to_decimal("")
    with pytest.raises(NotEnoughInformationError):
        to_decimal("ten")


def test_send_reconciles_when_amount_matches_transfer_less_commission():
    assert reconcile_transfer_amounts(AmountType.SEND, "100", _quote()) is True


@pytest.mark.parametrize("amount", ["95", "90"])
def test_send_fails_when_amount_differs_from_transfer_less_commission(amount):
    assert reconcile_transfer_amounts(AmountType.SEND, amount, _quote()) is False


def test_send_fails_when_receive_amount_ignores_fee():
    assert reconcile_transfer_amounts(AmountType.SEND, "100", _quote(payeeReceiveAmount="100")) is False


def test_send_commission_defaults_to_zero():
    quote = _quote(payeeFspCommissionAmount=None)
    assert reconcile_transfer_amounts(AmountType.SEND, "100", quote) is True


def test_receive_rules():
    quote = _quote(transferAmount="100", payeeFspFeeAmount="5", payeeFspCommissionAmount="2", payeeReceiveAmount="100")
    assert reconcile_transfer_amounts(AmountType.RECEIVE, "103", quote) is True
    assert reconcile_transfer_amounts(AmountType.RECEIVE, "100", quote) is False


def test_receive_fails_when_receive_differs_from_transfer():
    quote = _quote(transferAmount="100", payeeFspFeeAmount="0", payeeReceiveAmount="99")
    assert reconcile_transfer_amounts(AmountType.RECEIVE, "100", quote) is False


@pytest.mark.parametrize("missing", ["payeeReceiveAmount", "payeeFspFeeAmount"])
def test_missing_receive_or_fee_is_not_enough_information(missing):
    quote = _quote(**{missing: None})
    with pytest.raises(NotEnoughInformationError):
        reconcile_transfer_amounts(AmountType.SEND, "100", quote)


def test_decimal_comparison_is_exact():
    quote = _quote(transferAmount="0.3", payeeFspFeeAmount="0.1", payeeReceiveAmount="0.2")
    assert reconcile_transfer_amounts(AmountType.SEND, "0.30", quote) is True
