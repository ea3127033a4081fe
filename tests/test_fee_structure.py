"""Fee structure serialization tests."""

from __future__ import annotations

import json
from decimal import Decimal

import pytest
from pydantic import ValidationError

from dcapal.schemas import (
    FixedFee,
    VariableFee,
    ZeroFee,
    dump_fee_structure,
    load_fee_structure,
)

VARIANTS = [
    ZeroFee(),
    FixedFee(fee_amount=Decimal("2.5")),
    FixedFee(fee_amount=Decimal("0")),
    VariableFee(fee_rate=Decimal("0.19"), min_fee=Decimal("2.95")),
    VariableFee(fee_rate=Decimal("0.25"), min_fee=Decimal("1"), max_fee=Decimal("10")),
    VariableFee(fee_rate=Decimal("0.25"), min_fee=Decimal("1"), max_fee=Decimal("0")),
]


@pytest.mark.parametrize("fees", VARIANTS, ids=str)
def test_round_trip_preserves_variant(fees) -> None:
    restored = load_fee_structure(json.dumps(dump_fee_structure(fees)))

    assert restored == fees
    assert type(restored) is type(fees)


def test_serialized_form_is_tagged() -> None:
    assert dump_fee_structure(ZeroFee()) == {"type": "zeroFee"}
    assert dump_fee_structure(FixedFee(fee_amount=Decimal("2.5"))) == {"type": "fixed", "feeAmount": 2.5}


def test_absent_max_fee_is_omitted_not_zeroed() -> None:
    uncapped = dump_fee_structure(VariableFee(fee_rate=Decimal("0.5"), min_fee=Decimal("1")))
    capped_at_zero = dump_fee_structure(
        VariableFee(fee_rate=Decimal("0.5"), min_fee=Decimal("1"), max_fee=Decimal("0"))
    )

    assert "maxFee" not in uncapped
    assert capped_at_zero["maxFee"] == 0
    assert load_fee_structure(uncapped).max_fee is None


def test_tag_decides_the_variant() -> None:
    # A fixed fee never turns into a degenerate variable one, whatever the fields.
    with pytest.raises(ValidationError):
        load_fee_structure({"type": "fixed", "feeRate": 1, "minFee": 1})
    with pytest.raises(ValidationError):
        load_fee_structure({"feeAmount": 1})
    with pytest.raises(ValidationError):
        load_fee_structure({"type": "percentage"})


def test_negative_amounts_are_rejected() -> None:
    with pytest.raises(ValidationError):
        load_fee_structure({"type": "fixed", "feeAmount": -1})


def test_display_names() -> None:
    assert [str(fees) for fees in VARIANTS[:2]] + [str(VARIANTS[3])] == ["ZeroFee", "Fixed", "Variable"]


def test_amounts_round_trip_up_to_double_precision() -> None:
    exact = VariableFee(fee_rate=Decimal("0.123456789012345"), min_fee=Decimal("123456.789"))
    too_precise = FixedFee(fee_amount=Decimal("0.12345678901234567890123"))

    assert load_fee_structure(json.dumps(dump_fee_structure(exact))) == exact
    dumped = dump_fee_structure(too_precise)
    assert isinstance(dumped["feeAmount"], float)
    assert load_fee_structure(dumped).fee_amount != too_precise.fee_amount
