from __future__ import annotations

from decimal import Decimal

import pytest

from app.errors import AboveMaximum, BelowMinimum, InsufficientBalance, InvalidAmount
from app.ledger.balance import (
    EXCHANGE_RATE,
    compute_breakdown,
    has_pending_request,
    to_money,
    validate,
)


@pytest.mark.parametrize("amount", ["0.01", "1", "20", "49.99"])
def test_below_minimum(amount):
    with pytest.raises(BelowMinimum):
        validate(amount, "100000")


@pytest.mark.parametrize("amount", ["10000.01", "25000", 1_000_000])
def test_above_maximum(amount):
    with pytest.raises(AboveMaximum):
        validate(amount, "10000000")


@pytest.mark.parametrize("amount,balance", [("100", "99.99"), ("50", "0"), ("10000", "9999")])
def test_insufficient_balance(amount, balance):
    with pytest.raises(InsufficientBalance):
        validate(amount, balance)


@pytest.mark.parametrize("amount", [0, "-5", "abc", None, True, "NaN", "Infinity", ""])
def test_invalid_amount(amount):
    with pytest.raises(InvalidAmount):
        validate(amount, "500")


def test_bounds_are_inclusive():
    assert validate("50", "500") == Decimal("50.00")
    assert validate("10000", "10000") == Decimal("10000.00")


@pytest.mark.parametrize(
    "amount,balance,exc",
    [
        ("49.995", "1000", BelowMinimum),
        ("49.999999", "1000", BelowMinimum),
        ("10000.004", "100000", AboveMaximum),
        ("100.004", "100", InsufficientBalance),
    ],
)
def test_sub_cent_amounts_cannot_round_past_a_limit(amount, balance, exc):
    with pytest.raises(exc):
        validate(amount, balance)


def test_accepted_amount_is_rounded_after_checks():
    assert validate("99.995", "100") == Decimal("100.00")
    assert validate("50.004", "500") == Decimal("50.00")


def test_to_money_normalises_inputs():
    assert to_money(100) == Decimal("100.00")
    assert to_money(0.1 + 0.2) == Decimal("0.30")
    assert to_money("12.345") == Decimal("12.35")


def test_scenario_a_no_credit():
    assert validate(100, 500) == Decimal("100.00")
    b = compute_breakdown(100, 0)
    assert b.credit_deduction == Decimal("0")
    assert b.final_amount == Decimal("100")
    assert b.final_naira_amount == Decimal("125000")
    assert b.naira_amount == Decimal("125000")


def test_scenario_b_partial_credit():
    validate(100, 500)
    b = compute_breakdown(100, 30)
    assert b.credit_deduction == Decimal("30")
    assert b.final_amount == Decimal("70")
    assert b.final_naira_amount == Decimal("87500")


def test_scenario_c_credit_absorbs_payout():
    validate(100, 500)
    b = compute_breakdown(100, 150)
    assert b.credit_deduction == Decimal("100")
    assert b.final_amount == Decimal("0")
    assert b.final_naira_amount == Decimal("0")


def test_scenario_d_below_minimum_regardless_of_balance():
    for balance in ("0", "20", "500", "1000000"):
        with pytest.raises(BelowMinimum):
            validate(20, balance)


@pytest.mark.parametrize(
    "amount,credit",
    [("50", "0"), ("75.50", "10.25"), ("100", "100"), ("9999.99", "20000"), ("120", "-5")],
)
def test_breakdown_identities(amount, credit):
    b = compute_breakdown(amount, credit)
    amt = Decimal(amount)
    assert b.credit_deduction == min(max(Decimal(credit), Decimal("0")), amt)
    assert b.final_amount == amt - b.credit_deduction
    assert b.final_amount >= 0
    assert b.final_naira_amount == b.final_amount * EXCHANGE_RATE
    assert b.naira_amount == amt * EXCHANGE_RATE


def test_breakdown_is_deterministic():
    assert compute_breakdown("250.10", "33.33") == compute_breakdown("250.10", "33.33")


def test_breakdown_uses_given_exchange_rate():
    b = compute_breakdown(100, 0, exchange_rate=Decimal("1500"))
    assert b.naira_amount == Decimal("150000")


def test_breakdown_as_dict_is_json_friendly():
    d = compute_breakdown(100, 30).as_dict()
    assert d["credit_deduction"] == "30.00"
    assert d["final_amount"] == "70.00"


def test_has_pending_request():
    artist_id = "a1"
    rows = [
        {"artist_id": "a1", "status": "COMPLETED"},
        {"artist_id": "a1", "status": "REJECTED"},
        {"artist_id": "a2", "status": "PENDING"},
    ]
    assert has_pending_request(rows, artist_id) is False

    for status in ("PENDING", "APPROVED", "PROCESSING"):
        assert has_pending_request(rows + [{"artist_id": "a1", "status": status}], artist_id) is True


def test_has_pending_request_empty():
    assert has_pending_request([], "a1") is False
