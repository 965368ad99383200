import random
from datetime import datetime

import pytest

from pocketguard.services import rules


def test_month_bounds_wraps_december():
    start, end = rules.month_bounds(12, 2023)
    assert start == datetime(2023, 12, 1)
    assert end == datetime(2024, 1, 1)


@pytest.mark.parametrize("month,year,today,expected", [
    (3, 2024, datetime(2024, 3, 10), 21),
    (2, 2024, datetime(2024, 2, 29), 0),   # last day of a leap February
    (2, 2024, datetime(2024, 3, 10), 0),   # past period
    (3, 2023, datetime(2024, 3, 10), 0),   # same month, other year
])
def test_days_left_in_period(month, year, today, expected):
    assert rules.days_left_in_period(month, year, today) == expected


def test_category_status_overflow_sign():
    under = rules.category_status(spent=200, allocation=1000)
    assert not under.over_budget
    assert under.overflow == -800

    exact = rules.category_status(spent=1000, allocation=1000)
    assert not exact.over_budget

    over = rules.category_status(spent=1200, allocation=1000)
    assert over.over_budget
    assert over.overflow == 200


def test_summarize_period_totals_and_daily_budget():
    statuses = [rules.category_status(300, 1000), rules.category_status(600, 500)]
    summary = rules.summarize_period(5000, statuses, days_left=21)

    assert summary.spent == 900
    assert summary.remaining == 4100
    assert summary.daily_budget == pytest.approx(4100 / 21)
    assert summary.has_overflow


def test_summarize_period_zero_days_left():
    summary = rules.summarize_period(5000, [rules.category_status(100, 1000)], days_left=0)
    assert summary.daily_budget == 0
    assert not summary.has_overflow


def test_upi_expense_over_allocation_is_rejected_and_blocks():
    decision = rules.evaluate_expense(950, 100, 1000, is_upi=True)
    assert not decision.allowed
    assert decision.projected_spent == 1050
    assert decision.block_upi


def test_upi_rejection_without_auto_block():
    decision = rules.evaluate_expense(950, 100, 1000, is_upi=True, upi_block_enabled=False)
    assert not decision.allowed
    assert not decision.block_upi


def test_upi_expense_reaching_allocation_exactly_is_allowed():
    decision = rules.evaluate_expense(900, 100, 1000, is_upi=True)
    assert decision.allowed
    assert not decision.overflow


def test_non_upi_overspend_is_only_flagged():
    decision = rules.evaluate_expense(950, 100, 1000, is_upi=False)
    assert decision.allowed
    assert decision.overflow
    assert not decision.block_upi


def test_no_allocation_allows_anything():
    decision = rules.evaluate_expense(0, 10_000, None, is_upi=True)
    assert decision.allowed
    assert decision.projected_spent is None


def test_spending_limits_switched_off_lets_upi_through():
    decision = rules.evaluate_expense(950, 100, 1000, is_upi=True, upi_limits_enabled=False)
    assert decision.allowed
    assert decision.overflow


def test_pick_questions_is_seeded_shuffle():
    pool = list(range(12))
    expected = list(pool)
    random.Random(7).shuffle(expected)

    assert rules.pick_questions(pool, 5, random.Random(7)) == expected[:5]
    # source sequence untouched
    assert pool == list(range(12))


def test_pick_questions_count_larger_than_pool():
    assert sorted(rules.pick_questions([1, 2], 5, random.Random(1))) == [1, 2]


def test_grade_answers_positional():
    assert rules.grade_answers([1, 2, 0], [1, 0, 0]) == [True, False, True]
    # short submission: missing answers are wrong
    assert rules.grade_answers([1, 2, 0], [1]) == [True, False, False]
    # extra answers ignored
    assert rules.grade_answers([1], [1, 3, 3]) == [True]


@pytest.mark.parametrize("correct,total,passed,score", [
    (3, 5, True, 60),
    (2, 5, False, 40),
    (5, 5, True, 100),
    (0, 5, False, 0),
    (2, 3, True, 67),
])
def test_pass_threshold_and_score(correct, total, passed, score):
    assert rules.has_passed(correct, total) is passed
    assert rules.score_percent(correct, total) == score
