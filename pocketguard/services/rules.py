"""Budget and UPI rule set.

Plain functions over plain values so the arithmetic can be checked without a
database. The services feed them rows and persist whatever they decide.
"""
import calendar
import random
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional, Sequence


@dataclass(frozen=True)
class CategoryStatus:
    spent: float
    over_budget: bool
    overflow: float


@dataclass(frozen=True)
class PeriodSummary:
    spent: float
    remaining: float
    days_left: int
    daily_budget: float
    has_overflow: bool


@dataclass(frozen=True)
class GateDecision:
    allowed: bool
    # Only meaningful when the category has an allocation
    projected_spent: Optional[float] = None
    overflow: bool = False
    block_upi: bool = False


def month_bounds(month: int, year: int) -> tuple[datetime, datetime]:
    """Half-open [start, end) datetime range covering one calendar month."""
    start = datetime(year, month, 1)
    end = datetime(year + 1, 1, 1) if month == 12 else datetime(year, month + 1, 1)
    return start, end


def days_left_in_period(month: int, year: int, today: datetime) -> int:
    if today.month != month or today.year != year:
        return 0
    last_day = calendar.monthrange(year, month)[1]
    return last_day - today.day


def category_status(spent: float, allocation: float) -> CategoryStatus:
    return CategoryStatus(spent=spent, over_budget=spent > allocation, overflow=spent - allocation)


def summarize_period(total_amount: float, statuses: Iterable[CategoryStatus], days_left: int) -> PeriodSummary:
    statuses = list(statuses)
    total_spent = sum(s.spent for s in statuses)
    remaining = total_amount - total_spent
    daily = remaining / days_left if days_left > 0 else 0.0
    return PeriodSummary(
        spent=total_spent,
        remaining=remaining,
        days_left=days_left,
        daily_budget=daily,
        has_overflow=any(s.over_budget for s in statuses),
    )


def evaluate_expense(
        category_spent: float,
        amount: float,
        allocation: Optional[float],
        is_upi: bool,
        upi_limits_enabled: bool = True,
        upi_block_enabled: bool = True,
) -> GateDecision:
    """Decide whether an expense may be recorded.

    Only UPI expenses are ever rejected. Non-UPI overspend is reported through
    ``overflow`` and nothing else.
    """
    if allocation is None:
        return GateDecision(allowed=True)

    projected = category_spent + amount
    overflow = projected > allocation

    if not is_upi or not upi_limits_enabled or not overflow:
        return GateDecision(allowed=True, projected_spent=projected, overflow=overflow)

    return GateDecision(
        allowed=False,
        projected_spent=projected,
        overflow=True,
        block_upi=upi_block_enabled,
    )


def pick_questions(questions: Sequence, count: int, rng: Optional[random.Random] = None) -> list:
    pool = list(questions)
    (rng or random).shuffle(pool)
    return pool[:count]


def grade_answers(correct: Sequence[int], submitted: Sequence[int]) -> list[bool]:
    """Positional comparison; unanswered positions are wrong, extras ignored."""
    return [i < len(submitted) and submitted[i] == answer for i, answer in enumerate(correct)]


def has_passed(correct_count: int, total: int, pass_ratio: float = 0.6) -> bool:
    return correct_count >= pass_ratio * total


def score_percent(correct_count: int, total: int) -> int:
    if total == 0:
        return 0
    return round(100 * correct_count / total)
