"""
Behavior-Driven Credit Adjustment for the PayFi credit engine.

Each repayment outcome moves an existing limit by a fixed rule:

    early_repay     +5% of the current limit
    on_time_repay   no change
    late_repay      -min(15%, days_late * 1%) of the current limit
    missed_repay    -20% of the current limit

Adjusted limits are floored at the minimum limit but never re-capped, so a
run of early repayments can lift a limit above the assessment cap.

The functions here hold no state; the caller owns the current limit and
persists whatever new limit is returned.
"""

import math
from datetime import datetime
from typing import Optional

from .models import BehaviorType, BehaviorUpdate, CreditAdjustment, RepaymentOutcome
from .settings import CreditSettings, credit_settings


def _normalize_days_late(days_late: Optional[int]) -> int:
    if days_late is None or days_late < 0:
        return 0
    return days_late


def adjust_credit_for_behavior(
    current_limit: float,
    behavior: BehaviorUpdate,
    settings: CreditSettings = credit_settings,
) -> CreditAdjustment:
    """
    Apply a single repayment event to a credit limit.

    Args:
        current_limit: The caller's authoritative current limit
        behavior: The repayment event
        settings: Credit settings (uses defaults if not provided)

    Returns:
        CreditAdjustment with the new limit, the signed delta and a reason
    """
    behavior_type = BehaviorType(behavior.type)

    if behavior_type == BehaviorType.EARLY_REPAY:
        adjustment = current_limit * settings.early_repay_bonus
        reason = "Early repayment bonus"
    elif behavior_type == BehaviorType.ON_TIME_REPAY:
        adjustment = 0.0
        reason = "On-time repayment maintained"
    elif behavior_type == BehaviorType.LATE_REPAY:
        days_late = _normalize_days_late(behavior.days_late)
        late_penalty = min(settings.late_penalty_cap, days_late * settings.late_penalty_per_day)
        adjustment = -current_limit * late_penalty
        reason = f"Late repayment penalty ({days_late} days)"
    else:
        adjustment = -current_limit * settings.missed_repay_penalty
        reason = "Missed repayment - significant penalty"

    new_limit = max(settings.min_credit_limit, current_limit + adjustment)

    return CreditAdjustment(new_limit=new_limit, adjustment=adjustment, reason=reason)


def calculate_days_late(due_at: datetime, paid_at: datetime) -> int:
    """
    Whole days a repayment was late, rounded up; 0 if paid by the due time.

    Both datetimes must be either naive or timezone-aware.
    """
    if paid_at <= due_at:
        return 0
    return math.ceil((paid_at - due_at).total_seconds() / 86400)


def calculate_late_fee(
    amount: float,
    days_late: int,
    settings: CreditSettings = credit_settings,
) -> float:
    """Late fee owed on a repayment: amount * daily rate * days late."""
    if days_late <= 0:
        return 0.0
    return amount * settings.late_fee_daily_rate * days_late


def classify_repayment(
    amount: float,
    due_at: datetime,
    paid_at: datetime,
    settings: CreditSettings = credit_settings,
) -> RepaymentOutcome:
    """
    Classify a repayment into a behavior event.

    Policy:
        - Paid a full day or more before the due time: early_repay
        - Paid by the due time: on_time_repay
        - Up to default_after_days late: late_repay with days_late
        - Later than that: missed_repay (treated as a default)

    Args:
        amount: Amount repaid
        due_at: When the repayment was due
        paid_at: When the repayment was made
        settings: Credit settings (uses defaults if not provided)

    Returns:
        RepaymentOutcome with the behavior event and any late fee
    """
    days_late = calculate_days_late(due_at, paid_at)
    late_fee = calculate_late_fee(amount, days_late, settings)

    if days_late == 0:
        if (due_at - paid_at).total_seconds() >= 86400:
            behavior_type = BehaviorType.EARLY_REPAY
        else:
            behavior_type = BehaviorType.ON_TIME_REPAY
    elif days_late <= settings.default_after_days:
        behavior_type = BehaviorType.LATE_REPAY
    else:
        behavior_type = BehaviorType.MISSED_REPAY

    behavior = BehaviorUpdate(
        type=behavior_type,
        amount=amount,
        days_late=days_late if days_late > 0 else None,
    )
    return RepaymentOutcome(behavior=behavior, days_late=days_late, late_fee=late_fee)
