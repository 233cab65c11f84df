"""
Credit Limit Calculation for the PayFi credit engine.

This module turns cashflow metrics into a credit limit through a weighted
multiplicative model, bounded by the policy floor and cap.
"""

from .models import CashflowMetrics
from .settings import CreditSettings, credit_settings


def clamp_credit_limit(
    value: float,
    settings: CreditSettings = credit_settings,
) -> float:
    """Clamp a limit to [min_credit_limit, max_credit_limit]."""
    return max(settings.min_credit_limit, min(value, settings.max_credit_limit))


def calculate_credit_limit(
    metrics: CashflowMetrics,
    settings: CreditSettings = credit_settings,
) -> float:
    """
    Calculate the credit limit for a set of cashflow metrics.

    Algorithm (applied in this order):
        1. base = avg_monthly_inflow * 1.5
        2. base *= 0.5 + repayment_score * 0.5       (range 0.5-1.0)
        3. base *= 0.7 + consistency_score * 0.3     (range 0.7-1.0)
        4. base *= max(0.5, 1 - volatility_penalty * 0.3)
        5. clamp to [0.001, 10.0]

    Args:
        metrics: Cashflow metrics for the wallet
        settings: Credit settings (uses defaults if not provided)

    Returns:
        Credit limit in native units
    """
    base_limit = metrics.avg_monthly_inflow * settings.inflow_multiplier

    # Good repayment history = higher limit
    base_limit *= settings.repayment_floor + metrics.repayment_score * settings.repayment_weight

    # Regular activity = higher limit
    base_limit *= settings.consistency_floor + metrics.consistency_score * settings.consistency_weight

    # Irregular income = lower limit
    stability_factor = max(
        settings.stability_floor,
        1 - metrics.volatility_penalty * settings.volatility_weight,
    )
    base_limit *= stability_factor

    return clamp_credit_limit(base_limit, settings)


def get_credit_limit_bucket(
    credit_limit: float,
    settings: CreditSettings = credit_settings,
) -> str:
    """
    Get the bucket label for a credit limit (for metrics reporting).

    Args:
        credit_limit: Credit limit in native units
        settings: Credit settings (uses defaults if not provided)

    Returns:
        Bucket label string
    """
    if credit_limit <= settings.min_credit_limit:
        return "min"
    elif credit_limit < 0.01:
        return "<0.01"
    elif credit_limit < 0.1:
        return "0.01-0.1"
    elif credit_limit < 1.0:
        return "0.1-1"
    elif credit_limit < 5.0:
        return "1-5"
    elif credit_limit < settings.max_credit_limit:
        return "5-10"
    else:
        return "max"
