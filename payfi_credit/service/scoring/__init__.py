"""
Credit Scoring Module for the PayFi credit engine
"""

from .models import (
    ChainTransaction,
    CashflowMetrics,
    CreditCalculationResult,
    BehaviorType,
    BehaviorUpdate,
    CreditAdjustment,
    RepaymentOutcome,
)
from .settings import CreditSettings, credit_settings
from .cashflow import (
    partition_transactions,
    calculate_standard_deviation,
    calculate_avg_monthly_inflow,
    calculate_repayment_score,
    calculate_volatility_penalty,
    calculate_months_span,
    calculate_transaction_frequency,
    calculate_consistency_score,
    analyze_cashflow,
)
from .credit_limit import (
    calculate_credit_limit,
    clamp_credit_limit,
    get_credit_limit_bucket,
)
from .assessment import assess_credit_limit, build_reasoning, new_user_result
from .behavior import (
    adjust_credit_for_behavior,
    calculate_days_late,
    calculate_late_fee,
    classify_repayment,
)

__all__ = [
    # Settings
    "CreditSettings",
    "credit_settings",
    # Models
    "ChainTransaction",
    "CashflowMetrics",
    "CreditCalculationResult",
    "BehaviorType",
    "BehaviorUpdate",
    "CreditAdjustment",
    "RepaymentOutcome",
    # Cashflow
    "partition_transactions",
    "calculate_standard_deviation",
    "calculate_avg_monthly_inflow",
    "calculate_repayment_score",
    "calculate_volatility_penalty",
    "calculate_months_span",
    "calculate_transaction_frequency",
    "calculate_consistency_score",
    "analyze_cashflow",
    # Credit Limit
    "calculate_credit_limit",
    "clamp_credit_limit",
    "get_credit_limit_bucket",
    # Assessment
    "assess_credit_limit",
    "build_reasoning",
    "new_user_result",
    # Behavior
    "adjust_credit_for_behavior",
    "calculate_days_late",
    "calculate_late_fee",
    "classify_repayment",
]
