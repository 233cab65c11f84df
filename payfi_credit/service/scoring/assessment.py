"""
Credit Assessment for the PayFi credit engine.

This module orchestrates the complete assessment:
1. Check for a wallet with no history (starter credit)
2. Analyze cashflow from the transaction history
3. Calculate the bounded credit limit
4. Build the human-readable reasoning

This is the main entry point for the scoring module.
"""

from datetime import datetime, timezone
from typing import List, Optional, Sequence

from .cashflow import analyze_cashflow
from .credit_limit import calculate_credit_limit
from .models import CashflowMetrics, ChainTransaction, CreditCalculationResult
from .settings import CreditSettings, credit_settings


def format_timestamp(moment: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix."""
    if moment is None:
        moment = datetime.now(timezone.utc)
    elif moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    else:
        moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def new_user_result(
    now: Optional[datetime] = None,
    settings: CreditSettings = credit_settings,
) -> CreditCalculationResult:
    """
    Starter result for a wallet with no transaction history.

    This is a fixed policy, not the formula applied to zero metrics.
    """
    return CreditCalculationResult(
        credit_limit=settings.starter_credit_limit,
        metrics=CashflowMetrics.zero(),
        transaction_count=0,
        analysis_timestamp=format_timestamp(now),
        reasoning=[
            "No transaction history found",
            f"Assigned minimum starter credit of {settings.starter_credit_limit} {settings.native_symbol}",
            "Build history to increase limit",
        ],
    )


def build_reasoning(
    metrics: CashflowMetrics,
    credit_limit: float,
    transaction_count: int,
    settings: CreditSettings = credit_settings,
) -> List[str]:
    """
    Generate the six reasoning lines for a scored assessment.

    Args:
        metrics: The cashflow metrics used
        credit_limit: The computed limit
        transaction_count: Number of transactions analyzed
        settings: Credit settings (uses defaults if not provided)

    Returns:
        Ordered list of explanation lines
    """
    symbol = settings.native_symbol
    return [
        f"Analyzed {transaction_count} {settings.network_name} transactions",
        f"Average monthly inflow: {metrics.avg_monthly_inflow:.6f} {symbol}",
        f"Repayment behavior score: {metrics.repayment_score * 100:.1f}%",
        f"Transaction consistency: {metrics.consistency_score * 100:.1f}%",
        f"Volatility adjustment: {metrics.volatility_penalty * 100:.1f}%",
        f"Calculated credit limit: {credit_limit:.6f} {symbol}",
    ]


def assess_credit_limit(
    transactions: Sequence[ChainTransaction],
    subject_address: str,
    now: Optional[datetime] = None,
    settings: CreditSettings = credit_settings,
) -> CreditCalculationResult:
    """
    Assess a wallet's credit limit from its transaction history.

    Assessment Logic:
        - No transactions: starter limit with fixed reasoning
        - Otherwise: cashflow metrics -> bounded limit -> six-line reasoning

    transaction_count reports every supplied transaction, errored ones
    included, even though errored transfers do not count as inflow or outflow.

    Args:
        transactions: Already-fetched wallet transaction history
        subject_address: The wallet being assessed (case-insensitive)
        now: Assessment time (defaults to the current UTC time)
        settings: Credit settings (uses defaults if not provided)

    Returns:
        CreditCalculationResult with limit, metrics and reasoning
    """
    if not transactions:
        return new_user_result(now, settings)

    metrics = analyze_cashflow(transactions, subject_address, settings)
    credit_limit = calculate_credit_limit(metrics, settings)

    return CreditCalculationResult(
        credit_limit=credit_limit,
        metrics=metrics,
        transaction_count=len(transactions),
        analysis_timestamp=format_timestamp(now),
        reasoning=build_reasoning(metrics, credit_limit, len(transactions), settings),
    )
