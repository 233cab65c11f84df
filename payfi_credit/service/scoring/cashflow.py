"""
Cashflow Analysis for the PayFi credit engine.

This module reduces a wallet's transaction history to the cashflow metrics
that drive the credit limit:
- Average Monthly Inflow
- Repayment Score
- Volatility Penalty
- Transaction Frequency
- Consistency Score

Every function is pure and guards its divisors, so an empty or degenerate
history yields finite metrics instead of raising.
"""

from typing import List, Sequence, Tuple

from .models import CashflowMetrics, ChainTransaction
from .settings import CreditSettings, credit_settings


def partition_transactions(
    transactions: Sequence[ChainTransaction],
    subject_address: str,
) -> Tuple[List[ChainTransaction], List[ChainTransaction]]:
    """
    Split transactions into incoming and outgoing transfers for a wallet.

    Addresses are compared case-insensitively. Errored transactions belong
    to neither side.

    Args:
        transactions: Wallet transaction history
        subject_address: The wallet being assessed

    Returns:
        Tuple of (incoming, outgoing) transactions
    """
    incoming = [t for t in transactions if t.is_incoming_for(subject_address)]
    outgoing = [t for t in transactions if t.is_outgoing_for(subject_address)]
    return incoming, outgoing


def calculate_standard_deviation(values: Sequence[float]) -> float:
    """Population standard deviation (divides by N); 0 for no values."""
    if not values:
        return 0.0

    mean = sum(values) / len(values)
    variance = sum((v - mean) ** 2 for v in values) / len(values)
    return variance ** 0.5


def calculate_avg_monthly_inflow(
    incoming_values: Sequence[float],
    settings: CreditSettings = credit_settings,
) -> float:
    """
    Estimate the average inflow per month.

    Algorithm:
        total_inflow / max(1, incoming_count / inflow_transactions_per_month)

    The divisor treats the history as a fixed number of incoming transfers
    per month (4 by default) rather than measuring elapsed time.

    Args:
        incoming_values: Values of the incoming transfers in native units
        settings: Credit settings (uses defaults if not provided)

    Returns:
        Average monthly inflow (0.0 with no incoming transfers)
    """
    total_inflow = sum(incoming_values)
    months = max(1.0, len(incoming_values) / settings.inflow_transactions_per_month)
    return total_inflow / months


def calculate_repayment_score(incoming_count: int, outgoing_count: int) -> float:
    """
    Ratio of outgoing to incoming transfers, capped at 1.0.

    Business Rationale:
        A wallet that moves funds out at least as often as it receives them
        behaves like an account that services its obligations. A wallet with
        no inflow scores 0 since there is nothing to repay from.
    """
    if incoming_count <= 0:
        return 0.0
    return min(1.0, outgoing_count / incoming_count)


def calculate_volatility_penalty(incoming_values: Sequence[float]) -> float:
    """
    Coefficient of variation (std_dev / mean) of inflow amounts.

    Returns 0 when there are no incoming transfers or their mean is 0.
    """
    if not incoming_values:
        return 0.0

    mean = sum(incoming_values) / len(incoming_values)
    if mean <= 0:
        return 0.0

    return calculate_standard_deviation(incoming_values) / mean


def calculate_months_span(
    transactions: Sequence[ChainTransaction],
    settings: CreditSettings = credit_settings,
) -> float:
    """
    Number of months between the oldest and newest transaction, at least 1.

    The span covers every transaction, errored ones included, since it
    measures wall-clock activity rather than successful transfers.
    """
    if not transactions:
        return 1.0

    timestamps = [t.timestamp for t in transactions]
    span_seconds = max(timestamps) - min(timestamps)
    return max(1.0, span_seconds / settings.seconds_per_month)


def calculate_transaction_frequency(
    transactions: Sequence[ChainTransaction],
    settings: CreditSettings = credit_settings,
) -> float:
    """Transactions per month over the active span."""
    return len(transactions) / calculate_months_span(transactions, settings)


def calculate_consistency_score(
    transaction_frequency: float,
    settings: CreditSettings = credit_settings,
) -> float:
    """
    Normalize frequency against the reference rate (10 tx/month by default).

    Returns:
        Consistency score from 0.0 (inactive) to 1.0 (at or above reference)
    """
    return min(1.0, transaction_frequency / settings.consistency_reference_rate)


def analyze_cashflow(
    transactions: Sequence[ChainTransaction],
    subject_address: str,
    settings: CreditSettings = credit_settings,
) -> CashflowMetrics:
    """
    Compute cashflow metrics for a wallet from its transaction history.

    Algorithm:
        1. Partition successful transfers into incoming and outgoing
        2. Average monthly inflow from incoming values
        3. Repayment score from outgoing/incoming counts
        4. Volatility penalty from the spread of incoming values
        5. Frequency and consistency from the full history's time span

    Args:
        transactions: Wallet transaction history
        subject_address: The wallet being assessed
        settings: Credit settings (uses defaults if not provided)

    Returns:
        CashflowMetrics for the wallet
    """
    incoming, outgoing = partition_transactions(transactions, subject_address)
    inflow_values = [t.value_native for t in incoming]

    transaction_frequency = calculate_transaction_frequency(transactions, settings)

    return CashflowMetrics(
        avg_monthly_inflow=calculate_avg_monthly_inflow(inflow_values, settings),
        repayment_score=calculate_repayment_score(len(incoming), len(outgoing)),
        volatility_penalty=calculate_volatility_penalty(inflow_values),
        transaction_frequency=transaction_frequency,
        consistency_score=calculate_consistency_score(transaction_frequency, settings),
    )
