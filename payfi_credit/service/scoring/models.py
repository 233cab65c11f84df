"""
Data models for credit scoring.

These models represent the data structures used throughout the scoring pipeline,
from raw chain transfers to the final credit limit and its adjustments.
"""

import math
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import List, Optional


@dataclass(frozen=True)
class ChainTransaction:
    """
    A single native-token transfer from a wallet's history.

    Attributes:
        hash: Transaction hash
        from_address: Sender address
        to_address: Recipient address
        value: Transferred amount as a decimal string in native units
        timestamp: Block time in unix seconds
        is_error: True if the transaction reverted
        block_number: Block the transaction was included in
    """
    hash: str
    from_address: str
    to_address: str
    value: str
    timestamp: int
    is_error: bool = False
    block_number: int = 0

    @property
    def value_native(self) -> float:
        """Parsed value; unparsable, negative or non-finite values count as zero."""
        try:
            value = float(self.value)
        except (TypeError, ValueError):
            return 0.0
        if not math.isfinite(value) or value < 0:
            return 0.0
        return value

    def is_incoming_for(self, address: str) -> bool:
        return not self.is_error and (self.to_address or "").lower() == address.lower()

    def is_outgoing_for(self, address: str) -> bool:
        return not self.is_error and (self.from_address or "").lower() == address.lower()


@dataclass
class CashflowMetrics:
    """
    Normalized cashflow signals derived from a transaction history.

    Attributes:
        avg_monthly_inflow: Average inflow per month in native units.
        repayment_score: Outgoing/incoming transfer ratio, capped at 1.0.
        volatility_penalty: Coefficient of variation of inflow amounts.
            Higher values indicate irregular income.
        transaction_frequency: Transactions per month over the active span.
        consistency_score: Frequency relative to the reference rate, 0-1.
    """
    avg_monthly_inflow: float
    repayment_score: float
    volatility_penalty: float
    transaction_frequency: float
    consistency_score: float

    @classmethod
    def zero(cls) -> "CashflowMetrics":
        return cls(
            avg_monthly_inflow=0.0,
            repayment_score=0.0,
            volatility_penalty=0.0,
            transaction_frequency=0.0,
            consistency_score=0.0,
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class CreditCalculationResult:
    """
    The outcome of a credit assessment.

    Attributes:
        credit_limit: Bounded limit in native units
        metrics: The cashflow metrics that produced the limit
        transaction_count: Number of transactions supplied, errored included
        analysis_timestamp: ISO-8601 UTC time of the assessment
        reasoning: Human-readable explanation lines, in order
    """
    credit_limit: float
    metrics: CashflowMetrics
    transaction_count: int
    analysis_timestamp: str
    reasoning: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "credit_limit": self.credit_limit,
            "metrics": self.metrics.to_dict(),
            "transaction_count": self.transaction_count,
            "analysis_timestamp": self.analysis_timestamp,
            "reasoning": list(self.reasoning),
        }


class BehaviorType(str, Enum):
    """Repayment outcome reported for an outstanding credit line."""
    EARLY_REPAY = "early_repay"
    ON_TIME_REPAY = "on_time_repay"
    LATE_REPAY = "late_repay"
    MISSED_REPAY = "missed_repay"


@dataclass(frozen=True)
class BehaviorUpdate:
    """
    A single repayment outcome.

    Attributes:
        type: Kind of repayment event
        amount: Amount repaid (informational; no rule depends on it)
        days_late: Days past due, only meaningful for late repayments
    """
    type: BehaviorType
    amount: float
    days_late: Optional[int] = None


@dataclass(frozen=True)
class CreditAdjustment:
    """Result of applying a behavior event to a credit limit."""
    new_limit: float
    adjustment: float
    reason: str


@dataclass(frozen=True)
class RepaymentOutcome:
    """A repayment classified into a behavior event, with any late fee owed."""
    behavior: BehaviorUpdate
    days_late: int
    late_fee: float
