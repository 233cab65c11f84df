"""Data transfer objects for credit operations."""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from payfi_credit.service.scoring.models import (
    BehaviorUpdate,
    CashflowMetrics,
    ChainTransaction,
    CreditAdjustment,
    CreditCalculationResult,
)


@dataclass(frozen=True)
class AssessmentRequest:
    """Input data for a credit assessment.

    When `transactions` is None the history is fetched from the configured
    transaction source; an empty list means the wallet has no history.
    """
    address: str
    transactions: Optional[List[ChainTransaction]] = None

    def validate(self) -> List[str]:
        errors = []

        if not self.address or not self.address.strip():
            errors.append("address is required")

        return errors


@dataclass(frozen=True)
class AssessmentResponse:
    """Response data for a credit assessment."""

    address: str
    credit_limit: float
    metrics: CashflowMetrics
    transaction_count: int
    analysis_timestamp: str
    reasoning: List[str]

    @classmethod
    def from_result(cls, address: str, result: CreditCalculationResult) -> "AssessmentResponse":
        return cls(
            address=address,
            credit_limit=result.credit_limit,
            metrics=result.metrics,
            transaction_count=result.transaction_count,
            analysis_timestamp=result.analysis_timestamp,
            reasoning=list(result.reasoning),
        )


@dataclass(frozen=True)
class AdjustmentRequest:
    """Input data for applying a behavior event to a limit."""
    current_limit: float
    behavior: BehaviorUpdate

    def validate(self) -> List[str]:
        errors = []

        if self.current_limit <= 0:
            errors.append("current_limit must be positive")

        if self.behavior.amount < 0:
            errors.append("amount cannot be negative")

        if self.behavior.days_late is not None and self.behavior.days_late < 0:
            errors.append("days_late cannot be negative")

        return errors


@dataclass(frozen=True)
class AdjustmentResponse:
    """Response data for a behavior adjustment."""

    new_limit: float
    adjustment: float
    reason: str

    @classmethod
    def from_adjustment(cls, adjustment: CreditAdjustment) -> "AdjustmentResponse":
        return cls(
            new_limit=adjustment.new_limit,
            adjustment=adjustment.adjustment,
            reason=adjustment.reason,
        )


@dataclass(frozen=True)
class RepaymentRequest:
    """Input data for recording a repayment against a limit."""
    current_limit: float
    amount: float
    due_at: datetime
    paid_at: datetime

    def validate(self) -> List[str]:
        errors = []

        if self.current_limit <= 0:
            errors.append("current_limit must be positive")

        if self.amount < 0:
            errors.append("amount cannot be negative")

        if (self.due_at.tzinfo is None) != (self.paid_at.tzinfo is None):
            errors.append("due_at and paid_at must both carry a timezone or neither")

        return errors


@dataclass(frozen=True)
class RepaymentResponse:
    """Response data for a recorded repayment."""

    behavior_type: str
    days_late: int
    late_fee: float
    new_limit: float
    adjustment: float
    reason: str
