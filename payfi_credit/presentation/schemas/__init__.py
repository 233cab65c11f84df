"""Pydantic schemas for API request/response validation."""

from .credit import (
    TransactionSchema,
    AssessmentRequestSchema,
    AssessmentResponseSchema,
    CashflowMetricsSchema,
    BehaviorSchema,
    AdjustmentRequestSchema,
    AdjustmentResponseSchema,
    RepaymentRequestSchema,
    RepaymentResponseSchema,
)
from .error import ErrorResponseSchema

__all__ = [
    "TransactionSchema",
    "AssessmentRequestSchema",
    "AssessmentResponseSchema",
    "CashflowMetricsSchema",
    "BehaviorSchema",
    "AdjustmentRequestSchema",
    "AdjustmentResponseSchema",
    "RepaymentRequestSchema",
    "RepaymentResponseSchema",
    "ErrorResponseSchema",
]
