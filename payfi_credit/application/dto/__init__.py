"""Data Transfer Objects for application layer."""

from .credit import (
    AssessmentRequest,
    AssessmentResponse,
    AdjustmentRequest,
    AdjustmentResponse,
    RepaymentRequest,
    RepaymentResponse,
)

__all__ = [
    "AssessmentRequest",
    "AssessmentResponse",
    "AdjustmentRequest",
    "AdjustmentResponse",
    "RepaymentRequest",
    "RepaymentResponse",
]
