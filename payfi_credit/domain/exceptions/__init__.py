"""Domain Exceptions - Invalid requests and collaborator failures."""

from .base import DomainException
from .credit import (
    InvalidAssessmentRequestException,
    InvalidAdjustmentRequestException,
)
from .transaction_source import (
    TransactionSourceException,
    TransactionSourceTimeoutException,
)

__all__ = [
    "DomainException",
    "InvalidAssessmentRequestException",
    "InvalidAdjustmentRequestException",
    "TransactionSourceException",
    "TransactionSourceTimeoutException",
]
