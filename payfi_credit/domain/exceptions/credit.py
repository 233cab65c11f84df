"""Credit request domain exceptions."""

from .base import DomainException


class InvalidAssessmentRequestException(DomainException):
    """Raised when an assessment request is invalid."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="INVALID_ASSESSMENT_REQUEST",
        )


class InvalidAdjustmentRequestException(DomainException):
    """Raised when an adjustment or repayment request is invalid."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="INVALID_ADJUSTMENT_REQUEST",
        )
