"""Transaction history source exceptions."""

from .base import DomainException


class TransactionSourceException(DomainException):
    """Raised when the transaction history source returns an error."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(
            message=message,
            code="TRANSACTION_SOURCE_ERROR",
        )
        self.status_code = status_code


class TransactionSourceTimeoutException(TransactionSourceException):
    """Raised when the transaction history source times out."""

    def __init__(self):
        super().__init__(
            message="Transaction history request timed out",
            status_code=None,
        )
        self.code = "TRANSACTION_SOURCE_TIMEOUT"
