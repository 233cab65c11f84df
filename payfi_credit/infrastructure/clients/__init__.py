"""External client implementations."""

from .etherscan_client import HttpTransactionHistoryClient
from .mock_client import MockTransactionHistoryClient

__all__ = [
    "HttpTransactionHistoryClient",
    "MockTransactionHistoryClient",
]
