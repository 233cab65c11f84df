"""Dependency injection for FastAPI."""

from typing import Annotated

from fastapi import Depends

from payfi_credit.core.config import settings
from payfi_credit.domain.interfaces import TransactionHistoryClient
from payfi_credit.infrastructure.clients import (
    HttpTransactionHistoryClient,
    MockTransactionHistoryClient,
)
from payfi_credit.application.services import CreditService


# External client dependencies
def get_transaction_client() -> TransactionHistoryClient:
    """Get the TransactionHistoryClient selected by TRANSACTION_SOURCE."""
    if settings.transaction_source == "etherscan":
        return HttpTransactionHistoryClient()
    return MockTransactionHistoryClient()


# Service dependencies
def get_credit_service(
    transaction_client: Annotated[TransactionHistoryClient, Depends(get_transaction_client)],
) -> CreditService:
    """Get a CreditService instance with all dependencies."""
    return CreditService(transaction_client=transaction_client)
