"""External client interfaces."""

from abc import ABC, abstractmethod
from typing import List

from payfi_credit.service.scoring.models import ChainTransaction


class TransactionHistoryClient(ABC):
    """
    Abstract client for a wallet transaction history source.

    Supplies the already-fetched transaction list the credit engine scores.
    """

    @abstractmethod
    async def get_transactions(self, address: str) -> List[ChainTransaction]:
        """
        Fetch the transaction history of a wallet.

        Args:
            address: The wallet address

        Returns:
            List of transactions, newest first (empty for an unused wallet)

        Raises:
            TransactionSourceException: If the source returns an error
            TransactionSourceTimeoutException: If the request times out
        """
        ...
