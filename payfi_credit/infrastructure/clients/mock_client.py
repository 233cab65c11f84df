"""Synthetic implementation of TransactionHistoryClient for demos and local runs."""

import random
import time
from typing import Callable, List

import structlog

from payfi_credit.domain.interfaces import TransactionHistoryClient
from payfi_credit.service.scoring.models import ChainTransaction

logger = structlog.get_logger(__name__)

DAY_SECONDS = 86400


class MockTransactionHistoryClient(TransactionHistoryClient):
    """
    Generates a realistic-looking history for any wallet.

    The history has weekly income and scattered spending:
    - 20 incoming transfers, one per week, of 0.1 to 0.6 native units
    - 15 outgoing transfers within the last 140 days, of 0.02 to 0.32

    The generator is seeded from the lowercase address, so a wallet always
    receives the same history relative to `clock()`.
    """

    INCOMING_COUNT = 20
    OUTGOING_COUNT = 15
    OUTGOING_WINDOW_DAYS = 140
    BASE_BLOCK = 18_000_000

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock

    async def get_transactions(self, address: str) -> List[ChainTransaction]:
        transactions = self.generate(address)
        logger.info("mock_transactions_generated", address=address, count=len(transactions))
        return transactions

    def generate(self, address: str) -> List[ChainTransaction]:
        """Build the synthetic history for an address, newest first."""
        rng = random.Random(address.lower())
        now = int(self._clock())

        transactions = []

        for i in range(self.INCOMING_COUNT):
            transactions.append(ChainTransaction(
                hash=self._random_hex(rng, 64),
                from_address=self._random_hex(rng, 40),
                to_address=address,
                value=f"{rng.random() * 0.5 + 0.1:.18f}",
                timestamp=now - i * 7 * DAY_SECONDS,
                is_error=False,
                block_number=self.BASE_BLOCK + i * 1000,
            ))

        for i in range(self.OUTGOING_COUNT):
            days_ago = rng.randrange(self.OUTGOING_WINDOW_DAYS)
            transactions.append(ChainTransaction(
                hash=self._random_hex(rng, 64),
                from_address=address,
                to_address=self._random_hex(rng, 40),
                value=f"{rng.random() * 0.3 + 0.02:.18f}",
                timestamp=now - days_ago * DAY_SECONDS,
                is_error=False,
                block_number=self.BASE_BLOCK + i * 800,
            ))

        return sorted(transactions, key=lambda t: t.timestamp, reverse=True)

    @staticmethod
    def _random_hex(rng: random.Random, length: int) -> str:
        return "0x" + "".join(rng.choice("0123456789abcdef") for _ in range(length))
