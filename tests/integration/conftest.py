"""
Fixtures for integration tests.

Provides:
- Test client for FastAPI app
- Stub transaction history client with canned wallet histories
- Failing and timing-out transaction sources
"""

from typing import AsyncGenerator, Dict, List, Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from payfi_credit.main import app
from payfi_credit.core.dependencies import get_transaction_client
from payfi_credit.domain.exceptions import (
    TransactionSourceException,
    TransactionSourceTimeoutException,
)
from payfi_credit.domain.interfaces import TransactionHistoryClient
from payfi_credit.service.scoring.models import ChainTransaction


# =============================================================================
# Test Data
# =============================================================================

GOOD_WALLET = "0x742d35Cc6634C0532925a3b844Bc454e4438f44e"
EMPTY_WALLET = "0x0000000000000000000000000000000000000001"
COUNTERPARTY = "0x2222222222222222222222222222222222222222"
BASE_TS = 1_700_000_000
DAY = 86400


def four_income_month(address: str = GOOD_WALLET) -> List[dict]:
    """Four incoming transfers of 1.0 spread over exactly one month."""
    return [
        {
            "hash": f"0x{day:064x}",
            "from_address": COUNTERPARTY,
            "to_address": address,
            "value": "1.0",
            "timestamp": BASE_TS + day * DAY,
            "is_error": False,
            "block_number": 18_000_000 + day,
        }
        for day in (0, 10, 20, 30)
    ]


def to_transactions(items: List[dict]) -> List[ChainTransaction]:
    return [ChainTransaction(**item) for item in items]


# =============================================================================
# Stub Clients
# =============================================================================

class StubTransactionHistoryClient(TransactionHistoryClient):
    """Stub transaction source serving canned histories."""

    def __init__(
        self,
        histories: Optional[Dict[str, List[ChainTransaction]]] = None,
        fail_mode: bool = False,
        timeout_mode: bool = False,
    ):
        self.histories = {k.lower(): v for k, v in (histories or {}).items()}
        self.fail_mode = fail_mode
        self.timeout_mode = timeout_mode
        self.call_count = 0

    async def get_transactions(self, address: str) -> List[ChainTransaction]:
        """Return canned transactions or raise based on mode."""
        self.call_count += 1

        if self.timeout_mode:
            raise TransactionSourceTimeoutException()

        if self.fail_mode:
            raise TransactionSourceException(
                message="Transaction source unavailable",
                status_code=502,
            )

        return self.histories.get(address.lower(), [])


# =============================================================================
# Stub Client Fixtures
# =============================================================================

@pytest.fixture
def stub_transaction_client() -> StubTransactionHistoryClient:
    """Create a transaction source that knows the good wallet."""
    return StubTransactionHistoryClient(
        histories={GOOD_WALLET: to_transactions(four_income_month())},
    )


@pytest.fixture
def failing_transaction_client() -> StubTransactionHistoryClient:
    """Create a transaction source that always fails."""
    return StubTransactionHistoryClient(fail_mode=True)


@pytest.fixture
def timing_out_transaction_client() -> StubTransactionHistoryClient:
    """Create a transaction source that always times out."""
    return StubTransactionHistoryClient(timeout_mode=True)


# =============================================================================
# App Client Fixtures
# =============================================================================

async def _client_for(
    transaction_client: TransactionHistoryClient,
) -> AsyncGenerator[AsyncClient, None]:
    app.dependency_overrides[get_transaction_client] = lambda: transaction_client

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(
    stub_transaction_client: StubTransactionHistoryClient,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client with a stubbed transaction source.

    The stub serves a four-transfer history for GOOD_WALLET and an empty
    history for every other wallet.
    """
    async for ac in _client_for(stub_transaction_client):
        yield ac


@pytest_asyncio.fixture
async def client_with_failing_source(
    failing_transaction_client: StubTransactionHistoryClient,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client whose transaction source always fails."""
    async for ac in _client_for(failing_transaction_client):
        yield ac


@pytest_asyncio.fixture
async def client_with_timing_out_source(
    timing_out_transaction_client: StubTransactionHistoryClient,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client whose transaction source always times out."""
    async for ac in _client_for(timing_out_transaction_client):
        yield ac


# =============================================================================
# Helper Fixtures
# =============================================================================

@pytest.fixture
def good_wallet_request() -> dict:
    """Assessment request relying on the transaction source."""
    return {"address": GOOD_WALLET}


@pytest.fixture
def supplied_history_request() -> dict:
    """Assessment request carrying its own history."""
    return {"address": GOOD_WALLET, "transactions": four_income_month()}


@pytest.fixture
def empty_wallet_request() -> dict:
    """Assessment request for a wallet with no history."""
    return {"address": EMPTY_WALLET}
