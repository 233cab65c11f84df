"""HTTP implementation of TransactionHistoryClient for Etherscan-compatible APIs."""

import asyncio
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List

import httpx
import structlog

from payfi_credit.core.config import settings
from payfi_credit.core.metrics import (
    track_transaction_fetch_latency,
    record_transaction_fetch_success,
    record_transaction_fetch_failure,
)
from payfi_credit.domain.exceptions import (
    TransactionSourceException,
    TransactionSourceTimeoutException,
)
from payfi_credit.domain.interfaces import TransactionHistoryClient
from payfi_credit.service.scoring.models import ChainTransaction

logger = structlog.get_logger(__name__)

WEI_PER_ETHER = Decimal(10) ** 18
NO_TRANSACTIONS_MESSAGE = "No transactions found"


def _to_int(raw: Any) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return 0


def _wei_to_native(raw: Any) -> str:
    try:
        return str(Decimal(str(raw)) / WEI_PER_ETHER)
    except InvalidOperation:
        return "0"


class HttpTransactionHistoryClient(TransactionHistoryClient):
    """
    HTTP client for an Etherscan-style `txlist` endpoint.

    Fetches transaction history with retry logic and proper error handling.
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = base_url or settings.etherscan_api_url
        self._api_key = api_key if api_key is not None else settings.etherscan_api_key
        self._timeout = timeout if timeout is not None else settings.etherscan_timeout
        self._max_retries = max_retries if max_retries is not None else settings.etherscan_max_retries
        if self._max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        self._transport = transport

    async def get_transactions(self, address: str) -> List[ChainTransaction]:
        """
        Fetch the normal-transaction list for a wallet.

        Implements retry logic with exponential backoff.
        """
        params = {
            "module": "account",
            "action": "txlist",
            "address": address,
            "sort": "desc",
        }
        if self._api_key:
            params["apikey"] = self._api_key

        last_exception = None

        for attempt in range(self._max_retries):
            try:
                with track_transaction_fetch_latency():
                    async with httpx.AsyncClient(
                        timeout=self._timeout,
                        transport=self._transport,
                    ) as client:
                        response = await client.get(self._base_url, params=params)

                        if response.status_code >= 400:
                            record_transaction_fetch_failure("error")
                            raise TransactionSourceException(
                                message=f"Transaction source error: {response.text}",
                                status_code=response.status_code,
                            )

                        transactions = self._parse_response(response.json())
                        record_transaction_fetch_success()
                        return transactions

            except httpx.TimeoutException:
                record_transaction_fetch_failure("timeout")
                last_exception = TransactionSourceTimeoutException()
                logger.warning(
                    "transaction_source_timeout",
                    address=address,
                    attempt=attempt + 1,
                    max_retries=self._max_retries,
                )
            except TransactionSourceException:
                raise
            except Exception as e:
                record_transaction_fetch_failure("error")
                last_exception = TransactionSourceException(
                    message=f"Unexpected error: {str(e)}",
                )
                logger.error(
                    "transaction_source_error",
                    address=address,
                    attempt=attempt + 1,
                    error=str(e),
                )

            # Exponential backoff
            if attempt < self._max_retries - 1:
                await asyncio.sleep(2**attempt * 0.1)

        raise last_exception or TransactionSourceException("Failed to fetch transactions")

    def _parse_response(self, data: Dict[str, Any]) -> List[ChainTransaction]:
        """Validate the API envelope and parse its result list."""
        status = str(data.get("status", ""))
        message = str(data.get("message", ""))
        result = data.get("result", [])

        if status != "1":
            if message.startswith(NO_TRANSACTIONS_MESSAGE):
                return []
            record_transaction_fetch_failure("upstream")
            raise TransactionSourceException(
                message=f"Transaction source rejected request: {message} {result}".strip(),
            )

        if not isinstance(result, list):
            record_transaction_fetch_failure("upstream")
            raise TransactionSourceException(
                message="Transaction source returned a malformed result",
            )

        return self._parse_transactions(result)

    def _parse_transactions(self, items: List[Dict[str, Any]]) -> List[ChainTransaction]:
        """Parse raw API records into ChainTransaction entities."""
        transactions = []

        for item in items:
            transaction = ChainTransaction(
                hash=item.get("hash", ""),
                from_address=item.get("from", "") or "",
                to_address=item.get("to", "") or "",
                value=_wei_to_native(item.get("value", "0")),
                timestamp=_to_int(item.get("timeStamp")),
                is_error=str(item.get("isError", "0")) == "1",
                block_number=_to_int(item.get("blockNumber")),
            )
            transactions.append(transaction)

        return transactions
