"""Credit service - orchestrates the assessment and adjustment use cases."""

import structlog

from payfi_credit.application.dto import (
    AdjustmentRequest,
    AdjustmentResponse,
    AssessmentRequest,
    AssessmentResponse,
    RepaymentRequest,
    RepaymentResponse,
)
from payfi_credit.domain.exceptions import (
    InvalidAdjustmentRequestException,
    InvalidAssessmentRequestException,
)
from payfi_credit.domain.interfaces import TransactionHistoryClient
from payfi_credit.service.scoring import (
    CreditSettings,
    adjust_credit_for_behavior,
    assess_credit_limit,
    classify_repayment,
    credit_settings,
)

logger = structlog.get_logger(__name__)


class CreditService:
    """
    Application service for credit assessment and adjustment use cases.
    """

    def __init__(
        self,
        transaction_client: TransactionHistoryClient,
        settings: CreditSettings = credit_settings,
    ):
        self._transaction_client = transaction_client
        self._settings = settings

    async def assess(self, request: AssessmentRequest) -> AssessmentResponse:
        """
        Assess the credit limit of a wallet.

        Args:
            request: The wallet address and, optionally, its transactions

        Returns:
            AssessmentResponse with limit, metrics and reasoning

        Raises:
            InvalidAssessmentRequestException: If request validation fails
            TransactionSourceException: If the history cannot be fetched
        """
        errors = request.validate()
        if errors:
            raise InvalidAssessmentRequestException("; ".join(errors))

        address = request.address.strip()
        log = logger.bind(address=address)
        log.info("assessment_requested", supplied=request.transactions is not None)

        transactions = request.transactions
        if transactions is None:
            transactions = await self._transaction_client.get_transactions(address)
            log.info("transactions_fetched", count=len(transactions))

        result = assess_credit_limit(transactions, address, settings=self._settings)

        log.info(
            "assessment_completed",
            credit_limit=result.credit_limit,
            transaction_count=result.transaction_count,
            **result.metrics.to_dict(),
        )

        return AssessmentResponse.from_result(address, result)

    def adjust(self, request: AdjustmentRequest) -> AdjustmentResponse:
        """
        Apply a repayment behavior event to the caller's current limit.

        Raises:
            InvalidAdjustmentRequestException: If request validation fails
        """
        errors = request.validate()
        if errors:
            raise InvalidAdjustmentRequestException("; ".join(errors))

        adjustment = adjust_credit_for_behavior(
            request.current_limit,
            request.behavior,
            self._settings,
        )

        logger.info(
            "credit_adjusted",
            behavior_type=request.behavior.type.value,
            current_limit=request.current_limit,
            new_limit=adjustment.new_limit,
            adjustment=adjustment.adjustment,
        )

        return AdjustmentResponse.from_adjustment(adjustment)

    def record_repayment(self, request: RepaymentRequest) -> RepaymentResponse:
        """
        Classify a repayment by its timing and adjust the limit accordingly.

        Raises:
            InvalidAdjustmentRequestException: If request validation fails
        """
        errors = request.validate()
        if errors:
            raise InvalidAdjustmentRequestException("; ".join(errors))

        outcome = classify_repayment(
            request.amount,
            request.due_at,
            request.paid_at,
            self._settings,
        )
        adjustment = self.adjust(
            AdjustmentRequest(
                current_limit=request.current_limit,
                behavior=outcome.behavior,
            )
        )

        logger.info(
            "repayment_recorded",
            behavior_type=outcome.behavior.type.value,
            days_late=outcome.days_late,
            late_fee=outcome.late_fee,
        )

        return RepaymentResponse(
            behavior_type=outcome.behavior.type.value,
            days_late=outcome.days_late,
            late_fee=outcome.late_fee,
            new_limit=adjustment.new_limit,
            adjustment=adjustment.adjustment,
            reason=adjustment.reason,
        )
