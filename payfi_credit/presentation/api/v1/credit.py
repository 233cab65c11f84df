"""Credit API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from payfi_credit.application.dto import (
    AdjustmentRequest,
    AssessmentRequest,
    RepaymentRequest,
)
from payfi_credit.application.services import CreditService
from payfi_credit.core.dependencies import get_credit_service
from payfi_credit.core.metrics import (
    record_assessment,
    record_behavior_adjustment,
    track_assessment_latency,
)
from payfi_credit.presentation.schemas import (
    AdjustmentRequestSchema,
    AdjustmentResponseSchema,
    AssessmentRequestSchema,
    AssessmentResponseSchema,
    CashflowMetricsSchema,
    ErrorResponseSchema,
    RepaymentRequestSchema,
    RepaymentResponseSchema,
)
from payfi_credit.service.scoring.models import BehaviorUpdate, ChainTransaction

credit_router = APIRouter(
    prefix="/credit",
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid request"},
    },
)


@credit_router.post(
    "/assessment",
    response_model=AssessmentResponseSchema,
    status_code=200,
    summary="Assess Credit Limit",
    description="""
    Assess a wallet's credit limit from its transaction history.

    Supply `transactions` to score an already-fetched history; omit it to
    fetch the history from the configured transaction source.
    """,
    responses={
        200: {"description": "Assessment completed"},
        503: {"model": ErrorResponseSchema, "description": "Transaction source unavailable"},
    },
)
async def create_assessment(
    request: AssessmentRequestSchema,
    credit_service: Annotated[CreditService, Depends(get_credit_service)],
) -> AssessmentResponseSchema:
    transactions = None
    if request.transactions is not None:
        transactions = [
            ChainTransaction(
                hash=t.hash,
                from_address=t.from_address,
                to_address=t.to_address,
                value=t.value,
                timestamp=t.timestamp,
                is_error=t.is_error,
                block_number=t.block_number,
            )
            for t in request.transactions
        ]

    dto = AssessmentRequest(address=request.address, transactions=transactions)

    with track_assessment_latency():
        response = await credit_service.assess(dto)

    record_assessment(response.credit_limit, response.transaction_count)

    return AssessmentResponseSchema(
        address=response.address,
        credit_limit=response.credit_limit,
        metrics=CashflowMetricsSchema(**response.metrics.to_dict()),
        transaction_count=response.transaction_count,
        analysis_timestamp=response.analysis_timestamp,
        reasoning=response.reasoning,
    )


@credit_router.post(
    "/adjustment",
    response_model=AdjustmentResponseSchema,
    summary="Adjust Credit For Behavior",
    description="""
    Apply a repayment behavior event to the caller's current limit.

    The service keeps no state: the caller must persist `new_limit`.
    """,
)
async def create_adjustment(
    request: AdjustmentRequestSchema,
    credit_service: Annotated[CreditService, Depends(get_credit_service)],
) -> AdjustmentResponseSchema:
    dto = AdjustmentRequest(
        current_limit=request.current_limit,
        behavior=BehaviorUpdate(
            type=request.behavior.type,
            amount=request.behavior.amount,
            days_late=request.behavior.days_late,
        ),
    )

    response = credit_service.adjust(dto)
    record_behavior_adjustment(request.behavior.type.value)

    return AdjustmentResponseSchema(
        new_limit=response.new_limit,
        adjustment=response.adjustment,
        reason=response.reason,
    )


@credit_router.post(
    "/repayment",
    response_model=RepaymentResponseSchema,
    summary="Record Repayment",
    description="""
    Classify a repayment by its due and paid times, compute any late fee,
    and adjust the caller's current limit accordingly.
    """,
)
async def create_repayment(
    request: RepaymentRequestSchema,
    credit_service: Annotated[CreditService, Depends(get_credit_service)],
) -> RepaymentResponseSchema:
    dto = RepaymentRequest(
        current_limit=request.current_limit,
        amount=request.amount,
        due_at=request.due_at,
        paid_at=request.paid_at,
    )

    response = credit_service.record_repayment(dto)
    record_behavior_adjustment(response.behavior_type)

    return RepaymentResponseSchema(
        behavior_type=response.behavior_type,
        days_late=response.days_late,
        late_fee=response.late_fee,
        new_limit=response.new_limit,
        adjustment=response.adjustment,
        reason=response.reason,
    )
