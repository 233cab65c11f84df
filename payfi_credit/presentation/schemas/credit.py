"""Credit-related Pydantic schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from payfi_credit.service.scoring.models import BehaviorType

ADDRESS_PATTERN = r"^0x[0-9a-fA-F]{40}$"


class TransactionSchema(BaseModel):
    """Schema for a single wallet transaction supplied by the caller."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    hash: str = Field(
        ...,
        description="Transaction hash",
    )
    from_address: str = Field(
        ...,
        description="Sender address",
    )
    to_address: str = Field(
        "",
        description="Recipient address (empty for contract creation)",
    )
    value: str = Field(
        ...,
        description="Transferred amount in native units, as a decimal string",
        examples=["0.25"],
    )
    timestamp: int = Field(
        ...,
        ge=0,
        description="Block time in unix seconds",
    )
    is_error: bool = Field(
        False,
        description="Whether the transaction reverted",
    )
    block_number: int = Field(
        0,
        ge=0,
        description="Block number",
    )


class AssessmentRequestSchema(BaseModel):
    """Schema for POST /v1/credit/assessment request body."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "address": "0x742d35Cc6634C0532925a3b844Bc454e4438f44e",
                    "transactions": None,
                }
            ]
        }
    )
    address: str = Field(
        ...,
        pattern=ADDRESS_PATTERN,
        description="Wallet address to assess (case-insensitive)",
        examples=["0x742d35Cc6634C0532925a3b844Bc454e4438f44e"],
    )
    transactions: Optional[list[TransactionSchema]] = Field(
        None,
        description="Already-fetched history; omit to fetch from the configured source",
    )

    @field_validator("address", mode="before")
    @classmethod
    def strip_address(cls, v):
        """Tolerate surrounding whitespace."""
        return v.strip() if isinstance(v, str) else v


class CashflowMetricsSchema(BaseModel):
    """Schema for cashflow metrics in the response."""

    avg_monthly_inflow: float = Field(
        ...,
        ge=0,
        description="Average monthly inflow in native units",
        examples=[1.35],
    )
    repayment_score: float = Field(
        ...,
        ge=0,
        le=1,
        description="Outgoing/incoming transfer ratio, capped at 1",
        examples=[0.75],
    )
    volatility_penalty: float = Field(
        ...,
        ge=0,
        description="Coefficient of variation of inflow amounts",
        examples=[0.31],
    )
    transaction_frequency: float = Field(
        ...,
        ge=0,
        description="Transactions per month",
        examples=[7.5],
    )
    consistency_score: float = Field(
        ...,
        ge=0,
        le=1,
        description="Frequency relative to 10 transactions/month",
        examples=[0.75],
    )


class AssessmentResponseSchema(BaseModel):
    """Schema for POST /v1/credit/assessment response body."""

    address: str = Field(
        ...,
        description="The assessed wallet",
    )
    credit_limit: float = Field(
        ...,
        gt=0,
        description="Credit limit in native units",
        examples=[1.482],
    )
    metrics: CashflowMetricsSchema = Field(
        ...,
        description="Cashflow metrics that produced the limit",
    )
    transaction_count: int = Field(
        ...,
        ge=0,
        description="Number of transactions analyzed, errored included",
    )
    analysis_timestamp: str = Field(
        ...,
        description="ISO 8601 timestamp of the assessment",
        examples=["2025-09-17T12:00:00.000Z"],
    )
    reasoning: list[str] = Field(
        ...,
        description="Human-readable explanation lines",
    )


class BehaviorSchema(BaseModel):
    """Schema for a repayment behavior event."""

    type: BehaviorType = Field(
        ...,
        description="Repayment outcome",
        examples=["late_repay"],
    )
    amount: float = Field(
        0.0,
        ge=0,
        description="Amount repaid in native units",
    )
    days_late: Optional[int] = Field(
        None,
        ge=0,
        description="Days past due (late_repay only)",
        examples=[10],
    )


class AdjustmentRequestSchema(BaseModel):
    """Schema for POST /v1/credit/adjustment request body."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "current_limit": 1.0,
                    "behavior": {"type": "late_repay", "amount": 0.5, "days_late": 10},
                }
            ]
        }
    )
    current_limit: float = Field(
        ...,
        gt=0,
        description="The caller's current credit limit",
    )
    behavior: BehaviorSchema


class AdjustmentResponseSchema(BaseModel):
    """Schema for POST /v1/credit/adjustment response body."""

    new_limit: float = Field(
        ...,
        description="Limit after the adjustment; the caller must persist it",
        examples=[0.9],
    )
    adjustment: float = Field(
        ...,
        description="Signed change applied to the current limit",
        examples=[-0.1],
    )
    reason: str = Field(
        ...,
        examples=["Late repayment penalty (10 days)"],
    )


class RepaymentRequestSchema(BaseModel):
    """Schema for POST /v1/credit/repayment request body."""

    current_limit: float = Field(
        ...,
        gt=0,
        description="The caller's current credit limit",
    )
    amount: float = Field(
        ...,
        ge=0,
        description="Amount repaid in native units",
    )
    due_at: datetime = Field(
        ...,
        description="When the repayment was due",
    )
    paid_at: datetime = Field(
        ...,
        description="When the repayment was made",
    )


class RepaymentResponseSchema(BaseModel):
    """Schema for POST /v1/credit/repayment response body."""

    behavior_type: BehaviorType
    days_late: int = Field(..., ge=0)
    late_fee: float = Field(
        ...,
        ge=0,
        description="Late fee owed in native units",
    )
    new_limit: float
    adjustment: float
    reason: str
