"""
Credit Settings for the PayFi credit engine.

This module contains every policy constant used by the cashflow analyzer,
the credit limit calculator and the behavior adjustment rules. They can be
adjusted via environment variables for experiments or per-network tuning.

Environment variables use the CREDIT_ prefix:
    CREDIT_MAX_CREDIT_LIMIT=10.0
    CREDIT_INFLOW_MULTIPLIER=1.5
    CREDIT_NATIVE_SYMBOL=ETH

Usage:
    from payfi_credit.service.scoring.settings import credit_settings

    # Use default settings (loaded from env)
    cap = credit_settings.max_credit_limit

    # Or create custom settings for testing
    custom = CreditSettings(max_credit_limit=5.0)

All limits are denominated in the chain's native unit (e.g. ETH).
"""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CreditSettings(BaseSettings):
    """
    Configurable parameters for the credit scoring heuristic.

    All settings can be overridden via environment variables with CREDIT_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="CREDIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Presentation ===
    network_name: str = Field(
        default="Sepolia",
        description="Network name used in reasoning text",
    )
    native_symbol: str = Field(
        default="ETH",
        description="Native token symbol used in reasoning text",
    )

    # === Limit Bounds ===
    min_credit_limit: float = Field(
        default=0.001,
        gt=0.0,
        description="Hard floor for any computed or adjusted limit",
    )
    max_credit_limit: float = Field(
        default=10.0,
        gt=0.0,
        description="Hard cap for assessed limits (not applied to adjustments)",
    )
    starter_credit_limit: float = Field(
        default=0.01,
        gt=0.0,
        description="Limit assigned to wallets with no transaction history",
    )

    # === Cashflow Normalization ===
    inflow_transactions_per_month: float = Field(
        default=4.0,
        gt=0.0,
        description="Incoming transfers assumed per month when averaging inflow",
    )
    seconds_per_month: int = Field(
        default=30 * 86400,
        gt=0,
        description="Length of a month when normalizing transaction frequency",
    )
    consistency_reference_rate: float = Field(
        default=10.0,
        gt=0.0,
        description="Transactions per month considered fully consistent",
    )

    # === Limit Model ===
    inflow_multiplier: float = Field(
        default=1.5,
        gt=0.0,
        description="Base limit as a multiple of average monthly inflow",
    )
    repayment_floor: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Repayment multiplier when repayment score is 0",
    )
    repayment_weight: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Repayment multiplier added at repayment score 1",
    )
    consistency_floor: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Consistency multiplier when consistency score is 0",
    )
    consistency_weight: float = Field(
        default=0.3,
        ge=0.0,
        le=1.0,
        description="Consistency multiplier added at consistency score 1",
    )
    volatility_weight: float = Field(
        default=0.3,
        ge=0.0,
        description="Stability lost per unit of volatility penalty",
    )
    stability_floor: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Lowest stability factor a volatile income can receive",
    )

    # === Behavior Adjustment ===
    early_repay_bonus: float = Field(
        default=0.05,
        ge=0.0,
        description="Fraction of the current limit added on early repayment",
    )
    late_penalty_per_day: float = Field(
        default=0.01,
        ge=0.0,
        description="Fraction of the current limit removed per day late",
    )
    late_penalty_cap: float = Field(
        default=0.15,
        ge=0.0,
        le=1.0,
        description="Maximum fraction removed for a late repayment",
    )
    missed_repay_penalty: float = Field(
        default=0.20,
        ge=0.0,
        le=1.0,
        description="Fraction of the current limit removed on a missed repayment",
    )

    # === Repayment Classification ===
    late_fee_daily_rate: float = Field(
        default=0.05,
        ge=0.0,
        description="Late fee charged per day as a fraction of the repaid amount",
    )
    default_after_days: int = Field(
        default=7,
        ge=0,
        description="Repayments later than this many days count as missed",
    )

    @model_validator(mode="after")
    def validate_limit_bounds(self) -> "CreditSettings":
        """Ensure min <= starter <= max."""
        if self.min_credit_limit > self.max_credit_limit:
            raise ValueError(
                f"min_credit_limit ({self.min_credit_limit}) > "
                f"max_credit_limit ({self.max_credit_limit})"
            )
        if not self.min_credit_limit <= self.starter_credit_limit <= self.max_credit_limit:
            raise ValueError(
                f"starter_credit_limit ({self.starter_credit_limit}) must lie within "
                f"[{self.min_credit_limit}, {self.max_credit_limit}]"
            )
        return self


@lru_cache
def get_credit_settings() -> CreditSettings:
    """Get cached credit settings instance."""
    return CreditSettings()


credit_settings = get_credit_settings()
