"""
Unit Tests for the PayFi Credit Scoring Module.

These tests verify:
1. Cashflow metric calculations (inflow, repayment, volatility, frequency)
2. Credit limit model and its bounds
3. Assessment orchestration and reasoning text
4. Scoring settings validation

Test Categories:
- Test*Inflow / Test*Score / Test*Penalty: cashflow factor tests
- TestCreditLimit: limit model tests
- TestAssessment: end-to-end assessment tests
- TestScoringProperties: seeded randomized invariants
"""

import math
import random
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from payfi_credit.service.scoring.models import CashflowMetrics, ChainTransaction
from payfi_credit.service.scoring.settings import CreditSettings
from payfi_credit.service.scoring.cashflow import (
    partition_transactions,
    calculate_standard_deviation,
    calculate_avg_monthly_inflow,
    calculate_repayment_score,
    calculate_volatility_penalty,
    calculate_months_span,
    calculate_transaction_frequency,
    calculate_consistency_score,
    analyze_cashflow,
)
from payfi_credit.service.scoring.credit_limit import (
    calculate_credit_limit,
    clamp_credit_limit,
    get_credit_limit_bucket,
)
from payfi_credit.service.scoring.assessment import (
    assess_credit_limit,
    build_reasoning,
    format_timestamp,
)


# =============================================================================
# Test Fixtures
# =============================================================================

SUBJECT = "0xAbCdEf0000000000000000000000000000000001"
COUNTERPARTY = "0x2222222222222222222222222222222222222222"
BASE_TS = 1_700_000_000
DAY = 86400


def make_transaction(
    days_after: float,
    value: str,
    incoming: bool = True,
    is_error: bool = False,
    subject: str = SUBJECT,
) -> ChainTransaction:
    """Helper to create transfers relative to a fixed base timestamp."""
    return ChainTransaction(
        hash=f"0x{int(days_after * 1000):064x}",
        from_address=COUNTERPARTY if incoming else subject,
        to_address=subject if incoming else COUNTERPARTY,
        value=value,
        timestamp=BASE_TS + int(days_after * DAY),
        is_error=is_error,
        block_number=18_000_000 + int(days_after),
    )


def four_income_month() -> list[ChainTransaction]:
    """Four incoming transfers of 1.0 spread over exactly one month."""
    return [make_transaction(day, "1.0") for day in (0, 10, 20, 30)]


def random_history(rng: random.Random) -> list[ChainTransaction]:
    """Generate a random mix of incoming, outgoing and errored transfers."""
    transactions = []
    for _ in range(rng.randint(1, 60)):
        transactions.append(make_transaction(
            days_after=rng.uniform(0, 365),
            value=f"{rng.uniform(0, 5):.18f}",
            incoming=rng.random() < 0.6,
            is_error=rng.random() < 0.1,
        ))
    return transactions


# =============================================================================
# Model Tests
# =============================================================================

class TestChainTransaction:
    """Tests for ChainTransaction helpers."""

    def test_value_parsed_as_float(self):
        txn = make_transaction(0, "0.250000000000000000")
        assert txn.value_native == 0.25

    def test_unparsable_value_is_zero(self):
        """Malformed values count as zero rather than raising."""
        assert make_transaction(0, "not-a-number").value_native == 0.0
        assert make_transaction(0, "").value_native == 0.0

    @pytest.mark.parametrize("raw", ["-1", "-0.5", "NaN", "nan", "inf", "-Infinity", "1e400"])
    def test_negative_or_non_finite_value_is_zero(self, raw):
        assert make_transaction(0, raw).value_native == 0.0

    def test_direction_is_case_insensitive(self):
        txn = make_transaction(0, "1.0")
        assert txn.is_incoming_for(SUBJECT.lower())
        assert txn.is_incoming_for(SUBJECT.upper().replace("0X", "0x"))
        assert not txn.is_outgoing_for(SUBJECT)

    def test_errored_transaction_has_no_direction(self):
        txn = make_transaction(0, "1.0", is_error=True)
        assert not txn.is_incoming_for(SUBJECT)
        assert not txn.is_outgoing_for(SUBJECT)


# =============================================================================
# Cashflow Factor Tests
# =============================================================================

class TestPartition:
    """Tests for partition_transactions()."""

    def test_splits_by_direction(self):
        transactions = [
            make_transaction(0, "1.0", incoming=True),
            make_transaction(1, "0.5", incoming=False),
            make_transaction(2, "2.0", incoming=True),
        ]
        incoming, outgoing = partition_transactions(transactions, SUBJECT)
        assert len(incoming) == 2
        assert len(outgoing) == 1

    def test_errored_transactions_excluded(self):
        transactions = [
            make_transaction(0, "1.0", incoming=True, is_error=True),
            make_transaction(1, "0.5", incoming=False, is_error=True),
        ]
        incoming, outgoing = partition_transactions(transactions, SUBJECT)
        assert incoming == []
        assert outgoing == []

    def test_unrelated_transfers_excluded(self):
        stranger = make_transaction(0, "1.0", subject="0x" + "9" * 40)
        incoming, outgoing = partition_transactions([stranger], SUBJECT)
        assert incoming == []
        assert outgoing == []


class TestStandardDeviation:
    """Tests for calculate_standard_deviation()."""

    def test_population_standard_deviation(self):
        """Divides by N, not N-1."""
        assert calculate_standard_deviation([2, 4, 4, 4, 5, 5, 7, 9]) == 2.0

    def test_two_values(self):
        assert calculate_standard_deviation([1.0, 3.0]) == 1.0

    def test_empty(self):
        assert calculate_standard_deviation([]) == 0.0


class TestAvgMonthlyInflow:
    """Tests for calculate_avg_monthly_inflow()."""

    def test_four_transfers_make_one_month(self):
        assert calculate_avg_monthly_inflow([1.0, 1.0, 1.0, 1.0]) == 4.0

    def test_eight_transfers_make_two_months(self):
        assert calculate_avg_monthly_inflow([1.0] * 8) == 4.0

    def test_divisor_floored_at_one(self):
        """Fewer than four transfers still count as one month."""
        assert calculate_avg_monthly_inflow([0.5, 0.5]) == 1.0

    def test_no_inflow(self):
        assert calculate_avg_monthly_inflow([]) == 0.0

    def test_custom_baseline(self):
        settings = CreditSettings(inflow_transactions_per_month=2)
        assert calculate_avg_monthly_inflow([1.0] * 4, settings) == 2.0


class TestRepaymentScore:
    """Tests for calculate_repayment_score()."""

    def test_no_incoming_scores_zero(self):
        assert calculate_repayment_score(0, 5) == 0.0

    def test_ratio(self):
        assert calculate_repayment_score(4, 2) == 0.5

    def test_capped_at_one(self):
        assert calculate_repayment_score(2, 5) == 1.0


class TestVolatilityPenalty:
    """Tests for calculate_volatility_penalty()."""

    def test_no_incoming(self):
        assert calculate_volatility_penalty([]) == 0.0

    def test_zero_mean(self):
        assert calculate_volatility_penalty([0.0, 0.0]) == 0.0

    def test_constant_income(self):
        assert calculate_volatility_penalty([1.0, 1.0, 1.0]) == 0.0

    def test_coefficient_of_variation(self):
        # mean 2, population stddev 1
        assert calculate_volatility_penalty([1.0, 3.0]) == 0.5


class TestFrequencyAndConsistency:
    """Tests for span, frequency and consistency calculations."""

    def test_empty_span_is_one_month(self):
        assert calculate_months_span([]) == 1.0

    def test_span_in_thirty_day_months(self):
        transactions = [make_transaction(0, "1.0"), make_transaction(60, "1.0")]
        assert calculate_months_span(transactions) == 2.0

    def test_short_span_floored_at_one(self):
        transactions = [make_transaction(0, "1.0"), make_transaction(10, "1.0")]
        assert calculate_months_span(transactions) == 1.0

    def test_span_includes_errored_transactions(self):
        transactions = [
            make_transaction(0, "1.0"),
            make_transaction(90, "1.0", is_error=True),
        ]
        assert calculate_months_span(transactions) == 3.0

    def test_frequency(self):
        transactions = [make_transaction(day * 3, "1.0") for day in range(20)]
        transactions.append(make_transaction(60, "1.0"))
        # 21 transactions over 2 months
        assert calculate_transaction_frequency(transactions) == 10.5

    def test_frequency_of_empty_history(self):
        assert calculate_transaction_frequency([]) == 0.0

    def test_consistency_scales_to_reference_rate(self):
        assert calculate_consistency_score(5.0) == 0.5
        assert calculate_consistency_score(0.0) == 0.0

    def test_consistency_capped_at_one(self):
        assert calculate_consistency_score(25.0) == 1.0


class TestAnalyzeCashflow:
    """Tests for analyze_cashflow()."""

    def test_four_income_month(self):
        metrics = analyze_cashflow(four_income_month(), SUBJECT)

        assert metrics.avg_monthly_inflow == 4.0
        assert metrics.repayment_score == 0.0
        assert metrics.volatility_penalty == 0.0
        assert metrics.transaction_frequency == 4.0
        assert metrics.consistency_score == pytest.approx(0.4)

    def test_errored_transactions_only_affect_frequency(self):
        """Errored transfers count toward frequency but not inflow."""
        transactions = four_income_month() + [
            make_transaction(15, "100.0", is_error=True),
        ]
        metrics = analyze_cashflow(transactions, SUBJECT)

        assert metrics.avg_monthly_inflow == 4.0
        assert metrics.volatility_penalty == 0.0
        assert metrics.transaction_frequency == 5.0
        assert metrics.consistency_score == pytest.approx(0.5)

    def test_outgoing_raises_repayment_score(self):
        transactions = four_income_month() + [
            make_transaction(5, "0.3", incoming=False),
            make_transaction(25, "0.3", incoming=False),
        ]
        metrics = analyze_cashflow(transactions, SUBJECT)
        assert metrics.repayment_score == 0.5

    def test_address_case_ignored(self):
        upper = analyze_cashflow(four_income_month(), SUBJECT.upper().replace("0X", "0x"))
        lower = analyze_cashflow(four_income_month(), SUBJECT.lower())
        assert upper == lower

    def test_empty_history_is_finite(self):
        metrics = analyze_cashflow([], SUBJECT)
        assert metrics == CashflowMetrics.zero()

    @pytest.mark.parametrize("raw", ["inf", "NaN", "-1"])
    def test_bad_values_count_as_zero_value_transfers(self, raw):
        """A poisoned value scores like a zero-value transfer."""
        poisoned = four_income_month() + [make_transaction(15, raw)]
        zeroed = four_income_month() + [make_transaction(15, "0")]

        metrics = analyze_cashflow(poisoned, SUBJECT)
        result = assess_credit_limit(poisoned, SUBJECT)

        assert metrics == analyze_cashflow(zeroed, SUBJECT)
        assert all(math.isfinite(v) and v >= 0 for v in metrics.to_dict().values())
        reasoning = "\n".join(result.reasoning)
        assert "nan" not in reasoning
        assert "inf ETH" not in reasoning
        assert "inf%" not in reasoning

    def test_only_errored_history_is_finite(self):
        transactions = [make_transaction(0, "1.0", is_error=True)]
        metrics = analyze_cashflow(transactions, SUBJECT)

        assert metrics.avg_monthly_inflow == 0.0
        assert metrics.repayment_score == 0.0
        assert metrics.volatility_penalty == 0.0
        assert metrics.transaction_frequency == 1.0


# =============================================================================
# Credit Limit Tests
# =============================================================================

class TestCreditLimit:
    """Tests for calculate_credit_limit()."""

    def test_zero_inflow_returns_floor(self):
        metrics = CashflowMetrics(
            avg_monthly_inflow=0.0,
            repayment_score=1.0,
            volatility_penalty=0.0,
            transaction_frequency=20.0,
            consistency_score=1.0,
        )
        assert calculate_credit_limit(metrics) == 0.001

    def test_four_income_month_formula(self):
        """4.0 * 1.5 * 0.5 * (0.7 + 0.4 * 0.3) * 1.0"""
        metrics = analyze_cashflow(four_income_month(), SUBJECT)
        assert calculate_credit_limit(metrics) == pytest.approx(2.46)

    def test_perfect_metrics(self):
        metrics = CashflowMetrics(
            avg_monthly_inflow=2.0,
            repayment_score=1.0,
            volatility_penalty=0.0,
            transaction_frequency=10.0,
            consistency_score=1.0,
        )
        assert calculate_credit_limit(metrics) == pytest.approx(3.0)

    def test_capped_at_maximum(self):
        metrics = CashflowMetrics(
            avg_monthly_inflow=100.0,
            repayment_score=1.0,
            volatility_penalty=0.0,
            transaction_frequency=10.0,
            consistency_score=1.0,
        )
        assert calculate_credit_limit(metrics) == 10.0

    def test_stability_factor_floor(self):
        """Extreme volatility halves the limit at most."""
        calm = CashflowMetrics(2.0, 1.0, 0.0, 10.0, 1.0)
        wild = CashflowMetrics(2.0, 1.0, 5.0, 10.0, 1.0)
        assert calculate_credit_limit(wild) == pytest.approx(calculate_credit_limit(calm) * 0.5)

    def test_volatility_reduces_limit(self):
        metrics = CashflowMetrics(2.0, 1.0, 1.0, 10.0, 1.0)
        # 3.0 * (1 - 0.3)
        assert calculate_credit_limit(metrics) == pytest.approx(2.1)

    def test_custom_cap(self):
        settings = CreditSettings(max_credit_limit=1.0)
        metrics = CashflowMetrics(2.0, 1.0, 0.0, 10.0, 1.0)
        assert calculate_credit_limit(metrics, settings) == 1.0

    def test_clamp(self):
        assert clamp_credit_limit(-5.0) == 0.001
        assert clamp_credit_limit(0.5) == 0.5
        assert clamp_credit_limit(50.0) == 10.0


class TestCreditLimitBucket:
    """Tests for get_credit_limit_bucket()."""

    @pytest.mark.parametrize("limit,bucket", [
        (0.001, "min"),
        (0.005, "<0.01"),
        (0.01, "0.01-0.1"),
        (0.5, "0.1-1"),
        (2.46, "1-5"),
        (7.0, "5-10"),
        (10.0, "max"),
        (10.5, "max"),
    ])
    def test_buckets(self, limit, bucket):
        assert get_credit_limit_bucket(limit) == bucket


# =============================================================================
# Assessment Tests
# =============================================================================

FIXED_NOW = datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)


class TestAssessment:
    """Tests for assess_credit_limit()."""

    def test_empty_history_gets_starter_credit(self):
        result = assess_credit_limit([], SUBJECT, now=FIXED_NOW)

        assert result.credit_limit == 0.01
        assert result.transaction_count == 0
        assert result.metrics == CashflowMetrics.zero()
        assert result.reasoning == [
            "No transaction history found",
            "Assigned minimum starter credit of 0.01 ETH",
            "Build history to increase limit",
        ]

    def test_starter_credit_differs_from_formula_floor(self):
        assert assess_credit_limit([], SUBJECT).credit_limit != calculate_credit_limit(
            CashflowMetrics.zero()
        )

    def test_scored_reasoning(self):
        result = assess_credit_limit(four_income_month(), SUBJECT, now=FIXED_NOW)

        assert result.credit_limit == pytest.approx(2.46)
        assert result.transaction_count == 4
        assert result.reasoning == [
            "Analyzed 4 Sepolia transactions",
            "Average monthly inflow: 4.000000 ETH",
            "Repayment behavior score: 0.0%",
            "Transaction consistency: 40.0%",
            "Volatility adjustment: 0.0%",
            "Calculated credit limit: 2.460000 ETH",
        ]

    def test_transaction_count_includes_errored(self):
        transactions = four_income_month() + [
            make_transaction(15, "100.0", is_error=True),
        ]
        result = assess_credit_limit(transactions, SUBJECT)

        assert result.transaction_count == 5
        # 4.0 * 1.5 * 0.5 * (0.7 + 0.5 * 0.3)
        assert result.credit_limit == pytest.approx(2.55)

    def test_analysis_timestamp_format(self):
        result = assess_credit_limit(four_income_month(), SUBJECT, now=FIXED_NOW)
        assert result.analysis_timestamp == "2024-01-02T03:04:05.678Z"

    def test_naive_timestamp_treated_as_utc(self):
        assert format_timestamp(datetime(2024, 1, 2, 3, 4, 5)) == "2024-01-02T03:04:05.000Z"

    def test_default_timestamp_is_utc(self):
        assert assess_credit_limit([], SUBJECT).analysis_timestamp.endswith("Z")

    def test_custom_network_labels(self):
        settings = CreditSettings(network_name="Holesky", native_symbol="hETH")
        metrics = analyze_cashflow(four_income_month(), SUBJECT, settings)
        reasoning = build_reasoning(metrics, 2.46, 4, settings)

        assert reasoning[0] == "Analyzed 4 Holesky transactions"
        assert reasoning[-1] == "Calculated credit limit: 2.460000 hETH"

    def test_to_dict(self):
        data = assess_credit_limit(four_income_month(), SUBJECT, now=FIXED_NOW).to_dict()

        assert data["transaction_count"] == 4
        assert data["metrics"]["avg_monthly_inflow"] == 4.0
        assert len(data["reasoning"]) == 6


# =============================================================================
# Randomized Invariants
# =============================================================================

class TestScoringProperties:
    """Seeded randomized checks of the scoring invariants."""

    @pytest.mark.parametrize("seed", range(25))
    def test_limit_within_bounds(self, seed):
        rng = random.Random(seed)
        for _ in range(20):
            metrics = CashflowMetrics(
                avg_monthly_inflow=rng.uniform(0, 50),
                repayment_score=rng.random(),
                volatility_penalty=rng.uniform(0, 10),
                transaction_frequency=rng.uniform(0, 40),
                consistency_score=rng.random(),
            )
            assert 0.001 <= calculate_credit_limit(metrics) <= 10.0

    @pytest.mark.parametrize("seed", range(25))
    def test_scores_within_unit_interval(self, seed):
        transactions = random_history(random.Random(seed))
        metrics = analyze_cashflow(transactions, SUBJECT)

        assert 0.0 <= metrics.repayment_score <= 1.0
        assert 0.0 <= metrics.consistency_score <= 1.0
        assert metrics.avg_monthly_inflow >= 0.0
        assert metrics.volatility_penalty >= 0.0
        assert metrics.transaction_frequency >= 0.0

    @pytest.mark.parametrize("seed", range(10))
    def test_analysis_is_deterministic(self, seed):
        transactions = random_history(random.Random(seed))
        assert analyze_cashflow(transactions, SUBJECT) == analyze_cashflow(transactions, SUBJECT)

    @pytest.mark.parametrize("seed", range(10))
    def test_assessment_bounded(self, seed):
        transactions = random_history(random.Random(seed))
        result = assess_credit_limit(transactions, SUBJECT)

        assert 0.001 <= result.credit_limit <= 10.0
        assert result.transaction_count == len(transactions)
        assert len(result.reasoning) == 6


# =============================================================================
# Settings Tests
# =============================================================================

class TestCreditSettings:
    """Tests for CreditSettings validation."""

    def test_defaults(self):
        settings = CreditSettings()
        assert settings.min_credit_limit == 0.001
        assert settings.max_credit_limit == 10.0
        assert settings.starter_credit_limit == 0.01

    def test_min_above_max_rejected(self):
        with pytest.raises(ValidationError):
            CreditSettings(min_credit_limit=1.0, max_credit_limit=0.5)

    def test_starter_outside_bounds_rejected(self):
        with pytest.raises(ValidationError):
            CreditSettings(starter_credit_limit=20.0)

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("CREDIT_MAX_CREDIT_LIMIT", "5.0")
        assert CreditSettings().max_credit_limit == 5.0
