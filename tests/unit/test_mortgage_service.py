"""Unit tests for the mortgage calculation service."""

import pytest

from mortgagebroker.services.mortgage_service import (
    MortgageCalculationService,
    format_currency,
)


class TestMortgageCalculationService:
    """Test cases for mortgage calculation service."""

    def test_calculate_monthly_payment(self):
        """Test amortized payment calculation."""
        # Test case 1: 30 year loan at 6.5%
        payment = MortgageCalculationService.calculate_monthly_payment(
            300000, 6.5, 30
        )
        assert payment == pytest.approx(1896.20, abs=0.01)

        # Test case 2: 15 year loan at 5%
        payment_15 = MortgageCalculationService.calculate_monthly_payment(
            200000, 5.0, 15
        )
        assert payment_15 == pytest.approx(1581.59, abs=0.01)

        # Test case 3: Zero interest spreads principal evenly
        payment_zero = MortgageCalculationService.calculate_monthly_payment(
            120000, 0, 10
        )
        assert payment_zero == pytest.approx(1000.0)

    def test_estimate(self):
        """Test the full payment estimate."""
        result = MortgageCalculationService.estimate(300000, 6.5, 30)

        assert result.monthly_payment == pytest.approx(1896.20, abs=0.01)
        assert result.payoff_date_months == 360
        assert result.total_paid == pytest.approx(1896.204 * 360, abs=1.0)
        assert result.total_interest == pytest.approx(
            result.total_paid - 300000, abs=0.01
        )

    def test_estimate_rejects_invalid_inputs(self):
        """Test that non-positive amounts and terms are rejected."""
        with pytest.raises(ValueError):
            MortgageCalculationService.estimate(0, 6.5, 30)

        with pytest.raises(ValueError):
            MortgageCalculationService.estimate(300000, 6.5, 0)

    def test_describe(self):
        """Test the human readable description."""
        result = MortgageCalculationService.estimate(300000, 6.5, 30)

        description = MortgageCalculationService.describe(result, 6.5, 30)

        assert description == (
            "Estimated payment is $1,896.20 for 30 years with 6.5% interest."
        )

    def test_format_currency(self):
        assert format_currency(1896.2) == "$1,896.20"
        assert format_currency(-25) == "-$25.00"
