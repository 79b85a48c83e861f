from mortgagebroker.models.tools import CalculatorResult
from mortgagebroker.utils.logger import LoggerMixin, get_logger


def format_currency(value: float) -> str:
    """Format a dollar amount the way the widget displays it, e.g. $1,896.20"""
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


class MortgageCalculationService(LoggerMixin):
    """Service to handle mortgage payment estimates"""

    @classmethod
    def calculate_monthly_payment(
        cls, loan_amount: float, rate: float, term_years: int
    ) -> float:
        """Standard amortization payment for an annual percentage rate"""
        monthly_rate = rate / 100 / 12
        total_payments = term_years * 12

        if monthly_rate == 0:
            return loan_amount / total_payments

        factor = (1 + monthly_rate) ** total_payments
        return loan_amount * monthly_rate * factor / (factor - 1)

    @classmethod
    def estimate(
        cls, loan_amount: float, rate: float, term_years: int
    ) -> CalculatorResult:
        """Estimate payment, total paid and total interest for a fixed-rate loan"""
        logger = get_logger(__name__)

        if loan_amount <= 0 or term_years <= 0:
            logger.error(
                "Invalid loan parameters",
                loan_amount=loan_amount,
                term_years=term_years,
            )
            raise ValueError("Loan amount and term must be positive")

        monthly_payment = cls.calculate_monthly_payment(loan_amount, rate, term_years)
        total_payments = term_years * 12
        total_paid = monthly_payment * total_payments
        total_interest = total_paid - loan_amount

        logger.info(
            "Payment estimate calculated",
            loan_amount=loan_amount,
            rate=rate,
            term_years=term_years,
            monthly_payment=monthly_payment,
        )

        return CalculatorResult(
            monthly_payment=round(monthly_payment, 2),
            total_paid=round(total_paid, 2),
            total_interest=round(total_interest, 2),
            payoff_date_months=total_payments,
        )

    @classmethod
    def describe(cls, result: CalculatorResult, rate: float, term_years: int) -> str:
        return (
            f"Estimated payment is {format_currency(result.monthly_payment)} "
            f"for {term_years} years with {rate:g}% interest."
        )
