"""Amortization math and monthly installment schedules"""

from datetime import date
from typing import List
from techscale_underwriting.domain.exceptions import InvalidLoanTermsError
from techscale_underwriting.domain.models import Installment
from techscale_underwriting.utils.date_utils import add_months
from techscale_underwriting.utils.numbers import round_half_up


def amortized_payment(principal: float, apr: float, term_months: int) -> float:
    """
    Level monthly payment for a fully amortizing loan.

        payment = P × r × (1+r)^n / ((1+r)^n − 1),  r = APR / 100 / 12

    Edge cases:
    - term_months <= 0 or apr < 0 → InvalidLoanTermsError
    - principal <= 0 → 0.0 (nothing to repay)
    - apr == 0 → straight-line principal / n
    """
    if term_months <= 0:
        raise InvalidLoanTermsError(f"Repayment term must be positive, got {term_months} months")
    if apr < 0:
        raise InvalidLoanTermsError(f"APR cannot be negative, got {apr}")
    if principal <= 0:
        return 0.0

    monthly_rate = apr / 100 / 12
    if monthly_rate == 0:
        return principal / term_months

    growth = (1 + monthly_rate) ** term_months
    return principal * monthly_rate * growth / (growth - 1)


def generate_amortization_schedule(
    principal: float,
    apr: float,
    term_months: int,
    monthly_payment: float,
    first_payment_date: date,
) -> List[Installment]:
    """
    Split a loan into monthly installments.

    Requirements:
    - One installment per month starting at first_payment_date
    - Interest accrues on the outstanding balance, rounded to pence
    - Last installment absorbs the rounding remainder so principal repaid
      sums exactly to the financed amount

    Example:
        £10,000 at 8.5% over 36 months with a £316 payment
        → 35 × £316.00, then a smaller final installment clearing the balance
    """
    if principal <= 0 or monthly_payment <= 0:
        return []
    if term_months <= 0:
        raise InvalidLoanTermsError(f"Repayment term must be positive, got {term_months} months")

    monthly_rate = apr / 100 / 12
    balance = round_half_up(principal, 2)
    installments = []

    for i in range(term_months):
        interest = round_half_up(balance * monthly_rate, 2)
        principal_part = round_half_up(monthly_payment - interest, 2)

        # Last installment (or an overshooting one) clears whatever is left
        if i == term_months - 1 or principal_part >= balance:
            principal_part = balance

        balance = round_half_up(balance - principal_part, 2)
        installments.append(
            Installment(
                due_date=add_months(first_payment_date, i),
                amount=round_half_up(principal_part + interest, 2),
                principal=principal_part,
                interest=interest,
                remaining_balance=balance,
            )
        )

        if balance <= 0:
            break

    return installments
