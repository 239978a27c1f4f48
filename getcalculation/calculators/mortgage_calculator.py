"""
MORTGAGE_CALCULATOR: fixed-rate monthly payment.

    M = P * r(1 + r)^n / ((1 + r)^n - 1)

r is the monthly rate (annual / 100 / 12), n the number of monthly payments
and P the financed principal (loan amount minus down payment).
"""
from __future__ import annotations

from typing import Any, Dict, List

from getcalculation.calculators.base import (
    BaseCalculator,
    CalculationError,
    clean_number,
    format_number,
    is_empty,
    optional_number,
    to_number,
)
from getcalculation.config import CURRENCY_PRECISION

FORMULA = "M = P [ r(1 + r)^n ] / [ (1 + r)^n - 1 ]"


def monthly_payment(principal: float, annual_rate: float, years: float) -> float:
    """Amortized monthly payment; a 0% loan is repaid in equal instalments."""
    n = years * 12
    r = annual_rate / 100 / 12
    if r == 0:
        return principal / n
    growth = (1 + r) ** n
    return principal * (r * growth) / (growth - 1)


class MortgageCalculator(BaseCalculator):
    key = "MORTGAGE_CALCULATOR"
    name = "Mortgage Calculator"

    def preferred_sections(self, flat: Dict[str, Any]) -> List[str]:
        return ["mortgage-details"]

    def compute(self, values: Dict[str, Any]) -> Dict[str, Any]:
        if any(is_empty(values.get(k)) for k in ("loanAmount", "interestRate", "loanTerm")):
            raise CalculationError("Loan amount, interest rate, and loan term are required.")

        invalid = "Please enter valid numbers for all fields."
        loan_amount = to_number(values.get("loanAmount"))
        interest_rate = to_number(values.get("interestRate"))
        loan_term = to_number(values.get("loanTerm"))
        if loan_amount is None or interest_rate is None or loan_term is None:
            raise CalculationError(invalid)
        down_payment = optional_number(values.get("downPayment"), invalid, default=0.0)

        if loan_amount <= 0 or interest_rate < 0 or loan_term <= 0:
            raise CalculationError(
                "Loan amount and term must be positive, interest rate must be non-negative."
            )
        if down_payment < 0:
            raise CalculationError("Down payment cannot be negative.")

        principal = loan_amount - down_payment
        if principal <= 0:
            raise CalculationError("Down payment cannot be greater than or equal to loan amount.")

        number_of_payments = loan_term * 12
        monthly_rate = interest_rate / 100 / 12
        payment = monthly_payment(principal, interest_rate, loan_term)
        total_paid = payment * number_of_payments
        total_interest = total_paid - principal

        if monthly_rate == 0:
            calculation = (f"Monthly Payment = {format_number(principal)} / "
                           f"{format_number(number_of_payments)} = {format_number(payment, 2)}")
        else:
            r, n = format_number(monthly_rate, 8), format_number(number_of_payments)
            calculation = (f"Monthly Payment = {format_number(principal)} × [ {r}(1 + {r})^{n} ] / "
                           f"[ (1 + {r})^{n} - 1 ] = {format_number(payment, 2)}")

        money = CURRENCY_PRECISION
        return {
            "loanAmount": clean_number(loan_amount, money),
            "downPayment": clean_number(down_payment, money),
            "principal": clean_number(principal, money),
            "interestRate": interest_rate,
            "loanTerm": loan_term,
            "numberOfPayments": clean_number(number_of_payments),
            "monthlyPayment": clean_number(payment, money),
            "totalAmountPaid": clean_number(total_paid, money),
            "totalInterestPaid": clean_number(total_interest, money),
            "formula": FORMULA,
            "calculation": calculation,
        }


def calculate(inputs: Dict[str, Any], manifest: Any = None) -> Dict[str, Any]:
    return MortgageCalculator.run(inputs, manifest)
