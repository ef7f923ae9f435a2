"""Unified plan calculator.

Runs every calculator over one state snapshot in dependency order:

1. Net income breakdown
2. Cash flow allocation and surplus
3. Mortgage simulation (skipped when renting)
4. Net worth / FIRE projection fed by the surplus
"""

from typing import Optional

from calc.cash_flow import CashFlowCalculator
from calc.mortgage_calculator import MortgageCalculator
from calc.net_income import NetIncomeCalculator, calculate_surplus
from calc.net_worth_calculator import NetWorthCalculator
from model.AppState import AppState
from model.Results import PlanReport
from tax.IncomeTaxDetails import IncomeTaxDetails
from tax.LevyDetails import LevyDetails


class PlanCalculator:
    """Calculator that builds a complete PlanReport.

    Holds no state between calls; every call recomputes from the snapshot.
    """

    def __init__(self,
                 income_tax: IncomeTaxDetails,
                 levies: LevyDetails,
                 respect_tax_treatment: bool = False,
                 mortgage_calculator: Optional[MortgageCalculator] = None):
        self.net_income_calculator = NetIncomeCalculator(income_tax, levies, respect_tax_treatment)
        self.cash_flow_calculator = CashFlowCalculator()
        self.mortgage_calculator = mortgage_calculator or MortgageCalculator()
        self.net_worth_calculator = NetWorthCalculator(self.mortgage_calculator)

    def calculate(self, state: AppState) -> PlanReport:
        breakdown = self.net_income_calculator.calculate(state)
        surplus = calculate_surplus(state, breakdown)
        cash_flow = self.cash_flow_calculator.calculate(state, breakdown.net_cash_position)

        mortgage = None
        if not state.user_settings.is_renting:
            mortgage = self.mortgage_calculator.calculate(state)

        net_worth = self.net_worth_calculator.calculate(state, surplus)

        return PlanReport(
            breakdown=breakdown,
            cash_flow=cash_flow,
            surplus=surplus,
            mortgage=mortgage,
            net_worth=net_worth,
        )
