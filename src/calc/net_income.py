from typing import Optional

from calc.frequency import to_annual
from model.AppState import AppState, TaxTreatment
from model.Results import IncomeStreamAnnual, NetIncomeBreakdown
from tax.IncomeTaxDetails import IncomeTaxDetails
from tax.LevyDetails import LevyDetails


class NetIncomeCalculator:
    """Calculator that turns a state snapshot into an annual income statement.

    Pass hydrated `IncomeTaxDetails` and `LevyDetails` instances into the
    constructor. This keeps file I/O in the caller (e.g. `Program.py`) and
    makes the calculation logic easy to unit test.
    """

    def __init__(self, income_tax: IncomeTaxDetails, levies: LevyDetails,
                 respect_tax_treatment: bool = False):
        """
        Args:
            income_tax: Bracket provider.
            levies: Medicare, surcharge and loan repayment provider.
            respect_tax_treatment: When False (default) income tax is always
                computed as if the tax-free threshold is claimed. When True the
                threshold is claimed only if a taxable stream is flagged 'tft'.
        """
        self.income_tax = income_tax
        self.levies = levies
        self.respect_tax_treatment = respect_tax_treatment

    def claims_threshold(self, state: AppState) -> bool:
        if not self.respect_tax_treatment:
            return True
        return any(inc.is_taxable and inc.tax_treatment == TaxTreatment.THRESHOLD_CLAIMED
                   for inc in state.incomes)

    def calculate(self, state: AppState) -> NetIncomeBreakdown:
        settings = state.user_settings
        result = NetIncomeBreakdown()

        # Annualize every stream; packaging, sacrifice and admin fee share the stream's frequency
        for inc in state.incomes:
            row = IncomeStreamAnnual(
                id=inc.id,
                name=inc.name,
                is_taxable=inc.is_taxable,
                gross=to_annual(inc.amount, inc.freq_value, inc.freq_unit),
                packaging=to_annual(inc.salary_packaging, inc.freq_value, inc.freq_unit),
                sacrifice=to_annual(inc.salary_sacrifice, inc.freq_value, inc.freq_unit),
                admin_fee=to_annual(inc.admin_fee, inc.freq_value, inc.freq_unit),
            )
            row.super_contribution = row.gross * (inc.super_rate / 100) + row.sacrifice
            result.streams.append(row)

            if row.is_taxable:
                result.taxable_gross += row.gross
            else:
                result.tax_free_income += row.gross
            result.total_packaging += row.packaging
            result.total_sacrifice += row.sacrifice
            result.total_admin_fees += row.admin_fee
            result.total_super += row.super_contribution

        result.total_gross_cash = result.taxable_gross + result.tax_free_income
        result.total_other_deductions = sum(d.amount for d in state.deductions)

        result.taxable_income = max(0.0, result.taxable_gross
                                    - result.total_packaging
                                    - result.total_sacrifice
                                    - result.total_admin_fees
                                    - result.total_other_deductions)

        result.claims_threshold = self.claims_threshold(state)
        result.base_tax = self.income_tax.calculate_tax(
            result.taxable_income, settings.is_resident, result.claims_threshold)
        result.marginal_rate = self.income_tax.marginal_rate(
            result.taxable_income, settings.is_resident, result.claims_threshold)

        # Surcharge and loan repayment tiers are tested against income with fringe benefits added back
        result.adjusted_taxable_income = self.levies.adjusted_taxable_income(
            result.taxable_income, result.total_packaging)
        result.medicare = self.levies.medicare_levy(result.taxable_income, settings.is_resident)
        result.mls = self.levies.medicare_levy_surcharge(
            result.taxable_income, result.adjusted_taxable_income,
            settings.is_resident, settings.has_private_health)
        result.hecs_equivalent = self.levies.loan_repayment(
            result.adjusted_taxable_income, settings.has_hecs_debt)

        result.total_tax_bill = result.base_tax + result.medicare + result.mls + result.hecs_equivalent

        result.net_salary = (result.taxable_gross
                             - result.total_tax_bill
                             - result.total_admin_fees
                             - result.total_sacrifice
                             - result.total_packaging)
        result.bank_take_home = result.net_salary + result.tax_free_income
        # Packaged salary still pays for living costs, so it counts toward the cash position
        result.net_cash_position = result.bank_take_home + result.total_packaging
        return result


def total_annual_expenses(state: AppState, include_mortgage: bool = True) -> float:
    """Sum of every expense, annualized."""
    return sum(to_annual(e.amount, e.freq_value, e.freq_unit)
               for e in state.expenses
               if include_mortgage or not e.is_mortgage_link)


def calculate_surplus(state: AppState, breakdown: Optional[NetIncomeBreakdown] = None,
                      calculator: Optional[NetIncomeCalculator] = None) -> float:
    """Annual cash left after all budgeted expenses, floored at 0.

    Either a precomputed breakdown or a calculator to produce one must be given.
    """
    if breakdown is None:
        if calculator is None:
            raise ValueError("calculate_surplus needs a breakdown or a NetIncomeCalculator")
        breakdown = calculator.calculate(state)
    return max(0.0, breakdown.net_cash_position - total_annual_expenses(state))
