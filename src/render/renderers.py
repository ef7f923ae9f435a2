"""Renderer classes for displaying financial planning results.

This module contains renderer classes that handle the presentation logic
for the different reports. Each renderer takes the unified PlanReport
structure and prints the part it needs.
"""

from abc import ABC, abstractmethod
from typing import List

from calc.frequency import FrequencyUnit, from_annual
from model.Results import PlanReport


def format_table_header(columns: List[tuple], year_width: int = 6) -> tuple[str, str]:
    """Format a single-line table header.

    Args:
        columns: List of (header_text, width) tuples for each column
        year_width: Width of the Year column (default 6)

    Returns:
        Tuple of (header line, separator line)
    """
    header_line = f"  {'Year':<{year_width}}"
    sep_line = f"  {'-' * year_width}"
    for header, width in columns:
        header_line += f" {header:>{width}}"
        sep_line += f" {'-' * width}"
    return header_line, sep_line


def format_years(years: float) -> str:
    return "never" if years is None else f"{years} yrs"


class BaseRenderer(ABC):
    """Abstract base class for all renderers."""

    @abstractmethod
    def render(self, data: PlanReport) -> None:
        """Render the data to output.

        Args:
            data: The PlanReport for one profile
        """
        pass


class NetIncomeRenderer(BaseRenderer):
    """Renderer for the income statement, from gross pay to net cash position."""

    def __init__(self, period: FrequencyUnit = FrequencyUnit.YEAR):
        """Initialize with the display period.

        Args:
            period: Frequency the annual amounts are converted to before printing
        """
        self.period = period

    def _line(self, label: str, annual: float) -> None:
        print(f"  {label:<40} ${from_annual(annual, self.period):>14,.2f}")

    def render(self, data: PlanReport) -> None:
        b = data.breakdown

        print()
        print("=" * 60)
        print(f"{'NET INCOME (PER ' + self.period.label.upper() + ')':^60}")
        print("=" * 60)

        print()
        print("-" * 60)
        print("INCOME")
        print("-" * 60)
        for stream in b.streams:
            suffix = "" if stream.is_taxable else " (tax-free)"
            self._line(f"{stream.name}{suffix}:", stream.gross)
        print(f"  {'-' * 40}")
        self._line("Total Gross Income:", b.total_gross_cash)

        print()
        print("-" * 60)
        print("PRE-TAX DEDUCTIONS")
        print("-" * 60)
        self._line("Salary Packaging:", b.total_packaging)
        self._line("Salary Sacrifice:", b.total_sacrifice)
        self._line("Packaging Admin Fees:", b.total_admin_fees)
        if b.total_other_deductions > 0:
            self._line("Other Deductions:", b.total_other_deductions)
        print(f"  {'-' * 40}")
        self._line("Taxable Income:", b.taxable_income)

        print()
        print("-" * 60)
        print("TAX")
        print("-" * 60)
        self._line("Income Tax:", b.base_tax)
        self._line("Medicare Levy:", b.medicare)
        if b.mls > 0:
            self._line("Medicare Levy Surcharge:", b.mls)
        if b.hecs_equivalent > 0:
            self._line("HELP/HECS Repayment:", b.hecs_equivalent)
        print(f"  {'-' * 40}")
        self._line("Total Tax Bill:", b.total_tax_bill)
        print(f"  {'Marginal Rate:':<40} {b.marginal_rate:>15.2%}")
        if not b.claims_threshold:
            print("  Tax-free threshold not claimed (flat rate applied)")

        print()
        print("=" * 60)
        print("SUMMARY")
        print("=" * 60)
        self._line("Net Salary:", b.net_salary)
        if b.tax_free_income > 0:
            self._line("Tax-Free Income:", b.tax_free_income)
        self._line("Bank Take Home:", b.bank_take_home)
        self._line("Net Cash Position:", b.net_cash_position)
        self._line("Superannuation:", b.total_super)
        print("=" * 60)
        print()


class CashFlowRenderer(BaseRenderer):
    """Renderer for expense categories, account allocations and surplus."""

    def __init__(self, period: FrequencyUnit = FrequencyUnit.MONTH):
        self.period = period

    def render(self, data: PlanReport) -> None:
        cf = data.cash_flow
        per = lambda annual: from_annual(annual, self.period)

        print()
        print("=" * 60)
        print(f"{'CASH FLOW (PER ' + self.period.label.upper() + ')':^60}")
        print("=" * 60)
        print(f"  {'Net Cash Position:':<40} ${per(cf.net_cash_position):>14,.2f}")

        print()
        print("-" * 60)
        print("EXPENSES BY CATEGORY")
        print("-" * 60)
        for cat in sorted(cf.categories, key=lambda c: c.annual, reverse=True):
            print(f"  {cat.category + ':':<40} ${per(cat.annual):>14,.2f}")
        print(f"  {'-' * 40}")
        print(f"  {'Total Expenses:':<40} ${per(cf.total_expenses):>14,.2f}")

        if cf.accounts:
            print()
            print("-" * 60)
            print("ACCOUNTS")
            print("-" * 60)
            for acct in cf.accounts:
                print(f"  {acct.name + ':':<40} ${per(acct.annual):>14,.2f}")
            if cf.unmapped_categories:
                print(f"  Unmapped categories: {', '.join(cf.unmapped_categories)}")

        print()
        print("=" * 60)
        print(f"  {'SURPLUS:':<40} ${per(cf.surplus):>14,.2f}")
        print("=" * 60)
        print()


class MortgageRenderer(BaseRenderer):
    """Renderer for the amortization schedule under minimum and actual repayments."""

    def render(self, data: PlanReport) -> None:
        sim = data.mortgage
        if sim is None:
            print("No mortgage (renting)")
            return

        print()
        print("=" * 100)
        print(f"{'MORTGAGE SIMULATION':^100}")
        print("=" * 100)
        print(f"  {'Repayments per Year:':<40} {sim.periods_per_year:>15}")
        print(f"  {'Minimum Repayment:':<40} ${sim.min_repayment:>14,.2f}")
        print(f"  {'Actual Repayment:':<40} ${sim.actual_repayment:>14,.2f}")
        print(f"  {'Budgeted Repayment:':<40} ${sim.budget_repayment:>14,.2f}")
        print(f"  {'Paid Off (actual):':<40} {format_years(sim.payoff_actual):>15}")
        print(f"  {'Paid Off (minimum):':<40} {format_years(sim.payoff_standard):>15}")
        if sim.is_below_interest:
            print(f"  WARNING: repayment is below the first period's interest (${sim.first_period_interest:,.2f}); the balance will grow")
        elif sim.is_budget_below_min:
            print("  Note: budgeted repayment is below the minimum repayment")
        print()

        columns = [
            ("Min Balance", 16),
            ("Actual Balance", 16),
            ("Property", 16),
            ("Equity", 16),
            ("Ahead By", 14),
        ]
        header_line, sep_line = format_table_header(columns)
        print(header_line)
        print(sep_line)
        for row in sim.data:
            print(f"  {row.year:<6} ${row.balance_standard:>15,.0f} ${row.balance_actual:>15,.0f} ${row.property:>15,.0f} ${row.equity:>15,.0f} ${row.redraw:>13,.0f}")
        print()


class NetWorthRenderer(BaseRenderer):
    """Renderer for the 30-year net worth projection against the FIRE target."""

    def render(self, data: PlanReport) -> None:
        nw = data.net_worth

        print()
        print("=" * 90)
        print(f"{'NET WORTH PROJECTION':^90}")
        print("=" * 90)
        print(f"  {'Current Net Worth:':<40} ${nw.current_net_worth:>14,.2f}")
        print(f"  {'FIRE Target:':<40} ${nw.fire_target:>14,.2f}")
        print(f"  {'Wealth Velocity (per year):':<40} ${nw.velocity:>14,.2f}")
        fire_year = "not within 30 years" if nw.fire_year is None else f"year {nw.fire_year}"
        print(f"  {'Financial Independence:':<40} {fire_year:>15}")
        print()

        columns = [
            ("Net Worth", 16),
            ("FIRE Target", 16),
            ("Mortgage", 16),
            ("Property", 16),
        ]
        header_line, sep_line = format_table_header(columns)
        print(header_line)
        print(sep_line)
        for row in nw.data:
            marker = " *" if nw.fire_year is not None and row.year == nw.fire_year else ""
            print(f"  {row.year:<6} ${row.net_worth:>15,.0f} ${row.fire_target:>15,.0f} ${row.mortgage:>15,.0f} ${row.property:>15,.0f}{marker}")
        print()


RENDERER_REGISTRY = {
    'NetIncome': NetIncomeRenderer,
    'CashFlow': CashFlowRenderer,
    'Mortgage': MortgageRenderer,
    'NetWorth': NetWorthRenderer,
}
