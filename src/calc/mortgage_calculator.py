"""Mortgage amortization simulator.

Steps the loan month by month under two repayment policies and samples the
balances at every year boundary:

- standard: the minimum scheduled repayment that amortizes the loan over its term
- actual: the user's repayment, or the budgeted expenses linked to the mortgage

Both paths charge interest only on the balance not covered by the offset
account, so the two series differ only by the repayment amount.
"""

from calc.frequency import FrequencyUnit, to_annual
from model.AppState import AppState, MortgageParams
from model.Results import MortgageSimulation, MortgageYear

MONTHS_PER_YEAR = 12

# Repayments per year for each supported repayment frequency
PERIODS_PER_YEAR = {
    FrequencyUnit.WEEK: 52,
    FrequencyUnit.FORTNIGHT: 26,
    FrequencyUnit.MONTH: 12,
}

# The minimum repayment is quoted monthly then split: 4 weekly or 2 fortnightly payments
MONTHLY_SPLIT = {
    FrequencyUnit.WEEK: 4,
    FrequencyUnit.FORTNIGHT: 2,
    FrequencyUnit.MONTH: 1,
}


def calculate_pmt(rate: float, nper: int, pv: float) -> float:
    """Fixed payment that amortizes `pv` over `nper` periods at periodic `rate`.

    Args:
        rate: Interest rate per period as a fraction (0.05 / 12 for 5% monthly).
        nper: Number of periods.
        pv: Present value (loan amount).
    """
    if nper <= 0:
        return pv
    if rate == 0:
        return pv / nper
    pvif = (1 + rate) ** nper
    return (rate * pv * pvif) / (pvif - 1)


def periods_per_year(freq: FrequencyUnit) -> int:
    return PERIODS_PER_YEAR.get(freq, 12)


def budget_repayment_annual(state: AppState) -> float:
    """Annual cost of every expense flagged as a mortgage repayment."""
    return sum(to_annual(e.amount, e.freq_value, e.freq_unit)
               for e in state.expenses if e.is_mortgage_link)


def convert_repayment(amount: float, old_freq: FrequencyUnit, new_freq: FrequencyUnit) -> float:
    """Re-express a per-period repayment in a new frequency, keeping its annual total."""
    return amount * periods_per_year(old_freq) / periods_per_year(new_freq)


class MortgageCalculator:
    """Calculator for mortgage repayments and the amortization schedule."""

    def min_repayment(self, params: MortgageParams) -> float:
        """Minimum scheduled repayment per repayment period."""
        effective_principal = max(0.0, params.principal - params.offset_balance)
        monthly_rate = params.interest_rate / 100 / MONTHS_PER_YEAR
        monthly = calculate_pmt(monthly_rate, params.loan_term_years * MONTHS_PER_YEAR, effective_principal)
        return monthly / MONTHLY_SPLIT.get(params.repayment_freq, 1)

    def actual_repayment(self, state: AppState) -> float:
        """Repayment per period: the user's override, else the linked budget expenses."""
        params = state.mortgage_params
        if params.user_repayment is not None:
            return params.user_repayment
        return budget_repayment_annual(state) / periods_per_year(params.repayment_freq)

    def max_capacity(self, state: AppState, surplus_annual: float) -> float:
        """Largest affordable repayment per period: surplus plus the current budget allocation."""
        params = state.mortgage_params
        return (surplus_annual + budget_repayment_annual(state)) / periods_per_year(params.repayment_freq)

    def calculate(self, state: AppState) -> MortgageSimulation:
        """Simulate the loan over its full term.

        Returns:
            MortgageSimulation with one MortgageYear per year boundary
            (loan_term_years + 1 samples, year 0 being today).
        """
        params = state.mortgage_params
        n_per_year = periods_per_year(params.repayment_freq)

        min_repayment = self.min_repayment(params)
        actual_repayment = self.actual_repayment(state)
        budget_repayment = budget_repayment_annual(state) / n_per_year

        freq_to_monthly = n_per_year / MONTHS_PER_YEAR
        monthly_repay_min = min_repayment * freq_to_monthly
        monthly_repay_actual = actual_repayment * freq_to_monthly
        monthly_rate = params.interest_rate / 100 / MONTHS_PER_YEAR
        monthly_growth = (1 + params.growth_rate / 100) ** (1 / MONTHS_PER_YEAR)

        bal_standard = params.principal
        bal_actual = params.principal
        prop_val = params.property_value

        data = []
        for m in range(params.loan_term_years * MONTHS_PER_YEAR + 1):
            if m % MONTHS_PER_YEAR == 0:
                data.append(MortgageYear(
                    year=m // MONTHS_PER_YEAR,
                    balance_standard=bal_standard,
                    balance_actual=bal_actual,
                    property=prop_val,
                    equity=prop_val - bal_actual,
                    redraw=max(0.0, bal_standard - bal_actual),
                ))

            bal_standard = self._step(bal_standard, params.offset_balance, monthly_rate, monthly_repay_min)
            bal_actual = self._step(bal_actual, params.offset_balance, monthly_rate, monthly_repay_actual)
            prop_val = prop_val * monthly_growth

        first_period_interest = max(0.0, params.principal - params.offset_balance) * (params.interest_rate / 100 / n_per_year)

        return MortgageSimulation(
            data=data,
            periods_per_year=n_per_year,
            min_repayment=min_repayment,
            actual_repayment=actual_repayment,
            budget_repayment=budget_repayment,
            payoff_actual=self._payoff_year(data, 'balance_actual', params.loan_term_years),
            payoff_standard=self._payoff_year(data, 'balance_standard', params.loan_term_years),
            first_period_interest=first_period_interest,
            is_below_interest=actual_repayment < first_period_interest,
            is_budget_below_min=budget_repayment < min_repayment,
        )

    @staticmethod
    def _step(balance: float, offset: float, monthly_rate: float, repayment: float) -> float:
        """Advance one month. A cleared balance stays cleared."""
        if balance <= 0:
            return 0.0
        interest = max(0.0, balance - offset) * monthly_rate
        return max(0.0, balance + interest - repayment)

    @staticmethod
    def _payoff_year(data: list, attr: str, default: int) -> int:
        for row in data:
            if getattr(row, attr) == 0:
                return row.year
        return default
