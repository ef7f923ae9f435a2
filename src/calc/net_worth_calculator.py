"""Net worth and financial independence projection.

Projects investable net worth for 30 years against a FIRE target. Assets
compound monthly, the mortgage is paid down with the actual repayment, and
the annual surplus is invested into a single designated asset. Once the
mortgage is cleared its repayment is redirected into that asset as well.

Property value and the mortgage balance never enter the net worth basis;
the mortgage is tracked only so that the rigorous target can carry it and so
that the freed repayment can be detected.
"""

import logging
from typing import List, Optional

from calc.mortgage_calculator import MortgageCalculator, periods_per_year
from calc.net_income import total_annual_expenses
from model.AppState import AppState, FireMode
from model.Results import NetWorthSimulation, NetWorthYear

logger = logging.getLogger(__name__)

PROJECTION_YEARS = 30
MONTHS_PER_YEAR = 12
DEFAULT_SWR = 4.0


class NetWorthCalculator:
    """Calculator for the year-by-year net worth projection.

    Reuses the mortgage calculator for the actual repayment so the two
    projections always agree on how the loan is being paid.
    """

    def __init__(self, mortgage_calculator: Optional[MortgageCalculator] = None):
        self.mortgage_calculator = mortgage_calculator or MortgageCalculator()

    @staticmethod
    def swr_factor(state: AppState) -> float:
        """Multiple of annual cost needed to retire (25 for a 4% withdrawal rate)."""
        swr = state.swr
        if swr <= 0:
            logger.warning("Safe withdrawal rate %r is not positive; using %s%%", swr, DEFAULT_SWR)
            swr = DEFAULT_SWR
        return 100 / swr

    @staticmethod
    def retirement_base_cost(state: AppState) -> float:
        """Annual living cost in retirement, excluding mortgage repayments.

        Falls back to the budget without mortgage-linked expenses when the
        profile does not set one.
        """
        if state.retirement_base_cost is not None:
            return state.retirement_base_cost
        return total_annual_expenses(state, include_mortgage=False)

    def fire_target(self, state: AppState, mortgage_balance: float,
                    factor: Optional[float] = None) -> float:
        """FIRE target given the outstanding mortgage at that point in time."""
        if state.fire_target_override is not None:
            return state.fire_target_override
        if factor is None:
            factor = self.swr_factor(state)
        if state.fire_mode == FireMode.RIGOROUS:
            # The mortgage must be cleared before retiring on the base cost alone
            return self.retirement_base_cost(state) * factor + mortgage_balance
        return total_annual_expenses(state) * factor

    @staticmethod
    def net_worth_basis(state: AppState, asset_values: List[float]) -> float:
        total_assets = sum(asset_values)
        if state.fire_mode == FireMode.RIGOROUS:
            return total_assets - sum(l.balance for l in state.liabilities)
        return total_assets

    @staticmethod
    def surplus_sink_index(state: AppState) -> Optional[int]:
        """Index of the asset that receives surplus cash, or None with no assets."""
        if not state.assets:
            return None
        if state.surplus_asset_id is None:
            return 0
        for i, asset in enumerate(state.assets):
            if asset.id == state.surplus_asset_id:
                return i
        logger.warning("Surplus asset %r not found; investing surplus into %r",
                       state.surplus_asset_id, state.assets[0].name)
        return 0

    def calculate(self, state: AppState, surplus_annual: float) -> NetWorthSimulation:
        """Run the projection.

        Args:
            state: Profile snapshot.
            surplus_annual: Annual cash surplus invested each year.

        Returns:
            NetWorthSimulation with PROJECTION_YEARS + 1 yearly rows.
        """
        params = state.mortgage_params
        is_renting = state.user_settings.is_renting

        mortgage = 0.0 if is_renting else params.principal
        offset = 0.0 if is_renting else params.offset_balance
        prop_val = 0.0 if is_renting else params.property_value

        actual_annual_repayment = (self.mortgage_calculator.actual_repayment(state)
                                   * periods_per_year(params.repayment_freq))
        monthly_payment = actual_annual_repayment / MONTHS_PER_YEAR
        monthly_rate = params.interest_rate / 100 / MONTHS_PER_YEAR
        monthly_surplus = surplus_annual / MONTHS_PER_YEAR

        values = [a.value for a in state.assets]
        monthly_growth = [(1 + a.growth_rate / 100) ** (1 / MONTHS_PER_YEAR) for a in state.assets]
        sink = self.surplus_sink_index(state)
        factor = self.swr_factor(state)
        if sink is None and surplus_annual > 0:
            logger.debug("No assets to receive the surplus; injection dropped")

        result = NetWorthSimulation(
            fire_target=self.fire_target(state, mortgage, factor),
            velocity=surplus_annual,
            current_net_worth=self.net_worth_basis(state, values),
        )

        for year in range(PROJECTION_YEARS + 1):
            net_worth = self.net_worth_basis(state, values)
            target = self.fire_target(state, mortgage, factor)
            result.data.append(NetWorthYear(
                year=year,
                net_worth=net_worth,
                fire_target=target,
                mortgage=mortgage,
                property=prop_val,
            ))
            if result.fire_year is None and net_worth >= target:
                result.fire_year = year

            for _ in range(MONTHS_PER_YEAR):
                if not is_renting and mortgage > 0:
                    interest = max(0.0, mortgage - offset) * monthly_rate
                    mortgage = max(0.0, mortgage + interest - monthly_payment)

                values = [v * g for v, g in zip(values, monthly_growth)]

                injection = monthly_surplus
                if not is_renting and mortgage <= 0:
                    injection += monthly_payment
                if sink is not None:
                    values[sink] += injection

            if not is_renting:
                prop_val = prop_val * (1 + params.growth_rate / 100)

        result.asset_balances = {a.id: v for a, v in zip(state.assets, values)}
        return result
