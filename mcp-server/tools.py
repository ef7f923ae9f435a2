"""FIRE Planner Tools for MCP Server.

This module provides the tool implementations that wrap the FIRE planning
calculators and expose their data through MCP.
"""

import os
import sys
import logging
from typing import Dict, List, Optional

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from tax.reference import build_tax_details
from calc.frequency import from_annual
from calc.net_income import total_annual_expenses
from calc.plan_calculator import PlanCalculator
from model.AppState import AppState, load_state
from model.Results import PlanReport

logger = logging.getLogger(__name__)


class FirePlannerTools:
    """Tools that wrap the FIRE planning calculators for MCP access."""

    def __init__(self, base_path: str, profile_name: str):
        """Initialize with paths and load the profile.

        Args:
            base_path: Path to the fire-planner root directory
            profile_name: Name of the profile folder in profiles
        """
        self.base_path = base_path
        self.profile_name = profile_name
        self.state: AppState = self._load_state()
        self._init_calculators()
        self._calculate_plan()

    def _load_state(self) -> AppState:
        """Load the profile snapshot."""
        state_path = os.path.join(self.base_path, 'profiles', self.profile_name, 'state.json')
        return load_state(state_path)

    def _init_calculators(self):
        """Build the tax details from the reference data and inject them."""
        reference_path = os.path.join(self.base_path, 'reference', 'tax-details.json')
        income_tax, levies = build_tax_details(reference_path)
        self.plan_calculator = PlanCalculator(income_tax, levies)

    def _calculate_plan(self):
        """Calculate the complete plan using PlanCalculator."""
        self.report: PlanReport = self.plan_calculator.calculate(self.state)

    def get_profile_overview(self) -> dict:
        """Get an overview of the profile's settings and holdings."""
        settings = self.state.user_settings
        params = self.state.mortgage_params
        return {
            "profile_name": self.profile_name,
            "user": {
                "name": settings.name,
                "is_resident": settings.is_resident,
                "has_private_health": settings.has_private_health,
                "has_hecs_debt": settings.has_hecs_debt,
                "is_renting": settings.is_renting
            },
            "income_streams": [
                {
                    "name": inc.name,
                    "type": inc.type.value,
                    "amount": inc.amount,
                    "frequency": f"{inc.freq_value:g} x {inc.freq_unit.value}",
                    "tax_treatment": inc.tax_treatment.value
                }
                for inc in self.state.incomes
            ],
            "expense_count": len(self.state.expenses),
            "annual_expenses": round(total_annual_expenses(self.state), 2),
            "assets": [
                {"name": a.name, "category": a.category, "value": round(a.value, 2), "growth_rate": a.growth_rate}
                for a in self.state.assets
            ],
            "liabilities_total": round(sum(l.balance for l in self.state.liabilities), 2),
            "mortgage": None if settings.is_renting else {
                "principal": round(params.principal, 2),
                "offset_balance": round(params.offset_balance, 2),
                "interest_rate": params.interest_rate,
                "loan_term_years": params.loan_term_years,
                "repayment_freq": params.repayment_freq.value,
                "property_value": round(params.property_value, 2)
            },
            "fire_settings": {
                "mode": self.state.fire_mode.value,
                "swr": self.state.swr,
                "retirement_base_cost": self.state.retirement_base_cost,
                "fire_target_override": self.state.fire_target_override,
                "surplus_asset_id": self.state.surplus_asset_id
            }
        }

    def get_net_income_breakdown(self, period: str = 'year') -> dict:
        """Get the income statement, with amounts converted to `period`."""
        b = self.report.breakdown

        def per(annual: float) -> float:
            return round(from_annual(annual, period), 2)

        return {
            "period": period,
            "streams": [
                {
                    "name": s.name,
                    "is_taxable": s.is_taxable,
                    "gross": per(s.gross),
                    "packaging": per(s.packaging),
                    "sacrifice": per(s.sacrifice),
                    "admin_fee": per(s.admin_fee),
                    "super": per(s.super_contribution)
                }
                for s in b.streams
            ],
            "total_gross_cash": per(b.total_gross_cash),
            "tax_free_income": per(b.tax_free_income),
            "pre_tax_deductions": {
                "salary_packaging": per(b.total_packaging),
                "salary_sacrifice": per(b.total_sacrifice),
                "admin_fees": per(b.total_admin_fees),
                "other_deductions": per(b.total_other_deductions)
            },
            "taxable_income": per(b.taxable_income),
            "tax": {
                "claims_threshold": b.claims_threshold,
                "income_tax": per(b.base_tax),
                "medicare_levy": per(b.medicare),
                "medicare_levy_surcharge": per(b.mls),
                "hecs_repayment": per(b.hecs_equivalent),
                "total_tax_bill": per(b.total_tax_bill),
                "marginal_rate": f"{b.marginal_rate:.1%}"
            },
            "net_salary": per(b.net_salary),
            "bank_take_home": per(b.bank_take_home),
            "net_cash_position": per(b.net_cash_position),
            "total_super": per(b.total_super)
        }

    def get_cash_flow(self, period: str = 'month') -> dict:
        """Get expenses by category and account, and the surplus."""
        cf = self.report.cash_flow

        def per(annual: float) -> float:
            return round(from_annual(annual, period), 2)

        return {
            "period": period,
            "net_cash_position": per(cf.net_cash_position),
            "total_expenses": per(cf.total_expenses),
            "surplus": per(cf.surplus),
            "categories": {c.category: per(c.annual) for c in cf.categories},
            "accounts": [
                {"name": a.name, "amount": per(a.annual), "categories": a.categories}
                for a in cf.accounts
            ],
            "unmapped_categories": cf.unmapped_categories
        }

    def get_mortgage_simulation(self, year: Optional[int] = None) -> dict:
        """Get the amortization schedule, or one year of it."""
        sim = self.report.mortgage
        if sim is None:
            return {"message": "This profile is renting; there is no mortgage to simulate."}

        def row_dict(row) -> dict:
            return {
                "year": row.year,
                "balance_minimum": round(row.balance_standard, 2),
                "balance_actual": round(row.balance_actual, 2),
                "property": round(row.property, 2),
                "equity": round(row.equity, 2),
                "ahead_by": round(row.redraw, 2)
            }

        if year is not None:
            if year < 0 or year >= len(sim.data):
                return {"error": f"Year {year} is outside the loan term (0-{len(sim.data) - 1})"}
            return row_dict(sim.data[year])

        return {
            "repayments_per_year": sim.periods_per_year,
            "min_repayment": round(sim.min_repayment, 2),
            "actual_repayment": round(sim.actual_repayment, 2),
            "budget_repayment": round(sim.budget_repayment, 2),
            "payoff_year_actual": sim.payoff_actual,
            "payoff_year_minimum": sim.payoff_standard,
            "years_saved": sim.payoff_standard - sim.payoff_actual,
            "first_period_interest": round(sim.first_period_interest, 2),
            "is_below_interest": sim.is_below_interest,
            "is_budget_below_min": sim.is_budget_below_min,
            "yearly": [row_dict(row) for row in sim.data]
        }

    def get_net_worth_projection(self, year: Optional[int] = None) -> dict:
        """Get the net worth projection, or one year of it."""
        nw = self.report.net_worth

        def row_dict(row) -> dict:
            return {
                "year": row.year,
                "net_worth": round(row.net_worth, 2),
                "fire_target": round(row.fire_target, 2),
                "mortgage": round(row.mortgage, 2),
                "property": round(row.property, 2),
                "reached_fire": row.net_worth >= row.fire_target
            }

        if year is not None:
            if year < 0 or year >= len(nw.data):
                return {"error": f"Year {year} is outside the projection (0-{len(nw.data) - 1})"}
            return row_dict(nw.data[year])

        names = {a.id: a.name for a in self.state.assets}
        return {
            "current_net_worth": round(nw.current_net_worth, 2),
            "fire_target": round(nw.fire_target, 2),
            "velocity": round(nw.velocity, 2),
            "fire_year": nw.fire_year,
            "final_asset_balances": {names.get(k, k): round(v, 2) for k, v in nw.asset_balances.items()},
            "yearly": [row_dict(row) for row in nw.data]
        }

    def get_fire_summary(self) -> dict:
        """Get the headline FIRE numbers."""
        nw = self.report.net_worth
        b = self.report.breakdown
        expenses = self.report.cash_flow.total_expenses
        savings_rate = (self.report.surplus / b.net_cash_position * 100) if b.net_cash_position > 0 else 0
        summary = {
            "mode": self.state.fire_mode.value,
            "swr": self.state.swr,
            "fire_target": round(nw.fire_target, 2),
            "current_net_worth": round(nw.current_net_worth, 2),
            "progress_percent": round(nw.current_net_worth / nw.fire_target * 100, 1) if nw.fire_target > 0 else 100.0,
            "annual_surplus": round(self.report.surplus, 2),
            "annual_expenses": round(expenses, 2),
            "savings_rate_percent": round(savings_rate, 1),
            "fire_year": nw.fire_year,
            "reaches_fire": nw.fire_year is not None
        }
        if self.report.mortgage is not None:
            summary["mortgage_payoff_year"] = self.report.mortgage.payoff_actual
        return summary


class MultiProfileTools:
    """Manager for multiple FIRE planning profiles.

    Discovers all available profiles and caches their calculations,
    allowing queries to specify which profile to use.
    """

    def __init__(self, base_path: str, default_profile: Optional[str] = None):
        """Initialize and discover all available profiles.

        Args:
            base_path: Path to the fire-planner root directory
            default_profile: Default profile to use when none specified
        """
        self.base_path = base_path
        self.profiles: Dict[str, FirePlannerTools] = {}
        self.default_profile = default_profile
        self._discover_profiles()

    def _discover_profiles(self):
        """Discover and load all available profiles."""
        profiles_path = os.path.join(self.base_path, 'profiles')

        if not os.path.exists(profiles_path):
            return

        for name in sorted(os.listdir(profiles_path)):
            profile_dir = os.path.join(profiles_path, name)
            state_path = os.path.join(profile_dir, 'state.json')

            if os.path.isdir(profile_dir) and os.path.exists(state_path):
                try:
                    self.profiles[name] = FirePlannerTools(self.base_path, name)
                except Exception as e:
                    # Log but don't fail on individual profile errors
                    logger.warning("Failed to load profile '%s': %s", name, e)

        # Set default if not specified
        if self.default_profile is None and self.profiles:
            self.default_profile = list(self.profiles.keys())[0]

    def _get_profile(self, profile: Optional[str] = None) -> FirePlannerTools:
        """Get the specified profile or the default."""
        profile_name = profile or self.default_profile

        if profile_name not in self.profiles:
            available = list(self.profiles.keys())
            raise ValueError(
                f"Profile '{profile_name}' not found. Available profiles: {available}"
            )

        return self.profiles[profile_name]

    def list_profiles(self) -> dict:
        """List all available profiles."""
        profiles_info = {}
        for name, tools in self.profiles.items():
            profiles_info[name] = {
                "user_name": tools.state.user_settings.name,
                "income_streams": len(tools.state.incomes),
                "is_renting": tools.state.user_settings.is_renting,
                "fire_mode": tools.state.fire_mode.value
            }

        return {
            "available_profiles": list(self.profiles.keys()),
            "default_profile": self.default_profile,
            "profiles_info": profiles_info
        }

    def reload_profiles(self) -> dict:
        """Reload all profiles from disk, refreshing the cache.

        Use this after adding, modifying, or removing profile state.json files
        to pick up changes without restarting the server.
        """
        old_profiles = set(self.profiles.keys())
        requested_default = self.default_profile if self.default_profile in old_profiles else None

        self.profiles.clear()
        self.default_profile = requested_default
        self._discover_profiles()

        new_profiles = set(self.profiles.keys())

        return {
            "status": "success",
            "message": f"Reloaded {len(self.profiles)} profiles",
            "profiles_loaded": list(self.profiles.keys()),
            "default_profile": self.default_profile,
            "changes": {
                "added": sorted(new_profiles - old_profiles),
                "removed": sorted(old_profiles - new_profiles),
                "reloaded": sorted(old_profiles & new_profiles)
            }
        }

    def _with_profile(self, result: dict, profile: Optional[str]) -> dict:
        result["profile"] = profile or self.default_profile
        return result

    def get_profile_overview(self, profile: Optional[str] = None) -> dict:
        return self._with_profile(self._get_profile(profile).get_profile_overview(), profile)

    def get_net_income_breakdown(self, period: str = 'year', profile: Optional[str] = None) -> dict:
        return self._with_profile(self._get_profile(profile).get_net_income_breakdown(period), profile)

    def get_cash_flow(self, period: str = 'month', profile: Optional[str] = None) -> dict:
        return self._with_profile(self._get_profile(profile).get_cash_flow(period), profile)

    def get_mortgage_simulation(self, year: Optional[int] = None, profile: Optional[str] = None) -> dict:
        return self._with_profile(self._get_profile(profile).get_mortgage_simulation(year), profile)

    def get_net_worth_projection(self, year: Optional[int] = None, profile: Optional[str] = None) -> dict:
        return self._with_profile(self._get_profile(profile).get_net_worth_projection(year), profile)

    def get_fire_summary(self, profile: Optional[str] = None) -> dict:
        return self._with_profile(self._get_profile(profile).get_fire_summary(), profile)

    def compare_profiles(self, profile1: str, profile2: str, metrics: Optional[List[str]] = None) -> dict:
        """Compare two profiles and report which is closer to financial independence.

        Args:
            profile1: First profile name to compare
            profile2: Second profile name to compare
            metrics: Optional list of metrics to focus on. If None, compares all.
                     Options: 'net_cash_position', 'total_tax', 'surplus', 'savings_rate',
                              'fire_target', 'final_net_worth', 'years_to_fire'
        """
        if profile1 not in self.profiles:
            return {"error": f"Profile '{profile1}' not found. Available: {list(self.profiles.keys())}"}
        if profile2 not in self.profiles:
            return {"error": f"Profile '{profile2}' not found. Available: {list(self.profiles.keys())}"}

        summary1 = self.profiles[profile1].get_fire_summary()
        summary2 = self.profiles[profile2].get_fire_summary()
        report1 = self.profiles[profile1].report
        report2 = self.profiles[profile2].report

        def years_to_fire(summary: dict) -> float:
            # Not reaching FIRE within the projection ranks behind any year that does
            return summary["fire_year"] if summary["fire_year"] is not None else float('inf')

        def compare_metric(val1: float, val2: float, higher_is_better: bool = True) -> dict:
            """Compare a metric and determine the winner."""
            if higher_is_better:
                winner = profile1 if val1 > val2 else (profile2 if val2 > val1 else "tie")
            else:
                winner = profile1 if val1 < val2 else (profile2 if val2 < val1 else "tie")

            finite = val1 != float('inf') and val2 != float('inf')
            return {
                profile1: round(val1, 2) if val1 != float('inf') else None,
                profile2: round(val2, 2) if val2 != float('inf') else None,
                "difference": round(val2 - val1, 2) if finite else None,
                "better": winner,
                "higher_is_better": higher_is_better
            }

        all_metrics = {
            "net_cash_position": ("Annual Net Cash Position", report1.breakdown.net_cash_position,
                                  report2.breakdown.net_cash_position, True),
            "total_tax": ("Annual Tax Bill", report1.breakdown.total_tax_bill,
                          report2.breakdown.total_tax_bill, False),
            "surplus": ("Annual Surplus", summary1["annual_surplus"], summary2["annual_surplus"], True),
            "savings_rate": ("Savings Rate (%)", summary1["savings_rate_percent"],
                             summary2["savings_rate_percent"], True),
            "fire_target": ("FIRE Target", summary1["fire_target"], summary2["fire_target"], False),
            "final_net_worth": ("Net Worth After 30 Years", report1.net_worth.data[-1].net_worth,
                                report2.net_worth.data[-1].net_worth, True),
            "years_to_fire": ("Years to Financial Independence", years_to_fire(summary1),
                              years_to_fire(summary2), False),
        }

        if metrics:
            metrics_to_compare = {k: v for k, v in all_metrics.items() if k in metrics}
            if not metrics_to_compare:
                return {
                    "error": f"No valid metrics specified. Available metrics: {list(all_metrics.keys())}"
                }
        else:
            metrics_to_compare = all_metrics

        comparison = {"metrics": {}}
        wins = {profile1: 0, profile2: 0, "tie": 0}
        for key, (description, val1, val2, higher_is_better) in metrics_to_compare.items():
            result = compare_metric(val1, val2, higher_is_better)
            comparison["metrics"][key] = {"description": description, **result}
            wins[result["better"]] += 1

        if wins[profile1] > wins[profile2]:
            overall_winner = profile1
        elif wins[profile2] > wins[profile1]:
            overall_winner = profile2
        else:
            overall_winner = "tie"

        comparison["summary"] = {
            "metrics_compared": len(metrics_to_compare),
            "wins": {
                profile1: wins[profile1],
                profile2: wins[profile2],
                "tied": wins["tie"]
            },
            "overall_better": overall_winner
        }

        if overall_winner == "tie":
            recommendation = f"Both profiles are roughly equivalent, each winning {wins[profile1]} metrics."
        else:
            loser = profile2 if overall_winner == profile1 else profile1
            recommendation = (f"'{overall_winner}' appears better overall, winning {wins[overall_winner]} of "
                              f"{len(metrics_to_compare)} metrics compared to {wins[loser]} for '{loser}'.")
            fire_metric = comparison["metrics"].get("years_to_fire")
            if fire_metric and fire_metric["better"] != "tie" and fire_metric["difference"] is not None:
                recommendation += (f" '{fire_metric['better']}' reaches financial independence "
                                   f"{abs(fire_metric['difference']):.0f} years sooner.")

        comparison["recommendation"] = recommendation
        return comparison
