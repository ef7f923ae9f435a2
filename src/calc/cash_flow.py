"""Cash flow allocation.

Splits the annual net cash position across expense categories and the bank
accounts those categories are mapped to, leaving the remainder as surplus.
"""

from typing import Dict

from calc.frequency import to_annual
from model.AppState import AppState
from model.Results import AccountAllocation, CashFlowSummary, CategoryAllocation


def expenses_by_category(state: AppState) -> Dict[str, float]:
    """Annualized expense totals keyed by category, in first-seen order."""
    sums: Dict[str, float] = {}
    for e in state.expenses:
        sums[e.category] = sums.get(e.category, 0.0) + to_annual(e.amount, e.freq_value, e.freq_unit)
    return sums


class CashFlowCalculator:
    """Builds a CashFlowSummary from a state snapshot and its net cash position."""

    def calculate(self, state: AppState, net_cash_position: float) -> CashFlowSummary:
        by_category = expenses_by_category(state)
        total_expenses = sum(by_category.values())

        summary = CashFlowSummary(
            net_cash_position=net_cash_position,
            total_expenses=total_expenses,
            surplus=max(0.0, net_cash_position - total_expenses),
        )

        for category, annual in by_category.items():
            summary.categories.append(CategoryAllocation(
                category=category,
                annual=annual,
                account_id=state.account_for(category),
            ))

        for account in state.accounts:
            cats = [c for c in state.expense_categories if state.account_for(c) == account.id]
            summary.accounts.append(AccountAllocation(
                account_id=account.id,
                name=account.name,
                annual=sum(by_category.get(c, 0.0) for c in cats),
                categories=cats,
            ))

        # A category needs mapping only once it carries spending
        summary.unmapped_categories = [
            c for c in state.expense_categories
            if by_category.get(c, 0.0) > 0 and not state.account_for(c)
        ]
        return summary
