"""Result records produced by the calculators.

All records are plain dataclasses with numeric fields so that renderers,
the MCP tools and any charting layer can consume them without knowing how
they were computed. to_dict() gives the JSON-ready form.
"""

from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional


@dataclass
class IncomeStreamAnnual:
    """Annualized figures for a single income stream."""
    id: str
    name: str
    is_taxable: bool
    gross: float = 0.0
    packaging: float = 0.0
    sacrifice: float = 0.0
    admin_fee: float = 0.0
    super_contribution: float = 0.0  # employer super + salary sacrifice


@dataclass
class NetIncomeBreakdown:
    """Annual income statement from gross pay down to net cash position."""
    total_gross_cash: float = 0.0
    taxable_gross: float = 0.0
    tax_free_income: float = 0.0

    # Pre-tax deductions
    total_packaging: float = 0.0
    total_sacrifice: float = 0.0
    total_admin_fees: float = 0.0
    total_other_deductions: float = 0.0
    taxable_income: float = 0.0
    adjusted_taxable_income: float = 0.0  # taxable income + grossed-up fringe benefits

    # Tax and levies
    claims_threshold: bool = True
    base_tax: float = 0.0
    marginal_rate: float = 0.0
    medicare: float = 0.0
    mls: float = 0.0
    hecs_equivalent: float = 0.0
    total_tax_bill: float = 0.0

    # Take home
    net_salary: float = 0.0
    bank_take_home: float = 0.0
    net_cash_position: float = 0.0  # bank take home + packaging benefit
    total_super: float = 0.0

    streams: List[IncomeStreamAnnual] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class CategoryAllocation:
    category: str
    annual: float
    account_id: Optional[str] = None


@dataclass
class AccountAllocation:
    account_id: str
    name: str
    annual: float = 0.0
    categories: List[str] = field(default_factory=list)


@dataclass
class CashFlowSummary:
    """Where the net cash position goes: expense categories, accounts and surplus."""
    net_cash_position: float = 0.0
    total_expenses: float = 0.0
    surplus: float = 0.0
    categories: List[CategoryAllocation] = field(default_factory=list)
    accounts: List[AccountAllocation] = field(default_factory=list)
    unmapped_categories: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class MortgageYear:
    """Mortgage state sampled at a year boundary."""
    year: int
    balance_standard: float
    balance_actual: float
    property: float
    equity: float
    redraw: float


@dataclass
class MortgageSimulation:
    data: List[MortgageYear] = field(default_factory=list)
    periods_per_year: int = 12
    min_repayment: float = 0.0  # per repayment period
    actual_repayment: float = 0.0  # per repayment period
    budget_repayment: float = 0.0  # linked expenses, per repayment period
    payoff_actual: int = 0
    payoff_standard: int = 0
    first_period_interest: float = 0.0
    is_below_interest: bool = False
    is_budget_below_min: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class NetWorthYear:
    year: int
    net_worth: float
    fire_target: float
    mortgage: float
    property: float


@dataclass
class NetWorthSimulation:
    data: List[NetWorthYear] = field(default_factory=list)
    fire_target: float = 0.0
    velocity: float = 0.0
    fire_year: Optional[int] = None
    current_net_worth: float = 0.0
    asset_balances: Dict[str, float] = field(default_factory=dict)  # final value per asset id

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class PlanReport:
    """Everything calculated for one profile snapshot.

    Each renderer extracts the part it needs from this unified structure.
    """
    breakdown: NetIncomeBreakdown
    cash_flow: CashFlowSummary
    surplus: float
    mortgage: Optional[MortgageSimulation]  # None when renting
    net_worth: NetWorthSimulation

    def to_dict(self) -> dict:
        return asdict(self)
