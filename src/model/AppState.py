"""Immutable state snapshot consumed by the calculators.

The snapshot mirrors the profile JSON (camelCase keys) that is saved under
profiles/<name>/state.json. Every type can be rebuilt from and written back
to that shape with from_dict / to_dict. Updates produce new snapshots; see
model.state_updates.
"""

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from calc.frequency import FrequencyUnit

logger = logging.getLogger(__name__)


class IncomeType(str, Enum):
    SALARY = 'salary'
    ABN = 'abn'
    INVESTMENT = 'investment'
    TAX_FREE = 'tax-free'
    OTHER = 'other'


class TaxTreatment(str, Enum):
    THRESHOLD_CLAIMED = 'tft'
    THRESHOLD_NOT_CLAIMED = 'no-tft'
    CONTRACTOR = 'abn'


class FireMode(str, Enum):
    SIMPLE = 'simple'
    RIGOROUS = 'rigorous'


REPAYMENT_FREQUENCIES = (FrequencyUnit.WEEK, FrequencyUnit.FORTNIGHT, FrequencyUnit.MONTH)


def _parse_unit(value, default: FrequencyUnit = FrequencyUnit.MONTH) -> FrequencyUnit:
    if value is None:
        return default
    try:
        return FrequencyUnit(value)
    except ValueError:
        logger.warning("Unknown frequency unit %r in profile; treating as annual", value)
        return FrequencyUnit.YEAR


def _parse_enum(enum_cls, value, default):
    try:
        return enum_cls(value)
    except ValueError:
        logger.warning("Unknown %s %r in profile; using %r", enum_cls.__name__, value, default.value)
        return default


def _num(value, default: float = 0.0) -> float:
    return default if value is None else float(value)


def _opt_num(value) -> Optional[float]:
    return None if value is None else float(value)


@dataclass(frozen=True)
class UserSettings:
    name: str = ''
    is_resident: bool = True
    has_private_health: bool = True
    has_hecs_debt: bool = False
    is_renting: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> 'UserSettings':
        return cls(
            name=data.get('name', ''),
            is_resident=bool(data.get('isResident', True)),
            has_private_health=bool(data.get('hasPrivateHealth', True)),
            has_hecs_debt=bool(data.get('hasHecsDebt', False)),
            is_renting=bool(data.get('isRenting', False)),
        )

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'isResident': self.is_resident,
            'hasPrivateHealth': self.has_private_health,
            'hasHecsDebt': self.has_hecs_debt,
            'isRenting': self.is_renting,
        }


@dataclass(frozen=True)
class IncomeStream:
    """One income source.

    Packaging, sacrifice and admin fee are per-period amounts in the same
    frequency as `amount`.
    """
    id: str
    name: str
    type: IncomeType = IncomeType.SALARY
    amount: float = 0.0
    freq_value: float = 1
    freq_unit: FrequencyUnit = FrequencyUnit.YEAR
    tax_treatment: TaxTreatment = TaxTreatment.THRESHOLD_NOT_CLAIMED
    salary_packaging: float = 0.0
    salary_sacrifice: float = 0.0
    admin_fee: float = 0.0
    super_rate: float = 0.0

    @property
    def is_taxable(self) -> bool:
        return self.type != IncomeType.TAX_FREE

    @classmethod
    def from_dict(cls, data: dict) -> 'IncomeStream':
        return cls(
            id=str(data.get('id', '')),
            name=data.get('name', ''),
            type=_parse_enum(IncomeType, data.get('type', 'salary'), IncomeType.OTHER),
            amount=_num(data.get('amount')),
            freq_value=_num(data.get('freqValue'), 1),
            freq_unit=_parse_unit(data.get('freqUnit'), FrequencyUnit.YEAR),
            tax_treatment=_parse_enum(TaxTreatment, data.get('taxTreatment', 'no-tft'),
                                      TaxTreatment.THRESHOLD_NOT_CLAIMED),
            salary_packaging=_num(data.get('salaryPackaging')),
            salary_sacrifice=_num(data.get('salarySacrifice')),
            admin_fee=_num(data.get('adminFee')),
            super_rate=_num(data.get('superRate')),
        )

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'type': self.type.value,
            'amount': self.amount,
            'freqValue': self.freq_value,
            'freqUnit': self.freq_unit.value,
            'taxTreatment': self.tax_treatment.value,
            'salaryPackaging': self.salary_packaging,
            'salarySacrifice': self.salary_sacrifice,
            'adminFee': self.admin_fee,
            'superRate': self.super_rate,
        }


@dataclass(frozen=True)
class DeductionItem:
    """Other pre-tax deduction, stored as an annual amount."""
    id: str
    name: str
    amount: float = 0.0
    category: str = ''

    @classmethod
    def from_dict(cls, data: dict) -> 'DeductionItem':
        return cls(
            id=str(data.get('id', '')),
            name=data.get('name', ''),
            amount=_num(data.get('amount')),
            category=data.get('category', ''),
        )

    def to_dict(self) -> dict:
        return {'id': self.id, 'name': self.name, 'amount': self.amount, 'category': self.category}


@dataclass(frozen=True)
class ExpenseItem:
    id: str
    name: str
    amount: float = 0.0
    freq_value: float = 1
    freq_unit: FrequencyUnit = FrequencyUnit.MONTH
    category: str = 'Other'
    is_mortgage_link: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> 'ExpenseItem':
        return cls(
            id=str(data.get('id', '')),
            name=data.get('name', ''),
            amount=_num(data.get('amount')),
            freq_value=_num(data.get('freqValue'), 1),
            freq_unit=_parse_unit(data.get('freqUnit')),
            category=data.get('category', 'Other'),
            is_mortgage_link=bool(data.get('isMortgageLink', False)),
        )

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'amount': self.amount,
            'freqValue': self.freq_value,
            'freqUnit': self.freq_unit.value,
            'category': self.category,
            'isMortgageLink': self.is_mortgage_link,
        }


@dataclass(frozen=True)
class AssetItem:
    id: str
    name: str
    value: float = 0.0
    category: str = 'Shares'
    growth_rate: float = 0.0

    @classmethod
    def from_dict(cls, data: dict) -> 'AssetItem':
        return cls(
            id=str(data.get('id', '')),
            name=data.get('name', ''),
            value=_num(data.get('value')),
            category=data.get('category', 'Shares'),
            growth_rate=_num(data.get('growthRate')),
        )

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'value': self.value,
            'category': self.category,
            'growthRate': self.growth_rate,
        }


@dataclass(frozen=True)
class LiabilityItem:
    """Non-mortgage debt. Category is one of Personal, Business, Investment."""
    id: str
    name: str
    balance: float = 0.0
    category: str = 'Personal'

    @classmethod
    def from_dict(cls, data: dict) -> 'LiabilityItem':
        return cls(
            id=str(data.get('id', '')),
            name=data.get('name', ''),
            balance=_num(data.get('balance')),
            category=data.get('category', 'Personal'),
        )

    def to_dict(self) -> dict:
        return {'id': self.id, 'name': self.name, 'balance': self.balance, 'category': self.category}


@dataclass(frozen=True)
class AccountBucket:
    """Bank account that expense categories are paid from."""
    id: str
    name: str
    color: str = ''

    @classmethod
    def from_dict(cls, data: dict) -> 'AccountBucket':
        return cls(id=str(data.get('id', '')), name=data.get('name', ''), color=data.get('color', ''))

    def to_dict(self) -> dict:
        return {'id': self.id, 'name': self.name, 'color': self.color}


@dataclass(frozen=True)
class MortgageParams:
    principal: float = 0.0
    offset_balance: float = 0.0
    interest_rate: float = 0.0
    loan_term_years: int = 30
    user_repayment: Optional[float] = None
    repayment_freq: FrequencyUnit = FrequencyUnit.MONTH
    property_value: float = 0.0
    growth_rate: float = 0.0

    @classmethod
    def from_dict(cls, data: dict) -> 'MortgageParams':
        freq = _parse_unit(data.get('repaymentFreq'), FrequencyUnit.MONTH)
        if freq not in REPAYMENT_FREQUENCIES:
            logger.warning("Repayment frequency %r is not week/fortnight/month; using month", freq.value)
            freq = FrequencyUnit.MONTH
        return cls(
            principal=_num(data.get('principal')),
            offset_balance=_num(data.get('offsetBalance')),
            interest_rate=_num(data.get('interestRate')),
            loan_term_years=int(data.get('loanTermYears', 30)),
            user_repayment=_opt_num(data.get('userRepayment')),
            repayment_freq=freq,
            property_value=_num(data.get('propertyValue')),
            growth_rate=_num(data.get('growthRate')),
        )

    def to_dict(self) -> dict:
        return {
            'principal': self.principal,
            'offsetBalance': self.offset_balance,
            'interestRate': self.interest_rate,
            'loanTermYears': self.loan_term_years,
            'userRepayment': self.user_repayment,
            'repaymentFreq': self.repayment_freq.value,
            'propertyValue': self.property_value,
            'growthRate': self.growth_rate,
        }


@dataclass(frozen=True)
class AppState:
    """Complete financial snapshot for one profile."""
    user_settings: UserSettings = field(default_factory=UserSettings)
    incomes: Tuple[IncomeStream, ...] = ()
    deductions: Tuple[DeductionItem, ...] = ()
    expenses: Tuple[ExpenseItem, ...] = ()
    expense_categories: Tuple[str, ...] = ()
    accounts: Tuple[AccountBucket, ...] = ()
    # (category, account id) pairs; a dict is accepted and frozen on construction
    category_map: Tuple[Tuple[str, str], ...] = ()
    assets: Tuple[AssetItem, ...] = ()
    asset_categories: Tuple[str, ...] = ()
    liabilities: Tuple[LiabilityItem, ...] = ()
    mortgage_params: MortgageParams = field(default_factory=MortgageParams)

    # FIRE settings
    fire_mode: FireMode = FireMode.SIMPLE
    retirement_base_cost: Optional[float] = None  # annual living cost excluding debt
    swr: float = 4.0
    fire_target_override: Optional[float] = None

    # Asset that receives surplus cash in the projection; None means the first asset
    surplus_asset_id: Optional[str] = None

    def __post_init__(self):
        pairs = self.category_map.items() if isinstance(self.category_map, dict) else self.category_map
        object.__setattr__(self, 'category_map', tuple(sorted((c, a) for c, a in pairs if a)))

    def account_for(self, category: str) -> Optional[str]:
        """Id of the account a category is paid from, or None when unmapped."""
        for mapped, account_id in self.category_map:
            if mapped == category:
                return account_id
        return None

    @classmethod
    def from_dict(cls, data: dict) -> 'AppState':
        return cls(
            user_settings=UserSettings.from_dict(data.get('userSettings', {})),
            incomes=tuple(IncomeStream.from_dict(d) for d in data.get('incomes', [])),
            deductions=tuple(DeductionItem.from_dict(d) for d in data.get('deductions', [])),
            expenses=tuple(ExpenseItem.from_dict(d) for d in data.get('expenses', [])),
            expense_categories=tuple(data.get('expenseCategories', [])),
            accounts=tuple(AccountBucket.from_dict(d) for d in data.get('accounts', [])),
            category_map=dict(data.get('categoryMap') or {}),
            assets=tuple(AssetItem.from_dict(d) for d in data.get('assets', [])),
            asset_categories=tuple(data.get('assetCategories', [])),
            liabilities=tuple(LiabilityItem.from_dict(d) for d in data.get('liabilities', [])),
            mortgage_params=MortgageParams.from_dict(data.get('mortgageParams', {})),
            fire_mode=_parse_enum(FireMode, data.get('fireMode', 'simple'), FireMode.SIMPLE),
            retirement_base_cost=_opt_num(data.get('retirementBaseCost')),
            swr=_num(data.get('swr'), 4.0),
            fire_target_override=_opt_num(data.get('fireTargetOverride')),
            surplus_asset_id=data.get('surplusAssetId'),
        )

    def to_dict(self) -> dict:
        return {
            'userSettings': self.user_settings.to_dict(),
            'incomes': [i.to_dict() for i in self.incomes],
            'deductions': [d.to_dict() for d in self.deductions],
            'expenses': [e.to_dict() for e in self.expenses],
            'expenseCategories': list(self.expense_categories),
            'accounts': [a.to_dict() for a in self.accounts],
            'categoryMap': dict(self.category_map),
            'assets': [a.to_dict() for a in self.assets],
            'assetCategories': list(self.asset_categories),
            'liabilities': [l.to_dict() for l in self.liabilities],
            'mortgageParams': self.mortgage_params.to_dict(),
            'fireMode': self.fire_mode.value,
            'retirementBaseCost': self.retirement_base_cost,
            'swr': self.swr,
            'fireTargetOverride': self.fire_target_override,
            'surplusAssetId': self.surplus_asset_id,
        }


def load_state(path: str) -> AppState:
    """Load a profile snapshot from a JSON file."""
    with open(path, 'r') as f:
        return AppState.from_dict(json.load(f))


def save_state(state: AppState, path: str) -> None:
    """Write a profile snapshot to a JSON file."""
    with open(path, 'w') as f:
        json.dump(state.to_dict(), f, indent=2)
