"""Snapshot-in / snapshot-out state transitions.

Edits that carry an invariant across several items are applied here, in a
single new snapshot, rather than being patched up later.
"""

from dataclasses import replace

from calc.mortgage_calculator import convert_repayment
from calc.frequency import FrequencyUnit
from model.AppState import AppState, IncomeStream, IncomeType, REPAYMENT_FREQUENCIES, TaxTreatment

# Employer super guarantee rate applied when a stream becomes a salary
DEFAULT_SALARY_SUPER_RATE = 11.5


def _find_income(state: AppState, stream_id: str) -> IncomeStream:
    target = next((inc for inc in state.incomes if inc.id == stream_id), None)
    if target is None:
        raise ValueError(f"Income stream '{stream_id}' not found")
    return target


def _replace_income(state: AppState, updated: IncomeStream) -> AppState:
    return replace(state, incomes=tuple(updated if inc.id == updated.id else inc for inc in state.incomes))


def claim_tax_free_threshold(state: AppState, stream_id: str) -> AppState:
    """Claim the tax-free threshold on one stream.

    Any other stream that held the claim is reset to not-claimed, so at most
    one stream claims the threshold. Contractor streams keep their treatment.

    Raises:
        ValueError: if the stream does not exist or is a contractor or tax-free stream.
    """
    target = _find_income(state, stream_id)
    if target.type in (IncomeType.ABN, IncomeType.TAX_FREE):
        raise ValueError(f"Income stream '{target.name}' cannot claim the tax-free threshold")

    incomes = []
    for inc in state.incomes:
        if inc.id == stream_id:
            incomes.append(replace(inc, tax_treatment=TaxTreatment.THRESHOLD_CLAIMED))
        elif inc.tax_treatment == TaxTreatment.THRESHOLD_CLAIMED:
            incomes.append(replace(inc, tax_treatment=TaxTreatment.THRESHOLD_NOT_CLAIMED))
        else:
            incomes.append(inc)
    return replace(state, incomes=tuple(incomes))


def release_tax_free_threshold(state: AppState, stream_id: str) -> AppState:
    """Stop claiming the tax-free threshold on a stream, leaving no stream claiming it.

    A stream that does not hold the claim is returned unchanged.

    Raises:
        ValueError: if the stream does not exist.
    """
    target = _find_income(state, stream_id)
    if target.tax_treatment != TaxTreatment.THRESHOLD_CLAIMED:
        return state
    return _replace_income(state, replace(target, tax_treatment=TaxTreatment.THRESHOLD_NOT_CLAIMED))


def change_income_type(state: AppState, stream_id: str, new_type: IncomeType) -> AppState:
    """Change a stream's type and apply that type's tax and super defaults.

    Raises:
        ValueError: if the stream does not exist.
    """
    target = _find_income(state, stream_id)
    if new_type == IncomeType.ABN:
        updated = replace(target, type=new_type, tax_treatment=TaxTreatment.CONTRACTOR, super_rate=0.0)
    elif new_type == IncomeType.SALARY:
        updated = replace(target, type=new_type, tax_treatment=TaxTreatment.THRESHOLD_NOT_CLAIMED,
                          super_rate=DEFAULT_SALARY_SUPER_RATE)
    else:
        updated = replace(target, type=new_type, tax_treatment=TaxTreatment.THRESHOLD_NOT_CLAIMED,
                          super_rate=0.0)
    return _replace_income(state, updated)


def set_repayment_frequency(state: AppState, new_freq: FrequencyUnit) -> AppState:
    """Switch the mortgage repayment frequency, converting any user repayment.

    Raises:
        ValueError: if new_freq is not weekly, fortnightly or monthly.
    """
    new_freq = FrequencyUnit(new_freq)
    if new_freq not in REPAYMENT_FREQUENCIES:
        raise ValueError(f"Repayments must be weekly, fortnightly or monthly, not '{new_freq.value}'")
    params = state.mortgage_params
    repayment = params.user_repayment
    if repayment is not None:
        repayment = convert_repayment(repayment, params.repayment_freq, new_freq)
    return replace(state, mortgage_params=replace(params, repayment_freq=new_freq, user_repayment=repayment))


def set_surplus_asset(state: AppState, asset_id: str) -> AppState:
    """Designate the asset that receives surplus cash in the projection."""
    if not any(a.id == asset_id for a in state.assets):
        raise ValueError(f"Asset '{asset_id}' not found")
    return replace(state, surplus_asset_id=asset_id)
