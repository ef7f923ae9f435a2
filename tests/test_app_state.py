import os
import sys
import json
import logging
import pytest
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))
from calc.frequency import FrequencyUnit
from model.AppState import (
    AppState, FireMode, IncomeStream, IncomeType, MortgageParams, TaxTreatment,
    load_state, save_state,
)

EXAMPLE_PROFILE = os.path.join(os.path.dirname(__file__), '../profiles/example/state.json')


def test_load_example_profile():
    state = load_state(EXAMPLE_PROFILE)

    assert state.user_settings.is_resident is True
    assert len(state.incomes) == 2
    salary = state.incomes[0]
    assert salary.type == IncomeType.SALARY
    assert salary.freq_unit == FrequencyUnit.FORTNIGHT
    assert salary.tax_treatment == TaxTreatment.THRESHOLD_CLAIMED
    assert salary.salary_packaging == pytest.approx(485.84)
    assert state.incomes[1].is_taxable is False
    assert state.mortgage_params.repayment_freq == FrequencyUnit.FORTNIGHT
    assert state.mortgage_params.user_repayment is None
    assert state.fire_mode == FireMode.RIGOROUS
    assert state.retirement_base_cost == 35500
    assert state.surplus_asset_id == 'a4'


def test_round_trip_through_dict():
    state = load_state(EXAMPLE_PROFILE)

    assert AppState.from_dict(state.to_dict()) == state


def test_save_and_load(tmp_path):
    state = load_state(EXAMPLE_PROFILE)
    path = tmp_path / 'state.json'

    save_state(state, str(path))

    assert load_state(str(path)) == state
    assert json.loads(path.read_text())['mortgageParams']['repaymentFreq'] == 'fortnight'


def test_defaults_for_empty_profile():
    state = AppState.from_dict({})

    assert state.incomes == ()
    assert state.swr == 4.0
    assert state.fire_mode == FireMode.SIMPLE
    assert state.retirement_base_cost is None
    assert state.mortgage_params.repayment_freq == FrequencyUnit.MONTH
    assert state.mortgage_params.loan_term_years == 30


def test_snapshot_is_immutable():
    state = AppState.from_dict({})

    with pytest.raises(AttributeError):
        state.swr = 5.0


def test_snapshot_is_hashable():
    state = load_state(EXAMPLE_PROFILE)

    assert hash(AppState()) == hash(AppState())
    assert hash(state) == hash(AppState.from_dict(state.to_dict()))
    assert {state: 'cached'}[load_state(EXAMPLE_PROFILE)] == 'cached'


def test_category_map_is_frozen():
    source = {'Daily': '2', 'Utility': '3'}
    state = AppState(category_map=source)
    source['Daily'] = '9'

    assert state.category_map == (('Daily', '2'), ('Utility', '3'))
    assert state.account_for('Daily') == '2'
    assert state.account_for('Residential Property') is None
    assert AppState(category_map={'Utility': '3', 'Daily': '2'}) == state


def test_category_map_drops_blank_accounts():
    state = AppState.from_dict({'categoryMap': {'Daily': '2', 'Travel': '', 'Gifts': None}})

    assert state.account_for('Travel') is None
    assert state.account_for('Gifts') is None
    assert state.to_dict()['categoryMap'] == {'Daily': '2'}


def test_unknown_frequency_unit_becomes_annual(caplog):
    with caplog.at_level(logging.WARNING):
        stream = IncomeStream.from_dict({'id': 'x', 'name': 'Odd', 'amount': 10, 'freqUnit': 'decade'})

    assert stream.freq_unit == FrequencyUnit.YEAR
    assert 'decade' in caplog.text


def test_invalid_repayment_frequency_falls_back_to_month(caplog):
    with caplog.at_level(logging.WARNING):
        params = MortgageParams.from_dict({'principal': 1000, 'repaymentFreq': 'quarter'})

    assert params.repayment_freq == FrequencyUnit.MONTH
    assert 'quarter' in caplog.text


def test_unknown_fire_mode_falls_back_to_simple(caplog):
    with caplog.at_level(logging.WARNING):
        state = AppState.from_dict({'fireMode': 'reckless'})

    assert state.fire_mode == FireMode.SIMPLE


def test_income_stream_to_dict_uses_camel_case():
    stream = IncomeStream(id='1', name='Job', amount=1000, freq_unit=FrequencyUnit.WEEK,
                          tax_treatment=TaxTreatment.THRESHOLD_CLAIMED, super_rate=11.5)

    data = stream.to_dict()

    assert data['freqUnit'] == 'week'
    assert data['taxTreatment'] == 'tft'
    assert data['superRate'] == 11.5
    assert IncomeStream.from_dict(data) == stream
