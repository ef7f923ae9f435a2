import unittest
import os
import sys
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))
from calc.frequency import FrequencyUnit
from model.AppState import AppState, AssetItem, IncomeStream, IncomeType, MortgageParams, TaxTreatment
from model.state_updates import (
    DEFAULT_SALARY_SUPER_RATE,
    change_income_type,
    claim_tax_free_threshold,
    release_tax_free_threshold,
    set_repayment_frequency,
    set_surplus_asset,
)


class TestClaimTaxFreeThreshold(unittest.TestCase):
    def setUp(self):
        self.state = AppState(incomes=(
            IncomeStream(id='1', name='Main job', tax_treatment=TaxTreatment.THRESHOLD_CLAIMED),
            IncomeStream(id='2', name='Second job', tax_treatment=TaxTreatment.THRESHOLD_NOT_CLAIMED),
            IncomeStream(id='3', name='Contract', type=IncomeType.ABN, tax_treatment=TaxTreatment.CONTRACTOR),
            IncomeStream(id='4', name='Gift', type=IncomeType.TAX_FREE, tax_treatment=TaxTreatment.CONTRACTOR),
        ))

    def test_moves_claim_to_new_stream(self):
        updated = claim_tax_free_threshold(self.state, '2')
        treatments = {inc.id: inc.tax_treatment for inc in updated.incomes}

        self.assertEqual(treatments['1'], TaxTreatment.THRESHOLD_NOT_CLAIMED)
        self.assertEqual(treatments['2'], TaxTreatment.THRESHOLD_CLAIMED)
        self.assertEqual(treatments['3'], TaxTreatment.CONTRACTOR)

    def test_at_most_one_claim(self):
        updated = claim_tax_free_threshold(claim_tax_free_threshold(self.state, '2'), '1')
        claimed = [inc.id for inc in updated.incomes if inc.tax_treatment == TaxTreatment.THRESHOLD_CLAIMED]

        self.assertEqual(claimed, ['1'])

    def test_original_snapshot_untouched(self):
        claim_tax_free_threshold(self.state, '2')

        self.assertEqual(self.state.incomes[0].tax_treatment, TaxTreatment.THRESHOLD_CLAIMED)

    def test_unknown_stream(self):
        with self.assertRaises(ValueError):
            claim_tax_free_threshold(self.state, 'missing')

    def test_contractor_and_tax_free_cannot_claim(self):
        with self.assertRaises(ValueError):
            claim_tax_free_threshold(self.state, '3')
        with self.assertRaises(ValueError):
            claim_tax_free_threshold(self.state, '4')

    def test_release_clears_claim(self):
        updated = release_tax_free_threshold(self.state, '1')
        claimed = [inc.id for inc in updated.incomes if inc.tax_treatment == TaxTreatment.THRESHOLD_CLAIMED]

        self.assertEqual(claimed, [])
        self.assertEqual(updated.incomes[0].tax_treatment, TaxTreatment.THRESHOLD_NOT_CLAIMED)
        self.assertEqual(self.state.incomes[0].tax_treatment, TaxTreatment.THRESHOLD_CLAIMED)

    def test_release_then_claim_again(self):
        released = release_tax_free_threshold(self.state, '1')
        updated = claim_tax_free_threshold(released, '1')

        self.assertEqual(updated.incomes[0].tax_treatment, TaxTreatment.THRESHOLD_CLAIMED)

    def test_release_on_unclaimed_stream_is_a_no_op(self):
        self.assertIs(release_tax_free_threshold(self.state, '2'), self.state)
        self.assertIs(release_tax_free_threshold(self.state, '3'), self.state)

    def test_release_unknown_stream(self):
        with self.assertRaises(ValueError):
            release_tax_free_threshold(self.state, 'missing')


class TestChangeIncomeType(unittest.TestCase):
    def setUp(self):
        self.state = AppState(incomes=(
            IncomeStream(id='1', name='Job', type=IncomeType.SALARY, super_rate=11.5,
                         tax_treatment=TaxTreatment.THRESHOLD_CLAIMED),
        ))

    def test_to_abn(self):
        inc = change_income_type(self.state, '1', IncomeType.ABN).incomes[0]

        self.assertEqual(inc.type, IncomeType.ABN)
        self.assertEqual(inc.tax_treatment, TaxTreatment.CONTRACTOR)
        self.assertEqual(inc.super_rate, 0)

    def test_to_salary(self):
        abn = change_income_type(self.state, '1', IncomeType.ABN)
        inc = change_income_type(abn, '1', IncomeType.SALARY).incomes[0]

        self.assertEqual(inc.tax_treatment, TaxTreatment.THRESHOLD_NOT_CLAIMED)
        self.assertEqual(inc.super_rate, DEFAULT_SALARY_SUPER_RATE)

    def test_to_investment(self):
        inc = change_income_type(self.state, '1', IncomeType.INVESTMENT).incomes[0]

        self.assertEqual(inc.tax_treatment, TaxTreatment.THRESHOLD_NOT_CLAIMED)
        self.assertEqual(inc.super_rate, 0)

    def test_other_streams_untouched(self):
        state = AppState(incomes=self.state.incomes + (IncomeStream(id='2', name='Other', super_rate=5),))
        updated = change_income_type(state, '1', IncomeType.ABN)

        self.assertEqual(updated.incomes[1], state.incomes[1])

    def test_unknown_stream(self):
        with self.assertRaises(ValueError):
            change_income_type(self.state, 'missing', IncomeType.ABN)


class TestMortgageAndSinkUpdates(unittest.TestCase):
    def test_set_repayment_frequency_converts_repayment(self):
        state = AppState(mortgage_params=MortgageParams(user_repayment=1000, repayment_freq=FrequencyUnit.MONTH))
        updated = set_repayment_frequency(state, FrequencyUnit.FORTNIGHT)

        self.assertEqual(updated.mortgage_params.repayment_freq, FrequencyUnit.FORTNIGHT)
        self.assertAlmostEqual(updated.mortgage_params.user_repayment, 12000 / 26)

    def test_set_repayment_frequency_without_repayment(self):
        state = AppState(mortgage_params=MortgageParams(repayment_freq=FrequencyUnit.MONTH))
        updated = set_repayment_frequency(state, FrequencyUnit.WEEK)

        self.assertIsNone(updated.mortgage_params.user_repayment)
        self.assertEqual(updated.mortgage_params.repayment_freq, FrequencyUnit.WEEK)

    def test_set_repayment_frequency_rejects_non_repayment_units(self):
        state = AppState(mortgage_params=MortgageParams(user_repayment=1000, repayment_freq=FrequencyUnit.MONTH))

        for unit in (FrequencyUnit.QUARTER, FrequencyUnit.YEAR):
            with self.assertRaises(ValueError):
                set_repayment_frequency(state, unit)
        self.assertEqual(state.mortgage_params.user_repayment, 1000)

    def test_set_repayment_frequency_accepts_unit_value(self):
        state = AppState(mortgage_params=MortgageParams(user_repayment=1000, repayment_freq=FrequencyUnit.MONTH))
        updated = set_repayment_frequency(state, 'week')

        self.assertEqual(updated.mortgage_params.repayment_freq, FrequencyUnit.WEEK)
        self.assertAlmostEqual(updated.mortgage_params.user_repayment, 12000 / 52)

    def test_set_surplus_asset(self):
        state = AppState(assets=(AssetItem(id='a1', name='Cash'), AssetItem(id='a2', name='Shares')))

        self.assertEqual(set_surplus_asset(state, 'a2').surplus_asset_id, 'a2')
        with self.assertRaises(ValueError):
            set_surplus_asset(state, 'a3')


if __name__ == '__main__':
    unittest.main()
