"""Tests for the MCP server tools module."""

import os
import sys
import json
import shutil
import tempfile
import pytest

# Add src and mcp-server to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../../src')))
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../../mcp-server')))

from tools import FirePlannerTools, MultiProfileTools


# Path to test fixtures (profiles with hand-checkable numbers)
FIXTURES_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), 'fixtures'))

# Path to the project root (for reference files)
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '../..'))


@pytest.fixture(scope="module")
def test_base_path():
    """Create a temporary directory structure for testing.

    This creates a temp directory with the required structure:
    - profiles/testprofile/state.json and profiles/renterprofile/state.json (from fixtures)
    - reference/tax-details.json (symlinked from project)
    """
    temp_dir = tempfile.mkdtemp()

    profiles_dir = os.path.join(temp_dir, 'profiles')
    os.makedirs(profiles_dir)
    for name in ('testprofile', 'renterprofile'):
        shutil.copytree(
            os.path.join(FIXTURES_PATH, name),
            os.path.join(profiles_dir, name)
        )

    # Symlink the reference directory from the project root
    os.symlink(
        os.path.join(PROJECT_ROOT, 'reference'),
        os.path.join(temp_dir, 'reference')
    )

    yield temp_dir

    shutil.rmtree(temp_dir, ignore_errors=True)


class TestFirePlannerTools:
    """Tests for FirePlannerTools class."""

    @pytest.fixture
    def tools(self, test_base_path):
        """Create a FirePlannerTools instance using testprofile."""
        return FirePlannerTools(test_base_path, 'testprofile')

    def test_init_loads_state(self, tools):
        assert tools.profile_name == 'testprofile'
        assert tools.state.user_settings.name == 'Test Owner'
        assert len(tools.state.incomes) == 1

    def test_profile_overview(self, tools):
        overview = tools.get_profile_overview()

        assert overview['profile_name'] == 'testprofile'
        assert overview['user']['is_resident'] is True
        assert overview['income_streams'][0]['type'] == 'salary'
        assert overview['annual_expenses'] == 36000.0
        assert overview['mortgage']['principal'] == 300000.0
        assert overview['fire_settings']['mode'] == 'simple'

    def test_net_income_breakdown_annual(self, tools):
        result = tools.get_net_income_breakdown()

        assert result['period'] == 'year'
        assert result['taxable_income'] == 100000.0
        assert result['tax']['income_tax'] == 20788.0
        assert result['tax']['medicare_levy'] == 2000.0
        assert result['tax']['medicare_levy_surcharge'] == 0.0
        assert result['tax']['total_tax_bill'] == 22788.0
        assert result['tax']['marginal_rate'] == '30.0%'
        assert result['net_salary'] == 77212.0
        assert result['total_super'] == 11500.0

    def test_net_income_breakdown_monthly(self, tools):
        result = tools.get_net_income_breakdown('month')

        assert result['period'] == 'month'
        assert result['net_salary'] == pytest.approx(77212.0 / 12, abs=0.01)

    def test_cash_flow(self, tools):
        result = tools.get_cash_flow('year')

        assert result['total_expenses'] == 36000.0
        assert result['surplus'] == 41212.0
        assert result['categories'] == {'Mortgage': 24000.0, 'Daily': 12000.0}
        assert result['accounts'][0]['name'] == 'Bills'
        assert result['accounts'][0]['amount'] == 24000.0
        assert result['unmapped_categories'] == ['Daily']

    def test_mortgage_simulation_summary(self, tools):
        result = tools.get_mortgage_simulation()

        assert result['repayments_per_year'] == 12
        assert result['actual_repayment'] == 2000.0
        assert result['min_repayment'] == pytest.approx(1798.65, abs=0.01)
        assert result['payoff_year_minimum'] == 30
        assert result['payoff_year_actual'] < 30
        assert result['years_saved'] > 0
        assert result['is_below_interest'] is False
        assert result['is_budget_below_min'] is False
        assert len(result['yearly']) == 31

    def test_mortgage_simulation_single_year(self, tools):
        result = tools.get_mortgage_simulation(0)

        assert result['year'] == 0
        assert result['balance_actual'] == 300000.0
        assert result['equity'] == 200000.0

    def test_mortgage_simulation_year_out_of_range(self, tools):
        result = tools.get_mortgage_simulation(31)

        assert 'error' in result

    def test_net_worth_projection(self, tools):
        result = tools.get_net_worth_projection()

        assert result['current_net_worth'] == 100000.0
        assert result['fire_target'] == 900000.0
        assert result['velocity'] == 41212.0
        assert len(result['yearly']) == 31
        assert 'Index Fund' in result['final_asset_balances']

    def test_net_worth_projection_single_year(self, tools):
        result = tools.get_net_worth_projection(0)

        assert result['net_worth'] == 100000.0
        assert result['reached_fire'] is False

    def test_fire_summary(self, tools):
        result = tools.get_fire_summary()

        assert result['fire_target'] == 900000.0
        assert result['progress_percent'] == pytest.approx(11.1, abs=0.05)
        assert result['annual_surplus'] == 41212.0
        assert result['reaches_fire'] is True
        assert result['fire_year'] > 0
        assert 'mortgage_payoff_year' in result


class TestRenterProfile:
    """Tests for a profile with no mortgage."""

    @pytest.fixture
    def tools(self, test_base_path):
        return FirePlannerTools(test_base_path, 'renterprofile')

    def test_no_mortgage_simulation(self, tools):
        result = tools.get_mortgage_simulation()

        assert 'message' in result

    def test_overview_has_no_mortgage(self, tools):
        assert tools.get_profile_overview()['mortgage'] is None

    def test_projection_carries_no_property(self, tools):
        rows = tools.get_net_worth_projection()['yearly']

        assert all(row['mortgage'] == 0 and row['property'] == 0 for row in rows)

    def test_fire_summary_has_no_payoff(self, tools):
        assert 'mortgage_payoff_year' not in tools.get_fire_summary()


class TestMultiProfileTools:
    """Tests for MultiProfileTools class."""

    @pytest.fixture
    def multi_tools(self, test_base_path):
        return MultiProfileTools(test_base_path, 'testprofile')

    def test_discovers_profiles(self, multi_tools):
        assert set(multi_tools.profiles.keys()) == {'testprofile', 'renterprofile'}

    def test_default_profile_falls_back_to_first(self, test_base_path):
        multi = MultiProfileTools(test_base_path)

        assert multi.default_profile == 'renterprofile'

    def test_list_profiles(self, multi_tools):
        result = multi_tools.list_profiles()

        assert result['default_profile'] == 'testprofile'
        assert 'testprofile' in result['available_profiles']
        assert result['profiles_info']['renterprofile']['is_renting'] is True

    def test_uses_default_profile(self, multi_tools):
        result = multi_tools.get_net_income_breakdown()

        assert result['profile'] == 'testprofile'
        assert result['taxable_income'] == 100000.0

    def test_explicit_profile(self, multi_tools):
        result = multi_tools.get_net_income_breakdown('year', 'renterprofile')

        assert result['profile'] == 'renterprofile'
        assert result['taxable_income'] == 60000.0

    def test_unknown_profile_raises(self, multi_tools):
        with pytest.raises(ValueError, match="not found"):
            multi_tools.get_fire_summary('nope')

    def test_missing_profiles_directory(self, tmp_path):
        multi = MultiProfileTools(str(tmp_path))

        assert multi.profiles == {}
        assert multi.default_profile is None

    def test_broken_profile_is_skipped(self, test_base_path, tmp_path):
        shutil.copytree(os.path.join(test_base_path, 'profiles'), tmp_path / 'profiles')
        os.symlink(os.path.join(PROJECT_ROOT, 'reference'), tmp_path / 'reference')
        broken = tmp_path / 'profiles' / 'broken'
        broken.mkdir()
        (broken / 'state.json').write_text('{not json')

        multi = MultiProfileTools(str(tmp_path))

        assert 'broken' not in multi.profiles
        assert 'testprofile' in multi.profiles

    def test_reload_profiles(self, test_base_path, tmp_path):
        shutil.copytree(os.path.join(test_base_path, 'profiles'), tmp_path / 'profiles')
        os.symlink(os.path.join(PROJECT_ROOT, 'reference'), tmp_path / 'reference')
        multi = MultiProfileTools(str(tmp_path), 'testprofile')

        shutil.copytree(tmp_path / 'profiles' / 'testprofile', tmp_path / 'profiles' / 'copy')
        shutil.rmtree(tmp_path / 'profiles' / 'renterprofile')
        result = multi.reload_profiles()

        assert result['status'] == 'success'
        assert result['changes']['added'] == ['copy']
        assert result['changes']['removed'] == ['renterprofile']
        assert result['changes']['reloaded'] == ['testprofile']
        assert result['default_profile'] == 'testprofile'

    def test_reload_picks_up_edits(self, test_base_path, tmp_path):
        shutil.copytree(os.path.join(test_base_path, 'profiles'), tmp_path / 'profiles')
        os.symlink(os.path.join(PROJECT_ROOT, 'reference'), tmp_path / 'reference')
        multi = MultiProfileTools(str(tmp_path), 'testprofile')

        state_path = tmp_path / 'profiles' / 'testprofile' / 'state.json'
        data = json.loads(state_path.read_text())
        data['incomes'][0]['amount'] = 45000
        state_path.write_text(json.dumps(data))
        multi.reload_profiles()

        assert multi.get_net_income_breakdown()['tax']['income_tax'] == pytest.approx(4288.0)


class TestCompareProfiles:
    """Tests for compare_profiles."""

    @pytest.fixture
    def multi_tools(self, test_base_path):
        return MultiProfileTools(test_base_path, 'testprofile')

    def test_compare_all_metrics(self, multi_tools):
        result = multi_tools.compare_profiles('testprofile', 'renterprofile')

        assert len(result['metrics']) == 7
        assert result['metrics']['net_cash_position']['better'] == 'testprofile'
        assert result['metrics']['total_tax']['better'] == 'renterprofile'
        assert result['metrics']['surplus']['testprofile'] == 41212.0
        assert 'recommendation' in result
        assert result['summary']['metrics_compared'] == 7

    def test_compare_selected_metrics(self, multi_tools):
        result = multi_tools.compare_profiles('testprofile', 'renterprofile', ['surplus', 'fire_target'])

        assert set(result['metrics'].keys()) == {'surplus', 'fire_target'}

    def test_compare_invalid_metrics(self, multi_tools):
        result = multi_tools.compare_profiles('testprofile', 'renterprofile', ['bogus'])

        assert 'error' in result

    def test_compare_unknown_profile(self, multi_tools):
        result = multi_tools.compare_profiles('testprofile', 'nope')

        assert 'error' in result
        assert 'nope' in result['error']

    def test_compare_same_profile_is_tie(self, multi_tools):
        result = multi_tools.compare_profiles('testprofile', 'testprofile')

        assert result['summary']['overall_better'] == 'tie'
