import sys
import os
import argparse
import logging
from tax.reference import build_tax_details
from calc.frequency import FrequencyUnit
from calc.plan_calculator import PlanCalculator
from model.AppState import load_state
from render.renderers import NetIncomeRenderer, CashFlowRenderer, RENDERER_REGISTRY


def profile_path(profile_name: str) -> str:
    """Path to a profile's state.json under the profiles directory."""
    return os.path.join(os.path.dirname(__file__), '../profiles', profile_name, 'state.json')


def main():
    parser = argparse.ArgumentParser(
        description='FIRE planning calculator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Modes:
  NetIncome   Print the income statement from gross pay to net cash position (default)
  CashFlow    Print expenses by category and account, and the resulting surplus
  Mortgage    Print the amortization schedule for minimum and actual repayments
  NetWorth    Print the 30-year net worth projection against the FIRE target

Examples:
  python src/Program.py example
  python src/Program.py example --mode NetIncome --period fortnight
  python src/Program.py example --mode CashFlow --period month
  python src/Program.py example --mode Mortgage
  python src/Program.py example --mode NetWorth
        """
    )
    parser.add_argument('profile_name', help='Name of the profile (folder in profiles)')
    parser.add_argument('--mode', '-m',
                        choices=list(RENDERER_REGISTRY.keys()),
                        default='NetIncome',
                        help='Output mode: NetIncome (default), CashFlow, Mortgage or NetWorth')
    parser.add_argument('--period', '-p',
                        choices=[u.value for u in FrequencyUnit],
                        default=None,
                        help='Display period for NetIncome and CashFlow amounts')
    parser.add_argument('--respect-tax-treatment',
                        action='store_true',
                        help='Use each stream\'s tax-free threshold claim instead of assuming it is claimed')
    parser.add_argument('--verbose', '-v',
                        action='store_true',
                        help='Log calculation warnings and debug detail')

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    state_path = profile_path(args.profile_name)
    if not os.path.exists(state_path):
        print(f"Profile state not found: {state_path}")
        sys.exit(1)
    state = load_state(state_path)

    # Build detail instances from the reference data and inject into the calculator
    income_tax, levies = build_tax_details()
    calculator = PlanCalculator(income_tax, levies, respect_tax_treatment=args.respect_tax_treatment)
    report = calculator.calculate(state)

    renderer_cls = RENDERER_REGISTRY[args.mode]
    if renderer_cls in (NetIncomeRenderer, CashFlowRenderer) and args.period:
        renderer = renderer_cls(FrequencyUnit(args.period))
    else:
        renderer = renderer_cls()
    renderer.render(report)


if __name__ == "__main__":
    main()
