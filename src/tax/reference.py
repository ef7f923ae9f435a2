import json
import os
from typing import Optional

from tax.IncomeTaxDetails import IncomeTaxDetails
from tax.LevyDetails import LevyDetails


REFERENCE_PATH = os.path.normpath(os.path.join(os.path.dirname(__file__), '..', '..', 'reference', 'tax-details.json'))


def load_tax_reference(path: Optional[str] = None) -> dict:
    """Read the statutory tax reference file.

    Raises:
        ValueError: if either bracket table is missing or empty.
    """
    ref_path = path or REFERENCE_PATH
    with open(ref_path, 'r') as f:
        data = json.load(f)

    for section in ('resident', 'nonResident'):
        if not data.get(section, {}).get('brackets'):
            raise ValueError(f"tax-details.json must contain a '{section}.brackets' array with at least one entry")
    return data


def build_tax_details(path: Optional[str] = None) -> tuple[IncomeTaxDetails, LevyDetails]:
    """Hydrate the income tax and levy detail providers from the reference file."""
    data = load_tax_reference(path)
    income_tax = IncomeTaxDetails(
        resident_brackets=data['resident']['brackets'],
        non_resident_brackets=data['nonResident']['brackets'],
        no_threshold_flat_rate=data['resident'].get('noThresholdFlatRate', 0),
    )
    medicare = data.get('medicareLevy', {})
    levies = LevyDetails(
        medicare_rate=medicare.get('rate', 0),
        medicare_threshold=medicare.get('threshold', 0),
        fringe_benefit_gross_up=data.get('fringeBenefitGrossUp', 1.0),
        surcharge_tiers=data.get('medicareLevySurcharge', []),
        loan_repayment_tiers=data.get('loanRepayment', []),
    )
    return income_tax, levies
