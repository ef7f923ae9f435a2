from typing import List


class LevyDetails:
    """Holds levy statutory details and computes the charges added on top of income tax.

    Constructed with values loaded from the reference file. Calculation methods
    accept the variable inputs (taxable income, packaging, user flags).
    """

    def __init__(self, medicare_rate: float, medicare_threshold: float,
                 fringe_benefit_gross_up: float,
                 surcharge_tiers: List[dict], loan_repayment_tiers: List[dict]):
        """Initialize with statutory details.

        Args:
            medicare_rate: Medicare levy percentage (e.g. 2 for 2%).
            medicare_threshold: Taxable income at or below which no levy is charged.
            fringe_benefit_gross_up: Factor applied to packaged salary to obtain
                reportable fringe benefits.
            surcharge_tiers: Medicare Levy Surcharge tiers, each {"threshold", "rate"}.
            loan_repayment_tiers: Income-contingent loan tiers, each {"threshold", "rate"}.
        """
        self.medicare_rate = medicare_rate / 100.0
        self.medicare_threshold = medicare_threshold
        self.fringe_benefit_gross_up = fringe_benefit_gross_up
        self.surcharge_tiers = sorted(surcharge_tiers, key=lambda t: t["threshold"])
        self.loan_repayment_tiers = sorted(loan_repayment_tiers, key=lambda t: t["threshold"])

    @staticmethod
    def _tier_rate(income: float, tiers: List[dict]) -> float:
        """Rate of the highest tier whose threshold the income strictly exceeds."""
        rate = 0.0
        for tier in tiers:
            if income > tier["threshold"]:
                rate = tier["rate"] / 100.0
        return rate

    def medicare_levy(self, taxable_income: float, is_resident: bool) -> float:
        """Calculate the Medicare levy.

        Returns:
            The levy, or 0 for non-residents and incomes at or below the threshold.
        """
        if is_resident and taxable_income > self.medicare_threshold:
            return taxable_income * self.medicare_rate
        return 0.0

    def adjusted_taxable_income(self, taxable_income: float, packaging: float) -> float:
        """Taxable income plus grossed-up reportable fringe benefits."""
        return taxable_income + packaging * self.fringe_benefit_gross_up

    def medicare_levy_surcharge(self, taxable_income: float, adjusted_income: float,
                                is_resident: bool, has_private_health: bool) -> float:
        """Calculate the Medicare Levy Surcharge.

        The tier is selected by the adjusted income but the rate is charged on
        the plain taxable income.
        """
        if not is_resident or has_private_health:
            return 0.0
        return taxable_income * self._tier_rate(adjusted_income, self.surcharge_tiers)

    def loan_repayment(self, adjusted_income: float, has_debt: bool) -> float:
        """Calculate the compulsory income-contingent loan repayment.

        A single flat rate applies to the whole adjusted income; it is not
        marginal.
        """
        if not has_debt:
            return 0.0
        return adjusted_income * self._tier_rate(adjusted_income, self.loan_repayment_tiers)
