from typing import List, Optional


class IncomeTaxDetails:
	def __init__(self, resident_brackets: List[dict], non_resident_brackets: List[dict], no_threshold_flat_rate: float):
		"""
		resident_brackets / non_resident_brackets: lists of
		{"maxIncome", "rate", "baseAmount"} entries in ascending order. Rates are
		percentages; a maxIncome of None marks the open top bracket.
		no_threshold_flat_rate: percentage applied to all income for a resident
		who does not claim the tax-free threshold.
		"""
		self.resident_brackets = self._build_brackets(resident_brackets)
		self.non_resident_brackets = self._build_brackets(non_resident_brackets)
		self.no_threshold_flat_rate = no_threshold_flat_rate / 100.0

	@staticmethod
	def _build_brackets(raw: List[dict]) -> List[dict]:
		if not raw:
			raise ValueError("At least one tax bracket is required")
		brackets = []
		for b in raw:
			max_income = b.get("maxIncome")
			brackets.append({
				"maxIncome": float('inf') if max_income is None else max_income,
				"rate": b["rate"] / 100.0,
				"baseAmount": b.get("baseAmount", 0.0)
			})
		bounds = [b["maxIncome"] for b in brackets]
		if bounds[-1] != float('inf'):
			raise ValueError("The top tax bracket must have no maxIncome")
		if bounds != sorted(bounds):
			raise ValueError("Tax brackets must be in ascending maxIncome order")
		return brackets

	def _brackets_for(self, is_resident: bool) -> List[dict]:
		return self.resident_brackets if is_resident else self.non_resident_brackets

	def _find_bracket(self, income: float, brackets: List[dict]) -> Optional[int]:
		for i, b in enumerate(brackets):
			if income <= b["maxIncome"]:
				return i
		return None

	def calculate_tax(self, taxable_income: float, is_resident: bool, claims_threshold: bool) -> float:
		"""
		Returns the income tax owed on taxable_income.

		Residents who do not claim the tax-free threshold pay the flat rate on
		every dollar; this is a withholding approximation, not bracket math.
		"""
		if taxable_income <= 0:
			return 0.0
		if is_resident and not claims_threshold:
			return taxable_income * self.no_threshold_flat_rate

		brackets = self._brackets_for(is_resident)
		i = self._find_bracket(taxable_income, brackets)
		b = brackets[i]
		floor = 0 if i == 0 else brackets[i - 1]["maxIncome"]
		return b["baseAmount"] + (taxable_income - floor) * b["rate"]

	def marginal_rate(self, taxable_income: float, is_resident: bool, claims_threshold: bool) -> float:
		"""Returns the rate (as a fraction) applied to the next dollar of income."""
		if is_resident and not claims_threshold:
			return self.no_threshold_flat_rate
		brackets = self._brackets_for(is_resident)
		i = self._find_bracket(max(0.0, taxable_income), brackets)
		return brackets[i]["rate"]
