"""Running budget total while transfers are tentatively applied."""

from dataclasses import dataclass


@dataclass(frozen=True)
class BudgetLedger:
    """Immutable running total of roster cost against a cap.

    ``apply`` returns a new ledger so a search can branch without undo logic.
    """

    total: int
    cap: int

    @property
    def headroom(self) -> int:
        return self.cap - self.total

    @property
    def within_cap(self) -> bool:
        return self.total <= self.cap

    def can_apply(self, cost_delta: int) -> bool:
        return self.total + cost_delta <= self.cap

    def apply(self, cost_delta: int) -> "BudgetLedger":
        return BudgetLedger(total=self.total + cost_delta, cap=self.cap)
