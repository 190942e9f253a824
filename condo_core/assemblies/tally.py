# condo_core/assemblies/tally.py
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Tuple

from condo_core.assemblies.models import VoteChoice

HUNDRED = Decimal("100")


class UnknownVoteChoice(ValueError):
    def __init__(self, choice):
        super().__init__(f"Unknown vote choice: {choice!r}")
        self.choice = choice


@dataclass(frozen=True)
class VoteSummary:
    yes: int = 0
    no: int = 0
    abstention: int = 0
    total: int = 0
    weighted_yes: Decimal = Decimal("0")
    weighted_no: Decimal = Decimal("0")
    weighted_abstention: Decimal = Decimal("0")
    weighted_total: Decimal = Decimal("0")

    def _percentage(self, weighted: Decimal) -> float:
        if self.weighted_total <= 0:
            return 0.0
        return float(weighted / self.weighted_total * HUNDRED)

    @property
    def yes_percentage(self) -> float:
        return self._percentage(self.weighted_yes)

    @property
    def no_percentage(self) -> float:
        return self._percentage(self.weighted_no)

    @property
    def abstention_percentage(self) -> float:
        return self._percentage(self.weighted_abstention)

    @property
    def approved(self) -> bool:
        return self.yes > self.no

    def as_dict(self) -> dict:
        return {
            "yes": self.yes,
            "no": self.no,
            "abstention": self.abstention,
            "total": self.total,
            "weighted_yes": float(self.weighted_yes),
            "weighted_no": float(self.weighted_no),
            "weighted_abstention": float(self.weighted_abstention),
            "weighted_total": float(self.weighted_total),
            "yes_percentage": self.yes_percentage,
            "no_percentage": self.no_percentage,
            "abstention_percentage": self.abstention_percentage,
        }


def tally_votes(votes: Iterable[Tuple[str, object]]) -> VoteSummary:
    """
    Single pass over (choice, weight) pairs.

    Counts and weight sums per choice; percentages are derived from the
    weighted total and are 0 when nothing was cast. Order does not matter.
    Raises UnknownVoteChoice for anything outside YES/NO/ABSTENTION.
    """
    counts = {VoteChoice.YES: 0, VoteChoice.NO: 0, VoteChoice.ABSTENTION: 0}
    weights = {VoteChoice.YES: Decimal("0"), VoteChoice.NO: Decimal("0"), VoteChoice.ABSTENTION: Decimal("0")}

    for choice, weight in votes:
        if choice not in counts:
            raise UnknownVoteChoice(choice)
        counts[choice] += 1
        weights[choice] += Decimal(str(weight))

    return VoteSummary(
        yes=counts[VoteChoice.YES],
        no=counts[VoteChoice.NO],
        abstention=counts[VoteChoice.ABSTENTION],
        total=sum(counts.values()),
        weighted_yes=weights[VoteChoice.YES],
        weighted_no=weights[VoteChoice.NO],
        weighted_abstention=weights[VoteChoice.ABSTENTION],
        weighted_total=sum(weights.values(), Decimal("0")),
    )


def format_result(summary: VoteSummary) -> str:
    """Text stored on a closed agenda item."""
    yes_pct = f"{summary.yes_percentage:.1f}" if summary.weighted_total > 0 else "0"
    no_pct = f"{summary.no_percentage:.1f}" if summary.weighted_total > 0 else "0"
    return (
        f"Approved: {summary.yes} ({yes_pct}%) | Rejected: {summary.no} ({no_pct}%) | "
        f"Abstentions: {summary.abstention} | Total: {summary.total} votes"
    )
