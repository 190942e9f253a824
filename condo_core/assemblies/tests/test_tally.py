from decimal import Decimal

import pytest

from condo_core.assemblies.tally import UnknownVoteChoice, format_result, tally_votes


def test_empty_tally():
    summary = tally_votes([])
    assert summary.total == 0
    assert summary.yes_percentage == 0.0
    assert not summary.approved
    assert format_result(summary) == "Approved: 0 (0%) | Rejected: 0 (0%) | Abstentions: 0 | Total: 0 votes"


def test_percentages_use_weights():
    summary = tally_votes([("YES", Decimal("2.00")), ("NO", Decimal("1.00")), ("ABSTENTION", 1)])

    assert (summary.yes, summary.no, summary.abstention, summary.total) == (1, 1, 1, 3)
    assert summary.weighted_total == Decimal("4.00")
    assert summary.yes_percentage == 50.0
    assert format_result(summary) == (
        "Approved: 1 (50.0%) | Rejected: 1 (25.0%) | Abstentions: 1 | Total: 3 votes"
    )


def test_approval_counts_heads_not_weight():
    summary = tally_votes([("YES", 1), ("NO", 5)])
    assert summary.weighted_no > summary.weighted_yes
    assert not summary.approved

    assert tally_votes([("YES", 1), ("YES", 1), ("NO", 5)]).approved


def test_order_does_not_matter():
    votes = [("YES", 1), ("NO", 2), ("YES", 3)]
    assert tally_votes(votes) == tally_votes(list(reversed(votes)))


def test_unknown_choice():
    with pytest.raises(UnknownVoteChoice):
        tally_votes([("MAYBE", 1)])
