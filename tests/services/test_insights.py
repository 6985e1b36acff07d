import pytest

from app.services.scoring.engine import score_and_deduplicate_leads
from app.services.scoring.insights import CategoryStats, LeadSummary, priority_label, summarize_leads


@pytest.fixture
def scored_pair(make_lead, full_lead, fixed_now):
    return score_and_deduplicate_leads([make_lead("Solo Co"), full_lead], now=fixed_now)


def test_empty_batch_summary():
    summary = summarize_leads([])

    assert summary == LeadSummary()
    assert summary.completeness == 0


def test_summary_counts(scored_pair):
    summary = summarize_leads(scored_pair)

    assert summary.total == 2
    assert summary.average_score == 53
    assert summary.high_priority == 1
    assert summary.with_email == 1
    assert summary.high_ai_potential == 1
    assert summary.funded == 1
    assert summary.active_hiring == 1
    assert summary.categories == {
        "Enterprise": CategoryStats(count=1, average=100),
        "Startup": CategoryStats(count=1, average=6),
    }
    assert summary.confidence_levels == {"High": 1, "Low": 1}


def test_summary_data_gaps(scored_pair):
    summary = summarize_leads(scored_pair)

    assert summary.missing_email == 1
    assert summary.missing_linkedin == 1
    assert summary.missing_revenue == 1
    assert summary.missing_employees == 1
    assert summary.no_funding == 1
    assert summary.no_hiring == 1
    assert summary.low_confidence == 1
    # (14 - 6.5) / 14 -> 53.57%
    assert summary.completeness == 54


def test_unscored_leads_fall_back_to_unknown_and_low(make_lead):
    summary = summarize_leads([make_lead("Raw Co", email="a@raw.co")])

    assert summary.categories == {"Unknown": CategoryStats(count=1, average=0)}
    assert summary.confidence_levels == {"Low": 1}
    assert summary.average_score == 0


@pytest.mark.parametrize(
    ("score", "expected"),
    [(None, "Unknown"), (0, "Unknown"), (80, "High Priority"), (79, "Medium Priority"), (50, "Medium Priority"), (49, "Low Priority")],
)
def test_priority_label(score, expected):
    assert priority_label(score) == expected
