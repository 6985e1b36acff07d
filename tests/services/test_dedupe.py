import pytest

from app.services.scoring.dedupe import deduplicate_leads, is_duplicate_name, name_similarity


@pytest.mark.parametrize(
    ("first", "second", "expected"),
    [
        ("Acme Inc", "acme inc ", 1.0),
        ("", "", 1.0),
        ("", "abc", 0.0),
        ("acme", "acme corp", 4 / 9),
        ("Acme Inc", "Acme Inc.", 8 / 9),
        ("growth labs", "labs growth", 1.0),
    ],
)
def test_name_similarity(first, second, expected):
    assert name_similarity(first, second) == pytest.approx(expected)


def test_name_similarity_is_symmetric_and_bounded():
    pairs = [("Globex", "Globex Corporation"), ("ai", "ai ventures"), ("Initech", "Intech"), ("Umbrella", "Hooli"), ("abba", "abcd")]
    for first, second in pairs:
        score = name_similarity(first, second)
        assert score == name_similarity(second, first)
        assert 0.0 <= score <= 1.0


def test_is_duplicate_name_returns_matching_name():
    assert is_duplicate_name("acme inc.", ["zeta works", "acme inc"]) == "acme inc"
    assert is_duplicate_name("globex corporation", ["globex"]) is None


def test_first_occurrence_wins(make_lead):
    leads = [make_lead("Acme Inc", id="first"), make_lead("acme inc ", id="second")]

    unique = deduplicate_leads(leads)

    assert [lead.id for lead in unique] == ["first"]


def test_candidate_checked_against_every_accepted_name(make_lead):
    leads = [
        make_lead("Acme Inc", id="a"),
        make_lead("Zeta Works", id="z"),
        make_lead("Acme Inc.", id="a2"),
        make_lead("Globex Corporation", id="g"),
    ]

    assert [lead.id for lead in deduplicate_leads(leads)] == ["a", "z", "g"]


def test_empty_names_are_dropped(make_lead):
    leads = [make_lead("", id="empty"), make_lead("   ", id="blank"), make_lead("Hooli", id="h")]

    assert [lead.id for lead in deduplicate_leads(leads)] == ["h"]


def test_deduplication_is_idempotent_and_non_mutating(make_lead):
    leads = [
        make_lead("Acme Inc", id="1"),
        make_lead("Initech", id="2"),
        make_lead("ACME INC", id="3"),
        make_lead("Umbrella", id="4"),
    ]
    snapshot = list(leads)

    once = deduplicate_leads(leads)
    twice = deduplicate_leads(once)

    assert leads == snapshot
    assert [lead.id for lead in once] == ["1", "2", "4"]
    assert twice == once
