import pytest

from singulars.models import Performance, Poem
from singulars.services.seed import SeedError, seed_performances


def seed_payload(status="training", human_text="Human verse."):
    return {
        "performances": [
            {
                "name": "hard.exe",
                "slug": "hard-exe",
                "color": "#EF4444",
                "status": status,
                "location": "Beirut, Lebanon",
                "date": "2024-11-15",
                "poets": ["Halim Madi"],
                "themes": [
                    {
                        "theme": "Loss",
                        "theme_slug": "loss",
                        "poems": [
                            {"text": human_text, "author_name": "Halim Madi", "author_type": "human"},
                            {"text": "Machine verse.", "author_name": "hard.exe", "author_type": "machine"},
                        ],
                    }
                ],
            },
            {"name": "soft.exe", "slug": "soft-exe", "color": "#3B82F6", "status": "upcoming"},
        ]
    }


def test_seed_creates_performances_and_pairs(db_session):
    summary = seed_performances(seed_payload())

    assert summary == {
        "performances_created": 2,
        "performances_updated": 0,
        "poems_created": 2,
        "poems_updated": 0,
    }
    performance = Performance.query.filter_by(slug="hard-exe").one()
    assert performance.date.isoformat() == "2024-11-15"
    assert performance.poets == ["Halim Madi"]
    assert Poem.query.filter_by(performance_id=performance.id).count() == 2


def test_seed_is_idempotent_and_keeps_vote_counts(db_session):
    seed_performances(seed_payload())
    human = Poem.query.filter_by(author_type="human").one()
    human.vote_count = 7
    db_session.commit()

    summary = seed_performances(seed_payload(status="trained", human_text="Revised verse."))

    assert summary["performances_updated"] == 2
    assert summary["poems_updated"] == 2
    human = Poem.query.filter_by(author_type="human").one()
    assert human.text == "Revised verse."
    assert human.vote_count == 7
    assert Performance.query.filter_by(slug="hard-exe").one().status == "trained"
    assert Poem.query.count() == 2


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"performances": "nope"},
        {"performances": [{"name": "x", "slug": "x", "color": "#000", "status": "live"}]},
        {"performances": [{"name": "x", "color": "#000"}]},
        {"performances": [{"name": "x", "slug": "x", "color": "#000", "num_poems": None}]},
        {"performances": [{"name": "x", "slug": "x", "color": "#000", "num_poets": -1}]},
    ],
)
def test_seed_rejects_bad_payloads(db_session, payload):
    with pytest.raises(SeedError):
        seed_performances(payload)

    assert Performance.query.count() == 0


def test_seed_rolls_back_on_bad_poem(db_session):
    payload = seed_payload()
    payload["performances"][0]["themes"][0]["poems"][1]["author_type"] = "robot"

    with pytest.raises(SeedError):
        seed_performances(payload)

    assert Performance.query.count() == 0
    assert Poem.query.count() == 0
