from datetime import date

from sqlalchemy.exc import OperationalError


def test_performances_are_listed_newest_first(client, add_performance):
    add_performance("old-show", date=date(2023, 5, 1), status="trained")
    add_performance("new-show", date=date(2024, 11, 15))

    body = client.get("/api/performances").get_json()

    assert [item["slug"] for item in body] == ["new-show", "old-show"]
    assert body[0]["date"] == "2024-11-15"
    assert body[0]["poets"] == []


def test_performance_detail_groups_poems_by_theme(client, poem_pair, empty_pair):
    response = client.get("/api/performances/hard-exe")

    assert response.status_code == 200
    body = response.get_json()
    assert body["slug"] == "hard-exe"
    assert len(body["poems"]) == 4
    assert [theme["theme_slug"] for theme in body["themes"]] == ["loss", "water"]
    assert [poem["author_type"] for poem in body["themes"][0]["poems"]] == ["human", "machine"]


def test_poem_pair_endpoint(client, poem_pair):
    body = client.get("/api/poems/hard-exe/loss").get_json()

    assert body["performance"]["status"] == "training"
    assert {poem["id"] for poem in body["poems"]} == set(poem_pair)


def test_missing_resources_are_404(client, performance):
    assert client.get("/api/performances/nope").status_code == 404
    assert client.get("/api/poems/nope/loss").status_code == 404
    assert client.get("/api/poems/hard-exe/nope").status_code == 404


def test_health_reports_tables(client):
    body = client.get("/api/health").get_json()

    assert body["status"] == "healthy"
    assert body["tables"] == {"performances": True, "poems": True, "votes": True}


def test_health_reports_unreachable_database(monkeypatch, client):
    def unreachable(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    monkeypatch.setattr("singulars.routes.performances.inspect", unreachable)

    response = client.get("/api/health")

    assert response.status_code == 503
    assert response.get_json()["database"] == "unreachable"
