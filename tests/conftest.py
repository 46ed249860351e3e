from pathlib import Path
import sys
import os

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

# Safety default for any module-level app creation during test imports.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from singulars import create_app
from singulars.extensions import db
from singulars.models import Performance, Poem


@pytest.fixture()
def app(tmp_path: Path):
    db_file = tmp_path / "test.sqlite3"
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{db_file}",
            "SQLALCHEMY_ENGINE_OPTIONS": {},
        }
    )

    with app.app_context():
        driver = db.engine.url.drivername
        if driver != "sqlite":
            raise RuntimeError(
                f"Test database must be SQLite, got '{driver}'. Refusing to run destructive test setup."
            )
        db.drop_all()
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def db_session(app):
    with app.app_context():
        yield db.session


def _make_performance(db_session, slug="hard-exe", status="training", **fields):
    performance = Performance(
        name=fields.pop("name", slug.replace("-", ".")),
        slug=slug,
        color=fields.pop("color", "#EF4444"),
        status=status,
        **fields,
    )
    db_session.add(performance)
    db_session.flush()
    return performance


def _make_poem(db_session, performance, author_type, theme_slug="loss", vote_count=0):
    poem = Poem(
        performance_id=performance.id,
        theme=theme_slug.title(),
        theme_slug=theme_slug,
        text=f"A {author_type} poem about {theme_slug}.",
        author_name="Halim Madi" if author_type == "human" else performance.name,
        author_type=author_type,
        vote_count=vote_count,
    )
    db_session.add(poem)
    db_session.flush()
    return poem


@pytest.fixture()
def performance(db_session):
    performance = _make_performance(db_session)
    db_session.commit()
    return performance


@pytest.fixture()
def poem_pair(db_session, performance):
    """Human poem with 3 votes and machine poem with 5, as (human_id, machine_id)."""
    human = _make_poem(db_session, performance, "human", vote_count=3)
    machine = _make_poem(db_session, performance, "machine", vote_count=5)
    db_session.commit()
    return human.id, machine.id


@pytest.fixture()
def empty_pair(db_session, performance):
    human = _make_poem(db_session, performance, "human", theme_slug="water")
    machine = _make_poem(db_session, performance, "machine", theme_slug="water")
    db_session.commit()
    return human.id, machine.id


@pytest.fixture()
def add_performance(db_session):
    def add(slug, status="training", **fields):
        performance = _make_performance(db_session, slug=slug, status=status, **fields)
        db_session.commit()
        return performance

    return add


@pytest.fixture()
def add_poem(db_session):
    def add(performance, author_type, theme_slug="loss", vote_count=0):
        poem = _make_poem(db_session, performance, author_type, theme_slug, vote_count)
        db_session.commit()
        return poem

    return add
