from contextlib import contextmanager

from flask import current_app
from sqlalchemy import select, update
from sqlalchemy.exc import DisconnectionError, IntegrityError, OperationalError, SQLAlchemyError

from singulars.extensions import db
from singulars.models import Performance, Poem, Vote
from singulars.services.errors import DuplicateVoteError, StoreUnavailableError, UnexpectedError


@contextmanager
def store_guard(action):
    try:
        yield
    except (OperationalError, DisconnectionError) as exc:
        db.session.rollback()
        current_app.logger.error("Vote store unavailable while %s: %s", action, exc)
        raise StoreUnavailableError() from exc
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.exception("Vote store failure while %s", action)
        raise UnexpectedError() from exc


def get_poem(poem_id):
    return db.session.get(Poem, poem_id)


def get_performance(performance_id):
    return db.session.get(Performance, performance_id)


def get_pair(poem):
    return (
        Poem.query.filter_by(performance_id=poem.performance_id, theme_slug=poem.theme_slug)
        .order_by(Poem.author_type)
        .all()
    )


def pair_counts(performance_id, theme_slug):
    rows = db.session.execute(
        select(Poem.id, Poem.vote_count).where(
            Poem.performance_id == performance_id, Poem.theme_slug == theme_slug
        )
    ).all()
    return {poem_id: vote_count for poem_id, vote_count in rows}


def counts_for(poem_ids):
    if not poem_ids:
        return {}
    rows = db.session.execute(
        select(Poem.id, Poem.vote_count).where(Poem.id.in_(poem_ids))
    ).all()
    return {poem_id: vote_count for poem_id, vote_count in rows}


def find_vote(fingerprint, poem_ids):
    if not poem_ids:
        return None
    return (
        Vote.query.filter(Vote.voter_fingerprint == fingerprint, Vote.poem_id.in_(poem_ids))
        .order_by(Vote.created_at)
        .first()
    )


def votes_for_fingerprint(fingerprint):
    return (
        Vote.query.filter_by(voter_fingerprint=fingerprint).order_by(Vote.created_at).all()
    )


def record_vote(poem, fingerprint):
    """Insert the vote row and bump the poem counter in one transaction.

    Raises DuplicateVoteError when a unique constraint rejects the row; in
    that case neither the row nor the increment is applied.
    """
    poem_id = poem.id
    vote = Vote(
        poem_id=poem_id,
        performance_id=poem.performance_id,
        theme_slug=poem.theme_slug,
        voter_fingerprint=fingerprint,
    )
    try:
        db.session.add(vote)
        db.session.flush()
        db.session.execute(
            update(Poem)
            .where(Poem.id == poem_id)
            .values(vote_count=Poem.vote_count + 1)
            .execution_options(synchronize_session=False)
        )
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        raise DuplicateVoteError(poem_id) from exc
    except BaseException:
        db.session.rollback()
        raise
    return vote
