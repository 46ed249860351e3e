from flask import current_app

from singulars.models import Performance, Poem
from singulars.services.errors import NotFoundError, ValidationError
from singulars.services.voting import store
from singulars.services.voting.validation import is_valid_poem_id, validate_fingerprint


def parse_poem_ids(raw):
    if isinstance(raw, str):
        raw = raw.split(",")
    poem_ids = []
    for value in raw or []:
        value = (value or "").strip().lower()
        if value and value not in poem_ids:
            poem_ids.append(value)

    limit = current_app.config["CHECK_VOTES_MAX_POEMS"]
    if len(poem_ids) > limit:
        raise ValidationError(f"Too many poem_ids: at most {limit} are allowed")
    for poem_id in poem_ids:
        if not is_valid_poem_id(poem_id):
            raise ValidationError("Invalid poem_ids: each id must be a valid UUID")
    return poem_ids


def check_votes(fingerprint, poem_ids):
    validate_fingerprint(fingerprint)
    poem_ids = parse_poem_ids(poem_ids)

    with store.store_guard("checking votes"):
        vote = store.find_vote(fingerprint, poem_ids)
        vote_counts = store.counts_for(poem_ids)

    voted_poem_id = vote.poem_id if vote else None
    return {
        "fingerprint": fingerprint,
        "voted_poem_id": voted_poem_id,
        "vote_counts": vote_counts,
        "has_voted": voted_poem_id is not None,
    }


def list_votes(fingerprint):
    validate_fingerprint(fingerprint)

    with store.store_guard("listing votes"):
        votes = store.votes_for_fingerprint(fingerprint)

    return {
        "fingerprint": fingerprint,
        "count": len(votes),
        "votes": [
            {
                "id": vote.id,
                "poem_id": vote.poem_id,
                "created_at": vote.created_at.isoformat() if vote.created_at else None,
            }
            for vote in votes
        ],
    }


def theme_vote_counts(theme_slug, performance_slug=None):
    with store.store_guard("reading theme counts"):
        query = Poem.query.filter_by(theme_slug=theme_slug)
        if performance_slug:
            performance = Performance.query.filter_by(slug=performance_slug).first()
            if performance is None:
                raise NotFoundError("Performance not found")
            query = query.filter_by(performance_id=performance.id)
        poems = query.order_by(Poem.author_type).all()

    if not poems:
        raise NotFoundError("No poems found for this theme")

    return {
        "theme_slug": theme_slug,
        "poems": {
            poem.id: {"vote_count": poem.vote_count, "author_type": poem.author_type}
            for poem in poems
        },
    }
