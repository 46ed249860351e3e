from flask import current_app

from singulars.models.poem import AUTHOR_TYPES
from singulars.services.errors import DuplicateVoteError, NotFoundError, RateLimitedError, UnexpectedError
from singulars.services.voting import store
from singulars.services.voting.validation import validate_vote_request

ALREADY_VOTED_MESSAGE = "Already voted on this poem pair"


def _vote_result(success, duplicate, status, message, vote_counts, voted_poem_id=None):
    return {
        "success": success,
        "duplicate": duplicate,
        "status": status,
        "message": message,
        "vote_counts": vote_counts,
        "voted_poem_id": voted_poem_id,
    }


def is_votable_pair(poems):
    return len(poems) == 2 and sorted(poem.author_type for poem in poems) == sorted(AUTHOR_TYPES)


def check_rate_limit(fingerprint):
    limiter = current_app.extensions["vote_rate_limiter"]
    if not limiter.hit(fingerprint):
        retry_after = limiter.retry_after(fingerprint)
        current_app.logger.warning(
            "Vote rate limit hit for fingerprint %s (retry in %ss)", fingerprint, retry_after
        )
        raise RateLimitedError(retry_after)


def cast_vote(poem_id, fingerprint):
    validate_vote_request(poem_id, fingerprint)
    poem_id = poem_id.lower()
    check_rate_limit(fingerprint)

    with store.store_guard("casting a vote"):
        poem = store.get_poem(poem_id)
        if poem is None:
            raise NotFoundError("Poem not found")

        performance = store.get_performance(poem.performance_id)
        if performance is None:
            raise NotFoundError("Performance not found")

        performance_id = performance.id
        status = performance.status
        theme_slug = poem.theme_slug

        pair = store.get_pair(poem)
        pair_ids = [item.id for item in pair]
        existing = store.find_vote(fingerprint, pair_ids)

        if not performance.voting_open:
            return _vote_result(
                False,
                False,
                status,
                f"Voting is closed: training is {status}",
                store.pair_counts(performance_id, theme_slug),
                existing.poem_id if existing else None,
            )

        if not is_votable_pair(pair):
            current_app.logger.warning(
                "Refusing vote on malformed pair %s/%s with %s poems",
                performance.slug,
                theme_slug,
                len(pair),
            )
            return _vote_result(
                False,
                False,
                status,
                "Voting is unavailable for this poem pair",
                store.pair_counts(performance_id, theme_slug),
            )

        if existing is not None:
            return _vote_result(
                False,
                True,
                status,
                ALREADY_VOTED_MESSAGE,
                store.pair_counts(performance_id, theme_slug),
                existing.poem_id,
            )

        try:
            store.record_vote(poem, fingerprint)
        except DuplicateVoteError:
            # Another request for this voter committed first.
            existing = store.find_vote(fingerprint, pair_ids)
            if existing is None:
                current_app.logger.error(
                    "Vote for poem %s rejected by the store without a prior vote", poem_id
                )
                raise UnexpectedError()
            current_app.logger.info(
                "Concurrent duplicate vote for pair %s/%s resolved", performance_id, theme_slug
            )
            return _vote_result(
                False,
                True,
                status,
                ALREADY_VOTED_MESSAGE,
                store.pair_counts(performance_id, theme_slug),
                existing.poem_id,
            )

        current_app.logger.info("Vote recorded for poem %s", poem_id)
        return _vote_result(
            True,
            False,
            status,
            "Vote recorded successfully",
            store.pair_counts(performance_id, theme_slug),
            poem_id,
        )
