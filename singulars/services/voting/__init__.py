from singulars.services.voting.casting import cast_vote, is_votable_pair
from singulars.services.voting.queries import check_votes, list_votes, theme_vote_counts

__all__ = [
    "cast_vote",
    "check_votes",
    "is_votable_pair",
    "list_votes",
    "theme_vote_counts",
]
