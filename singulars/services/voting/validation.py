import re

from flask import current_app

from singulars.models import Vote
from singulars.services.errors import ValidationError

POEM_ID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)
MARKUP_PATTERN = re.compile(r"<[^>]*>")


def max_fingerprint_length():
    # Never wider than the stored column.
    column_length = Vote.__table__.c.voter_fingerprint.type.length
    return min(current_app.config["FINGERPRINT_MAX_LENGTH"], column_length)


def is_valid_poem_id(poem_id):
    return isinstance(poem_id, str) and bool(POEM_ID_PATTERN.match(poem_id))


def fingerprint_problem(fingerprint):
    """Return why ``fingerprint`` is unacceptable, or None when it is fine."""
    if not isinstance(fingerprint, str):
        return "Invalid fingerprint format: must be a string"
    if not fingerprint.strip():
        return "Missing required field: fingerprint"
    limit = max_fingerprint_length()
    if len(fingerprint) > limit:
        return f"Invalid fingerprint: exceeds maximum length of {limit} characters"
    # Rejected rather than stripped so both sides keep the same identifier.
    if MARKUP_PATTERN.search(fingerprint):
        return "Invalid fingerprint: contains disallowed characters"
    return None


def validate_fingerprint(fingerprint):
    problem = fingerprint_problem(fingerprint)
    if problem:
        raise ValidationError(problem)
    return fingerprint


def validate_poem_id(poem_id):
    if not is_valid_poem_id(poem_id):
        raise ValidationError("Invalid poem_id format: must be a valid UUID")
    return poem_id


def validate_vote_request(poem_id, fingerprint):
    if not poem_id or not fingerprint:
        raise ValidationError("Missing required fields: poem_id and fingerprint")
    validate_poem_id(poem_id)
    validate_fingerprint(fingerprint)
