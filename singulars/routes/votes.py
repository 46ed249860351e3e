from flask import current_app, jsonify, request

from singulars.services.errors import GENERIC_FAILURE_MESSAGE, RateLimitedError, VoteServiceError
from singulars.services.fingerprint import request_identity_provider, request_signals
from singulars.services.voting import cast_vote, check_votes, list_votes, theme_vote_counts


def error_response(exc):
    body = {
        "success": False,
        "duplicate": False,
        "error": exc.message,
        "message": exc.message,
    }
    response = jsonify(body)
    response.status_code = exc.status_code
    if isinstance(exc, RateLimitedError):
        response.headers["Retry-After"] = str(exc.retry_after)
    return response


def unexpected_response(action):
    current_app.logger.exception("Unexpected error while %s", action)
    return jsonify(
        {
            "success": False,
            "duplicate": False,
            "error": GENERIC_FAILURE_MESSAGE,
            "message": GENERIC_FAILURE_MESSAGE,
        }
    ), 500


def register_vote_routes(app):
    @app.route("/api/vote", methods=["POST"])
    def vote():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            data = {}

        try:
            result = cast_vote(data.get("poem_id"), data.get("fingerprint"))
        except VoteServiceError as exc:
            return error_response(exc)
        except Exception:
            return unexpected_response("casting a vote")

        return jsonify(result)

    @app.route("/api/check-votes")
    def check_votes_view():
        fingerprint = request.args.get("fingerprint")
        if not fingerprint:
            return jsonify({"error": "fingerprint query param required"}), 400

        poem_ids = request.args.get("poem_ids")
        try:
            if poem_ids:
                return jsonify(check_votes(fingerprint, poem_ids))
            return jsonify(list_votes(fingerprint))
        except VoteServiceError as exc:
            return error_response(exc)
        except Exception:
            return unexpected_response("checking votes")

    @app.route("/api/vote-counts/<theme_slug>")
    def vote_counts(theme_slug):
        try:
            return jsonify(theme_vote_counts(theme_slug, request.args.get("performance")))
        except VoteServiceError as exc:
            return error_response(exc)
        except Exception:
            return unexpected_response("reading vote counts")

    @app.route("/api/fingerprint", methods=["GET", "POST"])
    def fingerprint():
        provider = request_identity_provider()

        if request.method == "GET":
            return jsonify({"fingerprint": provider.get_identifier_sync()})

        data = request.get_json(silent=True) or {}
        signals = data.get("signals") if isinstance(data, dict) else None
        if not isinstance(signals, dict):
            signals = {}

        return jsonify({"fingerprint": provider.get_identifier(request_signals(signals))})
