import logging

from flask import Flask

from singulars.commands import register_commands
from singulars.config import Config
from singulars.extensions import db, migrate
from singulars.routes import register_routes
from singulars.services.rate_limit import SlidingWindowRateLimiter


def create_app(test_config=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    app.logger.setLevel(getattr(logging, str(app.config["LOG_LEVEL"]).upper(), logging.INFO))

    db.init_app(app)
    migrate.init_app(app, db)

    app.extensions["vote_rate_limiter"] = SlidingWindowRateLimiter(
        max_requests=app.config["VOTE_RATE_LIMIT_MAX_REQUESTS"],
        window_seconds=app.config["VOTE_RATE_LIMIT_WINDOW_SECONDS"],
    )

    register_routes(app)
    register_commands(app)
    return app


app = create_app()

__all__ = ["app", "db", "migrate", "create_app"]
