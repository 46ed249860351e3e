from singulars.routes.performances import register_performance_routes
from singulars.routes.votes import register_vote_routes


def register_routes(app):
    register_performance_routes(app)
    register_vote_routes(app)
