from datetime import datetime, timezone

from flask import current_app, jsonify
from sqlalchemy import inspect, select
from sqlalchemy.exc import SQLAlchemyError

from singulars.extensions import db
from singulars.models import Performance, Poem

REQUIRED_TABLES = ("performances", "poems", "votes")


def serialize_performance(performance):
    return {
        "id": performance.id,
        "name": performance.name,
        "slug": performance.slug,
        "color": performance.color,
        "location": performance.location,
        "date": performance.date.isoformat() if performance.date else None,
        "num_poems": performance.num_poems,
        "num_poets": performance.num_poets,
        "model_link": performance.model_link,
        "huggingface_link": performance.huggingface_link,
        "status": performance.status,
        "poets": performance.poets or [],
        "created_at": performance.created_at.isoformat() if performance.created_at else None,
    }


def serialize_poem(poem):
    return {
        "id": poem.id,
        "performance_id": poem.performance_id,
        "theme": poem.theme,
        "theme_slug": poem.theme_slug,
        "text": poem.text,
        "author_name": poem.author_name,
        "author_type": poem.author_type,
        "vote_count": poem.vote_count,
    }


def group_by_theme(poems):
    themes = {}
    for poem in poems:
        theme = themes.setdefault(
            poem.theme_slug,
            {"theme": poem.theme, "theme_slug": poem.theme_slug, "poems": []},
        )
        theme["poems"].append(serialize_poem(poem))
    return list(themes.values())


def register_performance_routes(app):
    @app.route("/api/performances")
    def performances():
        rows = Performance.query.order_by(Performance.date.desc()).all()
        return jsonify([serialize_performance(performance) for performance in rows])

    @app.route("/api/performances/<slug>")
    def performance_detail(slug):
        performance = Performance.query.filter_by(slug=slug).first()
        if not performance:
            return jsonify({"error": "Performance not found"}), 404

        poems = (
            Poem.query.filter_by(performance_id=performance.id)
            .order_by(Poem.theme_slug, Poem.author_type)
            .all()
        )
        payload = serialize_performance(performance)
        payload["poems"] = [serialize_poem(poem) for poem in poems]
        payload["themes"] = group_by_theme(poems)
        return jsonify(payload)

    @app.route("/api/poems/<performance_slug>/<theme_slug>")
    def poem_pair(performance_slug, theme_slug):
        performance = Performance.query.filter_by(slug=performance_slug).first()
        if not performance:
            return jsonify({"error": "Performance not found"}), 404

        poems = (
            Poem.query.filter_by(performance_id=performance.id, theme_slug=theme_slug)
            .order_by(Poem.author_type)
            .all()
        )
        if not poems:
            return jsonify({"error": "Poem pair not found"}), 404

        return jsonify(
            {
                "performance": {
                    "id": performance.id,
                    "name": performance.name,
                    "slug": performance.slug,
                    "color": performance.color,
                    "status": performance.status,
                },
                "poems": [serialize_poem(poem) for poem in poems],
            }
        )

    @app.route("/api/health")
    def health():
        timestamp = datetime.now(timezone.utc).isoformat()
        try:
            db.session.execute(select(1))
            existing = set(inspect(db.engine).get_table_names())
        except SQLAlchemyError as exc:
            db.session.rollback()
            current_app.logger.error("Health check could not reach the database: %s", exc)
            return jsonify(
                {"status": "error", "database": "unreachable", "timestamp": timestamp}
            ), 503

        tables = {table: table in existing for table in REQUIRED_TABLES}
        all_tables = all(tables.values())
        return jsonify(
            {
                "status": "healthy" if all_tables else "partial",
                "database": "connected",
                "schema": "applied" if all_tables else "partial",
                "tables": tables,
                "timestamp": timestamp,
            }
        )
