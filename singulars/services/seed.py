from datetime import date

from flask import current_app

from singulars.extensions import db
from singulars.models import Performance, Poem
from singulars.models.performance import PERFORMANCE_STATUSES
from singulars.models.poem import AUTHOR_TYPES

PERFORMANCE_FIELDS = (
    "name",
    "color",
    "location",
    "num_poems",
    "num_poets",
    "model_link",
    "huggingface_link",
    "status",
    "poets",
)
COUNT_FIELDS = ("num_poems", "num_poets")


class SeedError(ValueError):
    pass


def _parse_date(value):
    if value in (None, ""):
        return None
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError) as exc:
        raise SeedError(f"Invalid performance date: {value!r}") from exc


def _upsert_performance(data):
    slug = (data.get("slug") or "").strip()
    if not slug or not data.get("name") or not data.get("color"):
        raise SeedError("Performances need a name, slug and color.")

    status = data.get("status", "upcoming")
    if status not in PERFORMANCE_STATUSES:
        raise SeedError(f"Invalid status for {slug}: {status!r}")
    for field in COUNT_FIELDS:
        value = data.get(field, 0)
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise SeedError(f"Invalid {field} for {slug}: {value!r}")

    performance = Performance.query.filter_by(slug=slug).first()
    created = performance is None
    if created:
        performance = Performance(slug=slug)
        db.session.add(performance)

    for field in PERFORMANCE_FIELDS:
        if field in data:
            setattr(performance, field, data[field])
    if "date" in data:
        performance.date = _parse_date(data["date"])
    if performance.poets is None:
        performance.poets = []

    db.session.flush()
    return performance, created


def _upsert_poem(performance, theme, poem_data):
    author_type = poem_data.get("author_type")
    if author_type not in AUTHOR_TYPES:
        raise SeedError(f"Invalid author_type: {author_type!r}")
    if not poem_data.get("text") or not poem_data.get("author_name"):
        raise SeedError(f"Poems need text and author_name ({theme['theme_slug']})")

    poem = Poem.query.filter_by(
        performance_id=performance.id,
        theme_slug=theme["theme_slug"],
        author_type=author_type,
    ).first()
    created = poem is None
    if created:
        poem = Poem(
            performance_id=performance.id,
            theme_slug=theme["theme_slug"],
            author_type=author_type,
        )
        db.session.add(poem)

    poem.theme = theme.get("theme") or theme["theme_slug"]
    poem.text = poem_data["text"]
    poem.author_name = poem_data["author_name"]
    return created


def seed_performances(payload):
    if not isinstance(payload, dict) or not isinstance(payload.get("performances"), list):
        raise SeedError('Invalid seed data: expected top-level "performances" array')

    summary = {
        "performances_created": 0,
        "performances_updated": 0,
        "poems_created": 0,
        "poems_updated": 0,
    }

    try:
        for entry in payload["performances"]:
            performance, created = _upsert_performance(entry)
            summary["performances_created" if created else "performances_updated"] += 1

            for theme in entry.get("themes") or []:
                if not theme.get("theme_slug"):
                    raise SeedError(f"Theme without theme_slug in {performance.slug}")

                poems = theme.get("poems") or []
                author_types = sorted(poem.get("author_type") or "" for poem in poems)
                if author_types != sorted(AUTHOR_TYPES):
                    current_app.logger.warning(
                        "Theme %s/%s is not a human/machine pair (%s poems); voting will be refused",
                        performance.slug,
                        theme["theme_slug"],
                        len(poems),
                    )

                for poem_data in poems:
                    created = _upsert_poem(performance, theme, poem_data)
                    summary["poems_created" if created else "poems_updated"] += 1

        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    current_app.logger.info("Seed complete: %s", summary)
    return summary
