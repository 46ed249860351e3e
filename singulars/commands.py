import json

import click
from sqlalchemy import func

from singulars.extensions import db
from singulars.models import Performance, Poem, Vote
from singulars.models.performance import PERFORMANCE_STATUSES
from singulars.services.seed import SeedError, seed_performances


def register_commands(app):
    @app.cli.command("seed")
    @click.argument("path", type=click.Path(exists=True, dir_okay=False))
    def seed(path):
        """Load performances and poem pairs from a JSON file."""
        with open(path, encoding="utf-8") as handle:
            try:
                payload = json.load(handle)
            except json.JSONDecodeError as exc:
                raise click.ClickException(f"Failed to read JSON file {path}: {exc}")

        try:
            summary = seed_performances(payload)
        except SeedError as exc:
            raise click.ClickException(str(exc))

        click.echo(
            "Performances: {performances_created} created, {performances_updated} updated. "
            "Poems: {poems_created} created, {poems_updated} updated.".format(**summary)
        )

    @app.cli.command("print-votes")
    @click.argument("slug")
    def print_votes(slug):
        """Show each poem's counter next to its committed vote rows."""
        performance = Performance.query.filter_by(slug=slug).first()
        if not performance:
            raise click.ClickException(f"Performance {slug} not found")

        rows = (
            db.session.query(Poem, func.count(Vote.id))
            .outerjoin(Vote, Vote.poem_id == Poem.id)
            .filter(Poem.performance_id == performance.id)
            .group_by(Poem.id)
            .order_by(Poem.theme_slug, Poem.author_type)
            .all()
        )

        click.echo(f"{performance.name} ({performance.slug}) - {performance.status}")
        if not rows:
            click.echo("No poems found.")
            return

        total = 0
        for poem, vote_rows in rows:
            total += poem.vote_count
            drift = "" if poem.vote_count == vote_rows else f"  DRIFT: {vote_rows} vote rows"
            click.echo(
                f"{poem.theme_slug} | {poem.author_type:<7} | "
                f"vote_count: {poem.vote_count:>3} | {poem.id}{drift}"
            )
        click.echo(f"Total votes: {total}")

    @app.cli.command("set-status")
    @click.argument("slug")
    @click.argument("status", type=click.Choice(PERFORMANCE_STATUSES))
    def set_status(slug, status):
        """Advance a performance: upcoming -> training -> trained."""
        performance = Performance.query.filter_by(slug=slug).first()
        if not performance:
            raise click.ClickException(f"Performance {slug} not found")

        current = PERFORMANCE_STATUSES.index(performance.status)
        target = PERFORMANCE_STATUSES.index(status)
        if target == current:
            click.echo(f"{slug} is already {status}")
            return
        if target != current + 1:
            raise click.ClickException(
                f"Cannot move {slug} from {performance.status} to {status}"
            )

        performance.status = status
        db.session.commit()
        click.echo(f"Status updated to {status}")
