import uuid

from sqlalchemy.sql import func

from singulars.extensions import db

AUTHOR_HUMAN = "human"
AUTHOR_MACHINE = "machine"

AUTHOR_TYPES = (AUTHOR_HUMAN, AUTHOR_MACHINE)


class Poem(db.Model):
    __tablename__ = "poems"
    __table_args__ = (
        db.UniqueConstraint(
            "performance_id",
            "theme_slug",
            "author_type",
            name="uq_poems_performance_theme_author",
        ),
        db.CheckConstraint(
            "author_type IN ('human', 'machine')", name="ck_poems_author_type"
        ),
        db.CheckConstraint("vote_count >= 0", name="ck_poems_vote_count"),
        db.Index("ix_poems_performance_theme", "performance_id", "theme_slug"),
    )

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    performance_id = db.Column(
        db.String(36), db.ForeignKey("performances.id"), nullable=False
    )
    theme = db.Column(db.String(200), nullable=False)
    theme_slug = db.Column(db.String(200), nullable=False)
    text = db.Column(db.Text, nullable=False)
    author_name = db.Column(db.String(200), nullable=False)
    author_type = db.Column(db.String(20), nullable=False)
    # Denormalized; only the atomic vote commit may change it.
    vote_count = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime(timezone=True), server_default=func.now())

    votes = db.relationship("Vote", backref="poem", lazy=True)
