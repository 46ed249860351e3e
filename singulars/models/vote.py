import uuid

from sqlalchemy.sql import func

from singulars.extensions import db


class Vote(db.Model):
    __tablename__ = "votes"
    __table_args__ = (
        db.UniqueConstraint(
            "voter_fingerprint", "poem_id", name="uq_votes_fingerprint_poem"
        ),
        # One vote per fingerprint across both poems of a pair.
        db.UniqueConstraint(
            "voter_fingerprint",
            "performance_id",
            "theme_slug",
            name="uq_votes_fingerprint_pair",
        ),
    )

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    poem_id = db.Column(db.String(36), db.ForeignKey("poems.id"), nullable=False)
    performance_id = db.Column(
        db.String(36), db.ForeignKey("performances.id"), nullable=False
    )
    theme_slug = db.Column(db.String(200), nullable=False)
    voter_fingerprint = db.Column(db.String(255), nullable=False, index=True)
    created_at = db.Column(db.DateTime(timezone=True), server_default=func.now())
