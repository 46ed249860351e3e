import uuid

from sqlalchemy.sql import func

from singulars.extensions import db

STATUS_UPCOMING = "upcoming"
STATUS_TRAINING = "training"
STATUS_TRAINED = "trained"

PERFORMANCE_STATUSES = (STATUS_UPCOMING, STATUS_TRAINING, STATUS_TRAINED)

# Votes are only accepted while the model is being trained on the audience.
VOTING_OPEN_STATUS = STATUS_TRAINING


class Performance(db.Model):
    __tablename__ = "performances"
    __table_args__ = (
        db.CheckConstraint(
            "status IN ('upcoming', 'training', 'trained')",
            name="ck_performances_status",
        ),
    )

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(200), unique=True, nullable=False)
    color = db.Column(db.String(20), nullable=False)
    location = db.Column(db.String(200), nullable=True)
    date = db.Column(db.Date, nullable=True)
    num_poems = db.Column(db.Integer, nullable=False, default=0)
    num_poets = db.Column(db.Integer, nullable=False, default=0)
    model_link = db.Column(db.String(500), nullable=True)
    huggingface_link = db.Column(db.String(500), nullable=True)
    status = db.Column(db.String(20), nullable=False, default=STATUS_UPCOMING)
    poets = db.Column(db.JSON, nullable=False, default=list)
    created_at = db.Column(db.DateTime(timezone=True), server_default=func.now())

    poems = db.relationship("Poem", backref="performance", lazy=True)

    @property
    def voting_open(self):
        return self.status == VOTING_OPEN_STATUS
