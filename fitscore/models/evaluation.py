from ..extensions import db
from ..services.scoring import ANSWER_FIELDS, Answers, compute_fit_score
from .base import CreatedAtMixin


class Evaluation(db.Model, CreatedAtMixin):
    __tablename__ = "evaluations"

    id = db.Column(db.Integer, primary_key=True)
    candidate_name = db.Column(db.String(200), nullable=False)
    candidate_email = db.Column(db.String(254), nullable=False, index=True)

    # 1-5 answers
    performance_experience = db.Column(db.Integer, nullable=False)
    performance_deliveries = db.Column(db.Integer, nullable=False)
    performance_skills = db.Column(db.Integer, nullable=False)
    energy_availability = db.Column(db.Integer, nullable=False)
    energy_deadlines = db.Column(db.Integer, nullable=False)
    energy_pressure = db.Column(db.Integer, nullable=False)
    culture_values = db.Column(db.Integer, nullable=False)
    culture_collaboration = db.Column(db.Integer, nullable=False)
    culture_innovation = db.Column(db.Integer, nullable=False)

    # cache of compute_fit_score over the answers above
    fit_score = db.Column(db.Integer, nullable=False)
    fit_classification = db.Column(db.String(40), nullable=False, index=True)

    notifications = db.relationship("NotificationLog", back_populates="evaluation", lazy="dynamic")

    @classmethod
    def from_answers(cls, candidate_name, candidate_email, answers: Answers):
        """The only way to build an Evaluation: the score is always computed here."""
        result = compute_fit_score(answers)
        return cls(
            candidate_name=candidate_name.strip(),
            candidate_email=candidate_email.strip(),
            fit_score=result.score,
            fit_classification=result.classification.value,
            **answers.as_dict(),
        )

    def answers(self) -> Answers:
        return Answers.from_mapping(self)

    def to_dict(self):
        d = {
            "id": self.id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "candidate_name": self.candidate_name,
            "candidate_email": self.candidate_email,
            "fit_score": self.fit_score,
            "fit_classification": self.fit_classification,
        }
        d.update({f: getattr(self, f) for f in ANSWER_FIELDS})
        return d

    def __repr__(self) -> str:
        return f"<Evaluation id={self.id} score={self.fit_score} {self.fit_classification!r}>"
