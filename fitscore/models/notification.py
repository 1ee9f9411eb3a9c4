from ..extensions import db
from ..utils.dates import utcnow

CANDIDATE_RESULT = "candidate_result"
ASYNC_PROCESSING = "async_processing"
APPROVED_CANDIDATES_REPORT = "approved_candidates_report"
SCHEDULED_REPORT = "scheduled_report"
REAL_TIME_ANALYTICS = "real_time_analytics"
BATCH_ANALYTICS = "batch_analytics"
CREATIVE_INSIGHTS = "creative_insights"


class NotificationLog(db.Model):
    """Append-only record of notifications and processing events."""
    __tablename__ = "notification_logs"
    id = db.Column(db.Integer, primary_key=True)
    evaluation_id = db.Column(db.Integer, db.ForeignKey("evaluations.id"), nullable=True, index=True)
    notification_type = db.Column(db.String(50), nullable=False, index=True)
    recipient_email = db.Column(db.String(254))
    status = db.Column(db.String(20), nullable=False)  # sent/failed/processed/completed
    subject = db.Column(db.String(255))
    provider_message_id = db.Column(db.String(255))
    sent_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    evaluation = db.relationship("Evaluation", back_populates="notifications")

    def to_dict(self):
        return {
            "id": self.id,
            "evaluation_id": self.evaluation_id,
            "notification_type": self.notification_type,
            "recipient_email": self.recipient_email,
            "status": self.status,
            "subject": self.subject,
            "sent_at": self.sent_at.isoformat() if self.sent_at else None,
        }
