"""Evaluation and notification-log queries.

Every function receives the SQLAlchemy session from its caller; request
handlers pass ``db.session``, jobs pass the session of their own app
context.
"""
from datetime import datetime
from typing import Optional

from sqlalchemy import or_, select

from ..models.evaluation import Evaluation
from ..models.notification import NotificationLog


def evaluations_query(q: Optional[str] = None, classification: Optional[str] = None):
    stmt = select(Evaluation)
    if q:
        like = f"%{q.strip()}%"
        stmt = stmt.where(or_(Evaluation.candidate_name.ilike(like), Evaluation.candidate_email.ilike(like)))
    if classification and classification != "all":
        stmt = stmt.where(Evaluation.fit_classification == classification)
    return stmt.order_by(Evaluation.created_at.desc(), Evaluation.id.desc())


def list_evaluations(session, q=None, classification=None, limit=None):
    stmt = evaluations_query(q, classification)
    if limit:
        stmt = stmt.limit(limit)
    return list(session.scalars(stmt))


def get_evaluation(session, evaluation_id) -> Optional[Evaluation]:
    return session.get(Evaluation, evaluation_id)


def evaluations_since(session, since: datetime):
    stmt = (
        select(Evaluation)
        .where(Evaluation.created_at >= since)
        .order_by(Evaluation.created_at.desc())
    )
    return list(session.scalars(stmt))


def recent_notification_logs(session, notification_type=None, limit=5, evaluation_id=None):
    stmt = select(NotificationLog)
    if notification_type:
        stmt = stmt.where(NotificationLog.notification_type == notification_type)
    if evaluation_id is not None:
        stmt = stmt.where(NotificationLog.evaluation_id == evaluation_id)
    stmt = stmt.order_by(NotificationLog.sent_at.desc(), NotificationLog.id.desc()).limit(limit)
    return list(session.scalars(stmt))
