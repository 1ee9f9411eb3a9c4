"""Background jobs behind the processing and reporting endpoints.

The delays are simulated processing time. When RQ is backed by Redis the
jobs survive a web-process restart; in synchronous mode they run inside the
request that enqueued them.
"""
import logging
import time
from functools import wraps

from flask import current_app, has_app_context

from ..extensions import db
from ..models.notification import (
    ASYNC_PROCESSING,
    BATCH_ANALYTICS,
    REAL_TIME_ANALYTICS,
    SCHEDULED_REPORT,
)
from ..services import repository
from ..services.insights import average_score, classification_distribution, within, WINDOW_24H
from ..services.notifications import notify_candidate_result, record_notification
from ..utils.dates import utcnow

logger = logging.getLogger(__name__)


def with_app_context(func):
    """Run ``func`` inside an application context, creating one on workers."""
    @wraps(func)
    def wrapped(*args, **kwargs):
        if has_app_context():
            return func(*args, **kwargs)
        from fitscore import create_app
        app = create_app()
        with app.app_context():
            return func(*args, **kwargs)
    return wrapped


def _simulate(config_key):
    delay = float(current_app.config.get(config_key, 0) or 0)
    if delay > 0:
        time.sleep(delay)


@with_app_context
def send_candidate_notification(evaluation_id: int):
    ev = repository.get_evaluation(db.session, evaluation_id)
    if ev is None:
        logger.warning("Evaluation %s not found, notification skipped", evaluation_id)
        return None
    notify_candidate_result(db.session, ev)
    return ev.id


@with_app_context
def process_evaluation(evaluation_id: int):
    ev = repository.get_evaluation(db.session, evaluation_id)
    if ev is None:
        logger.warning("Evaluation %s not found, processing skipped", evaluation_id)
        return None
    _simulate("ASYNC_EVALUATION_DELAY_SEC")
    notify_candidate_result(db.session, ev)
    record_notification(db.session, ASYNC_PROCESSING, ev.candidate_email, "completed", evaluation_id=ev.id)
    logger.info("Evaluation %s processed", ev.id)
    return {"evaluationId": ev.id, "processedAt": utcnow().isoformat()}


@with_app_context
def run_scheduled_report():
    _simulate("SCHEDULED_REPORT_DELAY_SEC")
    since = utcnow() - WINDOW_24H
    recent = repository.evaluations_since(db.session, since)
    total, avg = len(recent), average_score(recent)
    record_notification(db.session, SCHEDULED_REPORT, current_app.config["ADMIN_REPORT_EMAIL"], "completed")
    logger.info("Scheduled report processed: %d evaluations, average score %d", total, avg)
    return {"total": total, "averageScore": avg}


@with_app_context
def run_realtime_analytics():
    _simulate("REALTIME_ANALYTICS_DELAY_SEC")
    evaluations = repository.list_evaluations(db.session)
    total, avg = len(evaluations), average_score(evaluations)
    trends = []
    if len(within(evaluations, utcnow(), WINDOW_24H)) > 5:
        trends.append("🚀 Alto volume de avaliações nas últimas 24h")
    record_notification(db.session, REAL_TIME_ANALYTICS, current_app.config["ADMIN_REPORT_EMAIL"], "processed")
    logger.info("Real-time analytics processed: total=%d avg=%d trends=%s", total, avg, trends)
    return {"total": total, "averageScore": avg, "trends": trends}


@with_app_context
def run_batch_analytics():
    _simulate("BATCH_ANALYTICS_DELAY_SEC")
    evaluations = repository.list_evaluations(db.session)
    dist = classification_distribution(evaluations)
    record_notification(db.session, BATCH_ANALYTICS, current_app.config["ADMIN_REPORT_EMAIL"], "completed")
    logger.info("Batch analytics completed: total=%d classifications=%s", len(evaluations), dist)
    return {"total": len(evaluations), "classifications": dist}
