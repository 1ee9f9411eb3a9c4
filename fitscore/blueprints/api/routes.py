from datetime import timedelta

from flask import current_app, jsonify, request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from . import bp
from ..survey.forms import EvaluationForm
from ...extensions import db, rq
from ...jobs.processing import (
    process_evaluation,
    run_batch_analytics,
    run_realtime_analytics,
    run_scheduled_report,
    send_candidate_notification,
)
from ...logging_config import sanitize_log_data
from ...models.evaluation import Evaluation
from ...models.notification import APPROVED_CANDIDATES_REPORT, CREATIVE_INSIGHTS, SCHEDULED_REPORT
from ...services import repository
from ...services.insights import WINDOW_24H, aggregate_insights, select_approved
from ...services.notifications import (
    build_approved_report,
    build_insights_email,
    deliver,
    notify_candidate_result,
)
from ...services.scoring import ANSWER_FIELDS, Answers
from ...utils.dates import utcnow
from ...utils.decorators import api_admin_required


def _now_iso():
    return utcnow().isoformat()


def _job_info(job):
    """Describe what ``rq.enqueue`` returned: an RQ job or an inline result."""
    if rq.is_async and job is not None:
        return {"queued": True, "jobId": job.id}
    return {"queued": False, "jobId": None}


def _evaluation_from_body():
    """Resolve ``evaluationId`` from the JSON body; returns (evaluation, error_response)."""
    payload = request.get_json(silent=True) or {}
    evaluation_id = payload.get("evaluationId") if isinstance(payload, dict) else None
    if not evaluation_id:
        return None, (jsonify({"error": "Evaluation ID is required"}), 400)
    try:
        evaluation_id = int(evaluation_id)
    except (TypeError, ValueError):
        return None, (jsonify({"error": "Evaluation ID must be an integer"}), 400)
    ev = repository.get_evaluation(db.session, evaluation_id)
    if ev is None:
        return None, (jsonify({"error": "Evaluation not found"}), 404)
    return ev, None


@bp.get("/healthz")
def healthz():
    return jsonify({"ok": True})


@bp.get("/debug")
@api_admin_required
def debug():
    cfg = current_app.config
    settings = sanitize_log_data({
        "SQLALCHEMY_DATABASE_URI": cfg.get("SQLALCHEMY_DATABASE_URI"),
        "SENDGRID_API_KEY": cfg.get("SENDGRID_API_KEY"),
        "SECRET_KEY": cfg.get("SECRET_KEY"),
        "REDIS_URL": cfg.get("REDIS_URL"),
        "MAIL_BACKEND": cfg.get("MAIL_BACKEND"),
        "ADMIN_REPORT_EMAIL": cfg.get("ADMIN_REPORT_EMAIL"),
    })
    try:
        db.session.execute(text("SELECT 1"))
        database = {"connected": True, "error": None}
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.exception("Database connectivity check failed")
        database = {"connected": False, "error": str(e.__class__.__name__)}
    return jsonify({
        "settings": settings,
        "database": database,
        "queue": {"async": rq.is_async},
        "timestamp": _now_iso(),
    })


@bp.post("/evaluations")
def create_evaluation():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return jsonify({"error": "JSON object body is required"}), 400
    form = EvaluationForm(meta={"csrf": False})
    if not form.validate():
        return jsonify({"error": "Invalid evaluation", "fields": form.errors}), 400

    answers = Answers.from_mapping({f: form[f].data for f in ANSWER_FIELDS})
    ev = Evaluation.from_answers(form.candidate_name.data, form.candidate_email.data, answers)
    db.session.add(ev)
    db.session.commit()
    current_app.logger.info("Evaluation %s created via API: score=%s", ev.id, ev.fit_score)

    rq.enqueue(send_candidate_notification, ev.id)
    return jsonify({"success": True, "evaluation": ev.to_dict()}), 201


@bp.get("/evaluations/<int:evaluation_id>")
@api_admin_required
def get_evaluation(evaluation_id):
    ev = repository.get_evaluation(db.session, evaluation_id)
    if ev is None:
        return jsonify({"error": "Evaluation not found"}), 404
    return jsonify({"success": True, "evaluation": ev.to_dict()})


@bp.post("/notifications/candidate-result")
@api_admin_required
def candidate_result():
    ev, error = _evaluation_from_body()
    if error:
        return error
    message = notify_candidate_result(db.session, ev)
    return jsonify({
        "success": True,
        "message": "Notification sent successfully",
        "emailPreview": message.to_dict(),
    })


@bp.post("/notifications/creative-insights")
@api_admin_required
def creative_insights():
    snapshot = aggregate_insights(repository.list_evaluations(db.session))
    message = build_insights_email(snapshot, current_app.config["ADMIN_REPORT_EMAIL"])
    deliver(db.session, message, CREATIVE_INSIGHTS)
    return jsonify({"success": True, "message": "Insights enviados", "insights": snapshot.to_dict()})


@bp.get("/analytics/real-time-insights")
@api_admin_required
def real_time_insights():
    snapshot = aggregate_insights(repository.list_evaluations(db.session))
    current_app.logger.debug("Insights aggregated over %d evaluations", snapshot.total_evaluations)
    return jsonify({"success": True, "insights": snapshot.to_dict(), "timestamp": _now_iso()})


@bp.get("/analytics/real-time")
@api_admin_required
def real_time():
    evaluations = repository.list_evaluations(db.session)
    job = rq.enqueue(run_realtime_analytics)
    return jsonify({
        "success": True,
        "realTimeData": {
            "totalEvaluations": len(evaluations),
            "lastUpdated": _now_iso(),
            "processingStatus": "active",
            "message": "Analytics sendo processados em background",
            **_job_info(job),
        },
        "evaluations": [ev.to_dict() for ev in evaluations[:10]],
    })


@bp.post("/analytics/real-time")
@api_admin_required
def batch_analytics():
    current_app.logger.info("Starting batch analytics")
    job = rq.enqueue(run_batch_analytics)
    return jsonify({
        "success": True,
        "message": "Processamento em lote iniciado",
        "startedAt": _now_iso(),
        **_job_info(job),
    })


@bp.post("/process/async-evaluation")
@api_admin_required
def async_evaluation():
    ev, error = _evaluation_from_body()
    if error:
        return error
    job = rq.enqueue(process_evaluation, ev.id)
    return jsonify({
        "success": True,
        "message": "Processamento assíncrono iniciado" if rq.is_async else "Processamento assíncrono concluído",
        "evaluationId": ev.id,
        "processedAt": _now_iso(),
        **_job_info(job),
    })


@bp.post("/reports/approved-candidates")
@api_admin_required
def approved_candidates():
    cfg = current_app.config
    window_hours = cfg.get("APPROVED_REPORT_WINDOW_HOURS", 12)
    min_score = cfg.get("APPROVED_REPORT_MIN_SCORE", 80)
    now = utcnow()
    recent = repository.evaluations_since(db.session, now - timedelta(hours=window_hours))
    candidates = select_approved(recent, now, window_hours, min_score)

    if not candidates:
        return jsonify({
            "success": True,
            "message": f"Nenhum candidato aprovado nas últimas {window_hours} horas",
            "count": 0,
        })

    report = build_approved_report(candidates, cfg["ADMIN_REPORT_EMAIL"], window_hours, min_score)
    deliver(db.session, report, APPROVED_CANDIDATES_REPORT)
    current_app.logger.info("Approved candidates report sent: %d candidates", len(candidates))
    return jsonify({
        "success": True,
        "message": "Relatório gerado e enviado com sucesso",
        "count": len(candidates),
        "reportPreview": report.to_dict(),
    })


@bp.post("/reports/scheduled")
@api_admin_required
def start_scheduled_report():
    recent = repository.evaluations_since(db.session, utcnow() - WINDOW_24H)
    job = rq.enqueue(run_scheduled_report)
    return jsonify({
        "success": True,
        "message": "Processamento assíncrono de relatórios iniciado",
        "evaluationsCount": len(recent),
        "startedAt": _now_iso(),
        **_job_info(job),
    })


@bp.get("/reports/scheduled")
@api_admin_required
def scheduled_report_status():
    logs = repository.recent_notification_logs(db.session, SCHEDULED_REPORT, limit=5)
    return jsonify({
        "success": True,
        "processingStatus": "active",
        "lastProcessed": logs[0].sent_at.isoformat() if logs else None,
        "totalProcessed": len(logs),
        "logs": [log.to_dict() for log in logs],
    })
