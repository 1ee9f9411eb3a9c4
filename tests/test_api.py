from datetime import timedelta

import pytest

from conftest import answers_payload
from fitscore.extensions import db
from fitscore.models.evaluation import Evaluation
from fitscore.models.notification import (
    APPROVED_CANDIDATES_REPORT,
    ASYNC_PROCESSING,
    BATCH_ANALYTICS,
    CANDIDATE_RESULT,
    CREATIVE_INSIGHTS,
    REAL_TIME_ANALYTICS,
    SCHEDULED_REPORT,
    NotificationLog,
)
from fitscore.models.user import User
from fitscore.services.insights import AWAITING_DATA


def _logs(notification_type):
    return NotificationLog.query.filter_by(notification_type=notification_type).all()


def _evaluation_body(**overrides):
    body = {"candidate_name": "João Pereira", "candidate_email": "joao@example.com"}
    body.update(answers_payload(3))
    body.update(overrides)
    return body


def test_healthz(client):
    assert client.get("/api/healthz").get_json() == {"ok": True}


def test_unknown_api_path_returns_json_404(client):
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert resp.get_json() == {"error": "Not found"}


def test_create_evaluation(client):
    resp = client.post("/api/evaluations", json=_evaluation_body())
    assert resp.status_code == 201
    data = resp.get_json()
    assert data["success"] is True
    assert data["evaluation"]["fit_score"] == 30
    assert data["evaluation"]["fit_classification"] == "Fora do Perfil"
    assert Evaluation.query.count() == 1
    assert len(_logs(CANDIDATE_RESULT)) == 1


def test_create_evaluation_rejects_out_of_range_answer(client):
    resp = client.post("/api/evaluations", json=_evaluation_body(culture_values=9))
    assert resp.status_code == 400
    assert "culture_values" in resp.get_json()["fields"]
    assert Evaluation.query.count() == 0


@pytest.mark.parametrize("field,value", [
    ("performance_experience", 4.9),
    ("energy_pressure", True),
    ("culture_values", "4"),
])
def test_create_evaluation_rejects_non_integer_answers(client, field, value):
    resp = client.post("/api/evaluations", json=_evaluation_body(**{field: value}))
    assert resp.status_code == 400
    assert field in resp.get_json()["fields"]
    assert Evaluation.query.count() == 0


def test_create_evaluation_rejects_missing_fields(client):
    body = _evaluation_body()
    del body["energy_pressure"]
    resp = client.post("/api/evaluations", json=body)
    assert resp.status_code == 400
    assert "energy_pressure" in resp.get_json()["fields"]


def test_create_evaluation_requires_json_object(client):
    assert client.post("/api/evaluations", data="nope").status_code == 400
    assert client.post("/api/evaluations", json=[1, 2]).status_code == 400


def test_admin_endpoints_require_login(client, make_evaluation):
    ev = make_evaluation()
    resp = client.get(f"/api/evaluations/{ev.id}")
    assert resp.status_code == 401
    assert resp.get_json() == {"error": "Authentication required"}
    assert client.post("/api/reports/approved-candidates").status_code == 401


def test_non_admin_role_is_forbidden(client, app):
    user = User(email="viewer@example.com", role="viewer")
    user.set_password("viewer-pass")
    db.session.add(user)
    db.session.commit()
    client.post("/auth/login", data={"email": "viewer@example.com", "password": "viewer-pass"})
    resp = client.get("/api/analytics/real-time-insights")
    assert resp.status_code == 403
    assert resp.get_json() == {"error": "Admin access required"}


def test_get_evaluation(admin_client, make_evaluation):
    ev = make_evaluation()
    resp = admin_client.get(f"/api/evaluations/{ev.id}")
    assert resp.status_code == 200
    assert resp.get_json()["evaluation"]["candidate_email"] == "ana@example.com"
    assert admin_client.get("/api/evaluations/999").status_code == 404


def test_candidate_result_notification(admin_client, make_evaluation):
    ev = make_evaluation(value=5)
    resp = admin_client.post("/api/notifications/candidate-result", json={"evaluationId": ev.id})
    assert resp.status_code == 200
    preview = resp.get_json()["emailPreview"]
    assert preview["to"] == "ana@example.com"
    assert preview["subject"] == "Resultado da sua Avaliação FitScore - Fit Questionável"
    assert [log.status for log in _logs(CANDIDATE_RESULT)] == ["sent"]


def test_candidate_result_validates_id(admin_client):
    resp = admin_client.post("/api/notifications/candidate-result", json={})
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Evaluation ID is required"}
    assert admin_client.post("/api/notifications/candidate-result", json={"evaluationId": "x"}).status_code == 400
    assert admin_client.post("/api/notifications/candidate-result", json={"evaluationId": 404}).status_code == 404


def test_real_time_insights_empty(admin_client):
    data = admin_client.get("/api/analytics/real-time-insights").get_json()
    assert data["insights"]["totalEvaluations"] == 0
    assert data["insights"]["recommendations"] == [AWAITING_DATA]


def test_real_time_insights_with_data(admin_client, make_evaluation):
    make_evaluation(fit_score=90, fit_classification="Fit Altíssimo")
    make_evaluation(fit_score=50, fit_classification="Fit Questionável")
    insights = admin_client.get("/api/analytics/real-time-insights").get_json()["insights"]
    assert insights["totalEvaluations"] == 2
    assert insights["averageScore"] == 70
    assert insights["approvalRate"] == 50


def test_real_time_analytics_runs_job(admin_client, make_evaluation):
    for i in range(12):
        make_evaluation(email=f"c{i}@example.com")
    data = admin_client.get("/api/analytics/real-time").get_json()
    assert data["realTimeData"]["totalEvaluations"] == 12
    assert data["realTimeData"]["queued"] is False
    assert len(data["evaluations"]) == 10
    assert [log.status for log in _logs(REAL_TIME_ANALYTICS)] == ["processed"]


def test_batch_analytics(admin_client, make_evaluation):
    make_evaluation()
    resp = admin_client.post("/api/analytics/real-time")
    assert resp.get_json()["success"] is True
    assert [log.status for log in _logs(BATCH_ANALYTICS)] == ["completed"]


def test_async_evaluation(admin_client, make_evaluation):
    ev = make_evaluation()
    data = admin_client.post("/api/process/async-evaluation", json={"evaluationId": ev.id}).get_json()
    assert data["evaluationId"] == ev.id
    assert data["queued"] is False
    assert [log.status for log in _logs(ASYNC_PROCESSING)] == ["completed"]
    assert len(_logs(CANDIDATE_RESULT)) == 1


def test_approved_candidates_none(admin_client, make_evaluation):
    make_evaluation()
    data = admin_client.post("/api/reports/approved-candidates").get_json()
    assert data == {"success": True, "message": "Nenhum candidato aprovado nas últimas 12 horas", "count": 0}
    assert _logs(APPROVED_CANDIDATES_REPORT) == []


def test_approved_candidates_report(admin_client, make_evaluation):
    make_evaluation(name="Alta", email="alta@example.com", fit_score=92, fit_classification="Fit Altíssimo")
    make_evaluation(name="Boa", email="boa@example.com", fit_score=85, fit_classification="Fit Altíssimo")
    make_evaluation(name="Antiga", email="antiga@example.com", fit_score=99,
                    fit_classification="Fit Altíssimo", age=timedelta(hours=13))
    make_evaluation(name="Media", email="media@example.com", fit_score=70, fit_classification="Fit Aprovado")

    data = admin_client.post("/api/reports/approved-candidates").get_json()
    assert data["count"] == 2
    assert data["reportPreview"]["to"] == "reports@example.com"
    assert data["reportPreview"]["subject"] == "Relatório de Candidatos Aprovados - 2 novos candidatos"
    assert "Antiga" not in data["reportPreview"]["html"]
    assert [log.status for log in _logs(APPROVED_CANDIDATES_REPORT)] == ["sent"]


def test_scheduled_report_roundtrip(admin_client, make_evaluation):
    make_evaluation()
    status = admin_client.get("/api/reports/scheduled").get_json()
    assert status["totalProcessed"] == 0
    assert status["lastProcessed"] is None

    started = admin_client.post("/api/reports/scheduled").get_json()
    assert started["evaluationsCount"] == 1
    assert len(_logs(SCHEDULED_REPORT)) == 1

    status = admin_client.get("/api/reports/scheduled").get_json()
    assert status["totalProcessed"] == 1
    assert status["logs"][0]["status"] == "completed"


def test_creative_insights(admin_client, make_evaluation):
    make_evaluation()
    data = admin_client.post("/api/notifications/creative-insights").get_json()
    assert data["insights"]["totalEvaluations"] == 1
    assert [log.status for log in _logs(CREATIVE_INSIGHTS)] == ["sent"]


def test_debug_redacts_secrets(admin_client):
    data = admin_client.get("/api/debug").get_json()
    assert data["settings"]["SECRET_KEY"] == "***REDACTED***"
    assert data["settings"]["SQLALCHEMY_DATABASE_URI"] == "***REDACTED***"
    assert data["settings"]["MAIL_BACKEND"] == "console"
    assert data["database"]["connected"] is True
    assert data["queue"]["async"] is False
