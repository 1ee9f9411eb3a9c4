"""Email rendering and the notification audit log."""
import logging
from dataclasses import dataclass

from flask import current_app, render_template
from sqlalchemy.exc import SQLAlchemyError

from ..models.notification import CANDIDATE_RESULT, NotificationLog
from .insights import average_score
from .mail import send_email
from .scoring import Classification, display_scores
from ..utils.dates import utcnow

logger = logging.getLogger(__name__)

CLASSIFICATION_COLORS = {
    Classification.FIT_ALTISSIMO.value: "#10B981",
    Classification.FIT_APROVADO.value: "#3B82F6",
    Classification.FIT_QUESTIONAVEL.value: "#F59E0B",
    Classification.FORA_DO_PERFIL.value: "#EF4444",
}


@dataclass
class EmailMessage:
    to: str
    subject: str
    html: str

    def to_dict(self):
        return {"to": self.to, "subject": self.subject, "html": self.html}


def classification_message(classification, score, company):
    if classification == Classification.FIT_ALTISSIMO.value:
        return (
            "Parabéns! Você obteve um resultado excepcional!",
            f"Com um FitScore de {score}, você demonstrou excelente alinhamento com os valores e requisitos da {company}. "
            "Nossa equipe entrará em contato em breve para os próximos passos.",
        )
    if classification == Classification.FIT_APROVADO.value:
        return (
            "Ótimo resultado! Você foi aprovado na avaliação.",
            f"Seu FitScore de {score} indica um bom alinhamento com nosso perfil. "
            "Aguarde contato da nossa equipe para continuidade do processo.",
        )
    if classification == Classification.FIT_QUESTIONAVEL.value:
        return (
            "Resultado da sua avaliação FitScore",
            f"Seu FitScore foi {score}. Embora algumas áreas precisem de desenvolvimento, há potencial. "
            "Nossa equipe pode entrar em contato para feedback detalhado.",
        )
    return (
        "Obrigado por participar da avaliação FitScore",
        f"Seu FitScore foi {score}. Infelizmente, neste momento seu perfil não está alinhado com nossas "
        "necessidades atuais, mas encorajamos você a se desenvolver e tentar novamente no futuro.",
    )


def build_candidate_email(evaluation) -> EmailMessage:
    company = current_app.config.get("COMPANY_NAME", "LEGAL")
    title, message = classification_message(evaluation.fit_classification, evaluation.fit_score, company)
    html = render_template(
        "emails/candidate_result.html",
        evaluation=evaluation,
        title=title,
        message=message,
        color=CLASSIFICATION_COLORS.get(evaluation.fit_classification, "#EF4444"),
        scores=display_scores(evaluation.answers()),
        company=company,
    )
    return EmailMessage(
        to=evaluation.candidate_email,
        subject=f"Resultado da sua Avaliação FitScore - {evaluation.fit_classification}",
        html=html,
    )


def build_approved_report(candidates, recipient, window_hours=12, min_score=80) -> EmailMessage:
    """``candidates`` must already be sorted best first."""
    total = len(candidates)
    html = render_template(
        "emails/approved_report.html",
        candidates=candidates,
        total=total,
        average=average_score(candidates),
        top=candidates[0] if candidates else None,
        window_hours=window_hours,
        min_score=min_score,
        company=current_app.config.get("COMPANY_NAME", "LEGAL"),
    )
    return EmailMessage(
        to=recipient,
        subject=f"Relatório de Candidatos Aprovados - {total} novos candidatos",
        html=html,
    )


def build_insights_email(snapshot, recipient) -> EmailMessage:
    html = render_template(
        "emails/insights.html",
        snapshot=snapshot,
        company=current_app.config.get("COMPANY_NAME", "LEGAL"),
    )
    return EmailMessage(
        to=recipient,
        subject=f"Insights FitScore - {snapshot.total_evaluations} avaliações",
        html=html,
    )


def record_notification(session, notification_type, recipient, status, evaluation_id=None,
                        subject=None, provider_message_id=None):
    """Append a NotificationLog row. A failed write is logged, never raised."""
    log = NotificationLog(
        evaluation_id=evaluation_id,
        notification_type=notification_type,
        recipient_email=recipient,
        status=status,
        subject=subject,
        provider_message_id=provider_message_id,
        sent_at=utcnow(),
    )
    try:
        session.add(log)
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        logger.exception("Could not record %s notification for %s", notification_type, recipient)
        return None
    return log


def deliver(session, message: EmailMessage, notification_type, evaluation_id=None):
    """Send ``message`` and log the outcome; provider errors are re-raised."""
    try:
        _, message_id = send_email(message.to, message.subject, message.html)
    except Exception:
        record_notification(session, notification_type, message.to, "failed",
                            evaluation_id=evaluation_id, subject=message.subject)
        raise
    return record_notification(session, notification_type, message.to, "sent",
                               evaluation_id=evaluation_id, subject=message.subject,
                               provider_message_id=message_id)


def notify_candidate_result(session, evaluation) -> EmailMessage:
    message = build_candidate_email(evaluation)
    deliver(session, message, CANDIDATE_RESULT, evaluation_id=evaluation.id)
    logger.info("Candidate result sent to %s (evaluation %s)", evaluation.candidate_email, evaluation.id)
    return message
