import logging
from uuid import uuid4

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail
from flask import current_app

logger = logging.getLogger(__name__)


def send_email(to_email, subject, html):
    """Deliver a message; returns (status, provider_message_id).

    The default ``console`` backend only logs the message.
    """
    backend = current_app.config.get('MAIL_BACKEND', 'console')
    if backend == 'sendgrid':
        sg = SendGridAPIClient(api_key=current_app.config['SENDGRID_API_KEY'])
        message = Mail(from_email=(current_app.config['MAIL_FROM'], current_app.config['MAIL_FROM_NAME']),
                       to_emails=to_email,
                       subject=subject,
                       html_content=html)
        resp = sg.send(message)
        headers = getattr(resp, 'headers', None) or {}
        return resp.status_code, headers.get('X-Message-Id')

    message_id = f"console-{uuid4().hex}"
    logger.info("Email to %s [%s]: %s (%d chars of html)", to_email, message_id, subject, len(html or ""))
    return 202, message_id
