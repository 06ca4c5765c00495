"""
Email service for Toogo.

Sends transactional emails over SMTP (store-ready notifications, owner
alerts). Templates live under templates/emails/.

Usage:
    from toogo.services.email_service import send_email_sync

    send_email_sync(
        to="owner@example.com",
        subject="Your store is live",
        template="emails/store_ready.html",
        context={"domain": "example.com"},
    )
"""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from flask import current_app, render_template

logger = logging.getLogger(__name__)


def _send_smtp(app, msg):
    """Deliver a built message. Returns True when the SMTP server accepted it."""
    with app.app_context():
        host = app.config.get("MAIL_SMTP_HOST", "smtp.gmail.com")
        port = app.config.get("MAIL_SMTP_PORT", 587)
        username = app.config.get("MAIL_USERNAME")
        password = app.config.get("MAIL_PASSWORD")

        if not username or not password:
            logger.warning("Email not sent: MAIL_USERNAME or MAIL_PASSWORD not configured.")
            return False

        try:
            with smtplib.SMTP(host, port, timeout=30) as server:
                server.ehlo()
                server.starttls()
                server.ehlo()
                server.login(username, password)
                server.send_message(msg)
            logger.info(f"Email sent to {msg['To']}: {msg['Subject']}")
            return True
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {msg['To']}: {e}")
            return False


def _build_message(app, to, subject, template, context, reply_to):
    from_name = app.config.get("MAIL_FROM_NAME", "Toogo")
    from_email = app.config.get("MAIL_FROM_ADDRESS") or app.config.get("MAIL_USERNAME", "")

    html_body = render_template(template, **(context or {}))

    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = f"{from_name} <{from_email}>"
    msg["To"] = to if isinstance(to, str) else ", ".join(to)

    if reply_to:
        msg["Reply-To"] = reply_to

    msg.attach(MIMEText(html_body, "html"))
    return msg


def send_email_sync(to, subject, template, context=None, reply_to=None):
    """
    Send a templated HTML email and block until SMTP answers. Cron jobs
    use the return value to record whether delivery succeeded.

    Returns True on success.
    """
    app = current_app._get_current_object()
    msg = _build_message(app, to, subject, template, context, reply_to)
    return _send_smtp(app, msg)
