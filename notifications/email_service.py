"""
Outgoing email for booking redirects.

Messages go through a plain SMTP relay configured in settings. When no
SMTP_HOST is configured the message is only logged, which is what local
development and the test suite rely on.
"""
from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage

from core.config_loader import settings
from outofoffice.schema import BookingRedirectNotification

from .templates import render_booking_redirect_notification

logger = logging.getLogger(__name__)


def build_message(*, sender: str, recipient: str, subject: str, body_text: str, body_html: str | None = None) -> EmailMessage:
    msg = EmailMessage()
    msg["Subject"] = subject
    msg["From"] = sender
    msg["To"] = recipient
    msg.set_content(body_text)
    if body_html:
        msg.add_alternative(body_html, subtype="html")
    return msg


def deliver(msg: EmailMessage) -> bool:
    """
    Send through the configured relay.

    Returns False when delivery was skipped because no relay is configured.
    SMTP errors propagate to the caller.
    """
    if not settings.SMTP_HOST:
        logger.info("EMAIL (dev): To=%s, Subject=%s", msg["To"], msg["Subject"])
        return False

    with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=30) as server:
        if settings.SMTP_USE_TLS:
            server.starttls()
        if settings.SMTP_USERNAME and settings.SMTP_PASSWORD:
            server.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
        server.send_message(msg)

    logger.info("Email sent to %s", msg["To"])
    return True


def send_booking_redirect_notification(notification: BookingRedirectNotification) -> bool:
    rendered = render_booking_redirect_notification(
        language=notification.language,
        to_name=notification.to_name,
        dates=notification.dates,
    )
    msg = build_message(
        sender=settings.EMAIL_FROM,
        recipient=notification.to_email,
        subject=rendered.subject,
        body_text=rendered.body_text,
        body_html=rendered.body_html,
    )
    # replies go to the person who is away
    msg["Reply-To"] = notification.from_email
    return deliver(msg)
