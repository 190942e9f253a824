# condo_core/common/email.py
from __future__ import annotations

import logging

from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger(__name__)


def send_notification_email(*, to: str, subject: str, body: str) -> bool:
    """
    Fire-and-forget email. Delivery problems are logged and reported as False;
    callers never fail their own operation because of them.
    """
    try:
        send_mail(
            subject=subject,
            message=body,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[to],
            fail_silently=False,
        )
    except Exception:
        logger.warning("Email delivery failed (to=%s, subject=%r)", to, subject, exc_info=True)
        return False
    return True
